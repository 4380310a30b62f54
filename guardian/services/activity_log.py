"""
Activity Log - bounded, newest-first record of automation steps
"""
import uuid
from collections import deque
from typing import Deque, List, Optional

from guardian.config import get_settings
from guardian.models.schemas import ActivityEntry, ActivityLevel
from guardian.utils.logger import get_logger

settings = get_settings()
logger = get_logger(__name__)


class ActivityLog:
    """
    Human-readable log shown next to the ticket list.

    Every entry is also written to the module logger.
    """

    def __init__(self, max_entries: Optional[int] = None):
        self.max_entries = max_entries or settings.activity_log_size
        self._entries: Deque[ActivityEntry] = deque(maxlen=self.max_entries)

    def push(self, message: str, level: ActivityLevel = ActivityLevel.INFO) -> ActivityEntry:
        entry = ActivityEntry(id=uuid.uuid4().hex[:12], message=message, level=level)
        self._entries.appendleft(entry)

        if level == ActivityLevel.ERROR:
            logger.error(message)
        else:
            logger.info(message)
        return entry

    def info(self, message: str) -> ActivityEntry:
        return self.push(message, ActivityLevel.INFO)

    def success(self, message: str) -> ActivityEntry:
        return self.push(message, ActivityLevel.SUCCESS)

    def error(self, message: str) -> ActivityEntry:
        return self.push(message, ActivityLevel.ERROR)

    def entries(self) -> List[ActivityEntry]:
        """Entries, newest first"""
        return list(self._entries)

    def messages(self) -> List[str]:
        return [entry.message for entry in self._entries]
