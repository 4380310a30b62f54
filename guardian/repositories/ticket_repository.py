"""
Ticket Repository - in-memory working set

Single owner of the ticket list. Every mutation goes through one of three
commands (replace_all, apply_response, apply_resolve); reads return copies so
callers never mutate stored tickets directly.

Not safe for concurrent writers: the service mutates it from a single event
loop, one command at a time.
"""
from datetime import datetime
from typing import Iterable, List, Optional

from guardian.models.schemas import (
    ConversationEntry,
    ConversationRole,
    Priority,
    Ticket,
    TicketStats,
    TicketStatus,
    utcnow,
)
from guardian.utils.logger import get_logger

logger = get_logger(__name__)


class TicketRepository:
    """Ordered, in-memory ticket store"""

    def __init__(self, tickets: Optional[Iterable[Ticket]] = None):
        self._tickets: List[Ticket] = list(tickets or [])

    def __len__(self) -> int:
        return len(self._tickets)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list(self) -> List[Ticket]:
        """Snapshot of the tickets in stored order"""
        return [ticket.model_copy(deep=True) for ticket in self._tickets]

    def get(self, ticket_id: str) -> Optional[Ticket]:
        index = self._index_of(ticket_id)
        if index is None:
            return None
        return self._tickets[index].model_copy(deep=True)

    def stats(self) -> TicketStats:
        """Counters shown on the dashboard"""
        active = {TicketStatus.OPEN.value, TicketStatus.IN_PROGRESS.value}
        pressing = {Priority.URGENT.value, Priority.HIGH.value}
        return TicketStats(
            total=len(self._tickets),
            open=sum(1 for t in self._tickets if t.status in active),
            urgent=sum(1 for t in self._tickets if t.priority in pressing),
            awaiting_customer=sum(
                1 for t in self._tickets if t.status == TicketStatus.AWAITING_CUSTOMER
            ),
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def replace_all(self, tickets: Iterable[Ticket]) -> None:
        """Swap the whole working set (after a fetch)"""
        self._tickets = [ticket.model_copy(deep=True) for ticket in tickets]
        logger.debug(f"Working set replaced with {len(self._tickets)} tickets")

    def apply_response(
        self,
        ticket_id: str,
        message: str,
        at: Optional[datetime] = None
    ) -> Optional[Ticket]:
        """
        Record a reply acknowledged by the remote system.

        The ticket moves to in_progress unless it is already resolved, the
        reply is appended to the conversation as an agent entry and
        updated_at is bumped.

        Returns:
            The updated ticket, or None when the id is unknown
        """
        index = self._index_of(ticket_id)
        if index is None:
            logger.warning(f"apply_response: unknown ticket {ticket_id}")
            return None

        at = self._not_before(self._tickets[index], at or utcnow())
        current = self._tickets[index]
        status = current.status if current.status == TicketStatus.RESOLVED else TicketStatus.IN_PROGRESS.value

        updated = current.model_copy(update={
            "status": status,
            "updated_at": at,
            "conversation": [
                *current.conversation,
                ConversationEntry(role=ConversationRole.AGENT, message=message, timestamp=at),
            ],
        })
        self._tickets[index] = updated
        return updated.model_copy(deep=True)

    def apply_resolve(self, ticket_id: str, at: Optional[datetime] = None) -> Optional[Ticket]:
        """
        Record a resolve acknowledged by the remote system.

        Returns:
            The updated ticket, or None when the id is unknown
        """
        index = self._index_of(ticket_id)
        if index is None:
            logger.warning(f"apply_resolve: unknown ticket {ticket_id}")
            return None

        current = self._tickets[index]
        updated = current.model_copy(update={
            "status": TicketStatus.RESOLVED.value,
            "updated_at": self._not_before(current, at or utcnow()),
        })
        self._tickets[index] = updated
        return updated.model_copy(deep=True)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _index_of(self, ticket_id: str) -> Optional[int]:
        for index, ticket in enumerate(self._tickets):
            if ticket.id == ticket_id:
                return index
        return None

    @staticmethod
    def _not_before(ticket: Ticket, at: datetime) -> datetime:
        # keeps updated_at >= created_at and the conversation ordered
        try:
            floor = max([ticket.updated_at, ticket.created_at, *(e.timestamp for e in ticket.conversation)])
            return at if at >= floor else floor
        except TypeError:
            # naive vs aware timestamps; trust the caller's clock
            return at
