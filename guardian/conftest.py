"""
pytest configuration and shared fixtures for guardian tests
"""
from datetime import datetime, timedelta, timezone

import pytest

from guardian.models.schemas import ConversationEntry, ConversationRole, Ticket

NOW = datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    """Fixed reference time"""
    return NOW


@pytest.fixture
def make_ticket():
    """
    Factory for tickets relative to NOW

    ``updated_minutes_ago`` sets updated_at; created_at is one hour earlier.
    """
    def _make(
        ticket_id: str = "TCK-1",
        category: str = "authentication",
        status: str = "open",
        priority: str = "medium",
        sla_minutes: int = 240,
        updated_minutes_ago: int = 10,
        metadata=None,
        conversation=None,
        **overrides,
    ) -> Ticket:
        updated_at = NOW - timedelta(minutes=updated_minutes_ago)
        fields = dict(
            id=ticket_id,
            subject="Cannot log in",
            category=category,
            summary="Login fails after password reset",
            status=status,
            priority=priority,
            customer_name="Alex Martin",
            customer_email="alex.martin@example.com",
            created_at=updated_at - timedelta(hours=1),
            updated_at=updated_at,
            sla_minutes=sla_minutes,
            tags=["login"],
            metadata=metadata,
            conversation=conversation if conversation is not None else [
                ConversationEntry(
                    role=ConversationRole.USER,
                    message="I still cannot log in.",
                    timestamp=updated_at - timedelta(minutes=30),
                ),
            ],
        )
        fields.update(overrides)
        return Ticket(**fields)

    return _make
