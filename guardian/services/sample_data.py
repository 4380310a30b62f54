"""
Built-in sample tickets

Used when no remote ticket system is configured, and as the per-field
fallback when a remote ticket payload is malformed.
"""
from datetime import datetime, timedelta
from typing import List, Optional

from guardian.models.schemas import (
    ConversationEntry,
    ConversationRole,
    Priority,
    Ticket,
    TicketStatus,
    utcnow,
)


def sample_tickets(now: Optional[datetime] = None) -> List[Ticket]:
    """
    Build a fresh list of sample tickets with timestamps relative to ``now``

    Args:
        now: Reference time (defaults to current UTC time)

    Returns:
        Three tickets covering the authentication, monitoring and integration categories
    """
    now = now or utcnow()

    def ago(minutes: int) -> datetime:
        return now - timedelta(minutes=minutes)

    return [
        Ticket(
            id="TCK-10294",
            subject="Unable to reset my password",
            category="authentication",
            summary=(
                "The user does not receive the reset email and cannot access "
                "the admin dashboard."
            ),
            status=TicketStatus.OPEN,
            priority=Priority.URGENT,
            customer_name="Samira Haddad",
            customer_email="samira.haddad@example.com",
            created_at=ago(42),
            updated_at=ago(12),
            sla_minutes=60,
            tags=["password", "critical"],
            conversation=[
                ConversationEntry(
                    role=ConversationRole.USER,
                    message=(
                        "Hello, I tried three times to reset my password but I never "
                        "get the email. Can you fix this quickly?"
                    ),
                    timestamp=ago(42),
                ),
            ],
        ),
        Ticket(
            id="TCK-10271",
            subject="Inaccurate anomaly alerts",
            category="monitoring",
            summary=(
                "Incident notifications are sent while metrics are stable. "
                "A threshold may be misconfigured."
            ),
            status=TicketStatus.IN_PROGRESS,
            priority=Priority.HIGH,
            customer_name="Rania Benali",
            customer_email="rania.benali@example.com",
            created_at=ago(180),
            updated_at=ago(55),
            sla_minutes=240,
            tags=["alerting", "monitoring"],
            metadata={
                "service": "guardian-core",
                "threshold": 85,
                "metric": "cpu_usage",
            },
            conversation=[
                ConversationEntry(
                    role=ConversationRole.USER,
                    message=(
                        "We get CPU alerts every 10 minutes while the load stays "
                        "below 40%."
                    ),
                    timestamp=ago(180),
                ),
                ConversationEntry(
                    role=ConversationRole.AGENT,
                    message=(
                        "Thanks for reporting this. I am checking the alert rules "
                        "and will get back to you shortly."
                    ),
                    timestamp=ago(120),
                ),
            ],
        ),
        Ticket(
            id="TCK-10240",
            subject="Access request for the Safe Guardian API",
            category="integration",
            summary="A new partner wants API access to consult events.",
            status=TicketStatus.AWAITING_CUSTOMER,
            priority=Priority.MEDIUM,
            customer_name="Youssef Rahmani",
            customer_email="youssef.rahmani@example.com",
            created_at=ago(600),
            updated_at=ago(200),
            sla_minutes=720,
            tags=["api", "onboarding"],
            metadata={
                "organization": "Rahmani Consulting",
                "useCase": "audit_compliance",
            },
            conversation=[
                ConversationEntry(
                    role=ConversationRole.USER,
                    message=(
                        "Hello, we need API access to integrate Safe Guardian with "
                        "our SIEM."
                    ),
                    timestamp=ago(600),
                ),
                ConversationEntry(
                    role=ConversationRole.AGENT,
                    message=(
                        "Thank you for your interest. Could you tell us the scope of "
                        "data you need?"
                    ),
                    timestamp=ago(300),
                ),
            ],
        ),
    ]
