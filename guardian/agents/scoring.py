"""
Insight scoring and confidence computation
"""
import math
from datetime import datetime, timezone
from typing import List, Optional

from guardian.models.schemas import AgentInsight, Priority, Ticket, TicketStatus

PRIORITY_WEIGHTS = {
    Priority.LOW.value: 0.2,
    Priority.MEDIUM.value: 0.4,
    Priority.HIGH.value: 0.7,
    Priority.URGENT.value: 0.9,
}
DEFAULT_PRIORITY_WEIGHT = 0.4

STATUS_WEIGHTS = {
    TicketStatus.OPEN.value: 0.6,
    TicketStatus.IN_PROGRESS.value: 0.4,
    TicketStatus.AWAITING_CUSTOMER.value: 0.2,
    TicketStatus.ESCALATED.value: 0.8,
    TicketStatus.RESOLVED.value: 0.1,
}
DEFAULT_STATUS_WEIGHT = 0.3

SLA_CRITICAL_MINUTES = 60
SLA_WARNING_MINUTES = 120

METADATA_SCORE = 0.4

MIN_CONFIDENCE = 0.35
MAX_CONFIDENCE = 1.0


def priority_weight(priority: str) -> float:
    return PRIORITY_WEIGHTS.get(priority, DEFAULT_PRIORITY_WEIGHT)


def status_weight(status: str) -> float:
    return STATUS_WEIGHTS.get(status, DEFAULT_STATUS_WEIGHT)


def format_minutes(minutes: int) -> str:
    """
    Format a duration for customer-facing text.

    >>> format_minutes(45)
    '45 minutes'
    >>> format_minutes(120)
    '2 hours'
    >>> format_minutes(95)
    '1h35'
    """
    hours, mins = divmod(minutes, 60)
    if hours == 0:
        return f"{mins} minutes"
    if mins == 0:
        return f"{hours} hours"
    return f"{hours}h{mins:02d}"


def _as_utc(value: datetime) -> datetime:
    # naive timestamps from the remote system are UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def ticket_age_minutes(ticket: Ticket, now: datetime) -> int:
    """Whole minutes since the last update, never less than 1"""
    elapsed = (_as_utc(now) - _as_utc(ticket.updated_at)).total_seconds() / 60
    return max(1, math.floor(elapsed + 0.5))


def sla_remaining_minutes(ticket: Ticket, now: datetime) -> int:
    return max(0, ticket.sla_minutes - ticket_age_minutes(ticket, now))


def sla_score(remaining: int) -> float:
    if remaining <= SLA_CRITICAL_MINUTES:
        return 0.9
    if remaining <= SLA_WARNING_MINUTES:
        return 0.6
    return 0.3


def build_insights(ticket: Ticket, now: Optional[datetime] = None) -> List[AgentInsight]:
    """
    Score a ticket along priority, status, SLA and (when present) metadata.

    Args:
        ticket: Ticket to score
        now: Reference time for SLA computation (defaults to current UTC time)

    Returns:
        Ordered list of insights
    """
    now = now or datetime.now(timezone.utc)
    remaining = sla_remaining_minutes(ticket, now)

    insights = [
        AgentInsight(
            label="Priority",
            score=priority_weight(ticket.priority),
            explanation=(
                f"Ticket classified {str(ticket.priority).upper()}; "
                "prioritised handling recommended."
            ),
        ),
        AgentInsight(
            label="Progress",
            score=status_weight(ticket.status),
            explanation=f"Current status: {str(ticket.status).replace('_', ' ')}.",
        ),
        AgentInsight(
            label="SLA",
            score=sla_score(remaining),
            explanation=(
                f"Time remaining before SLA: {format_minutes(remaining)}."
                if remaining > 0
                else "SLA breached, immediate intervention required."
            ),
        ),
    ]

    if ticket.metadata is not None:
        insights.append(
            AgentInsight(
                label="Metadata",
                score=METADATA_SCORE,
                explanation=(
                    "Additional information detected "
                    f"({', '.join(ticket.metadata.keys())})."
                ),
            )
        )

    return insights


def compute_confidence(ticket: Ticket, insights: List[AgentInsight]) -> float:
    """
    Weighted confidence in [MIN_CONFIDENCE, MAX_CONFIDENCE]

    priority * 0.5 + status * 0.3 + mean insight score / 10
    """
    insight_total = sum(item.score for item in insights)
    insight_term = insight_total / (len(insights) * 10) if insights else 0.0
    score = (
        priority_weight(ticket.priority) * 0.5
        + status_weight(ticket.status) * 0.3
        + insight_term
    )
    return min(MAX_CONFIDENCE, max(MIN_CONFIDENCE, round(score, 2)))
