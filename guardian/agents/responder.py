"""
Responder Agent - analysis and reply drafting for a single ticket
"""
from datetime import datetime
from typing import Optional

from guardian.agents.knowledge_base import CategoryKind
from guardian.agents.scoring import build_insights, compute_confidence
from guardian.models.schemas import AgentResult, ConversationRole, Ticket
from guardian.utils.logger import get_logger

logger = get_logger(__name__)


def latest_customer_message(ticket: Ticket) -> str:
    """Most recent message written by the requester, else the ticket summary"""
    for entry in reversed(ticket.conversation):
        if entry.role == ConversationRole.USER:
            return entry.message
    return ticket.summary


def generate_agent_response(ticket: Ticket, now: Optional[datetime] = None) -> AgentResult:
    """
    Build the recommendation for a ticket.

    Deterministic for a given ticket and reference time. Never raises on
    unknown categories, statuses or priorities: each falls back to a default.

    Args:
        ticket: Ticket to analyse
        now: Reference time for SLA computation (defaults to current UTC time)

    Returns:
        AgentResult with analysis, draft reply, actions, confidence and insights
    """
    kind = CategoryKind.from_category(ticket.category)
    knowledge = kind.entry
    logger.debug(f"Ticket {ticket.id}: category '{ticket.category}' resolved to {kind.value}")

    insights = build_insights(ticket, now)
    confidence = compute_confidence(ticket, insights)

    analysis = "\n".join([
        f"Summary: {ticket.summary}",
        f"Latest customer message: \"{latest_customer_message(ticket)}\"",
        f"Detected category: {ticket.category}",
        f"Recommendation: {knowledge.default_action}",
    ])

    suggested_actions = [
        *knowledge.remediation,
        f"Update the status of ticket {ticket.id} as work progresses",
    ]

    return AgentResult(
        analysis=analysis,
        primary_action=knowledge.default_action,
        suggested_actions=suggested_actions,
        response_draft=kind.render_response(ticket),
        confidence=confidence,
        insights=insights,
    )
