"""
Ticket agents for Guardian Autopilot

Rule-based classification, scoring and reply drafting. No external I/O.
"""

from guardian.agents.knowledge_base import CategoryKind, KNOWLEDGE_BASE
from guardian.agents.responder import generate_agent_response, latest_customer_message
from guardian.agents.scoring import build_insights, compute_confidence

__all__ = [
    "CategoryKind",
    "KNOWLEDGE_BASE",
    "generate_agent_response",
    "latest_customer_message",
    "build_insights",
    "compute_confidence",
]
