"""
Pydantic models for Guardian Autopilot
"""

from guardian.models.schemas import (
    # Enums
    TicketStatus,
    Priority,
    ConversationRole,
    GatewayAction,
    ActivityLevel,

    # Tickets
    ConversationEntry,
    Ticket,
    TicketStats,

    # Engine output
    AgentInsight,
    AgentResult,

    # Configuration and gateway
    GuardianConfig,
    ResponsePayload,
    ResolvePayload,
    GatewayPayload,
    GatewayRequest,
    ApiResponse,

    # Activity
    ActivityEntry,
)

__all__ = [
    # Enums
    "TicketStatus",
    "Priority",
    "ConversationRole",
    "GatewayAction",
    "ActivityLevel",

    # Tickets
    "ConversationEntry",
    "Ticket",
    "TicketStats",

    # Engine output
    "AgentInsight",
    "AgentResult",

    # Configuration and gateway
    "GuardianConfig",
    "ResponsePayload",
    "ResolvePayload",
    "GatewayPayload",
    "GatewayRequest",
    "ApiResponse",

    # Activity
    "ActivityEntry",
]
