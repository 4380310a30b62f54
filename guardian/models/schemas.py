"""
Pydantic models for Guardian Autopilot

This module contains the wire schemas shared by the gateway, the scoring
engine, the automation service and the HTTP routes.

Wire names are camelCase (the remote ticket system and the dashboard speak
camelCase); Python attributes are snake_case. Both spellings are accepted on
input and camelCase is emitted on output.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Dict, Any, List

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from guardian.config import Settings


# ============================================================================
# Enums
# ============================================================================

class TicketStatus(str, Enum):
    """Known ticket lifecycle statuses"""
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    AWAITING_CUSTOMER = "awaiting_customer"
    RESOLVED = "resolved"
    ESCALATED = "escalated"


class Priority(str, Enum):
    """Known ticket priorities"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class ConversationRole(str, Enum):
    """Author of a conversation entry"""
    USER = "user"
    AGENT = "agent"
    SYSTEM = "system"


class GatewayAction(str, Enum):
    """Actions accepted by the remote gateway"""
    FETCH = "fetch"
    RESPOND = "respond"
    RESOLVE = "resolve"


class ActivityLevel(str, Enum):
    """Severity of an activity log entry"""
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


def utcnow() -> datetime:
    """Timezone-aware current UTC time"""
    return datetime.now(timezone.utc)


# ============================================================================
# Base
# ============================================================================

class CamelModel(BaseModel):
    """Base model with camelCase aliases"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


# ============================================================================
# Tickets
# ============================================================================

class ConversationEntry(CamelModel):
    """One message in a ticket conversation"""
    role: ConversationRole
    message: str
    timestamp: datetime


class Ticket(CamelModel):
    """
    Support ticket record.

    ``status`` and ``priority`` are kept as plain strings so that values the
    remote system invents survive normalization; the scoring engine defaults
    anything it does not know. ``TicketStatus`` and ``Priority`` name the known
    values and compare equal to them.

    Attributes:
        id: Ticket identifier assigned by the remote system
        subject: Short title
        category: Knowledge base category name
        summary: Description of the problem
        status: Lifecycle status
        priority: Priority level
        customer_name: Requester display name
        customer_email: Requester email
        created_at: Creation timestamp
        updated_at: Last update timestamp (never before created_at)
        sla_minutes: SLA budget in minutes
        tags: Free tags
        metadata: Optional free-form metadata
        conversation: Chronologically ordered messages
    """
    id: str
    subject: str
    category: str
    summary: str
    status: str = TicketStatus.OPEN.value
    priority: str = Priority.MEDIUM.value
    customer_name: str
    customer_email: str
    created_at: datetime
    updated_at: datetime
    sla_minutes: int = 240
    tags: List[str] = Field(default_factory=list)
    metadata: Optional[Dict[str, Any]] = None
    conversation: List[ConversationEntry] = Field(default_factory=list)

    @field_validator("status", "priority", mode="before")
    @classmethod
    def coerce_enum_value(cls, v: Any) -> Any:
        """Store enum members as their plain string value"""
        if isinstance(v, Enum):
            return v.value
        return v


class TicketStats(CamelModel):
    """Dashboard counters over the current working set"""
    total: int
    open: int
    urgent: int
    awaiting_customer: int


# ============================================================================
# Scoring engine output
# ============================================================================

class AgentInsight(CamelModel):
    """Scored observation about a ticket"""
    label: str
    score: float
    explanation: str


class AgentResult(CamelModel):
    """Recommendation derived from a ticket; recomputed on every view"""
    analysis: str
    primary_action: str
    suggested_actions: List[str]
    response_draft: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    insights: List[AgentInsight]


# ============================================================================
# Configuration and gateway payloads
# ============================================================================

class GuardianConfig(CamelModel):
    """
    Connection parameters and automation flags.

    ``max_parallel`` is accepted and validated but the automation loop always
    processes tickets one at a time.
    """
    base_url: str = ""
    api_key: str = ""
    requests_endpoint: str = "/api/tickets/open"
    respond_endpoint: str = "/api/tickets/respond"
    resolve_endpoint: str = "/api/tickets/resolve"
    auto_responder_enabled: bool = True
    auto_resolve: bool = False
    max_parallel: int = Field(1, ge=1)

    @classmethod
    def from_settings(cls, settings: Settings) -> "GuardianConfig":
        """Build the default runtime config from environment settings"""
        return cls(
            base_url=settings.guardian_base_url.strip() if settings.remote_configured else "",
            api_key=settings.guardian_api_key,
            requests_endpoint=settings.guardian_requests_endpoint,
            respond_endpoint=settings.guardian_respond_endpoint,
            resolve_endpoint=settings.guardian_resolve_endpoint,
            auto_responder_enabled=settings.guardian_auto_responder_enabled,
            auto_resolve=settings.guardian_auto_resolve,
            max_parallel=max(1, settings.guardian_max_parallel),
        )


class ResponsePayload(CamelModel):
    """Reply sent to the remote system"""
    ticket_id: str
    response: str
    actions: List[str]
    confidence: float
    meta: Optional[Dict[str, Any]] = None


class ResolvePayload(CamelModel):
    """Resolve request sent to the remote system"""
    ticket_id: str
    meta: Optional[Dict[str, Any]] = None


class GatewayPayload(CamelModel):
    """Loose payload accepted by the proxy endpoint; only ticketId is required"""
    ticket_id: str
    response: Optional[str] = None
    actions: Optional[List[str]] = None
    confidence: Optional[float] = None
    meta: Optional[Dict[str, Any]] = None


class GatewayRequest(CamelModel):
    """
    Proxy request body.

    ``action`` is a plain string so that unknown actions are reported as
    unsupported instead of failing validation.
    """
    action: str
    config: Optional[GuardianConfig] = None
    payload: Optional[GatewayPayload] = None


class ApiResponse(CamelModel):
    """Result envelope; failures are values, never exceptions"""
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None


# ============================================================================
# Activity log
# ============================================================================

class ActivityEntry(CamelModel):
    """Human-readable record of one automation or manual step"""
    id: str
    timestamp: datetime = Field(default_factory=utcnow)
    message: str
    level: ActivityLevel = ActivityLevel.INFO
