"""
Automation Service - ticket refresh, manual actions and the autopilot loop

Owns the runtime GuardianConfig, the ticket working set and the activity log.
All ticket mutations go through TicketRepository commands, issued either by
the autopilot loop or by a manual respond/resolve, one at a time on a single
event loop.

Autopilot workflow (one pass, strictly sequential):
1. Skip tickets already resolved
2. Stop as soon as the auto-responder is disabled
3. Draft a reply with the responder agent and send it
4. If sent and auto-resolve is on, resolve the ticket
5. Always finish with one refresh
"""
from functools import lru_cache
from typing import List, Optional

from guardian.agents.responder import generate_agent_response
from guardian.config import get_settings
from guardian.models.schemas import (
    AgentResult,
    ApiResponse,
    GuardianConfig,
    ResolvePayload,
    ResponsePayload,
    Ticket,
    TicketStatus,
    utcnow,
)
from guardian.repositories.ticket_repository import TicketRepository
from guardian.services.activity_log import ActivityLog
from guardian.services.gateway import GuardianGateway
from guardian.services.sample_data import sample_tickets
from guardian.utils.logger import get_logger

settings = get_settings()
logger = get_logger(__name__)

AGENT_NAME = "Guardian Autopilot"
DEFAULT_FOLLOW_UP = "Follow up within 24 hours"


class AutomationService:
    """
    Service layer between the HTTP routes, the gateway and the ticket store.

    ``config.max_parallel`` is carried but has no effect: the loop never
    processes more than one ticket at a time.
    """

    def __init__(
        self,
        gateway: Optional[GuardianGateway] = None,
        repository: Optional[TicketRepository] = None,
        activity: Optional[ActivityLog] = None,
        config: Optional[GuardianConfig] = None
    ):
        self.gateway = gateway or GuardianGateway()
        self.repository = repository if repository is not None else TicketRepository(sample_tickets())
        self.activity = activity or ActivityLog()
        self.config = config or GuardianConfig.from_settings(settings)
        self.last_error: Optional[str] = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def update_config(self, **changes) -> GuardianConfig:
        """
        Replace the runtime config with the given fields changed

        Raises:
            pydantic.ValidationError: If a changed field is invalid
        """
        self.config = GuardianConfig.model_validate({**self.config.model_dump(), **changes})
        logger.info(f"Config updated: {', '.join(sorted(changes)) or 'no changes'}")
        return self.config

    def analyze(self, ticket_id: str) -> Optional[AgentResult]:
        """Agent result for a stored ticket, or None when the id is unknown"""
        ticket = self.repository.get(ticket_id)
        if ticket is None:
            return None
        return generate_agent_response(ticket)

    async def refresh(self) -> ApiResponse:
        """
        Reload the working set from the gateway.

        On failure the error is logged and any fallback ticket data carried
        by the response replaces the working set.
        """
        self.activity.info("Synchronizing with Safe Guardian...")
        try:
            response = await self.gateway.fetch(self.config)
        except Exception as e:
            message = str(e) or "Unexpected error"
            self.activity.error(message)
            return ApiResponse(success=False, error=message)

        if not response.success:
            self.activity.error(response.error or "Unable to load tickets")
            if isinstance(response.data, list):
                self.repository.replace_all(response.data)
        elif response.data is not None:
            self.repository.replace_all(response.data)
            self.activity.success(f"Loaded {len(response.data)} tickets")

        return response

    async def respond(
        self,
        ticket: Ticket,
        result: AgentResult,
        message: Optional[str] = None,
        actions: Optional[List[str]] = None,
        manual: bool = False
    ) -> bool:
        """
        Send a reply for a ticket and record it locally on success

        Args:
            ticket: Ticket being answered
            result: Agent result providing the draft and suggested actions
            message: Reply text overriding the draft
            actions: Action list overriding the suggested actions
            manual: True when an operator triggered the send

        Returns:
            True if the remote system acknowledged the reply
        """
        config = self.config
        self.activity.info(f"Preparing response for {ticket.id}")

        response_text = message if message is not None else result.response_draft
        if actions is not None:
            action_list = actions
        else:
            action_list = result.suggested_actions or [DEFAULT_FOLLOW_UP]

        payload = ResponsePayload(
            ticket_id=ticket.id,
            response=response_text,
            actions=action_list,
            confidence=result.confidence,
            meta={
                "auto": False if manual else config.auto_responder_enabled,
                "agent": AGENT_NAME,
                "category": ticket.category,
            },
        )

        response = await self.gateway.respond(config, payload)
        if not response.success:
            self.last_error = response.error or "Sending the response failed"
            self.activity.error(self.last_error)
            return False

        self.activity.success(f"Response sent for {ticket.id}")
        self.repository.apply_response(ticket.id, response_text)
        return True

    async def resolve(self, ticket: Ticket) -> bool:
        """
        Resolve a ticket remotely and mark it resolved locally on success

        Returns:
            True if the remote system acknowledged the resolve
        """
        config = self.config
        self.activity.info(f"Resolving ticket {ticket.id}...")

        payload = ResolvePayload(
            ticket_id=ticket.id,
            meta={
                "resolvedBy": AGENT_NAME,
                "closedAt": utcnow().isoformat(),
            },
        )

        response = await self.gateway.resolve(config, payload)
        if not response.success:
            self.last_error = response.error or "Unable to resolve the ticket"
            self.activity.error(self.last_error)
            return False

        self.activity.success(f"Ticket {ticket.id} resolved")
        self.repository.apply_resolve(ticket.id)
        return True

    async def run(self) -> bool:
        """
        Run one autopilot pass over the working set.

        A trigger while a pass is already running is ignored. Any exception
        ends the pass with an error entry; replies already sent are kept and
        the next pass starts again from the top.

        Returns:
            False if a pass was already running, True otherwise
        """
        if self._running:
            logger.info("Automation already running, trigger ignored")
            return False

        self._running = True
        self.activity.info("Automation cycle started")
        try:
            for ticket in self.repository.list():
                if ticket.status == TicketStatus.RESOLVED:
                    continue
                if not self.config.auto_responder_enabled:
                    self.activity.info("Auto-responder disabled, automation stopped")
                    break

                result = generate_agent_response(ticket)
                sent = await self.respond(ticket, result)
                if sent and self.config.auto_resolve:
                    await self.resolve(ticket)

            self.activity.success("Automation cycle finished")
        except Exception as e:
            logger.error(f"Automation cycle aborted: {e}", exc_info=True)
            self.activity.error(str(e) or "Automation error")
        finally:
            self._running = False
            await self.refresh()

        return True


@lru_cache()
def get_automation_service() -> AutomationService:
    """Get cached service instance"""
    return AutomationService()
