"""
Ticket-related API routes
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from guardian.agents.responder import generate_agent_response
from guardian.models.schemas import AgentResult, ApiResponse, CamelModel, Ticket
from guardian.services.automation import AutomationService, get_automation_service
from guardian.utils.validators import clean_actions, sanitize_input

router = APIRouter(prefix="/api/v1/tickets", tags=["tickets"])


class RespondRequest(CamelModel):
    """Manual reply overrides; empty values fall back to the agent draft"""
    message: Optional[str] = None
    actions: Optional[List[str]] = None


class ActionResponse(BaseModel):
    """Result of a manual respond/resolve"""
    success: bool
    ticket: Ticket


def _get_ticket_or_404(service: AutomationService, ticket_id: str) -> Ticket:
    ticket = service.repository.get(ticket_id)
    if ticket is None:
        raise HTTPException(status_code=404, detail=f"Ticket {ticket_id} not found")
    return ticket


@router.get("/", response_model=List[Ticket])
async def list_tickets(service: AutomationService = Depends(get_automation_service)):
    """
    List the current working set in stored order
    """
    return service.repository.list()


@router.post("/refresh", response_model=ApiResponse, response_model_exclude_none=True)
async def refresh_tickets(service: AutomationService = Depends(get_automation_service)):
    """
    Reload tickets from the remote ticket system (or the sample set)
    """
    return await service.refresh()


@router.get("/{ticket_id}", response_model=Ticket)
async def get_ticket(ticket_id: str, service: AutomationService = Depends(get_automation_service)):
    """
    Get ticket details
    """
    return _get_ticket_or_404(service, ticket_id)


@router.get("/{ticket_id}/analysis", response_model=AgentResult)
async def analyze_ticket(ticket_id: str, service: AutomationService = Depends(get_automation_service)):
    """
    Analysis, draft reply, suggested actions and confidence for a ticket
    """
    result = service.analyze(ticket_id)
    if result is None:
        raise HTTPException(status_code=404, detail=f"Ticket {ticket_id} not found")
    return result


@router.post("/{ticket_id}/respond", response_model=ActionResponse)
async def respond_to_ticket(
    ticket_id: str,
    request: Optional[RespondRequest] = None,
    service: AutomationService = Depends(get_automation_service)
):
    """
    Send a reply for a ticket.

    Uses the agent draft and suggested actions unless overridden.
    """
    ticket = _get_ticket_or_404(service, ticket_id)
    result = generate_agent_response(ticket)
    request = request or RespondRequest()

    message = sanitize_input(request.message) if request.message else ""
    actions = clean_actions(request.actions)

    sent = await service.respond(
        ticket,
        result,
        message=message or result.response_draft,
        actions=actions or result.suggested_actions,
        manual=True,
    )
    if not sent:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=service.last_error)

    return ActionResponse(success=True, ticket=_get_ticket_or_404(service, ticket_id))


@router.post("/{ticket_id}/resolve", response_model=ActionResponse)
async def resolve_ticket(ticket_id: str, service: AutomationService = Depends(get_automation_service)):
    """
    Resolve a ticket
    """
    ticket = _get_ticket_or_404(service, ticket_id)

    resolved = await service.resolve(ticket)
    if not resolved:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=service.last_error)

    return ActionResponse(success=True, ticket=_get_ticket_or_404(service, ticket_id))
