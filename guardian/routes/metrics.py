"""
Metrics API routes
"""
from fastapi import APIRouter, Depends

from guardian.models.schemas import TicketStats
from guardian.services.automation import AutomationService, get_automation_service

router = APIRouter(prefix="/api/v1/metrics", tags=["metrics"])


@router.get("/", response_model=TicketStats)
async def get_metrics(service: AutomationService = Depends(get_automation_service)):
    """
    Ticket counters over the current working set

    Metrics:
    - total: all tickets
    - open: open or in progress
    - urgent: urgent or high priority
    - awaitingCustomer: waiting on the requester
    """
    return service.repository.stats()
