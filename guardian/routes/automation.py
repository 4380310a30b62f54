"""
Autopilot API routes
"""
from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from guardian.models.schemas import ActivityEntry, GuardianConfig
from guardian.services.automation import AutomationService, get_automation_service

router = APIRouter(prefix="/api/v1/automation", tags=["automation"])


class RunResponse(BaseModel):
    """Outcome of an autopilot trigger"""
    started: bool
    running: bool
    activity: List[ActivityEntry]


class StatusResponse(BaseModel):
    """Autopilot state"""
    running: bool
    config: GuardianConfig


@router.post("/run", response_model=RunResponse)
async def run_automation(service: AutomationService = Depends(get_automation_service)):
    """
    Run one autopilot pass over the current tickets.

    ``started`` is False when a pass was already running.
    """
    started = await service.run()
    return RunResponse(started=started, running=service.running, activity=service.activity.entries())


@router.get("/status", response_model=StatusResponse)
async def automation_status(service: AutomationService = Depends(get_automation_service)):
    return StatusResponse(running=service.running, config=service.config)


@router.get("/activity", response_model=List[ActivityEntry])
async def automation_activity(service: AutomationService = Depends(get_automation_service)):
    """
    Activity log, newest first
    """
    return service.activity.entries()
