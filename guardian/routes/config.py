"""
Runtime configuration routes

The connection config lives in memory for the lifetime of the process.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import Field, ValidationError

from guardian.models.schemas import CamelModel, GuardianConfig
from guardian.services.automation import AutomationService, get_automation_service

router = APIRouter(prefix="/api/v1/config", tags=["config"])


class ConfigUpdate(CamelModel):
    """Partial config update; omitted fields keep their current value"""
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    requests_endpoint: Optional[str] = None
    respond_endpoint: Optional[str] = None
    resolve_endpoint: Optional[str] = None
    auto_responder_enabled: Optional[bool] = None
    auto_resolve: Optional[bool] = None
    max_parallel: Optional[int] = Field(None, ge=1)


@router.get("/", response_model=GuardianConfig)
async def get_config(service: AutomationService = Depends(get_automation_service)):
    return service.config


@router.put("/", response_model=GuardianConfig)
async def update_config(
    update: ConfigUpdate,
    service: AutomationService = Depends(get_automation_service)
):
    """
    Update connection parameters and automation flags
    """
    try:
        return service.update_config(**update.model_dump(exclude_unset=True))
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False))
