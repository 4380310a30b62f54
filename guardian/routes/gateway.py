"""
Gateway proxy route

Single POST endpoint mirroring the dashboard proxy: the caller sends an
action, a connection config and an optional payload, and always receives
HTTP 200 with a ``{success, data?, error?}`` envelope. The body is validated
by the gateway, so malformed input is reported in the envelope as well.
"""
from fastapi import APIRouter, Request

from guardian.models.schemas import ApiResponse
from guardian.services.gateway import GuardianGateway
from guardian.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/guardian", tags=["gateway"])

gateway = GuardianGateway()


@router.post("", response_model=ApiResponse, response_model_exclude_none=True)
async def proxy(request: Request):
    """
    Forward fetch/respond/resolve to the remote ticket system
    """
    try:
        body = await request.json()
    except ValueError:
        logger.warning("Gateway request body is not valid JSON")
        return ApiResponse(success=False, error="Invalid JSON body")

    return await gateway.handle(body)
