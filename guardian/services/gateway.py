"""
Remote Gateway - pass-through client for the remote ticket system

Forwards three actions to the configured remote base URL:
- fetch: GET the open tickets and normalize them
- respond: POST a drafted reply
- resolve: POST a resolve request

Without a base URL every action degrades to local behavior (sample tickets
for fetch, echo for respond/resolve) so the service runs fully offline.
Failures are returned as ApiResponse values; nothing is retried.
"""
import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union
from urllib.parse import urljoin, urlparse

import httpx
from dateutil import parser as date_parser
from pydantic import ValidationError

from guardian.config import get_settings
from guardian.models.schemas import (
    ApiResponse,
    ConversationEntry,
    GatewayAction,
    GatewayPayload,
    GatewayRequest,
    GuardianConfig,
    ResolvePayload,
    ResponsePayload,
    Ticket,
)
from guardian.services.sample_data import sample_tickets
from guardian.utils.logger import get_logger

settings = get_settings()
logger = get_logger(__name__)

UNSUPPORTED_ACTION = "Unsupported action"


class GatewayError(Exception):
    """Remote call failed; the message is surfaced to the caller as-is"""


def build_url(base: str, path: str) -> str:
    """
    Join a base URL and an endpoint path.

    Absolute base URLs are resolved like a browser URL constructor (an
    absolute path replaces the base path). Anything else is joined with a
    single slash.
    """
    parsed = urlparse(base)
    if parsed.scheme and parsed.netloc:
        return urljoin(base, path)
    return f"{base.rstrip('/')}/{path.lstrip('/')}"


# ============================================================================
# Normalization
# ============================================================================

def _first(record: Dict[str, Any], *keys: str) -> Any:
    """First non-None value among the given keys"""
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return None


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _parse_timestamp(value: Any, fallback: datetime) -> datetime:
    if isinstance(value, datetime):
        return _as_utc(value)
    if isinstance(value, str):
        try:
            return _as_utc(date_parser.isoparse(value))
        except (ValueError, OverflowError):
            logger.warning(f"Unparseable timestamp '{value}', using fallback")
    return _as_utc(fallback)


def _parse_sla(value: Any, fallback: int) -> int:
    if value is None or isinstance(value, bool):
        return fallback
    try:
        minutes = float(value)
    except (TypeError, ValueError, OverflowError):
        logger.warning(f"Non-numeric SLA '{value}', using fallback")
        return fallback
    if not math.isfinite(minutes):
        logger.warning(f"Non-finite SLA '{value}', using fallback")
        return fallback
    return int(minutes)


def _parse_conversation(value: Any, fallback: List[ConversationEntry]) -> List[ConversationEntry]:
    if not isinstance(value, list):
        return [entry.model_copy() for entry in fallback]

    entries = []
    for raw in value:
        try:
            entries.append(ConversationEntry.model_validate(raw))
        except ValidationError as e:
            logger.warning(f"Dropping malformed conversation entry: {e.error_count()} errors")

    entries.sort(key=lambda entry: _as_utc(entry.timestamp))
    return entries


def normalize_ticket(record: Any, fallback: Ticket, index: int) -> Ticket:
    """
    Map one remote ticket onto the Ticket schema, field by field.

    Missing or malformed fields take the value of ``fallback``. Alternate
    remote field names (title, type, description, requesterName, email,
    created_at, updated_at, sla) are accepted.
    """
    if not isinstance(record, dict):
        record = {}

    created_at = _parse_timestamp(
        _first(record, "createdAt", "created_at"), fallback.created_at
    )
    updated_at = _parse_timestamp(
        _first(record, "updatedAt", "updated_at"), fallback.updated_at
    )
    if updated_at < created_at:
        updated_at = created_at

    tags = record.get("tags")
    metadata = record.get("metadata")

    return Ticket(
        id=str(_first(record, "id") or fallback.id or f"TCK-{1000 + index}"),
        subject=str(_first(record, "subject", "title") or fallback.subject),
        category=str(_first(record, "category", "type") or fallback.category or "generic"),
        summary=str(_first(record, "summary", "description") or fallback.summary),
        status=str(_first(record, "status") or fallback.status),
        priority=str(_first(record, "priority") or fallback.priority),
        customer_name=str(_first(record, "customerName", "requesterName") or fallback.customer_name),
        customer_email=str(_first(record, "customerEmail", "email") or fallback.customer_email),
        created_at=created_at,
        updated_at=updated_at,
        sla_minutes=_parse_sla(_first(record, "slaMinutes", "sla"), fallback.sla_minutes),
        tags=[str(tag) for tag in tags] if isinstance(tags, list) else list(fallback.tags),
        metadata=dict(metadata) if isinstance(metadata, dict) else fallback.metadata,
        conversation=_parse_conversation(record.get("conversation"), fallback.conversation),
    )


def normalize_tickets(raw: Any, now: Optional[datetime] = None) -> List[Ticket]:
    """
    Normalize a remote ticket list.

    A body that is not a list yields the sample tickets. Each item is
    defaulted against the sample ticket at ``index % len(samples)``.
    """
    samples = sample_tickets(now)
    if not isinstance(raw, list):
        logger.warning("Remote ticket payload is not a list, using sample tickets")
        return samples

    return [
        normalize_ticket(item, samples[index % len(samples)], index)
        for index, item in enumerate(raw)
    ]


# ============================================================================
# Gateway
# ============================================================================

class GuardianGateway:
    """
    Remote ticket system client.

    One attempt per call; status codes are reduced to success or failure.
    """

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout if timeout is not None else settings.guardian_request_timeout
        self.headers = {
            "Content-Type": "application/json"
        }

    async def _make_request(
        self,
        method: str,
        url: str,
        api_key: str = "",
        body: Optional[Dict[str, Any]] = None
    ) -> Any:
        """
        Make a single HTTP request

        Args:
            method: GET or POST
            url: Absolute URL
            api_key: Bearer token, omitted when empty
            body: JSON body for POST

        Returns:
            Response JSON for GET, ``{"ok": True}`` for POST

        Raises:
            GatewayError: On transport errors, non-2xx responses or invalid JSON
        """
        headers = dict(self.headers)
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"

        kwargs: Dict[str, Any] = {}
        if body is not None:
            kwargs["json"] = body

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.request(
                    method=method,
                    url=url,
                    headers=headers,
                    **kwargs
                )
                response.raise_for_status()

                if method == "GET":
                    return response.json()
                return {"ok": True}

        except httpx.HTTPStatusError as e:
            message = f"Unable to call {url} ({e.response.status_code})"
            logger.error(message)
            raise GatewayError(message) from e
        except httpx.HTTPError as e:
            message = f"Unable to call {url}: {e}" if str(e) else f"Unable to call {url}"
            logger.error(message)
            raise GatewayError(message) from e
        except ValueError as e:
            message = f"Invalid JSON from {url}"
            logger.error(f"{message}: {e}")
            raise GatewayError(message) from e

    async def fetch(self, config: GuardianConfig) -> ApiResponse:
        """
        Fetch open tickets

        Returns:
            ApiResponse with a list of Ticket. On failure ``success`` is False
            and ``data`` still carries the sample tickets.
        """
        if not config.base_url:
            logger.info("No remote base URL configured, serving sample tickets")
            return ApiResponse(success=True, data=sample_tickets())

        url = build_url(config.base_url, config.requests_endpoint)
        logger.info(f"Fetching tickets from {url}")
        try:
            raw = await self._make_request("GET", url, config.api_key)
        except GatewayError as e:
            return ApiResponse(success=False, error=str(e), data=sample_tickets())

        tickets = normalize_tickets(raw)
        logger.info(f"Fetched {len(tickets)} tickets")
        return ApiResponse(success=True, data=tickets)

    async def respond(
        self,
        config: GuardianConfig,
        payload: Union[ResponsePayload, GatewayPayload]
    ) -> ApiResponse:
        """Send a reply; echoes the payload on success"""
        if not config.base_url:
            return ApiResponse(success=True, data=payload)

        url = build_url(config.base_url, config.respond_endpoint)
        logger.info(f"Sending response for ticket {payload.ticket_id}")
        try:
            await self._make_request("POST", url, config.api_key, _dump(payload))
        except GatewayError as e:
            return ApiResponse(success=False, error=str(e))

        return ApiResponse(success=True, data=payload)

    async def resolve(
        self,
        config: GuardianConfig,
        payload: Union[ResolvePayload, GatewayPayload]
    ) -> ApiResponse:
        """Resolve a ticket"""
        if not config.base_url:
            return ApiResponse(success=True, data=payload)

        url = build_url(config.base_url, config.resolve_endpoint)
        logger.info(f"Resolving ticket {payload.ticket_id}")
        try:
            await self._make_request("POST", url, config.api_key, _dump(payload))
        except GatewayError as e:
            return ApiResponse(success=False, error=str(e))

        return ApiResponse(success=True)

    async def handle(self, request: Union[GatewayRequest, Dict[str, Any]]) -> ApiResponse:
        """
        Dispatch a proxy request

        Accepts a GatewayRequest or the raw request body. Never raises:
        invalid bodies, unsupported actions and unexpected errors are
        returned as failed ApiResponse values.
        """
        try:
            if not isinstance(request, GatewayRequest):
                request = GatewayRequest.model_validate(request)

            config = request.config
            if config is None:
                return ApiResponse(success=True, data=sample_tickets())

            action = request.action
            if action == GatewayAction.FETCH:
                return await self.fetch(config)
            if action == GatewayAction.RESPOND and request.payload is not None:
                return await self.respond(config, request.payload)
            if action == GatewayAction.RESOLVE and request.payload is not None:
                return await self.resolve(config, request.payload)

            logger.warning(f"Unsupported gateway action '{action}'")
            return ApiResponse(success=False, error=UNSUPPORTED_ACTION)

        except ValidationError as e:
            message = _describe_validation_error(e)
            logger.warning(f"Rejected gateway request: {message}")
            return ApiResponse(success=False, error=message)
        except Exception as e:
            logger.error(f"Gateway error: {e}", exc_info=True)
            return ApiResponse(success=False, error=str(e) or "Unexpected error")


def _dump(payload: Union[ResponsePayload, ResolvePayload, GatewayPayload]) -> Dict[str, Any]:
    return payload.model_dump(mode="json", by_alias=True, exclude_none=True)


def _describe_validation_error(error: ValidationError) -> str:
    first = error.errors(include_url=False)[0]
    location = ".".join(str(part) for part in first["loc"]) or "body"
    return f"Invalid request: {location}: {first['msg']}"
