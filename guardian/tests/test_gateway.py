"""
Unit tests for the Remote Gateway

Tests:
- URL joining
- Ticket normalization against sample tickets
- Offline behavior (no base URL)
- Forwarding and failure reporting
- Proxy dispatch
"""
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from guardian.models.schemas import (
    ApiResponse,
    GatewayPayload,
    GatewayRequest,
    GuardianConfig,
    ResolvePayload,
    ResponsePayload,
    Ticket,
)
from guardian.services.gateway import (
    UNSUPPORTED_ACTION,
    GatewayError,
    GuardianGateway,
    build_url,
    normalize_tickets,
)

SAMPLE_IDS = ["TCK-10294", "TCK-10271", "TCK-10240"]


@pytest.fixture
def gateway():
    """Fixture for GuardianGateway instance"""
    return GuardianGateway(timeout=5.0)


@pytest.fixture
def offline_config():
    return GuardianConfig()


@pytest.fixture
def remote_config():
    return GuardianConfig(base_url="https://helpdesk.example.com", api_key="secret")


@pytest.fixture
def response_payload():
    return ResponsePayload(
        ticket_id="TCK-1",
        response="Hello",
        actions=["Check logs"],
        confidence=0.7,
        meta={"auto": True},
    )


class TestBuildUrl:
    """Test URL joining"""

    @pytest.mark.parametrize("base,path,expected", [
        ("https://h.example.com", "/api/tickets/open", "https://h.example.com/api/tickets/open"),
        ("https://h.example.com/", "api/tickets/open", "https://h.example.com/api/tickets/open"),
        ("https://h.example.com/v1/", "tickets", "https://h.example.com/v1/tickets"),
        ("https://h.example.com/v1", "/tickets", "https://h.example.com/tickets"),
        ("helpdesk.local/", "/tickets", "helpdesk.local/tickets"),
    ])
    def test_build_url(self, base, path, expected):
        assert build_url(base, path) == expected


class TestNormalizeTickets:
    """Test field-by-field normalization"""

    def test_non_list_yields_samples(self):
        tickets = normalize_tickets({"tickets": []})
        assert [t.id for t in tickets] == SAMPLE_IDS

    def test_empty_list(self):
        assert normalize_tickets([]) == []

    def test_complete_ticket(self):
        raw = [{
            "id": "R-1",
            "subject": "Webhook failing",
            "category": "integration",
            "summary": "Webhook returns 500",
            "status": "escalated",
            "priority": "high",
            "customerName": "Jo Lee",
            "customerEmail": "jo@example.com",
            "createdAt": "2026-01-15T10:00:00Z",
            "updatedAt": "2026-01-15T11:00:00Z",
            "slaMinutes": 90,
            "tags": ["webhook"],
            "metadata": {"endpoint": "/hooks"},
            "conversation": [
                {"role": "user", "message": "It fails", "timestamp": "2026-01-15T10:00:00Z"},
            ],
        }]

        ticket = normalize_tickets(raw)[0]

        assert ticket.id == "R-1"
        assert ticket.status == "escalated"
        assert ticket.customer_name == "Jo Lee"
        assert ticket.created_at == datetime(2026, 1, 15, 10, tzinfo=timezone.utc)
        assert ticket.sla_minutes == 90
        assert ticket.tags == ["webhook"]
        assert ticket.metadata == {"endpoint": "/hooks"}
        assert ticket.conversation[0].message == "It fails"

    def test_alternate_field_names(self):
        raw = [{
            "id": 42,
            "title": "Alt subject",
            "type": "monitoring",
            "description": "Alt summary",
            "requesterName": "Req Name",
            "email": "req@example.com",
            "created_at": "2026-01-15T08:00:00",
            "updated_at": "2026-01-15T09:00:00",
            "sla": "120",
        }]

        ticket = normalize_tickets(raw)[0]

        assert ticket.id == "42"
        assert ticket.subject == "Alt subject"
        assert ticket.category == "monitoring"
        assert ticket.summary == "Alt summary"
        assert ticket.customer_name == "Req Name"
        assert ticket.customer_email == "req@example.com"
        assert ticket.updated_at == datetime(2026, 1, 15, 9, tzinfo=timezone.utc)
        assert ticket.sla_minutes == 120

    def test_missing_fields_default_to_sample_by_index(self):
        tickets = normalize_tickets([{}, {}, {}, {"subject": "Only subject"}])

        assert [t.id for t in tickets] == SAMPLE_IDS + ["TCK-10294"]
        assert tickets[1].metadata == {"service": "guardian-core", "threshold": 85, "metric": "cpu_usage"}
        assert tickets[3].subject == "Only subject"
        assert tickets[3].customer_name == "Samira Haddad"

    def test_malformed_fields_default(self):
        raw = [{
            "id": "R-2",
            "createdAt": "not a date",
            "slaMinutes": "soon",
            "tags": "urgent",
            "metadata": ["not", "a", "dict"],
            "conversation": "hello",
        }]

        ticket = normalize_tickets(raw)[0]
        sample = normalize_tickets([{}])[0]

        assert ticket.sla_minutes == 60
        assert ticket.tags == ["password", "critical"]
        assert ticket.metadata is None
        assert [e.message for e in ticket.conversation] == [e.message for e in sample.conversation]

    @pytest.mark.parametrize("sla", [float("inf"), float("nan"), 10 ** 400, "1e400"])
    def test_non_finite_sla_defaults(self, sla):
        tickets = normalize_tickets([{"id": "X-1", "sla": sla}])

        assert tickets[0].id == "X-1"
        assert tickets[0].sla_minutes == 60

    def test_non_dict_items_fall_back_entirely(self):
        ticket = normalize_tickets(["garbage"])[0]
        assert ticket.id == "TCK-10294"

    def test_malformed_conversation_entries_are_dropped_and_sorted(self):
        raw = [{
            "conversation": [
                {"role": "agent", "message": "second", "timestamp": "2026-01-15T10:05:00Z"},
                {"role": "robot", "message": "bad role", "timestamp": "2026-01-15T10:01:00Z"},
                {"role": "user", "message": "first", "timestamp": "2026-01-15T10:00:00Z"},
                {"message": "no role"},
            ],
        }]

        ticket = normalize_tickets(raw)[0]

        assert [e.message for e in ticket.conversation] == ["first", "second"]

    def test_updated_at_never_before_created_at(self):
        raw = [{"createdAt": "2026-01-15T10:00:00Z", "updatedAt": "2026-01-15T09:00:00Z"}]

        ticket = normalize_tickets(raw)[0]

        assert ticket.updated_at == ticket.created_at


class TestMakeRequest:
    """Test _make_request (single attempt, no retries)"""

    @pytest.mark.asyncio
    async def test_get_returns_json(self, gateway):
        response = MagicMock()
        response.json.return_value = [{"id": 1}]

        with patch("httpx.AsyncClient") as mock_client:
            mock_request = AsyncMock(return_value=response)
            mock_client.return_value.__aenter__.return_value.request = mock_request

            result = await gateway._make_request("GET", "https://h.example.com/t", "secret")

        assert result == [{"id": 1}]
        headers = mock_request.call_args.kwargs["headers"]
        assert headers["Authorization"] == "Bearer secret"
        assert headers["Content-Type"] == "application/json"

    @pytest.mark.asyncio
    async def test_post_without_api_key(self, gateway):
        response = MagicMock()

        with patch("httpx.AsyncClient") as mock_client:
            mock_request = AsyncMock(return_value=response)
            mock_client.return_value.__aenter__.return_value.request = mock_request

            result = await gateway._make_request("POST", "https://h.example.com/r", "", {"ticketId": "T"})

        assert result == {"ok": True}
        kwargs = mock_request.call_args.kwargs
        assert "Authorization" not in kwargs["headers"]
        assert kwargs["json"] == {"ticketId": "T"}
        response.json.assert_not_called()

    @pytest.mark.asyncio
    async def test_http_error_status_is_not_retried(self, gateway):
        error_response = MagicMock()
        error_response.status_code = 503
        response = MagicMock()
        response.raise_for_status.side_effect = httpx.HTTPStatusError(
            "Service unavailable", request=MagicMock(), response=error_response
        )

        with patch("httpx.AsyncClient") as mock_client:
            mock_request = AsyncMock(return_value=response)
            mock_client.return_value.__aenter__.return_value.request = mock_request

            with pytest.raises(GatewayError) as exc_info:
                await gateway._make_request("GET", "https://h.example.com/t")

        assert str(exc_info.value) == "Unable to call https://h.example.com/t (503)"
        assert mock_request.call_count == 1

    @pytest.mark.asyncio
    async def test_transport_error(self, gateway):
        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value.__aenter__.return_value.request = AsyncMock(
                side_effect=httpx.ConnectError("Connection refused")
            )

            with pytest.raises(GatewayError, match="Connection refused"):
                await gateway._make_request("GET", "https://h.example.com/t")

    @pytest.mark.asyncio
    async def test_invalid_json(self, gateway):
        response = MagicMock()
        response.json.side_effect = ValueError("Expecting value")

        with patch("httpx.AsyncClient") as mock_client:
            mock_client.return_value.__aenter__.return_value.request = AsyncMock(return_value=response)

            with pytest.raises(GatewayError, match="Invalid JSON"):
                await gateway._make_request("GET", "https://h.example.com/t")


class TestOfflineMode:
    """Without a base URL nothing leaves the process"""

    @pytest.mark.asyncio
    async def test_fetch_returns_samples(self, gateway, offline_config):
        with patch.object(gateway, "_make_request", new_callable=AsyncMock) as mock_request:
            result = await gateway.fetch(offline_config)

        mock_request.assert_not_called()
        assert result.success
        assert [t.id for t in result.data] == SAMPLE_IDS

    @pytest.mark.asyncio
    async def test_respond_echoes_payload(self, gateway, offline_config, response_payload):
        result = await gateway.respond(offline_config, response_payload)

        assert result.success
        assert result.data == response_payload

    @pytest.mark.asyncio
    async def test_resolve_echoes_payload(self, gateway, offline_config):
        payload = ResolvePayload(ticket_id="TCK-1")

        result = await gateway.resolve(offline_config, payload)

        assert result.success
        assert result.data == payload


class TestRemoteMode:
    """Forwarding to a configured remote system"""

    @pytest.mark.asyncio
    async def test_fetch_normalizes(self, gateway, remote_config):
        with patch.object(gateway, "_make_request", new_callable=AsyncMock) as mock_request:
            mock_request.return_value = [{"id": "R-1", "subject": "Remote"}]

            result = await gateway.fetch(remote_config)

        mock_request.assert_called_once_with(
            "GET", "https://helpdesk.example.com/api/tickets/open", "secret"
        )
        assert result.success
        assert isinstance(result.data[0], Ticket)
        assert result.data[0].subject == "Remote"

    @pytest.mark.asyncio
    async def test_fetch_failure_carries_samples(self, gateway, remote_config):
        with patch.object(gateway, "_make_request", new_callable=AsyncMock) as mock_request:
            mock_request.side_effect = GatewayError("Unable to call x (500)")

            result = await gateway.fetch(remote_config)

        assert not result.success
        assert result.error == "Unable to call x (500)"
        assert [t.id for t in result.data] == SAMPLE_IDS

    @pytest.mark.asyncio
    async def test_respond_posts_camel_case_payload(self, gateway, remote_config, response_payload):
        with patch.object(gateway, "_make_request", new_callable=AsyncMock) as mock_request:
            mock_request.return_value = {"ok": True}

            result = await gateway.respond(remote_config, response_payload)

        mock_request.assert_called_once_with(
            "POST",
            "https://helpdesk.example.com/api/tickets/respond",
            "secret",
            {
                "ticketId": "TCK-1",
                "response": "Hello",
                "actions": ["Check logs"],
                "confidence": 0.7,
                "meta": {"auto": True},
            },
        )
        assert result.success
        assert result.data == response_payload

    @pytest.mark.asyncio
    async def test_respond_failure(self, gateway, remote_config, response_payload):
        with patch.object(gateway, "_make_request", new_callable=AsyncMock) as mock_request:
            mock_request.side_effect = GatewayError("Unable to call x (502)")

            result = await gateway.respond(remote_config, response_payload)

        assert result == ApiResponse(success=False, error="Unable to call x (502)")

    @pytest.mark.asyncio
    async def test_resolve_success_has_no_data(self, gateway, remote_config):
        with patch.object(gateway, "_make_request", new_callable=AsyncMock) as mock_request:
            mock_request.return_value = {"ok": True}

            result = await gateway.resolve(remote_config, ResolvePayload(ticket_id="TCK-1"))

        assert mock_request.call_args.args[1] == "https://helpdesk.example.com/api/tickets/resolve"
        assert mock_request.call_args.args[3] == {"ticketId": "TCK-1"}
        assert result == ApiResponse(success=True)


class TestHandle:
    """Test proxy dispatch"""

    @pytest.mark.asyncio
    async def test_missing_config_returns_samples(self, gateway):
        result = await gateway.handle(GatewayRequest(action="respond"))

        assert result.success
        assert [t.id for t in result.data] == SAMPLE_IDS

    @pytest.mark.asyncio
    async def test_unsupported_action(self, gateway, offline_config):
        result = await gateway.handle(GatewayRequest(action="delete", config=offline_config))

        assert not result.success
        assert result.error == UNSUPPORTED_ACTION

    @pytest.mark.asyncio
    async def test_respond_without_payload_is_unsupported(self, gateway, offline_config):
        result = await gateway.handle(GatewayRequest(action="respond", config=offline_config))

        assert result.error == UNSUPPORTED_ACTION

    @pytest.mark.asyncio
    async def test_dispatches_resolve(self, gateway, offline_config):
        payload = GatewayPayload(ticket_id="TCK-5")

        result = await gateway.handle(
            GatewayRequest(action="resolve", config=offline_config, payload=payload)
        )

        assert result.success
        assert result.data == payload

    @pytest.mark.asyncio
    async def test_unexpected_error_becomes_value(self, gateway, offline_config):
        with patch.object(gateway, "fetch", new_callable=AsyncMock) as mock_fetch:
            mock_fetch.side_effect = RuntimeError("boom")

            result = await gateway.handle(GatewayRequest(action="fetch", config=offline_config))

        assert result == ApiResponse(success=False, error="boom")

    @pytest.mark.asyncio
    async def test_raw_body_is_validated(self, gateway):
        payload = {"ticketId": "TCK-5", "response": "Hi"}

        result = await gateway.handle({"action": "respond", "config": {}, "payload": payload})

        assert result.success
        assert result.data == GatewayPayload(ticket_id="TCK-5", response="Hi")

    @pytest.mark.asyncio
    async def test_payload_without_ticket_id(self, gateway):
        result = await gateway.handle({"action": "respond", "config": {}, "payload": {}})

        assert not result.success
        assert result.error == "Invalid request: payload.ticketId: Field required"

    @pytest.mark.asyncio
    async def test_invalid_config(self, gateway):
        result = await gateway.handle({"action": "fetch", "config": {"maxParallel": 0}})

        assert not result.success
        assert result.error.startswith("Invalid request: config.maxParallel:")

    @pytest.mark.asyncio
    async def test_non_object_body(self, gateway):
        result = await gateway.handle(None)

        assert not result.success
        assert result.error.startswith("Invalid request: body:")


class TestFetchNormalization:
    """A malformed remote field never fails the whole fetch"""

    @pytest.mark.asyncio
    async def test_infinite_sla_in_remote_body(self, gateway, remote_config):
        with patch.object(gateway, "_make_request", new_callable=AsyncMock) as mock_request:
            mock_request.return_value = [{"id": "R-9", "slaMinutes": float("inf")}]

            result = await gateway.fetch(remote_config)

        assert result.success
        assert result.data[0].id == "R-9"
        assert result.data[0].sla_minutes == 60
