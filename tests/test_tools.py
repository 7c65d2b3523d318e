"""Tests for the HTTP collaborators, using httpx mock transports."""

import json

import httpx
import pytest

from leadbot.config import AppConfig, WhatsAppConfig
from leadbot.schemas.message_schema import OutboundMessage
from leadbot.tools import build_collaborators
from leadbot.tools.messenger import WhatsAppMessenger
from leadbot.tools.notifier import EmailNotifier
from leadbot.tools.sheets import SheetsSink
from leadbot.tools.vertical_api import VerticalApiClient

WA_CONFIG = WhatsAppConfig(
    token="tok", phone_number_id="12345", verify_token="verify", graph_api_version="v17.0"
)


def recording_client(requests, status=200, body=None):
    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(status, json=body if body is not None else {})
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def failing_client():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestWhatsAppMessenger:
    @pytest.mark.asyncio
    async def test_send_text(self):
        requests = []
        async with recording_client(requests) as client:
            ok = await WhatsAppMessenger(WA_CONFIG, client).send_text("51999000111", "hola")
        assert ok
        request = requests[0]
        assert str(request.url) == "https://graph.facebook.com/v17.0/12345/messages"
        assert request.headers["Authorization"] == "Bearer tok"
        body = json.loads(request.content)
        assert body == {
            "messaging_product": "whatsapp",
            "to": "51999000111",
            "text": {"body": "hola"},
        }

    @pytest.mark.asyncio
    async def test_deliver_location(self):
        requests = []
        async with recording_client(requests) as client:
            messenger = WhatsAppMessenger(WA_CONFIG, client)
            await messenger.deliver("51", OutboundMessage.location(-12.0, -77.0, "Oficina", "Av. 1"))
        body = json.loads(requests[0].content)
        assert body["type"] == "location"
        assert body["location"] == {
            "latitude": -12.0, "longitude": -77.0, "name": "Oficina", "address": "Av. 1",
        }

    @pytest.mark.asyncio
    async def test_deliver_document(self):
        requests = []
        async with recording_client(requests) as client:
            messenger = WhatsAppMessenger(WA_CONFIG, client)
            await messenger.deliver(
                "51", OutboundMessage.document("https://x/b.pdf", "Brochure", "b.pdf")
            )
        body = json.loads(requests[0].content)
        assert body["type"] == "document"
        assert body["document"]["filename"] == "b.pdf"

    @pytest.mark.asyncio
    async def test_deliver_image(self):
        requests = []
        async with recording_client(requests) as client:
            await WhatsAppMessenger(WA_CONFIG, client).deliver(
                "51", OutboundMessage.image("https://x/i.png", "Foto")
            )
        body = json.loads(requests[0].content)
        assert body["image"] == {"link": "https://x/i.png", "caption": "Foto"}

    @pytest.mark.asyncio
    async def test_missing_credentials_skip_request(self):
        requests = []
        async with recording_client(requests) as client:
            ok = await WhatsAppMessenger(WhatsAppConfig(token="", phone_number_id=""), client).send_text("51", "x")
        assert not ok
        assert requests == []

    @pytest.mark.asyncio
    async def test_http_error_returns_false(self):
        requests = []
        async with recording_client(requests, status=500) as client:
            ok = await WhatsAppMessenger(WA_CONFIG, client).send_text("51", "x")
        assert not ok

    @pytest.mark.asyncio
    async def test_timeout_returns_false(self):
        async with failing_client() as client:
            ok = await WhatsAppMessenger(WA_CONFIG, client).send_text("51", "x")
        assert not ok


class TestSinks:
    @pytest.mark.asyncio
    async def test_sheets_posts_record(self):
        requests = []
        async with recording_client(requests) as client:
            ok = await SheetsSink("https://sheets/hook", client).persist_record({"vertical": "agency"})
        assert ok
        assert json.loads(requests[0].content) == {"vertical": "agency"}

    @pytest.mark.asyncio
    async def test_sheets_without_url(self):
        requests = []
        async with recording_client(requests) as client:
            ok = await SheetsSink("", client).persist_record({"vertical": "agency"})
        assert not ok
        assert requests == []

    @pytest.mark.asyncio
    async def test_notifier_failure_returns_false(self):
        async with failing_client() as client:
            ok = await EmailNotifier("https://mail/hook", client).notify({"identity": "51"})
        assert not ok


class TestVerticalApi:
    @pytest.mark.asyncio
    async def test_create_reads_generated_code(self):
        requests = []
        async with recording_client(requests, body={"ok": True, "codigo": "CITA-9"}) as client:
            api = VerticalApiClient("clinic", "https://api/", client, create_path="/appointments")
            result = await api.create_external_resource({"name": "Ana"})
        assert result.ok
        assert result.generated_id == "CITA-9"
        assert str(requests[0].url) == "https://api/appointments"

    @pytest.mark.asyncio
    async def test_create_without_endpoint(self):
        async with recording_client([]) as client:
            result = await VerticalApiClient("courier", "https://api", client).create_external_resource({})
        assert not result.ok

    @pytest.mark.asyncio
    async def test_mock_create_without_base_url(self):
        async with recording_client([]) as client:
            api = VerticalApiClient(
                "clinic", "", client, create_path="/appointments", mock_generated_id="CITA-MOCK-12345"
            )
            result = await api.create_external_resource({})
        assert result.ok
        assert result.generated_id == "CITA-MOCK-12345"

    @pytest.mark.asyncio
    async def test_status_quotes_identifier(self):
        requests = []
        async with recording_client(requests, body={"ok": True, "status": "Entregado"}) as client:
            api = VerticalApiClient("courier", "https://api", client, status_path="/tracking/{id}")
            result = await api.query_external_status("PE 1/2")
        assert result.ok
        assert result.data["status"] == "Entregado"
        assert requests[0].url.raw_path == b"/tracking/PE%201%2F2"

    @pytest.mark.asyncio
    async def test_status_ok_false_in_body(self):
        async with recording_client([], body={"ok": False}) as client:
            api = VerticalApiClient("clinic", "https://api", client, status_path="/appointments/{id}")
            result = await api.query_external_status("x")
        assert not result.ok

    @pytest.mark.asyncio
    async def test_status_http_error(self):
        async with recording_client([], status=404) as client:
            api = VerticalApiClient("clinic", "https://api", client, status_path="/appointments/{id}")
            result = await api.query_external_status("x")
        assert not result.ok

    @pytest.mark.asyncio
    async def test_create_without_ok_is_not_success(self):
        async with recording_client([], body={"codigo": "CITA-9"}) as client:
            api = VerticalApiClient("clinic", "https://api", client, create_path="/appointments")
            result = await api.create_external_resource({"name": "Ana"})
        assert not result.ok
        assert result.generated_id == "CITA-9"

    @pytest.mark.asyncio
    async def test_tracking_error_body_is_not_found(self):
        async with recording_client([], body={"error": "not found"}) as client:
            api = VerticalApiClient("courier", "https://api", client, status_path="/tracking/{id}")
            result = await api.query_external_status("ZZZ")
        assert not result.ok
        assert result.data == {"error": "not found"}

    @pytest.mark.asyncio
    async def test_status_default_ok_when_body_is_silent(self):
        async with recording_client([], body={"estado": "Confirmada"}) as client:
            api = VerticalApiClient(
                "clinic", "https://api", client,
                status_path="/appointments/{id}", status_default_ok=True,
            )
            result = await api.query_external_status("CITA-1")
        assert result.ok
        assert result.data["estado"] == "Confirmada"

    @pytest.mark.asyncio
    async def test_mock_status_echoes_code(self):
        async with recording_client([]) as client:
            api = VerticalApiClient(
                "courier", "", client, status_path="/tracking/{id}", mock_status={"status": "En tránsito"}
            )
            result = await api.query_external_status("PE1")
        assert result.data == {"status": "En tránsito", "code": "PE1"}


class TestBuildCollaborators:
    @pytest.mark.asyncio
    async def test_wires_every_vertical_api(self):
        async with recording_client([]) as client:
            collaborators = build_collaborators(AppConfig(), client)
        assert set(collaborators.apis) == {"clinic", "courier", "real_estate", "restaurant"}
        assert collaborators.api_for("agency") is None
        assert collaborators.api_for("courier").status_path == "/tracking/{id}"
        assert collaborators.api_for("clinic").status_default_ok is True
        assert collaborators.api_for("courier").status_default_ok is False
