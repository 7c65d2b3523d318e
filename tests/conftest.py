"""Shared test fixtures and helpers."""

from typing import Any, Optional

import pytest

from leadbot.config import FlowSettings
from leadbot.conversation.engine import DialogueEngine
from leadbot.conversation.session_store import InMemorySessionStore
from leadbot.flows import create_flow
from leadbot.schemas.lead_schema import ExternalResult
from leadbot.schemas.message_schema import MessageKind, OutboundMessage
from leadbot.schemas.session_schema import Session
from leadbot.tools import Collaborators

IDENTITY = "51999000111"


class RecordingMessenger:
    """Keeps every delivered message instead of calling WhatsApp."""

    def __init__(self, fail: bool = False) -> None:
        self.sent: list[tuple[str, OutboundMessage]] = []
        self.fail = fail

    async def deliver(self, to: str, message: OutboundMessage) -> bool:
        if self.fail:
            raise ConnectionError("whatsapp down")
        self.sent.append((to, message))
        return True

    def texts(self, to: Optional[str] = None) -> list[str]:
        return [
            m.body for recipient, m in self.sent
            if m.kind == MessageKind.TEXT and (to is None or recipient == to)
        ]


class RecordingSink:
    """Spreadsheet and e-mail stand-in; optionally raises on every call."""

    def __init__(self, fail: bool = False) -> None:
        self.rows: list[dict[str, Any]] = []
        self.notifications: list[dict[str, Any]] = []
        self.fail = fail

    async def persist_record(self, record: dict[str, Any]) -> bool:
        if self.fail:
            raise RuntimeError("sheets down")
        self.rows.append(record)
        return True

    async def notify(self, record: dict[str, Any]) -> bool:
        if self.fail:
            raise RuntimeError("mail relay down")
        self.notifications.append(record)
        return True


class FakeVerticalApi:
    """Vertical API double with canned create/status answers."""

    def __init__(
        self,
        created: Optional[ExternalResult] = None,
        status: Optional[ExternalResult] = None,
        fail: bool = False,
    ) -> None:
        self.created = created or ExternalResult(ok=True, generated_id="CITA-777")
        self.status = status or ExternalResult(ok=False)
        self.fail = fail
        self.create_calls: list[dict[str, Any]] = []
        self.status_calls: list[str] = []

    async def create_external_resource(self, record: dict[str, Any]) -> ExternalResult:
        self.create_calls.append(record)
        if self.fail:
            raise TimeoutError("crm timeout")
        return self.created

    async def query_external_status(self, identifier: str) -> ExternalResult:
        self.status_calls.append(identifier)
        if self.fail:
            raise TimeoutError("status timeout")
        return self.status


class Harness:
    """An engine plus the fakes it was built with."""

    def __init__(self, engine: DialogueEngine, messenger, persistence, notifier, api) -> None:
        self.engine = engine
        self.messenger = messenger
        self.persistence = persistence
        self.notifier = notifier
        self.api = api

    async def say(self, text: str, identity: str = IDENTITY) -> list[str]:
        """Send one message and return the text replies it produced."""
        result = await self.engine.respond(identity, text)
        return [m.body for m in result.messages if m.kind == MessageKind.TEXT]

    async def settle(self) -> None:
        await self.engine.dispatcher.drain()

    def session(self, identity: str = IDENTITY) -> Optional[Session]:
        return self.engine.store.get(identity)


@pytest.fixture
def make_harness():
    def _make(
        flow_name: str = "agency",
        api: Optional[FakeVerticalApi] = None,
        messenger: Optional[RecordingMessenger] = None,
        persistence: Optional[RecordingSink] = None,
        notifier: Optional[RecordingSink] = None,
        strict_validation: bool = False,
    ) -> Harness:
        flow = create_flow(flow_name)
        messenger = messenger or RecordingMessenger()
        persistence = persistence or RecordingSink()
        notifier = notifier or RecordingSink()
        api = api or FakeVerticalApi()
        collaborators = Collaborators(
            messenger=messenger,
            persistence=persistence,
            notifier=notifier,
            apis={flow.vertical: api},
        )
        engine = DialogueEngine(
            flow,
            collaborators,
            flow_settings=FlowSettings(vertical=flow_name, strict_validation=strict_validation),
        )
        return Harness(engine, messenger, persistence, notifier, api)

    return _make


@pytest.fixture
def agency(make_harness):
    return make_harness("agency")


@pytest.fixture
def session_store():
    return InMemorySessionStore("MAIN_MENU")
