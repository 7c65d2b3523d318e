"""
Dialogue engine: one instance per vertical.

Ties together the session store, the global command interceptor, the
table-driven ``step`` and the external collaborators. The user-facing
reply is decided synchronously; completed leads are enriched and handed
to persistence, CRM and notification in a detached task whose failures
are only logged.

Usage:
    engine = DialogueEngine(create_flow("agency"), collaborators)
    result = await engine.respond("51999000111", "hola")
"""

from typing import Awaitable, Optional, TypeVar

from leadbot.config import FlowSettings, settings
from leadbot.conversation.commands import Command, GlobalCommandInterceptor
from leadbot.conversation.session_store import InMemorySessionStore, SessionStore
from leadbot.conversation.state_machine import (
    FlowDefinition,
    SideEffect,
    StepResult,
    step,
)
from leadbot.dispatch import BackgroundDispatcher
from leadbot.enrichment.lead_enrichment import enrich_lead
from leadbot.logging_context import get_sender_logger, set_sender_id
from leadbot.schemas.lead_schema import EnrichedLead, ExternalResult, LeadRecord
from leadbot.schemas.session_schema import Session
from leadbot.tools import Collaborators

logger = get_sender_logger(__name__)

T = TypeVar("T")

MISSING_EXTERNAL_ID = "SIN-CODIGO"


class DialogueEngine:
    """Runs one vertical's flow for any number of concurrent users."""

    def __init__(
        self,
        flow: FlowDefinition,
        collaborators: Collaborators,
        store: Optional[SessionStore] = None,
        dispatcher: Optional[BackgroundDispatcher] = None,
        flow_settings: Optional[FlowSettings] = None,
    ) -> None:
        self.flow = flow
        self.collaborators = collaborators
        self.store = store or InMemorySessionStore(flow.initial_stage)
        self.dispatcher = dispatcher or BackgroundDispatcher()
        self.flow_settings = flow_settings or settings.flow
        self.interceptor = GlobalCommandInterceptor(flow.reset_keywords)

    def step(self, session: Session, raw_input: str) -> StepResult:
        return step(
            self.flow,
            session,
            raw_input,
            channel=self.flow_settings.channel_tag,
            strict_validation=self.flow_settings.strict_validation,
        )

    async def handle(self, identity: str, raw_input: str) -> StepResult:
        """Process one message and return the replies without sending them."""
        set_sender_id(identity)
        async with self.store.lock(identity):
            return await self._handle_locked(identity, raw_input)

    async def respond(self, identity: str, raw_input: str) -> StepResult:
        """Process one message and deliver its replies in order."""
        set_sender_id(identity)
        async with self.store.lock(identity):
            result = await self._handle_locked(identity, raw_input)
            for message in result.messages:
                await self._best_effort(
                    "deliver", self.collaborators.messenger.deliver(identity, message), False
                )
            return result

    async def _handle_locked(self, identity: str, raw_input: str) -> StepResult:
        result = self._dispatch(identity, raw_input)
        if result.query is not None:
            await self._run_query(identity, result)
        if result.record is not None:
            self.dispatcher.spawn(
                self.complete_lead(result.record, result.effects),
                name=f"lead-{self.flow.vertical}-{identity}",
            )
        return result

    def _dispatch(self, identity: str, raw_input: str) -> StepResult:
        command = self.interceptor.intercept(raw_input)
        if command == Command.EXIT:
            self.store.reset(identity)
            logger.info("%s: %s exited the conversation", self.flow.vertical, identity)
            result = StepResult(ended=True)
            result.add_text(self.flow.exit_reply)
            return result

        if command == Command.RESET:
            if self.flow.reset_clears_fields:
                self.store.reset(identity)
            else:
                self.store.get_or_create(identity).rewind(self.flow.initial_stage, clear_fields=False)
            logger.info("%s: %s returned to the start", self.flow.vertical, identity)
            result = StepResult()
            result.add_text(self.flow.reset_reply)
            return result

        session = self.store.get_or_create(identity)
        result = self.step(session, raw_input)
        if result.ended:
            self.store.reset(identity)
        return result

    async def _run_query(self, identity: str, result: StepResult) -> None:
        stage = self.flow.stage(result.query_stage)
        api = self.collaborators.api_for(self.flow.vertical)
        lookup = ExternalResult(ok=False)
        if api is None:
            logger.warning("%s: no status API configured", self.flow.vertical)
        else:
            lookup = await self._best_effort(
                "query_external_status", api.query_external_status(result.query), lookup
            )
        result.messages.extend(stage.formatter(result.query, lookup))
        logger.info(
            "%s: status query for %s (found=%s)", self.flow.vertical, result.query, lookup.ok
        )

        if self.flow.audit_queries:
            note = {
                "kind": "query",
                "vertical": self.flow.vertical,
                "identity": identity,
                "channel": self.flow_settings.channel_tag,
                stage.slot: result.query,
            }
            self.dispatcher.spawn(
                self._best_effort(
                    "persist_record", self.collaborators.persistence.persist_record(note), False
                ),
                name=f"audit-{self.flow.vertical}-{identity}",
            )

    async def complete_lead(
        self, record: LeadRecord, effects: tuple[SideEffect, ...]
    ) -> EnrichedLead:
        """Run a completed lead through CRM, enrichment, persistence and notification.

        Every collaborator call is independent: a failing CRM call still
        lets the record be persisted and notified.
        """
        if SideEffect.CREATE_EXTERNAL in effects:
            record = await self._create_external(record)

        enriched = enrich_lead(record, self.flow.enrichment, self.flow_settings.source_tag)
        payload = enriched.to_payload()

        if SideEffect.PERSIST in effects:
            await self._best_effort(
                "persist_record", self.collaborators.persistence.persist_record(payload), False
            )
        if SideEffect.NOTIFY in effects:
            await self._best_effort(
                "notify", self.collaborators.notifier.notify(payload), False
            )
        logger.info(
            "%s lead completed for %s (score=%d)",
            self.flow.vertical, record.identity, enriched.interest_score,
        )
        return enriched

    async def _create_external(self, record: LeadRecord) -> LeadRecord:
        api = self.collaborators.api_for(self.flow.vertical)
        if api is None:
            logger.warning("%s: no create API configured", self.flow.vertical)
            return record
        created = await self._best_effort(
            "create_external_resource",
            api.create_external_resource(record.to_payload()),
            ExternalResult(ok=False),
        )
        if created.ok and self.flow.external_id_field:
            record = record.with_field(
                self.flow.external_id_field, created.generated_id or MISSING_EXTERNAL_ID
            )
        return record

    async def _best_effort(self, what: str, call: Awaitable[T], fallback: T) -> T:
        try:
            return await call
        except Exception:
            logger.exception("%s: %s failed", self.flow.vertical, what)
            return fallback
