"""
Table-driven finite state machine for WhatsApp conversation flows.

Every vertical (agency, clinic, courier, ...) is a ``FlowDefinition``: a
static table of ``Stage`` objects. A single ``DialogueEngine.step``
interprets any table, so verticals differ only in data.

Stage kinds:
    MENU     any input advances to ``next_stage``; options only pick the reply.
             A selection valid at the next SELECT stage is forwarded there.
    SELECT   numeric/keyword options branch; unknown input keeps the stage.
    COLLECT  any non-empty input is stored verbatim under ``slot``.
    QUERY    input is an identifier for a read-only external lookup.

Usage:
    flow = create_flow("agency")
    session = Session(identity="51999000111", stage=flow.initial_stage)
    result = step(flow, session, "hola")
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Collection, Mapping, Optional

from leadbot.schemas.lead_schema import EnrichmentFields, ExternalResult, LeadRecord
from leadbot.schemas.message_schema import OutboundMessage
from leadbot.schemas.session_schema import Session
from leadbot.utils import normalize_input

logger = logging.getLogger(__name__)


class StageKind(str, Enum):
    MENU = "menu"
    SELECT = "select"
    COLLECT = "collect"
    QUERY = "query"


class SideEffect(str, Enum):
    """Collaborator calls triggered when a lead is completed."""
    PERSIST = "persist"
    CREATE_EXTERNAL = "create_external"
    NOTIFY = "notify"


QueryFormatter = Callable[[str, ExternalResult], list[OutboundMessage]]


@dataclass(frozen=True)
class Option:
    """A recognised answer at a MENU or SELECT stage."""
    keys: tuple[str, ...]
    reply: str = ""
    next_stage: Optional[str] = None
    media: tuple[OutboundMessage, ...] = ()
    flow_tag: Optional[str] = None

    def matches(self, normalized: str) -> bool:
        return normalized in self.keys


@dataclass(frozen=True)
class Stage:
    """A single row of a flow's transition table."""
    name: str
    kind: StageKind
    prompt: str = ""
    options: tuple[Option, ...] = ()
    slot: Optional[str] = None
    choices: Mapping[str, str] = field(default_factory=dict)
    next_stage: Optional[str] = None
    reply: str = ""
    invalid_reply: str = ""
    terminal: bool = False
    effects: tuple[SideEffect, ...] = ()
    validator: Optional[Callable[[str], bool]] = None
    formatter: Optional[QueryFormatter] = None

    def match(self, normalized: str) -> Optional[Option]:
        for option in self.options:
            if option.matches(normalized):
                return option
        return None


class FlowDefinitionError(ValueError):
    """Raised when a flow table references stages or fields that do not exist."""


@dataclass(frozen=True)
class FlowDefinition:
    """Declarative description of one vertical's conversation."""
    vertical: str
    initial_stage: str
    stages: Mapping[str, Stage]
    reset_clears_fields: bool
    reset_reply: str
    exit_reply: str
    reset_keywords: frozenset[str] = frozenset()
    enrichment: EnrichmentFields = EnrichmentFields()
    external_id_field: Optional[str] = None
    audit_queries: bool = False

    def __post_init__(self) -> None:
        if self.initial_stage not in self.stages:
            raise FlowDefinitionError(
                f"{self.vertical}: initial stage '{self.initial_stage}' is not defined"
            )
        for name, stage in self.stages.items():
            if name != stage.name:
                raise FlowDefinitionError(f"{self.vertical}: stage key '{name}' != '{stage.name}'")
            targets = [stage.next_stage] + [o.next_stage for o in stage.options]
            for target in targets:
                if target is not None and target not in self.stages:
                    raise FlowDefinitionError(
                        f"{self.vertical}: stage '{name}' points to unknown stage '{target}'"
                    )
            if stage.kind in (StageKind.COLLECT, StageKind.QUERY) and not stage.slot:
                raise FlowDefinitionError(f"{self.vertical}: stage '{name}' needs a field")
            if stage.kind == StageKind.QUERY and stage.formatter is None:
                raise FlowDefinitionError(f"{self.vertical}: stage '{name}' needs a formatter")
            if stage.kind == StageKind.COLLECT and not stage.terminal and stage.next_stage is None:
                raise FlowDefinitionError(
                    f"{self.vertical}: non-terminal stage '{name}' has no next stage"
                )

    @property
    def slots(self) -> frozenset[str]:
        """Field names any stage collects; the only names templates may use."""
        return frozenset(stage.slot for stage in self.stages.values() if stage.slot)

    def stage(self, name: str) -> Stage:
        return self.stages[name]


@dataclass
class StepResult:
    """Everything one inbound message produced."""
    messages: list[OutboundMessage] = field(default_factory=list)
    record: Optional[LeadRecord] = None
    effects: tuple[SideEffect, ...] = ()
    query: Optional[str] = None
    query_stage: Optional[str] = None
    ended: bool = False

    def add_text(self, body: str) -> None:
        if body:
            self.messages.append(OutboundMessage.text(body))


_PLACEHOLDER = re.compile(r"\{(\w+)\}")


def render(template: str, session: Session, slots: Optional[Collection[str]] = None) -> str:
    """Fill ``{slot}`` placeholders from the session's collected fields.

    Only names in ``slots`` (any name when None) are replaced; every other
    brace is kept as written, so brand names and URLs taken from
    configuration pass through untouched. A slot not collected yet
    renders as empty text.
    """
    def fill(match: re.Match) -> str:
        name = match.group(1)
        if slots is not None and name not in slots:
            return match.group(0)
        return session.fields.get(name, "")

    return _PLACEHOLDER.sub(fill, template)


def build_record(flow: FlowDefinition, session: Session, channel: str) -> LeadRecord:
    return LeadRecord(
        vertical=flow.vertical,
        identity=session.identity,
        channel=channel,
        flow=session.flow_tag,
        fields=dict(session.fields),
    )


def step(
    flow: FlowDefinition,
    session: Session,
    raw_input: str,
    channel: str = "whatsapp",
    strict_validation: bool = False,
) -> StepResult:
    """
    Advance ``session`` by one user message.

    Global commands are not handled here; callers run the
    ``GlobalCommandInterceptor`` first. The session is mutated in place;
    ``result.ended`` tells the caller to drop it from the store.
    """
    text = (raw_input or "").strip()
    normalized = normalize_input(text)
    stage = flow.stage(session.stage)
    session.turns += 1
    result = StepResult()

    if stage.kind == StageKind.MENU:
        _step_menu(flow, session, stage, normalized, result)
    elif stage.kind == StageKind.SELECT:
        _step_select(flow, session, stage, normalized, result)
    elif stage.kind == StageKind.COLLECT:
        _step_collect(flow, session, stage, text, channel, strict_validation, result)
    else:
        _step_query(flow, session, stage, text, result)

    logger.debug(
        "%s step %d for %s: %s -> %s",
        flow.vertical, session.turns, session.identity, stage.name,
        "END" if result.ended else session.stage,
    )
    return result


def _apply_option(
    flow: FlowDefinition, session: Session, option: Option, result: StepResult
) -> None:
    if option.flow_tag:
        session.flow_tag = option.flow_tag
    if option.next_stage:
        session.stage = option.next_stage
    result.messages.extend(option.media)
    result.add_text(render(option.reply, session, flow.slots))


def _step_menu(
    flow: FlowDefinition, session: Session, stage: Stage, normalized: str, result: StepResult
) -> None:
    target = flow.stage(stage.next_stage) if stage.next_stage else None
    if target is not None and target.kind == StageKind.SELECT:
        forwarded = target.match(normalized)
        if forwarded is not None:
            session.stage = target.name
            _apply_option(flow, session, forwarded, result)
            return

    option = stage.match(normalized)
    if stage.next_stage:
        session.stage = stage.next_stage
    if option is not None:
        _apply_option(flow, session, option, result)
    else:
        result.add_text(render(stage.prompt, session, flow.slots))


def _step_select(
    flow: FlowDefinition, session: Session, stage: Stage, normalized: str, result: StepResult
) -> None:
    option = stage.match(normalized)
    if option is None:
        result.add_text(stage.invalid_reply or stage.prompt)
        return
    _apply_option(flow, session, option, result)


def _step_collect(
    flow: FlowDefinition,
    session: Session,
    stage: Stage,
    text: str,
    channel: str,
    strict_validation: bool,
    result: StepResult,
) -> None:
    if not text:
        result.add_text(render(stage.prompt, session, flow.slots))
        return
    if strict_validation and stage.validator is not None and not stage.validator(text):
        result.add_text(stage.invalid_reply or render(stage.prompt, session, flow.slots))
        return

    session.fields[stage.slot] = stage.choices.get(normalize_input(text), text)

    if stage.terminal:
        result.record = build_record(flow, session, channel)
        result.effects = stage.effects
        result.ended = True
        result.add_text(render(stage.reply, session, flow.slots))
        return

    session.stage = stage.next_stage
    reply = stage.reply or flow.stage(stage.next_stage).prompt
    result.add_text(render(reply, session, flow.slots))


def _step_query(
    flow: FlowDefinition, session: Session, stage: Stage, text: str, result: StepResult
) -> None:
    if not text:
        result.add_text(render(stage.prompt, session, flow.slots))
        return
    session.fields[stage.slot] = text
    result.query = text
    result.query_stage = stage.name
    result.ended = True
