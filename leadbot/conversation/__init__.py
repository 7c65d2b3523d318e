from leadbot.conversation.commands import Command, GlobalCommandInterceptor
from leadbot.conversation.engine import DialogueEngine
from leadbot.conversation.session_store import InMemorySessionStore, SessionStore
from leadbot.conversation.state_machine import (
    FlowDefinition,
    Option,
    SideEffect,
    Stage,
    StageKind,
    StepResult,
)

__all__ = [
    "DialogueEngine",
    "FlowDefinition",
    "Stage",
    "StageKind",
    "Option",
    "SideEffect",
    "StepResult",
    "SessionStore",
    "InMemorySessionStore",
    "GlobalCommandInterceptor",
    "Command",
]
