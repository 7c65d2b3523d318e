"""
Offline console demo: chat with any vertical's flow without WhatsApp.

Uses the real dialogue engine, flow tables, session store and lead
enrichment. Outbound messages, spreadsheet rows and e-mail notifications
are printed instead of sent; the vertical APIs answer from their mock
data. No tokens, no network calls.

Usage:
    python console_demo.py
    python console_demo.py --flow clinic
    python console_demo.py --flow agency --scenario lead
"""

import argparse
import asyncio
import json
from typing import Any, Optional

import httpx

from leadbot.config import settings
from leadbot.conversation.engine import DialogueEngine
from leadbot.flows import create_flow, get_registered_flows
from leadbot.schemas.message_schema import MessageKind, OutboundMessage
from leadbot.tools import Collaborators, build_collaborators

BLUE = "\033[94m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"

CONSOLE_IDENTITY = "51999000111"


class ConsoleMessenger:
    """Prints what would be sent to WhatsApp."""

    def __init__(self, label: str) -> None:
        self.label = label

    async def deliver(self, to: str, message: OutboundMessage) -> bool:
        if message.kind == MessageKind.TEXT:
            print(f"{GREEN}{BOLD}[{self.label}]{RESET} {GREEN}{message.body}{RESET}")
        elif message.kind == MessageKind.LOCATION:
            print(
                f"{GREEN}{BOLD}[{self.label}]{RESET} 📍 {message.name} - {message.address} "
                f"({message.latitude}, {message.longitude})"
            )
        else:
            print(
                f"{GREEN}{BOLD}[{self.label}]{RESET} 📎 {message.kind.value}: "
                f"{message.caption} <{message.url}>"
            )
        return True


class ConsoleSink:
    """Stands in for the spreadsheet webhook and the e-mail relay."""

    def __init__(self, label: str) -> None:
        self.label = label

    async def persist_record(self, record: dict[str, Any]) -> bool:
        return self._show(record)

    async def notify(self, record: dict[str, Any]) -> bool:
        return self._show(record)

    def _show(self, record: dict[str, Any]) -> bool:
        print(f"{DIM}  >> {self.label}: {json.dumps(record, ensure_ascii=False)}{RESET}")
        return True


class ConsoleSession:
    """Drives one flow in the terminal, interactively or from a script."""

    # Pre-scripted scenarios for --scenario flag, keyed by flow
    SCENARIOS: dict[str, dict[str, list[str]]] = {
        "agency": {
            "lead": ["hola", "Ana", "2", "clínica en Lima", "alto", "ana@x.com"],
            "exit": ["hola", "Luis", "salir"],
        },
        "generic": {
            "browse": ["hola", "1", "2", "3"],
            "advisor": ["hola", "4", "Quiero una cotización", "+51 999 888 777"],
        },
        "clinic": {
            "appointment": ["hola", "1", "María Pérez", "pediatría", "25/11 en la mañana", "maria@x.com"],
            "status": ["cita", "2", "CITA-123"],
        },
        "courier": {
            "tracking": ["envío", "PE123456789"],
        },
        "real_estate": {
            "project": ["hola", "1", "a", "80,000 - 120,000 USD", "ana@empresa.com"],
            "visit": ["hola", "visita", "Carlos Ruiz", "25/11 a las 4pm"],
        },
        "restaurant": {
            "delivery": ["hola", "2", "Ana", "2 pizzas familiares", "Av. Perú 456"],
            "reservation": ["hola", "3", "Luis", "4", "24/11 a las 8pm"],
        },
    }

    MAX_INPUT_LENGTH = 500

    def __init__(self, flow_name: Optional[str] = None) -> None:
        self.flow_name = flow_name or settings.flow.vertical
        self.flow = create_flow(self.flow_name)

    def _build_engine(self, client: httpx.AsyncClient) -> DialogueEngine:
        apis = build_collaborators(settings, client).apis
        collaborators = Collaborators(
            messenger=ConsoleMessenger(f"Bot:{self.flow_name}"),
            persistence=ConsoleSink("sheets"),
            notifier=ConsoleSink("email"),
            apis=apis,
        )
        return DialogueEngine(self.flow, collaborators)

    def _banner(self, title: str) -> None:
        print()
        print(f"{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  WHATSAPP LEAD BOT - {title}{RESET}")
        print(f"{BOLD}  Flow: {self.flow_name}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")

    async def _send(self, engine: DialogueEngine, text: str) -> None:
        print(f"\n{BLUE}[User] {RESET}{text}")
        await engine.respond(CONSOLE_IDENTITY, text)
        await engine.dispatcher.drain()
        session = engine.store.get(CONSOLE_IDENTITY)
        stage = session.stage if session else "(no session)"
        print(f"{DIM}  >> Stage: {stage}{RESET}")

    async def _run_scenario(self, scenario: str) -> None:
        steps = self.SCENARIOS.get(self.flow_name, {}).get(scenario)
        if not steps:
            print(f"{RED}Unknown scenario for {self.flow_name}: {scenario}{RESET}")
            return

        self._banner(f"Scenario: {scenario}")
        async with httpx.AsyncClient(timeout=settings.integrations.http_timeout_sec) as client:
            engine = self._build_engine(client)
            for step in steps:
                await self._send(engine, step)

        print(f"\n{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  Scenario '{scenario}' complete.{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")

    async def _run_interactive(self) -> None:
        self._banner("Console Demo")
        print(f"{YELLOW}  Type 'quit' to leave the demo{RESET}")
        async with httpx.AsyncClient(timeout=settings.integrations.http_timeout_sec) as client:
            engine = self._build_engine(client)
            while True:
                user_input = input(f"\n{BLUE}[User] {RESET}").strip()
                if not user_input:
                    continue
                if user_input.lower() in ("quit", "q"):
                    print(f"\n{DIM}Session ended.{RESET}")
                    return
                if len(user_input) > self.MAX_INPUT_LENGTH:
                    print(f"{RED}Message too long, keep it under {self.MAX_INPUT_LENGTH} characters.{RESET}")
                    continue
                await engine.respond(CONSOLE_IDENTITY, user_input)
                await engine.dispatcher.drain()

    def run_scenario(self, scenario: str) -> None:
        """Auto-play a pre-scripted scenario for demo purposes."""
        asyncio.run(self._run_scenario(scenario))

    def run(self) -> None:
        asyncio.run(self._run_interactive())


def main() -> None:
    parser = argparse.ArgumentParser(description="Offline console demo")
    parser.add_argument(
        "--flow",
        choices=get_registered_flows(),
        default=None,
        help="Vertical to chat with (defaults to BOT_VERTICAL)",
    )
    parser.add_argument(
        "--scenario",
        default=None,
        help="Auto-play a pre-scripted scenario instead of interactive mode",
    )
    args = parser.parse_args()

    session = ConsoleSession(args.flow)
    if args.scenario:
        session.run_scenario(args.scenario)
    else:
        session.run()


if __name__ == "__main__":
    main()
