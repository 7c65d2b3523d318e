"""
Universal keywords handled before any stage-specific parsing.

A user can always leave or start over, whatever stage they are in.
"""

import logging
from enum import Enum
from typing import Iterable, Optional

from leadbot.utils import normalize_input

logger = logging.getLogger(__name__)

EXIT_KEYWORDS = frozenset({"salir", "cancelar", "exit"})
RESET_KEYWORDS = frozenset({"menu", "menú", "0", "inicio"})


class Command(str, Enum):
    EXIT = "exit"
    RESET = "reset"


class GlobalCommandInterceptor:
    """Classifies raw input as EXIT, RESET or nothing.

    Exit keywords win over reset keywords. Flows may add their own
    entry words (e.g. ``hola`` for the clinic) to the reset set.
    """

    def __init__(
        self,
        extra_reset_keywords: Iterable[str] = (),
        exit_keywords: Iterable[str] = EXIT_KEYWORDS,
        reset_keywords: Iterable[str] = RESET_KEYWORDS,
    ) -> None:
        self.exit_keywords = frozenset(normalize_input(k) for k in exit_keywords)
        self.reset_keywords = frozenset(
            normalize_input(k) for k in (*reset_keywords, *extra_reset_keywords)
        )

    def intercept(self, raw_input: str) -> Optional[Command]:
        normalized = normalize_input(raw_input)
        if normalized in self.exit_keywords:
            return Command.EXIT
        if normalized in self.reset_keywords:
            return Command.RESET
        return None
