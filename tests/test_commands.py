"""Tests for the global exit/reset keyword interceptor."""

import pytest

from leadbot.conversation.commands import (
    EXIT_KEYWORDS,
    RESET_KEYWORDS,
    Command,
    GlobalCommandInterceptor,
)


@pytest.fixture
def interceptor():
    return GlobalCommandInterceptor()


class TestInterceptor:
    @pytest.mark.parametrize("word", sorted(EXIT_KEYWORDS))
    def test_exit_keywords(self, interceptor, word):
        assert interceptor.intercept(word) == Command.EXIT

    @pytest.mark.parametrize("word", sorted(RESET_KEYWORDS))
    def test_reset_keywords(self, interceptor, word):
        assert interceptor.intercept(word) == Command.RESET

    def test_normalizes_case_and_whitespace(self, interceptor):
        assert interceptor.intercept("  SALIR ") == Command.EXIT
        assert interceptor.intercept("Menú") == Command.RESET

    def test_ordinary_text_passes_through(self, interceptor):
        assert interceptor.intercept("quiero salir a cenar") is None
        assert interceptor.intercept("hola") is None
        assert interceptor.intercept("") is None

    def test_extra_reset_keywords(self):
        interceptor = GlobalCommandInterceptor(extra_reset_keywords=("hola", "Cita"))
        assert interceptor.intercept("HOLA") == Command.RESET
        assert interceptor.intercept("cita") == Command.RESET
        assert interceptor.intercept("menu") == Command.RESET

    def test_exit_wins_over_reset(self):
        interceptor = GlobalCommandInterceptor(extra_reset_keywords=("salir",))
        assert interceptor.intercept("salir") == Command.EXIT
