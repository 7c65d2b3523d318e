"""Sender-identity logging context for tracing one chat across modules.

Provides a sender-aware logger that attaches the WhatsApp identity being
served to every log message, so one user's conversation can be followed
through the webhook, the dialogue engine and the collaborators.

Usage:
    from leadbot.logging_context import get_sender_logger, set_sender_id

    set_sender_id("51999000111")
    logger = get_sender_logger(__name__)
    logger.info("Processing message")  # record.sender_id == "51999000111"
"""

import logging
from contextvars import ContextVar

_sender_id: ContextVar[str] = ContextVar("sender_id", default="NO_SENDER")


def set_sender_id(sender_id: str) -> None:
    """Set the sender identity for the current async context."""
    _sender_id.set(sender_id)


def get_sender_id() -> str:
    """Retrieve the current sender identity."""
    return _sender_id.get()


class SenderIdFilter(logging.Filter):
    """Injects sender_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.sender_id = _sender_id.get()  # type: ignore[attr-defined]
        return True


def get_sender_logger(name: str) -> logging.Logger:
    """Return a logger with the SenderIdFilter attached.

    The filter adds ``sender_id`` to each record so formatters can
    include ``%(sender_id)s`` in their format string.
    """
    logger = logging.getLogger(name)
    if not any(isinstance(f, SenderIdFilter) for f in logger.filters):
        logger.addFilter(SenderIdFilter())
    return logger
