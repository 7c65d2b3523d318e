"""
WhatsApp lead bot entry point.

Serves the webhook for the vertical selected by ``BOT_VERTICAL`` or
starts the offline console demo for development.

Usage:
    Webhook server: python main.py
    Console mode:   python main.py console
"""

import logging
import sys

from leadbot.config import settings

logger = logging.getLogger(__name__)


def _run_server_mode() -> None:
    """Start the FastAPI webhook under uvicorn (requires WhatsApp credentials)."""
    import uvicorn

    from leadbot.api.webhook import create_app

    if not settings.whatsapp.token or not settings.whatsapp.phone_number_id:
        logger.warning("WhatsApp credentials missing; replies will not be delivered")
    logger.info(
        "Starting %s bot on %s:%d", settings.flow.vertical, settings.host, settings.port
    )
    uvicorn.run(create_app(), host=settings.host, port=settings.port)


def _run_console_mode() -> None:
    """Start the offline console demo (no credentials required)."""
    from console_demo import ConsoleSession

    session = ConsoleSession()
    session.run()


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == "console":
        _run_console_mode()
    else:
        _run_server_mode()
