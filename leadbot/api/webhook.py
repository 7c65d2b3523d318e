"""
WhatsApp Cloud webhook service.

Exposes the verification handshake and the inbound message endpoint.
Inbound messages are acknowledged immediately; the dialogue engine runs
in a background task so slow collaborators never delay the 200 the
platform waits for.

Usage:
    app = create_app()
    uvicorn.run(app, host=settings.host, port=settings.port)
"""

from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import BackgroundTasks, FastAPI, Query, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from pydantic import ValidationError

from leadbot.config import AppConfig, settings
from leadbot.conversation.engine import DialogueEngine
from leadbot.flows import create_flow
from leadbot.logging_context import get_sender_logger, set_sender_id
from leadbot.schemas.webhook_schema import InboundMessage, WebhookPayload
from leadbot.tools import build_collaborators

logger = get_sender_logger(__name__)

IGNORED = {"status": "ignored"}
ACCEPTED = {"status": "accepted"}


async def process_message(engine: DialogueEngine, message: InboundMessage) -> None:
    """Run one inbound message through the engine; errors stay with this sender."""
    set_sender_id(message.sender)
    try:
        await engine.respond(message.sender, message.text)
    except Exception:
        logger.exception("Failed to process message from %s", message.sender)


def create_app(
    engine: Optional[DialogueEngine] = None, config: Optional[AppConfig] = None
) -> FastAPI:
    """Build the webhook app.

    When ``engine`` is None the lifespan builds one for the configured
    vertical, backed by a shared ``httpx.AsyncClient``.
    """
    config = config or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client: Optional[httpx.AsyncClient] = None
        if app.state.engine is None:
            client = httpx.AsyncClient(timeout=config.integrations.http_timeout_sec)
            app.state.engine = DialogueEngine(
                create_flow(config.flow.vertical, config),
                build_collaborators(config, client),
                flow_settings=config.flow,
            )
        logger.info("Webhook service ready for vertical '%s'", app.state.engine.flow.vertical)
        try:
            yield
        finally:
            await app.state.engine.dispatcher.drain()
            if client is not None:
                await client.aclose()

    app = FastAPI(title="WhatsApp Lead Bot", lifespan=lifespan)
    app.state.engine = engine

    @app.get("/", response_class=PlainTextResponse)
    async def root() -> str:
        vertical = app.state.engine.flow.vertical if app.state.engine else config.flow.vertical
        return f"Chatbot {vertical} listo 🚀"

    @app.get("/webhook")
    async def verify(
        mode: Optional[str] = Query(None, alias="hub.mode"),
        token: Optional[str] = Query(None, alias="hub.verify_token"),
        challenge: str = Query("", alias="hub.challenge"),
    ) -> Response:
        if not mode or not token:
            return Response(status_code=404)
        if mode == "subscribe" and token == config.whatsapp.verify_token:
            logger.info("Webhook verified")
            return PlainTextResponse(challenge, status_code=200)
        logger.warning("Webhook verification rejected (mode=%s)", mode)
        return Response(status_code=403)

    @app.post("/webhook")
    async def receive(request: Request, background: BackgroundTasks) -> JSONResponse:
        try:
            try:
                payload = WebhookPayload.model_validate(await request.json())
            except (ValueError, ValidationError) as exc:
                logger.warning("Ignoring malformed webhook payload: %s", exc)
                return JSONResponse(IGNORED)

            message = payload.first_message()
            if message is None:
                return JSONResponse(IGNORED)

            set_sender_id(message.sender)
            logger.info("Inbound message from %s", message.sender)
            background.add_task(process_message, app.state.engine, message)
            return JSONResponse(ACCEPTED)
        except Exception:
            logger.exception("Webhook handler failed")
            return JSONResponse({"status": "error"}, status_code=500)

    return app
