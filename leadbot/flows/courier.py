"""Courier flow: a single tracking lookup, no lead is produced."""

from typing import Any, Optional

from leadbot.config import AppConfig
from leadbot.conversation.state_machine import FlowDefinition, Stage, StageKind
from leadbot.schemas.lead_schema import ExternalResult
from leadbot.schemas.message_schema import OutboundMessage


def _coordinate(value: Any) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def format_tracking_status(code: str, lookup: ExternalResult) -> list[OutboundMessage]:
    if not lookup.ok:
        return [OutboundMessage.text(
            "No pudimos encontrar un envío con ese código. "
            "Verifica el número o intenta más tarde."
        )]
    data = lookup.data
    status = data.get("status") or data.get("estado") or "-"
    updated = data.get("updated_at") or data.get("ultima_actualizacion") or "-"
    location = data.get("location") or data.get("ubicacion") or "-"
    messages = [OutboundMessage.text(
        f"📦 Estado de tu envío ({code}):\n\n"
        f"Estado: {status}\n"
        f"Última actualización: {updated}\n"
        f"Ubicación: {location}"
    )]

    lat, lng = _coordinate(data.get("lat")), _coordinate(data.get("lng"))
    if lat is not None and lng is not None:
        messages.append(
            OutboundMessage.location(lat, lng, "Última ubicación registrada", str(location))
        )
    return messages


def build_courier_flow(config: AppConfig) -> FlowDefinition:
    welcome = (
        f"🚚 *Bienvenido a {config.business.courier_name}*\n\n"
        "Por favor, envíame tu *código de seguimiento* para revisar el estado de tu envío."
    )
    stages = [
        Stage(
            name="ASK_CODE",
            kind=StageKind.QUERY,
            prompt=welcome,
            slot="tracking_code",
            formatter=format_tracking_status,
        ),
    ]
    return FlowDefinition(
        vertical="courier",
        initial_stage="ASK_CODE",
        stages={stage.name: stage for stage in stages},
        reset_clears_fields=True,
        reset_reply=welcome,
        exit_reply="✅ Consulta cancelada. Escribe *envío* cuando quieras rastrear otro paquete 🚚",
        reset_keywords=frozenset({"hola", "envio", "envío"}),
        audit_queries=True,
    )
