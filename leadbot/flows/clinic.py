"""Clinic flow: book an appointment, check its status, location, advisor."""

from leadbot.config import AppConfig
from leadbot.conversation.state_machine import (
    FlowDefinition,
    Option,
    SideEffect,
    Stage,
    StageKind,
)
from leadbot.schemas.lead_schema import EnrichmentFields, ExternalResult
from leadbot.schemas.message_schema import OutboundMessage
from leadbot.utils import is_contact


def _pick(data: dict, *keys: str, default: str = "-") -> str:
    for key in keys:
        if data.get(key):
            return str(data[key])
    return default


def format_appointment_status(identifier: str, lookup: ExternalResult) -> list[OutboundMessage]:
    if not lookup.ok:
        return [OutboundMessage.text(
            "No pudimos encontrar tu cita con ese dato. "
            "Un asesor te ayudará a revisar manualmente."
        )]
    data = lookup.data
    return [OutboundMessage.text(
        "📋 Estado de tu cita:\n\n"
        f"Estado: {_pick(data, 'status', 'estado')}\n"
        f"Fecha: {_pick(data, 'date', 'fecha')}\n"
        f"Médico: {_pick(data, 'doctor', 'medico')}"
    )]


def build_clinic_flow(config: AppConfig) -> FlowDefinition:
    business = config.business
    menu = (
        f"🏥 *{business.clinic_name}*\n\n"
        "¿Qué deseas hacer?\n\n"
        "1️⃣ Pedir una cita\n"
        "2️⃣ Revisar estado de mi cita\n"
        "3️⃣ Ver ubicación de la clínica\n"
        "4️⃣ Hablar con un asesor\n\n"
        "Responde con un número.\n"
        "En cualquier momento puedes escribir *menu*."
    )

    stages = [
        Stage(name="MENU", kind=StageKind.MENU, prompt=menu, next_stage="WAIT_OPTION"),
        Stage(
            name="WAIT_OPTION",
            kind=StageKind.SELECT,
            prompt=menu,
            invalid_reply="Opción no válida. Escribe *menu* para ver opciones.",
            options=(
                Option(
                    keys=("1",),
                    next_stage="ASK_NAME",
                    flow_tag="appointment",
                    reply="Perfecto 🩺 ¿Cuál es tu nombre completo?",
                ),
                Option(
                    keys=("2",),
                    next_stage="ASK_APPOINTMENT_ID",
                    flow_tag="status",
                    reply="Por favor, indícame tu DNI o el código de cita que te enviamos.",
                ),
                Option(
                    keys=("3",),
                    media=(OutboundMessage.location(
                        business.office_latitude,
                        business.office_longitude,
                        business.clinic_name,
                        business.clinic_address,
                    ),),
                ),
                Option(
                    keys=("4",),
                    reply=(
                        "Un asesor de la clínica se pondrá en contacto contigo en breve. "
                        "Puedes dejar tu número o correo."
                    ),
                ),
            ),
        ),
        Stage(
            name="ASK_NAME",
            kind=StageKind.COLLECT,
            prompt="¿Cuál es tu nombre completo?",
            slot="name",
            next_stage="ASK_SPECIALTY",
        ),
        Stage(
            name="ASK_SPECIALTY",
            kind=StageKind.COLLECT,
            prompt=(
                "¿Para qué especialidad deseas la cita? "
                "(ej: cardiología, pediatría, medicina general)"
            ),
            slot="specialty",
            next_stage="ASK_DATE",
        ),
        Stage(
            name="ASK_DATE",
            kind=StageKind.COLLECT,
            prompt="¿Para qué día y rango de hora te gustaría la cita? (ej: 25/11 en la mañana)",
            slot="preferred_date",
            next_stage="ASK_CONTACT",
        ),
        Stage(
            name="ASK_CONTACT",
            kind=StageKind.COLLECT,
            prompt="Por último, ¿a qué número o correo podemos confirmar tu cita?",
            slot="contact",
            terminal=True,
            effects=(SideEffect.PERSIST, SideEffect.CREATE_EXTERNAL, SideEffect.NOTIFY),
            validator=is_contact,
            reply=(
                "✅ Hemos registrado tu solicitud de cita. Nuestro equipo te confirmará "
                "la disponibilidad y horario exacto."
            ),
        ),
        Stage(
            name="ASK_APPOINTMENT_ID",
            kind=StageKind.QUERY,
            prompt="Por favor, indícame tu DNI o el código de cita que te enviamos.",
            slot="appointment_id",
            formatter=format_appointment_status,
        ),
    ]

    return FlowDefinition(
        vertical="clinic",
        initial_stage="MENU",
        stages={stage.name: stage for stage in stages},
        reset_clears_fields=True,
        reset_reply=menu,
        exit_reply="✅ Hemos cerrado la conversación. Escribe *menu* cuando quieras volver 🏥",
        reset_keywords=frozenset({"hola", "cita"}),
        enrichment=EnrichmentFields(service="specialty"),
        external_id_field="appointment_code",
    )
