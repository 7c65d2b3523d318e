"""Real-estate flow: project interest leads and sales-room visits."""

from leadbot.config import AppConfig
from leadbot.conversation.state_machine import (
    FlowDefinition,
    Option,
    SideEffect,
    Stage,
    StageKind,
)
from leadbot.schemas.lead_schema import EnrichmentFields
from leadbot.schemas.message_schema import OutboundMessage
from leadbot.utils import is_contact

PROJECT_TYPES = {"a": "Departamentos", "b": "Oficinas", "c": "Terrenos"}


def build_real_estate_flow(config: AppConfig) -> FlowDefinition:
    business = config.business
    menu = (
        f"🏢 *Bienvenido a {business.real_estate_name}*\n\n"
        "¿En qué podemos ayudarte hoy?\n\n"
        "1️⃣ Información de proyectos\n"
        "2️⃣ Recibir brochure en PDF\n"
        "3️⃣ Agendar visita a sala de ventas\n"
        "4️⃣ Hablar con un asesor\n\n"
        "Responde con un número."
    )

    stages = [
        Stage(name="MENU", kind=StageKind.MENU, prompt=menu, next_stage="WAIT_OPTION"),
        Stage(
            name="WAIT_OPTION",
            kind=StageKind.SELECT,
            prompt=menu,
            invalid_reply="Opción no válida. Escribe *menu* para ver el menú.",
            options=(
                Option(
                    keys=("1",),
                    next_stage="ASK_PROJECT",
                    flow_tag="project",
                    reply=(
                        "¿Sobre qué tipo de proyecto te interesa saber?\n\n"
                        "a) Departamentos\nb) Oficinas\nc) Terrenos\n\n"
                        "Responde con *a*, *b* o *c*."
                    ),
                ),
                Option(
                    keys=("2",),
                    media=(OutboundMessage.document(
                        business.real_estate_brochure_url,
                        "Brochure general de proyectos inmobiliarios",
                        "brochure-proyectos.pdf",
                    ),),
                    reply=(
                        "📄 Te envié el brochure en PDF. Si quieres una propuesta "
                        "personalizada, escribe *visita*."
                    ),
                ),
                Option(
                    keys=("3", "visita"),
                    next_stage="ASK_NAME",
                    flow_tag="visit",
                    reply="Perfecto 🗓 ¿Cuál es tu nombre completo para la visita?",
                ),
                Option(
                    keys=("4",),
                    reply=(
                        "👩‍💼 Un asesor comercial se pondrá en contacto contigo pronto. "
                        "Si gustas, comparte tu correo o teléfono."
                    ),
                ),
            ),
        ),
        Stage(
            name="ASK_PROJECT",
            kind=StageKind.COLLECT,
            prompt="Responde con *a*, *b* o *c*.",
            slot="project_type",
            choices=PROJECT_TYPES,
            next_stage="ASK_BUDGET",
        ),
        Stage(
            name="ASK_BUDGET",
            kind=StageKind.COLLECT,
            prompt="¿Cuál es tu rango de presupuesto aproximado? (ej: 80,000 - 120,000 USD)",
            slot="budget",
            next_stage="ASK_CONTACT",
        ),
        Stage(
            name="ASK_CONTACT",
            kind=StageKind.COLLECT,
            prompt=(
                "Perfecto. ¿A qué correo o número podemos enviarte información "
                "detallada y opciones?"
            ),
            slot="contact",
            terminal=True,
            effects=(SideEffect.PERSIST, SideEffect.CREATE_EXTERNAL),
            validator=is_contact,
            reply=(
                "¡Gracias! Hemos registrado tu interés y un asesor te enviará "
                "información detallada del proyecto. 🏢"
            ),
        ),
        Stage(
            name="ASK_NAME",
            kind=StageKind.COLLECT,
            prompt="¿Cuál es tu nombre completo para la visita?",
            slot="name",
            next_stage="ASK_VISIT_DATETIME",
        ),
        Stage(
            name="ASK_VISIT_DATETIME",
            kind=StageKind.COLLECT,
            prompt="¿Para qué día y hora aproximada deseas la visita? (ej: 25/11 a las 4pm)",
            slot="visit_datetime",
            terminal=True,
            effects=(SideEffect.PERSIST, SideEffect.CREATE_EXTERNAL),
            reply="¡Visita registrada! Nuestro equipo confirmará la cita contigo. 🏢",
        ),
    ]

    return FlowDefinition(
        vertical="real_estate",
        initial_stage="MENU",
        stages={stage.name: stage for stage in stages},
        reset_clears_fields=True,
        reset_reply=menu,
        exit_reply="✅ Hemos cerrado la conversación. Escribe *menu* cuando quieras volver 🏢",
        reset_keywords=frozenset({"hola", "proyecto"}),
        enrichment=EnrichmentFields(service="project_type", budget="budget"),
    )
