"""
Generic business menu: catalogue link, PDF brochure, office location and
a hand-off to a human advisor.

Unlike the vertical flows, the menu keyword only rewinds to the main
menu; anything already collected for the advisor is kept.
"""

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

GREETINGS = ("hola", "buenas", "buenos días", "buenas tardes", "buenas noches")

MAIN_MENU = (
    "👋 ¡Hola! Soy el asistente virtual.\n\n"
    "¿Qué te gustaría hacer hoy?\n\n"
    "1️⃣ Ver catálogo de productos/servicios\n"
    "2️⃣ Descargar brochure en PDF\n"
    "3️⃣ Ver ubicación de la tienda/oficina\n"
    "4️⃣ Hablar con un asesor\n\n"
    "Responde con el *número* de la opción.\n"
    "En cualquier momento puedes escribir *menu* para volver aquí."
)


def build_generic_flow(config: AppConfig) -> FlowDefinition:
    business = config.business
    stages = [
        Stage(
            name="MAIN_MENU",
            kind=StageKind.MENU,
            prompt=MAIN_MENU,
            options=(Option(keys=GREETINGS, reply=MAIN_MENU),),
            next_stage="AWAIT_OPTION",
        ),
        Stage(
            name="AWAIT_OPTION",
            kind=StageKind.SELECT,
            prompt=MAIN_MENU,
            invalid_reply="No reconocí esa opción 🧐. Escribe *menu* para ver el menú de nuevo.",
            options=(
                Option(
                    keys=("1",),
                    media=(OutboundMessage.text(
                        f"📦 Aquí puedes ver nuestro catálogo completo: {business.catalog_url}"
                    ),),
                    reply="¿Quieres ver algo más? Escribe *menu* para volver al inicio.",
                ),
                Option(
                    keys=("2",),
                    media=(OutboundMessage.document(
                        business.brochure_url, "Brochure de servicios", "brochure-servicios.pdf"
                    ),),
                    reply=(
                        "📄 Te he enviado nuestro brochure en PDF. ¿Te ayudo con algo más? "
                        "Escribe *menu* para volver."
                    ),
                ),
                Option(
                    keys=("3",),
                    media=(OutboundMessage.location(
                        business.office_latitude,
                        business.office_longitude,
                        "Nuestra oficina principal",
                        "Estamos aquí. Puedes visitarnos con previa cita.",
                    ),),
                    reply="📍 Te he compartido nuestra ubicación. Si necesitas ayuda adicional, escribe *menu*.",
                ),
                Option(
                    keys=("4",),
                    next_stage="ADVISOR_NEED",
                    flow_tag="advisor",
                    reply=(
                        "👨‍💼 Te voy a derivar con un asesor humano.\n"
                        "Por favor, dime brevemente qué necesitas.\n\n"
                        "También puedes escribir *salir* para cerrar."
                    ),
                ),
            ),
        ),
        Stage(
            name="ADVISOR_NEED",
            kind=StageKind.COLLECT,
            prompt="Cuéntame brevemente qué necesitas.",
            slot="request",
            next_stage="ADVISOR_CONTACT",
            reply="Gracias. ¿A qué número o correo puede contactarte el asesor?",
        ),
        Stage(
            name="ADVISOR_CONTACT",
            kind=StageKind.COLLECT,
            prompt="¿A qué número o correo puede contactarte el asesor?",
            slot="contact",
            terminal=True,
            effects=(SideEffect.PERSIST, SideEffect.NOTIFY),
            validator=is_contact,
            reply="✅ Listo, un asesor te escribirá en breve. Escribe *menu* si necesitas algo más.",
        ),
    ]

    return FlowDefinition(
        vertical="generic",
        initial_stage="MAIN_MENU",
        stages={stage.name: stage for stage in stages},
        reset_clears_fields=False,
        reset_reply=MAIN_MENU,
        exit_reply="✅ Hemos cerrado la conversación. Cuando quieras retomar, escribe *hola* o *menu* 🙂",
        enrichment=EnrichmentFields(service="request", business="request"),
    )
