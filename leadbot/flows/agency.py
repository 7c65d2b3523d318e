"""
Development-agency lead qualification flow.

Collects name, service interest, business, budget and contact, then
closes with a summary. This is the flow whose leads the enrichment
heuristics were designed for.
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
from leadbot.utils import is_contact

GREETINGS = ("hola", "buenas", "buenos días", "buenas tardes", "buenas noches")

SERVICE_CHOICES = {
    "1": "Página web / landing enfocada en ventas y presencia profesional.",
    "2": "Sistema a medida o SaaS multitenant para gestionar procesos de tu empresa.",
    "3": "Automatización de procesos e integraciones entre tus sistemas (APIs, bots, etc.).",
    "4": "Estrategia de marketing digital y presencia online para atraer más clientes.",
}

SERVICE_PROMPT = (
    "Cuéntame, ¿qué te interesa más?\n\n"
    "1️⃣ Crear o mejorar una *página web / landing*.\n"
    "2️⃣ Desarrollar un *sistema a medida* o *SaaS multitenant*.\n"
    "3️⃣ *Automatizar procesos* y conectar sistemas (APIs, integraciones).\n"
    "4️⃣ *Marketing digital* y presencia online.\n\n"
    "Responde con el *número* de la opción o descríbelo con tus palabras."
)

BUSINESS_PROMPT = (
    "Cuéntame un poco de tu negocio:\n"
    "¿En qué rubro estás y en qué país trabajas principalmente?"
)

BUDGET_PROMPT = (
    "Para proponerte algo realista, ¿en qué rango aproximado está tu *presupuesto* "
    "para este proyecto?\n\n"
    "Por ejemplo:\n"
    "• *Bajo:* quiero algo inicial, mínimo viable\n"
    "• *Medio:* busco algo sólido y escalable\n"
    "• *Alto:* quiero una solución completa, lista para crecer\n\n"
    "Puedes responder con el rango o con un monto aproximado."
)

CONTACT_PROMPT = (
    "Por último, ¿a qué *correo* o *WhatsApp* podemos enviarte una propuesta / "
    "agendar una reunión breve?\n\n"
    "Ejemplo: *correo@empresa.com* o *+51 999 999 999*"
)

SUMMARY = (
    "🧾 *Resumen de tu solicitud:*\n\n"
    "• Nombre: *{name}*\n"
    "• Interés: *{service}*\n"
    "• Negocio: *{business}*\n"
    "• Presupuesto: *{budget}*\n"
    "• Contacto: *{contact}*\n\n"
)


def build_agency_flow(config: AppConfig) -> FlowDefinition:
    agency = config.business.agency_name
    greeting = (
        f"👋 ¡Hola! Soy el asistente virtual de *{agency}*.\n\n"
        "Te ayudamos con:\n"
        "• Desarrollo web y landing pages\n"
        "• Sistemas empresariales y SaaS multitenant\n"
        "• Automatización y marketing digital\n\n"
        "Para comenzar, ¿cómo te llamas? 🙂"
    )
    welcome = (
        f"👋 ¡Bienvenido a *{agency}*!\n\n"
        "Antes de ayudarte, dime por favor tu *nombre* 🙂"
    )
    closing = (
        SUMMARY
        + "✅ ¡Listo! Con esa info podemos prepararte una propuesta a medida.\n\n"
        + f"Un especialista de *{agency}* te contactará en las próximas horas para "
        + "comentarte opciones claras y tiempos.\n\n"
        + "Si quieres seguir hablando por aquí, en cualquier momento puedes escribir "
        + "*menu* para ver de nuevo las opciones. 😊"
    )

    stages = [
        Stage(
            name="MAIN_MENU",
            kind=StageKind.MENU,
            prompt=welcome,
            options=(Option(keys=GREETINGS, reply=greeting),),
            next_stage="ASK_NAME",
        ),
        Stage(
            name="ASK_NAME",
            kind=StageKind.COLLECT,
            prompt="¿Cómo te llamas? 🙂",
            slot="name",
            next_stage="ASK_SERVICE",
            reply="¡Gracias, *{name}*! 👌\n\n" + SERVICE_PROMPT,
        ),
        Stage(
            name="ASK_SERVICE",
            kind=StageKind.COLLECT,
            prompt=SERVICE_PROMPT,
            slot="service",
            choices=SERVICE_CHOICES,
            next_stage="ASK_BUSINESS",
            reply=(
                "Perfecto, trabajamos mucho en ese tipo de proyectos 💼\n\n"
                "📌 Interés: *{service}*\n\n"
                "Ahora, " + BUSINESS_PROMPT[0].lower() + BUSINESS_PROMPT[1:]
            ),
        ),
        Stage(
            name="ASK_BUSINESS",
            kind=StageKind.COLLECT,
            prompt=BUSINESS_PROMPT,
            slot="business",
            next_stage="ASK_BUDGET",
            reply="Genial, gracias por el contexto 🙌\n\n" + BUDGET_PROMPT,
        ),
        Stage(
            name="ASK_BUDGET",
            kind=StageKind.COLLECT,
            prompt=BUDGET_PROMPT,
            slot="budget",
            next_stage="ASK_CONTACT",
            reply="Perfecto, con eso ya puedo dimensionar el tipo de solución 💡\n\n" + CONTACT_PROMPT,
        ),
        Stage(
            name="ASK_CONTACT",
            kind=StageKind.COLLECT,
            prompt=CONTACT_PROMPT,
            slot="contact",
            terminal=True,
            effects=(SideEffect.PERSIST, SideEffect.NOTIFY),
            validator=is_contact,
            invalid_reply="Ese dato no parece un correo o número válido. " + CONTACT_PROMPT,
            reply=closing,
        ),
    ]

    return FlowDefinition(
        vertical="agency",
        initial_stage="MAIN_MENU",
        stages={stage.name: stage for stage in stages},
        reset_clears_fields=True,
        reset_reply=(
            f"👋 ¡Hola! Soy el asistente virtual de *{agency}*.\n\n"
            "Escribe *hola* para comenzar tu solicitud 🙂"
        ),
        exit_reply="✅ He cancelado el flujo. Cuando quieras retomar, escribe *hola* o *menu* 🙂",
        enrichment=EnrichmentFields(service="service", business="business", budget="budget"),
    )
