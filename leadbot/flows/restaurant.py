"""Restaurant flow: digital menu, delivery orders, table reservations."""

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


def build_restaurant_flow(config: AppConfig) -> FlowDefinition:
    business = config.business
    menu = (
        f"🍽 *Bienvenido a {business.restaurant_name}*\n\n"
        "¿Qué deseas hacer hoy?\n\n"
        "1️⃣ Ver *menú digital*\n"
        "2️⃣ Hacer un *pedido para delivery*\n"
        "3️⃣ Reservar una *mesa*\n"
        "4️⃣ Ver nuestra *ubicación*\n"
        "5️⃣ Hablar con un asesor humano\n\n"
        "Responde un número.\n"
        "Escribe *menu* para volver aquí en cualquier momento."
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
                    reply=f"📲 Aquí tienes nuestro menú digital:\n{business.restaurant_menu_url}",
                ),
                Option(
                    keys=("2",),
                    next_stage="DELIVERY_NAME",
                    flow_tag="delivery",
                    reply="Perfecto 🍕 ¿A nombre de quién será el pedido?",
                ),
                Option(
                    keys=("3",),
                    next_stage="RESERVATION_NAME",
                    flow_tag="reservation",
                    reply="Genial 🪑 ¿A nombre de quién será la reserva?",
                ),
                Option(
                    keys=("4",),
                    media=(OutboundMessage.location(
                        business.office_latitude,
                        business.office_longitude,
                        business.restaurant_name,
                        business.restaurant_address,
                    ),),
                ),
                Option(
                    keys=("5",),
                    reply="👨‍🍳 Un asesor te contactará pronto. Gracias por escribirnos.",
                ),
            ),
        ),
        Stage(
            name="DELIVERY_NAME",
            kind=StageKind.COLLECT,
            prompt="¿A nombre de quién será el pedido?",
            slot="name",
            next_stage="DELIVERY_ORDER",
        ),
        Stage(
            name="DELIVERY_ORDER",
            kind=StageKind.COLLECT,
            prompt="¿Qué deseas pedir? 🍔🍟🍕",
            slot="order",
            next_stage="DELIVERY_ADDRESS",
        ),
        Stage(
            name="DELIVERY_ADDRESS",
            kind=StageKind.COLLECT,
            prompt="Perfecto. ¿Cuál es tu dirección de entrega? 🏠 (calle, número, referencia)",
            slot="address",
            terminal=True,
            effects=(SideEffect.PERSIST, SideEffect.CREATE_EXTERNAL),
            reply=(
                "¡Listo! Tu pedido está siendo procesado 🚀\n"
                "Te confirmaremos el tiempo de entrega por este medio."
            ),
        ),
        Stage(
            name="RESERVATION_NAME",
            kind=StageKind.COLLECT,
            prompt="¿A nombre de quién será la reserva?",
            slot="name",
            next_stage="RESERVATION_PARTY_SIZE",
        ),
        Stage(
            name="RESERVATION_PARTY_SIZE",
            kind=StageKind.COLLECT,
            prompt="¿Para cuántas personas será la reserva? 👨‍👩‍👧‍👦",
            slot="party_size",
            next_stage="RESERVATION_DATETIME",
        ),
        Stage(
            name="RESERVATION_DATETIME",
            kind=StageKind.COLLECT,
            prompt="¿Para qué día y hora deseas reservar? (ejemplo: 24/11 a las 8pm) 📅",
            slot="reservation_datetime",
            terminal=True,
            effects=(SideEffect.PERSIST,),
            reply="¡Reserva registrada! 🪑 Nuestro equipo la confirmará en breve por este mismo chat.",
        ),
    ]

    return FlowDefinition(
        vertical="restaurant",
        initial_stage="MENU",
        stages={stage.name: stage for stage in stages},
        reset_clears_fields=True,
        reset_reply=menu,
        exit_reply="✅ Hemos cerrado la conversación. Escribe *menu* cuando quieras volver 🍽",
        enrichment=EnrichmentFields(service="order"),
    )
