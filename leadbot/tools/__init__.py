"""External collaborators used by the dialogue engine."""

from dataclasses import dataclass, field
from typing import Optional

import httpx

from leadbot.config import AppConfig
from leadbot.tools.messenger import WhatsAppMessenger
from leadbot.tools.notifier import EmailNotifier
from leadbot.tools.sheets import SheetsSink
from leadbot.tools.vertical_api import VerticalApiClient


@dataclass
class Collaborators:
    """Everything the engine calls outside the process, bundled for injection."""
    messenger: WhatsAppMessenger
    persistence: SheetsSink
    notifier: EmailNotifier
    apis: dict[str, VerticalApiClient] = field(default_factory=dict)

    def api_for(self, vertical: str) -> Optional[VerticalApiClient]:
        return self.apis.get(vertical)


def build_collaborators(config: AppConfig, client: httpx.AsyncClient) -> Collaborators:
    """Wire the HTTP-backed collaborators from configuration."""
    urls = config.integrations
    return Collaborators(
        messenger=WhatsAppMessenger(config.whatsapp, client),
        persistence=SheetsSink(urls.sheets_webhook_url, client),
        notifier=EmailNotifier(urls.email_webhook_url, client),
        apis={
            "clinic": VerticalApiClient(
                "clinic",
                urls.clinic_api_url,
                client,
                create_path="/appointments",
                status_path="/appointments/{id}",
                mock_generated_id="CITA-MOCK-12345",
                status_default_ok=True,
                mock_status={
                    "status": "Pendiente de confirmación",
                    "date": "Por confirmar",
                    "doctor": "Por asignar",
                },
            ),
            "courier": VerticalApiClient(
                "courier",
                urls.courier_api_url,
                client,
                status_path="/tracking/{id}",
                mock_status={
                    "status": "En tránsito",
                    "updated_at": "Hoy",
                    "location": "Centro de distribución principal",
                    "lat": config.business.office_latitude,
                    "lng": config.business.office_longitude,
                },
            ),
            "real_estate": VerticalApiClient(
                "real_estate", urls.real_estate_api_url, client, create_path="/leads"
            ),
            "restaurant": VerticalApiClient(
                "restaurant", urls.restaurant_api_url, client, create_path="/pedidos"
            ),
        },
    )


__all__ = [
    "Collaborators",
    "build_collaborators",
    "WhatsAppMessenger",
    "SheetsSink",
    "EmailNotifier",
    "VerticalApiClient",
]
