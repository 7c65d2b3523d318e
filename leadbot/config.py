"""
Centralized configuration with environment variable overrides.

Brand texts, integration endpoints, and flow behaviour flags are all
configurable here. Flow tables read from ``settings`` instead of
hardcoding URLs or names.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


def _safe_bool(env_var: str, default: str) -> bool:
    raw = os.getenv(env_var, default).strip().lower()
    if raw in ("1", "true", "yes", "on"):
        return True
    if raw in ("0", "false", "no", "off", ""):
        return False
    raise ValueError(f"Invalid boolean for {env_var}: {raw!r}")


@dataclass(frozen=True)
class BusinessConfig:
    """Brand names and public links shown to users in each vertical."""

    agency_name: str = os.getenv(
        "AGENCY_NAME", "Agencia de Desarrollo – Soluciones Empresariales"
    )
    clinic_name: str = os.getenv("CLINIC_NAME", "Clínica Salud Plus")
    clinic_address: str = os.getenv("CLINIC_ADDRESS", "Av. Salud 123, Lima")
    courier_name: str = os.getenv("COURIER_NAME", "Courier Express")
    real_estate_name: str = os.getenv("REAL_ESTATE_NAME", "Inmobiliaria Premium")
    restaurant_name: str = os.getenv("RESTAURANT_NAME", "Restaurante El Sabor")
    restaurant_address: str = os.getenv("RESTAURANT_ADDRESS", "Calle 123, Lima")
    catalog_url: str = os.getenv("CATALOG_URL", "https://tu-dominio.com/catalogo")
    brochure_url: str = os.getenv("BROCHURE_URL", "https://tu-dominio.com/brochure.pdf")
    real_estate_brochure_url: str = os.getenv(
        "REAL_ESTATE_BROCHURE_URL", "https://example.com/brochure-proyecto.pdf"
    )
    restaurant_menu_url: str = os.getenv(
        "RESTAURANT_MENU_URL", "https://turestaurante.com/menu"
    )
    office_latitude: float = _safe_float("OFFICE_LATITUDE", "-12.046374")
    office_longitude: float = _safe_float("OFFICE_LONGITUDE", "-77.042793")


@dataclass(frozen=True)
class WhatsAppConfig:
    """WhatsApp Cloud API credentials and webhook verification secret."""

    token: str = os.getenv("WHATSAPP_TOKEN", "")
    phone_number_id: str = os.getenv("WHATSAPP_PHONE_NUMBER_ID", "")
    verify_token: str = os.getenv("WEBHOOK_VERIFY_TOKEN", "")
    graph_api_version: str = os.getenv("GRAPH_API_VERSION", "v17.0")


@dataclass(frozen=True)
class IntegrationConfig:
    """External collaborator endpoints. Empty URLs switch the client to mock mode."""

    sheets_webhook_url: str = os.getenv("SHEETS_WEBHOOK_URL", "")
    email_webhook_url: str = os.getenv("EMAIL_WEBHOOK_URL", "")
    clinic_api_url: str = os.getenv("API_BASE_URL_CLINIC", "")
    courier_api_url: str = os.getenv("API_BASE_URL_COURIER", "")
    real_estate_api_url: str = os.getenv("API_BASE_URL_INMO", "")
    restaurant_api_url: str = os.getenv("API_BASE_URL_RESTAURANT", "")
    http_timeout_sec: float = _safe_float("HTTP_TIMEOUT_SEC", "10.0")


@dataclass(frozen=True)
class FlowSettings:
    """Which vertical this process serves and how its flow behaves."""

    vertical: str = os.getenv("BOT_VERTICAL", "agency")
    strict_validation: bool = _safe_bool("STRICT_VALIDATION", "false")
    channel_tag: str = os.getenv("CHANNEL_TAG", "whatsapp")
    source_tag: str = os.getenv("SOURCE_TAG", "bot_agencia_desarrollo")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    business: BusinessConfig = field(default_factory=BusinessConfig)
    whatsapp: WhatsAppConfig = field(default_factory=WhatsAppConfig)
    integrations: IntegrationConfig = field(default_factory=IntegrationConfig)
    flow: FlowSettings = field(default_factory=FlowSettings)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = _safe_int("PORT", "3000")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if config.integrations.http_timeout_sec <= 0:
        raise ValueError(
            f"HTTP_TIMEOUT_SEC must be > 0, got {config.integrations.http_timeout_sec}"
        )
    if not 1 <= config.port <= 65535:
        raise ValueError(f"PORT must be between 1 and 65535, got {config.port}")
    if not -90.0 <= config.business.office_latitude <= 90.0:
        raise ValueError(
            f"OFFICE_LATITUDE must be between -90 and 90, got {config.business.office_latitude}"
        )
    if not -180.0 <= config.business.office_longitude <= 180.0:
        raise ValueError(
            "OFFICE_LONGITUDE must be between -180 and 180, "
            f"got {config.business.office_longitude}"
        )
    if not config.flow.vertical.strip():
        raise ValueError("BOT_VERTICAL must not be empty")
    if not config.flow.channel_tag.strip():
        raise ValueError("CHANNEL_TAG must not be empty")


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger.info("Configuration loaded for vertical '%s'", config.flow.vertical)
    return config


# Singleton instance
settings = load_config()
