"""
Flow registry: verticals are resolved by name at runtime.

Flow modules never import each other or the engine; each registers a
factory here that builds its ``FlowDefinition`` from configuration.
Building a flow validates its table, so a broken table fails at
startup instead of mid-conversation.
"""

import logging
from typing import Callable, Optional

from leadbot.config import AppConfig, settings
from leadbot.conversation.state_machine import FlowDefinition

logger = logging.getLogger(__name__)

FlowFactory = Callable[[AppConfig], FlowDefinition]

_FLOW_REGISTRY: dict[str, FlowFactory] = {}


class UnknownFlowError(KeyError):
    """Raised when resolving a vertical nobody registered."""


def register_flow(name: str, factory: FlowFactory) -> None:
    """Register a flow factory by vertical name."""
    _FLOW_REGISTRY[name] = factory
    logger.debug("Flow registered: %s", name)


def create_flow(name: str, config: Optional[AppConfig] = None) -> FlowDefinition:
    """Build the flow registered under ``name``.

    Raises:
        UnknownFlowError: If the vertical is not registered.
        FlowDefinitionError: If the flow table is inconsistent.
    """
    if name not in _FLOW_REGISTRY:
        registered = list(_FLOW_REGISTRY.keys())
        raise UnknownFlowError(f"Flow '{name}' not registered. Available: {registered}")
    return _FLOW_REGISTRY[name](config or settings)


get_flow = create_flow


def get_registered_flows() -> list[str]:
    """Return names of all registered flows."""
    return list(_FLOW_REGISTRY.keys())


def _auto_register() -> None:
    """Auto-register all built-in verticals. Called once at import time."""
    from leadbot.flows.agency import build_agency_flow
    from leadbot.flows.clinic import build_clinic_flow
    from leadbot.flows.courier import build_courier_flow
    from leadbot.flows.generic import build_generic_flow
    from leadbot.flows.real_estate import build_real_estate_flow
    from leadbot.flows.restaurant import build_restaurant_flow

    register_flow("agency", build_agency_flow)
    register_flow("generic", build_generic_flow)
    register_flow("clinic", build_clinic_flow)
    register_flow("courier", build_courier_flow)
    register_flow("real_estate", build_real_estate_flow)
    register_flow("restaurant", build_restaurant_flow)


_auto_register()
