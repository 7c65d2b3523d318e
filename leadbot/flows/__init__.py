from leadbot.flows.registry import (
    UnknownFlowError,
    create_flow,
    get_flow,
    get_registered_flows,
    register_flow,
)

__all__ = [
    "UnknownFlowError",
    "create_flow",
    "get_flow",
    "get_registered_flows",
    "register_flow",
]
