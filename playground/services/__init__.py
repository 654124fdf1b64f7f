"""Playground services package."""

from playground.services.gateway import ApiGatewayClient, GatewayError
from playground.services.outcome import Outcome
from playground.services.session_controller import (
    BusyFlag,
    Channel,
    WorkspaceSessionController,
)

__all__ = [
    "ApiGatewayClient",
    "BusyFlag",
    "Channel",
    "GatewayError",
    "Outcome",
    "WorkspaceSessionController",
]
