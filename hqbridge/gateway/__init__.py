"""Gateway session protocol bridge."""

from hqbridge.gateway.client import DeliveryPhase, DeliveryReceipt, GatewaySessionClient
from hqbridge.gateway.errors import (
    GatewayConnectionError,
    GatewayError,
    GatewayProtocolError,
    GatewayTimeoutError,
)
from hqbridge.gateway.protocol import SessionDescriptor

__all__ = [
    "DeliveryPhase",
    "DeliveryReceipt",
    "GatewayConnectionError",
    "GatewayError",
    "GatewayProtocolError",
    "GatewaySessionClient",
    "GatewayTimeoutError",
    "SessionDescriptor",
]
