"""Gateway delivery failures."""

from __future__ import annotations


class GatewayError(RuntimeError):
    """A single delivery attempt ended in the Failed state."""

    def __init__(self, message: str, *, cause: str) -> None:
        super().__init__(message)
        self.cause = cause


class GatewayConnectionError(GatewayError):
    """Transport failed to open, errored, or closed before the delivery resolved."""

    CONNECT = "connection error"
    TRANSPORT = "transport error"
    CLOSED = "closed prematurely"


class GatewayProtocolError(GatewayError):
    """Gateway answered a request with ``ok=false``."""

    def __init__(self, message: str) -> None:
        super().__init__(message, cause="protocol error")


class GatewayTimeoutError(GatewayError):
    """Handshake and send did not complete before the deadline."""

    def __init__(self, timeout_seconds: float) -> None:
        super().__init__(f"timeout after {timeout_seconds:.1f}s", cause="timeout")
        self.timeout_seconds = timeout_seconds
