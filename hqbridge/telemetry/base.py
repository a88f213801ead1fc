"""Metrics port shared by the relay, the webhook and the gateway client."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

type Labels = tuple[tuple[str, str], ...]


@runtime_checkable
class TelemetryPort(Protocol):
    """Sink for relay metrics.

    Series used by hqbridge:

    - ``relay_events_total{outcome, channel}`` counter
    - ``gateway_failures_total{cause}`` counter
    - ``gateway_delivery_seconds`` timing
    - ``gateway_pending_closes`` gauge
    """

    def incr(self, name: str, value: int = 1, labels: Labels = ()) -> None: ...

    def gauge(self, name: str, value: float, labels: Labels = ()) -> None: ...

    def timing(self, name: str, value: float, labels: Labels = ()) -> None:
        """Record a duration in seconds."""
