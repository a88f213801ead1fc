"""Prometheus metrics backend for hqbridge.

Metrics live in a per-instance registry and are rendered by the webhook
API's ``/metrics`` route.

Usage:
    telemetry = PrometheusTelemetry()
    telemetry.incr("relay_events_total", labels=(("outcome", "delivered"), ("channel", "hq")))
    telemetry.timing("gateway_delivery_seconds", 0.42)
"""

from __future__ import annotations

from loguru import logger
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

METRIC_PREFIX = "hqbridge_"


class PrometheusTelemetry:
    """Prometheus-backed telemetry.

    Supports counters, gauges and timings. Unknown metric names are created on
    first use with the label names of that first call.
    """

    content_type = CONTENT_TYPE_LATEST

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self._registry = registry or CollectorRegistry()
        self._metrics: dict[str, Counter | Gauge | Histogram] = {}
        self._register_standard_metrics()

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry

    def _register_standard_metrics(self) -> None:
        self._metrics["relay_events_total"] = Counter(
            f"{METRIC_PREFIX}relay_events_total",
            "Inbound webhook events by outcome",
            labelnames=["outcome", "channel"],  # outcome=delivered/self/duplicate/failed
            registry=self._registry,
        )
        self._metrics["gateway_failures_total"] = Counter(
            f"{METRIC_PREFIX}gateway_failures_total",
            "Failed gateway deliveries by cause",
            labelnames=["cause"],
            registry=self._registry,
        )
        self._metrics["gateway_delivery_seconds"] = Histogram(
            f"{METRIC_PREFIX}gateway_delivery_seconds",
            "Time from connect to chat.send written",
            buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 15.0],
            registry=self._registry,
        )
        self._metrics["gateway_pending_closes"] = Gauge(
            f"{METRIC_PREFIX}gateway_pending_closes",
            "Gateway sockets waiting for their deferred close",
            registry=self._registry,
        )
        logger.debug("Prometheus telemetry registered standard metrics")

    def incr(self, name: str, value: int = 1, labels: tuple[tuple[str, str], ...] = ()) -> None:
        """Increase a named counter."""
        metric = self._metrics.get(name)
        if metric is None:
            metric = Counter(
                f"{METRIC_PREFIX}{name}",
                f"Counter: {name}",
                labelnames=[k for k, _ in labels],
                registry=self._registry,
            )
            self._metrics[name] = metric

        if labels:
            metric.labels(**dict(labels)).inc(value)
        else:
            metric.inc(value)

    def gauge(self, name: str, value: float, labels: tuple[tuple[str, str], ...] = ()) -> None:
        """Set a gauge value."""
        metric = self._metrics.get(name)
        if metric is None:
            metric = Gauge(
                f"{METRIC_PREFIX}{name}",
                f"Gauge: {name}",
                labelnames=[k for k, _ in labels],
                registry=self._registry,
            )
            self._metrics[name] = metric

        if labels:
            metric.labels(**dict(labels)).set(value)
        else:
            metric.set(value)

    def timing(
        self, name: str, value: float, labels: tuple[tuple[str, str], ...] = ()
    ) -> None:
        """Record timing in seconds as a histogram observation."""
        metric = self._metrics.get(name)
        if metric is None:
            metric = Histogram(
                f"{METRIC_PREFIX}{name}",
                f"Histogram: {name}",
                labelnames=[k for k, _ in labels],
                registry=self._registry,
            )
            self._metrics[name] = metric

        if labels:
            metric.labels(**dict(labels)).observe(value)
        else:
            metric.observe(value)

    def render(self) -> bytes:
        """Exposition-format snapshot of the registry."""
        return generate_latest(self._registry)
