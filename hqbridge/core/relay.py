"""Inbound relay: self-skip, duplicate suppression, gateway delivery."""

from __future__ import annotations

import time
from collections.abc import Iterable

from loguru import logger

from hqbridge.core.models import InboundEvent, RelayOutcome
from hqbridge.core.ports import DeliveryPort, DuplicateFilterPort
from hqbridge.gateway.errors import GatewayError
from hqbridge.telemetry.base import TelemetryPort
from hqbridge.utils.helpers import truncate

DEFAULT_MESSAGE_PREFIX = "[HQ Chat]"


def format_event_text(event: InboundEvent, prefix: str = DEFAULT_MESSAGE_PREFIX) -> str:
    """Render the line injected into the gateway session."""
    return f"{prefix} {event.sender}: {event.body}"


class HQRelay:
    """Relays HQ chat events into the gateway session, one delivery per event.

    Failed deliveries are reported, never retried.
    """

    def __init__(
        self,
        *,
        delivery: DeliveryPort,
        dedup: DuplicateFilterPort,
        telemetry: TelemetryPort | None = None,
        ignore_senders: Iterable[str] = ("op",),
        message_prefix: str = DEFAULT_MESSAGE_PREFIX,
    ) -> None:
        self._delivery = delivery
        self._dedup = dedup
        self._telemetry = telemetry
        self._ignore_senders = frozenset(ignore_senders)
        self._message_prefix = message_prefix

    async def handle(self, event: InboundEvent) -> RelayOutcome:
        if event.sender in self._ignore_senders:
            self._count("self", event.channel)
            return RelayOutcome.skip("self")

        if self._dedup.check_and_record(event.sender, event.body):
            logger.info(f"Dedup skip: {event.sender}: {truncate(event.body, 40)}")
            self._count("duplicate", event.channel)
            return RelayOutcome.skip("duplicate")

        logger.info(f"HQ message from {event.sender}: {truncate(event.body, 80)}")

        started = time.monotonic()
        try:
            await self._delivery.deliver(format_event_text(event, self._message_prefix))
        except GatewayError as e:
            logger.warning(f"Gateway delivery failed ({e.cause}): {e}")
            self._count("failed", event.channel)
            if self._telemetry is not None:
                self._telemetry.incr("gateway_failures_total", labels=(("cause", e.cause),))
            return RelayOutcome.failed(str(e), cause=e.cause)

        if self._telemetry is not None:
            self._telemetry.timing("gateway_delivery_seconds", time.monotonic() - started)
        logger.info("Delivered to gateway")
        self._count("delivered", event.channel)
        return RelayOutcome.delivered()

    async def aclose(self) -> None:
        """Drain deferred gateway closes."""
        await self._delivery.drain()

    def _count(self, outcome: str, channel: str) -> None:
        if self._telemetry is None:
            return
        self._telemetry.incr(
            "relay_events_total",
            labels=(("outcome", outcome), ("channel", channel)),
        )
