"""Application bootstrap and runtime wiring for the relay."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from loguru import logger

from hqbridge.core.dedup import Clock, DedupCache
from hqbridge.core.relay import HQRelay
from hqbridge.gateway.client import ConnectFn, GatewaySessionClient
from hqbridge.gateway.protocol import SessionDescriptor
from hqbridge.telemetry import InMemoryTelemetry, PrometheusTelemetry

if TYPE_CHECKING:
    from hqbridge.config.schema import Config
    from hqbridge.telemetry.base import TelemetryPort


@dataclass
class RelayRuntime:
    """Long-lived objects shared by every inbound request."""

    config: "Config"
    relay: HQRelay
    client: GatewaySessionClient
    dedup: DedupCache
    telemetry: "TelemetryPort"

    async def aclose(self) -> None:
        pending = self.client.pending
        if pending:
            logger.info(f"Waiting for {pending} gateway connection(s) to close")
        await self.relay.aclose()


def build_telemetry(config: "Config") -> "TelemetryPort":
    if config.telemetry.backend == "prometheus":
        return PrometheusTelemetry()
    return InMemoryTelemetry()


def build_gateway_client(config: "Config", *, connect: ConnectFn | None = None) -> GatewaySessionClient:
    """Create the per-message gateway client from config. Fails fast without a token."""
    config.require_token()
    return GatewaySessionClient(
        SessionDescriptor.from_config(config.gateway),
        handshake_timeout_seconds=config.gateway.handshake_timeout_s,
        linger_seconds=config.gateway.linger_s,
        max_payload_bytes=config.gateway.max_payload_bytes,
        connect=connect,
    )


def build_relay_runtime(
    config: "Config",
    *,
    telemetry: "TelemetryPort | None" = None,
    clock: Clock | None = None,
    connect: ConnectFn | None = None,
) -> RelayRuntime:
    """Compose dedup cache, gateway client and relay around one config."""
    client = build_gateway_client(config, connect=connect)
    dedup = DedupCache(window_seconds=config.dedup.window_s, clock=clock)
    telemetry = telemetry or build_telemetry(config)
    relay = HQRelay(
        delivery=client,
        dedup=dedup,
        telemetry=telemetry,
        ignore_senders=config.webhook.ignore_senders,
        message_prefix=config.webhook.message_prefix,
    )
    return RelayRuntime(
        config=config,
        relay=relay,
        client=client,
        dedup=dedup,
        telemetry=telemetry,
    )
