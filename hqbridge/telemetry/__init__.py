"""Telemetry backends for hqbridge.

Provides both in-memory (for testing) and Prometheus (for production) backends.
"""

from hqbridge.telemetry.base import TelemetryPort
from hqbridge.telemetry.inmemory import InMemoryTelemetry
from hqbridge.telemetry.prometheus import PrometheusTelemetry

__all__ = [
    "TelemetryPort",
    "InMemoryTelemetry",
    "PrometheusTelemetry",
]
