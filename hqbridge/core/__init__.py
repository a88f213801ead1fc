"""Relay core: duplicate suppression and the inbound event path."""

from hqbridge.core.dedup import Clock, DedupCache, MonotonicClock, fingerprint
from hqbridge.core.models import InboundEvent, RelayOutcome
from hqbridge.core.relay import HQRelay

__all__ = [
    "Clock",
    "DedupCache",
    "HQRelay",
    "InboundEvent",
    "MonotonicClock",
    "RelayOutcome",
    "fingerprint",
]
