"""Domain models for the HQ relay path."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

type RelayStatus = Literal["delivered", "skipped", "failed"]
type SkipReason = Literal["self", "duplicate"]


@dataclass(frozen=True, slots=True, kw_only=True)
class InboundEvent:
    """One chat line pushed by HQ. ``channel`` is carried for logging only."""

    sender: str
    body: str
    channel: str = "hq"


@dataclass(frozen=True, slots=True, kw_only=True)
class RelayOutcome:
    """Result of relaying one inbound event."""

    status: RelayStatus
    skipped: SkipReason | None = None
    error: str | None = None
    cause: str | None = None

    @property
    def ok(self) -> bool:
        return self.status != "failed"

    @classmethod
    def delivered(cls) -> "RelayOutcome":
        return cls(status="delivered")

    @classmethod
    def skip(cls, reason: SkipReason) -> "RelayOutcome":
        return cls(status="skipped", skipped=reason)

    @classmethod
    def failed(cls, error: str, cause: str | None = None) -> "RelayOutcome":
        return cls(status="failed", error=error, cause=cause)
