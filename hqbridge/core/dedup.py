"""Deduplication cache: fingerprint window keyed on (sender, body).

Drops repeated webhook deliveries of the same chat line within a fixed
window measured from the first acceptance.  Entries are pruned lazily on
every call; there is no background timer.
"""

from __future__ import annotations

import hashlib
import time
from typing import Protocol, runtime_checkable

FINGERPRINT_HEX_CHARS = 16
DEFAULT_WINDOW_SECONDS = 60.0


@runtime_checkable
class Clock(Protocol):
    """Source of monotonic time in seconds."""

    def now(self) -> float: ...


class MonotonicClock:
    """Default clock backed by :func:`time.monotonic`."""

    def now(self) -> float:
        return time.monotonic()


def fingerprint(sender: str, body: str) -> str:
    """Return the 64-bit hex digest identifying a ``(sender, body)`` pair."""
    digest = hashlib.sha256(f"{sender}:{body}".encode("utf-8")).hexdigest()
    return digest[:FINGERPRINT_HEX_CHARS]


class DedupCache:
    """Reject ``(sender, body)`` pairs seen within the last ``window_seconds``.

    The first acceptance timestamp is never refreshed, so a burst of repeats
    cannot keep an entry alive past its window.  All operations run without
    suspension points, so a single instance can be shared between asyncio
    tasks without locking.
    """

    __slots__ = ("_window_seconds", "_clock", "_seen")

    def __init__(
        self,
        *,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        clock: Clock | None = None,
    ) -> None:
        self._window_seconds = max(0.0, float(window_seconds))
        self._clock: Clock = clock or MonotonicClock()
        self._seen: dict[str, float] = {}

    @property
    def window_seconds(self) -> float:
        return self._window_seconds

    def check_and_record(self, sender: str, body: str) -> bool:
        """Return ``True`` if the pair is a duplicate, otherwise record it."""
        key = fingerprint(sender, body)
        now = self._clock.now()
        self._sweep(now)

        if key in self._seen:
            return True

        self._seen[key] = now
        return False

    def clear(self) -> None:
        self._seen.clear()

    # ── Internals ────────────────────────────────────────────────────

    def _sweep(self, now: float) -> None:
        expired = [k for k, ts in self._seen.items() if now - ts > self._window_seconds]
        for k in expired:
            self._seen.pop(k, None)

    def __len__(self) -> int:
        return len(self._seen)

    def __contains__(self, key: object) -> bool:
        return key in self._seen
