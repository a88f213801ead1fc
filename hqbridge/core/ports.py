"""Port interfaces for the relay core."""

from __future__ import annotations

from typing import Any, Protocol


class DeliveryPort(Protocol):
    """Single-attempt delivery of one text message into the gateway session."""

    async def deliver(self, text: str) -> Any:
        """Deliver ``text``; raise ``GatewayError`` on failure."""

    async def drain(self) -> None:
        """Wait for deferred connection cleanup."""


class DuplicateFilterPort(Protocol):
    """Duplicate detection over ``(sender, body)`` pairs."""

    def check_and_record(self, sender: str, body: str) -> bool:
        """Return True if the pair was already accepted within the window."""
