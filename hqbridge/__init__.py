"""hqbridge - relays HQ chat webhooks into a gateway session."""

__version__ = "0.1.0"
__logo__ = "📡"
