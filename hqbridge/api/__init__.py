"""HTTP webhook surface."""

from hqbridge.api.server import create_app, run_server

__all__ = ["create_app", "run_server"]
