"""Centralized defaults for generated/migrated config files."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any

DEFAULT_GATEWAY: dict[str, Any] = {
    "url": "ws://localhost:18789/gateway",
    "session_key": "agent:main:main",
    "handshake_timeout_ms": 15000,
    "linger_ms": 500,
}

DEFAULT_CLIENT_IDENTITY: dict[str, str] = {
    "client_id": "gateway-client",
    "client_version": "1.0.0",
    "platform": "linux",
    "mode": "backend",
    "locale": "en-US",
    "user_agent": "hq-webhook/1.0.0",
}

# Environment variables read by earlier deployments of the webhook.
LEGACY_ENV_KEYS: dict[str, tuple[str, str]] = {
    "GW_URL": ("gateway", "url"),
    "GW_TOKEN": ("gateway", "token"),
    "GW_SESSION": ("gateway", "session_key"),
    "WEBHOOK_PORT": ("webhook", "port"),
}


def apply_legacy_env(snake_config: dict[str, Any], environ: Mapping[str, str] | None = None) -> list[str]:
    """Overlay legacy env vars onto a snake_case payload.

    Returns the names of the variables that were applied.
    """
    env = os.environ if environ is None else environ
    applied: list[str] = []
    for env_key, (section, field) in LEGACY_ENV_KEYS.items():
        raw = (env.get(env_key) or "").strip()
        if not raw:
            continue
        target = snake_config.get(section)
        if not isinstance(target, dict):
            target = {}
            snake_config[section] = target
        target[field] = int(raw) if field == "port" else raw
        applied.append(env_key)
    return applied
