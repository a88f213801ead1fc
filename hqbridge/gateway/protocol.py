"""Gateway wire protocol v3: request builders and tolerant frame parsing."""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass, field
from typing import Any

PROTOCOL_VERSION = 3
CHALLENGE_EVENT = "connect.challenge"
OPERATOR_ROLE = "operator"
OPERATOR_SCOPES = ("operator.read", "operator.write")


@dataclass(frozen=True, slots=True)
class SessionDescriptor:
    """Where and as whom to deliver. Shared read-only by every delivery."""

    url: str
    token: str
    session_key: str
    client_id: str = "gateway-client"
    client_version: str = "1.0.0"
    platform: str = "linux"
    mode: str = "backend"
    locale: str = "en-US"
    user_agent: str = "hq-webhook/1.0.0"

    @classmethod
    def from_config(cls, config: Any) -> "SessionDescriptor":
        """Build from a ``GatewayConfig``."""
        return cls(
            url=config.url,
            token=config.token,
            session_key=config.session_key,
            client_id=config.client_id,
            client_version=config.client_version,
            platform=config.platform,
            mode=config.mode,
            locale=config.locale,
            user_agent=config.user_agent,
        )


@dataclass(slots=True)
class Frame:
    """One inbound protocol frame (event or response)."""

    type: str
    event: str | None = None
    id: str | None = None
    ok: bool = False
    payload: dict[str, Any] = field(default_factory=dict)
    error_message: str | None = None

    @property
    def is_challenge(self) -> bool:
        return self.type == "event" and self.event == CHALLENGE_EVENT

    @property
    def is_response(self) -> bool:
        return self.type == "res"

    @property
    def nonce(self) -> str:
        value = self.payload.get("nonce")
        return value if isinstance(value, str) else ""


def new_request_id() -> str:
    return str(uuid.uuid4())


def build_request(method: str, params: dict[str, Any], request_id: str | None = None) -> dict[str, Any]:
    return {
        "type": "req",
        "id": request_id or new_request_id(),
        "method": method,
        "params": params,
    }


def build_connect_request(descriptor: SessionDescriptor, request_id: str | None = None) -> dict[str, Any]:
    """Operator handshake request answering a ``connect.challenge``."""
    return build_request(
        "connect",
        {
            "minProtocol": PROTOCOL_VERSION,
            "maxProtocol": PROTOCOL_VERSION,
            "client": {
                "id": descriptor.client_id,
                "version": descriptor.client_version,
                "platform": descriptor.platform,
                "mode": descriptor.mode,
            },
            "role": OPERATOR_ROLE,
            "scopes": list(OPERATOR_SCOPES),
            "caps": [],
            "commands": [],
            "permissions": {},
            "auth": {"token": descriptor.token},
            "locale": descriptor.locale,
            "userAgent": descriptor.user_agent,
        },
        request_id,
    )


def build_chat_send_request(
    session_key: str,
    message: str,
    *,
    request_id: str | None = None,
    idempotency_key: str | None = None,
) -> dict[str, Any]:
    return build_request(
        "chat.send",
        {
            "sessionKey": session_key,
            "message": message,
            "idempotencyKey": idempotency_key or new_request_id(),
        },
        request_id,
    )


def encode_frame(frame: dict[str, Any]) -> str:
    return json.dumps(frame, ensure_ascii=False)


def parse_frame(raw: str | bytes) -> Frame | None:
    """Decode a raw websocket message, or return ``None`` for non-protocol noise."""
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError, TypeError):
        return None

    if not isinstance(data, dict):
        return None

    frame_type = data.get("type")
    if not isinstance(frame_type, str):
        return None

    payload = data.get("payload")
    if not isinstance(payload, dict):
        payload = {}

    error = data.get("error")
    error_message: str | None = None
    if isinstance(error, dict):
        message = error.get("message")
        if isinstance(message, str) and message:
            error_message = message

    frame_id = data.get("id")
    event = data.get("event")
    return Frame(
        type=frame_type,
        event=event if isinstance(event, str) else None,
        id=frame_id if isinstance(frame_id, str) else None,
        ok=bool(data.get("ok")),
        payload=payload,
        error_message=error_message,
    )
