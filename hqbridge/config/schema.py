"""Configuration schema using Pydantic."""

from typing import Literal
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings

from hqbridge.config.defaults import DEFAULT_CLIENT_IDENTITY, DEFAULT_GATEWAY


class GatewayConfig(BaseModel):
    """Gateway endpoint, credentials and handshake timing."""

    model_config = ConfigDict(extra="ignore")

    url: str = str(DEFAULT_GATEWAY["url"])
    token: str = ""
    session_key: str = str(DEFAULT_GATEWAY["session_key"])
    handshake_timeout_ms: int = Field(default=int(DEFAULT_GATEWAY["handshake_timeout_ms"]), ge=1)
    linger_ms: int = Field(default=int(DEFAULT_GATEWAY["linger_ms"]), ge=0)
    max_payload_bytes: int = 262144
    client_id: str = str(DEFAULT_CLIENT_IDENTITY["client_id"])
    client_version: str = str(DEFAULT_CLIENT_IDENTITY["client_version"])
    platform: str = str(DEFAULT_CLIENT_IDENTITY["platform"])
    mode: str = str(DEFAULT_CLIENT_IDENTITY["mode"])
    locale: str = str(DEFAULT_CLIENT_IDENTITY["locale"])
    user_agent: str = str(DEFAULT_CLIENT_IDENTITY["user_agent"])

    @field_validator("url")
    @classmethod
    def _validate_url(cls, value: str) -> str:
        parsed = urlparse(value.strip())
        if parsed.scheme not in {"ws", "wss"} or not parsed.hostname:
            raise ValueError(f"gateway.url must be a ws:// or wss:// URL, got {value!r}")
        return value.strip()

    @property
    def handshake_timeout_s(self) -> float:
        return self.handshake_timeout_ms / 1000.0

    @property
    def linger_s(self) -> float:
        return self.linger_ms / 1000.0


class DedupConfig(BaseModel):
    """Duplicate suppression window."""

    model_config = ConfigDict(extra="ignore")

    window_ms: int = Field(default=60000, ge=0)

    @property
    def window_s(self) -> float:
        return self.window_ms / 1000.0


class WebhookConfig(BaseModel):
    """Inbound HTTP webhook settings."""

    model_config = ConfigDict(extra="ignore")

    host: str = "0.0.0.0"
    port: int = 18791
    path: str = "/hq-webhook"
    ignore_senders: list[str] = Field(default_factory=lambda: ["op"])
    default_sender: str = "unknown"
    default_channel: str = "hq"
    message_prefix: str = "[HQ Chat]"


class TelemetryConfig(BaseModel):
    """Metrics backend selection."""

    model_config = ConfigDict(extra="ignore")

    backend: Literal["memory", "prometheus"] = "memory"


class Config(BaseSettings):
    """Root configuration for hqbridge."""

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        env_prefix="HQBRIDGE_",
        env_nested_delimiter="__",
    )

    config_version: int = 1
    gateway: GatewayConfig = Field(default_factory=GatewayConfig)
    dedup: DedupConfig = Field(default_factory=DedupConfig)
    webhook: WebhookConfig = Field(default_factory=WebhookConfig)
    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        # HQBRIDGE_* variables win over values loaded from config.json.
        return env_settings, init_settings, dotenv_settings, file_secret_settings

    def require_token(self) -> str:
        token = (self.gateway.token or "").strip()
        if not token:
            raise ValueError(
                "gateway.token is required (set it in config.json, HQBRIDGE_GATEWAY__TOKEN or GW_TOKEN)"
            )
        return token
