"""FastAPI webhook receiving HQ chat messages.

Endpoints:
- POST /hq-webhook - relay one chat line into the gateway session
- GET /health - liveness probe
- GET /metrics - Prometheus metrics (only with the prometheus backend)

Every response carries permissive CORS headers; OPTIONS preflights on any
path are answered with 204.
"""

from __future__ import annotations

import json
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from loguru import logger

from hqbridge.core.models import InboundEvent
from hqbridge.telemetry.prometheus import PrometheusTelemetry

if TYPE_CHECKING:
    from hqbridge.app.bootstrap import RelayRuntime
    from hqbridge.config.schema import WebhookConfig

SERVICE_NAME = "hq-webhook"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def parse_webhook_payload(data: Any, webhook: "WebhookConfig") -> InboundEvent:
    """Map a ``{from, content, channel}`` body onto an :class:`InboundEvent`."""
    if not isinstance(data, dict):
        raise ValueError("Webhook body must be a JSON object")
    sender = data.get("from") or webhook.default_sender
    body = data.get("content") or ""
    channel = data.get("channel") or webhook.default_channel
    return InboundEvent(sender=str(sender), body=str(body), channel=str(channel))


def create_app(runtime: "RelayRuntime") -> FastAPI:
    """Create the FastAPI application around one relay runtime."""
    webhook = runtime.config.webhook

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"HQ webhook server listening on {webhook.host}:{webhook.port}")
        logger.info(f"Gateway: {runtime.config.gateway.url}")
        logger.info(f"POST {webhook.path} - inject HQ chat messages")
        logger.info("GET /health - health check")
        yield
        logger.info("HQ webhook server shutting down")
        await runtime.aclose()

    app = FastAPI(
        title="hqbridge",
        description="Relays HQ chat webhooks into a gateway session",
        version="0.1.0",
        lifespan=lifespan,
    )

    @app.middleware("http")
    async def cors(request: Request, call_next):
        if request.method == "OPTIONS":
            return Response(status_code=204, headers=CORS_HEADERS)
        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response

    @app.post(webhook.path, tags=["webhook"])
    async def hq_webhook(request: Request) -> JSONResponse:
        raw = await request.body()
        try:
            event = parse_webhook_payload(json.loads(raw or b"null"), webhook)
        except (json.JSONDecodeError, UnicodeDecodeError, ValueError) as e:
            logger.warning(f"Rejected malformed webhook body: {e}")
            return JSONResponse({"ok": False, "error": str(e)}, status_code=400)

        outcome = await runtime.relay.handle(event)
        if outcome.status == "skipped":
            return JSONResponse({"ok": True, "skipped": outcome.skipped})
        if outcome.status == "failed":
            return JSONResponse({"ok": False, "error": outcome.error}, status_code=500)
        return JSONResponse({"ok": True})

    @app.get("/health", tags=["health"])
    async def health_check() -> dict[str, Any]:
        return {"ok": True, "service": SERVICE_NAME, "port": webhook.port}

    @app.get("/metrics", tags=["metrics"])
    async def get_metrics() -> Response:
        telemetry = runtime.telemetry
        if not isinstance(telemetry, PrometheusTelemetry):
            return JSONResponse({"ok": False, "error": "metrics disabled"}, status_code=404)
        telemetry.gauge("gateway_pending_closes", runtime.client.pending)
        return Response(content=telemetry.render(), media_type=telemetry.content_type)

    return app


def run_server(runtime: "RelayRuntime", *, log_level: str = "info") -> None:
    """Run the webhook server until interrupted. Blocking."""
    import uvicorn

    app = create_app(runtime)
    uvicorn.run(
        app,
        host=runtime.config.webhook.host,
        port=runtime.config.webhook.port,
        log_level=log_level,
    )
