"""Per-message gateway session client.

Each :meth:`GatewaySessionClient.deliver` call opens its own websocket,
answers the ``connect.challenge`` with an operator ``connect`` request, sends
exactly one ``chat.send`` once the connect succeeds, and hangs up.

Completion is two-phase: the caller's result resolves as soon as the
``chat.send`` frame is written (fire-and-forget), while the socket is closed
after a short linger by a background task.  :meth:`drain` waits for those
background closes and is meant for shutdown paths only.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Awaitable, Callable

import websockets
from loguru import logger
from websockets.exceptions import ConnectionClosed, WebSocketException

from hqbridge.gateway.errors import (
    GatewayConnectionError,
    GatewayError,
    GatewayProtocolError,
    GatewayTimeoutError,
)
from hqbridge.gateway.protocol import (
    SessionDescriptor,
    build_chat_send_request,
    build_connect_request,
    encode_frame,
    new_request_id,
    parse_frame,
)

DEFAULT_HANDSHAKE_TIMEOUT_SECONDS = 15.0
DEFAULT_LINGER_SECONDS = 0.5

type ConnectFn = Callable[..., Awaitable[Any]]


class DeliveryPhase(StrEnum):
    CONNECTING = "connecting"
    AWAITING_CHALLENGE = "awaiting_challenge"
    AUTHENTICATING = "authenticating"
    SENDING = "sending"
    CLOSING = "closing"
    DELIVERED = "delivered"
    FAILED = "failed"


@dataclass(slots=True)
class DeliveryReceipt:
    """What was written to the gateway for a successful delivery."""

    connect_request_id: str
    chat_request_id: str
    idempotency_key: str
    elapsed_seconds: float


@dataclass(slots=True)
class _Attempt:
    text: str
    outcome: asyncio.Future[DeliveryReceipt]
    started_at: float
    phase: DeliveryPhase = DeliveryPhase.CONNECTING
    connect_request_id: str | None = None
    history: list[DeliveryPhase] = field(default_factory=list)

    @property
    def resolved(self) -> bool:
        return self.outcome.done()

    @property
    def delivered(self) -> bool:
        return self.phase in (DeliveryPhase.CLOSING, DeliveryPhase.DELIVERED)

    def enter(self, phase: DeliveryPhase) -> None:
        self.phase = phase
        self.history.append(phase)


class GatewaySessionClient:
    """Delivers single chat messages into one gateway session."""

    def __init__(
        self,
        descriptor: SessionDescriptor,
        *,
        handshake_timeout_seconds: float = DEFAULT_HANDSHAKE_TIMEOUT_SECONDS,
        linger_seconds: float = DEFAULT_LINGER_SECONDS,
        max_payload_bytes: int | None = None,
        connect: ConnectFn | None = None,
    ) -> None:
        self._descriptor = descriptor
        self._timeout_seconds = max(0.001, float(handshake_timeout_seconds))
        self._linger_seconds = max(0.0, float(linger_seconds))
        self._max_payload_bytes = max_payload_bytes
        self._connect: ConnectFn = connect or websockets.connect
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def descriptor(self) -> SessionDescriptor:
        return self._descriptor

    @property
    def pending(self) -> int:
        """Number of attempts whose socket has not been released yet."""
        return len(self._tasks)

    async def deliver(self, text: str) -> DeliveryReceipt:
        """Deliver ``text`` once. Raises :class:`GatewayError` on failure."""
        loop = asyncio.get_running_loop()
        attempt = _Attempt(text=text, outcome=loop.create_future(), started_at=loop.time())
        task = asyncio.create_task(self._run(attempt))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return await attempt.outcome

    async def drain(self) -> None:
        """Wait until every background socket close has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # ── Attempt lifecycle ────────────────────────────────────────────

    async def _run(self, attempt: _Attempt) -> None:
        ws: Any | None = None
        try:
            async with asyncio.timeout(self._timeout_seconds):
                attempt.enter(DeliveryPhase.CONNECTING)
                ws = await self._open()
                attempt.enter(DeliveryPhase.AWAITING_CHALLENGE)
                await self._handshake(ws, attempt)
        except TimeoutError:
            self._fail(attempt, GatewayTimeoutError(self._timeout_seconds))
        except GatewayError as e:
            self._fail(attempt, e)
        except asyncio.CancelledError:
            self._fail(attempt, GatewayConnectionError("cancelled", cause=GatewayConnectionError.CLOSED))
            raise
        except Exception as e:
            logger.opt(exception=True).debug("Unexpected gateway client error")
            self._fail(attempt, GatewayConnectionError(str(e), cause=GatewayConnectionError.TRANSPORT))
        finally:
            if ws is not None:
                await self._release(ws, attempt)

    async def _open(self) -> Any:
        kwargs: dict[str, Any] = {"open_timeout": None}
        if self._max_payload_bytes:
            kwargs["max_size"] = self._max_payload_bytes
        try:
            return await self._connect(self._descriptor.url, **kwargs)
        except (OSError, WebSocketException) as e:
            raise GatewayConnectionError(
                f"connection error: {e}", cause=GatewayConnectionError.CONNECT
            ) from e

    async def _handshake(self, ws: Any, attempt: _Attempt) -> None:
        try:
            async for raw in ws:
                frame = parse_frame(raw)
                if frame is None:
                    logger.debug("Ignoring non-protocol gateway frame")
                    continue

                if frame.is_challenge:
                    if attempt.connect_request_id is not None:
                        logger.debug("Ignoring repeated connect.challenge")
                        continue
                    # The nonce is not part of the connect request; token auth only.
                    logger.debug(f"Gateway challenge received (nonce={frame.nonce!r})")
                    request = build_connect_request(self._descriptor)
                    attempt.connect_request_id = request["id"]
                    attempt.enter(DeliveryPhase.AUTHENTICATING)
                    await ws.send(encode_frame(request))
                    continue

                if not frame.is_response:
                    continue

                if not frame.ok:
                    raise GatewayProtocolError(frame.error_message or "failed")

                if attempt.connect_request_id is None:
                    logger.debug("Ignoring ok response received before connect request")
                    continue
                if frame.id is not None and frame.id != attempt.connect_request_id:
                    logger.debug(f"Ignoring response for unknown request id {frame.id}")
                    continue

                await self._send_chat(ws, attempt)
                return
        except ConnectionClosed as e:
            raise GatewayConnectionError(
                f"closed prematurely: {e}", cause=GatewayConnectionError.CLOSED
            ) from e
        except (OSError, WebSocketException) as e:
            raise GatewayConnectionError(
                f"transport error: {e}", cause=GatewayConnectionError.TRANSPORT
            ) from e

        raise GatewayConnectionError("closed prematurely", cause=GatewayConnectionError.CLOSED)

    async def _send_chat(self, ws: Any, attempt: _Attempt) -> None:
        attempt.enter(DeliveryPhase.SENDING)
        idempotency_key = new_request_id()
        request = build_chat_send_request(
            self._descriptor.session_key,
            attempt.text,
            idempotency_key=idempotency_key,
        )
        await ws.send(encode_frame(request))

        loop = asyncio.get_running_loop()
        receipt = DeliveryReceipt(
            connect_request_id=attempt.connect_request_id or "",
            chat_request_id=request["id"],
            idempotency_key=idempotency_key,
            elapsed_seconds=loop.time() - attempt.started_at,
        )
        attempt.enter(DeliveryPhase.CLOSING)
        if not attempt.resolved:
            attempt.outcome.set_result(receipt)
        logger.debug(
            "gateway_delivered session={} request_id={} elapsed={:.3f}s",
            self._descriptor.session_key,
            receipt.chat_request_id,
            receipt.elapsed_seconds,
        )

    def _fail(self, attempt: _Attempt, error: GatewayError) -> None:
        if attempt.resolved:
            return
        attempt.enter(DeliveryPhase.FAILED)
        attempt.outcome.set_exception(error)
        logger.debug(f"Gateway delivery failed ({error.cause}): {error}")

    async def _release(self, ws: Any, attempt: _Attempt) -> None:
        if attempt.delivered and self._linger_seconds > 0:
            # Give the chat.send frame time to flush before the close frame.
            await asyncio.sleep(self._linger_seconds)
        try:
            await ws.close()
        except (OSError, WebSocketException) as e:
            logger.debug(f"Ignoring error while closing gateway socket: {e}")
        if attempt.delivered:
            attempt.enter(DeliveryPhase.DELIVERED)
