"""Scripted gateway peers and clocks shared by the test suite."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Callable
from typing import Any

_CLOSED = object()

type Responder = Callable[[dict[str, Any]], list[Any]]


def challenge(nonce: str | None = "abc123") -> str:
    payload: dict[str, Any] = {} if nonce is None else {"nonce": nonce}
    return json.dumps({"type": "event", "event": "connect.challenge", "payload": payload})


def ok_response(request_id: str | None = None) -> str:
    frame: dict[str, Any] = {"type": "res", "ok": True}
    if request_id is not None:
        frame["id"] = request_id
    return json.dumps(frame)


def error_response(message: str | None, request_id: str | None = None) -> str:
    frame: dict[str, Any] = {"type": "res", "ok": False}
    if request_id is not None:
        frame["id"] = request_id
    if message is not None:
        frame["error"] = {"message": message}
    return json.dumps(frame)


def accept_connect(frame: dict[str, Any]) -> list[Any]:
    if frame.get("method") == "connect":
        return [ok_response(frame["id"])]
    return []


class FakeGatewaySocket:
    """In-memory stand-in for a websocket connection to the gateway."""

    def __init__(self, greeting: list[Any] | None = None, responder: Responder | None = None):
        self.sent: list[dict[str, Any]] = []
        self.closed = False
        self.closed_at: float | None = None
        self._responder = responder or (lambda _frame: [])
        self._inbound: asyncio.Queue[Any] = asyncio.Queue()
        for item in greeting or []:
            self.push(item)

    def push(self, item: Any) -> None:
        self._inbound.put_nowait(item)

    def hang_up(self) -> None:
        self.push(_CLOSED)

    def methods(self) -> list[str]:
        return [frame.get("method") for frame in self.sent]

    def __aiter__(self) -> "FakeGatewaySocket":
        return self

    async def __anext__(self) -> Any:
        item = await self._inbound.get()
        if item is _CLOSED:
            raise StopAsyncIteration
        if isinstance(item, BaseException):
            raise item
        return item

    async def send(self, data: str) -> None:
        frame = json.loads(data)
        self.sent.append(frame)
        for reply in self._responder(frame):
            self.push(reply)

    async def close(self) -> None:
        if not self.closed:
            self.closed = True
            self.closed_at = asyncio.get_running_loop().time()
            self.hang_up()


class FakeConnector:
    """``connect`` replacement handing out one scripted socket per call."""

    def __init__(self, factory: Callable[[], FakeGatewaySocket]):
        self._factory = factory
        self.sockets: list[FakeGatewaySocket] = []
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def __call__(self, url: str, **kwargs: Any) -> FakeGatewaySocket:
        self.calls.append((url, kwargs))
        ws = self._factory()
        self.sockets.append(ws)
        return ws

    @property
    def last(self) -> FakeGatewaySocket:
        return self.sockets[-1]


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.value = start

    def now(self) -> float:
        return self.value

    def advance(self, seconds: float) -> None:
        self.value += seconds

