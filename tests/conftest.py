from __future__ import annotations

import pytest

from hqbridge.gateway.protocol import SessionDescriptor
from tests.fakes import FakeClock, FakeConnector, FakeGatewaySocket, accept_connect, challenge


@pytest.fixture()
def descriptor() -> SessionDescriptor:
    return SessionDescriptor(
        url="ws://gateway.test:18789/gateway",
        token="secret-token",
        session_key="agent:main:main",
    )


@pytest.fixture()
def happy_connector() -> FakeConnector:
    return FakeConnector(lambda: FakeGatewaySocket([challenge("abc123")], accept_connect))


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()
