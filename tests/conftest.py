"""Shared fixtures for notifier tests"""

import pytest
from unittest.mock import Mock

from notifier_module import Notifier, NotifierRuntime
from notifier_module.delivery.transport import Transport
from notifier_module.environment.probe import StaticEnvironmentProbe
from notifier_module.environment.stack_trace import StackTraceParser


class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, now_ms=1_000_000):
        self.now_ms = now_ms

    def advance(self, ms):
        self.now_ms += ms

    def __call__(self):
        return self.now_ms


class FixedFrameParser(StackTraceParser):
    """Parser returning preset frames."""

    def __init__(self, frames=None):
        self.frames = frames if frames is not None else [
            {"filename": "app.py", "lineno": 10, "method": "main"}
        ]

    def parse(self, err):
        return list(self.frames)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def transport():
    """Transport that succeeds immediately."""
    mock = Mock(spec=Transport)
    mock.post.side_effect = lambda url, payload, callback: callback(None, {"err": 0})
    return mock


@pytest.fixture
def runtime(transport, clock):
    return NotifierRuntime(transport=transport, clock=clock)


@pytest.fixture
def probe():
    return StaticEnvironmentProbe(
        user_agent="Mozilla/5.0 (test)",
        language="en-US",
        cookie_enabled=True,
        screen_width=1280,
        screen_height=800,
        protocol="http:",
        url="http://example.com/cart?id=1",
        query_string="?id=1",
        plugins=[{"name": "pdf", "description": "PDF viewer"}],
    )


@pytest.fixture
def notifier(runtime, probe):
    return Notifier(
        runtime=runtime,
        probe=probe,
        stack_parser=FixedFrameParser(),
        options={"access_token": "token-123"},
    )


def queued_payloads(runtime):
    """Return the payloads currently queued, oldest first."""
    return [entry.payload for entry in runtime.queue._entries]
