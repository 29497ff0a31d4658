import asyncio
import logging

import pytest

from deepgram_bridge.handlers.local_functions import build_registry
from deepgram_bridge.config.settings import build_session_configuration


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration before each test"""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    logging.basicConfig(level=logging.NOTSET)
    yield


class FakeWebSocket:
    """Stand-in for a websockets client connection.

    Iterating yields the preset inbound frames, then either raises
    ``close_error``, stops (``keep_open=False``, a normal server close) or
    waits until close() is called.
    """

    def __init__(self, frames=None, close_error=None, keep_open=True):
        self.frames = list(frames or [])
        self.close_error = close_error
        self.keep_open = keep_open
        self.sent = []
        self.closed = False
        self._closed_event = asyncio.Event()

    async def send(self, payload):
        self.sent.append(payload)

    async def close(self):
        self.closed = True
        self._closed_event.set()

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for frame in self.frames:
            yield frame
        if self.close_error is not None:
            raise self.close_error
        if self.keep_open:
            await self._closed_event.wait()


@pytest.fixture
def fake_websocket():
    """Factory for FakeWebSocket instances."""
    return FakeWebSocket


@pytest.fixture
def registry():
    return build_registry()


@pytest.fixture
def session_config(registry):
    return build_session_configuration(registry.descriptors(), 16000, 48000)
