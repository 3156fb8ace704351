"""Shared fixtures for unit tests."""

import logging

import pytest

from minihttp.domain.correlation_id import clear_correlation_id


@pytest.fixture(autouse=True)
def enable_log_propagation():
    """Ensure logs propagate to root so caplog can catch them."""
    logger = logging.getLogger("minihttp")
    old_propagate = logger.propagate
    logger.propagate = True
    yield
    logger.propagate = old_propagate
    clear_correlation_id()


class FakeSocket:
    """Socket stub that replays predefined chunks and records what is sent."""

    def __init__(self, chunks=()):
        self._chunks = [
            chunk if isinstance(chunk, bytes) else chunk.encode() for chunk in chunks
        ]
        self.sent = b""
        self.closed = False
        self.timeout = None

    def recv(self, _size):
        if self._chunks:
            return self._chunks.pop(0)
        return b""

    def sendall(self, data):
        self.sent += data

    def settimeout(self, value):
        self.timeout = value

    def shutdown(self, _how):
        if self.closed:
            raise OSError("socket already closed")

    def close(self):
        self.closed = True


@pytest.fixture(name="fake_socket_factory")
def fixture_fake_socket_factory():
    """Build FakeSocket instances from a list of chunks."""
    return FakeSocket
