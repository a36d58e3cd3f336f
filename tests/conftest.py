"""Shared fixtures: scripted transport and controllable clock."""

import time
from collections import deque

import pytest

from aquosctl.protocol.interface import ByteTransport
from aquosctl.protocol.logger import ProtocolLogger
from aquosctl.protocol.registry import CommandRegistry, ProtocolVariant


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeTransport(ByteTransport):
    """
    Scripted transport.

    `replies` holds one entry per frame: bytes, a list of byte chunks
    delivered one read at a time, or None for no reply at all.
    """

    def __init__(self, replies=(), clock=None):
        self.replies = deque(replies)
        self.clock = clock
        self.writes = []
        self._pending = deque()
        self._open = True

    @property
    def frames_sent(self) -> int:
        return sum(1 for w in self.writes if w == b"\r")

    @property
    def wire(self) -> bytes:
        return b"".join(self.writes)

    def open(self):
        self._open = True

    def close(self):
        self._open = False

    def is_open(self):
        return self._open

    def write(self, data):
        self.writes.append(data)
        if data != b"\r":
            return
        reply = self.replies.popleft() if self.replies else None
        if reply is None:
            return
        self._pending.extend(reply if isinstance(reply, list) else [reply])

    def read(self, size, timeout):
        if self._pending:
            chunk = self._pending.popleft()
            if len(chunk) > size:
                self._pending.appendleft(chunk[size:])
                chunk = chunk[:size]
            return chunk
        if self.clock is not None:
            self.clock.advance(timeout)
        else:
            time.sleep(min(timeout, 0.005))
        return b""


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def protocol_logger():
    return ProtocolLogger()


@pytest.fixture
def base_registry():
    return CommandRegistry(ProtocolVariant.BASE)


@pytest.fixture
def extended_registry():
    return CommandRegistry(ProtocolVariant.EXTENDED)
