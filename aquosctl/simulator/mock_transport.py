"""
Mock transport for the television simulator.

Simulates an Aquos set on the far end of the serial cable so that the
tool can be exercised without hardware.
"""

import threading
import time
import logging
from collections import deque
from typing import Deque, List, Optional, Tuple

from aquosctl.protocol.frame import OPCODE_LENGTH, TERMINATOR, ProtocolFrame
from aquosctl.protocol.interface import ByteTransport
from aquosctl.config.models import SimulatorConfig
from aquosctl.utils.exceptions import NotConnectedError


logger = logging.getLogger(__name__)

OK_REPLY = b"OK\r"
ERR_REPLY = b"ERR\r"

# Every opcode either command table can produce
KNOWN_OPCODES = {
    "RSPW", "POWR", "ITGD", "ITVD", "IAVD", "AVMD", "VOLM", "HPOS", "VPOS",
    "CLCK", "PHSE", "WIDE", "MUTE", "ACSU", "ACHA", "OFTM", "DCCH", "DA2P",
    "DC2U", "DC2L", "DC10", "DC11", "CHUP", "CHDW", "CLCP", "TDCH", "RCKY",
}


class MockAquosTransport(ByteTransport):
    """
    In-memory television.

    Bytes written are split into frames on CR. Each complete frame produces
    an OK or ERR reply, or nothing for silent opcodes and injected timeouts.
    """

    def __init__(self, config: Optional[SimulatorConfig] = None):
        """
        Initialize simulator.

        Args:
            config: Simulator configuration.
        """
        self.config = config or SimulatorConfig()
        self._open = False
        self._lock = threading.Lock()
        self._rx_buffer = bytearray()
        self._replies: Deque[Tuple[float, bytes]] = deque()
        self.received: List[ProtocolFrame] = []

        # Virtual set state
        self.power_on = True
        self.power_on_command_enabled = False
        self.volume = 20
        self.muted = False
        self.input_source = "tv"
        self.channel: Optional[str] = None

        logger.info("MockAquosTransport initialized")

    def open(self) -> None:
        """Open simulated connection."""
        with self._lock:
            if self._open:
                logger.warning("Already open")
                return
            self._open = True
            logger.info("Simulator connected")

    def close(self) -> None:
        """Close simulated connection."""
        with self._lock:
            self._open = False
            self._rx_buffer.clear()
            self._replies.clear()
            logger.info("Simulator disconnected")

    def is_open(self) -> bool:
        return self._open

    def write(self, data: bytes) -> None:
        if not self._open:
            raise NotConnectedError("Simulator not connected")

        with self._lock:
            self._rx_buffer.extend(data)
            while TERMINATOR in self._rx_buffer:
                end = self._rx_buffer.index(TERMINATOR)
                raw = bytes(self._rx_buffer[:end])
                del self._rx_buffer[:end + 1]
                self._handle_request(raw)

    def read(self, size: int, timeout: float) -> bytes:
        if not self._open:
            raise NotConnectedError("Simulator not connected")

        deadline = time.monotonic() + max(timeout, 0)
        while True:
            with self._lock:
                if self._replies and self._replies[0][0] <= time.monotonic():
                    _, reply = self._replies.popleft()
                    if len(reply) > size:
                        self._replies.appendleft((0.0, reply[size:]))
                        reply = reply[:size]
                    return reply
                next_ready = self._replies[0][0] if self._replies else None

            now = time.monotonic()
            if now >= deadline:
                return b""
            wake = deadline if next_ready is None else min(deadline, next_ready)
            time.sleep(max(wake - now, 0))

    def _queue_reply(self, reply: bytes) -> None:
        ready_at = time.monotonic() + self.config.response_latency_ms / 1000.0
        self._replies.append((ready_at, reply))

    def _handle_request(self, raw: bytes) -> None:
        """Route one request to its handler and queue the reply."""
        text = raw.decode("ascii", errors="replace")
        opcode, parameter = text[:OPCODE_LENGTH], text[OPCODE_LENGTH:]
        logger.debug("[SIMULATOR] RX: %r", text)

        if len(opcode) == OPCODE_LENGTH:
            self.received.append(ProtocolFrame(opcode, parameter))

        if self.config.inject_timeout:
            logger.warning("[SIMULATOR] Injected timeout for testing")
            return

        if opcode in self.config.silent_opcodes:
            return

        if opcode not in KNOWN_OPCODES or opcode in self.config.reject_opcodes:
            self._queue_reply(ERR_REPLY)
            return

        accepted = self._apply(opcode, parameter.strip())
        self._queue_reply(OK_REPLY if accepted else ERR_REPLY)

    def _apply(self, opcode: str, value: str) -> bool:
        """Update virtual state. Returns False where a real set answers ERR."""
        if opcode == "RSPW":
            self.power_on_command_enabled = value in ("1", "2")
            return value in ("0", "1", "2")

        if opcode == "POWR":
            if value == "0":
                self.power_on = False
                return True
            if value == "1":
                if not self.power_on and not self.power_on_command_enabled:
                    return False
                self.power_on = True
                return True
            return False

        # A set in standby only listens for power commands
        if not self.power_on:
            return False

        if opcode == "VOLM":
            if not value.isdigit() or int(value) > 60:
                return False
            self.volume = int(value)
        elif opcode == "MUTE":
            self.muted = not self.muted if value == "0" else value == "1"
        elif opcode == "ITVD":
            self.input_source = "tv"
        elif opcode == "IAVD":
            self.input_source = value
        elif opcode in ("DCCH", "DA2P", "DC10", "DC11"):
            self.channel = value
        elif opcode == "DC2U":
            self.channel = value
        elif opcode == "DC2L":
            self.channel = f"{self.channel}.{value}"
        elif opcode in ("CHUP", "CHDW"):
            self.input_source = "tv"

        return True
