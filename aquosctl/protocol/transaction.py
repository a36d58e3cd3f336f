"""
Single request/reply exchange with the television.

A transaction writes one frame and waits for a CR or LF terminated reply.
The wait is bounded by a deadline checked between reads, so a silent set
yields a TIMEOUT outcome instead of blocking forever.
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from aquosctl.protocol.frame import ProtocolFrame
from aquosctl.protocol.interface import ByteTransport
from aquosctl.protocol.logger import ProtocolLogger, get_protocol_logger


logger = logging.getLogger(__name__)

# Longest reply accepted before a terminator must have been seen
MAX_RESPONSE_BYTES = 254

LINE_TERMINATORS = (0x0D, 0x0A)


class OutcomeKind(Enum):
    """Classification of a reply."""
    SUCCESS = "success"
    PROTOCOL_ERROR = "protocol_error"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class ResponseOutcome:
    """
    Result of one transaction.

    raw_text is the reply with its terminator removed. rejected is True only
    for an ERR reply, as opposed to unexpected text or an overflowing buffer.
    """

    kind: OutcomeKind
    frame: ProtocolFrame
    raw_text: str = ""
    rejected: bool = False

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS


def classify_response(frame: ProtocolFrame, text: str) -> ResponseOutcome:
    """
    Classify a reply with its terminator already stripped.

    Example:
        >>> classify_response(ProtocolFrame("POWR", "1   "), "OK").kind
        <OutcomeKind.SUCCESS: 'success'>
    """
    if text.startswith("OK"):
        return ResponseOutcome(OutcomeKind.SUCCESS, frame, text)
    if text.startswith("ERR"):
        return ResponseOutcome(OutcomeKind.PROTOCOL_ERROR, frame, text, rejected=True)
    return ResponseOutcome(OutcomeKind.PROTOCOL_ERROR, frame, text)


def execute(
    transport: ByteTransport,
    frame: ProtocolFrame,
    timeout: float,
    protocol_logger: Optional[ProtocolLogger] = None,
    clock: Callable[[], float] = time.monotonic,
) -> ResponseOutcome:
    """
    Send a frame and wait for its reply.

    Args:
        transport: Open byte stream.
        frame: Frame to send.
        timeout: Seconds to wait for a terminated reply.
        protocol_logger: TX/RX record; defaults to the global one.
        clock: Monotonic time source.

    Returns:
        SUCCESS, PROTOCOL_ERROR or TIMEOUT outcome.

    Raises:
        NotConnectedError: If the transport is not open.
        TransportIOError: If the stream fails mid-exchange.
    """
    if protocol_logger is None:
        protocol_logger = get_protocol_logger()

    logger.debug(f"TX: {frame.to_bytes()!r}")
    protocol_logger.log_tx(frame)

    opcode, parameter, terminator = frame.parts()
    transport.write(opcode)
    transport.write(parameter)
    transport.write(terminator)

    deadline = clock() + timeout
    buffer = bytearray()

    while True:
        remaining = deadline - clock()
        if remaining <= 0:
            logger.debug(f"No response to {frame} within {timeout}s")
            protocol_logger.log_error(f"Timeout: no response to {frame}", bytes(buffer))
            return ResponseOutcome(OutcomeKind.TIMEOUT, frame, buffer.decode("ascii", errors="replace"))

        chunk = transport.read(MAX_RESPONSE_BYTES - len(buffer), remaining)
        if not chunk:
            continue

        buffer.extend(chunk)
        if buffer[-1] in LINE_TERMINATORS:
            break

        if len(buffer) >= MAX_RESPONSE_BYTES:
            text = buffer.decode("ascii", errors="replace")
            protocol_logger.log_error(f"Response to {frame} exceeded {MAX_RESPONSE_BYTES} bytes", bytes(buffer))
            return ResponseOutcome(OutcomeKind.PROTOCOL_ERROR, frame, text)

    logger.debug(f"RX: {bytes(buffer)!r}")

    text = buffer[:-1].decode("ascii", errors="replace")
    outcome = classify_response(frame, text)
    protocol_logger.log_rx(bytes(buffer), outcome.kind.value)
    return outcome
