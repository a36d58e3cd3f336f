"""
Protocol message logger for debugging serial communication.

Captures TX/RX messages with timestamps so a failed invocation can be
inspected after the fact.
"""

import threading
from collections import deque
from datetime import datetime
from typing import List, Optional, Dict, Any
from dataclasses import dataclass, asdict

from aquosctl.protocol.frame import ProtocolFrame


def _printable(data: bytes) -> str:
    """Render bytes as text with control characters shown as [XX]."""
    return "".join(chr(b) if 32 <= b < 127 else f"[{b:02X}]" for b in data)


@dataclass
class ProtocolMessage:
    """A single protocol message (TX, RX or ERR)."""
    timestamp: str
    direction: str  # "TX", "RX" or "ERR"
    raw_hex: str
    text: str
    decoded: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)


class ProtocolLogger:
    """
    Thread-safe logger for protocol messages.

    Maintains a circular buffer of messages with configurable max size.
    """

    DEFAULT_MAX_MESSAGES = 500

    def __init__(self, max_messages: int = DEFAULT_MAX_MESSAGES):
        """
        Initialize protocol logger.

        Args:
            max_messages: Maximum number of messages to keep in buffer.
        """
        self._messages: deque = deque(maxlen=max_messages)
        self._lock = threading.Lock()
        self._enabled = True
        self._tx_count = 0
        self._rx_count = 0
        self._error_count = 0

    @property
    def enabled(self) -> bool:
        """Check if logging is enabled."""
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        """Enable or disable logging."""
        self._enabled = value

    def _now(self) -> str:
        return datetime.now().isoformat(timespec='milliseconds')

    def log_tx(self, frame: ProtocolFrame) -> None:
        """
        Log a transmitted frame.

        Args:
            frame: Frame written to the transport.
        """
        if not self._enabled:
            return

        data = frame.to_bytes()
        with self._lock:
            self._tx_count += 1
            self._messages.append(ProtocolMessage(
                timestamp=self._now(),
                direction="TX",
                raw_hex=data.hex().upper(),
                text=_printable(data),
                decoded={"opcode": frame.opcode, "parameter": frame.parameter},
            ))

    def log_rx(self, data: bytes, outcome: Optional[str] = None) -> None:
        """
        Log a received reply.

        Args:
            data: Raw bytes received, terminator included.
            outcome: Classification of the reply, if known.
        """
        if not self._enabled:
            return

        with self._lock:
            self._rx_count += 1
            error = None
            if not data:
                error = "Empty response (timeout?)"
                self._error_count += 1

            self._messages.append(ProtocolMessage(
                timestamp=self._now(),
                direction="RX",
                raw_hex=data.hex().upper(),
                text=_printable(data),
                decoded={"outcome": outcome} if outcome else None,
                error=error,
            ))

    def log_error(self, error_msg: str, data: bytes = b"") -> None:
        """
        Log an error message.

        Args:
            error_msg: Error description.
            data: Optional raw bytes associated with error.
        """
        if not self._enabled:
            return

        with self._lock:
            self._error_count += 1
            self._messages.append(ProtocolMessage(
                timestamp=self._now(),
                direction="ERR",
                raw_hex=data.hex().upper(),
                text=_printable(data),
                error=error_msg,
            ))

    def get_messages(self, limit: int = 100) -> List[dict]:
        """
        Get recent messages.

        Args:
            limit: Maximum number of messages to return.

        Returns:
            List of message dictionaries, oldest first (chronological order).
        """
        with self._lock:
            messages = list(self._messages)
            if len(messages) > limit:
                messages = messages[-limit:]
            return [m.to_dict() for m in messages]

    def get_stats(self) -> dict:
        """Get logging statistics."""
        with self._lock:
            return {
                "total_messages": len(self._messages),
                "tx_count": self._tx_count,
                "rx_count": self._rx_count,
                "error_count": self._error_count,
                "max_messages": self._messages.maxlen,
                "enabled": self._enabled,
            }

    def clear(self) -> None:
        """Clear all logged messages."""
        with self._lock:
            self._messages.clear()
            self._tx_count = 0
            self._rx_count = 0
            self._error_count = 0


# Global instance
_logger: Optional[ProtocolLogger] = None


def get_protocol_logger() -> ProtocolLogger:
    """Get or create the global protocol logger."""
    global _logger
    if _logger is None:
        _logger = ProtocolLogger()
    return _logger
