"""
Abstract interface for the byte-stream transport.

This interface allows transparent substitution between a real serial port
and the simulator.
"""

from abc import ABC, abstractmethod


class ByteTransport(ABC):
    """Abstract base class for bidirectional byte streams."""

    @abstractmethod
    def open(self) -> None:
        """
        Acquire the underlying stream.

        Raises:
            TransportUnavailableError: If the stream cannot be opened.
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the underlying stream."""
        pass

    @abstractmethod
    def is_open(self) -> bool:
        """
        Check if the stream is open.

        Returns:
            True if open, False otherwise.
        """
        pass

    @abstractmethod
    def write(self, data: bytes) -> None:
        """
        Write bytes to the stream.

        Raises:
            NotConnectedError: If the stream is not open.
        """
        pass

    @abstractmethod
    def read(self, size: int, timeout: float) -> bytes:
        """
        Read whatever is available, waiting at most `timeout` seconds.

        Args:
            size: Maximum number of bytes to return.
            timeout: Seconds to wait for the first byte.

        Returns:
            Between 1 and `size` bytes, or b"" if nothing arrived in time.

        Raises:
            NotConnectedError: If the stream is not open.
        """
        pass

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
