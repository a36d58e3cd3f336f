"""
Serial port transport for the Aquos RS-232C interface.

Implements ByteTransport using pyserial. Line settings are fixed by the
television: 9600 baud, 8 data bits, no parity, 1 stop bit, no flow control.
"""

import logging
from typing import Optional

import serial
from serial import SerialException

from aquosctl.protocol.interface import ByteTransport
from aquosctl.config.models import SerialConfig
from aquosctl.utils.exceptions import (
    NotConnectedError,
    PortNotFoundError,
    PortInUseError,
    TransportIOError,
)


logger = logging.getLogger(__name__)


class SerialTransport(ByteTransport):
    """Real hardware transport over an RS-232 serial port."""

    BAUD_RATE = 9600
    DATA_BITS = serial.EIGHTBITS
    PARITY = serial.PARITY_NONE
    STOP_BITS = serial.STOPBITS_ONE

    def __init__(self, config: SerialConfig):
        """
        Initialize serial transport.

        Args:
            config: Serial port configuration.
        """
        self._config = config
        self._port: Optional[serial.Serial] = None

    def open(self) -> None:
        """Open and configure the serial port."""
        if self.is_open():
            logger.warning("Already open")
            return

        port_name = self._config.port
        logger.info(f"Opening serial port {port_name}")

        try:
            self._port = serial.Serial(
                port=port_name,
                baudrate=self.BAUD_RATE,
                bytesize=self.DATA_BITS,
                parity=self.PARITY,
                stopbits=self.STOP_BITS,
                xonxoff=False,
                rtscts=False,
                dsrdtr=False,
                timeout=self._config.response_timeout_seconds,
                write_timeout=self._config.response_timeout_seconds,
            )
        except SerialException as e:
            error_msg = str(e).lower()
            if "filenotfounderror" in error_msg or "no such file" in error_msg:
                raise PortNotFoundError(f"Failed to open {port_name}: Port not found") from e
            elif "access" in error_msg or "permission" in error_msg or "in use" in error_msg or "busy" in error_msg:
                raise PortInUseError(f"{port_name} is already in use by another application") from e
            else:
                raise PortNotFoundError(f"Failed to open {port_name}: {e}") from e

        # Drop anything left over from a previous session
        self._port.reset_input_buffer()
        self._port.reset_output_buffer()

    def close(self) -> None:
        """Close serial port."""
        if self._port and self._port.is_open:
            self._port.close()
            logger.info("Serial port closed")

        self._port = None

    def is_open(self) -> bool:
        return self._port is not None and self._port.is_open

    def write(self, data: bytes) -> None:
        if not self.is_open():
            raise NotConnectedError("Serial port not open")

        try:
            self._port.write(data)
            self._port.flush()
        except SerialException as e:
            raise TransportIOError(f"Write to {self._config.port} failed: {e}") from e

    def read(self, size: int, timeout: float) -> bytes:
        if not self.is_open():
            raise NotConnectedError("Serial port not open")

        try:
            self._port.timeout = max(timeout, 0)
            data = self._port.read(1)
            if not data:
                return b""

            # Take whatever else is already buffered without waiting again
            waiting = min(self._port.in_waiting, size - 1)
            if waiting > 0:
                data += self._port.read(waiting)
        except SerialException as e:
            raise TransportIOError(f"Read from {self._config.port} failed: {e}") from e
        return data
