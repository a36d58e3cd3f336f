"""
Request frame for the Aquos RS-232C protocol.

Every request is a 4-character opcode, a parameter field and a single
carriage return:

    b"VOLM30  \\r"
"""

from dataclasses import dataclass
from typing import Tuple

OPCODE_LENGTH = 4
PARAM_WIDTH = 4
TERMINATOR = b"\r"


def pad_param(value: str, width: int = PARAM_WIDTH) -> str:
    """
    Left-justify a parameter and pad it with spaces.

    Text longer than the width is returned unchanged.

    Example:
        >>> pad_param("1")
        '1   '
    """
    return value.ljust(width)


def zero_pad(value: int, digits: int) -> str:
    """
    Format a non-negative integer with leading zeros.

    Example:
        >>> zero_pad(7, 3)
        '007'
    """
    return f"{value:0{digits}d}"


@dataclass(frozen=True)
class ProtocolFrame:
    """One complete request: opcode + parameter + CR."""

    opcode: str
    parameter: str

    def __post_init__(self):
        if len(self.opcode) != OPCODE_LENGTH or not self.opcode.isascii():
            raise ValueError(f"Opcode must be exactly 4 ASCII characters, got: {self.opcode!r}")
        if not self.parameter.isascii():
            raise ValueError(f"Parameter must be ASCII, got: {self.parameter!r}")

    def parts(self) -> Tuple[bytes, bytes, bytes]:
        """Return the three write units in wire order."""
        return (
            self.opcode.encode("ascii"),
            self.parameter.encode("ascii"),
            TERMINATOR,
        )

    def to_bytes(self) -> bytes:
        """
        Encode the frame as it appears on the wire.

        Example:
            >>> ProtocolFrame("POWR", "1   ").to_bytes()
            b'POWR1   \\r'
        """
        return b"".join(self.parts())

    def __str__(self) -> str:
        return f"{self.opcode}{self.parameter}"
