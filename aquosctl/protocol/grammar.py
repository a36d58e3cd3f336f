"""
Argument grammars.

Each command in the registry carries one of these value objects. They hold
data only; encoder.py holds one encoding function per grammar type.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple, Union


def _freeze(grammar, name):
    # Read-only private copy of a code table
    object.__setattr__(grammar, name, MappingProxyType(dict(getattr(grammar, name))))


@dataclass(frozen=True)
class Toggle:
    """Empty argument flips the current state; tokens select a setting."""

    codes: Mapping[str, str]
    toggle_code: str = "0"

    def __post_init__(self):
        _freeze(self, "codes")


@dataclass(frozen=True)
class Enumeration:
    """Fixed vocabulary. Empty argument only allowed when toggle_code is set."""

    codes: Mapping[str, str]
    toggle_code: Optional[str] = None

    def __post_init__(self):
        _freeze(self, "codes")


@dataclass(frozen=True)
class BoundedInt:
    """Decimal value in [minimum, maximum], sent as the literal digits."""

    minimum: int
    maximum: int
    width: int = 4


@dataclass(frozen=True)
class Composite2Field:
    """
    Two integers written as "major.minor" (minor defaults to 0).

    Unpacked: two frames, major against the command opcode then minor
    against minor_opcode, each field zero-padded to `digits` plus `suffix`.
    Packed: one frame with both zero-padded fields concatenated.
    """

    major_bounds: Tuple[int, int]
    minor_bounds: Tuple[int, int]
    digits: int
    minor_opcode: Optional[str] = None
    separator: str = "."
    suffix: str = ""
    packed: bool = False

    def __post_init__(self):
        if not self.packed and self.minor_opcode is None:
            raise ValueError("Unpacked composite grammar needs a minor_opcode")


@dataclass(frozen=True)
class Banded:
    """
    Single integer split across two opcodes.

    [0, boundary) goes to the command opcode as is; [boundary, upper_bound]
    goes to high_opcode after subtracting offset.
    """

    boundary: int
    upper_bound: int
    offset: int
    high_opcode: str
    width: int = 4


@dataclass(frozen=True)
class NoArg:
    """Arguments are ignored; the fixed code is always sent."""

    code: str = "0"


@dataclass(frozen=True)
class Routed:
    """
    Tokens that each address their own opcode, with a numeric fallback.

    routes maps a token (the empty string included) to (opcode, code).
    Anything else is validated against `numeric` and sent to numeric_opcode.
    """

    routes: Mapping[str, Tuple[str, str]]
    numeric_opcode: str
    numeric: BoundedInt = field(default_factory=lambda: BoundedInt(0, 9999))

    def __post_init__(self):
        _freeze(self, "routes")


Grammar = Union[Toggle, Enumeration, BoundedInt, Composite2Field, Banded, NoArg, Routed]
