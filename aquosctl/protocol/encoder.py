"""
Parameter validation and frame encoding.

encode() turns a CommandSpec plus raw argument strings into the ordered
list of frames to send. Every function here is pure: it either returns
all frames for the command or raises InvalidParameterError.
"""

import re
from typing import Callable, Dict, List, Optional, Tuple

from .frame import ProtocolFrame, pad_param, zero_pad
from .grammar import (
    Banded,
    BoundedInt,
    Composite2Field,
    Enumeration,
    NoArg,
    Routed,
    Toggle,
)
from .registry import CommandSpec
from aquosctl.utils.exceptions import InvalidParameterError

_INTEGER_RE = re.compile(r"-?[0-9]+")


def _parse_int(spec: CommandSpec, arg: str) -> int:
    """Parse a base-10 integer, rejecting anything int() would be lenient about."""
    if not _INTEGER_RE.fullmatch(arg):
        raise InvalidParameterError(spec.name, arg, "not a number")
    return int(arg)


def _check_range(spec: CommandSpec, arg: str, value: int, bounds: Tuple[int, int]) -> None:
    low, high = bounds
    if value < low or value > high:
        raise InvalidParameterError(spec.name, arg, f"must be {low}-{high}")


def _encode_enumeration(spec: CommandSpec, grammar, arg: str) -> List[ProtocolFrame]:
    """Toggle and Enumeration share one rule; they differ only in toggle_code."""
    if arg == "":
        if grammar.toggle_code is None:
            raise InvalidParameterError(spec.name, arg, "a value is required")
        code = grammar.toggle_code
    else:
        code = grammar.codes.get(arg)
        if code is None:
            raise InvalidParameterError(spec.name, arg)

    return [ProtocolFrame(spec.opcode, pad_param(code))]


def _bounded_param(spec: CommandSpec, grammar: BoundedInt, arg: str) -> str:
    if arg == "":
        raise InvalidParameterError(spec.name, arg, "a value is required")

    value = _parse_int(spec, arg)
    _check_range(spec, arg, value, (grammar.minimum, grammar.maximum))

    # The caller's digits go out verbatim, so they must fit the field.
    if len(arg) > grammar.width:
        raise InvalidParameterError(spec.name, arg, f"longer than {grammar.width} characters")

    return pad_param(arg, grammar.width)


def _encode_bounded(spec: CommandSpec, grammar: BoundedInt, arg: str) -> List[ProtocolFrame]:
    return [ProtocolFrame(spec.opcode, _bounded_param(spec, grammar, arg))]


def _encode_composite(spec: CommandSpec, grammar: Composite2Field, arg: str) -> List[ProtocolFrame]:
    """
    Encode "major.minor" channel numbers.

    "12" is accepted as "12.0".
    """
    pattern = r"([0-9]+)(?:" + re.escape(grammar.separator) + r"([0-9]+))?"
    match = re.fullmatch(pattern, arg)
    if match is None:
        raise InvalidParameterError(spec.name, arg, f"expected major{grammar.separator}minor")

    major = int(match.group(1))
    minor = int(match.group(2)) if match.group(2) is not None else 0
    _check_range(spec, arg, major, grammar.major_bounds)
    _check_range(spec, arg, minor, grammar.minor_bounds)

    major_field = zero_pad(major, grammar.digits)
    minor_field = zero_pad(minor, grammar.digits)

    if grammar.packed:
        return [ProtocolFrame(spec.opcode, major_field + minor_field + grammar.suffix)]

    return [
        ProtocolFrame(spec.opcode, major_field + grammar.suffix),
        ProtocolFrame(grammar.minor_opcode, minor_field + grammar.suffix),
    ]


def _encode_banded(spec: CommandSpec, grammar: Banded, arg: str) -> List[ProtocolFrame]:
    if arg == "":
        raise InvalidParameterError(spec.name, arg, "a value is required")

    value = _parse_int(spec, arg)
    _check_range(spec, arg, value, (0, grammar.upper_bound))

    if value < grammar.boundary:
        return [ProtocolFrame(spec.opcode, zero_pad(value, grammar.width))]

    return [ProtocolFrame(grammar.high_opcode, zero_pad(value - grammar.offset, grammar.width))]


def _encode_noarg(spec: CommandSpec, grammar: NoArg, arg: str) -> List[ProtocolFrame]:
    return [ProtocolFrame(spec.opcode, pad_param(grammar.code))]


def _encode_routed(spec: CommandSpec, grammar: Routed, arg: str) -> List[ProtocolFrame]:
    route = grammar.routes.get(arg)
    if route is not None:
        opcode, code = route
        return [ProtocolFrame(opcode, pad_param(code))]

    return [ProtocolFrame(grammar.numeric_opcode, _bounded_param(spec, grammar.numeric, arg))]


_ENCODERS: Dict[type, Callable] = {
    Toggle: _encode_enumeration,
    Enumeration: _encode_enumeration,
    BoundedInt: _encode_bounded,
    Composite2Field: _encode_composite,
    Banded: _encode_banded,
    NoArg: _encode_noarg,
    Routed: _encode_routed,
}


def encode(spec: CommandSpec, arg: Optional[str] = "", arg2: Optional[str] = "") -> List[ProtocolFrame]:
    """
    Validate arguments and build the frames for one command.

    Args:
        spec: Command table entry.
        arg: First argument ("" when omitted).
        arg2: Second argument ("" when omitted).

    Returns:
        Frames in the order they must be sent.

    Raises:
        InvalidParameterError: If the arguments do not satisfy the grammar.

    Example:
        >>> from aquosctl.protocol.registry import CommandRegistry
        >>> encode(CommandRegistry().lookup("vol"), "30")
        [ProtocolFrame(opcode='VOLM', parameter='30  ')]
    """
    arg = arg or ""
    arg2 = arg2 or ""
    grammar = spec.grammar

    if not isinstance(grammar, NoArg):
        supplied = 2 if arg2 else 1 if arg else 0
        if supplied > spec.max_args:
            extra = arg2 if supplied == 2 else arg
            raise InvalidParameterError(spec.name, extra, f"takes at most {spec.max_args} argument(s)")
        if supplied < spec.min_args:
            raise InvalidParameterError(spec.name, arg, "a value is required")

    try:
        encoder = _ENCODERS[type(grammar)]
    except KeyError:
        raise TypeError(f"No encoder for grammar {type(grammar).__name__}") from None

    return encoder(spec, grammar, arg)
