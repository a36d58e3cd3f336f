"""Tests for argument validation and frame encoding."""

import pytest

from aquosctl.protocol.encoder import encode
from aquosctl.protocol.frame import ProtocolFrame
from aquosctl.utils.exceptions import InvalidParameterError


BOUNDED = [
    ("vol", "VOLM", 0, 60),
    ("hpos", "HPOS", 0, 999),
    ("vpos", "VPOS", 0, 999),
    ("clock", "CLCK", 0, 180),
    ("phase", "PHSE", 0, 40),
    ("achan", "DCCH", 1, 135),
]


def _params(frames):
    return [(f.opcode, f.parameter) for f in frames]


# Bounded numeric commands

@pytest.mark.parametrize("name,opcode,low,high", BOUNDED)
def test_bounded_accepts_limits(base_registry, name, opcode, low, high):
    spec = base_registry.lookup(name)
    for value in (low, high):
        assert encode(spec, str(value)) == [ProtocolFrame(opcode, str(value).ljust(4))]


@pytest.mark.parametrize("name,opcode,low,high", BOUNDED)
def test_bounded_rejects_just_outside(base_registry, name, opcode, low, high):
    spec = base_registry.lookup(name)
    for value in (low - 1, high + 1):
        with pytest.raises(InvalidParameterError) as exc_info:
            encode(spec, str(value))
        assert exc_info.value.command == name
        assert exc_info.value.value == str(value)


@pytest.mark.parametrize("name,opcode,low,high", BOUNDED)
@pytest.mark.parametrize("bad", ["", "abc", "12abc", "1.5", " 12", "1_0", "+5"])
def test_bounded_rejects_non_numeric(base_registry, name, opcode, low, high, bad):
    with pytest.raises(InvalidParameterError):
        encode(base_registry.lookup(name), bad)


def test_bounded_sends_caller_digits(base_registry):
    """Leading zeros the caller typed are kept; none are added."""
    spec = base_registry.lookup("vol")
    assert encode(spec, "007") == [ProtocolFrame("VOLM", "007 ")]
    assert encode(spec, "7") == [ProtocolFrame("VOLM", "7   ")]


def test_bounded_rejects_text_wider_than_field(base_registry):
    with pytest.raises(InvalidParameterError):
        encode(base_registry.lookup("vol"), "00060")


def test_bounded_rejects_second_argument(base_registry):
    with pytest.raises(InvalidParameterError):
        encode(base_registry.lookup("vol"), "30", "5")


# Toggle and enumerated commands

@pytest.mark.parametrize("name,opcode", [
    ("avmode", "AVMD"),
    ("viewmode", "WIDE"),
    ("mute", "MUTE"),
    ("surround", "ACSU"),
])
def test_toggle_empty_yields_toggle_code(base_registry, extended_registry, name, opcode):
    for registry in (base_registry, extended_registry):
        assert encode(registry.lookup(name), "") == [ProtocolFrame(opcode, "0   ")]


@pytest.mark.parametrize("name", ["avmode", "viewmode", "mute", "surround", "power", "poenable", "sleep"])
def test_unknown_token_rejected(base_registry, name):
    with pytest.raises(InvalidParameterError) as exc_info:
        encode(base_registry.lookup(name), "bogus")
    assert exc_info.value.value == "bogus"
    assert exc_info.value.command == name
    assert str(exc_info.value).startswith(f'Invalid parameter "bogus" for command {name}.')


@pytest.mark.parametrize("name", ["power", "poenable", "sleep"])
def test_enumeration_without_toggle_needs_value(base_registry, name):
    with pytest.raises(InvalidParameterError):
        encode(base_registry.lookup(name), "")


def test_tokens_are_case_sensitive(base_registry):
    with pytest.raises(InvalidParameterError):
        encode(base_registry.lookup("power"), "ON")


@pytest.mark.parametrize("arg,code", [
    ("standard", "1   "),
    ("dyn-fixed", "5   "),
    ("xvycc", "8   "),
])
def test_avmode_codes(base_registry, arg, code):
    assert encode(base_registry.lookup("avmode"), arg) == [ProtocolFrame("AVMD", code)]


def test_avmode_extended_values(base_registry, extended_registry):
    assert encode(extended_registry.lookup("avmode"), "auto") == [ProtocolFrame("AVMD", "100 ")]
    assert encode(extended_registry.lookup("avmode"), "game-3d") == [ProtocolFrame("AVMD", "16  ")]
    with pytest.raises(InvalidParameterError):
        encode(base_registry.lookup("avmode"), "auto")


def test_viewmode_extended_values(base_registry, extended_registry):
    assert encode(extended_registry.lookup("viewmode"), "original") == [ProtocolFrame("WIDE", "11  ")]
    with pytest.raises(InvalidParameterError):
        encode(base_registry.lookup("viewmode"), "original")


def test_surround_vocabulary_differs_by_variant(base_registry, extended_registry):
    assert encode(base_registry.lookup("surround"), "on") == [ProtocolFrame("ACSU", "1   ")]
    assert encode(extended_registry.lookup("surround"), "normal") == [ProtocolFrame("ACSU", "1   ")]
    assert encode(extended_registry.lookup("surround"), "3d-stadium") == [ProtocolFrame("ACSU", "7   ")]
    with pytest.raises(InvalidParameterError):
        encode(extended_registry.lookup("surround"), "on")


def test_poenable_on_ip_extended_only(base_registry, extended_registry):
    assert encode(extended_registry.lookup("poenable"), "on-ip") == [ProtocolFrame("RSPW", "2   ")]
    with pytest.raises(InvalidParameterError):
        encode(base_registry.lookup("poenable"), "on-ip")


@pytest.mark.parametrize("arg,code", [("off", "0   "), ("0", "0   "), ("30", "1   "), ("120", "4   ")])
def test_sleep_codes(base_registry, arg, code):
    assert encode(base_registry.lookup("sleep"), arg) == [ProtocolFrame("OFTM", code)]


@pytest.mark.parametrize("arg,code", [
    ("5", "5   "),
    (".", "10  "),
    ("enter", "11  "),
    ("ent", "11  "),
    ("vol+", "33  "),
    ("yellow", "53  "),
    ("netflix", "59  "),
])
def test_button_codes(extended_registry, arg, code):
    assert encode(extended_registry.lookup("button"), arg) == [ProtocolFrame("RCKY", code)]


def test_3d_codes(extended_registry):
    assert encode(extended_registry.lookup("3d"), "2d-auto") == [ProtocolFrame("TDCH", "7   ")]


# Composite channel commands

def test_dcabl1_splits_major_minor(base_registry):
    frames = encode(base_registry.lookup("dcabl1"), "12.34")
    assert _params(frames) == [("DC2U", "012 "), ("DC2L", "034 ")]


def test_dcabl1_minor_defaults_to_zero(base_registry):
    frames = encode(base_registry.lookup("dcabl1"), "12")
    assert _params(frames) == [("DC2U", "012 "), ("DC2L", "000 ")]


@pytest.mark.parametrize("bad", ["", "1000", "12.1000", "12.", ".5", "a.b", "12.34.5", "-1.2"])
def test_dcabl1_rejects(base_registry, bad):
    with pytest.raises(InvalidParameterError):
        encode(base_registry.lookup("dcabl1"), bad)


def test_dchan_packs_into_one_frame(base_registry):
    assert _params(encode(base_registry.lookup("dchan"), "12.34")) == [("DA2P", "1234")]
    assert _params(encode(base_registry.lookup("dchan"), "5")) == [("DA2P", "0500")]


@pytest.mark.parametrize("bad", ["100", "12.100", "x"])
def test_dchan_rejects(base_registry, bad):
    with pytest.raises(InvalidParameterError):
        encode(base_registry.lookup("dchan"), bad)


# Banded command

@pytest.mark.parametrize("arg,opcode,param", [
    ("0", "DC10", "0000"),
    ("42", "DC10", "0042"),
    ("9999", "DC10", "9999"),
    ("10000", "DC11", "0000"),
    ("16383", "DC11", "6383"),
])
def test_dcabl2_bands(base_registry, arg, opcode, param):
    assert _params(encode(base_registry.lookup("dcabl2"), arg)) == [(opcode, param)]


@pytest.mark.parametrize("bad", ["16384", "-1", "", "ten"])
def test_dcabl2_rejects(base_registry, bad):
    with pytest.raises(InvalidParameterError):
        encode(base_registry.lookup("dcabl2"), bad)


# Argument-less commands

@pytest.mark.parametrize("name,opcode", [
    ("audiosel", "ACHA"),
    ("chup", "CHUP"),
    ("chdn", "CHDW"),
    ("cc", "CLCP"),
])
def test_noarg_ignores_arguments(base_registry, name, opcode):
    spec = base_registry.lookup(name)
    expected = [ProtocolFrame(opcode, "0   ")]
    assert encode(spec) == expected
    assert encode(spec, "anything", "else") == expected


# Input selection

def test_input_routes(base_registry):
    spec = base_registry.lookup("input")
    assert _params(encode(spec, "")) == [("ITGD", "0   ")]
    assert _params(encode(spec, "tv")) == [("ITVD", "0   ")]
    assert _params(encode(spec, "3")) == [("IAVD", "3   ")]


def test_input_range_by_variant(base_registry, extended_registry):
    with pytest.raises(InvalidParameterError):
        encode(base_registry.lookup("input"), "8")
    assert _params(encode(extended_registry.lookup("input"), "8")) == [("IAVD", "8   ")]


@pytest.mark.parametrize("arg,arg2", [("0", ""), ("9", ""), ("hdmi", ""), ("1", "2"), ("", "2")])
def test_input_rejects(base_registry, arg, arg2):
    with pytest.raises(InvalidParameterError):
        encode(base_registry.lookup("input"), arg, arg2)


def test_none_arguments_treated_as_empty(base_registry):
    assert encode(base_registry.lookup("mute"), None, None) == [ProtocolFrame("MUTE", "0   ")]


# Purity

@pytest.mark.parametrize("name,arg", [
    ("vol", "30"),
    ("dcabl1", "12.34"),
    ("dcabl2", "16383"),
    ("dchan", "7.1"),
    ("avmode", ""),
    ("input", "tv"),
])
def test_encode_is_repeatable(base_registry, name, arg):
    spec = base_registry.lookup(name)
    first = encode(spec, arg)
    second = encode(spec, arg)
    assert [f.to_bytes() for f in first] == [f.to_bytes() for f in second]
