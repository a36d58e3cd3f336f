"""Tests for the dispatcher: lookup, encode, ordered transactions."""

import pytest

from aquosctl.control.dispatcher import Dispatcher
from aquosctl.protocol.frame import ProtocolFrame
from aquosctl.protocol.transaction import OutcomeKind
from aquosctl.utils.exceptions import (
    CommandRejectedError,
    InvalidCommandError,
    InvalidParameterError,
    NotConnectedError,
    ResponseTimeoutError,
    TransportIOError,
    UnexpectedResponseError,
)

from tests.conftest import FakeTransport


def _dispatcher(registry, transport, protocol_logger, timeout=0.05):
    return Dispatcher(registry, transport, timeout=timeout, protocol_logger=protocol_logger)


def test_single_frame_success(base_registry, protocol_logger):
    transport = FakeTransport([b"OK\r"])
    result = _dispatcher(base_registry, transport, protocol_logger).run("vol", "30")

    assert transport.wire == b"VOLM30  \r"
    assert result.command == "vol"
    assert result.frames == [ProtocolFrame("VOLM", "30  ")]
    assert [o.kind for o in result.outcomes] == [OutcomeKind.SUCCESS]
    assert not result.dry_run


def test_composite_sends_both_frames_in_order(base_registry, protocol_logger):
    transport = FakeTransport([b"OK\r", b"OK\r"])
    result = _dispatcher(base_registry, transport, protocol_logger).run("dcabl1", "12.34")

    assert transport.wire == b"DC2U012 \rDC2L034 \r"
    assert len(result.outcomes) == 2


def test_unknown_command_sends_nothing(base_registry, protocol_logger):
    transport = FakeTransport()
    with pytest.raises(InvalidCommandError):
        _dispatcher(base_registry, transport, protocol_logger).run("volume", "30")
    assert transport.writes == []


def test_invalid_parameter_sends_nothing(base_registry, protocol_logger):
    transport = FakeTransport()
    with pytest.raises(InvalidParameterError):
        _dispatcher(base_registry, transport, protocol_logger).run("vol", "61")
    assert transport.writes == []


def test_err_on_first_frame_skips_second(base_registry, protocol_logger):
    transport = FakeTransport([b"ERR\r", b"OK\r"])
    with pytest.raises(CommandRejectedError) as exc_info:
        _dispatcher(base_registry, transport, protocol_logger).run("dcabl1", "12.34")

    assert transport.frames_sent == 1
    assert len(transport.writes) == 3
    assert exc_info.value.frame == ProtocolFrame("DC2U", "012 ")
    assert str(exc_info.value) == "Error: command/param 'DC2U012 '"


def test_timeout_on_first_frame_skips_second(base_registry, protocol_logger):
    transport = FakeTransport([None, b"OK\r"])
    with pytest.raises(ResponseTimeoutError) as exc_info:
        _dispatcher(base_registry, transport, protocol_logger).run("dcabl1", "12.34")

    assert transport.frames_sent == 1
    assert str(exc_info.value) == "No response."


def test_unexpected_reply_on_second_frame(base_registry, protocol_logger):
    transport = FakeTransport([b"OK\r", b"FOO\r"])
    with pytest.raises(UnexpectedResponseError) as exc_info:
        _dispatcher(base_registry, transport, protocol_logger).run("dcabl1", "12.34")

    assert transport.frames_sent == 2
    assert exc_info.value.raw_text == "FOO"
    assert "unexpected response 'FOO'" in str(exc_info.value)
    assert "DC2L034 " in str(exc_info.value)


def test_dry_run_touches_no_transport(base_registry):
    result = Dispatcher(base_registry, dry_run=True).run("dcabl2", "16383")
    assert result.dry_run
    assert result.frames == [ProtocolFrame("DC11", "6383")]
    assert result.outcomes == []


def test_dry_run_still_validates(base_registry):
    with pytest.raises(InvalidParameterError):
        Dispatcher(base_registry, dry_run=True).run("dcabl2", "16384")


def test_no_transport_outside_dry_run(base_registry):
    with pytest.raises(NotConnectedError):
        Dispatcher(base_registry).run("vol", "30")


def test_closed_transport(base_registry, protocol_logger):
    transport = FakeTransport([b"OK\r"])
    transport.close()
    with pytest.raises(NotConnectedError):
        _dispatcher(base_registry, transport, protocol_logger).run("vol", "30")
    assert transport.writes == []


def test_prepare_does_not_send(base_registry, protocol_logger):
    transport = FakeTransport()
    frames = _dispatcher(base_registry, transport, protocol_logger).prepare("input", "tv")
    assert frames == [ProtocolFrame("ITVD", "0   ")]
    assert transport.writes == []


def test_registry_variant_is_respected(extended_registry, protocol_logger):
    transport = FakeTransport([b"OK\r"])
    _dispatcher(extended_registry, transport, protocol_logger).run("button", "menu")
    assert transport.wire == b"RCKY38  \r"


def test_callbacks_see_each_frame_before_failure(base_registry, protocol_logger):
    """The rejected frame is still reported through on_frame and on_outcome."""
    transport = FakeTransport([b"ERR\r", b"OK\r"])
    events = []
    dispatcher = Dispatcher(
        base_registry,
        transport,
        timeout=0.05,
        protocol_logger=protocol_logger,
        on_frame=lambda frame: events.append(("frame", frame.opcode, transport.frames_sent)),
        on_outcome=lambda outcome: events.append(("outcome", outcome.kind, outcome.ok)),
    )
    with pytest.raises(CommandRejectedError):
        dispatcher.run("dcabl1", "12.34")

    assert events == [
        ("frame", "DC2U", 0),
        ("outcome", OutcomeKind.PROTOCOL_ERROR, False),
    ]


def test_callbacks_on_success(base_registry, protocol_logger):
    transport = FakeTransport([b"OK\r", b"OK\r"])
    frames, outcomes = [], []
    Dispatcher(
        base_registry,
        transport,
        timeout=0.05,
        protocol_logger=protocol_logger,
        on_frame=frames.append,
        on_outcome=outcomes.append,
    ).run("dcabl1", "12.34")

    assert [f.opcode for f in frames] == ["DC2U", "DC2L"]
    assert all(o.ok for o in outcomes)


def test_transport_failure_propagates(base_registry, protocol_logger):
    class BrokenTransport(FakeTransport):
        def write(self, data):
            raise TransportIOError("Write to /dev/ttyS0 failed: Write timeout")

    with pytest.raises(TransportIOError):
        _dispatcher(base_registry, BrokenTransport(), protocol_logger).run("vol", "30")
