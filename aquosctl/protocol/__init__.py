"""
Protocol package for Aquos serial communication.
"""

from aquosctl.protocol.frame import ProtocolFrame
from aquosctl.protocol.interface import ByteTransport
from aquosctl.protocol.serial_transport import SerialTransport
from aquosctl.protocol.port_scanner import PortInfo, list_available_ports
from aquosctl.protocol.registry import CommandRegistry, CommandSpec, ProtocolVariant
from aquosctl.protocol.encoder import encode
from aquosctl.protocol.transaction import OutcomeKind, ResponseOutcome, execute

__all__ = [
    "ProtocolFrame",
    "ByteTransport",
    "SerialTransport",
    "PortInfo",
    "list_available_ports",
    "CommandRegistry",
    "CommandSpec",
    "ProtocolVariant",
    "encode",
    "OutcomeKind",
    "ResponseOutcome",
    "execute",
]
