"""
Serial port enumeration.

Used by `aquosctl --list-ports` to help find the port the television's
RS-232C cable is attached to.
"""

import logging
from dataclasses import dataclass
from typing import List

import serial.tools.list_ports


logger = logging.getLogger(__name__)


@dataclass
class PortInfo:
    """Information about an available serial port."""

    name: str
    description: str
    hardware_id: str
    is_bluetooth: bool = False


def list_available_ports() -> List[PortInfo]:
    """
    List all available serial ports on the system.

    Bluetooth virtual ports are kept but flagged, since a paired adapter
    can carry the RS-232C link too.

    Returns:
        List of PortInfo objects sorted by port name.
    """
    ports = []

    for port in serial.tools.list_ports.comports():
        desc_lower = (port.description or "").lower()
        is_bluetooth = "bluetooth" in desc_lower or "bth" in desc_lower

        ports.append(
            PortInfo(
                name=port.device,
                description=port.description or "Unknown",
                hardware_id=port.hwid or "",
                is_bluetooth=is_bluetooth,
            )
        )

    ports.sort(key=lambda p: p.name)

    logger.debug(f"Found {len(ports)} serial ports")
    return ports
