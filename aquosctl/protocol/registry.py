"""
Command table for Sharp Aquos RS-232C control.

Two revisions of the vendor command table are supported:

- BASE: LC-42/46/52D64U operation manual, revision 12/16/05.
- EXTENDED: LC-80LE844U/LC-70LE847U/LC-60LE847U/LC-70LE745U/LC-60LE745U
  operation manual, revision 12/17/10. Adds the 3d and button commands and
  extra values for some existing commands.

The variant is chosen when a CommandRegistry is built, never per lookup.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, List

from aquosctl.protocol.grammar import (
    Banded,
    BoundedInt,
    Composite2Field,
    Enumeration,
    Grammar,
    NoArg,
    Routed,
    Toggle,
)
from aquosctl.utils.exceptions import InvalidCommandError


logger = logging.getLogger(__name__)


class ProtocolVariant(Enum):
    """Which revision of the command table is active."""
    BASE = "base"
    EXTENDED = "extended"


TABLE_VERSIONS = {
    ProtocolVariant.BASE: "12/16/05",
    ProtocolVariant.EXTENDED: "12/17/10",
}


@dataclass(frozen=True)
class CommandSpec:
    """One entry of the command table."""

    name: str
    opcode: str
    grammar: Grammar
    min_args: int
    max_args: int
    args_help: str
    description: str


def _spec(name, opcode, grammar, args_help, description, max_args=1):
    # Arguments are required unless empty input has a meaning of its own.
    if isinstance(grammar, NoArg):
        min_args, max_args = 0, 0
    elif isinstance(grammar, Toggle) or isinstance(grammar, Routed) and "" in grammar.routes:
        min_args = 0
    elif isinstance(grammar, Enumeration) and grammar.toggle_code is not None:
        min_args = 0
    else:
        min_args = 1
    return CommandSpec(name, opcode, grammar, min_args, max_args, args_help, description)


_AVMODE_CODES = MappingProxyType({
    "standard": "1",
    "movie": "2",
    "game": "3",
    "user": "4",
    "dyn-fixed": "5",
    "dyn": "6",
    "pc": "7",
    "xvycc": "8",
})

_AVMODE_EXTENDED_CODES = MappingProxyType({
    "standard-3d": "14",
    "movie-3d": "15",
    "game-3d": "16",
    "auto": "100",
})

_VIEWMODE_CODES = MappingProxyType({
    "sidebar": "1",
    "sstretch": "2",
    "zoom": "3",
    "stretch": "4",
    "normal": "5",
    "zoom-pc": "6",
    "stretch-pc": "7",
    "dotbydot": "8",
    "full": "9",
})

_VIEWMODE_EXTENDED_CODES = MappingProxyType({
    "auto": "10",
    "original": "11",
})

_SURROUND_BASE_CODES = MappingProxyType({
    "on": "1",
    "off": "2",
})

_SURROUND_EXTENDED_CODES = MappingProxyType({
    "normal": "1",
    "off": "2",
    "3d-hall": "4",
    "3d-movie": "5",
    "3d-standard": "6",
    "3d-stadium": "7",
})

_SLEEP_CODES = MappingProxyType({
    "off": "0",
    "0": "0",
    "30": "1",
    "60": "2",
    "90": "3",
    "120": "4",
})

_3D_CODES = MappingProxyType({
    "off": "0",
    "2d3d": "1",
    "sbs": "2",
    "tab": "3",
    "3d2d-sbs": "4",
    "3d2d-tab": "5",
    "3d-auto": "6",
    "2d-auto": "7",
})

# Remote control keys. Aliases share a code; 25, 26 and 37 are unassigned.
_BUTTON_CODES = MappingProxyType({
    **{str(digit): str(digit) for digit in range(10)},
    ".": "10",
    "ent": "11",
    "enter": "11",
    "power": "12",
    "display": "13",
    "power-source": "14",
    "rew": "15",
    "play": "16",
    "ff": "17",
    "pause": "18",
    "prev": "19",
    "stop": "20",
    "next": "21",
    "rec": "22",
    "option": "23",
    "sleep": "24",
    "cc": "27",
    "avmode": "28",
    "viewmode": "29",
    "flashback": "30",
    "mute": "31",
    "vol-": "32",
    "voldn": "32",
    "vol+": "33",
    "volup": "33",
    "chup": "34",
    "chdn": "35",
    "input": "36",
    "menu": "38",
    "startcenter": "39",
    "up": "41",
    "down": "42",
    "left": "43",
    "right": "44",
    "return": "45",
    "exit": "46",
    "fav": "47",
    "favorite": "47",
    "favoritech": "47",
    "3d-surround": "48",
    "audio": "49",
    "a": "50",
    "red": "50",
    "b": "51",
    "green": "51",
    "c": "52",
    "blue": "52",
    "d": "53",
    "yellow": "53",
    "freeze": "54",
    "favapp1": "55",
    "favapp2": "56",
    "favapp3": "57",
    "3d": "58",
    "netflix": "59",
})


def build_command_table(variant: ProtocolVariant) -> List[CommandSpec]:
    """
    Build the ordered command table for a protocol variant.

    Args:
        variant: Active command table revision.

    Returns:
        List of CommandSpec in usage-listing order.
    """
    extended = variant is ProtocolVariant.EXTENDED

    poenable_codes = {"on": "1", "off": "0"}
    if extended:
        poenable_codes["on-ip"] = "2"

    max_input = 8 if extended else 7

    avmode_codes = dict(_AVMODE_CODES)
    viewmode_codes = dict(_VIEWMODE_CODES)
    if extended:
        avmode_codes.update(_AVMODE_EXTENDED_CODES)
        viewmode_codes.update(_VIEWMODE_EXTENDED_CODES)

    surround_codes = _SURROUND_EXTENDED_CODES if extended else _SURROUND_BASE_CODES

    table = [
        _spec("poenable", "RSPW", Enumeration(poenable_codes),
              "{ " + " | ".join(poenable_codes) + " }",
              "Enable/Disable power on command."),
        _spec("power", "POWR", Enumeration({"on": "1", "off": "0"}),
              "{ on | off }",
              "Turn TV on/off."),
        _spec("input", "IAVD",
              Routed(
                  routes={"": ("ITGD", "0"), "tv": ("ITVD", "0")},
                  numeric_opcode="IAVD",
                  numeric=BoundedInt(1, max_input),
              ),
              f"[ tv | 1 - {max_input} ]",
              f"Select TV, INPUT1-{max_input}; blank to toggle."),
        _spec("avmode", "AVMD", Toggle(avmode_codes),
              "[" + "|".join(avmode_codes) + "]",
              "AV mode selection; blank to toggle."),
        _spec("vol", "VOLM", BoundedInt(0, 60),
              "{ 0 - 60 }",
              "Set volume (0-60)."),
        # Real ranges depend on view mode and signal type.
        _spec("hpos", "HPOS", BoundedInt(0, 999),
              "<varies depending on View Mode or signal type>",
              "Horizontal Position. Ranges are on the position setting screen."),
        _spec("vpos", "VPOS", BoundedInt(0, 999),
              "<varies depending on View Mode or signal type>",
              "Vertical Position. Ranges are on the position setting screen."),
        _spec("clock", "CLCK", BoundedInt(0, 180),
              "{ 0 - 180 }",
              "Only in PC mode."),
        _spec("phase", "PHSE", BoundedInt(0, 40),
              "{ 0 - 40 }",
              "Only in PC mode."),
        _spec("viewmode", "WIDE", Toggle(viewmode_codes),
              "[" + "|".join(viewmode_codes) + "]",
              "View modes (vary depending on input signal type -- see manual); blank to toggle."),
        _spec("mute", "MUTE", Toggle({"on": "1", "off": "2"}),
              "[ on | off ]",
              "Mute on/off; blank to toggle."),
        _spec("surround", "ACSU", Toggle(surround_codes),
              "[ " + " | ".join(surround_codes) + " ]",
              "Surround mode; blank to toggle."),
        _spec("audiosel", "ACHA", NoArg(),
              "<none>",
              "Audio selection toggle."),
        _spec("sleep", "OFTM", Enumeration(_SLEEP_CODES),
              "{ off or 0 | 30 | 60 | 90 | 120 }",
              "Sleep timer off or 30/60/90/120 minutes."),
        _spec("achan", "DCCH", BoundedInt(1, 135),
              "{ 1 - 135 }",
              "Analog channel selection. Over-the-air: 2-69, Cable: 1-135."),
        _spec("dchan", "DA2P",
              Composite2Field(major_bounds=(0, 99), minor_bounds=(0, 99), digits=2, packed=True),
              "{ xx.yy } or { xx } (xx=channel 1-99, yy=subchannel 0-99)",
              "Digital over-the-air channel selection."),
        _spec("dcabl1", "DC2U",
              Composite2Field(major_bounds=(0, 999), minor_bounds=(0, 999), digits=3,
                              minor_opcode="DC2L", suffix=" "),
              "{ xxx.yyy } or { xxx } (xxx=major ch. 1-999, yyy=minor ch. 0-999)",
              "Digital cable (type one)."),
        # High band re-bases by exactly 10000; not confirmed against the vendor manual.
        _spec("dcabl2", "DC10",
              Banded(boundary=10000, upper_bound=16383, offset=10000, high_opcode="DC11"),
              "{ 0 - 16383 }",
              "Digital cable (type two), channels 0-16383."),
        _spec("chup", "CHUP", NoArg(),
              "<none>",
              "Channel up. Will switch to TV input if not already selected."),
        _spec("chdn", "CHDW", NoArg(),
              "<none>",
              "Channel down. Will switch to TV input if not already selected."),
        _spec("cc", "CLCP", NoArg(),
              "<none>",
              "Closed Caption toggle."),
    ]

    if extended:
        table += [
            _spec("3d", "TDCH", Enumeration(_3D_CODES),
                  "{ " + " | ".join(_3D_CODES) + " }",
                  "3D mode selection."),
            _spec("button", "RCKY", Enumeration(_BUTTON_CODES),
                  "{ button on remote }",
                  "Simulate remote control button press."),
        ]

    return table


class CommandRegistry:
    """
    Name to CommandSpec lookup for one protocol variant.

    Names are matched exactly and case-sensitively.
    """

    def __init__(self, variant: ProtocolVariant = ProtocolVariant.BASE):
        self._variant = variant
        self._commands: Dict[str, CommandSpec] = {}

        for spec in build_command_table(variant):
            if spec.name in self._commands:
                raise ValueError(f"Duplicate command name in table: {spec.name}")
            self._commands[spec.name] = spec

        logger.debug(f"Command table {self.table_version} loaded ({len(self._commands)} commands)")

    @property
    def variant(self) -> ProtocolVariant:
        """Active protocol variant."""
        return self._variant

    @property
    def table_version(self) -> str:
        """Vendor manual revision of the active table."""
        return TABLE_VERSIONS[self._variant]

    def lookup(self, name: str) -> CommandSpec:
        """
        Resolve a command name.

        Raises:
            InvalidCommandError: If name is not in the active table.
        """
        try:
            return self._commands[name]
        except KeyError:
            raise InvalidCommandError(name) from None

    def commands(self) -> List[CommandSpec]:
        """All commands in table order."""
        return list(self._commands.values())
