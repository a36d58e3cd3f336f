"""
Command line entry point for aquosctl.

Usage:
    aquosctl [-h | -n | -p PORT | -v] {command} [arg] [arg2]
    python -m aquosctl --list-ports
    python -m aquosctl --write-example-config config.json
"""

import argparse
import logging
import sys
from typing import List, Optional

from aquosctl import __version__
from aquosctl.config.loader import (
    DEFAULT_CONFIG_FILE,
    ConfigurationError,
    create_example_config,
    load_config,
)
from aquosctl.config.models import AppConfig
from aquosctl.control.dispatcher import Dispatcher
from aquosctl.protocol.frame import ProtocolFrame
from aquosctl.protocol.interface import ByteTransport
from aquosctl.protocol.logger import ProtocolLogger, get_protocol_logger
from aquosctl.protocol.port_scanner import list_available_ports
from aquosctl.protocol.registry import CommandRegistry, ProtocolVariant
from aquosctl.protocol.transaction import ResponseOutcome
from aquosctl.protocol.serial_transport import SerialTransport
from aquosctl.simulator.mock_transport import MockAquosTransport
from aquosctl.utils.exceptions import AquosError
from aquosctl.utils.logging_setup import setup_logging


logger = logging.getLogger(__name__)

PROG = "aquosctl"


def format_command_table(registry: CommandRegistry) -> str:
    """Render the command listing shown under the usage line."""
    lines = ["command    args", "--------------------"]
    for spec in registry.commands():
        lines.append(f"{spec.name:<10} {spec.args_help}")
        lines.append(f"{'':<10} {spec.description}")
        lines.append("")
    return "\n".join(lines)


def build_parser(registry: CommandRegistry, default_port: str) -> argparse.ArgumentParser:
    """Build the full argument parser for the active command table."""
    parser = argparse.ArgumentParser(
        prog=PROG,
        description=(
            f"Control Sharp Aquos televisions via RS-232 "
            f"(command protocol revision {registry.table_version})."
        ),
        epilog=format_command_table(registry),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-n", "--no-send",
        action="store_true",
        help="Show commands being sent, but don't send them (No-send)."
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose mode."
    )
    parser.add_argument(
        "-p", "--port",
        type=str,
        default=default_port,
        help=f"Serial Port to use (default is {default_port})."
    )
    parser.add_argument(
        "--config",
        type=str,
        default=DEFAULT_CONFIG_FILE,
        help=f"Path to configuration file (default: {DEFAULT_CONFIG_FILE}, optional)"
    )
    parser.add_argument(
        "--protocol",
        choices=[v.value for v in ProtocolVariant],
        default=registry.variant.value,
        help="Command table revision (base: 12/16/05, extended: 12/17/10)."
    )
    parser.add_argument(
        "--simulate",
        action="store_true",
        help="Talk to the built-in television simulator instead of a serial port."
    )
    parser.add_argument(
        "--list-ports",
        action="store_true",
        help="List available serial ports and exit."
    )
    parser.add_argument(
        "--write-example-config",
        metavar="PATH",
        default=None,
        help="Write a configuration file with every default value to PATH and exit."
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("command", nargs="?", default=None, help="Command name (see below).")
    parser.add_argument("arg", nargs="?", default="", help="Command argument.")
    parser.add_argument("arg2", nargs="?", default="", help="Second command argument.")
    return parser


def _preparse(argv: Optional[List[str]]) -> argparse.Namespace:
    """Pick up --config and --protocol before the full parser is built."""
    pre = argparse.ArgumentParser(add_help=False)
    pre.add_argument("--config", default=DEFAULT_CONFIG_FILE)
    pre.add_argument("--protocol", default=None)
    known, _ = pre.parse_known_args(argv)
    return known


def _create_transport(config: AppConfig, port: str, simulate: bool) -> ByteTransport:
    if simulate or config.simulator.enabled:
        logger.info("Using SIMULATOR mode")
        return MockAquosTransport(config.simulator)

    serial_config = config.serial.model_copy(update={"port": port})
    return SerialTransport(serial_config)


def _echo_frame(frame: ProtocolFrame) -> None:
    print(f"command='{frame.opcode}', parameter='{frame.parameter}'")


def _echo_outcome(outcome: ResponseOutcome) -> None:
    if outcome.ok:
        print("Success.")


def _dump_protocol_log(protocol_log: ProtocolLogger) -> None:
    """Print the TX/RX record of a failed invocation to stderr."""
    for message in protocol_log.get_messages():
        line = f"{message['timestamp']} {message['direction']:<3} {message['text']}"
        if message["error"]:
            line += f"  ({message['error']})"
        print(line, file=sys.stderr)
    stats = protocol_log.get_stats()
    print(
        f"tx={stats['tx_count']} rx={stats['rx_count']} errors={stats['error_count']}",
        file=sys.stderr,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main application entry point.

    Returns:
        Process exit status: 0 on success, 1 on any failure.
    """
    early = _preparse(argv)

    try:
        config = load_config(early.config)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    protocol = early.protocol or config.serial.protocol
    try:
        variant = ProtocolVariant(protocol)
    except ValueError:
        # Let the full parser report the bad choice
        variant = ProtocolVariant(config.serial.protocol)

    registry = CommandRegistry(variant)
    parser = build_parser(registry, config.serial.port)
    args = parser.parse_args(argv)

    if args.verbose:
        config.logging.level = "DEBUG"
    setup_logging(config.logging)

    if args.write_example_config:
        try:
            create_example_config(args.write_example_config)
        except ConfigurationError as e:
            print(f"Configuration error: {e}", file=sys.stderr)
            return 1
        print(f"Wrote {args.write_example_config}")
        return 0

    if args.list_ports:
        ports = list_available_ports()
        if not ports:
            print("No serial ports found.")
        for port in ports:
            suffix = " (bluetooth)" if port.is_bluetooth else ""
            print(f"{port.name:<16} {port.description}{suffix}")
        return 0

    if not args.command:
        parser.print_help(sys.stderr)
        return 1

    if args.verbose:
        print(f"port={args.port}")

    protocol_log = get_protocol_logger()
    protocol_log.clear()
    protocol_log.enabled = args.verbose

    try:
        if args.no_send:
            result = Dispatcher(registry, dry_run=True).run(args.command, args.arg, args.arg2)
            for frame in result.frames:
                _echo_frame(frame)
            return 0

        # Validate before acquiring the port
        Dispatcher(registry, dry_run=True).prepare(args.command, args.arg, args.arg2)

        transport = _create_transport(config, args.port, args.simulate)
        with transport:
            dispatcher = Dispatcher(
                registry,
                transport,
                timeout=config.serial.response_timeout_seconds,
                protocol_logger=protocol_log,
                on_frame=_echo_frame if args.verbose else None,
                on_outcome=_echo_outcome if args.verbose else None,
            )
            dispatcher.run(args.command, args.arg, args.arg2)

    except AquosError as e:
        logger.debug("Invocation failed", exc_info=True)
        print(f"{PROG}: {e}", file=sys.stderr)
        if args.verbose:
            _dump_protocol_log(protocol_log)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
