"""
Command dispatcher.

Runs one invocation: resolve the command, encode its frames, then send
them one at a time. The first frame that is not acknowledged with OK ends
the invocation; later frames are never sent. Nothing is retried, because
the set may already have acted on part of a multi-frame command.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from aquosctl.protocol.encoder import encode
from aquosctl.protocol.frame import ProtocolFrame
from aquosctl.protocol.interface import ByteTransport
from aquosctl.protocol.logger import ProtocolLogger
from aquosctl.protocol.registry import CommandRegistry
from aquosctl.protocol.transaction import OutcomeKind, ResponseOutcome, execute
from aquosctl.utils.exceptions import (
    CommandRejectedError,
    NotConnectedError,
    ResponseTimeoutError,
    UnexpectedResponseError,
)


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 1.0


@dataclass
class InvocationResult:
    """Successful invocation: every frame was acknowledged (or dry run)."""

    command: str
    frames: List[ProtocolFrame]
    outcomes: List[ResponseOutcome] = field(default_factory=list)
    dry_run: bool = False


class Dispatcher:
    """
    Translates (command, args) into acknowledged frames.

    Failures are raised, never returned:
    InvalidCommandError and InvalidParameterError before anything is sent,
    CommandRejectedError / UnexpectedResponseError / ResponseTimeoutError
    from the first frame that is not acknowledged.
    """

    def __init__(
        self,
        registry: CommandRegistry,
        transport: Optional[ByteTransport] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        dry_run: bool = False,
        protocol_logger: Optional[ProtocolLogger] = None,
        on_frame: Optional[Callable[[ProtocolFrame], None]] = None,
        on_outcome: Optional[Callable[[ResponseOutcome], None]] = None,
    ):
        """
        Args:
            registry: Active command table.
            transport: Open byte stream; may be None in dry-run mode.
            timeout: Per-frame reply deadline in seconds.
            dry_run: Encode and validate only, never touch the transport.
            protocol_logger: TX/RX record passed to each transaction.
            on_frame: Called with each frame just before it is sent.
            on_outcome: Called with each reply classification, failures included.
        """
        self._registry = registry
        self._transport = transport
        self._timeout = timeout
        self._dry_run = dry_run
        self._protocol_logger = protocol_logger
        self._on_frame = on_frame
        self._on_outcome = on_outcome

    def prepare(self, name: str, arg: str = "", arg2: str = "") -> List[ProtocolFrame]:
        """Resolve and encode without sending."""
        spec = self._registry.lookup(name)
        frames = encode(spec, arg, arg2)
        logger.debug(f"{name}: encoded {len(frames)} frame(s)")
        return frames

    def run(self, name: str, arg: str = "", arg2: str = "") -> InvocationResult:
        """
        Execute one command invocation.

        Args:
            name: Command name from the registry.
            arg: First argument ("" when omitted).
            arg2: Second argument ("" when omitted).

        Returns:
            InvocationResult with the frames sent and their outcomes.

        Raises:
            InvalidCommandError: Unknown command name.
            InvalidParameterError: Arguments rejected by the command's grammar.
            NotConnectedError: No open transport outside dry-run mode.
            CommandRejectedError: The set answered ERR.
            UnexpectedResponseError: The set answered something else.
            ResponseTimeoutError: No reply before the deadline.
            TransportIOError: The stream failed while sending or reading.
        """
        frames = self.prepare(name, arg, arg2)

        if self._dry_run:
            for frame in frames:
                logger.info(f"command='{frame.opcode}', parameter='{frame.parameter}' (not sent)")
            return InvocationResult(name, frames, dry_run=True)

        if self._transport is None or not self._transport.is_open():
            raise NotConnectedError("Transport not open")

        result = InvocationResult(name, frames)
        for frame in frames:
            logger.info(f"command='{frame.opcode}', parameter='{frame.parameter}'")
            if self._on_frame:
                self._on_frame(frame)
            outcome = execute(self._transport, frame, self._timeout, self._protocol_logger)
            result.outcomes.append(outcome)
            if self._on_outcome:
                self._on_outcome(outcome)
            self._raise_for_outcome(outcome)

        return result

    def _raise_for_outcome(self, outcome: ResponseOutcome) -> None:
        frame = outcome.frame
        if outcome.kind is OutcomeKind.SUCCESS:
            return
        if outcome.kind is OutcomeKind.TIMEOUT:
            raise ResponseTimeoutError(frame)
        if outcome.rejected:
            raise CommandRejectedError(
                f"Error: command/param '{frame}'",
                frame=frame,
                raw_text=outcome.raw_text,
            )
        raise UnexpectedResponseError(
            f"Error: unexpected response '{outcome.raw_text}' to command/param '{frame}'",
            frame=frame,
            raw_text=outcome.raw_text,
        )
