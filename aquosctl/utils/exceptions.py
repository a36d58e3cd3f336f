"""
Custom exception classes for the Aquos serial control tool.
"""


class AquosError(Exception):
    """Base exception for all aquosctl errors."""
    pass


class InvalidCommandError(AquosError):
    """Command name is not in the active command table."""

    def __init__(self, command: str):
        self.command = command
        super().__init__(f"bad command '{command}'")


class InvalidParameterError(AquosError):
    """Argument failed the validation rules of its command."""

    def __init__(self, command: str, value: str, reason: str = ""):
        self.command = command
        self.value = value
        self.reason = reason
        message = f'Invalid parameter "{value}" for command {command}.'
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class TransportUnavailableError(AquosError):
    """The byte stream to the television could not be acquired."""
    pass


class PortNotFoundError(TransportUnavailableError):
    """Serial port does not exist."""
    pass


class PortInUseError(TransportUnavailableError):
    """Serial port is already open by another application."""
    pass


class TransportIOError(AquosError):
    """Reading from or writing to an open stream failed."""
    pass


class NotConnectedError(AquosError):
    """Raised when an operation needs an open transport and there is none."""
    pass


class ProtocolError(AquosError):
    """Reply was not an OK acknowledgement."""

    def __init__(self, message: str, frame=None, raw_text: str = ""):
        self.frame = frame
        self.raw_text = raw_text
        super().__init__(message)


class CommandRejectedError(ProtocolError):
    """Television answered ERR."""
    pass


class UnexpectedResponseError(ProtocolError):
    """Reply was neither OK nor ERR (or did not fit the read buffer)."""
    pass


class ResponseTimeoutError(AquosError):
    """No terminated reply arrived before the deadline."""

    def __init__(self, frame=None):
        self.frame = frame
        super().__init__("No response.")
