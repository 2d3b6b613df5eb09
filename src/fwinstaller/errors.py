"""Exception hierarchy for the firmware installer."""

from typing import Optional


class InstallerError(Exception):
    """Base exception for all installer errors."""
    pass


class SelectionError(InstallerError):
    """Raised when the file selection provider fails or yields no usable path."""
    pass


class InvalidState(InstallerError):
    """Raised when a session operation is invoked from a phase that forbids it."""

    def __init__(self, operation: str, phase, message: Optional[str] = None):
        self.operation = operation
        self.phase = phase
        phase_value = getattr(phase, "value", phase)
        super().__init__(
            message or f"Cannot {operation} while session is {phase_value}"
        )


class SessionBusy(InvalidState):
    """Raised when a new installation is requested while one is running."""
    pass


class ExtractionError(InstallerError):
    """Raised by extractors when a package cannot be unpacked."""
    pass
