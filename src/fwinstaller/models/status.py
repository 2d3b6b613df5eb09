"""Phase and outcome enums for the install session."""

from enum import Enum


class PhaseEnum(str, Enum):
    """Install session phases.

    State transitions:
    idle → awaitingSelection → installing → completed → idle
                  ↓
                 idle  (cancelled or selection error)
    """

    IDLE = "idle"
    AWAITING_SELECTION = "awaitingSelection"
    INSTALLING = "installing"
    COMPLETED = "completed"


class OutcomeEnum(str, Enum):
    """Final result of an installation, set once per session."""

    PENDING = "pending"
    SUCCESS = "success"
    FAILURE = "failure"


class SelectionStatus(str, Enum):
    """Result kinds returned by a file selection provider."""

    OK = "ok"
    CANCELLED = "cancelled"
    ERROR = "error"
