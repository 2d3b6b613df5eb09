"""Thread-safe progress value shared between the worker and observers."""

import logging
import threading


class ProgressChannel:
    """Monotonic percentage written by the install worker.

    Writes are serialized by a lock; reads return the last stored int without
    waiting on the writer. Within one session the stored value never
    decreases: a lower report is clamped to the current value.
    """

    def __init__(self):
        self.logger = logging.getLogger("fwinstaller.progress")
        self._lock = threading.Lock()
        self._value = 0

    def report(self, value: int) -> int:
        """Store a new progress value.

        Args:
            value: Percentage completion (0-100)

        Returns:
            The value now stored (unchanged if ``value`` was lower)

        Raises:
            ValueError: If value is outside 0-100
        """
        value = int(value)
        if not 0 <= value <= 100:
            raise ValueError(f"Progress must be within 0-100, got {value}")

        with self._lock:
            if value < self._value:
                self.logger.debug(
                    f"Ignoring decreasing progress {value}% (current {self._value}%)"
                )
                return self._value
            self._value = value
            return value

    def read(self) -> int:
        return self._value

    def reset(self) -> None:
        """Reset to 0. Only the session reset on acknowledge calls this."""
        with self._lock:
            self._value = 0
