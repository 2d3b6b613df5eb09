"""Install session state machine."""

import logging
import threading
from typing import Optional

from fwinstaller.errors import InvalidState, SelectionError, SessionBusy
from fwinstaller.models.session import AcknowledgeResult, SessionSnapshot
from fwinstaller.models.status import OutcomeEnum, PhaseEnum
from fwinstaller.services.progress import ProgressChannel


class InstallSession:
    """The single install workflow instance shared by worker and observers.

    Manages:
    - Phase transitions (idle → awaitingSelection → installing → completed → idle)
    - Progress reported by the worker (through a ProgressChannel)
    - The final result published by the finalizer

    Every mutation happens inside one lock guarding the whole session, so
    the completed phase is never visible before its version and outcome.
    Transitions from an unexpected phase raise InvalidState and leave all
    fields unchanged.
    """

    def __init__(self, progress_channel: Optional[ProgressChannel] = None):
        """Initialize session at idle.

        Args:
            progress_channel: ProgressChannel instance (new one if None)
        """
        self.logger = logging.getLogger("fwinstaller.session")
        self._lock = threading.Lock()
        self._progress = progress_channel or ProgressChannel()

        self._phase: PhaseEnum = PhaseEnum.IDLE
        self._source_path: Optional[str] = None
        self._delete_source_on_finish: bool = False
        self._result_version: str = ""
        self._outcome: OutcomeEnum = OutcomeEnum.PENDING
        self._error: Optional[str] = None

    @property
    def phase(self) -> PhaseEnum:
        return self._phase

    @property
    def progress(self) -> int:
        return self._progress.read()

    def snapshot(self) -> SessionSnapshot:
        """Get a consistent copy of all session fields.

        Returns:
            SessionSnapshot taken under the session lock
        """
        with self._lock:
            return SessionSnapshot(
                phase=self._phase,
                progress=self._progress.read(),
                source_path=self._source_path,
                delete_source_on_finish=self._delete_source_on_finish,
                result_version=self._result_version,
                outcome=self._outcome,
                error=self._error,
            )

    def request_selection(self) -> None:
        """Begin a selection request (idle → awaitingSelection)."""
        with self._lock:
            self._require(PhaseEnum.IDLE, "request selection")
            self._set_phase(PhaseEnum.AWAITING_SELECTION)

    def confirm_selection(self, path: str) -> None:
        """Accept the selected package (awaitingSelection → installing).

        The caller is responsible for launching the worker afterwards.

        Args:
            path: Package chosen by the user

        Raises:
            SessionBusy: If an installation is already running
            InvalidState: If no selection was requested
            SelectionError: If path is empty
        """
        with self._lock:
            if self._phase == PhaseEnum.INSTALLING:
                raise SessionBusy(
                    "confirm selection",
                    self._phase,
                    "An installation is already in progress",
                )
            self._require(PhaseEnum.AWAITING_SELECTION, "confirm selection")
            if not path:
                raise SelectionError("Selected package path is empty")

            self._source_path = str(path)
            self._set_phase(PhaseEnum.INSTALLING)
        self.logger.info(f"Installing package: {path}")

    def cancel_selection(self) -> None:
        """Abandon the selection request (awaitingSelection → idle)."""
        with self._lock:
            self._require(PhaseEnum.AWAITING_SELECTION, "cancel selection")
            self._reset_fields()
            self._set_phase(PhaseEnum.IDLE)
        self.logger.info("Package selection cancelled")

    def fail_selection(self, message: str) -> None:
        """Record a selection provider error and return to idle.

        Args:
            message: Error reported by the selection provider
        """
        with self._lock:
            self._require(PhaseEnum.AWAITING_SELECTION, "fail selection")
            self._reset_fields()
            self._set_phase(PhaseEnum.IDLE)
        self.logger.error(f"Error initializing file dialog: {message}")

    def report_progress(self, value: int) -> int:
        """Forward worker progress into the progress channel.

        Args:
            value: Percentage completion (0-100)

        Returns:
            The progress value now visible to readers

        Raises:
            InvalidState: If no installation is running
            ValueError: If value is outside 0-100
        """
        with self._lock:
            self._require(PhaseEnum.INSTALLING, "report progress")
            stored = self._progress.report(value)
        self.logger.debug(f"Install progress: {stored}%")
        return stored

    def mark_completed(
        self,
        outcome: OutcomeEnum,
        version: str = "",
        error: Optional[str] = None,
    ) -> None:
        """Publish the final result (installing → completed).

        Phase, outcome, version and error become visible together.

        Args:
            outcome: SUCCESS or FAILURE
            version: Firmware version read from the extracted package
            error: Failure reason if outcome == FAILURE

        Raises:
            InvalidState: If not installing
            ValueError: If outcome is PENDING
        """
        if outcome == OutcomeEnum.PENDING:
            raise ValueError("Completion outcome must be success or failure")

        with self._lock:
            self._require(PhaseEnum.INSTALLING, "mark completed")
            self._result_version = version or ""
            self._outcome = outcome
            self._error = error if outcome == OutcomeEnum.FAILURE else None
            self._set_phase(PhaseEnum.COMPLETED)

        if outcome == OutcomeEnum.SUCCESS:
            self.logger.info(
                f"Installation succeeded, version={version or '<unknown>'}"
            )
        else:
            self.logger.error(f"Installation failed: {error}")

    def set_delete_source_on_finish(self, enabled: bool) -> None:
        """Choose whether acknowledge() should delete the source package.

        Raises:
            InvalidState: If the session is idle
        """
        with self._lock:
            if self._phase == PhaseEnum.IDLE:
                raise InvalidState("set delete-source flag", self._phase)
            self._delete_source_on_finish = bool(enabled)

    def acknowledge(self) -> AcknowledgeResult:
        """Dismiss the result and reset to idle (completed → idle).

        Returns:
            The source path and delete flag consumed by the reset

        Raises:
            InvalidState: If not completed
        """
        with self._lock:
            self._require(PhaseEnum.COMPLETED, "acknowledge")
            consumed = AcknowledgeResult(
                source_path=self._source_path,
                delete_source=self._delete_source_on_finish,
                outcome=self._outcome,
                result_version=self._result_version,
            )
            self._reset_fields()
            self._set_phase(PhaseEnum.IDLE)

        self.logger.info("Session reset to idle")
        return consumed

    def _reset_fields(self) -> None:
        """Clear per-session fields. Caller holds the lock."""
        self._source_path = None
        self._delete_source_on_finish = False
        self._result_version = ""
        self._outcome = OutcomeEnum.PENDING
        self._error = None
        self._progress.reset()

    def _require(self, expected: PhaseEnum, operation: str) -> None:
        if self._phase != expected:
            raise InvalidState(operation, self._phase)

    def _set_phase(self, phase: PhaseEnum) -> None:
        self.logger.debug(f"Phase: {self._phase.value} -> {phase.value}")
        self._phase = phase
