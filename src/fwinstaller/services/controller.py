"""Install controller wiring selection, session, launcher and finalizer."""

import logging
from typing import Optional

from fwinstaller.config import FONT_PACKAGE_URL, PACKAGE_FILTER, InstallerConfig
from fwinstaller.errors import SelectionError
from fwinstaller.models.session import AcknowledgeResult, SessionSnapshot
from fwinstaller.models.status import OutcomeEnum, PhaseEnum, SelectionStatus
from fwinstaller.services.extractor import Extractor
from fwinstaller.services.finalizer import Finalizer
from fwinstaller.services.launcher import InstallLauncher
from fwinstaller.services.selection import FileSelector
from fwinstaller.services.session_manager import InstallSession


class InstallController:
    """Entry point used by the HTTP layer (or any other containing UI)."""

    def __init__(
        self,
        config: InstallerConfig,
        session: Optional[InstallSession] = None,
        extractor: Optional[Extractor] = None,
    ):
        self.logger = logging.getLogger("fwinstaller.controller")
        self.config = config
        self.session = session or InstallSession()
        self.finalizer = Finalizer(self.session, config)
        self.launcher = InstallLauncher(self.session, self.finalizer, extractor)

    def start(self, selector: FileSelector) -> PhaseEnum:
        """Run one selection round and launch the worker if a file was chosen.

        Args:
            selector: File selection provider

        Returns:
            Phase after the call (INSTALLING, or IDLE if cancelled)

        Raises:
            InvalidState: If the session is not idle
            SelectionError: If the provider reported an error
        """
        self.session.request_selection()

        try:
            result = selector.choose_file(PACKAGE_FILTER)
        except Exception as e:
            self.session.fail_selection(str(e))
            raise SelectionError(str(e)) from e

        if result.status == SelectionStatus.OK:
            self.confirm(result.path)
        elif result.status == SelectionStatus.CANCELLED:
            self.session.cancel_selection()
        else:
            self.session.fail_selection(result.message or "unknown error")
            raise SelectionError(result.message or "File selection failed")

        return self.session.phase

    def request_selection(self) -> None:
        self.session.request_selection()

    def cancel_selection(self) -> None:
        self.session.cancel_selection()

    def confirm(self, path: str) -> None:
        """Confirm a selected package and launch the install worker.

        Raises:
            SessionBusy: If an installation is already running
            InvalidState: If no selection was requested
            SelectionError: If path is empty
        """
        self.session.confirm_selection(path)
        try:
            self.launcher.launch(path, self.config.root)
        except Exception as e:
            self.logger.error(f"Failed to launch install worker: {e}", exc_info=True)
            self.session.mark_completed(OutcomeEnum.FAILURE, error=f"LAUNCH_FAILED: {e}")
            raise

    def set_delete_source(self, enabled: bool) -> None:
        self.session.set_delete_source_on_finish(enabled)

    def acknowledge(self) -> AcknowledgeResult:
        """Dismiss the completed result; delete the source package if requested.

        Raises:
            InvalidState: If the session is not completed
        """
        consumed = self.session.acknowledge()
        if consumed.delete_source:
            self.finalizer.remove_source(consumed.source_path)
        return consumed

    def status(self) -> SessionSnapshot:
        """Snapshot for observers, with the font package hint and link once completed."""
        snapshot = self.session.snapshot()
        if snapshot.phase == PhaseEnum.COMPLETED:
            missing = self.finalizer.font_package_missing()
            snapshot.font_package_missing = missing
            if missing:
                snapshot.font_package_url = FONT_PACKAGE_URL
        return snapshot

    def shutdown(self, timeout: float = 5.0) -> None:
        """Wait briefly for a running worker before the process exits."""
        if not self.launcher.join(timeout):
            self.logger.warning("Install worker still running at shutdown")
