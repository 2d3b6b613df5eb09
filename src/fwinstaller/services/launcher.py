"""Install job launcher: one detached worker thread per confirmed package."""

import logging
import threading
from pathlib import Path
from typing import Optional

from fwinstaller.errors import SessionBusy
from fwinstaller.models.session import ExtractionResult
from fwinstaller.models.status import OutcomeEnum, PhaseEnum
from fwinstaller.services.extractor import Extractor, ZipPackageExtractor
from fwinstaller.services.finalizer import Finalizer
from fwinstaller.services.session_manager import InstallSession


class InstallLauncher:
    """Starts the extraction worker and hands its result to the finalizer.

    The worker communicates with observers only through the session; no
    result is returned to the caller of launch().
    """

    def __init__(
        self,
        session: InstallSession,
        finalizer: Finalizer,
        extractor: Optional[Extractor] = None,
    ):
        """Initialize launcher.

        Args:
            session: Session receiving progress and the final result
            finalizer: Finalizer run after extraction
            extractor: Package extractor (ZipPackageExtractor if None)
        """
        self.logger = logging.getLogger("fwinstaller.launcher")
        self.session = session
        self.finalizer = finalizer
        self.extractor = extractor or ZipPackageExtractor()
        self._lock = threading.Lock()
        self._worker: Optional[threading.Thread] = None

    def launch(self, source_path: str, destination_root: Path) -> threading.Thread:
        """Schedule the worker and return immediately.

        Args:
            source_path: Confirmed package path
            destination_root: Installer root the package is unpacked under

        Returns:
            The started worker thread

        Raises:
            SessionBusy: If the previous worker is still running
        """
        with self._lock:
            if self._worker is not None and self._worker.is_alive():
                raise SessionBusy(
                    "launch installation",
                    PhaseEnum.INSTALLING,
                    "An installation worker is already running",
                )

            worker = threading.Thread(
                target=self._run,
                args=(Path(source_path), Path(destination_root)),
                name="firmware-install",
                daemon=True,
            )
            self._worker = worker
            worker.start()

        self.logger.info(f"Install worker started for {source_path}")
        return worker

    def is_active(self) -> bool:
        with self._lock:
            return self._worker is not None and self._worker.is_alive()

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the current worker (used on shutdown and in tests).

        Returns:
            True if no worker is running afterwards
        """
        with self._lock:
            worker = self._worker
        if worker is None:
            return True
        worker.join(timeout)
        return not worker.is_alive()

    def _run(self, source_path: Path, destination_root: Path) -> None:
        """Worker body: extract, then finalize exactly once."""
        try:
            result = self.extractor.extract(
                destination_root, source_path, self.session.report_progress
            )
        except Exception as e:
            self.logger.error(f"Extractor raised for {source_path}: {e}", exc_info=True)
            result = ExtractionResult.failure(str(e))

        if result.ok:
            self.session.report_progress(100)

        try:
            self.finalizer.finalize(result)
        except Exception as e:
            self.logger.error(f"Finalization failed: {e}", exc_info=True)
            if self.session.phase == PhaseEnum.INSTALLING:
                self.session.mark_completed(
                    OutcomeEnum.FAILURE, error=f"FINALIZE_FAILED: {e}"
                )
