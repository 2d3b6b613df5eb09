"""Post-install finalization: version read, staging cleanup, result publish."""

import logging
import shutil
from pathlib import Path
from typing import Optional

from fwinstaller.config import InstallerConfig
from fwinstaller.models.session import ExtractionResult
from fwinstaller.models.status import OutcomeEnum
from fwinstaller.services.session_manager import InstallSession


class Finalizer:
    """Runs once per worker after extraction returns."""

    def __init__(self, session: InstallSession, config: InstallerConfig):
        """Initialize finalizer.

        Args:
            session: Session to publish the result into
            config: Installer configuration (staging layout)
        """
        self.logger = logging.getLogger("fwinstaller.finalizer")
        self.session = session
        self.config = config

    def finalize(self, result: ExtractionResult) -> None:
        """Read the version, remove staging data and complete the session.

        A missing version descriptor is not a failure. The staging
        directory is removed whether or not the descriptor was found.

        Args:
            result: Outcome of the extraction step
        """
        try:
            version = self.read_version()
        finally:
            self.cleanup_staging()

        if result.ok:
            self.session.mark_completed(OutcomeEnum.SUCCESS, version)
        else:
            self.session.mark_completed(
                OutcomeEnum.FAILURE,
                version,
                error=f"EXTRACTION_FAILED: {result.reason}",
            )

    def read_version(self) -> str:
        """Read the first line of the extracted version descriptor.

        Undecodable bytes are replaced rather than failing the install.

        Returns:
            Version string, or "" if the descriptor is absent or unreadable
        """
        version_file = self.config.version_file
        try:
            with open(version_file, "r", encoding="utf-8", errors="replace") as f:
                version = f.readline().rstrip("\r\n")
        except FileNotFoundError:
            self.logger.warning(f"Firmware version file not found: {version_file}")
            return ""
        except OSError as e:
            self.logger.warning(f"Firmware version file unreadable: {version_file}: {e}")
            return ""

        self.logger.info(f"Firmware version: {version}")
        return version

    def cleanup_staging(self) -> None:
        """Remove the staging directory. Absent directory is fine."""
        staging_dir = self.config.staging_dir
        try:
            shutil.rmtree(staging_dir)
        except FileNotFoundError:
            self.logger.debug(f"Staging directory already removed: {staging_dir}")
            return
        self.logger.info(f"Removed staging directory {staging_dir}")

    def remove_source(self, source_path: Optional[str]) -> bool:
        """Delete the original package file.

        Args:
            source_path: Package path consumed by acknowledge()

        Returns:
            True if a file was deleted
        """
        if not source_path:
            return False

        path = Path(source_path)
        try:
            path.unlink()
        except FileNotFoundError:
            self.logger.warning(f"Source package already gone: {path}")
            return False

        self.logger.info(f"Deleted source package {path}")
        return True

    def font_package_missing(self) -> bool:
        """True if the firmware font package directory is absent or empty."""
        font_dir = self.config.font_package_dir
        if not font_dir.is_dir():
            return True
        return not any(font_dir.iterdir())
