"""Package extractors used by the install worker."""

import logging
import shutil
import zipfile
from pathlib import Path, PurePosixPath
from typing import Callable, Protocol

from fwinstaller.config import STAGING_DIR_NAME
from fwinstaller.errors import ExtractionError
from fwinstaller.models.session import ExtractionResult

ProgressCallback = Callable[[int], None]


class Extractor(Protocol):
    """Unpacks a firmware package under a destination root."""

    def extract(
        self,
        destination_root: Path,
        source_path: Path,
        on_progress: ProgressCallback,
    ) -> ExtractionResult:
        ...


class ZipPackageExtractor:
    """Extracts a ZIP firmware package into ``<root>/PUP_DEC``.

    Member paths are checked so nothing escapes the staging directory.
    Progress is reported after each member as a share of the member count.
    """

    def __init__(self, staging_dir_name: str = STAGING_DIR_NAME):
        self.logger = logging.getLogger("fwinstaller.extractor")
        self.staging_dir_name = staging_dir_name

    def extract(
        self,
        destination_root: Path,
        source_path: Path,
        on_progress: ProgressCallback,
    ) -> ExtractionResult:
        """Extract every member of the package.

        Args:
            destination_root: Configured installer root
            source_path: Package file selected by the user
            on_progress: Called with 0-100 after each member

        Returns:
            ExtractionResult, failed with a reason if the package is unreadable
        """
        staging_dir = Path(destination_root) / self.staging_dir_name
        self.logger.info(f"Extracting {source_path} into {staging_dir}")

        try:
            self._extract_members(Path(source_path), staging_dir, on_progress)
        except ExtractionError as e:
            self.logger.error(f"Extraction failed: {e}")
            return ExtractionResult.failure(str(e))

        self.logger.info(f"Extraction complete: {source_path}")
        return ExtractionResult.success()

    def _extract_members(
        self,
        source_path: Path,
        staging_dir: Path,
        on_progress: ProgressCallback,
    ) -> None:
        """Copy members into the staging directory.

        Raises:
            ExtractionError: If the package is missing, corrupt or unsafe
        """
        if not source_path.is_file():
            raise ExtractionError(f"Package not found: {source_path}")

        staging_dir.mkdir(parents=True, exist_ok=True)
        staging_root = staging_dir.resolve()

        try:
            with zipfile.ZipFile(source_path, "r") as zf:
                members = zf.infolist()
                total = len(members)
                on_progress(0)

                for idx, member in enumerate(members, start=1):
                    name = member.filename.replace("\\", "/")
                    pure = PurePosixPath(name)
                    if pure.is_absolute() or ".." in pure.parts:
                        raise ExtractionError(f"Unsafe path in package: {name}")

                    target = (staging_dir / pure.as_posix()).resolve()
                    if staging_root not in (target, *target.parents):
                        raise ExtractionError(f"Entry escapes staging directory: {name}")

                    if member.is_dir():
                        target.mkdir(parents=True, exist_ok=True)
                    else:
                        target.parent.mkdir(parents=True, exist_ok=True)
                        with zf.open(member, "r") as src_file:
                            with open(target, "wb") as dst_file:
                                shutil.copyfileobj(src_file, dst_file)

                    on_progress(int((idx / total) * 100))

                if total == 0:
                    on_progress(100)

        except zipfile.BadZipFile as e:
            raise ExtractionError(f"Invalid package archive: {e}")
        except OSError as e:
            raise ExtractionError(f"Failed to write package contents: {e}")
