"""File selection providers."""

import logging
from pathlib import Path
from typing import Optional, Protocol

from fwinstaller.config import PACKAGE_SUFFIXES
from fwinstaller.models.selection import SelectionResult


class FileSelector(Protocol):
    """Chooses a package file, e.g. through a native file dialog."""

    def choose_file(self, file_filter: str) -> SelectionResult:
        ...


class PathFileSelector:
    """Selector answering with a path supplied up front by the caller.

    An empty path counts as cancelling the dialog. Besides the requested
    filter, ZIP packages are accepted silently (see PACKAGE_SUFFIXES);
    anything else is still returned, with a warning.
    """

    def __init__(self, path: Optional[str]):
        self.logger = logging.getLogger("fwinstaller.selection")
        self.path = path

    def choose_file(self, file_filter: str) -> SelectionResult:
        if not self.path:
            return SelectionResult.cancelled()

        candidate = Path(self.path)
        if not candidate.is_file():
            return SelectionResult.error(f"Package not found: {candidate}")

        accepted = {file_filter.upper(), *PACKAGE_SUFFIXES} if file_filter else set()
        if accepted and candidate.suffix.lstrip(".").upper() not in accepted:
            self.logger.warning(
                f"Selected file {candidate.name} does not match filter {file_filter}"
            )
        return SelectionResult.ok(str(candidate))
