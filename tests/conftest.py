"""Global pytest fixtures and configuration."""

import sys
import threading
import zipfile
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from fwinstaller.config import InstallerConfig
from fwinstaller.models.session import ExtractionResult


@pytest.fixture
def installer_config(tmp_path):
    """Config rooted in a temporary directory."""
    return InstallerConfig(
        root=tmp_path / "pref",
        log_file=str(tmp_path / "logs" / "test.log"),
    )


@pytest.fixture
def make_package(tmp_path):
    """Factory building a ZIP firmware package.

    version=None leaves out the PUP/version.txt descriptor.
    """

    def _make(name="PSVUPDAT.PUP", version="3.65", extra_files=3):
        package_path = tmp_path / "packages" / name
        package_path.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(package_path, "w") as zf:
            if version is not None:
                zf.writestr("PUP/version.txt", f"{version}\nbuild 0001\n")
            for idx in range(extra_files):
                zf.writestr(f"os0/module_{idx}.bin", b"\x00" * 128)
        return package_path

    return _make


class GatedExtractor:
    """Extractor that blocks until released, for observing the installing phase."""

    def __init__(self, steps=(10, 40, 70), version="3.65", ok=True):
        self.steps = steps
        self.version = version
        self.ok = ok
        self.started = threading.Event()
        self.release = threading.Event()
        self.calls = []

    def extract(self, destination_root, source_path, on_progress):
        self.calls.append((destination_root, source_path))
        staging = Path(destination_root) / "PUP_DEC" / "PUP"
        staging.mkdir(parents=True, exist_ok=True)
        if self.version is not None:
            (staging / "version.txt").write_text(f"{self.version}\n")
        for value in self.steps:
            on_progress(value)
        self.started.set()
        self.release.wait(timeout=5)
        if self.ok:
            return ExtractionResult.success()
        return ExtractionResult.failure("corrupt segment")


@pytest.fixture
def gated_extractor():
    extractor = GatedExtractor()
    yield extractor
    extractor.release.set()


@pytest.fixture
def make_gated_extractor():
    """Factory for GatedExtractor instances that are released on teardown."""
    created = []

    def _make(**kwargs):
        extractor = GatedExtractor(**kwargs)
        created.append(extractor)
        return extractor

    yield _make
    for extractor in created:
        extractor.release.set()
