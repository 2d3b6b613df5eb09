"""Runtime configuration for the firmware installer service."""

import logging
import os
from pathlib import Path
from typing import Dict, Mapping, Optional

from pydantic import BaseModel, Field, field_validator

STAGING_DIR_NAME = "PUP_DEC"
VERSION_DESCRIPTOR = Path("PUP") / "version.txt"
FONT_PACKAGE_DIR_NAME = "sa0"
FONT_PACKAGE_URL = "https://bit.ly/2P2rb0r"
PACKAGE_FILTER = "PUP"
# Suffixes PathFileSelector accepts without a warning; ZipPackageExtractor reads both
PACKAGE_SUFFIXES = ("PUP", "ZIP")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

ENV_PREFIX = "FWINSTALL_"


class InstallerConfig(BaseModel):
    """Installer settings.

    Loaded once at startup from ``FWINSTALL_*`` environment variables.
    """

    root: Path = Field(
        default=Path("./data"), description="Destination root (emulator pref path)"
    )
    log_file: str = Field(
        default="./logs/fwinstaller.log", description="Rotating log file path"
    )
    log_level: str = Field(default="INFO", description="Logging level name")
    host: str = Field(default="0.0.0.0", description="HTTP bind address")
    port: int = Field(default=12316, gt=0, lt=65536, description="HTTP port")
    poll_interval: float = Field(
        default=0.5, gt=0, description="Observer poll interval in seconds"
    )
    module_levels: Dict[str, str] = Field(
        default_factory=dict,
        description="Per-module level overrides, e.g. {\"progress\": \"DEBUG\"}",
    )

    @field_validator("log_level")
    @classmethod
    def known_log_level(cls, v: str) -> str:
        """Accept only standard logging level names."""
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("module_levels", mode="before")
    @classmethod
    def parse_module_levels(cls, v):
        """Accept a mapping or a 'progress=DEBUG,launcher=INFO' string."""
        if isinstance(v, str):
            pairs = [item.split("=", 1) for item in v.split(",") if item.strip()]
            if any(len(pair) != 2 for pair in pairs):
                raise ValueError(f"Invalid module levels: {v}")
            v = {name.strip(): level.strip() for name, level in pairs}
        levels = {name: str(level).upper() for name, level in dict(v).items()}
        for name, level in levels.items():
            if level not in LOG_LEVELS:
                raise ValueError(f"Unknown log level for {name}: {level}")
        return levels

    @property
    def staging_dir(self) -> Path:
        return self.root / STAGING_DIR_NAME

    @property
    def version_file(self) -> Path:
        return self.staging_dir / VERSION_DESCRIPTOR

    @property
    def font_package_dir(self) -> Path:
        return self.root / FONT_PACKAGE_DIR_NAME

    @property
    def logging_level(self) -> int:
        return getattr(logging, self.log_level)

    @property
    def api_url(self) -> str:
        """Address observers on this machine use to reach the API."""
        host = "localhost" if self.host in ("0.0.0.0", "") else self.host
        return f"http://{host}:{self.port}"


def load_config(environ: Optional[Mapping[str, str]] = None) -> InstallerConfig:
    """Build configuration from environment variables.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        Validated InstallerConfig

    Raises:
        pydantic.ValidationError: If a variable holds an invalid value
    """
    environ = os.environ if environ is None else environ
    values = {}
    for field_name in (
        "root",
        "log_file",
        "log_level",
        "host",
        "port",
        "poll_interval",
        "module_levels",
    ):
        key = f"{ENV_PREFIX}{field_name.upper()}"
        if key in environ:
            values[field_name] = environ[key]
    return InstallerConfig(**values)
