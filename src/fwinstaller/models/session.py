"""Pydantic models describing install session state."""

from typing import Optional
from pydantic import BaseModel, Field

from fwinstaller.models.status import OutcomeEnum, PhaseEnum


class SessionSnapshot(BaseModel):
    """Consistent copy of every session field, taken under the session lock.

    Observers render from this model only; they never re-derive the outcome
    from side channels such as the staging directory.
    """

    phase: PhaseEnum = Field(..., description="Current workflow phase")
    progress: int = Field(..., ge=0, le=100, description="Extraction progress (0-100)")
    source_path: Optional[str] = Field(
        None, description="Package selected for installation"
    )
    delete_source_on_finish: bool = Field(
        default=False, description="Delete the source package on acknowledge"
    )
    result_version: str = Field(
        default="", description="Firmware version read after extraction"
    )
    outcome: OutcomeEnum = Field(
        default=OutcomeEnum.PENDING, description="Final installation outcome"
    )
    error: Optional[str] = Field(
        None, description="Failure reason if outcome == failure"
    )
    font_package_missing: Optional[bool] = Field(
        None, description="Whether the firmware font package still needs installing"
    )
    font_package_url: Optional[str] = Field(
        None, description="Where to download the font package, set when it is missing"
    )


class AcknowledgeResult(BaseModel):
    """Fields consumed by acknowledge() before the session reset."""

    source_path: Optional[str] = None
    delete_source: bool = False
    outcome: OutcomeEnum = OutcomeEnum.PENDING
    result_version: str = ""


class ExtractionResult(BaseModel):
    """Return value of an extractor run."""

    ok: bool = Field(..., description="True if the package was fully extracted")
    reason: Optional[str] = Field(
        None, description="Failure reason if ok is False"
    )

    @classmethod
    def success(cls) -> "ExtractionResult":
        return cls(ok=True)

    @classmethod
    def failure(cls, reason: str) -> "ExtractionResult":
        return cls(ok=False, reason=reason)
