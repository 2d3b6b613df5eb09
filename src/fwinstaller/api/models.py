"""Pydantic models for HTTP API requests and responses."""

from typing import Optional
from pydantic import BaseModel, Field

from fwinstaller.models.session import SessionSnapshot
from fwinstaller.models.status import PhaseEnum


class InstallRequest(BaseModel):
    """POST /api/v1.0/install payload.

    Runs selection and confirmation in one call. An empty path behaves like
    a cancelled file dialog.

    Example:
        {
            "package_path": "/home/user/Downloads/PSVUPDAT.PUP"
        }
    """

    package_path: Optional[str] = Field(
        None,
        description="Local path of the firmware package",
        examples=["/home/user/Downloads/PSVUPDAT.PUP"],
    )


class ConfirmRequest(BaseModel):
    """POST /api/v1.0/confirm payload."""

    package_path: str = Field(
        ...,
        description="Package chosen by the observer's own file dialog",
        examples=["/home/user/Downloads/PSVUPDAT.PUP"],
    )


class DeleteSourceRequest(BaseModel):
    """PUT /api/v1.0/delete-source payload."""

    enabled: bool = Field(..., description="Delete the source package on acknowledge")


class AcknowledgeRequest(BaseModel):
    """POST /api/v1.0/acknowledge payload (optional)."""

    delete_source: Optional[bool] = Field(
        None, description="Overrides the delete-source flag before the reset"
    )


class ProgressResponse(BaseModel):
    """GET /api/v1.0/progress response.

    HTTP status is always 200, application status in 'code'.
    """

    code: int = Field(..., description="Application-level status code (200/500)")
    msg: str = Field(..., description="Status message or failure reason")
    data: SessionSnapshot = Field(..., description="Session snapshot")


class CommandResponse(BaseModel):
    """Response for command endpoints."""

    code: int = Field(default=200, description="Application-level status code")
    msg: str = Field(default="success", description="Result message")
    phase: Optional[PhaseEnum] = Field(None, description="Session phase after the command")
    progress: Optional[int] = Field(None, description="Session progress after the command")
