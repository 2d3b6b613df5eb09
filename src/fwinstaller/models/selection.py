"""File selection result model."""

from typing import Optional
from pydantic import BaseModel, Field, model_validator

from fwinstaller.models.status import SelectionStatus


class SelectionResult(BaseModel):
    """Result of a file selection request: Ok(path), Cancelled or Error(message)."""

    status: SelectionStatus = Field(..., description="Selection outcome kind")
    path: Optional[str] = Field(None, description="Chosen path if status == ok")
    message: Optional[str] = Field(None, description="Error text if status == error")

    @model_validator(mode="after")
    def check_payload(self) -> "SelectionResult":
        """Ok results must carry a path."""
        if self.status == SelectionStatus.OK and not self.path:
            raise ValueError("Selection result 'ok' requires a path")
        return self

    @classmethod
    def ok(cls, path: str) -> "SelectionResult":
        return cls(status=SelectionStatus.OK, path=path)

    @classmethod
    def cancelled(cls) -> "SelectionResult":
        return cls(status=SelectionStatus.CANCELLED)

    @classmethod
    def error(cls, message: str) -> "SelectionResult":
        return cls(status=SelectionStatus.ERROR, message=message)
