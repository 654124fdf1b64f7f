"""Pydantic schemas for code execution."""

from datetime import datetime
from enum import Enum

from pydantic import ConfigDict, Field

from playground.schemas.base import WireModel


class ExecutionStatus(str, Enum):
    """Terminal outcome of one execution."""

    SUCCESS = "SUCCESS"
    ERROR = "ERROR"
    TIMEOUT = "TIMEOUT"


class ExecutionRequest(WireModel):
    """Request to run a snippet, optionally with edited code and stdin."""

    code_snippet_id: int
    custom_code: str | None = Field(
        default=None, description="Code to run instead of the saved code"
    )
    input: str | None = Field(default=None, description="Standard input for the program")
    timeout_seconds: int | None = Field(default=None, gt=0, description="Server-side time limit")


class ExecutionResult(WireModel):
    """Result of one execution. Immutable once received."""

    model_config = ConfigDict(frozen=True)

    id: int
    code_snippet_id: int
    status: ExecutionStatus
    output: str | None = None
    error_message: str | None = None
    execution_time: int = Field(default=0, description="Elapsed time in milliseconds")
    memory_usage: int | None = None
    created_at: datetime

    @property
    def succeeded(self) -> bool:
        return self.status is ExecutionStatus.SUCCESS
