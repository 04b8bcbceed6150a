"""Data models for macro generation."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class GenerationRequest(BaseModel):
    """Prompt pair sent to the generation service."""

    prompt: str
    system: str


class GenerationResult(BaseModel):
    """Structured reply of the generation service.

    The reply must contain exactly these two string fields.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    code: str = Field(strict=True)
    explanation: str = Field(strict=True)


class WorkflowStatus(str, Enum):
    """Phase of the generation workflow."""

    IDLE = "idle"
    REQUESTING = "requesting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class WorkflowState(BaseModel):
    """Current workflow phase plus its payload."""

    model_config = ConfigDict(frozen=True)

    status: WorkflowStatus = WorkflowStatus.IDLE
    result: Optional[GenerationResult] = None  # Only set when SUCCEEDED
    error: Optional[str] = None  # Only set when FAILED
    sequence: int = 0  # Generation that produced this state

    @property
    def is_loading(self) -> bool:
        return self.status == WorkflowStatus.REQUESTING
