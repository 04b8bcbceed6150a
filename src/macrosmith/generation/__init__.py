"""VBA macro generation: request building, service client and workflow."""

from .models import GenerationRequest, GenerationResult, WorkflowState, WorkflowStatus
from .prompts import GENERATION_SYSTEM_PROMPT, build_generation_request
from .client import (
    GENERATION_FAILED_MESSAGE,
    GenerationClient,
    GenerationError,
    parse_generation_result,
)
from .workflow import GenerationWorkflow

__all__ = [
    "GenerationRequest",
    "GenerationResult",
    "WorkflowState",
    "WorkflowStatus",
    "GENERATION_SYSTEM_PROMPT",
    "build_generation_request",
    "GENERATION_FAILED_MESSAGE",
    "GenerationClient",
    "GenerationError",
    "parse_generation_result",
    "GenerationWorkflow",
]
