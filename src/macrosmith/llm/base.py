"""Base LLM client interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class LLMResponse:
    """Response from LLM."""

    text: str
    stop_reason: Optional[str] = None
    usage: Optional[dict] = None


class LLMClient(ABC):
    """Abstract base class for LLM clients."""

    @abstractmethod
    def complete(
        self,
        prompt: str,
        system: str,
        max_tokens: int,
        model: str,
        json_mode: bool = True,
    ) -> LLMResponse:
        """Send a single-turn prompt and return the raw text reply.

        When json_mode is set the provider is asked for a bare JSON body, using
        its native option where one exists.
        """
        pass
