"""Client for the external code-generation service."""

import asyncio
import functools
import logging
from typing import Optional

from pydantic import ValidationError

from ..config import Settings, settings as default_settings
from ..llm import LLMClient, create_llm_client
from .models import GenerationRequest, GenerationResult

logger = logging.getLogger(__name__)

GENERATION_FAILED_MESSAGE = "Failed to generate VBA code. Please check your API key and try again."


class GenerationError(Exception):
    """Exception raised when the service fails or breaks the response contract."""

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail
        super().__init__(GENERATION_FAILED_MESSAGE)


def parse_generation_result(text: Optional[str]) -> GenerationResult:
    """
    Parse the raw service reply as a {code, explanation} object.

    No recovery is attempted: fenced, partial or extended replies are rejected.

    Raises:
        GenerationError: If the reply is empty or not the two-field object
    """
    if not text or not text.strip():
        raise GenerationError("No response from generation service")
    try:
        return GenerationResult.model_validate_json(text)
    except ValidationError as e:
        logger.warning(f"Generation response violated contract: {e}")
        raise GenerationError(f"Invalid response from generation service: {e}") from e


class GenerationClient:
    """Sends generation requests to the configured LLM provider."""

    def __init__(
        self,
        llm_client: Optional[LLMClient] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or default_settings
        self._llm_client = llm_client

    def _get_llm_client(self) -> LLMClient:
        # Created on first use so a missing key fails the generation, not startup
        if self._llm_client is None:
            self._llm_client = create_llm_client(self.settings)
        return self._llm_client

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        """
        Send a request and wait for the structured result.

        Args:
            request: Prompt pair built from the mapping model

        Returns:
            The parsed GenerationResult

        Raises:
            GenerationError: On transport/service failure or contract violation
        """
        model = self.settings.active_model
        try:
            client = self._get_llm_client()
            loop = asyncio.get_running_loop()
            # SDK calls block, run them off the event loop
            response = await loop.run_in_executor(
                None,
                functools.partial(
                    client.complete,
                    prompt=request.prompt,
                    system=request.system,
                    max_tokens=self.settings.max_tokens,
                    model=model,
                    json_mode=True,
                ),
            )
        except Exception as e:
            logger.error(f"Generation service call failed: {e}", exc_info=True)
            raise GenerationError(str(e)) from e

        if response.usage:
            logger.info(
                f"Generation with {model} used {response.usage.get('input_tokens', 0)} input / "
                f"{response.usage.get('output_tokens', 0)} output tokens"
            )

        return parse_generation_result(response.text)
