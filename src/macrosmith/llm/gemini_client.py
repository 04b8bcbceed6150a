"""Google Gemini LLM client."""

from google import genai
from google.genai import types

from .base import LLMClient, LLMResponse


class GeminiClient(LLMClient):
    """Gemini client built on the google-genai SDK."""

    def __init__(self, api_key: str, timeout: float = 120.0):
        # google-genai expresses the HTTP timeout in milliseconds
        self.client = genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=int(timeout * 1000)),
        )

    def complete(
        self,
        prompt: str,
        system: str,
        max_tokens: int,
        model: str,
        json_mode: bool = True,
    ) -> LLMResponse:
        """Generate content with Gemini."""
        config = types.GenerateContentConfig(
            system_instruction=system or None,
            max_output_tokens=max_tokens,
            response_mime_type="application/json" if json_mode else None,
        )
        response = self.client.models.generate_content(
            model=model,
            contents=prompt,
            config=config,
        )

        stop_reason = None
        if response.candidates:
            finish_reason = response.candidates[0].finish_reason
            stop_reason = str(finish_reason) if finish_reason is not None else None

        usage = None
        if response.usage_metadata is not None:
            usage = {
                "input_tokens": response.usage_metadata.prompt_token_count or 0,
                "output_tokens": response.usage_metadata.candidates_token_count or 0,
            }

        return LLMResponse(text=response.text or "", stop_reason=stop_reason, usage=usage)
