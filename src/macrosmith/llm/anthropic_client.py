"""Anthropic LLM client."""

from anthropic import Anthropic

from .base import LLMClient, LLMResponse


class AnthropicClient(LLMClient):
    """Anthropic Claude client."""

    def __init__(self, api_key: str, timeout: float = 120.0):
        self.client = Anthropic(api_key=api_key, timeout=timeout)

    def complete(
        self,
        prompt: str,
        system: str,
        max_tokens: int,
        model: str,
        json_mode: bool = True,
    ) -> LLMResponse:
        """Create a message with Claude."""
        # No native JSON mode; the system prompt carries the format directive
        response = self.client.messages.create(
            model=model,
            max_tokens=max_tokens,
            system=system,
            messages=[{"role": "user", "content": prompt}],
        )

        text = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
        return LLMResponse(
            text=text,
            stop_reason=response.stop_reason,
            usage={
                "input_tokens": response.usage.input_tokens,
                "output_tokens": response.usage.output_tokens,
            },
        )
