"""OpenRouter LLM client."""

import httpx

from .base import LLMClient, LLMResponse


class OpenRouterClient(LLMClient):
    """OpenRouter HTTP API client."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://openrouter.ai/api/v1",
        timeout: float = 120.0,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout

    def complete(
        self,
        prompt: str,
        system: str,
        max_tokens: int,
        model: str,
        json_mode: bool = True,
    ) -> LLMResponse:
        """Create a chat completion via OpenRouter API."""
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "X-Title": "MacroSmith",
        }
        payload = self._build_payload(prompt, system, max_tokens, model, json_mode)

        with httpx.Client(timeout=self.timeout) as client:
            response = client.post(
                f"{self.base_url}/chat/completions",
                headers=headers,
                json=payload,
            )
            response.raise_for_status()
            data = response.json()

        return self._convert_response(data)

    def _build_payload(
        self, prompt: str, system: str, max_tokens: int, model: str, json_mode: bool
    ) -> dict:
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        payload = {
            "model": model,
            "messages": messages,
            "max_tokens": max_tokens,
        }
        if json_mode:
            payload["response_format"] = {"type": "json_object"}
        return payload

    def _convert_response(self, data: dict) -> LLMResponse:
        """Convert OpenRouter response to our format."""
        choices = data.get("choices") or []
        if not choices:
            return LLMResponse(text="")

        choice = choices[0]
        message = choice.get("message") or {}

        usage = None
        if "usage" in data:
            usage = {
                "input_tokens": data["usage"].get("prompt_tokens", 0),
                "output_tokens": data["usage"].get("completion_tokens", 0),
            }

        return LLMResponse(
            text=message.get("content") or "",
            stop_reason=choice.get("finish_reason"),
            usage=usage,
        )
