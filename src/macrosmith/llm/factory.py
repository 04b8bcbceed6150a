"""Select the LLM client for the configured provider."""

from ..config import Settings
from .anthropic_client import AnthropicClient
from .base import LLMClient
from .gemini_client import GeminiClient
from .openrouter_client import OpenRouterClient


def create_llm_client(settings: Settings) -> LLMClient:
    """Create the appropriate LLM client based on configuration."""
    provider = settings.llm_provider.lower()
    timeout = settings.llm_timeout_seconds

    if provider == "openrouter":
        if not settings.openrouter_api_key:
            raise ValueError("OPENROUTER_API_KEY is required when LLM_PROVIDER is 'openrouter'")
        return OpenRouterClient(api_key=settings.openrouter_api_key, timeout=timeout)

    if provider == "anthropic":
        if not settings.anthropic_api_key:
            raise ValueError("ANTHROPIC_API_KEY is required when LLM_PROVIDER is 'anthropic'")
        return AnthropicClient(api_key=settings.anthropic_api_key, timeout=timeout)

    if provider == "gemini":
        if not settings.google_api_key:
            raise ValueError("GOOGLE_API_KEY is required when LLM_PROVIDER is 'gemini'")
        return GeminiClient(api_key=settings.google_api_key, timeout=timeout)

    raise ValueError(f"Unknown LLM_PROVIDER: {settings.llm_provider!r}")
