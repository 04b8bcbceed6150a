"""LLM client module."""

from .base import LLMClient, LLMResponse
from .anthropic_client import AnthropicClient
from .gemini_client import GeminiClient
from .openrouter_client import OpenRouterClient
from .factory import create_llm_client

__all__ = [
    "LLMClient",
    "LLMResponse",
    "AnthropicClient",
    "GeminiClient",
    "OpenRouterClient",
    "create_llm_client",
]
