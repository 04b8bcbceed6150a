"""Configuration management for MacroSmith."""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


def _parse_cors_origins() -> list[str]:
    """Parse CORS origins from environment variable."""
    cors_env = os.getenv("CORS_ALLOW_ORIGINS")
    if cors_env:
        return cors_env.split(",")
    return ["*"]


class Settings(BaseModel):
    """Application settings."""

    # LLM Provider settings ('gemini', 'anthropic' or 'openrouter')
    llm_provider: str = os.getenv("LLM_PROVIDER", "gemini")

    # Google Gemini API key (required when LLM_PROVIDER=gemini)
    google_api_key: Optional[str] = os.getenv("GOOGLE_API_KEY") or os.getenv("GEMINI_API_KEY")
    gemini_model: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")

    # Anthropic API key (required when LLM_PROVIDER=anthropic)
    anthropic_api_key: Optional[str] = os.getenv("ANTHROPIC_API_KEY")
    model_name: str = os.getenv("MODEL_NAME", "claude-sonnet-4-20250514")

    # OpenRouter API configuration (required when LLM_PROVIDER=openrouter)
    openrouter_api_key: Optional[str] = os.getenv("OPENROUTER_API_KEY")
    openrouter_model: str = os.getenv("OPENROUTER_MODEL", "anthropic/claude-3.5-sonnet")

    # Generation limits
    max_tokens: int = int(os.getenv("MAX_TOKENS", "8192"))
    llm_timeout_seconds: float = float(os.getenv("LLM_TIMEOUT_SECONDS", "120"))

    # Uploads larger than this are rejected before decoding
    max_upload_bytes: int = int(os.getenv("MAX_UPLOAD_BYTES", str(20 * 1024 * 1024)))

    # Server settings
    host: str = os.getenv("HOST", "127.0.0.1")
    port: int = int(os.getenv("PORT", "8000"))
    debug: bool = os.getenv("DEBUG", "false").lower() == "true"
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS settings (comma-separated list of allowed origins, or * for all)
    cors_allow_origins: list[str] = _parse_cors_origins()

    @property
    def active_model(self) -> str:
        """Model identifier for the configured provider."""
        provider = self.llm_provider.lower()
        if provider == "openrouter":
            return self.openrouter_model
        if provider == "anthropic":
            return self.model_name
        return self.gemini_model


settings = Settings()
