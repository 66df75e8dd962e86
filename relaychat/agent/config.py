"""Upstream provider configuration with environment variable loading.

Pydantic-based configuration for the relay's upstream model calls.
Supports OpenAI and OpenAI-compatible APIs via custom base URL.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()

PLACEHOLDER_API_KEY = "your-api-key-here"


class RelayConfig(BaseModel):
    """Configuration for the upstream chat and transcription models.

    Attributes:
        api_key: API key for model access.
        base_url: API base URL (None for OpenAI default).
        model_name: Chat model identifier.
        transcription_model: Speech-to-text model identifier.
        temperature: Sampling temperature (0.0 = deterministic, 2.0 = creative).
        max_tokens: Maximum tokens in generated response.
    """

    api_key: str = Field(
        default_factory=lambda: os.getenv("LLM_API_KEY") or os.getenv("OPENAI_API_KEY", ""),
        description="API key for LLM provider",
    )
    base_url: str | None = Field(
        default_factory=lambda: os.getenv("LLM_BASE_URL") or None,
        description="API base URL (None for OpenAI default)",
    )
    model_name: str = Field(
        default_factory=lambda: os.getenv("LLM_MODEL", "gpt-4.1"),
        description="Chat model to use",
    )
    transcription_model: str = Field(
        default_factory=lambda: os.getenv("LLM_TRANSCRIPTION_MODEL", "gpt-4o-transcribe"),
        description="Transcription model to use",
    )
    temperature: float | None = Field(
        default=None,
        ge=0.0,
        le=2.0,
        description="Sampling temperature (None for provider default)",
    )
    max_tokens: int | None = Field(
        default=None,
        ge=1,
        le=128000,
        description="Maximum tokens in generated response (None for provider default)",
    )

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Validate that a real API key is provided."""
        if not v or not v.strip() or v.strip() == PLACEHOLDER_API_KEY:
            raise ValueError(
                "OPENAI_API_KEY environment variable is not set. "
                "Set LLM_API_KEY or OPENAI_API_KEY in .env"
            )
        return v.strip()


def get_relay_config() -> RelayConfig:
    """Create relay configuration from environment.

    Returns:
        Configured RelayConfig instance.

    Raises:
        ValidationError: If no API key is set.
    """
    return RelayConfig()
