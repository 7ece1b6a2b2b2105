"""Configuration settings for the LLM gateway.

Settings can be overridden via environment variables prefixed with LLM_,
e.g. LLM_BASE_URL=http://gpu-box:11434 or LLM_MODEL=fast.
Dict settings take JSON: LLM_TASK_MODELS='{"cover-letter": "qwen3:14b"}'.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MODEL_ALIASES: dict[str, str] = {
    "qwen3": "qwen3:14b",
    "qwen2": "qwen2.5:14b",
    "deepseek": "deepseek-r1:14b",
    "fast": "qwen2.5:7b",
    "qwen3-8b": "qwen3:8b",
}

# Each task gets the model best suited to its workload
DEFAULT_TASK_MODELS: dict[str, str] = {
    "analyze": "qwen3:14b",  # instruction following
    "tailor": "qwen3:14b",  # structured selection under constraints
    "cover-letter": "deepseek-r1:14b",  # reasoning model for prose
    "validate": "qwen2.5:14b",  # pattern matching
    "score": "qwen2.5:14b",
}


class LLMConfig(BaseSettings):
    """Configuration for the Ollama-backed LLM gateway."""

    model_config = SettingsConfigDict(
        env_prefix="LLM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    base_url: str = Field(
        default="http://localhost:11434",
        description="Base URL of the Ollama server",
    )
    model: str = Field(
        default="qwen3:14b",
        description="Default model name or alias",
    )
    temperature: Annotated[float, Field(ge=0.0, le=2.0)] = Field(
        default=0.3,
        description="Sampling temperature (low: factual fidelity over flair)",
    )
    timeout: Annotated[float, Field(gt=0)] = Field(
        default=180.0,
        description="Timeout in seconds for chat calls",
    )
    probe_timeout: Annotated[float, Field(gt=0)] = Field(
        default=5.0,
        description="Timeout in seconds for the availability probe",
    )
    model_aliases: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_MODEL_ALIASES),
        description="Short alias -> full backend model identifier",
    )
    task_models: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_TASK_MODELS),
        description="Pipeline task -> model name or alias",
    )

    @field_validator("base_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the base URL so endpoint paths can be appended."""
        if isinstance(v, str):
            return v.strip().rstrip("/")
        return v


_llm_config: LLMConfig | None = None


def get_llm_config() -> LLMConfig:
    """Get the LLM configuration singleton."""
    global _llm_config
    if _llm_config is None:
        _llm_config = LLMConfig()
    return _llm_config


def reset_llm_config() -> None:
    """Reset the configuration singleton (useful for testing)."""
    global _llm_config
    _llm_config = None
