"""LLM gateway.

Public API:
    - OllamaGateway: Chat client with availability probe and per-task models
    - LLMConfig: Backend settings (LLM_* environment variables)
    - LLMError: Transport / backend failure
"""

from resume_tailor.llm.client import (
    ChatGateway,
    ChatMessage,
    LLMError,
    OllamaGateway,
    TaskName,
    resolve_model,
)
from resume_tailor.llm.config import LLMConfig, get_llm_config, reset_llm_config

__all__ = [
    "OllamaGateway",
    "ChatGateway",
    "ChatMessage",
    "TaskName",
    "LLMError",
    "resolve_model",
    "LLMConfig",
    "get_llm_config",
    "reset_llm_config",
]
