"""LLM gateway for the tailoring pipeline.

A thin client over a local Ollama server: availability probing and model
listing hit the REST API directly with httpx, chat completions go through
LiteLLM's Ollama chat route (POST <base>/api/chat, non-streaming).
"""

from __future__ import annotations

import logging
import os
from typing import Any, Literal, Protocol

import httpx

from resume_tailor.llm.config import LLMConfig, get_llm_config

logger = logging.getLogger(__name__)

# LiteLLM loads `.env` into the process environment in DEV mode; keep it out of
# the way unless the user opted in.
os.environ.setdefault("LITELLM_MODE", "PRODUCTION")

TaskName = Literal["analyze", "tailor", "cover-letter", "validate", "score"]

ChatMessage = dict[str, str]


class LLMError(Exception):
    """Exception raised when the LLM backend cannot produce a response."""

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.original_error = original_error


class ChatGateway(Protocol):
    """What the engines need from an LLM backend."""

    def available(self) -> bool: ...

    def chat(self, messages: list[ChatMessage]) -> str: ...


def resolve_model(name: str, aliases: dict[str, str] | None = None) -> str:
    """Map a short alias to its full model identifier.

    Unknown names pass through unchanged.
    """
    return (aliases or {}).get(name, name)


class OllamaGateway:
    """Chat client bound to one Ollama model.

    Every call is a single blocking request/response round-trip; there are
    no retries, a transport failure is fatal for the calling stage.
    """

    def __init__(
        self,
        config: LLMConfig | None = None,
        *,
        model: str | None = None,
        http_client: httpx.Client | None = None,
    ):
        """Initialize the gateway.

        Args:
            config: Optional LLMConfig. Uses global config if not provided.
            model: Model name or alias. Defaults to the configured model.
            http_client: Optional httpx client for the REST endpoints; owned by the caller.
        """
        self.config = config or get_llm_config()
        self.model = resolve_model(model or self.config.model, self.config.model_aliases)
        self._http_client = http_client

    @classmethod
    def for_task(
        cls,
        task: TaskName | str,
        config: LLMConfig | None = None,
        *,
        http_client: httpx.Client | None = None,
    ) -> OllamaGateway:
        """Return a gateway bound to the model configured for a pipeline task.

        Unknown tasks get the default model.
        """
        config = config or get_llm_config()
        model = config.task_models.get(task, config.model)
        return cls(config=config, model=model, http_client=http_client)

    @property
    def base_url(self) -> str:
        return self.config.base_url.rstrip("/")

    def _get_model_name(self) -> str:
        """Get the model name formatted for LiteLLM's Ollama chat route."""
        if self.model.startswith(("ollama/", "ollama_chat/")):
            return self.model
        return f"ollama_chat/{self.model}"

    def _get(self, path: str, timeout: float) -> httpx.Response:
        url = f"{self.base_url}{path}"
        if self._http_client is not None:
            return self._http_client.get(url, timeout=timeout)
        with httpx.Client(timeout=timeout) as client:
            return client.get(url)

    def available(self) -> bool:
        """Check whether the Ollama server is reachable.

        Probes GET /api/tags with the configured probe timeout (the request is
        abandoned when it expires).

        Returns:
            True on a 2xx response; False on timeout, network error, or error status.
        """
        try:
            response = self._get("/api/tags", self.config.probe_timeout)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Ollama connection error at {self.base_url}: {e}")
            return False

        if not response.is_success:
            logger.warning(
                f"Ollama probe at {self.base_url} returned HTTP {response.status_code}"
            )
            return False
        return True

    def list_models(self) -> list[str]:
        """List model names installed on the server ([] on any failure)."""
        try:
            response = self._get("/api/tags", self.config.timeout)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            logger.error(f"Error listing models: {e}")
            return []

        models = data.get("models") if isinstance(data, dict) else None
        if not isinstance(models, list):
            return []
        return [
            str(m["name"]) for m in models if isinstance(m, dict) and m.get("name")
        ]

    def chat(self, messages: list[ChatMessage]) -> str:
        """Send a chat completion request.

        Args:
            messages: Ordered list of {"role", "content"} messages.

        Returns:
            The assistant message content.

        Raises:
            LLMError: On timeout, transport failure, error status, or empty response.
        """
        from litellm.exceptions import Timeout

        logger.debug(f"Chat request to {self.model} ({len(messages)} messages)")

        try:
            response = self._call_completion(messages=messages)
        except Timeout as e:
            raise LLMError(
                f"LLM request timed out (timeout={self.config.timeout}s). "
                "Increase `LLM_TIMEOUT` or use a faster model.",
                e,
            ) from e
        except Exception as e:
            raise LLMError(
                f"Ollama API error ({self.model} at {self.base_url}): {e}", e
            ) from e

        return self._extract_content(response)

    def _call_completion(self, *, messages: list[ChatMessage]) -> Any:
        """Make the actual chat call through LiteLLM."""
        from litellm import completion

        return completion(
            model=self._get_model_name(),
            messages=messages,
            api_base=self.base_url,
            temperature=self.config.temperature,
            timeout=self.config.timeout,
            stream=False,
        )

    def _extract_content(self, response: Any) -> str:
        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            raise LLMError(f"Unexpected response shape from {self.model}", e) from e

        if content is None or not str(content).strip():
            raise LLMError(f"LLM returned no content ({self.model})")
        return str(content)
