"""Minimal chat-completions client used for AI recipes and AI price lookups."""

import logging
from typing import Any

import httpx

from .config import DEFAULT_LLM_MODEL, OPENAI_API_URL
from .errors import LLMError

logger = logging.getLogger(__name__)


class LLMClient:
    """Client for an OpenAI-compatible chat-completions endpoint."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_LLM_MODEL,
        *,
        api_url: str = OPENAI_API_URL,
        timeout: float = 15.0,
        client: httpx.Client | None = None,
    ):
        if not api_key:
            raise LLMError("An API key is required for the language model client")
        self.api_key = api_key
        self.model = model
        self.api_url = api_url
        self._client = client or httpx.Client(timeout=timeout)
        self._owns_client = client is None

    def chat(
        self,
        messages: list[dict[str, str]],
        *,
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ) -> str:
        """
        Send a chat conversation and return the assistant's reply.

        Args:
            messages: List of {"role": ..., "content": ...} messages
            temperature: Sampling temperature
            max_tokens: Upper bound on reply length

        Returns:
            The reply text, stripped

        Raises:
            LLMError: On transport errors, non-2xx responses, or malformed replies
        """
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            response = self._client.post(self.api_url, json=payload, headers=headers)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise LLMError(f"Language model API error: {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise LLMError(f"Language model request failed: {e}") from e
        except ValueError as e:
            raise LLMError("Language model returned invalid JSON") from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise LLMError("Language model response has no message content") from e

        if not isinstance(content, str) or not content.strip():
            raise LLMError("Language model returned an empty reply")

        logger.debug("LLM reply (%d chars) from %s", len(content), self.model)
        return content.strip()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "LLMClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
