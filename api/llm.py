"""
LLM Client
----------
Thin wrapper over the Anthropic messages endpoint, used by the /ask
surface: ask a question, get the first text block back.
"""

from typing import Optional
import logging

from .client import APIClient, APIStatus


class LLMError(Exception):
    """The language model could not produce an answer."""


class LLMClient:
    """Ask a single-turn question to the configured model."""

    def __init__(
        self,
        client: APIClient,
        model: str = "claude-3-sonnet-20240229",
        max_tokens: int = 1000
    ):
        self._client = client
        self.model = model
        self.max_tokens = max_tokens
        self._logger = logging.getLogger("monad.api.llm")

    @property
    def is_configured(self) -> bool:
        return self._client.is_configured

    def ask(self, prompt: str, system: Optional[str] = None) -> str:
        """Send a prompt; returns the answer text or raises LLMError."""
        payload = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            payload["system"] = system

        response = self._client.post("messages", data=payload)

        if not response.success:
            self._logger.error(f"LLM request failed: {response.status.name} {response.error}")
            if response.status == APIStatus.AUTH_ERROR:
                raise LLMError("Language model is not configured")
            raise LLMError("Failed to get response from language model")

        blocks = (response.data or {}).get("content") or []
        for block in blocks:
            if block.get("type") == "text" and block.get("text"):
                return block["text"]

        raise LLMError("Language model returned no text")
