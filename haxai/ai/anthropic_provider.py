"""Anthropic Messages API provider using direct HTTP calls.

No SDK, just a plain ``requests.post`` with the API key header.
System messages are lifted out of the message list into the
top-level ``system`` field the Messages API expects.
"""

from __future__ import annotations

import logging
import os
from typing import Any

import requests
from knack.util import CLIError

from haxai.ai.provider import AIProvider, AIMessage, AIResponse

logger = logging.getLogger(__name__)

_BASE_URL = os.environ.get("ANTHROPIC_BASE_URL", "https://api.anthropic.com")
_MESSAGES_URL = f"{_BASE_URL}/v1/messages"
_API_VERSION = "2023-06-01"

# Default request timeout in seconds.  Slidedecks issue one request per
# slide, so a single call should not hang the whole plan.
_DEFAULT_TIMEOUT = 120


class AnthropicProvider(AIProvider):
    """AI provider that calls the Anthropic Messages API directly."""

    DEFAULT_MODEL = "claude-3-5-haiku-latest"

    def __init__(self, api_key: str, model: str | None = None):
        self._api_key = api_key
        self._model = model or self.DEFAULT_MODEL
        self._timeout = int(os.environ.get("ANTHROPIC_TIMEOUT", str(_DEFAULT_TIMEOUT)))

    # ------------------------------------------------------------------
    # HTTP helpers
    # ------------------------------------------------------------------

    def _headers(self) -> dict[str, str]:
        return {
            "x-api-key": self._api_key,
            "anthropic-version": _API_VERSION,
            "content-type": "application/json",
        }

    @staticmethod
    def _split_messages(messages: list[AIMessage]) -> tuple[str, list[dict[str, Any]]]:
        """Separate system text from the user/assistant turns."""
        system_parts = [m.content for m in messages if m.role == "system"]
        turns = [
            {"role": m.role, "content": m.content}
            for m in messages
            if m.role in ("user", "assistant")
        ]
        return "\n\n".join(system_parts), turns

    # ------------------------------------------------------------------
    # AIProvider interface
    # ------------------------------------------------------------------

    def chat(
        self,
        messages: list[AIMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int = 1024,
    ) -> AIResponse:
        """Send a request to the Messages API."""
        target_model = model or self._model
        system, turns = self._split_messages(messages)
        payload: dict[str, Any] = {
            "model": target_model,
            "messages": turns,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if system:
            payload["system"] = system

        logger.debug("Anthropic request: model=%s, msgs=%d", target_model, len(turns))

        try:
            resp = requests.post(
                _MESSAGES_URL,
                headers=self._headers(),
                json=payload,
                timeout=self._timeout,
            )
        except requests.Timeout:
            raise CLIError(
                f"Anthropic API timed out after {self._timeout}s.\n"
                "Increase the timeout with:\n"
                "  export ANTHROPIC_TIMEOUT=300"
            )
        except requests.RequestException as exc:
            raise CLIError(f"Failed to reach Anthropic API: {exc}") from exc

        if resp.status_code != 200:
            body = resp.text[:500] if resp.text else ""
            raise CLIError(
                f"Anthropic API error (HTTP {resp.status_code}):\n{body}\n\n"
                "Check ANTHROPIC_API_KEY or 'ai.api_key' in your hax-ai configuration."
            )

        try:
            data = resp.json()
        except ValueError as exc:
            raise CLIError("Anthropic API returned invalid JSON.") from exc

        content = "".join(
            block.get("text", "")
            for block in data.get("content", [])
            if block.get("type") == "text"
        )
        if not content:
            logger.warning("Anthropic response had no text content: %s", data)

        usage = data.get("usage", {})
        return AIResponse(
            content=content,
            model=data.get("model", target_model),
            usage={
                "prompt_tokens": usage.get("input_tokens", 0),
                "completion_tokens": usage.get("output_tokens", 0),
            },
            finish_reason=data.get("stop_reason") or "stop",
        )

    @property
    def provider_name(self) -> str:
        return "anthropic"

    @property
    def default_model(self) -> str:
        return self._model
