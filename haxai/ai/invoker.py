"""Provider-agnostic generative capability used by the engine.

Workflow handlers and the top-level fallback only ever call
``complete()``; which backend answers is decided once when the engine
is built.
"""

from __future__ import annotations

import logging

from knack.util import CLIError

from haxai.ai.provider import AIMessage, AIProvider
from haxai.errors import ProviderError

logger = logging.getLogger(__name__)


class GenerativeInvoker:
    """Wraps an optional ``AIProvider`` behind ``complete()``."""

    def __init__(
        self,
        provider: AIProvider | None = None,
        temperature: float = 0.7,
        max_tokens: int = 800,
    ):
        self._provider = provider
        self.temperature = temperature
        self.max_tokens = max_tokens

    @property
    def available(self) -> bool:
        return self._provider is not None

    @property
    def provider_name(self) -> str | None:
        return self._provider.provider_name if self._provider else None

    def complete(
        self,
        system_instructions: str | None,
        history: list[AIMessage] | None,
        user_text: str,
        max_tokens: int | None = None,
    ) -> str:
        """Return the model's reply text.

        Raises:
            ProviderError: no provider is configured, the call failed,
                or the reply was empty.
        """
        if self._provider is None:
            raise ProviderError("No AI provider is configured.")

        messages: list[AIMessage] = []
        if system_instructions:
            messages.append(AIMessage(role="system", content=system_instructions))
        messages.extend(history or [])
        messages.append(AIMessage(role="user", content=user_text))

        try:
            response = self._provider.chat(
                messages,
                temperature=self.temperature,
                max_tokens=max_tokens or self.max_tokens,
            )
        except CLIError as e:
            raise ProviderError(str(e)) from e
        except Exception as e:  # noqa: BLE001
            logger.error("Unexpected %s failure: %s", self._provider.provider_name, e)
            raise ProviderError(f"{self._provider.provider_name} request failed: {e}") from e

        text = (response.content or "").strip()
        if not text:
            raise ProviderError(f"{self._provider.provider_name} returned an empty response.")
        return text
