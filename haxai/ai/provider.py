"""Abstract AI provider interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass
class AIMessage:
    """A message in an AI conversation."""

    role: str  # "system", "user", "assistant"
    content: str
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class AIResponse:
    """Response from an AI provider."""

    content: str
    model: str
    usage: dict[str, int] = field(default_factory=dict)  # tokens
    metadata: dict[str, Any] = field(default_factory=dict)
    finish_reason: str = "stop"


class AIProvider(ABC):
    """Abstract base class for AI providers.

    Implementations give the engine one interface regardless of which
    hosted model answers.
    """

    @abstractmethod
    def chat(
        self,
        messages: list[AIMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int = 1024,
    ) -> AIResponse:
        """Send a chat completion request.

        Args:
            messages: Conversation history, optionally led by a system message.
            model: Model to use (provider-specific, uses default if None).
            temperature: Sampling temperature.
            max_tokens: Maximum tokens in response.

        Returns:
            AIResponse with the model's reply.
        """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name (e.g., 'openai', 'anthropic')."""

    @property
    @abstractmethod
    def default_model(self) -> str:
        """Return the default model ID for this provider."""
