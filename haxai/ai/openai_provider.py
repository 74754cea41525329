"""OpenAI and OpenAI-compatible chat completion providers."""

import logging
from typing import Any

from knack.util import CLIError

from haxai.ai.provider import AIProvider, AIMessage, AIResponse

logger = logging.getLogger(__name__)

# GitHub Models exposes an OpenAI-compatible API.
GITHUB_MODELS_ENDPOINT = "https://models.inference.ai.azure.com"


class OpenAIProvider(AIProvider):
    """AI provider using the OpenAI chat completions API."""

    DEFAULT_MODEL = "gpt-4o-mini"
    PROVIDER_NAME = "openai"

    def __init__(self, api_key: str, model: str | None = None, base_url: str | None = None):
        """Initialize with an API key.

        Args:
            api_key: Key sent as the bearer token.
            model: Default model to use.
            base_url: Alternative OpenAI-compatible endpoint.
        """
        self._api_key = api_key
        self._base_url = base_url
        self._model = model or self.DEFAULT_MODEL
        self._client = self._create_client()

    def _create_client(self):
        """Create the OpenAI SDK client."""
        from openai import OpenAI

        kwargs: dict[str, Any] = {"api_key": self._api_key}
        if self._base_url:
            kwargs["base_url"] = self._base_url
        return OpenAI(**kwargs)

    def chat(
        self,
        messages: list[AIMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int = 1024,
    ) -> AIResponse:
        """Send a chat completion through the OpenAI SDK."""
        target_model = model or self._model
        api_messages = [{"role": m.role, "content": m.content} for m in messages]

        try:
            response = self._client.chat.completions.create(
                model=target_model,
                messages=api_messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except Exception as e:
            logger.error("%s API error: %s", self.provider_name, e)
            raise CLIError(
                f"Failed to get response from {self.provider_name}: {e}\n"
                "Check the API key and model name in your hax-ai configuration."
            )

        choice = response.choices[0]
        usage = {}
        if response.usage:
            usage = {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            }

        return AIResponse(
            content=choice.message.content or "",
            model=response.model,
            usage=usage,
            finish_reason=choice.finish_reason or "stop",
        )

    @property
    def provider_name(self) -> str:
        return self.PROVIDER_NAME

    @property
    def default_model(self) -> str:
        return self._model


class GitHubModelsProvider(OpenAIProvider):
    """AI provider using GitHub Models with a GitHub token."""

    DEFAULT_MODEL = "gpt-4o"
    PROVIDER_NAME = "github-models"

    def __init__(self, token: str, model: str | None = None):
        super().__init__(api_key=token, model=model, base_url=GITHUB_MODELS_ENDPOINT)
