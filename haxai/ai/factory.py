"""Factory for creating AI provider instances.

At most one provider is active per engine.  An explicit ``ai.provider``
setting wins; an empty setting falls back to whichever API key is
present in the environment.
"""

import logging
import os
from typing import Mapping

from knack.util import CLIError

from haxai.ai.provider import AIProvider

logger = logging.getLogger(__name__)

# Providers that can be instantiated.
ALLOWED_PROVIDERS = frozenset({"openai", "anthropic", "github-models"})

# Environment variables checked, in order, when no provider is configured.
PROVIDER_ENV_KEYS: tuple[tuple[str, str], ...] = (
    ("openai", "OPENAI_API_KEY"),
    ("anthropic", "ANTHROPIC_API_KEY"),
    ("github-models", "GITHUB_TOKEN"),
)


def _env_key_for(provider_name: str) -> str:
    return dict(PROVIDER_ENV_KEYS)[provider_name]


def resolve_provider_name(config: dict, environ: Mapping[str, str] | None = None) -> str | None:
    """Return the provider to use, or None when generation is unavailable."""
    environ = os.environ if environ is None else environ
    ai_config = config.get("ai", {}) or {}
    provider_name = str(ai_config.get("provider") or "").lower().strip()
    if provider_name:
        return provider_name

    for name, env_var in PROVIDER_ENV_KEYS:
        if environ.get(env_var):
            logger.debug("Auto-selected AI provider '%s' from %s", name, env_var)
            return name
    return None


def create_ai_provider(config: dict, environ: Mapping[str, str] | None = None) -> AIProvider:
    """Create an AI provider based on engine configuration.

    Args:
        config: Engine configuration dict containing an 'ai' section:
            {
                "ai": {
                    "provider": "openai" | "anthropic" | "github-models" | "",
                    "model": "gpt-4o-mini",
                    "api_key": ""
                }
            }
        environ: Environment used for key lookup (defaults to os.environ).

    Returns:
        Configured AIProvider instance.
    """
    environ = os.environ if environ is None else environ
    ai_config = config.get("ai", {}) or {}
    provider_name = resolve_provider_name(config, environ)
    model = ai_config.get("model") or None

    if provider_name is None:
        raise CLIError(
            "No AI provider is configured.\n"
            "Set one of OPENAI_API_KEY, ANTHROPIC_API_KEY or GITHUB_TOKEN, or run:\n"
            "  hax-ai config set --key ai.provider --value openai"
        )

    if provider_name not in ALLOWED_PROVIDERS:
        raise CLIError(
            f"Unknown AI provider: '{provider_name}'.\n"
            f"Supported providers: {', '.join(sorted(ALLOWED_PROVIDERS))}."
        )

    api_key = ai_config.get("api_key") or environ.get(_env_key_for(provider_name))
    if not api_key:
        raise CLIError(
            f"No API key found for the '{provider_name}' provider.\n"
            f"Set {_env_key_for(provider_name)} or run:\n"
            "  hax-ai config set --key ai.api_key --value <key>"
        )

    if provider_name == "openai":
        from haxai.ai.openai_provider import OpenAIProvider

        return OpenAIProvider(api_key=api_key, model=model)
    elif provider_name == "github-models":
        from haxai.ai.openai_provider import GitHubModelsProvider

        return GitHubModelsProvider(token=api_key, model=model)
    elif provider_name == "anthropic":
        from haxai.ai.anthropic_provider import AnthropicProvider

        return AnthropicProvider(api_key=api_key, model=model)
    else:
        raise CLIError(f"Unhandled AI provider: '{provider_name}'.")
