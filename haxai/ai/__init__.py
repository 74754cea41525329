"""AI provider abstraction layer."""

from haxai.ai.provider import AIProvider, AIMessage, AIResponse
from haxai.ai.factory import create_ai_provider, resolve_provider_name
from haxai.ai.invoker import GenerativeInvoker

__all__ = [
    "AIProvider",
    "AIMessage",
    "AIResponse",
    "GenerativeInvoker",
    "create_ai_provider",
    "resolve_provider_name",
]
