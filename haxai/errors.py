"""Error types raised inside the engine.

Every user-facing error is a ``knack.util.CLIError`` so the CLI layer
prints it the same way as any other command failure.  Inside
``IntentEngine.process`` the handler boundary converts them into
failed Command Plans using ``code`` and ``suggestions``.
"""

from __future__ import annotations

from knack.util import CLIError


class HaxAIError(CLIError):
    """Base class for recoverable, user-facing engine errors."""

    code = "error"

    def __init__(self, message: str, suggestions: list[str] | None = None):
        super().__init__(message)
        self.suggestions = list(suggestions or [])


class InvalidNameError(HaxAIError):
    """A site name or page title violates the allowed-character policy."""

    code = "invalid-name"


class SiteExistsError(HaxAIError):
    """A new site name collides with an existing site."""

    code = "site-exists"


class NotFoundError(HaxAIError):
    """A referenced site, page, or parent page does not exist."""

    code = "not-found"


class TargetPageMissingError(HaxAIError):
    """A component was requested without naming the page it attaches to."""

    code = "target-page-missing"


class ProviderError(HaxAIError):
    """The generative capability is not configured or the call failed."""

    code = "provider-error"


class OutlineParseError(ValueError):
    """A generated slidedeck outline could not be parsed."""
