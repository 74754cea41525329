"""Shared state and helpers for workflow handlers."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable

from haxai.ai.invoker import GenerativeInvoker
from haxai.engine.context import Context
from haxai.engine.deploy_helpers import DEFAULT_DOMAIN_SUFFIX, AuthStatus, check_surge_login
from haxai.engine.extract import extract_site_from_input
from haxai.engine.manifest import SiteManifest
from haxai.engine.plan import CommandPlan
from haxai.engine.resources import ResourceLimits, ResourceSummary, summarize
from haxai.errors import NotFoundError

logger = logging.getLogger(__name__)


@dataclass
class WorkflowContext:
    """Everything a handler needs for one request.

    Built fresh by the engine for every ``process()`` call, so the
    grounding cache never outlives the request.
    """

    context: Context
    invoker: GenerativeInvoker = field(default_factory=GenerativeInvoker)
    limits: ResourceLimits = field(default_factory=ResourceLimits)
    auth_check: Callable[[], AuthStatus] = check_surge_login
    clock: Callable[[], float] = time.time
    default_domain: str = ""
    domain_suffix: str = DEFAULT_DOMAIN_SUFFIX
    _grounding: dict[str, ResourceSummary] = field(default_factory=dict, repr=False)

    # ------------------------------------------------------------------ #
    #  Time                                                               #
    # ------------------------------------------------------------------ #

    def now_ms(self) -> int:
        return int(self.clock() * 1000)

    # ------------------------------------------------------------------ #
    #  Sites                                                              #
    # ------------------------------------------------------------------ #

    def resolve_site(self, text: str) -> str | None:
        """Site named in *text*, else the current site."""
        return extract_site_from_input(text, self.context.available_sites) or self.context.current_site

    def site_metadata(self, site: str, **extra: Any) -> dict[str, Any]:
        metadata = {"siteName": site, "runFrom": str(self.context.site_dir(site))}
        metadata.update(extra)
        return metadata

    def site_selection_plan(self, action: str, example: str) -> CommandPlan:
        """Clarification when no site can be inferred."""
        sites = list(self.context.available_sites)
        if not sites:
            return CommandPlan.clarification(
                "You don't have any sites yet. Create one first.",
                examples=["Create a site called my-blog"],
                action=action,
            )
        return CommandPlan.clarification(
            "Which site do you mean? Your sites are: " + ", ".join(sites) + ".",
            examples=[example.format(site=site) for site in sites[:3]],
            action=action,
            metadata={"needsSiteSelection": True, "availableSites": sites},
        )

    def load_manifest(self, site: str) -> SiteManifest:
        path = self.context.manifest_path(site)
        if not path.exists():
            raise NotFoundError(
                f"Could not find the structure file for site '{site}' at {path}.",
                suggestions=["Show me all my sites"],
            )
        return SiteManifest.load(path)

    # ------------------------------------------------------------------ #
    #  Generation                                                         #
    # ------------------------------------------------------------------ #

    def grounding(self, site: str | None) -> ResourceSummary:
        """Course-material summary for *site*, read at most once per request."""
        if not site:
            return ResourceSummary()
        if self.context.resource_summary is not None and site == self.context.current_site:
            return self.context.resource_summary
        if site not in self._grounding:
            self._grounding[site] = summarize(site, self.context, self.limits)
        return self._grounding[site]

    def grounding_text(self, site: str | None) -> str:
        return self.grounding(site).to_prompt(self.limits.max_total_chars)

    def generate(self, prompt: str, system: str | None = None, site: str | None = None,
                 max_tokens: int | None = None) -> str:
        """One inline generation call; raises ``ProviderError`` on failure."""
        grounding = self.grounding_text(site) if site else ""
        if grounding:
            extra = (
                "Prefer the user's course materials below over general knowledge.\n"
                f"{grounding}"
            )
            system = f"{system}\n\n{extra}" if system else extra
        return self.invoker.complete(system, [], prompt, max_tokens=max_tokens)
