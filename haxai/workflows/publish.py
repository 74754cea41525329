"""Build and deploy a site."""

from __future__ import annotations

import logging

from haxai.engine import grammar
from haxai.engine.deploy_helpers import SETUP_INSTRUCTIONS, default_domain
from haxai.engine.extract import extract_domain
from haxai.engine.plan import CommandPlan
from haxai.workflows.base import WorkflowContext

logger = logging.getLogger(__name__)


def handle_publish(text: str, ctx: WorkflowContext) -> CommandPlan:
    site = ctx.resolve_site(text)
    if not site:
        return ctx.site_selection_plan("publish-site", "Deploy {site}")

    status = ctx.auth_check()
    if not status.authenticated:
        logger.debug("Surge login check failed: %s", status.detail)
        explanation = SETUP_INSTRUCTIONS
        if status.detail:
            explanation = f"{status.detail}\n\n{explanation}"
        return CommandPlan.failure(
            explanation,
            error="not-authenticated",
            action="publish-site",
            examples=["surge login", f"Deploy {site}"],
            metadata=ctx.site_metadata(site),
        )

    domain = (
        extract_domain(text, ctx.domain_suffix)
        or ctx.default_domain
        or default_domain(site, ctx.now_ms(), ctx.domain_suffix)
    )
    return CommandPlan(
        explanation=f"I'll build {site} and publish it to https://{domain} as {status.account}.",
        steps=[grammar.site_build(), grammar.site_surge(domain)],
        action="publish-site",
        metadata=ctx.site_metadata(site, domain=domain, url=f"https://{domain}", account=status.account),
        next_steps=f"Open https://{domain} once the deploy finishes",
    )
