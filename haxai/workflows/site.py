"""Site creation and cloning."""

from __future__ import annotations

import logging

from haxai.engine import grammar
from haxai.engine.extract import derive_clone_name, extract_clone_request, extract_site_name
from haxai.engine.plan import CommandPlan
from haxai.engine.safety import validate_site_name
from haxai.errors import SiteExistsError
from haxai.workflows.base import WorkflowContext

logger = logging.getLogger(__name__)


def _ensure_new(name: str, ctx: WorkflowContext):
    if ctx.context.has_site(name):
        raise SiteExistsError(
            f"A site named '{name}' already exists.\n"
            "Pick a different name, or work with the existing site.",
            suggestions=[f"Create a site called {name}-2", f"Add a page called About to {name}"],
        )


def handle_create_site(text: str, ctx: WorkflowContext) -> CommandPlan:
    name = extract_site_name(text)
    if not name:
        return CommandPlan.clarification(
            "What would you like to call your new site?",
            examples=[
                "Create a site called my-blog",
                'Create a new site named "course-notes"',
                "Make a penn state site called biology-101",
            ],
            action="create-site",
        )

    validate_site_name(name)
    _ensure_new(name, ctx)

    steps = [grammar.site_start(name)]
    lowered = text.lower()
    theme = next((t for kw, t in grammar.THEME_KEYWORDS.items() if kw in lowered), None)
    if theme:
        steps.append(grammar.site_theme(theme))

    explanation = f"I'll create a new HAX site called '{name}'."
    if theme:
        explanation += f" It will use the {theme} theme."
    logger.debug("Create site %s (theme=%s)", name, theme)

    return CommandPlan(
        explanation=explanation,
        steps=steps,
        action="create-site",
        metadata={"siteName": name, "runFrom": str(ctx.context.storage_root), "theme": theme},
        next_steps=f"Add a page called About to {name}",
    )


def handle_clone_site(text: str, ctx: WorkflowContext) -> CommandPlan:
    request = extract_clone_request(text)
    if not request.url:
        return CommandPlan.clarification(
            "Which site should I copy? Give me its full address.",
            examples=[
                "Clone https://example.surge.sh",
                "Clone https://example.surge.sh as my-copy",
            ],
            action="clone-site",
        )

    name = request.name or derive_clone_name(request.url, ctx.now_ms())
    validate_site_name(name)
    _ensure_new(name, ctx)

    return CommandPlan(
        explanation=f"I'll import {request.url} into a new site called '{name}'.",
        steps=[grammar.import_site(name, request.url)],
        action="clone-site",
        metadata={"siteName": name, "runFrom": str(ctx.context.storage_root), "sourceUrl": request.url},
        next_steps=f"Preview the {name} site",
    )
