"""Derivative pages: an existing page rewritten for a new purpose."""

from __future__ import annotations

import logging

from haxai.engine import grammar
from haxai.engine.content import (
    customize_prompt,
    customized_title,
    normalize_paragraphs,
    strip_tags,
    three_paragraph_fallback,
)
from haxai.engine.extract import extract_customization
from haxai.engine.plan import CommandPlan, ManifestPatch
from haxai.engine.safety import sanitize_title
from haxai.errors import ProviderError
from haxai.workflows.base import WorkflowContext

logger = logging.getLogger(__name__)


def handle_customize(text: str, ctx: WorkflowContext) -> CommandPlan:
    request = extract_customization(text)
    if request is None:
        return CommandPlan.clarification(
            "Which page should I customize, and what should the new version be about?",
            examples=[
                "Customize the Japanese Houses page and make it about Korean houses",
                "Adapt the Dogs page for cats",
            ],
            action="customize-page",
        )

    site = ctx.resolve_site(text)
    if not site:
        return ctx.site_selection_plan(
            "customize-page", f"Customize the {request.page} page in {{site}} for {request.customization}"
        )

    manifest = ctx.load_manifest(site)
    source = manifest.require_page(request.page)
    original_text = strip_tags(manifest.read_body(source))[: ctx.limits.max_chars_per_document]
    new_title = sanitize_title(customized_title(source.title, request.customization))

    system, user = customize_prompt(source.title, original_text, request.customization)
    try:
        content = normalize_paragraphs(ctx.generate(user, system=system, site=site))
        generated = True
    except ProviderError as e:
        logger.warning("Customization generation failed, adapting the original text: %s", e)
        content = three_paragraph_fallback(
            f"This page adapts {source.title} for {request.customization}. {original_text}"
        )
        generated = False

    return CommandPlan(
        explanation=(
            f"I'll create '{new_title}' from the '{source.title}' page, customized for "
            f"{request.customization}, and place it under the original."
        ),
        steps=[
            grammar.node_add(new_title, content),
            ManifestPatch(
                manifest_path=str(ctx.context.manifest_path(site)),
                parent_match=source.title,
                child_match=new_title,
                parent_id=source.id,
            ),
        ],
        action="customize-page",
        metadata=ctx.site_metadata(
            site, pageTitle=new_title, sourceTitle=source.title, contentGenerated=generated
        ),
        next_steps=f"Preview the {site} site",
    )
