"""Slidedecks: an index page plus one child page per slide."""

from __future__ import annotations

import logging

from haxai.engine import grammar
from haxai.engine.extract import extract_slidedeck_topic
from haxai.engine.plan import CommandPlan, ManifestPatch
from haxai.engine.slides import (
    build_fallback_outline,
    clean_slide_text,
    fallback_slide_text,
    format_index,
    format_slide,
    outline_prompt,
    parse_outline,
    slide_prompt,
)
from haxai.errors import OutlineParseError, ProviderError
from haxai.workflows.base import WorkflowContext

logger = logging.getLogger(__name__)

OUTLINE_MAX_TOKENS = 1500


def handle_create_slidedeck(text: str, ctx: WorkflowContext) -> CommandPlan:
    topic = extract_slidedeck_topic(text)
    if not topic:
        return CommandPlan.clarification(
            "What should the slidedeck be about?",
            examples=[
                "Create a slidedeck about photosynthesis",
                "Make a presentation about the water cycle",
            ],
            action="create-slidedeck",
        )

    site = ctx.resolve_site(text)
    if not site:
        return ctx.site_selection_plan("create-slidedeck", f"Create a slidedeck about {topic} in {{site}}")

    try:
        structure = parse_outline(
            ctx.generate(outline_prompt(topic), site=site, max_tokens=OUTLINE_MAX_TOKENS)
        )
        outline_generated = True
    except (ProviderError, OutlineParseError) as e:
        logger.warning("Using fallback outline for '%s': %s", topic, e)
        structure = build_fallback_outline(topic)
        outline_generated = False

    manifest_path = str(ctx.context.manifest_path(site))
    total = len(structure.slides)
    steps = [grammar.node_add(structure.title, format_index(structure))]
    can_generate = ctx.invoker.available
    for number, slide in enumerate(structure.slides, start=1):
        body = ""
        if can_generate:
            try:
                body = clean_slide_text(
                    ctx.generate(slide_prompt(structure.title, slide), site=site)
                )
            except ProviderError as e:
                logger.warning("Slide generation failed, using key points for the rest: %s", e)
                can_generate = False
        body = body or fallback_slide_text(slide)
        steps.append(grammar.node_add(slide.title, format_slide(slide, number, total, body)))
        steps.append(
            ManifestPatch(manifest_path=manifest_path, parent_match=structure.title, child_match=slide.title)
        )

    return CommandPlan(
        explanation=f"I'll create the slidedeck '{structure.title}' with {total} slides in {site}.",
        steps=steps,
        action="create-slidedeck",
        metadata=ctx.site_metadata(
            site,
            deckTitle=structure.title,
            slideTitles=[s.title for s in structure.slides],
            outlineGenerated=outline_generated,
        ),
        next_steps=f"Preview the {site} site",
    )
