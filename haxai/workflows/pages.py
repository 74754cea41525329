"""Page creation and page inspection handlers."""

from __future__ import annotations

import logging

from haxai.engine import grammar
from haxai.engine.content import (
    default_page_content,
    normalize_paragraphs,
    paragraph_prompt,
    three_paragraph_fallback,
)
from haxai.engine.extract import (
    extract_content,
    extract_multiple_titles,
    extract_page_title,
    extract_page_topic,
    extract_parent_page,
    title_from_topic,
)
from haxai.engine.manifest import SiteManifest
from haxai.engine.plan import CommandPlan, ManifestPatch
from haxai.engine.safety import sanitize_title, validate_page_title
from haxai.errors import ProviderError
from haxai.workflows.base import WorkflowContext

logger = logging.getLogger(__name__)


def page_content(ctx: WorkflowContext, title: str, topic: str | None, site: str) -> tuple[str, bool]:
    """Body HTML for a new page and whether it was generated.

    Without a topic the page gets a one-line welcome paragraph.  When
    generation fails the topic itself is split into three paragraphs.
    """
    if not topic:
        return default_page_content(title), False
    try:
        generated = ctx.generate(paragraph_prompt(title, topic), site=site)
    except ProviderError as e:
        logger.warning("Content generation for '%s' failed, using fallback: %s", title, e)
        return three_paragraph_fallback(topic), False
    return normalize_paragraphs(generated), True


def _clean_title(raw: str) -> str:
    validate_page_title(raw)
    return sanitize_title(raw)


def handle_add_page(text: str, ctx: WorkflowContext) -> CommandPlan:
    topic = extract_content(text)
    parent = extract_parent_page(text)
    raw_title = extract_page_title(text, ctx.context.available_sites)
    if raw_title and parent and raw_title.lower() == parent.lower():
        # "a page about dogs under the Animals page": Animals is the parent.
        raw_title = None
    if not raw_title:
        raw_title = title_from_topic(topic)
    if not raw_title:
        return CommandPlan.clarification(
            "What should the new page be called?",
            examples=[
                "Add a page called About Us",
                "Add a page called Photosynthesis about how plants make food",
                "Add a child page called Labs under the Biology page",
            ],
            action="add-page",
        )
    title = _clean_title(raw_title)

    site = ctx.resolve_site(text)
    if not site:
        return ctx.site_selection_plan("add-page", f"Add a page called {title} to {{site}}")

    parent_id = None
    if parent:
        manifest = SiteManifest.load_if_exists(ctx.context.manifest_path(site))
        if manifest is not None:
            item = manifest.require_page(parent)
            parent, parent_id = item.title, item.id
        parent = sanitize_title(parent)

    content, generated = page_content(ctx, title, topic, site)

    steps = [grammar.node_add(title, content)]
    explanation = f"I'll add a page called '{title}' to {site}."
    if parent:
        steps.append(
            ManifestPatch(
                manifest_path=str(ctx.context.manifest_path(site)),
                parent_match=parent,
                child_match=title,
                parent_id=parent_id,
            )
        )
        explanation = f"I'll add a page called '{title}' under '{parent}' in {site}."

    return CommandPlan(
        explanation=explanation,
        steps=steps,
        action="add-page",
        metadata=ctx.site_metadata(
            site, pageTitle=title, parentTitle=parent, topic=topic, contentGenerated=generated
        ),
        next_steps=f"Preview the {site} site",
    )


def handle_add_multiple_pages(text: str, ctx: WorkflowContext) -> CommandPlan:
    raw_titles = extract_multiple_titles(text)
    if len(raw_titles) < 2:
        return handle_add_page(text, ctx)
    titles = [_clean_title(t) for t in raw_titles]

    site = ctx.resolve_site(text)
    if not site:
        return ctx.site_selection_plan(
            "add-multiple-pages", f"Add {titles[0]} and {titles[1]} pages to {{site}}"
        )

    steps = []
    generated_any = False
    for raw, title in zip(raw_titles, titles):
        content, generated = page_content(ctx, title, extract_page_topic(text, raw), site)
        generated_any = generated_any or generated
        steps.append(grammar.node_add(title, content))

    quoted = ", ".join(f"'{t}'" for t in titles)
    return CommandPlan(
        explanation=f"I'll add {len(titles)} pages to {site}: {quoted}.",
        steps=steps,
        action="add-multiple-pages",
        metadata=ctx.site_metadata(site, pageTitles=titles, contentGenerated=generated_any),
        next_steps=f"Preview the {site} site",
    )


def handle_edit_page(text: str, ctx: WorkflowContext) -> CommandPlan:
    site = ctx.resolve_site(text)
    if not site:
        return ctx.site_selection_plan("edit-page", "Edit the About page in {site}")

    title = extract_page_title(text, ctx.context.available_sites)
    subject = f"the '{title}' page" if title else "your pages"
    return CommandPlan(
        explanation=f"Here is the structure of {site}, so you can find {subject}.",
        steps=[grammar.show_manifest(str(ctx.context.manifest_path(site)))],
        action="edit-page",
        metadata=ctx.site_metadata(site, pageTitle=title),
        next_steps=f"Customize the {title} page and make it about a new topic" if title else None,
    )
