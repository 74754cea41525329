"""Components appended to an existing page: quizzes and web-component skeletons."""

from __future__ import annotations

import logging

from haxai.engine.content import (
    component_skeleton,
    extract_quiz_html,
    quiz_prompt,
    strip_tags,
    template_quiz,
)
from haxai.engine.extract import (
    QUIZ_COMPONENTS,
    extract_component_type,
    extract_content,
    extract_page_source,
)
from haxai.engine.manifest import ManifestItem, SiteManifest
from haxai.engine.plan import CommandPlan, PageAppend
from haxai.errors import NotFoundError, ProviderError, TargetPageMissingError
from haxai.workflows.base import WorkflowContext

logger = logging.getLogger(__name__)


def _quiz_html(ctx: WorkflowContext, site: str, manifest: SiteManifest, page: ManifestItem,
               topic: str | None) -> tuple[str, bool]:
    page_text = None
    if not topic:
        page_text = strip_tags(manifest.read_body(page))[: ctx.limits.max_chars_per_document] or None
    subject = topic or page.title
    try:
        generated = ctx.generate(quiz_prompt(subject, page_text), site=site)
    except ProviderError as e:
        logger.warning("Quiz generation failed, using template: %s", e)
        return template_quiz(subject).to_html(), False

    quiz = extract_quiz_html(generated)
    if quiz is None:
        logger.warning("Generated quiz was malformed, using template")
        return template_quiz(subject).to_html(), False
    return quiz, True


def handle_add_component(text: str, ctx: WorkflowContext) -> CommandPlan:
    tag = extract_component_type(text)
    page_ref = extract_page_source(text)
    if not page_ref:
        raise TargetPageMissingError(
            f"Which page should the {tag} go on? Components are added to an existing page.",
            suggestions=[
                "Add a quiz to the Intro page",
                "Add a timeline about the space race to the History page",
            ],
        )

    site = ctx.resolve_site(text)
    if not site:
        return ctx.site_selection_plan("add-component", f"Add a {tag} to the {page_ref} page in {{site}}")

    manifest = ctx.load_manifest(site)
    page = manifest.require_page(page_ref)
    if not page.location:
        raise NotFoundError(f"The page '{page.title}' has no content file to add to.")

    topic = extract_content(text, for_component=True)
    if tag in QUIZ_COMPONENTS:
        markup, generated = _quiz_html(ctx, site, manifest, page, topic)
    else:
        markup, generated = component_skeleton(tag, topic or page.title), False

    return CommandPlan(
        explanation=f"I'll add a {tag} to the '{page.title}' page in {site}.",
        steps=[PageAppend(page_file=str(manifest.page_file(page)), html=markup)],
        action="add-component",
        metadata=ctx.site_metadata(
            site, pageTitle=page.title, componentType=tag, topic=topic, contentGenerated=generated
        ),
        next_steps=f"Preview the {site} site",
    )
