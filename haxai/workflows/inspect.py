"""Read-only handlers: list, preview, help, and the default response."""

from __future__ import annotations

from haxai.engine import grammar
from haxai.engine.extract import extract_site_from_input
from haxai.engine.plan import CommandPlan
from haxai.workflows.base import WorkflowContext

HELP_EXAMPLES = [
    "Create a site called my-blog",
    "Add a page called About Us",
    "Add a page called Cells under the Biology page about plant cells",
    "Add a quiz to the Intro page",
    "Create a slidedeck about photosynthesis",
    "Customize the Dogs page and make it about cats",
    "Clone https://example.surge.sh",
    "Show me my pages",
    "Preview my site",
    "Deploy my site",
]

HELP_TEXT = (
    "I can build and publish HAX sites for you. Tell me what you want in plain words:\n"
    "  - create a site, add pages (one or several, optionally under a parent page)\n"
    "  - add quizzes, timelines, carousels and other components to a page\n"
    "  - turn a topic into a slidedeck, or customize a page for a new audience\n"
    "  - clone an existing site, list your pages, preview, or deploy"
)

DEFAULT_SUGGESTIONS = HELP_EXAMPLES[:5]


def handle_list(text: str, ctx: WorkflowContext) -> CommandPlan:
    sites = ctx.context.available_sites
    site = extract_site_from_input(text, sites) or ctx.context.current_site
    if not site:
        if not sites:
            explanation = "You don't have any sites yet."
        else:
            explanation = "Your sites: " + ", ".join(sites) + "."
        return CommandPlan(
            explanation=explanation,
            action="list-content",
            metadata={"availableSites": list(sites)},
            examples=["Create a site called my-blog"] if not sites else [f"Show pages in {sites[0]}"],
        )

    return CommandPlan(
        explanation=f"Here are the pages in {site}.",
        steps=[grammar.show_manifest(str(ctx.context.manifest_path(site)))],
        action="list-content",
        metadata=ctx.site_metadata(site),
    )


def handle_preview(text: str, ctx: WorkflowContext) -> CommandPlan:
    site = ctx.resolve_site(text)
    if not site:
        return ctx.site_selection_plan("preview-site", "Preview {site}")

    site_dir = str(ctx.context.site_dir(site))
    return CommandPlan(
        explanation=f"I'll start a local preview of {site}.",
        steps=[grammar.serve(site_dir)],
        action="preview-site",
        metadata=ctx.site_metadata(site),
        next_steps=f"Deploy {site} when you're happy with it",
    )


def handle_help(text: str, ctx: WorkflowContext) -> CommandPlan:
    return CommandPlan(explanation=HELP_TEXT, action="help", examples=list(HELP_EXAMPLES))


def default_response(text: str = "", ctx: WorkflowContext | None = None) -> CommandPlan:
    """Suggestions shown when a request cannot be interpreted."""
    return CommandPlan(
        explanation="I'm not sure what you'd like to do. Here are some things you can ask me:",
        action="unknown",
        examples=list(DEFAULT_SUGGESTIONS),
    )
