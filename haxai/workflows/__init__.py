"""Workflow handlers, one per intent."""

from typing import Callable

from haxai.engine.intents import Intent
from haxai.engine.plan import CommandPlan
from haxai.workflows.base import WorkflowContext
from haxai.workflows.components import handle_add_component
from haxai.workflows.customize import handle_customize
from haxai.workflows.inspect import default_response, handle_help, handle_list, handle_preview
from haxai.workflows.pages import handle_add_multiple_pages, handle_add_page, handle_edit_page
from haxai.workflows.publish import handle_publish
from haxai.workflows.site import handle_clone_site, handle_create_site
from haxai.workflows.slidedeck import handle_create_slidedeck

Handler = Callable[[str, WorkflowContext], CommandPlan]

HANDLERS: dict[Intent, Handler] = {
    Intent.CREATE_SITE: handle_create_site,
    Intent.ADD_PAGE: handle_add_page,
    Intent.ADD_MULTIPLE_PAGES: handle_add_multiple_pages,
    Intent.ADD_COMPONENT: handle_add_component,
    Intent.CREATE_SLIDEDECK: handle_create_slidedeck,
    Intent.CUSTOMIZE: handle_customize,
    Intent.CLONE_SITE: handle_clone_site,
    Intent.LIST_CONTENT: handle_list,
    Intent.PREVIEW: handle_preview,
    Intent.PUBLISH: handle_publish,
    Intent.EDIT: handle_edit_page,
    Intent.HELP: handle_help,
}

__all__ = ["HANDLERS", "Handler", "WorkflowContext", "default_response"]
