"""Intent resolution and command synthesis.

``haxai.engine.processor.IntentEngine`` is the entry point; it is not
imported here because the workflow handlers depend on this package.
"""

from haxai.engine.context import Context, build_context
from haxai.engine.intents import Intent, classify
from haxai.engine.plan import CommandPlan, ManifestPatch, PageAppend, ShellCommand, ShellInvocation

__all__ = [
    "Context",
    "build_context",
    "Intent",
    "classify",
    "CommandPlan",
    "ManifestPatch",
    "PageAppend",
    "ShellCommand",
    "ShellInvocation",
]
