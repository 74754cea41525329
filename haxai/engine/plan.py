"""Command Plan model and command serialization.

A plan is a list of *steps*.  Most steps are plain invocations of the
site or deployment CLI; two are small generated programs that patch
files the site CLI has no command for:

  - ``ManifestPatch`` links a page to its parent in ``site.json``.
  - ``PageAppend`` appends HTML to an existing page body.

Rendering to shell strings happens only here, so every quoting rule
lives in one place.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Union

from haxai.engine.safety import normalize_match, quote_arg, sanitize_title, slugify

# Matches ``normalize_match`` in safety.py.
_JS_NORMALIZE = (
    'const norm=s=>String(s||"").replace(/[^a-zA-Z0-9\\s]/g,"")'
    '.replace(/\\s+/g," ").trim().toLowerCase()'
)


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ShellInvocation:
    """A CLI call given as an argument vector."""

    argv: tuple[str, ...]

    def render(self) -> str:
        return " ".join(quote_arg(arg) for arg in self.argv)


@dataclass(frozen=True)
class ShellCommand:
    """A command line produced verbatim by the generative fallback."""

    text: str

    def render(self) -> str:
        return self.text.strip()


@dataclass(frozen=True)
class ManifestPatch:
    """Set a page's parent and nesting depth inside ``site.json``.

    The parent is found by id (when known), by normalized title, or by
    slug.  The child is the most recent item whose normalized title
    matches.  ``depth`` of ``None`` means one level below the parent.
    """

    manifest_path: str
    parent_match: str
    child_match: str
    depth: int | None = None
    parent_id: str | None = None

    def script(self) -> str:
        parent_title = sanitize_title(self.parent_match)
        child_title = sanitize_title(self.child_match)
        depth_expr = str(self.depth) if self.depth is not None else "(p.indent||0)+1"
        parts = [
            'const fs=require("fs")',
            f"const f={json.dumps(self.manifest_path)}",
            _JS_NORMALIZE,
            'const m=JSON.parse(fs.readFileSync(f,"utf8"))',
            "const items=m.items||[]",
            f"const pid={json.dumps(self.parent_id)}",
            (
                "const p=items.find(i=>(pid&&i.id===pid)"
                f"||norm(i.title)==={json.dumps(normalize_match(parent_title))}"
                f"||i.slug==={json.dumps(slugify(parent_title))})"
            ),
            f"const c=items.filter(i=>norm(i.title)==={json.dumps(normalize_match(child_title))}).pop()",
            (
                "if(!p||!c){console.error("
                f"{json.dumps(f'Could not link {child_title} under {parent_title}')});process.exit(1)}}"
            ),
            "c.parent=p.id",
            f"c.indent={depth_expr}",
            "fs.writeFileSync(f,JSON.stringify(m,null,2))",
            f"console.log({json.dumps(f'Linked {child_title} under {parent_title}')})",
        ]
        return ";".join(parts)

    def render(self) -> str:
        return f"node -e {quote_arg(self.script())}"


@dataclass(frozen=True)
class PageAppend:
    """Append HTML to the end of an existing page body file."""

    page_file: str
    html: str

    def script(self) -> str:
        parts = [
            'const fs=require("fs")',
            f"const f={json.dumps(self.page_file)}",
            f'fs.appendFileSync(f,"\\n"+{json.dumps(self.html)}+"\\n")',
            'console.log("Updated "+f)',
        ]
        return ";".join(parts)

    def render(self) -> str:
        return f"node -e {quote_arg(self.script())}"


Step = Union[ShellInvocation, ShellCommand, ManifestPatch, PageAppend]


# ---------------------------------------------------------------------------
# Plan
# ---------------------------------------------------------------------------


@dataclass
class CommandPlan:
    """Explanation, ordered steps, and metadata for one request."""

    explanation: str
    steps: list[Step] = field(default_factory=list)
    success: bool = True
    action: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)
    next_steps: str | None = None
    examples: list[str] = field(default_factory=list)
    error: str | None = None

    def __post_init__(self):
        if not self.success and self.steps:
            raise ValueError("A failed Command Plan cannot carry commands.")

    @property
    def commands(self) -> list[str]:
        return [step.render() for step in self.steps]

    @classmethod
    def failure(
        cls,
        explanation: str,
        error: str,
        action: str = "",
        examples: list[str] | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> "CommandPlan":
        return cls(
            explanation=explanation,
            success=False,
            action=action,
            error=error,
            examples=list(examples or []),
            metadata=dict(metadata or {}),
        )

    @classmethod
    def clarification(
        cls,
        explanation: str,
        examples: list[str],
        action: str = "",
        metadata: dict[str, Any] | None = None,
    ) -> "CommandPlan":
        """A normal conversational turn asking for missing details."""
        return cls(
            explanation=explanation,
            action=action,
            examples=list(examples),
            metadata=dict(metadata or {}),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "explanation": self.explanation,
            "commands": self.commands,
            "success": self.success,
            "action": self.action,
            "metadata": dict(self.metadata),
            "nextSteps": self.next_steps,
            "examples": list(self.examples),
            "error": self.error,
        }
