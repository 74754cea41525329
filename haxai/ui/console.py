"""Rich-based console output for Command Plans and the chat loop.

Provides:
- A small semantic color scheme
- Plan rendering: explanation panel, numbered commands, examples
- A spinner for slow generation calls
- A prompt_toolkit input line for ``hax-ai chat``
"""

from __future__ import annotations

import shutil
import time
from contextlib import contextmanager
from typing import Iterator

from prompt_toolkit import PromptSession
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.styles import Style as PTStyle
from rich.console import Console as RichConsole
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.theme import Theme

from haxai.engine.plan import CommandPlan

# -------------------------------------------------------------------- #
# Color scheme
# -------------------------------------------------------------------- #

THEME = Theme({
    "dim": "#888888",
    "muted": "#666666",
    "content": "bright_white",
    "success": "bright_green",
    "error": "bright_red",
    "warning": "bright_yellow",
    "info": "bright_cyan",
    "accent": "bright_magenta",
    "prompt.border": "#555555",
    "prompt.instruction": "bright_cyan",
    "command": "bright_green",
    "path": "bright_cyan",
})

PT_STYLE = PTStyle.from_dict({
    "prompt": "#888888",
    "": "#ffffff",
    "bottom-toolbar": "noreverse #888888",
})


class Console:
    """Styled console output with semantic styles."""

    def __init__(self, rich_console: RichConsole | None = None):
        self._console = rich_console or RichConsole(theme=THEME, highlight=False)

    # ------------------------------------------------------------------ #
    # Basic output
    # ------------------------------------------------------------------ #

    def print_success(self, message: str):
        self._console.print(f"[success]✓[/success] {message}")

    def print_info(self, message: str):
        self._console.print(f"[info]→[/info] {message}")

    def newline(self):
        self._console.print()

    # ------------------------------------------------------------------ #
    # Plans
    # ------------------------------------------------------------------ #

    def print_plan(self, plan: CommandPlan):
        """Render a Command Plan.

        The explanation goes in a panel titled with the action; commands
        are numbered in run order.  Commands are escaped so rich does
        not read brackets in generated HTML as markup.
        """
        border = "prompt.border" if plan.success else "error"
        title = plan.action or None
        if plan.error:
            title = f"{plan.action or 'error'} · {plan.error}"
        self._console.print(Panel(escape(plan.explanation), title=title, border_style=border, padding=(0, 1)))

        commands = plan.commands
        if commands:
            run_from = plan.metadata.get("runFrom")
            if run_from:
                self._console.print(f"[dim]Run from[/dim] [path]{escape(str(run_from))}[/path]")
            for number, command in enumerate(commands, start=1):
                self._console.print(f"  [muted]{number}.[/muted] [command]{escape(command)}[/command]")

        if plan.examples:
            self._console.print("[dim]Try:[/dim]")
            for example in plan.examples:
                self._console.print(f"  [info]→[/info] {escape(example)}")

        if plan.next_steps:
            self._console.print(f"[dim]Next:[/dim] {escape(plan.next_steps)}")

    # ------------------------------------------------------------------ #
    # Progress indicators
    # ------------------------------------------------------------------ #

    @contextmanager
    def spinner(self, message: str) -> Iterator[None]:
        """Show a spinner while an operation is in progress.

        On completion, prints a persistent line with elapsed time.
        """
        start = time.monotonic()
        progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TimeElapsedColumn(),
            console=self._console,
            transient=True,
        )
        with progress:
            progress.add_task(message, total=None)
            yield
        elapsed = time.monotonic() - start
        self._console.print(f"[muted]{message} ({elapsed:.1f}s)[/muted]")


def _create_keybindings() -> KeyBindings:
    """Enter submits; a trailing backslash continues on the next line."""
    kb = KeyBindings()

    @kb.add("enter")
    def handle_enter(event):
        buffer = event.app.current_buffer
        text = buffer.text
        if text.rstrip().endswith("\\"):
            stripped = text.rstrip()
            buffer.delete_before_cursor(count=len(text) - len(stripped) + 1)
            buffer.insert_text("\n")
        else:
            buffer.validate_and_handle()

    @kb.add("escape", "enter")
    def insert_newline(event):
        event.app.current_buffer.insert_text("\n")

    return kb


class ChatPrompt:
    """Input line for ``hax-ai chat``."""

    HINT = "/clear forgets the conversation · /exit quits"

    def __init__(self, console: Console | None = None, session: PromptSession | None = None):
        self._console = console or Console()
        self._session = session or PromptSession(
            key_bindings=_create_keybindings(),
            style=PT_STYLE,
            multiline=True,
            prompt_continuation=lambda width, line_num, wrap_count: "  ",
        )

    def prompt(self, prompt_text: str = "> ") -> str | None:
        """Read one request.

        Returns:
            The stripped input, or ``None`` on Ctrl-D / Ctrl-C.
        """
        def _toolbar():
            cols = shutil.get_terminal_size().columns
            return [("#555555", "─" * cols), ("", "\n"), ("#888888", self.HINT)]

        try:
            return self._session.prompt(prompt_text, bottom_toolbar=_toolbar).strip()
        except (EOFError, KeyboardInterrupt):
            self._console.newline()
            return None


# -------------------------------------------------------------------- #
# Module-level singleton
# -------------------------------------------------------------------- #

console = Console()
