"""Tests for haxai.ui.console: Command Plan rendering."""

import io
from unittest.mock import MagicMock

from rich.console import Console as RichConsole

from haxai.engine.plan import CommandPlan, ShellInvocation
from haxai.ui.console import THEME, ChatPrompt, Console


def _console():
    rich = RichConsole(theme=THEME, record=True, width=200, highlight=False, file=io.StringIO())
    return Console(rich), rich


class TestPrintPlan:

    def test_commands_numbered_with_run_directory(self):
        console, rich = _console()
        plan = CommandPlan(
            explanation="I'll build my-blog.",
            steps=[ShellInvocation(("hax", "site", "build"))],
            action="publish-site",
            metadata={"runFrom": "/sites/my-blog"},
            next_steps="Open the site",
        )

        console.print_plan(plan)
        text = rich.export_text()

        assert "I'll build my-blog." in text
        assert "Run from /sites/my-blog" in text
        assert "1. hax site build" in text
        assert "Next: Open the site" in text

    def test_failure_title_and_examples(self):
        console, rich = _console()
        plan = CommandPlan.failure(
            "Log in first.", error="not-authenticated", action="publish-site", examples=["surge login"]
        )

        console.print_plan(plan)
        text = rich.export_text()

        assert "publish-site · not-authenticated" in text
        assert "→ surge login" in text

    def test_markup_in_generated_html_is_literal(self):
        console, rich = _console()
        plan = CommandPlan(
            explanation="Adding [bold]content[/bold].",
            steps=[ShellInvocation(("hax", "site", "node:add", "--content", "<p>[x]</p>"))],
        )

        console.print_plan(plan)
        text = rich.export_text()

        assert "[bold]content[/bold]" in text
        assert "'<p>[x]</p>'" in text


class TestMessages:

    def test_success_and_info(self):
        console, rich = _console()
        console.print_success("Saved")
        console.print_info("Ready")
        text = rich.export_text()
        assert "✓ Saved" in text
        assert "→ Ready" in text


class TestChatPrompt:

    def test_returns_stripped_input(self):
        console, _ = _console()
        session = MagicMock()
        session.prompt.return_value = "  add a page  "
        assert ChatPrompt(console, session=session).prompt() == "add a page"

    def test_ctrl_d_ends_with_blank_line(self):
        console, rich = _console()
        session = MagicMock()
        session.prompt.side_effect = EOFError
        assert ChatPrompt(console, session=session).prompt() is None
        assert rich.export_text() == "\n"
