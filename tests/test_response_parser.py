"""Tests for haxai.parsers.response_parser."""

import json

from haxai.parsers.response_parser import parse_ai_response


class TestJsonEnvelope:

    def test_bare_json(self):
        text = json.dumps({"explanation": "Creating it.", "commands": ["hax site start --name demo --y"]})
        parsed = parse_ai_response(text)
        assert parsed.method == "json"
        assert parsed.explanation == "Creating it."
        assert parsed.commands == ["hax site start --name demo --y"]

    def test_fenced_json(self):
        text = 'Sure:\n```json\n{"explanation": "Build.", "commands": "hax site build"}\n```'
        parsed = parse_ai_response(text)
        assert parsed.method == "json"
        assert parsed.commands == ["hax site build"]

    def test_commands_are_single_line(self):
        text = json.dumps({"explanation": "", "commands": ["hax site\n  build", "  "]})
        assert parse_ai_response(text).commands == ["hax site build"]

    def test_json_without_commands_is_prose(self):
        text = json.dumps({"answer": "hello"})
        parsed = parse_ai_response(text)
        assert parsed.method == "none"
        assert parsed.commands == []


class TestFencedBlocks:

    def test_bash_block(self):
        text = "Run these:\n```bash\n# start\n$ hax site start --name demo --y\nhax site build\n```\nDone."
        parsed = parse_ai_response(text)
        assert parsed.method == "fenced"
        assert parsed.commands == ["hax site start --name demo --y", "hax site build"]
        assert parsed.explanation == "Run these:\nDone."

    def test_non_shell_block_ignored(self):
        text = "```python\nprint('hi')\n```"
        parsed = parse_ai_response(text)
        assert parsed.commands == []
        assert parsed.method == "none"

    def test_unclosed_shell_block(self):
        parsed = parse_ai_response("```sh\nhax site build")
        assert parsed.commands == ["hax site build"]


class TestLineScan:

    def test_scan_known_tools(self):
        text = "First build, then deploy:\n`hax site build`\nsurge ./ demo.surge.sh\nGood luck."
        parsed = parse_ai_response(text)
        assert parsed.method == "scan"
        assert parsed.commands == ["hax site build", "surge ./ demo.surge.sh"]
        assert parsed.explanation == "First build, then deploy:\nGood luck."

    def test_prose_only(self):
        parsed = parse_ai_response("I can help you build a website.")
        assert parsed.commands == []
        assert parsed.explanation == "I can help you build a website."

    def test_empty(self):
        parsed = parse_ai_response(None)
        assert parsed.explanation == ""
        assert parsed.method == "none"
