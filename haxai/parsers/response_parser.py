"""Extract an explanation and shell commands from a generated reply.

The top-level generative fallback is asked to answer with a short
explanation and the commands to run.  Models do not always comply, so
parsing degrades in stages:

1. A JSON envelope ``{"explanation": ..., "commands": [...]}``, bare or
   inside a ```json fence.
2. Fenced ```bash / ```sh / ```shell blocks; each non-comment line is a
   command and the text outside the fences is the explanation.
3. A line scan for command-shaped lines (lines starting with a known
   tool name).
4. Zero commands; the whole reply is the explanation.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

# Tools a generated command may invoke.
COMMAND_PREFIXES = ("hax ", "surge ")

_SHELL_LANGS = frozenset({"bash", "sh", "shell", "console", "zsh"})

_FENCE_OPEN_RE = re.compile(r"^(`{3,})\s*([a-zA-Z0-9_+-]*)\s*$")


@dataclass
class ParsedResponse:
    explanation: str
    commands: list[str] = field(default_factory=list)
    method: str = "none"  # "json", "fenced", "scan" or "none"


def parse_ai_response(text: str) -> ParsedResponse:
    """Parse a generated reply into explanation + commands.

    Tries a JSON envelope first, then fenced code blocks, then lines
    that start with a known command.

    Args:
        text: Raw model output.

    Returns:
        ParsedResponse whose ``method`` records which stage produced
        the commands (``"none"`` when no commands were found).
    """
    text = (text or "").strip()

    parsed = _parse_json_envelope(text)
    if parsed is not None:
        return parsed

    explanation, fenced = _parse_fenced_blocks(text)
    if fenced:
        return ParsedResponse(explanation=explanation or "Here is what I will run.", commands=fenced, method="fenced")

    scanned = _scan_command_lines(text)
    if scanned:
        remaining = "\n".join(line for line in text.splitlines() if not _command_text(line)).strip()
        return ParsedResponse(explanation=remaining or "Here is what I will run.", commands=scanned, method="scan")

    return ParsedResponse(explanation=text)


# ---------------------------------------------------------------------------
# Stages
# ---------------------------------------------------------------------------


def _parse_json_envelope(text: str) -> ParsedResponse | None:
    candidate = text
    m = re.search(r"```(?:json)?\s*(\{.*?\})\s*```", text, re.DOTALL | re.IGNORECASE)
    if m:
        candidate = m.group(1)
    candidate = candidate.strip()
    if not candidate.startswith("{"):
        return None
    try:
        data = json.loads(candidate)
    except json.JSONDecodeError:
        return None
    if not isinstance(data, dict) or "commands" not in data:
        return None

    raw_commands = data.get("commands") or []
    if isinstance(raw_commands, str):
        raw_commands = [raw_commands]
    if not isinstance(raw_commands, list):
        return None

    commands = [_single_line(str(c)) for c in raw_commands if str(c).strip()]
    explanation = str(data.get("explanation") or data.get("message") or "").strip()
    return ParsedResponse(explanation=explanation, commands=commands, method="json")


def _parse_fenced_blocks(text: str) -> tuple[str, list[str]]:
    """Return (text outside shell fences, commands inside them)."""
    commands: list[str] = []
    outside: list[str] = []
    fence_len = 0
    in_shell = False

    for line in text.split("\n"):
        stripped = line.strip()

        # --- Inside a block: look for the closing fence ---
        if fence_len:
            if stripped.startswith("`" * fence_len) and stripped == "`" * len(stripped):
                fence_len = 0
                in_shell = False
                continue
            if in_shell and stripped and not stripped.startswith("#"):
                commands.append(_single_line(stripped.lstrip("$ ").strip()))
            continue

        # --- Opening fence ---
        m = _FENCE_OPEN_RE.match(stripped)
        if m:
            fence_len = len(m.group(1))
            in_shell = m.group(2).lower() in _SHELL_LANGS
            continue

        outside.append(line)

    if fence_len and in_shell:
        logger.debug("Unclosed shell block in generated reply; keeping its commands")

    return "\n".join(outside).strip(), commands


def _scan_command_lines(text: str) -> list[str]:
    return [_single_line(cmd) for cmd in map(_command_text, text.splitlines()) if cmd]


def _command_text(line: str) -> str | None:
    stripped = line.strip().lstrip("$ ").strip().strip("`")
    return stripped if stripped.startswith(COMMAND_PREFIXES) else None


def _single_line(command: str) -> str:
    return " ".join(command.split())
