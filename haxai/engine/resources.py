"""Course-material grounding for generated content.

Each site may carry a ``resources/`` folder of uploaded documents and a
``resources.json`` list of reference URLs and notes.  ``summarize``
turns whatever exists into a bounded ``ResourceSummary`` that prompts
can include, so generated pages lean on the user's own material.
A site without materials yields an empty summary, never an error.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from haxai.engine.content import strip_tags
from haxai.engine.context import Context
from haxai.parsers.binary_reader import MARKUP_EXTENSIONS, FileCategory, classify_file, read_file

logger = logging.getLogger(__name__)

RESOURCE_INDEX_FILENAME = "resources.json"
MATERIALS_DIRNAME = "resources"


@dataclass(frozen=True)
class ResourceLimits:
    """Bounds on how much material is read into a prompt."""

    max_documents: int = 10
    max_chars_per_document: int = 2000
    max_total_chars: int = 8000

    @classmethod
    def from_config(cls, config: dict) -> "ResourceLimits":
        section = config.get("resources", {}) or {}
        defaults = cls()
        return cls(
            max_documents=int(section.get("max_documents", defaults.max_documents)),
            max_chars_per_document=int(section.get("max_chars_per_document", defaults.max_chars_per_document)),
            max_total_chars=int(section.get("max_total_chars", defaults.max_total_chars)),
        )


@dataclass
class ResourceSnippet:
    source: str
    text: str


@dataclass
class ResourceSummary:
    urls: list[dict[str, str]] = field(default_factory=list)
    notes: str = ""
    snippets: list[ResourceSnippet] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.urls or self.notes or self.snippets)

    def to_prompt(self, max_chars: int | None = None) -> str:
        """Render the summary as prompt text, cut to *max_chars*."""
        if self.is_empty:
            return ""
        parts: list[str] = []
        if self.urls:
            parts.append("Reference links:")
            parts.extend(
                f"- {u['url']}" + (f" ({u['description']})" if u.get("description") else "")
                for u in self.urls
            )
        if self.notes:
            parts.append(f"Instructor notes: {self.notes}")
        for snippet in self.snippets:
            parts.append(f"From {snippet.source}:\n{snippet.text}")
        text = "\n".join(parts)
        if max_chars is not None and len(text) > max_chars:
            text = text[:max_chars]
        return text


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------


def _strip_markdown(text: str) -> str:
    text = re.sub(r"!?\[([^\]]*)\]\([^)]*\)", r"\1", text)
    text = re.sub(r"^\s{0,3}#{1,6}\s*", "", text, flags=re.MULTILINE)
    text = re.sub(r"[*_`>]+", "", text)
    return text


def _plain_text(path: Path, text: str) -> str:
    ext = path.suffix.lower()
    if ext in (".html", ".htm"):
        return strip_tags(text)
    if ext in MARKUP_EXTENSIONS:
        text = _strip_markdown(text)
    return " ".join(text.split())


def load_resource_index(site_dir: Path) -> tuple[list[dict[str, str]], str]:
    """Read ``resources.json``: a list of URL entries or ``{urls, notes}``."""
    index_path = Path(site_dir) / RESOURCE_INDEX_FILENAME
    if not index_path.exists():
        return [], ""
    try:
        data: Any = json.loads(index_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Could not read %s: %s", index_path, e)
        return [], ""

    notes = ""
    entries = data
    if isinstance(data, dict):
        entries = data.get("urls", [])
        notes = str(data.get("notes") or "").strip()

    urls = []
    for entry in entries if isinstance(entries, list) else []:
        if isinstance(entry, dict) and entry.get("url"):
            urls.append({"url": str(entry["url"]), "description": str(entry.get("description") or "")})
        elif isinstance(entry, str) and entry.strip():
            urls.append({"url": entry.strip(), "description": ""})
    return urls, notes


def summarize(site: str | None, context: Context, limits: ResourceLimits | None = None) -> ResourceSummary:
    """Build the grounding summary for *site*.

    Documents are read in name order; at most ``max_documents`` are
    scanned and each contributes at most ``max_chars_per_document``.
    """
    limits = limits or ResourceLimits()
    if not site:
        return ResourceSummary()

    site_dir = context.site_dir(site)
    urls, notes = load_resource_index(site_dir)
    snippets: list[ResourceSnippet] = []

    materials_dir = site_dir / MATERIALS_DIRNAME
    if materials_dir.is_dir():
        candidates = sorted(
            p for p in materials_dir.iterdir()
            if p.is_file() and classify_file(p) != FileCategory.UNSUPPORTED
        )
        for path in candidates[: limits.max_documents]:
            result = read_file(path)
            if result.error or not result.text:
                logger.debug("Skipping material %s: %s", path.name, result.error)
                continue
            text = _plain_text(path, result.text)[: limits.max_chars_per_document].strip()
            if text:
                snippets.append(ResourceSnippet(source=path.name, text=text))

    summary = ResourceSummary(urls=urls, notes=notes, snippets=snippets)
    logger.debug(
        "Resource summary for %s: %d urls, %d snippets", site, len(summary.urls), len(summary.snippets)
    )
    return summary


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------


def add_url_resource(site_dir: Path, url: str, description: str = "") -> dict[str, str]:
    """Append a reference URL to the site's ``resources.json``."""
    site_dir = Path(site_dir)
    index_path = site_dir / RESOURCE_INDEX_FILENAME
    data: Any = []
    if index_path.exists():
        data = json.loads(index_path.read_text(encoding="utf-8"))

    entry = {"url": url, "description": description, "added": datetime.now(timezone.utc).isoformat()}
    if isinstance(data, dict):
        data.setdefault("urls", []).append(entry)
    elif isinstance(data, list):
        data.append(entry)
    else:
        data = [entry]

    site_dir.mkdir(parents=True, exist_ok=True)
    index_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    logger.debug("Added resource %s to %s", url, index_path)
    return entry
