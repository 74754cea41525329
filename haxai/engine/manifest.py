"""Read-only access to a site's ``site.json`` manifest.

The engine reads the manifest to resolve page titles and slugs.  It
never writes it; changes go through generated ``ManifestPatch`` steps.
"""

from __future__ import annotations

import difflib
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from haxai.engine.safety import normalize_match, slugify
from haxai.errors import NotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ManifestItem:
    id: str
    title: str
    slug: str = ""
    location: str = ""
    parent: str | None = None
    indent: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ManifestItem":
        return cls(
            id=str(data.get("id", "")),
            title=str(data.get("title", "")),
            slug=str(data.get("slug", "") or ""),
            location=str(data.get("location", "") or ""),
            parent=data.get("parent") or None,
            indent=int(data.get("indent") or 0),
        )


class SiteManifest:
    """Pages listed in one site's manifest."""

    def __init__(self, site_dir: Path, items: list[ManifestItem]):
        self.site_dir = Path(site_dir)
        self.items = items

    @classmethod
    def load(cls, manifest_path: Path) -> "SiteManifest":
        """Parse *manifest_path*.

        Raises:
            OSError: the file cannot be read.
            ValueError: the file is not valid JSON.
        """
        manifest_path = Path(manifest_path)
        with open(manifest_path, "r", encoding="utf-8") as f:
            data = json.load(f)
        raw_items = data.get("items", []) if isinstance(data, dict) else []
        items = [ManifestItem.from_dict(i) for i in raw_items if isinstance(i, dict)]
        logger.debug("Loaded %d manifest items from %s", len(items), manifest_path)
        return cls(manifest_path.parent, items)

    @classmethod
    def load_if_exists(cls, manifest_path: Path) -> "SiteManifest | None":
        return cls.load(manifest_path) if Path(manifest_path).exists() else None

    def titles(self) -> list[str]:
        return [item.title for item in self.items]

    def find_page(self, query: str) -> ManifestItem | None:
        """Find a page by exact title or slug, then by containment.

        Matching is case-insensitive and ignores punctuation.
        """
        wanted = normalize_match(query)
        wanted_slug = slugify(query)
        if not wanted:
            return None

        for item in self.items:
            if normalize_match(item.title) == wanted or item.slug.lower() == wanted_slug:
                return item
        for item in self.items:
            title = normalize_match(item.title)
            if wanted in title or (title and title in wanted) or wanted_slug in item.slug.lower():
                return item
        return None

    def require_page(self, query: str) -> ManifestItem:
        item = self.find_page(query)
        if item is None:
            raise NotFoundError(
                f"Could not find a page matching '{query}'.",
                suggestions=self.close_titles(query),
            )
        return item

    def close_titles(self, query: str, limit: int = 3) -> list[str]:
        titles = self.titles()
        close = difflib.get_close_matches(query, titles, n=limit, cutoff=0.4)
        return close or titles[:limit]

    def page_file(self, item: ManifestItem) -> Path:
        return self.site_dir / item.location

    def read_body(self, item: ManifestItem) -> str:
        """Return the page's HTML body, or an empty string if it has none."""
        if not item.location:
            return ""
        path = self.page_file(item)
        if not path.exists():
            logger.debug("Page file missing for '%s': %s", item.title, path)
            return ""
        return path.read_text(encoding="utf-8", errors="replace")
