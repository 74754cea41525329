"""Per-request context handed to the engine by its caller."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from haxai.engine.resources import ResourceSummary


@dataclass(frozen=True)
class Context:
    """Facts about the user's sites for one ``process()`` call.

    The engine never lists the filesystem itself; the caller supplies
    the known sites.
    """

    available_sites: tuple[str, ...] = ()
    current_site: str | None = None
    storage_root: Path = Path(".")
    resource_summary: "ResourceSummary | None" = None

    def site_dir(self, site: str) -> Path:
        return self.storage_root / site

    def manifest_path(self, site: str) -> Path:
        from haxai.engine.grammar import MANIFEST_FILENAME

        return self.site_dir(site) / MANIFEST_FILENAME

    def has_site(self, site: str) -> bool:
        return site.lower() in (s.lower() for s in self.available_sites)


def build_context(
    available_sites: Iterable[str] | None = None,
    current_site: str | None = None,
    storage_root: str | Path = ".",
    resource_summary: "ResourceSummary | None" = None,
) -> Context:
    """Assemble a ``Context`` from collaborator-supplied facts.

    Duplicate and blank site names are dropped while keeping order.  A
    ``current_site`` that is not among the available sites is ignored;
    when none is selected and exactly one site exists, it is selected.
    """
    sites: list[str] = []
    for site in available_sites or ():
        site = str(site).strip()
        if site and site not in sites:
            sites.append(site)

    selected = current_site.strip() if current_site else None
    if selected and selected not in sites:
        selected = None
    if selected is None and len(sites) == 1:
        selected = sites[0]

    return Context(
        available_sites=tuple(sites),
        current_site=selected,
        storage_root=Path(storage_root),
        resource_summary=resource_summary,
    )
