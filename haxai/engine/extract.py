"""Parameter extraction from free-form requests.

Each helper runs an ordered list of patterns over the raw text and
returns the first usable capture, or None.  Patterns are tried from the
most literal phrasing to the most generic one.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import urlparse

from haxai.engine.safety import sanitize_title

_FLAGS = re.IGNORECASE

# Words that always end a page title when they follow it.
_TITLE_STOP_WORDS = r"with|about|containing|that|which|under|beneath|inside|below|as"
_TITLE_BODY = r"[\"“]?([\w?,\- ]+?)[\"”]?"

# Captures that are filler words rather than names.
_NOT_A_NAME = frozenset({
    "a", "an", "the", "new", "my", "our", "for", "with", "called", "named",
    "that", "to", "from", "and", "child", "sub", "blank", "single", "web", "this",
    "page", "site", "website",
})

# Command words never treated as site names when scanning the input.
_SITE_SCAN_IGNORE = frozenset({"is", "node:add", "add", "page", "called", "to", "with", "new"})


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip().strip("\"“”'").strip()
    value = re.sub(r"[.!]+$", "", value).strip()
    return value or None


def _first_match(patterns: list[str], text: str, group: int = 1) -> str | None:
    for pattern in patterns:
        m = re.search(pattern, text, _FLAGS)
        if m:
            value = _clean(m.group(group))
            if value and value.lower() not in _NOT_A_NAME:
                return value
    return None


# ---------------------------------------------------------------------------
# Sites
# ---------------------------------------------------------------------------


def extract_site_name(text: str) -> str | None:
    """Site name for a creation request, lower-cased with spaces as hyphens."""
    name = _first_match(
        [
            r"[\"“]([^\"”]+)[\"”]",
            r"\bcalled\s+([\w-]+)",
            r"\bnamed\s+([\w-]+)",
            r"\b(?:site|website|blog|portfolio)\s+([\w-]+)\s*[.!]?$",
        ],
        text,
    )
    if not name:
        return None
    return re.sub(r"\s+", "-", name.strip()).lower()


def extract_site_from_input(text: str, available_sites: tuple[str, ...] | list[str]) -> str | None:
    """Return an existing site mentioned by name in *text*."""
    if not available_sites:
        return None
    words = [w.strip(".,!?\"'“”") for w in text.lower().split()]
    words = [w for w in words if w and w not in _SITE_SCAN_IGNORE]
    by_lower = {site.lower(): site for site in available_sites}
    for word in words:
        if word in by_lower:
            return by_lower[word]
    for site in available_sites:
        if re.search(r"(?<![\w-])" + re.escape(site) + r"(?![\w-])", text, _FLAGS):
            return site
    return None


# ---------------------------------------------------------------------------
# Pages
# ---------------------------------------------------------------------------


def _title_stop(sites: tuple[str, ...] | list[str] = ()) -> str:
    """Lookahead ending a title after "called".

    "and" and "to" only end it before another page ("and a contact page"),
    a site noun ("to my site") or a known site name ("to beta"), so
    "Salt and Pepper" and "Welcome to Biology" stay whole.
    """
    stops = [
        rf"\s+(?:{_TITLE_STOP_WORDS})\b",
        r"\s+and\s+(?:(?:a|an|the)\s+)?(?:[\w-]+\s+){0,3}?pages?\b",
        r"\s+to\s+(?:the\s+|my\s+|our\s+)?(?:[\w-]+\s+){0,3}?(?:site|website|page)s?\b",
        r"\s*[.!]?\s*$",
    ]
    if sites:
        names = "|".join(re.escape(s) for s in sites)
        stops.append(rf"\s+(?:to|in|on)\s+(?:{names})(?![\w-])")
    return "(?=" + "|".join(stops) + ")"


def extract_page_title(text: str, sites: tuple[str, ...] | list[str] = ()) -> str | None:
    """Title of the page a request refers to.

    *sites* are the available site names; "to <site>" after a title names
    the site, not part of the title.
    """
    stop = _title_stop(sites)
    return _first_match(
        [
            r"\b(?:child|sub)[\s-]*page\s+(?:called|named|titled)\s+" + _TITLE_BODY + stop,
            r"\bpage\s+(?:called|named|titled)\s+" + _TITLE_BODY + stop,
            r"\b(?:called|named|titled)\s+" + _TITLE_BODY + stop,
            r"[\"“]([^\"”]+)[\"”]\s+page\b",
            r"\b(?:edit|change|update|modify)\s+(?:the\s+)?([\w-]+(?:\s+[\w-]+)?)\s+page\b",
            r"\b(?:the|a|an)\s+([\w-]+(?:\s+[\w-]+)?)\s+page\b",
            r"\badd\s+([\w-]+)\s+page\b",
            r"\b(?:edit|change|update)\s+(?:the\s+)?([\w-]+)\s*[.!]?$",
        ],
        text,
    )


def title_from_topic(topic: str | None, max_words: int = 5) -> str | None:
    """Page title for an untitled page: "how plants grow" becomes "How Plants Grow"."""
    words = sanitize_title(topic or "").split()[:max_words]
    if not words:
        return None
    return " ".join(w[:1].upper() + w[1:] for w in words)


def _strip_content_clause(text: str) -> str:
    return re.split(r"\b(?:about|with\s+content|containing|that\s+says)\b", text, maxsplit=1, flags=_FLAGS)[0]


def extract_parent_page(text: str) -> str | None:
    """Parent page named with "under X page", "child of X" and similar."""
    explicit = _first_match(
        [
            r"\b(?:under|beneath|inside|below)\s+(?:the\s+)?[\"“]?([\w\s-]+?)[\"”]?\s+(?:page|section)\b",
            r"\b(?:child|sub-?page)\s+of\s+(?:the\s+)?[\"“]?([\w\s-]+?)[\"”]?(?:\s+page)?"
            r"(?=\s+(?:with|about|called|named)\b|\s*[.!]?\s*$)",
        ],
        text,
    )
    if explicit:
        return explicit
    return _first_match(
        [r"\b(?:under|beneath|inside|below)\s+(?:the\s+)?[\"“]?([\w\s-]+?)[\"”]?\s*[.!]?\s*$"],
        _strip_content_clause(text),
    )


# "to the biology page", "on page Intro": where a component goes, not its topic.
_TARGET_TAIL_RE = re.compile(
    r"\s+(?:to|on|for|in|into)\s+(?:(?:the\s+|my\s+)?(?:[\w-]+\s+){0,3}page\b|page\s+\S+).*$",
    _FLAGS,
)
_PARENT_TAIL_RE = re.compile(r"\s+(?:under|beneath|inside|below)\s+.*$", _FLAGS)


def extract_content(text: str, for_component: bool = False) -> str | None:
    """Topic or literal content requested for a page or component.

    "about" directly followed by a page noun ("an about page") or
    directly after "called" ("a page called About Us") names the page,
    not its topic, and is skipped.
    """
    m = re.search(r"\bwith\s+(?:the\s+)?content\s+(.+)$", text, _FLAGS)
    if m:
        return _clean(m.group(1))

    for m in re.finditer(r"\babout\s+", text, _FLAGS):
        rest = text[m.end():]
        if re.match(r"(?:[\w-]+\s+)?page\b", rest, _FLAGS):
            continue
        if re.search(r"\b(?:called|named|titled)\s+[\"“]?$", text[:m.start()], _FLAGS):
            continue
        if for_component:
            rest = _TARGET_TAIL_RE.sub("", rest)
        rest = _PARENT_TAIL_RE.sub("", rest)
        value = _clean(rest)
        if value:
            return value

    return _first_match([r"\bcontaining\s+(.+)$", r"\bthat\s+says\s+(.+)$"], text)


def extract_page_source(text: str) -> str | None:
    """Existing page a component should be attached to."""
    m = re.search(
        r"\b(?:to|on|in|into|for|from)\s+(?:the\s+)?((?:[\w-]+\s+){0,4}?[\w-]+)\s+page\b",
        text,
        _FLAGS,
    )
    if m:
        candidate = re.split(
            r"\b(?:to|on|in|into|for|from)\s+(?:the\s+)?", m.group(1), flags=_FLAGS
        )[-1]
        candidate = _clean(re.sub(r"^(?:my|our|the|this)\s+", "", candidate, flags=_FLAGS))
        if candidate and candidate.lower() not in _NOT_A_NAME:
            return candidate
    return _first_match(
        [
            r"\babout\s+the\s+content\s+on\s+page\s+[\"“]?([\w\s-]+?)[\"”]?\s*[.!]?$",
            r"\b(?:to|on|from|using|based\s+on)\s+page\s+[\"“]?([\w\s-]+?)[\"”]?"
            r"(?=\s+(?:about|with)\b|\s*[.!]?\s*$)",
            r"\b(?:to|on)\s+(?:the\s+)?[\"“]([^\"”]+)[\"”]",
        ],
        text,
    )


# ---------------------------------------------------------------------------
# Components
# ---------------------------------------------------------------------------

# (pattern, web component tag), first match wins.
COMPONENT_TYPES: tuple[tuple[str, str], ...] = (
    (r"multiple[\s-]*choice", "multiple-choice"),
    (r"\bquiz", "quiz"),
    (r"\bassessment", "quiz"),
    (r"\btrue[\s-]*(?:or[\s-]*)?false", "true-false-question"),
    (r"\bfill[\s-]*in", "fill-in-the-blanks"),
    (r"\bflash[\s-]*cards?", "flash-card"),
    (r"\bmatching", "matching-question"),
    (r"\bcarousel", "a11y-carousel"),
    (r"\btimeline", "lrndesign-timeline"),
    (r"\bimage[\s-]*map", "lrndesign-imagemap"),
    (r"\blesson", "lesson-overview"),
    (r"\bcode[\s-]*sample", "code-sample"),
    (r"\bquote", "media-quote"),
    (r"\bcitation", "citation-element"),
    (r"\belement", "generic-element"),
)

QUIZ_COMPONENTS = frozenset({"multiple-choice", "quiz"})


def extract_component_type(text: str) -> str:
    for pattern, tag in COMPONENT_TYPES:
        if re.search(pattern, text, _FLAGS):
            return tag
    return "generic-element"


# ---------------------------------------------------------------------------
# Multiple pages
# ---------------------------------------------------------------------------


def extract_multiple_titles(text: str) -> list[str]:
    """Two or more page titles joined by "and"."""
    staged = [
        r"\badd\s+(?:a|an)\s+([\w-]+)\s+page\s+and\s+(?:a\s+|an\s+)?([\w-]+)\s+page\b",
        r"\b(?:add|create)\s+([\w-]+)\s+and\s+([\w-]+)\s+pages?\b",
    ]
    for pattern in staged:
        m = re.search(pattern, text, _FLAGS)
        if m:
            titles = [_clean(g) for g in m.groups()]
            return _unique([t for t in titles if t and t.lower() not in _NOT_A_NAME])

    titles: list[str] = []
    body = re.sub(r"^\s*(?:please\s+)?(?:add|create)\s+", "", text, flags=_FLAGS)
    for part in re.split(r",\s*(?:and\s+)?|\s+and\s+", body, flags=_FLAGS):
        m = re.search(
            r"^\s*(?:(?:add|create)\s+)?(?:a\s+|an\s+|the\s+)?(?:new\s+)?([\w-]+(?:\s+[\w-]+)?)\s+page\b",
            part,
            _FLAGS,
        )
        if m:
            title = _clean(m.group(1))
            if title and title.lower() not in _NOT_A_NAME:
                titles.append(title)
    return _unique(titles)


def extract_page_topic(text: str, title: str) -> str | None:
    """Topic given as "<title> page about <topic>" inside a longer request."""
    m = re.search(
        re.escape(title)
        + r"\s+page\s+about\s+(.+?)(?=\s*,|\s+and\s+(?:a\s+|an\s+|the\s+)?[\w-]+(?:\s+[\w-]+)?\s+page\b|\s*[.!]?\s*$)",
        text,
        _FLAGS,
    )
    return _clean(m.group(1)) if m else None


def _unique(values: list[str]) -> list[str]:
    seen: set[str] = set()
    result = []
    for value in values:
        if value.lower() not in seen:
            seen.add(value.lower())
            result.append(value)
    return result


# ---------------------------------------------------------------------------
# Slidedecks and customization
# ---------------------------------------------------------------------------


def extract_slidedeck_topic(text: str) -> str | None:
    return _first_match(
        [
            r"\b(?:slide\s*deck|slides|presentation)\s+(?:about|on|for|covering)\s+(.+)$",
            r"\babout\s+(.+?)\s+(?:as\s+a\s+)?(?:slide\s*deck|slides|presentation)\b",
        ],
        text,
    )


@dataclass(frozen=True)
class CustomizationRequest:
    page: str
    customization: str


def extract_customization(text: str) -> CustomizationRequest | None:
    """Source page and new purpose of a customization request."""
    patterns = [
        r"\bcustomi[sz]e\s+(?:the\s+)?[\"“]?(.+?)[\"”]?\s+page\s+(?:and\s+)?(?:make\s+it\s+)?(?:to\s+be\s+)?(?:about|for)\s+(.+)$",
        r"\badapt\s+(?:the\s+)?[\"“]?(.+?)[\"”]?\s+page\s+(?:for|to|about)\s+(.+)$",
        r"\bmodify\s+(?:the\s+)?[\"“]?(.+?)[\"”]?\s+page.*?\b(?:to\s+be\s+about|for|about)\s+(.+)$",
        r"\bchange\s+(?:the\s+)?[\"“]?(.+?)[\"”]?\s+page.*?\bto\s+be\s+about\s+(.+)$",
        r"\bcustomi[sz]e\s+(?:the\s+)?[\"“]?(.+?)[\"”]?\s+(?:for|and\s+make\s+it\s+about)\s+(.+)$",
    ]
    for pattern in patterns:
        m = re.search(pattern, text, _FLAGS)
        if m:
            page, customization = _clean(m.group(1)), _clean(m.group(2))
            if page and customization:
                return CustomizationRequest(page=page, customization=customization)
    return None


# ---------------------------------------------------------------------------
# Deployment and cloning
# ---------------------------------------------------------------------------


def extract_domain(text: str, suffix: str = "surge.sh") -> str | None:
    escaped = re.escape(suffix)
    domain = _first_match(
        [
            rf"\b(?:at|to|on)\s+([a-z0-9-]+\.{escaped})\b",
            rf"\bdomain\s+([a-z0-9-]+(?:\.{escaped})?)\b",
            rf"\burl\s+([a-z0-9-]+(?:\.{escaped})?)\b",
        ],
        text,
    )
    if not domain:
        return None
    domain = domain.lower()
    return domain if domain.endswith(f".{suffix}") else f"{domain}.{suffix}"


@dataclass(frozen=True)
class CloneRequest:
    url: str | None
    name: str | None


def extract_clone_request(text: str) -> CloneRequest:
    m = re.search(r"https?://[^\s\"'<>]+", text, _FLAGS)
    url = m.group(0).rstrip(".,;)!") if m else None
    remainder = text.replace(m.group(0), " ") if m else text
    name = _first_match(
        [
            r"\b(?:called|named)\s+[\"“]?([\w-]+)[\"”]?",
            r"\b(?:as|into)\s+[\"“]?([\w-]+)[\"”]?",
        ],
        remainder,
    )
    return CloneRequest(url=url, name=name.lower() if name else None)


def derive_clone_name(url: str, now_ms: int) -> str:
    """Site name derived from a URL host plus a time-based suffix."""
    host = (urlparse(url).hostname or "").lower()
    if host.startswith("www."):
        host = host[4:]
    if host.endswith(".surge.sh"):
        host = host[: -len(".surge.sh")]
    base = re.sub(r"[^a-z0-9-]", "", host.replace(".", "-")).strip("-")
    if not base:
        return f"cloned-site-{now_ms}"
    return f"{base}-clone-{str(now_ms)[-4:]}"
