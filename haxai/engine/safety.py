"""Shell escaping and name/title sanitization.

All generated shell arguments use one convention: the value is wrapped
in single quotes and any embedded single quote is written as
``'"'"'``.  Inside single quotes the shell expands nothing, so no other
character needs escaping.
"""

from __future__ import annotations

import re

from haxai.errors import InvalidNameError

_WHITESPACE_RE = re.compile(r"\s+")
_TITLE_STRIP_RE = re.compile(r"[^a-zA-Z0-9\s]")
_SITE_NAME_RE = re.compile(r"^[a-zA-Z0-9_-]+$")
_PAGE_TITLE_RE = re.compile(r"^[a-zA-Z0-9_\s?,-]+$")

# Arguments made only of these characters are emitted without quotes.
_PLAIN_ARG_RE = re.compile(r"^[a-zA-Z0-9_./:=@%+-]+$")


def collapse_whitespace(text: str) -> str:
    """Collapse every run of whitespace (newlines included) to one space."""
    return _WHITESPACE_RE.sub(" ", text or "").strip()


def escape_for_shell(text: str) -> str:
    """Return *text* ready to be placed between single quotes.

    Newlines and whitespace runs become single spaces because every
    emitted command is one line.
    """
    return collapse_whitespace(text).replace("'", "'\"'\"'")


def quote_arg(text: str) -> str:
    """Quote one command-line argument.

    Simple tokens such as ``my-blog`` are returned unchanged; anything
    else is single-quoted with ``escape_for_shell``.
    """
    collapsed = collapse_whitespace(text)
    if collapsed and _PLAIN_ARG_RE.match(collapsed):
        return collapsed
    return f"'{escape_for_shell(collapsed)}'"


def sanitize_title(text: str) -> str:
    """Strip everything but letters, digits and whitespace; collapse spaces.

    The site CLI turns titles into URL path segments, so punctuation is
    dropped.  The function is idempotent.
    """
    return collapse_whitespace(_TITLE_STRIP_RE.sub("", text or ""))


def normalize_match(text: str) -> str:
    """Lower-cased sanitized form used for manifest title lookups."""
    return sanitize_title(text).lower()


def slugify(text: str) -> str:
    """Slug form of a title, matching the site CLI's own slugs."""
    return normalize_match(text).replace(" ", "-")


def validate_site_name(name: str) -> str:
    """Return *name* if it only uses letters, digits, hyphen and underscore."""
    if not name or not _SITE_NAME_RE.match(name):
        raise InvalidNameError(
            f"Invalid site name: '{name}'.\n"
            "Site names may only contain letters, numbers, hyphens (-) and underscores (_).",
            suggestions=["Create a site called my-blog"],
        )
    return name


def validate_page_title(title: str) -> str:
    """Return *title* if it only uses letters, digits, spaces, ``_ - , ?``."""
    if not title or not _PAGE_TITLE_RE.match(title):
        raise InvalidNameError(
            f"Invalid page title: '{title}'.\n"
            "Page titles may only contain letters, numbers, spaces, "
            "underscores, hyphens, commas and question marks.",
            suggestions=["Add a page called About Us"],
        )
    return title
