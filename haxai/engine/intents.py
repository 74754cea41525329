"""Deterministic intent classification.

``RULES`` is evaluated top to bottom and the first matching rule wins.
The order encodes precedence: specific phrasings (slidedecks,
components, customization, cloning, deployment) come before the generic
add/create rules, which come before list/preview/publish/edit/help.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum


class Intent(Enum):
    CREATE_SITE = "create-site"
    ADD_PAGE = "add-page"
    ADD_MULTIPLE_PAGES = "add-multiple-pages"
    ADD_COMPONENT = "add-component"
    CREATE_SLIDEDECK = "create-slidedeck"
    CUSTOMIZE = "customize-page"
    CLONE_SITE = "clone-site"
    LIST_CONTENT = "list-content"
    PREVIEW = "preview-site"
    PUBLISH = "publish-site"
    EDIT = "edit-page"
    HELP = "help"
    UNKNOWN = "unknown"


def _word_re(word: str) -> re.Pattern:
    return re.compile(r"\b" + re.escape(word))


def _noun_re(word: str) -> re.Pattern:
    """Whole noun, optionally plural; ``post`` does not match ``postcards``."""
    return re.compile(r"(?<![\w-])" + re.escape(word) + r"s?(?![\w-])")


# Quoted text and the word after "called/named/titled" are names the user
# is choosing, not nouns of the request.
_NAME_SPAN_RE = re.compile(r"[\"“][^\"”]*[\"”]|\b(?:called|named|titled)\s+[\w-]+")


def strip_names(text: str) -> str:
    return _NAME_SPAN_RE.sub(" ", text)


@dataclass(frozen=True)
class IntentRule:
    """One predicate of the classification cascade.

    Matches when no ``excludes`` noun is present and either a regex in
    ``patterns`` matches, or an ``actions`` word is present together
    with an ``objects`` noun (or ``objects`` is empty).  Actions match at
    the start of a word.  Objects and excludes match whole nouns (plural
    allowed) outside the name being given, so "a site called postcards"
    has no ``post`` in it.
    """

    intent: Intent
    actions: tuple[str, ...] = ()
    objects: tuple[str, ...] = ()
    excludes: tuple[str, ...] = ()
    patterns: tuple[str, ...] = ()

    def matches(self, text: str) -> bool:
        nouns = strip_names(text)
        if any(_noun_re(w).search(nouns) for w in self.excludes):
            return False
        if any(re.search(p, text) for p in self.patterns):
            return True
        if not self.actions:
            return False
        if not any(_word_re(w).search(text) for w in self.actions):
            return False
        return not self.objects or any(_noun_re(w).search(nouns) for w in self.objects)


_COMPONENT_NOUNS = (
    r"(?:multiple[\s-]*choice|quiz|assessment|matching|true[\s-]*(?:or[\s-]*)?false"
    r"|fill[\s-]*in(?:[\s-]*the)?[\s-]*blanks?|flash[\s-]*cards?|carousel|timeline"
    r"|image[\s-]*map|lesson|code[\s-]*sample|media[\s-]*quote|quote|citation)"
)

RULES: tuple[IntentRule, ...] = (
    IntentRule(
        Intent.CREATE_SLIDEDECK,
        patterns=(
            r"\b(?:make|create|build|generate)\s+(?:a\s+)?(?:slide\s*deck|slides|presentation)\b",
            r"\bslide\s*deck\b",
            r"\bslides\s+(?:about|on|for)\b",
            r"\bpresentation\s+(?:about|on)\b",
        ),
    ),
    IntentRule(
        Intent.ADD_COMPONENT,
        patterns=(
            r"\b(?:add|create|make|insert|put)\s+(?:a\s+|an\s+)?(?:new\s+)?" + _COMPONENT_NOUNS,
            r"\b(?:add|create|insert)\b.*\belement\b",
        ),
    ),
    IntentRule(
        Intent.CUSTOMIZE,
        patterns=(
            r"\bcustomi[sz]e\s+.*\bpage\b",
            r"\bcustomi[sz]e\s+.+\s+(?:for|and\s+make\s+it\s+about)\b",
            r"\badapt\s+.*\bpage\b",
            r"\bmodify\s+.*\bpage\b.*\b(?:for|to\s+be\s+about)\b",
            r"\bchange\s+.*\bpage\b.*\bto\s+be\s+about\b",
        ),
    ),
    IntentRule(
        Intent.CLONE_SITE,
        patterns=(
            r"\b(?:clone|copy|import|duplicate)\b.*https?://",
            r"\b(?:create|make|build)\s+(?:a\s+)?(?:new\s+)?(?:site|website)\s+from\s+https?://",
            r"\b(?:clone|copy)\s+(?:the\s+)?(?:site|website)\s+from\b",
            r"\bcreate\s+(?:a\s+)?local\s+copy\s+of\b",
        ),
    ),
    IntentRule(
        Intent.PUBLISH,
        patterns=(
            r"\bdeploy\s+(?:my\s+|the\s+|this\s+)?(?:site|website)\b",
            r"\bpublish\s+(?:my\s+|the\s+|this\s+)?(?:site|website)\b",
            r"\bmake\s+(?:my\s+|the\s+)?(?:site|website)\s+live\b",
            r"\bgo\s+live\b",
            r"\bdeploy\s+to\s+surge\b",
            r"\bsurge\s+deploy\b",
        ),
        # "add a page about how to deploy my site" is a page request.
        excludes=("page", "post", "article"),
    ),
    IntentRule(
        Intent.ADD_MULTIPLE_PAGES,
        patterns=(
            r"\b(?:add|create)\s+.*\bpage\b.*\s+and\s+.*\bpage",
            r"\b(?:add|create)\s+\w+\s+and\s+\w+\s+pages?\b",
        ),
    ),
    IntentRule(
        Intent.ADD_PAGE,
        actions=("add", "create", "new"),
        objects=("page", "post", "article"),
    ),
    IntentRule(
        Intent.CREATE_SITE,
        actions=("create", "make", "new", "start", "build"),
        objects=("site", "website", "blog", "portfolio"),
        excludes=("page", "post", "article"),
    ),
    IntentRule(
        Intent.LIST_CONTENT,
        actions=("show", "list", "what", "display"),
        objects=("site", "page"),
    ),
    IntentRule(
        Intent.PREVIEW,
        actions=("preview", "view", "see", "open", "serve"),
        objects=("site", "website"),
    ),
    IntentRule(
        Intent.PUBLISH,
        actions=("publish", "deploy", "online", "live"),
    ),
    IntentRule(
        Intent.EDIT,
        actions=("edit", "change", "update", "modify"),
        objects=("page", "content"),
    ),
    IntentRule(
        Intent.HELP,
        actions=("help", "what can", "how do", "commands"),
    ),
)


def normalize_input(text: str) -> str:
    return " ".join((text or "").lower().split())


def classify(text: str, rules: tuple[IntentRule, ...] = RULES) -> Intent:
    """Return the first intent whose rule matches *text*."""
    normalized = normalize_input(text)
    if not normalized:
        return Intent.UNKNOWN
    for rule in rules:
        if rule.matches(normalized):
            return rule.intent
    return Intent.UNKNOWN
