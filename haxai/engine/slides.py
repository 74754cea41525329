"""Slidedeck outlines and slide formatting.

Outline generation is a two-step contract: ``parse_outline`` either
returns a ``SlideStructure`` or raises ``OutlineParseError``, and the
caller then uses ``build_fallback_outline``.
"""

from __future__ import annotations

import html
import json
import re
from dataclasses import dataclass, field

from haxai.engine.safety import collapse_whitespace, sanitize_title
from haxai.errors import OutlineParseError

MAX_SLIDES = 12

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)
_META_LINE_RE = re.compile(
    r"^(?:here is|here's|this slide|sure|certainly|of course|below is|slide \d+\b|note:)",
    re.IGNORECASE,
)
_BULLET_RE = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s+")
_BOLD_RE = re.compile(r"\*\*(.+?)\*\*")


@dataclass
class Slide:
    title: str
    subtitle: str = ""
    key_points: list[str] = field(default_factory=list)


@dataclass
class SlideStructure:
    title: str
    slides: list[Slide] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Outline
# ---------------------------------------------------------------------------


def outline_prompt(topic: str, grounding: str = "") -> str:
    prompt = (
        f"Create a presentation outline about {topic}.\n"
        "Respond with JSON only, in this shape:\n"
        '{"title": "Deck title", "slides": [{"title": "Slide title", '
        '"subtitle": "One line", "key_points": ["point", "point", "point"]}]}\n'
        "Include between 8 and 12 slides. Slide titles must use only letters, numbers and spaces."
    )
    if grounding:
        prompt += f"\n\nBase the outline on these course materials:\n{grounding}"
    return prompt


def _json_payload(text: str) -> str:
    fenced = _FENCE_RE.search(text or "")
    body = fenced.group(1) if fenced else (text or "")
    start, end = body.find("{"), body.rfind("}")
    if start == -1 or end <= start:
        raise OutlineParseError("No JSON object found in outline response.")
    return body[start:end + 1]


def parse_outline(text: str, max_slides: int = MAX_SLIDES) -> SlideStructure:
    """Parse a generated outline.

    Raises:
        OutlineParseError: the text holds no usable outline.
    """
    try:
        data = json.loads(_json_payload(text))
    except json.JSONDecodeError as e:
        raise OutlineParseError(f"Outline is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise OutlineParseError("Outline must be a JSON object.")

    title = sanitize_title(str(data.get("title") or ""))
    if not title:
        raise OutlineParseError("Outline has no title.")

    raw_slides = data.get("slides")
    if not isinstance(raw_slides, list):
        raise OutlineParseError("Outline has no slide list.")

    slides: list[Slide] = []
    for raw in raw_slides:
        if not isinstance(raw, dict):
            continue
        slide_title = sanitize_title(str(raw.get("title") or ""))
        if not slide_title:
            continue
        points = raw.get("key_points") or raw.get("keyPoints") or raw.get("points") or []
        if not isinstance(points, list):
            points = [points]
        slides.append(Slide(
            title=slide_title,
            subtitle=collapse_whitespace(str(raw.get("subtitle") or "")),
            key_points=[collapse_whitespace(str(p)) for p in points if str(p).strip()],
        ))

    if not slides:
        raise OutlineParseError("Outline has no usable slides.")

    return unique_titles(SlideStructure(title=title, slides=slides[:max_slides]))


def build_fallback_outline(topic: str) -> SlideStructure:
    """Six-slide outline built from the topic alone."""
    name = sanitize_title(topic) or "Presentation"
    display = name[:1].upper() + name[1:]
    slides = [
        Slide(
            f"Introduction to {name}",
            f"An overview of {name}",
            [f"What {name} is", "Why it matters", "What this presentation covers"],
        ),
        Slide(
            f"Understanding {name}",
            "Key concepts",
            ["Core ideas", "Important terms", "Common misconceptions"],
        ),
        Slide(
            f"{name} in Practice",
            "Real-world applications",
            ["Examples", "Case studies", "Lessons learned"],
        ),
        Slide(
            "Benefits and Challenges",
            f"Weighing {name}",
            ["Main benefits", "Common challenges", "Ways to address them"],
        ),
        Slide(
            f"Future of {name}",
            "Where things are heading",
            ["Emerging trends", "Open questions", "Opportunities"],
        ),
        Slide(
            "Conclusion",
            "Key takeaways",
            ["Summary of main points", "Next steps", "Questions and discussion"],
        ),
    ]
    for slide in slides:
        slide.title = sanitize_title(slide.title)
    return unique_titles(SlideStructure(title=sanitize_title(f"{display} Presentation"), slides=slides))


def unique_titles(structure: SlideStructure) -> SlideStructure:
    """Suffix repeated slide titles so each title matches one page."""
    seen = {structure.title.lower()}
    for slide in structure.slides:
        base, n = slide.title, 2
        while slide.title.lower() in seen:
            slide.title = f"{base} {n}"
            n += 1
        seen.add(slide.title.lower())
    return structure


# ---------------------------------------------------------------------------
# Slide bodies
# ---------------------------------------------------------------------------


def slide_prompt(deck_title: str, slide: Slide, grounding: str = "") -> str:
    points = "\n".join(f"- {p}" for p in slide.key_points)
    prompt = (
        f'Write the content for the slide "{slide.title}" in a presentation titled "{deck_title}".\n'
        f"Subtitle: {slide.subtitle}\nKey points:\n{points}\n\n"
        "Use plain text only: one short subtitle line followed by 3 to 5 bullet points starting with '- '. "
        "Do not use HTML, markdown headings, or any commentary about the slide."
    )
    if grounding:
        prompt += f"\n\nUse these course materials where relevant:\n{grounding}"
    return prompt


def clean_slide_text(text: str) -> str:
    """Drop markup, meta commentary, headings and repeated lines."""
    text = re.sub(r"<style\b[^>]*>.*?</style>", " ", text or "", flags=re.DOTALL | re.IGNORECASE)
    text = re.sub(r"<[^>]+>", " ", text)
    lines: list[str] = []
    seen: set[str] = set()
    for line in html.unescape(text).splitlines():
        line = re.sub(r"^#+\s*", "", line).strip()
        if not line or _META_LINE_RE.match(line):
            continue
        key = line.lower()
        if key in seen:
            continue
        seen.add(key)
        lines.append(line)
    return "\n".join(lines)


def fallback_slide_text(slide: Slide) -> str:
    lines = [slide.subtitle] if slide.subtitle else []
    lines.extend(f"- {point}" for point in slide.key_points)
    return "\n".join(lines)


def _enhance_line(line: str) -> str:
    is_bullet = bool(_BULLET_RE.match(line))
    line = html.escape(_BULLET_RE.sub("", line), quote=False)
    line = _BOLD_RE.sub(r"<strong>\1</strong>", line)
    return f"<p>• {line}</p>" if is_bullet else f"<p>{line}</p>"


def format_slide(slide: Slide, number: int, total: int, text: str) -> str:
    """Wrap slide text in the presentation template."""
    body = "".join(_enhance_line(line) for line in text.splitlines() if line.strip())
    return (
        '<div style="background: linear-gradient(135deg, #1e3c72 0%, #2a5298 100%); '
        'color: white; padding: 40px; border-radius: 12px;">'
        f'<p style="opacity: 0.8;">Slide {number} of {total}</p>'
        f"<h1>{html.escape(slide.title, quote=False)}</h1>"
        f"{body}"
        "</div>"
    )


def format_index(structure: SlideStructure) -> str:
    """Content of the deck's parent page: a list of its slides."""
    items = "".join(f"<li>{html.escape(s.title, quote=False)}</li>" for s in structure.slides)
    return (
        f"<p>{html.escape(structure.title, quote=False)}: a presentation in "
        f"{len(structure.slides)} slides.</p><ol>{items}</ol>"
    )
