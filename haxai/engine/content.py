"""Deterministic content builders and generation prompts.

Everything here is plain string work: prompts sent to the generative
capability, post-processing of what comes back, and the templates used
when no generated text is available.
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass

from haxai.engine.safety import collapse_whitespace

PARAGRAPH_COUNT = 3

_SENTENCE_SPLIT_RE = re.compile(r"(?<=[.!?])\s+")
_PARAGRAPH_RE = re.compile(r"<p\b[^>]*>.*?</p>", re.IGNORECASE | re.DOTALL)
_BLOCK_RE = re.compile(r"<(style|script)\b[^>]*>.*?</\1>", re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r"<[^>]+>")


def strip_tags(markup: str) -> str:
    """Plain text of an HTML fragment."""
    text = _BLOCK_RE.sub(" ", markup or "")
    text = _TAG_RE.sub(" ", text)
    return collapse_whitespace(html.unescape(text))


# ---------------------------------------------------------------------------
# Page paragraphs
# ---------------------------------------------------------------------------


def paragraph_prompt(title: str, topic: str) -> str:
    return (
        f'Write exactly 3 paragraphs of engaging HTML content for a web page titled "{title}" '
        f"about {topic}. Each paragraph should be wrapped in <p> tags. "
        "Do not include any other HTML tags or explanatory text - just the 3 paragraphs."
    )


def three_paragraph_fallback(text: str) -> str:
    """Split *text* into exactly three ``<p>`` paragraphs by sentence.

    Short input repeats its last sentence; long input keeps the first
    three sentences.
    """
    sentences = [s for s in _SENTENCE_SPLIT_RE.split(strip_tags(text)) if s.strip()]
    if not sentences:
        sentences = ["Content for this page is coming soon."]
    sentences = sentences[:PARAGRAPH_COUNT]
    while len(sentences) < PARAGRAPH_COUNT:
        sentences.append(sentences[-1])
    return "".join(f"<p>{html.escape(s.strip(), quote=False)}</p>" for s in sentences)


def normalize_paragraphs(generated: str) -> str:
    """Keep the ``<p>`` blocks of generated text, or split it into three."""
    blocks = _PARAGRAPH_RE.findall(generated or "")
    if blocks:
        return "".join(collapse_whitespace(b) for b in blocks)
    return three_paragraph_fallback(generated)


def default_page_content(title: str) -> str:
    return f"<p>Welcome to the {html.escape(title, quote=False)} page.</p>"


# ---------------------------------------------------------------------------
# Quizzes
# ---------------------------------------------------------------------------

CHOICE_COUNT = 4

_QUIZ_BLOCK_RE = re.compile(r"<multiple-choice\b[^>]*>.*?</multiple-choice>", re.IGNORECASE | re.DOTALL)
_INPUT_RE = re.compile(r"<input\b[^>]*>", re.IGNORECASE)
_CORRECT_RE = re.compile(r"\scorrect\b", re.IGNORECASE)


@dataclass
class QuizQuestion:
    """A single multiple-choice question with one correct answer."""

    question: str
    choices: list[str]
    correct_index: int

    def __post_init__(self):
        if len(self.choices) != CHOICE_COUNT:
            raise ValueError(f"A quiz question needs exactly {CHOICE_COUNT} choices.")
        if not 0 <= self.correct_index < CHOICE_COUNT:
            raise ValueError("correct_index is out of range.")

    def to_html(self) -> str:
        lines = [
            '<multiple-choice single-option="" randomize="" max-attempts="0" '
            f'question="{html.escape(self.question)}">'
        ]
        for i, choice in enumerate(self.choices):
            marker = ' correct="correct"' if i == self.correct_index else ""
            lines.append(f'  <input type="checkbox" value="{html.escape(choice)}"{marker}>')
        lines.append("</multiple-choice>")
        return "\n".join(lines)


def quiz_prompt(topic: str, page_text: str | None = None) -> str:
    source = (
        f"Base the question on this page content:\n{page_text}\n\n"
        if page_text
        else f"The question should test understanding of {topic}.\n\n"
    )
    return (
        f"Create one multiple-choice quiz question about {topic}.\n"
        f"{source}"
        "Respond with only this HTML and nothing else:\n"
        '<multiple-choice single-option="" randomize="" max-attempts="0" question="QUESTION">\n'
        '  <input type="checkbox" value="ANSWER 1" correct="correct">\n'
        '  <input type="checkbox" value="ANSWER 2">\n'
        '  <input type="checkbox" value="ANSWER 3">\n'
        '  <input type="checkbox" value="ANSWER 4">\n'
        "</multiple-choice>\n"
        "Use exactly four inputs and mark exactly one of them correct."
    )


def extract_quiz_html(generated: str) -> str | None:
    """Return the generated quiz block if it has 4 choices and 1 answer."""
    m = _QUIZ_BLOCK_RE.search(generated or "")
    if not m:
        return None
    inputs = _INPUT_RE.findall(m.group(0))
    if len(inputs) != CHOICE_COUNT:
        return None
    if sum(1 for tag in inputs if _CORRECT_RE.search(tag)) != 1:
        return None
    return m.group(0).strip()


def template_quiz(topic: str) -> QuizQuestion:
    """Fixed-structure question used when generation is unavailable."""
    topic = collapse_whitespace(topic) or "this page"
    return QuizQuestion(
        question=f"Which statement best describes {topic}?",
        choices=[
            f"{topic} is a subject with key ideas worth understanding.",
            f"{topic} has nothing to do with this lesson.",
            f"{topic} cannot be studied or explained.",
            f"{topic} is only a matter of opinion.",
        ],
        correct_index=0,
    )


# ---------------------------------------------------------------------------
# Other components
# ---------------------------------------------------------------------------


def component_skeleton(tag: str, topic: str) -> str:
    """HTML skeleton for a non-quiz web component."""
    raw_topic = collapse_whitespace(topic) or "New content"
    topic = html.escape(raw_topic, quote=False)
    attr_topic = html.escape(raw_topic)
    if tag == "a11y-carousel":
        slides = "\n".join(
            f'  <figure slot="item"><figcaption>{topic}: part {n}</figcaption></figure>'
            for n in range(1, 4)
        )
        return f"<a11y-carousel>\n{slides}\n</a11y-carousel>"
    if tag == "lrndesign-timeline":
        events = "\n".join(
            f"  <section><h3>{label}</h3><p>{topic}: {label.lower()}.</p></section>"
            for label in ("Beginning", "Development", "Today")
        )
        return f'<lrndesign-timeline title="{attr_topic}">\n{events}\n</lrndesign-timeline>'
    if tag == "code-sample":
        return (
            '<code-sample copy-clipboard-button="">\n'
            f"  <template preserve-content><pre>// {topic}\n</pre></template>\n"
            "</code-sample>"
        )
    if tag == "media-quote":
        return f'<media-quote quote="{attr_topic}" author=""></media-quote>'
    return f"<{tag}>\n  <p>{topic}</p>\n</{tag}>"


# ---------------------------------------------------------------------------
# Customized pages
# ---------------------------------------------------------------------------

NATIONALITIES = (
    "Japanese", "Korean", "Chinese", "American", "French", "Italian",
    "German", "Spanish", "Mexican", "Indian", "Thai", "Vietnamese",
)

# Longest phrases first so "border collies" wins over "collies".
SPECIES = (
    "border collies", "border collie", "dogs", "dog", "cats", "cat",
    "horses", "horse", "birds", "bird",
)

_STYLE_TITLE_RE = re.compile(
    r"\b(Traditional|Modern|Classic|Ancient)\s+(\w+)\s+"
    r"(House|Houses|Building|Buildings|Architecture|Home|Homes|Temple|Garden|Food|Cuisine)\b",
    re.IGNORECASE,
)


def _find_word(words: tuple[str, ...], text: str) -> str | None:
    for word in words:
        if re.search(rf"\b{re.escape(word)}\b", text, re.IGNORECASE):
            return word
    return None


def _match_case(replacement: str, original: str) -> str:
    return replacement.title() if original[:1].isupper() else replacement.lower()


def customized_title(original: str, customization: str) -> str:
    """Derive a title for a page adapted to a new purpose.

    Swaps a nationality or animal named in *original* for the one named
    in *customization*; otherwise appends the customization.
    """
    target_nat = _find_word(NATIONALITIES, customization)
    if target_nat:
        source_nat = next(
            (n for n in NATIONALITIES if n != target_nat and re.search(rf"\b{n}\b", original, re.IGNORECASE)),
            None,
        )
        if source_nat:
            return re.sub(rf"\b{source_nat}\b", target_nat, original, flags=re.IGNORECASE)
        m = _STYLE_TITLE_RE.search(original)
        if m:
            return original[: m.start(2)] + target_nat + original[m.end(2):]

    target_species = _find_word(SPECIES, customization)
    if target_species:
        source_species = _find_word(
            tuple(s for s in SPECIES if s not in target_species and target_species not in s), original
        )
        if source_species:
            return re.sub(
                rf"\b{re.escape(source_species)}\b",
                lambda m: _match_case(target_species, m.group(0)),
                original,
                count=1,
                flags=re.IGNORECASE,
            )

    custom = collapse_whitespace(customization)
    return f"{original} - {custom[:1].upper()}{custom[1:]}"


def customize_prompt(original_title: str, original_text: str, customization: str) -> tuple[str, str]:
    """Return ``(system_instructions, user_text)`` for a page rewrite."""
    system = (
        "You are an expert content customization assistant. You rewrite existing web page "
        "content for a new purpose while keeping its structure, tone and reading level. "
        "Respond with exactly 3 paragraphs wrapped in <p> tags and nothing else."
    )
    user = (
        f'Original page title: "{original_title}"\n'
        f"Original content:\n{original_text}\n\n"
        f"Rewrite this content so that it is about: {customization}"
    )
    return system, user
