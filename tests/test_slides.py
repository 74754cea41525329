"""Tests for haxai.engine.slides."""

import json
import re

import pytest

from haxai.engine.slides import (
    MAX_SLIDES,
    Slide,
    build_fallback_outline,
    clean_slide_text,
    fallback_slide_text,
    format_index,
    format_slide,
    outline_prompt,
    parse_outline,
    slide_prompt,
)
from haxai.errors import OutlineParseError


def _outline(title="Photosynthesis", slides=None):
    if slides is None:
        slides = [
            {"title": "What Is It?", "subtitle": "Basics", "key_points": ["Light", "Water"]},
            {"title": "Chlorophyll", "subtitle": "The pigment", "key_points": ["Green"]},
        ]
    return json.dumps({"title": title, "slides": slides})


class TestFallbackOutline:

    def test_six_slides(self):
        structure = build_fallback_outline("photosynthesis")
        assert 6 <= len(structure.slides) <= MAX_SLIDES
        assert structure.title == "Photosynthesis Presentation"

    @pytest.mark.parametrize("topic", ["photosynthesis", "the water-cycle!", "C++ & you", ""])
    def test_titles_are_sanitized(self, topic):
        structure = build_fallback_outline(topic)
        for title in [structure.title] + [s.title for s in structure.slides]:
            assert re.fullmatch(r"[A-Za-z0-9]+( [A-Za-z0-9]+)*", title)

    def test_titles_unique(self):
        titles = [s.title.lower() for s in build_fallback_outline("cells").slides]
        assert len(titles) == len(set(titles))


class TestParseOutline:

    def test_plain_json(self):
        structure = parse_outline(_outline())
        assert structure.title == "Photosynthesis"
        assert [s.title for s in structure.slides] == ["What Is It", "Chlorophyll"]
        assert structure.slides[0].key_points == ["Light", "Water"]

    def test_fenced_json_with_chatter(self):
        text = f"Here is your outline:\n```json\n{_outline()}\n```\nLet me know!"
        assert len(parse_outline(text).slides) == 2

    def test_key_points_alias(self):
        structure = parse_outline(_outline(slides=[{"title": "One", "keyPoints": ["a"]}]))
        assert structure.slides[0].key_points == ["a"]

    def test_caps_slide_count(self):
        slides = [{"title": f"Slide {n}"} for n in range(20)]
        assert len(parse_outline(_outline(slides=slides)).slides) == MAX_SLIDES

    def test_duplicate_titles_suffixed(self):
        structure = parse_outline(_outline(title="Deck", slides=[{"title": "Intro"}, {"title": "Intro"}]))
        assert [s.title for s in structure.slides] == ["Intro", "Intro 2"]

    @pytest.mark.parametrize("text,message", [
        ("no json here", "No JSON object"),
        ("{not: valid}", "not valid JSON"),
        (json.dumps({"title": "", "slides": [{"title": "A"}]}), "no title"),
        (json.dumps({"title": "Deck", "slides": "none"}), "no slide list"),
        (json.dumps({"title": "Deck", "slides": [{"title": "!!!"}, 3]}), "no usable slides"),
    ])
    def test_unusable_outline(self, text, message):
        with pytest.raises(OutlineParseError, match=message):
            parse_outline(text)


class TestSlideText:

    def test_prompts_include_grounding(self):
        assert "course materials" in outline_prompt("cells", grounding="Cells are small.")
        assert "course materials" not in outline_prompt("cells")
        assert "course materials" in slide_prompt("Deck", Slide("Intro"), grounding="notes")

    def test_clean_slide_text(self):
        text = "Here is the slide:\n## Overview\n<b>Bold</b>\n- A\n- A\n"
        assert clean_slide_text(text) == "Overview\nBold\n- A"

    def test_fallback_text(self):
        slide = Slide("Intro", "Sub", ["x", "y"])
        assert fallback_slide_text(slide) == "Sub\n- x\n- y"

    def test_format_slide(self):
        markup = format_slide(Slide("Cells"), 2, 6, "Subtitle\n- **Key** idea")
        assert "Slide 2 of 6" in markup
        assert "<h1>Cells</h1>" in markup
        assert "<p>Subtitle</p>" in markup
        assert "<p>• <strong>Key</strong> idea</p>" in markup

    def test_format_index(self):
        structure = build_fallback_outline("cells")
        markup = format_index(structure)
        assert markup.count("<li>") == len(structure.slides)
        assert "6 slides" in markup
