"""Tests for haxai.engine.content: paragraphs, quizzes, components, customization."""

import pytest

from haxai.engine.content import (
    QuizQuestion,
    component_skeleton,
    customize_prompt,
    customized_title,
    default_page_content,
    extract_quiz_html,
    normalize_paragraphs,
    paragraph_prompt,
    quiz_prompt,
    strip_tags,
    template_quiz,
    three_paragraph_fallback,
)


class TestParagraphs:

    def test_prompt_asks_for_three_paragraphs(self):
        prompt = paragraph_prompt("Cells", "cell structure")
        assert "exactly 3 paragraphs" in prompt
        assert '"Cells"' in prompt

    @pytest.mark.parametrize("text", [
        "",
        "One sentence only.",
        "First. Second.",
        "A. B. C. D. E.",
    ])
    def test_fallback_always_three(self, text):
        result = three_paragraph_fallback(text)
        assert result.count("<p>") == 3
        assert result.count("</p>") == 3

    def test_fallback_repeats_last_sentence(self):
        assert three_paragraph_fallback("Only one.") == "<p>Only one.</p>" * 3

    def test_fallback_keeps_first_three(self):
        assert three_paragraph_fallback("A. B. C. D.") == "<p>A.</p><p>B.</p><p>C.</p>"

    def test_fallback_empty_input(self):
        assert "coming soon" in three_paragraph_fallback("")

    def test_fallback_escapes_text(self):
        assert three_paragraph_fallback("x < y.") == "<p>x &lt; y.</p>" * 3

    def test_normalize_keeps_paragraph_blocks(self):
        assert normalize_paragraphs("Intro text\n<p>One</p>\n<p>Two\nlines</p>") == "<p>One</p><p>Two lines</p>"

    def test_normalize_splits_plain_text(self):
        assert normalize_paragraphs("Plain text. More text.").count("<p>") == 3

    def test_default_page_content(self):
        assert default_page_content("Q&A") == "<p>Welcome to the Q&amp;A page.</p>"

    def test_strip_tags(self):
        assert strip_tags("<style>p{}</style><p>Hi &amp; bye</p>") == "Hi & bye"


class TestQuiz:

    def test_question_needs_four_choices(self):
        with pytest.raises(ValueError, match="exactly 4 choices"):
            QuizQuestion("Q?", ["a", "b", "c"], 0)

    def test_correct_index_in_range(self):
        with pytest.raises(ValueError, match="out of range"):
            QuizQuestion("Q?", ["a", "b", "c", "d"], 4)

    def test_template_has_one_correct_answer(self):
        markup = template_quiz("cells").to_html()
        assert markup.count("<input") == 4
        assert markup.count('correct="correct"') == 1
        assert 'question="Which statement best describes cells?"' in markup

    def test_template_blank_topic(self):
        assert template_quiz("   ").question == "Which statement best describes this page?"

    def test_html_escapes_attributes(self):
        markup = QuizQuestion('Is "x" < y?', ["a", "b", "c", "d"], 2).to_html()
        assert 'question="Is &quot;x&quot; &lt; y?"' in markup

    def test_prompt_uses_page_text(self):
        assert "Base the question on this page content" in quiz_prompt("cells", "Cells are small.")
        assert "test understanding of cells" in quiz_prompt("cells")

    def test_extract_valid_block(self):
        markup = template_quiz("cells").to_html()
        assert extract_quiz_html(f"Sure! Here it is:\n{markup}\nEnjoy.") == markup

    def test_extract_rejects_two_correct(self):
        markup = template_quiz("cells").to_html().replace('value="cells has', 'correct="correct" value="cells has')
        assert markup.count('correct="correct"') == 2
        assert extract_quiz_html(markup) is None

    def test_extract_rejects_wrong_choice_count(self):
        markup = (
            '<multiple-choice question="Q">'
            '<input type="checkbox" value="a" correct="correct">'
            '<input type="checkbox" value="b">'
            "</multiple-choice>"
        )
        assert extract_quiz_html(markup) is None

    def test_extract_without_block(self):
        assert extract_quiz_html("I could not write a quiz.") is None


class TestComponents:

    def test_carousel_has_three_items(self):
        assert component_skeleton("a11y-carousel", "Volcanoes").count('slot="item"') == 3

    def test_timeline(self):
        markup = component_skeleton("lrndesign-timeline", "Rome")
        assert markup.startswith('<lrndesign-timeline title="Rome">')
        assert markup.count("<section>") == 3

    def test_generic_escapes_topic(self):
        assert component_skeleton("generic-element", "A & B") == "<generic-element>\n  <p>A &amp; B</p>\n</generic-element>"

    def test_media_quote_attribute(self):
        assert component_skeleton("media-quote", 'Say "hi"') == '<media-quote quote="Say &quot;hi&quot;" author=""></media-quote>'

    def test_blank_topic(self):
        assert "New content" in component_skeleton("flash-card", "")


class TestCustomizedTitle:

    def test_swaps_nationality(self):
        assert customized_title("Traditional Japanese Houses", "Korean houses") == "Traditional Korean Houses"

    def test_swaps_species_keeping_case(self):
        assert customized_title("Dogs", "cats") == "Cats"
        assert customized_title("Caring for dogs", "cats") == "Caring for cats"

    def test_appends_customization(self):
        assert customized_title("Intro", "middle school students") == "Intro - Middle school students"

    def test_prompt(self):
        system, user = customize_prompt("Dogs", "Dogs are loyal.", "cats")
        assert "3 paragraphs" in system
        assert "Dogs are loyal." in user
        assert user.endswith("about: cats")
