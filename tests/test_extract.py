"""Tests for haxai.engine.extract: parameter extraction from requests."""

import pytest

from haxai.engine.extract import (
    CustomizationRequest,
    derive_clone_name,
    extract_clone_request,
    extract_component_type,
    extract_content,
    extract_customization,
    extract_domain,
    extract_multiple_titles,
    extract_page_source,
    extract_page_title,
    extract_page_topic,
    extract_parent_page,
    extract_site_from_input,
    extract_site_name,
    extract_slidedeck_topic,
    title_from_topic,
)

NOW_MS = 1_700_000_012_345


class TestSiteExtraction:

    @pytest.mark.parametrize("text,expected", [
        ("Create a site called my-blog", "my-blog"),
        ('Create a site called "My Blog"', "my-blog"),
        ("make a new website named Portfolio", "portfolio"),
        ("create a new site", None),
    ])
    def test_extract_site_name(self, text, expected):
        assert extract_site_name(text) == expected

    def test_site_from_input(self):
        assert extract_site_from_input("Add a page to my-blog", ["my-blog", "other"]) == "my-blog"

    def test_site_from_input_returns_canonical_name(self):
        assert extract_site_from_input("deploy MY-BLOG please", ["my-blog"]) == "my-blog"

    def test_site_from_input_needs_whole_word(self):
        assert extract_site_from_input("add a page about blogs", ["blog"]) is None

    def test_site_from_input_no_sites(self):
        assert extract_site_from_input("add a page to my-blog", []) is None


class TestPageExtraction:

    @pytest.mark.parametrize("text,expected", [
        ("Add a page called About Us", "About Us"),
        ("Add a page called Cells about cell structure", "Cells"),
        ("Add a child page called Mitosis under the Biology page", "Mitosis"),
        ("edit the about page", "about"),
        ("add a page", None),
    ])
    def test_extract_page_title(self, text, expected):
        assert extract_page_title(text) == expected

    @pytest.mark.parametrize("text,expected", [
        ("Add a page called Cells under the Biology page", "Biology"),
        ("add a page called Cells as a child of Intro", "Intro"),
        ("add a page called Cells under Biology", "Biology"),
        ("Add a page called Cells under Biology about mitosis", "Biology"),
        ("add a page called Cells", None),
    ])
    def test_extract_parent_page(self, text, expected):
        assert extract_parent_page(text) == expected

    @pytest.mark.parametrize("text,expected", [
        ("Add a page called Salt and Pepper", "Salt and Pepper"),
        ("Add a page called Welcome to Biology", "Welcome to Biology"),
        ("Add a page called Salt and Pepper about seasoning", "Salt and Pepper"),
        ("Add a page called Home and a page called Contact", "Home"),
        ("Add a page called Welcome to my site", "Welcome"),
        ("Add a page called Welcome to the biology page", "Welcome"),
    ])
    def test_title_keeps_and_to(self, text, expected):
        assert extract_page_title(text) == expected

    def test_title_stops_at_known_site(self):
        assert extract_page_title("Add a page called About to beta", ["alpha", "beta"]) == "About"
        assert extract_page_title("Add a page called About to beta") == "About to beta"

    @pytest.mark.parametrize("topic,expected", [
        ("photosynthesis", "Photosynthesis"),
        ("how plants make food", "How Plants Make Food"),
        ("the history of the Roman Empire today", "The History Of The Roman"),
        ("DNA's role!", "DNAs Role"),
        ("?!", None),
        (None, None),
    ])
    def test_title_from_topic(self, topic, expected):
        assert title_from_topic(topic) == expected

    def test_content_literal(self):
        assert extract_content("Add a page called Cells with content Cells are tiny.") == "Cells are tiny"

    def test_content_topic(self):
        assert extract_content("Add a page called Cells about cell structure") == "cell structure"

    def test_about_page_is_not_a_topic(self):
        assert extract_content("Add an about page") is None

    def test_about_in_title_is_not_a_topic(self):
        assert extract_content("Add a page called About Us") is None
        assert extract_content("Add a page called About Us about our team") == "our team"

    def test_topic_drops_parent_clause(self):
        assert extract_content("Add a page about dogs under the Animals page") == "dogs"

    def test_component_topic_drops_target_page(self):
        text = "add a quiz about photosynthesis to the biology page"
        assert extract_content(text, for_component=True) == "photosynthesis"

    def test_content_containing(self):
        assert extract_content("Add a page containing a list of rules") == "a list of rules"

    @pytest.mark.parametrize("text,expected", [
        ("add a quiz to the intro page", "intro"),
        ("add a quiz about photosynthesis to the biology page", "biology"),
        ("add a quiz on page Intro", "Intro"),
        ("add a timeline to my Traditional Japanese Houses page", "Traditional Japanese Houses"),
        ("add a quiz about biology", None),
    ])
    def test_extract_page_source(self, text, expected):
        assert extract_page_source(text) == expected


class TestComponentType:

    @pytest.mark.parametrize("text,expected", [
        ("add a multiple-choice quiz", "multiple-choice"),
        ("add a quiz", "quiz"),
        ("add a true or false question", "true-false-question"),
        ("add flashcards", "flash-card"),
        ("add a widget", "generic-element"),
    ])
    def test_extract_component_type(self, text, expected):
        assert extract_component_type(text) == expected


class TestMultiplePages:

    def test_article_pair(self):
        assert extract_multiple_titles("Add an about page and a contact page") == ["about", "contact"]

    def test_bare_pair(self):
        assert extract_multiple_titles("add about and contact pages") == ["about", "contact"]

    def test_comma_list(self):
        titles = extract_multiple_titles("Add a Home page, an About page and a Contact page")
        assert titles == ["Home", "About", "Contact"]

    def test_duplicates_collapse(self):
        assert extract_multiple_titles("add about and About pages") == ["about"]

    def test_per_title_topic(self):
        text = "Add a Dogs page about puppies and a Cats page about kittens"
        assert extract_page_topic(text, "Dogs") == "puppies"
        assert extract_page_topic(text, "Cats") == "kittens"


class TestSlidedeckAndCustomize:

    @pytest.mark.parametrize("text,expected", [
        ("Create a slidedeck about photosynthesis", "photosynthesis"),
        ("make slides on the water cycle.", "the water cycle"),
        ("Make a presentation", None),
    ])
    def test_slidedeck_topic(self, text, expected):
        assert extract_slidedeck_topic(text) == expected

    def test_customize(self):
        assert extract_customization("Customize the Dogs page and make it about cats") == CustomizationRequest(
            page="Dogs", customization="cats"
        )

    def test_adapt(self):
        request = extract_customization("adapt the Intro page for middle school students")
        assert request.page == "Intro"
        assert request.customization == "middle school students"

    def test_customize_without_target(self):
        assert extract_customization("customize it") is None


class TestDeployAndClone:

    def test_domain_full(self):
        assert extract_domain("deploy my-blog to cool-site.surge.sh") == "cool-site.surge.sh"

    def test_domain_gets_suffix(self):
        assert extract_domain("deploy with domain coolsite") == "coolsite.surge.sh"

    def test_no_domain(self):
        assert extract_domain("deploy my site") is None

    def test_clone_request(self):
        request = extract_clone_request("clone https://example.surge.sh called my-copy")
        assert request.url == "https://example.surge.sh"
        assert request.name == "my-copy"

    def test_clone_trailing_punctuation(self):
        request = extract_clone_request("Clone https://example.surge.sh.")
        assert request.url == "https://example.surge.sh"
        assert request.name is None

    def test_clone_without_url(self):
        assert extract_clone_request("clone my site").url is None

    def test_derive_clone_name(self):
        assert derive_clone_name("https://www.example.surge.sh", NOW_MS) == "example-clone-2345"
        assert derive_clone_name("https://docs.python.org/3/", NOW_MS) == "docs-python-org-clone-2345"

    def test_derive_clone_name_without_host(self):
        assert derive_clone_name("file:///tmp/site", NOW_MS) == f"cloned-site-{NOW_MS}"
