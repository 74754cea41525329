"""Tests for haxai.engine.resources: course-material grounding."""

import json

from haxai.engine.context import build_context
from haxai.engine.resources import (
    ResourceLimits,
    ResourceSnippet,
    ResourceSummary,
    add_url_resource,
    load_resource_index,
    summarize,
)


def _write_materials(site_dir, files):
    materials = site_dir / "resources"
    materials.mkdir(parents=True, exist_ok=True)
    for name, body in files.items():
        (materials / name).write_text(body, encoding="utf-8")


class TestSummarize:

    def test_no_site(self, context):
        assert summarize(None, context).is_empty

    def test_site_without_materials(self, context):
        summary = summarize("my-blog", context)
        assert summary.is_empty
        assert summary.to_prompt() == ""

    def test_reads_index_and_documents(self, context, sites_root):
        site_dir = sites_root / "my-blog"
        (site_dir / "resources.json").write_text(json.dumps({
            "urls": [{"url": "https://cells.example.edu", "description": "Intro reading"}],
            "notes": "Use metric units.",
        }), encoding="utf-8")
        _write_materials(site_dir, {
            "a.md": "# Title\nSome **bold** [link](http://x.org)",
            "b.png": "not an image",
            "c.html": "<p>Hello</p><script>alert(1)</script>",
        })

        summary = summarize("my-blog", context)

        assert summary.urls == [{"url": "https://cells.example.edu", "description": "Intro reading"}]
        assert summary.notes == "Use metric units."
        assert [s.source for s in summary.snippets] == ["a.md", "c.html"]
        assert summary.snippets[0].text == "Title Some bold link"
        assert summary.snippets[1].text == "Hello"

    def test_document_limits(self, context, sites_root):
        _write_materials(sites_root / "my-blog", {"1.txt": "abcdefghij", "2.txt": "second"})
        limits = ResourceLimits(max_documents=1, max_chars_per_document=4)

        summary = summarize("my-blog", context, limits)

        assert summary.snippets == [ResourceSnippet(source="1.txt", text="abcd")]

    def test_limits_from_config(self):
        limits = ResourceLimits.from_config({"resources": {"max_documents": 3}})
        assert limits.max_documents == 3
        assert limits.max_chars_per_document == ResourceLimits().max_chars_per_document

    def test_limits_from_empty_config(self):
        assert ResourceLimits.from_config({}) == ResourceLimits()


class TestToPrompt:

    def test_sections(self):
        summary = ResourceSummary(
            urls=[{"url": "https://a.edu", "description": "Intro"}, {"url": "https://b.edu", "description": ""}],
            notes="Be kind.",
            snippets=[ResourceSnippet("a.md", "Cells are small.")],
        )
        text = summary.to_prompt()
        assert "Reference links:\n- https://a.edu (Intro)\n- https://b.edu\n" in text
        assert "Instructor notes: Be kind." in text
        assert text.endswith("From a.md:\nCells are small.")

    def test_cut_to_max_chars(self):
        summary = ResourceSummary(notes="x" * 100)
        assert len(summary.to_prompt(max_chars=30)) == 30


class TestResourceIndex:

    def test_missing_index(self, tmp_path):
        assert load_resource_index(tmp_path) == ([], "")

    def test_list_form(self, tmp_path):
        (tmp_path / "resources.json").write_text(
            json.dumps(["https://x.org", {"url": "https://y.org"}, {"description": "no url"}, 3]),
            encoding="utf-8",
        )
        urls, notes = load_resource_index(tmp_path)
        assert [u["url"] for u in urls] == ["https://x.org", "https://y.org"]
        assert notes == ""

    def test_invalid_json(self, tmp_path):
        (tmp_path / "resources.json").write_text("{broken", encoding="utf-8")
        assert load_resource_index(tmp_path) == ([], "")

    def test_add_url_creates_index(self, tmp_path):
        entry = add_url_resource(tmp_path / "site", "https://x.org", "Reading")
        assert entry["url"] == "https://x.org"
        assert entry["description"] == "Reading"
        assert "added" in entry
        data = json.loads((tmp_path / "site" / "resources.json").read_text(encoding="utf-8"))
        assert data == [entry]

    def test_add_url_keeps_dict_form(self, tmp_path):
        (tmp_path / "resources.json").write_text(json.dumps({"urls": [], "notes": "n"}), encoding="utf-8")
        add_url_resource(tmp_path, "https://x.org")
        data = json.loads((tmp_path / "resources.json").read_text(encoding="utf-8"))
        assert data["notes"] == "n"
        assert [u["url"] for u in data["urls"]] == ["https://x.org"]

    def test_added_url_is_summarized(self, tmp_path):
        add_url_resource(tmp_path / "lab", "https://x.org", "Lab manual")
        context = build_context(["lab"], "lab", tmp_path)
        assert summarize("lab", context).urls == [{"url": "https://x.org", "description": "Lab manual"}]
