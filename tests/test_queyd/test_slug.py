"""Unit tests for queyd.slug."""

import pytest

from queyd.errors import EmptyIdentifier
from queyd.slug import build_id, first_line, slugify


class TestSlugify:
    def test_punctuation_collapses(self):
        assert slugify("Hello, world!") == "hello-world"

    def test_transliterates(self):
        assert slugify("Crème Brûlée") == "creme-brulee"

    def test_trims_separators(self):
        assert slugify("  --Already-slugged--  ") == "already-slugged"

    def test_slashes_are_not_kept(self):
        assert slugify("a/b\\c") == "a-b-c"

    def test_nothing_usable(self):
        assert slugify("!!!") == ""


class TestFirstLine:
    def test_wrapping_paragraph_removed(self):
        assert first_line("<p>first line</p>") == "first line"

    def test_markdown_inline_markup_removed(self):
        assert first_line("Some *text* here\nsecond line") == "Some text here"

    def test_blank_body(self):
        assert first_line("\n\n") == ""


class TestBuildId:
    def test_title_only(self):
        assert build_id("", "Hello, world!", "<p>first line</p>") == "hello-world"

    def test_project_namespace(self):
        assert build_id("Side Projects", "Plan B", "") == "side-projects/plan-b"

    def test_body_fallback(self):
        assert build_id("", "", "<p>first line</p>") == "first-line"

    def test_project_with_body_fallback(self):
        assert build_id("queyd", "", "Ideas for later\n\nmore") == "queyd/ideas-for-later"

    def test_explicit_id_verbatim(self):
        assert build_id("p", "t", "b", note_id="Custom/Id") == "Custom/Id"

    def test_empty_raises(self):
        with pytest.raises(EmptyIdentifier):
            build_id("", "", "")

    def test_unsluggable_raises(self):
        with pytest.raises(EmptyIdentifier):
            build_id("", "???", "<p>!!!</p>")

    def test_deterministic(self):
        args = ("Work", "Weekly review", "body")
        assert build_id(*args) == build_id(*args)

    def test_no_leading_or_trailing_slash(self):
        note_id = build_id("", "Title", "")
        assert not note_id.startswith("/")
        assert not note_id.endswith("/")
