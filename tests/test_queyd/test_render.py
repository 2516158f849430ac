"""Unit tests for queyd.render."""

from queyd.render import extract_and_strip_leading_heading, render, strip_tags, unwrap_paragraph


class TestRender:
    def test_heading_and_paragraph(self):
        html = render("# Title\n\nSome *text*.")
        assert "<h1>Title</h1>" in html
        assert "<p>Some <em>text</em>.</p>" in html

    def test_raw_html_passes_through(self):
        assert render("<p>first line</p>") == "<p>first line</p>"


class TestExtractAndStripLeadingHeading:
    def test_extracts_first_h1(self):
        heading, rest = extract_and_strip_leading_heading("<h1>Title</h1>\n<p>Body</p>")
        assert heading == "Title"
        assert rest == "<p>Body</p>"

    def test_no_heading(self):
        heading, rest = extract_and_strip_leading_heading("\n<p>Body</p>\n")
        assert heading == ""
        assert rest == "<p>Body</p>"

    def test_only_first_h1_removed(self):
        heading, rest = extract_and_strip_leading_heading("<h1>One</h1>\n<h1>Two</h1>")
        assert heading == "One"
        assert rest == "<h1>Two</h1>"

    def test_h2_is_not_a_title(self):
        heading, rest = extract_and_strip_leading_heading("<h2>Sub</h2>\n<p>x</p>")
        assert heading == ""
        assert rest.startswith("<h2>")

    def test_inner_tags_stripped_and_entities_unescaped(self):
        heading, _ = extract_and_strip_leading_heading('<h1 id="x">Q<em>&amp;</em>A</h1>')
        assert heading == "Q&A"


class TestHelpers:
    def test_strip_tags(self):
        assert strip_tags("<b>bold</b> &lt;3") == "bold <3"

    def test_unwrap_paragraph(self):
        assert unwrap_paragraph("<p>first line</p>") == "first line"

    def test_unwrap_leaves_other_markup(self):
        assert unwrap_paragraph("<li>item</li>") == "<li>item</li>"
