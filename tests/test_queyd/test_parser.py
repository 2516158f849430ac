"""Unit tests for queyd.parser."""

import textwrap
from datetime import date

import pytest
import yaml

from queyd.errors import MalformedNote
from queyd.note import Note, NoteDates
from queyd.parser import compose_note, dump_header, escape_title, load_header, split_content

# ---------------------------------------------------------------------------
# split_content
# ---------------------------------------------------------------------------


class TestSplitContent:
    def test_not_a_note_returns_none(self):
        assert split_content("# Just markdown\n\nNo header here.\n") is None

    def test_delimiter_later_in_file_is_not_a_note(self):
        assert split_content("Intro\n---\ntags: [a]\n---\nBody.\n") is None

    def test_basic_split(self):
        raw = textwrap.dedent("""\
            ---
            tags: [a, b]
            ---
            # Title

            Body.
        """)
        header, body = split_content(raw)
        assert header == "tags: [a, b]\n"
        assert body == "# Title\n\nBody.\n"

    def test_empty_header(self):
        header, body = split_content("---\n---\nBody.\n")
        assert header == ""
        assert body == "Body.\n"

    def test_unclosed_header_is_malformed(self):
        with pytest.raises(MalformedNote):
            split_content("---\ntags: [a]\nBody without closing delimiter.\n")

    def test_horizontal_rule_stays_in_body(self):
        header, body = split_content("---\narea: work\n---\nAbove\n\n---\n\nBelow\n")
        assert header == "area: work\n"
        assert "---" in body
        assert body.endswith("Below\n")

    def test_trailing_blanks_on_delimiter(self):
        header, body = split_content("---  \nproject: x\n---\t\nBody\n")
        assert header == "project: x\n"
        assert body == "Body\n"

    def test_closing_delimiter_at_end_of_file(self):
        header, body = split_content("---\nproject: x\n---")
        assert header == "project: x\n"
        assert body == ""


# ---------------------------------------------------------------------------
# load_header
# ---------------------------------------------------------------------------


class TestLoadHeader:
    def test_defaults_for_empty_header(self):
        header = load_header("")
        assert header.tags == []
        assert header.project == ""
        assert header.area == ""
        assert header.url == ""
        assert header.uuid == ""
        assert header.date_of == NoteDates("", "")

    def test_all_fields(self):
        header = load_header(textwrap.dedent("""\
            uuid: 1234
            tags: [python, notes]
            project: queyd
            area: work
            url: https://example.com
            date_of:
              creation: '2024-01-01T09:00:00+00:00'
              last_modification: '2024-02-01T09:00:00+00:00'
        """))
        assert header.uuid == "1234"
        assert header.tags == ["python", "notes"]
        assert header.project == "queyd"
        assert header.area == "work"
        assert header.url == "https://example.com"
        assert header.date_of.creation == "2024-01-01T09:00:00+00:00"
        assert header.date_of.last_modification == "2024-02-01T09:00:00+00:00"

    def test_comma_separated_tags(self):
        assert load_header("tags: a, b , a").tags == ["a", "b"]

    def test_duplicate_tags_removed_in_order(self):
        assert load_header("tags: [b, a, b]").tags == ["b", "a"]

    def test_unquoted_yaml_dates_become_iso_strings(self):
        header = load_header("date_of:\n  creation: 2020-01-01\n")
        assert header.date_of.creation == date(2020, 1, 1).isoformat()
        assert header.date_of.last_modification == ""

    def test_legacy_title_key(self):
        assert load_header("title: Old Style").title == "Old Style"

    def test_invalid_yaml_is_malformed(self):
        with pytest.raises(MalformedNote):
            load_header("tags: [unclosed\n")

    def test_non_mapping_is_malformed(self):
        with pytest.raises(MalformedNote):
            load_header("- just\n- a list\n")

    @pytest.mark.parametrize("value", ["5", "true", "{a: 1}"])
    def test_scalar_tags_are_malformed(self, value: str):
        with pytest.raises(MalformedNote):
            load_header(f"tags: {value}\n")

    def test_date_of_must_be_mapping(self):
        with pytest.raises(MalformedNote):
            load_header("date_of: yesterday\n")


# ---------------------------------------------------------------------------
# dump_header / compose_note
# ---------------------------------------------------------------------------


class TestDumpHeader:
    def test_empty_note_dumps_nothing(self):
        assert dump_header(Note()) == ""

    def test_omits_empty_fields(self):
        meta = yaml.safe_load(dump_header(Note(project="queyd")))
        assert meta == {"project": "queyd"}

    def test_never_writes_structural_fields(self):
        note = Note(id="a/b", title="Title", body="<p>x</p>", tags=["t"])
        meta = yaml.safe_load(dump_header(note))
        assert set(meta) == {"tags"}

    def test_partial_dates(self):
        note = Note(date_of=NoteDates(creation="2024-01-01T00:00:00+00:00"))
        meta = yaml.safe_load(dump_header(note))
        assert list(meta["date_of"]) == ["creation"]

    def test_reads_back(self):
        note = Note(
            uuid="u-1",
            tags=["b", "a"],
            project="yes",
            area="archive",
            url="https://example.com/x?y=1",
            date_of=NoteDates("2024-01-01T00:00:00+00:00", "2024-01-02T00:00:00+00:00"),
        )
        header = load_header(dump_header(note))
        assert header.tags == ["b", "a"]
        assert header.project == "yes"
        assert header.area == "archive"
        assert header.url == "https://example.com/x?y=1"
        assert header.uuid == "u-1"
        assert header.date_of == note.date_of


class TestComposeNote:
    def test_layout(self):
        text = compose_note(Note(title="Hello", tags=["x"], source="Body text."))
        assert text == "---\ntags:\n- x\n---\n# Hello\n\nBody text.\n"

    def test_without_title(self):
        assert compose_note(Note(source="Only body")) == "---\n---\nOnly body\n"

    def test_splits_back(self):
        header, body = split_content(compose_note(Note(title="T", project="p", source="B")))
        assert load_header(header).project == "p"
        assert body == "# T\n\nB\n"

    def test_title_is_escaped(self):
        text = compose_note(Note(title="Issue #2 *wip*", source="B"))
        assert "# Issue \\#2 \\*wip\\*\n" in text


class TestEscapeTitle:
    def test_plain_title_untouched(self):
        assert escape_title("Hello, world!") == "Hello, world!"

    def test_markdown_specials(self):
        assert escape_title("a_b `c` [d]") == "a\\_b \\`c\\` \\[d\\]"

    def test_html_specials(self):
        assert escape_title("x < y & z") == "x &lt; y &amp; z"

    def test_backslash(self):
        assert escape_title("C:\\temp") == "C:\\\\temp"
