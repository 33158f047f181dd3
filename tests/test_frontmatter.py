"""Tests for front-matter splitting, validation and rendering."""

import datetime as dt

import pytest

pytestmark = pytest.mark.unit

from folio.exceptions import FrontMatterError, ValidationError
from folio.frontmatter import (
    FrontMatter,
    Navigation,
    dump_front_matter,
    parse_front_matter,
    render_document,
    split_front_matter,
)

WELL_FORMED = """---
title: Coroutines from scratch
description: Building a generator by hand
date: 2023-04-02
tags: [cpp, coroutines]
draft: false
---

The first thing a coroutine needs is a promise type.
"""


class TestParseWellFormed:
    """Tests for well-formed documents."""

    def test_all_fields_have_correct_types(self):
        """Test that the five recognised fields come back typed."""
        parsed = parse_front_matter(WELL_FORMED)
        fm = parsed.front_matter
        assert fm.title == "Coroutines from scratch"
        assert fm.description == "Building a generator by hand"
        assert fm.date == dt.date(2023, 4, 2)
        assert fm.tags == frozenset({"cpp", "coroutines"})
        assert fm.draft is False
        assert parsed.format == "yaml"

    def test_body_follows_block(self):
        """Test the body starts after the closing delimiter."""
        parsed = parse_front_matter(WELL_FORMED)
        assert parsed.body == "The first thing a coroutine needs is a promise type.\n"

    def test_optional_fields_default(self):
        """Test missing tags, description and draft fall back to defaults."""
        parsed = parse_front_matter("---\ntitle: Bare\n---\nBody\n")
        assert parsed.tags == frozenset()
        assert parsed.description == ""
        assert parsed.draft is False
        assert parsed.date is None
        assert parsed.nav is None

    def test_null_fields_default(self):
        """Test explicit nulls behave like missing keys."""
        parsed = parse_front_matter("---\ntitle: Nulls\ntags:\ndescription:\ndraft:\n---\n")
        assert parsed.tags == frozenset()
        assert parsed.description == ""
        assert parsed.draft is False

    def test_reparse_is_idempotent(self):
        """Test parsing the same text twice yields equal results."""
        assert parse_front_matter(WELL_FORMED) == parse_front_matter(WELL_FORMED)

    def test_draft_true(self):
        """Test the draft flag is read."""
        parsed = parse_front_matter("---\ntitle: WIP\ndraft: true\n---\n")
        assert parsed.draft is True

    def test_draft_textual_boolean(self):
        """Test a quoted boolean is accepted."""
        parsed = parse_front_matter("---\ntitle: WIP\ndraft: 'yes'\n---\n")
        assert parsed.draft is True

    def test_numeric_title_becomes_text(self):
        """Test YAML numbers in text fields are kept as text."""
        parsed = parse_front_matter("---\ntitle: 2023\n---\n")
        assert parsed.title == "2023"

    def test_title_is_stripped(self):
        """Test surrounding whitespace is removed from the title."""
        parsed = parse_front_matter("---\ntitle: '  Padded  '\n---\n")
        assert parsed.title == "Padded"


class TestDates:
    """Tests for date coercion."""

    def test_datetime_truncated_to_date(self):
        """Test YAML timestamps keep only their date."""
        parsed = parse_front_matter("---\ntitle: T\ndate: 2023-04-02 10:30:00\n---\n")
        assert parsed.date == dt.date(2023, 4, 2)

    def test_iso_string_with_time(self):
        """Test quoted ISO-8601 datetimes are accepted."""
        parsed = parse_front_matter("---\ntitle: T\ndate: '2023-04-02T23:15:00+02:00'\n---\n")
        assert parsed.date == dt.date(2023, 4, 2)

    def test_invalid_date(self):
        """Test an unparseable date raises with the field name."""
        with pytest.raises(FrontMatterError) as exc_info:
            parse_front_matter("---\ntitle: T\ndate: next tuesday\n---\n", source="post.md")
        assert exc_info.value.field == "date"
        assert exc_info.value.source == "post.md"
        assert str(exc_info.value).startswith("post.md: ")


class TestTags:
    """Tests for tag coercion."""

    def test_comma_separated_string(self):
        """Test a comma-separated string becomes a set, blanks dropped."""
        parsed = parse_front_matter("---\ntitle: T\ntags: 'cpp, coroutines, , cpp'\n---\n")
        assert parsed.tags == frozenset({"cpp", "coroutines"})

    def test_duplicate_tags_collapse(self):
        """Test repeated list entries collapse into one tag."""
        parsed = parse_front_matter("---\ntitle: T\ntags: [a, b, a]\n---\n")
        assert parsed.tags == frozenset({"a", "b"})

    def test_nested_tag_rejected(self):
        """Test a mapping inside the tag list is rejected."""
        with pytest.raises(FrontMatterError) as exc_info:
            parse_front_matter("---\ntitle: T\ntags: [{a: 1}]\n---\n")
        assert exc_info.value.field == "tags"


class TestNavigation:
    """Tests for the nav block."""

    def test_nav_entry(self):
        """Test key and order are read."""
        parsed = parse_front_matter("---\ntitle: About\nnav:\n  key: About me\n  order: 1\n---\n")
        assert parsed.nav == Navigation(key="About me", order=1)

    def test_nav_key_defaults_to_title(self):
        """Test a nav block without key is labelled with the title."""
        parsed = parse_front_matter("---\ntitle: About\nnav:\n  order: '3'\n---\n")
        assert parsed.nav.key == "About"
        assert parsed.nav.order == 3

    def test_eleventy_navigation_name(self):
        """Test the Eleventy block name is read as the nav entry."""
        parsed = parse_front_matter(
            "---\ntitle: About\neleventyNavigation:\n  key: About\n  order: 1\n---\n"
        )
        assert parsed.nav == Navigation(key="About", order=1)
        assert parsed.front_matter.params == {}

    def test_eleventy_navigation_key_defaults_to_title(self):
        """Test the Eleventy block also falls back to the title."""
        parsed = parse_front_matter("---\ntitle: About\neleventyNavigation:\n  order: 4\n---\n")
        assert parsed.nav == Navigation(key="About", order=4)

    def test_json_block(self):
        """Test ---json blocks close with --- and carry the nav entry."""
        text = (
            '---json\n{"title": "About", "eleventyNavigation": {"key": "About", "order": 1}}\n'
            "---\nHello.\n"
        )
        parsed = parse_front_matter(text)
        assert parsed.format == "json"
        assert parsed.title == "About"
        assert parsed.nav == Navigation(key="About", order=1)
        assert parsed.body == "Hello.\n"

    def test_malformed_json_block(self):
        """Test broken JSON is reported."""
        with pytest.raises(FrontMatterError) as exc_info:
            parse_front_matter('---json\n{"title": \n---\n')
        assert "malformed json" in str(exc_info.value)

    def test_numeric_nav_key(self):
        """Test a number used as the menu label is read as text."""
        parsed = parse_front_matter("---\ntitle: Not found\nnav:\n  key: 404\n  order: 9\n---\n")
        assert parsed.nav == Navigation(key="404", order=9)

    def test_nav_unknown_key_rejected(self):
        """Test misspelled nav keys are reported."""
        with pytest.raises(FrontMatterError) as exc_info:
            parse_front_matter("---\ntitle: About\nnav:\n  key: About\n  weight: 1\n---\n")
        assert exc_info.value.field == "nav.weight"


class TestMalformed:
    """Tests for documents that cannot be parsed."""

    def test_missing_block(self):
        """Test a document without front-matter is rejected."""
        with pytest.raises(FrontMatterError) as exc_info:
            parse_front_matter("# Just a heading\n")
        assert "missing front-matter" in str(exc_info.value)

    def test_unterminated_block(self):
        """Test an unclosed block is rejected."""
        with pytest.raises(FrontMatterError) as exc_info:
            parse_front_matter("---\ntitle: Open\n\nBody\n")
        assert "unterminated" in str(exc_info.value)

    def test_empty_document(self):
        """Test an empty file is rejected."""
        with pytest.raises(FrontMatterError) as exc_info:
            parse_front_matter("\n\n")
        assert "empty" in str(exc_info.value)

    def test_missing_title(self):
        """Test title is required."""
        with pytest.raises(FrontMatterError) as exc_info:
            parse_front_matter("---\ndate: 2023-01-01\n---\n")
        assert exc_info.value.field == "title"

    def test_blank_title(self):
        """Test a whitespace-only title is rejected."""
        with pytest.raises(FrontMatterError) as exc_info:
            parse_front_matter("---\ntitle: '   '\n---\n")
        assert exc_info.value.field == "title"

    def test_yaml_syntax_error(self):
        """Test broken YAML is reported as a front-matter error."""
        with pytest.raises(FrontMatterError) as exc_info:
            parse_front_matter("---\ntitle: [unclosed\n---\n")
        assert "malformed yaml" in str(exc_info.value)

    def test_non_mapping_block(self):
        """Test a YAML list instead of a mapping is rejected."""
        with pytest.raises(FrontMatterError) as exc_info:
            parse_front_matter("---\n- a\n- b\n---\n")
        assert "mapping" in str(exc_info.value)

    def test_front_matter_error_is_validation_error(self):
        """Test callers can catch the generic validation error."""
        with pytest.raises(ValidationError):
            parse_front_matter("no block here")


class TestSplit:
    """Tests for block splitting."""

    def test_bom_and_leading_blank_lines(self):
        """Test a BOM and blank lines before the opener are tolerated."""
        fmt, block, body = split_front_matter("\ufeff\n\n---\ntitle: T\n---\nBody\n")
        assert fmt == "yaml"
        assert block == "title: T\n"
        assert body == "Body\n"

    def test_body_may_contain_rules(self):
        """Test only the first closing delimiter ends the block."""
        _, _, body = split_front_matter("---\ntitle: T\n---\nAbove\n\n---\n\nBelow\n")
        assert body == "Above\n\n---\n\nBelow\n"

    def test_crlf_line_endings(self):
        """Test Windows line endings are handled."""
        parsed = parse_front_matter("---\r\ntitle: T\r\ntags: [x]\r\n---\r\nBody\r\n")
        assert parsed.title == "T"
        assert parsed.tags == frozenset({"x"})

    def test_toml_block(self):
        """Test +++ blocks are read as TOML."""
        text = '+++\ntitle = "Hugo style"\ndate = 2023-01-05\ntags = ["x", "y"]\ndraft = true\n+++\nBody\n'
        parsed = parse_front_matter(text)
        assert parsed.format == "toml"
        assert parsed.date == dt.date(2023, 1, 5)
        assert parsed.tags == frozenset({"x", "y"})
        assert parsed.draft is True

    def test_malformed_toml(self):
        """Test broken TOML is reported."""
        with pytest.raises(FrontMatterError) as exc_info:
            parse_front_matter("+++\ntitle = \n+++\n")
        assert "malformed toml" in str(exc_info.value)


class TestParamsAndRendering:
    """Tests for extra keys and writing front-matter back out."""

    def test_unknown_keys_preserved(self):
        """Test unrecognised keys are kept as params."""
        parsed = parse_front_matter("---\ntitle: T\nseries: coroutines\nweight: 3\n---\n")
        assert parsed.front_matter.params == {"series": "coroutines", "weight": 3}

    def test_slug_override(self):
        """Test slug is cleaned of surrounding slashes."""
        parsed = parse_front_matter("---\ntitle: T\nslug: /posts/custom/\n---\n")
        assert parsed.front_matter.slug == "posts/custom"

    def test_numeric_slug(self):
        """Test a year used as the slug is read as text."""
        parsed = parse_front_matter("---\ntitle: Year in review\nslug: 2023\n---\n")
        assert parsed.front_matter.slug == "2023"

    def test_toml_time_dumped(self):
        """Test a TOML time of day survives dumping to YAML."""
        original = parse_front_matter('+++\ntitle = "T"\nat = 07:32:00\n+++\nBody\n')
        assert original.front_matter.params == {"at": dt.time(7, 32)}

        reparsed = parse_front_matter(render_document(original.front_matter, original.body))
        assert reparsed.format == "yaml"
        assert reparsed.title == "T"
        assert reparsed.front_matter.params == {"at": "07:32:00"}
        assert reparsed.body == "Body\n"

    def test_dump_orders_known_fields_first(self):
        """Test the dumped block lists recognised fields before params."""
        fm = FrontMatter(
            title="T", date=dt.date(2023, 1, 2), tags={"b", "a"}, series="s"
        )
        assert dump_front_matter(fm) == (
            "---\n"
            "title: T\n"
            "description: ''\n"
            "date: 2023-01-02\n"
            "tags:\n"
            "- a\n"
            "- b\n"
            "draft: false\n"
            "series: s\n"
            "---\n"
        )

    def test_rendered_document_parses_back(self):
        """Test a rendered document reads back to the same front-matter and body."""
        original = parse_front_matter(
            "---\ntitle: About\ndate: 2023-05-05\ntags: [me]\nnav: {key: About, order: 1}\n"
            "lastmod: 2023-06-01\n---\nHello.\n"
        )
        reparsed = parse_front_matter(render_document(original.front_matter, original.body))
        assert reparsed.front_matter == original.front_matter
        assert reparsed.body == original.body
