"""
Tests for the core document model.

The model is structure only; these tests cover the derived values
(title, date) and the lookup helpers on Document.
"""

from datetime import date, datetime

import pytest

from frontdoc.model import (
    CodeBlock,
    Document,
    FrontMatter,
    FrontMatterFormat,
    Heading,
    Link,
    LinkKind,
    coerce_date,
)


class TestCoerceDate:

    def test_date_passes_through(self):
        assert coerce_date(date(2025, 11, 8)) == date(2025, 11, 8)

    def test_datetime_keeps_date_part(self):
        assert coerce_date(datetime(2025, 11, 8, 23, 59)) == date(2025, 11, 8)

    def test_iso_string(self):
        assert coerce_date("2025-11-08") == date(2025, 11, 8)

    def test_iso_datetime_string(self):
        assert coerce_date("2025-11-08T10:00:00") == date(2025, 11, 8)

    @pytest.mark.parametrize("value", ["2025-13-01", "next tuesday", "", 20251108, None, True])
    def test_invalid_values(self, value):
        assert coerce_date(value) is None


class TestFrontMatter:

    def test_title_and_date(self):
        fm = FrontMatter(
            format=FrontMatterFormat.TOML,
            fields={"title": "Rust is all about patterns", "date": date(2025, 11, 8)},
        )
        assert fm.title == "Rust is all about patterns"
        assert fm.date == date(2025, 11, 8)

    def test_non_string_title_is_none(self):
        fm = FrontMatter(format=FrontMatterFormat.YAML, fields={"title": 42})
        assert fm.title is None

    def test_missing_fields(self):
        fm = FrontMatter(format=FrontMatterFormat.YAML)
        assert fm.title is None
        assert fm.date is None

    def test_format_delimiters(self):
        assert FrontMatterFormat.TOML.value == "+++"
        assert FrontMatterFormat.YAML.value == "---"


def build_document() -> Document:
    return Document(
        name="post",
        front_matter=FrontMatter(format=FrontMatterFormat.TOML, fields={"title": "Post", "date": "2025-11-08"}),
        headings=[
            Heading(level=2, text="Intro", slug="intro", line=5),
            Heading(level=2, text="Details", slug="details", line=20),
        ],
        code_blocks=[
            CodeBlock(fence="```", language="rust", code="let x = 1;", line=8, end_line=10),
            CodeBlock(fence="```", language=None, code="plain", line=22, end_line=24),
        ],
        links=[Link(kind=LinkKind.INLINE, text="Intro", target="#intro", line=3)],
    )


class TestDocument:

    def test_empty_document(self):
        doc = Document(name="empty")
        assert doc.title is None
        assert doc.date is None
        assert doc.anchors() == []
        assert doc.headings == []

    def test_title_and_date_from_front_matter(self):
        doc = build_document()
        assert doc.title == "Post"
        assert doc.date == date(2025, 11, 8)

    def test_anchors(self):
        assert build_document().anchors() == ["intro", "details"]

    def test_get_heading(self):
        doc = build_document()
        assert doc.get_heading("details").line == 20
        assert doc.get_heading("missing") is None

    def test_code_blocks_by_language(self):
        doc = build_document()
        assert [b.code for b in doc.code_blocks_by_language("rust")] == ["let x = 1;"]
        assert [b.code for b in doc.code_blocks_by_language(None)] == ["plain"]

    def test_section_for_line(self):
        doc = build_document()
        assert doc.section_for_line(3) is None
        assert doc.section_for_line(5).slug == "intro"
        assert doc.section_for_line(8).slug == "intro"
        assert doc.section_for_line(22).slug == "details"
