"""Tests for photodrop.core.details — the structured/raw details variant."""

from __future__ import annotations

import pytest

from photodrop.core.details import (
    Raw,
    Structured,
    details_value,
    from_form,
    parse_details,
    serialize_details,
    try_parse_json,
)


class TestTryParseJson:
    """try_parse_json reports failure instead of raising."""

    def test_valid_document(self):
        result = try_parse_json('{"caption": "sunset"}')
        assert result.ok is True
        assert result.value == {"caption": "sunset"}

    @pytest.mark.parametrize("text", ["hello world", "{broken", "", "NaN", "Infinity"])
    def test_invalid_text(self, text):
        """Invalid or non-standard JSON should not parse."""
        result = try_parse_json(text)
        assert result.ok is False
        assert result.value is None


class TestParseDetails:
    """parse_details picks the variant."""

    def test_json_becomes_structured(self):
        assert parse_details('{"tags": ["a", "b"]}') == Structured({"tags": ["a", "b"]})

    def test_json_scalar_becomes_structured(self):
        """Any JSON value counts as structured, not just objects."""
        assert parse_details("42") == Structured(42)

    def test_text_becomes_raw(self):
        assert parse_details("hello world") == Raw("hello world")

    def test_null_column_becomes_null(self):
        """A NULL column reads back as a JSON null."""
        assert parse_details(None) == Structured(None)
        assert details_value(parse_details(None)) is None


class TestSerializeDetails:
    """serialize_details renders the stored text."""

    def test_raw_is_verbatim(self):
        assert serialize_details(Raw("hello world")) == "hello world"

    def test_structured_is_json(self):
        assert serialize_details(Structured({"caption": "sunset"})) == '{"caption": "sunset"}'

    def test_non_ascii_kept(self):
        assert serialize_details(Structured({"city": "Kraków"})) == '{"city": "Kraków"}'

    def test_stored_text_parses_back(self):
        """Both variants come back unchanged from their stored text."""
        for details in (Structured({"caption": "sunset"}), Raw("hello world")):
            assert parse_details(serialize_details(details)) == details


class TestFromForm:
    """from_form collects scalar fields."""

    def test_collects_fields(self):
        details = from_form({"caption": "beach", "author": "sam"})
        assert details == Structured({"caption": "beach", "author": "sam"})

    def test_excludes_file_field(self):
        details = from_form({"image": "stray", "caption": "beach"})
        assert details == Structured({"caption": "beach"})

    def test_empty_form(self):
        assert from_form({}) == Structured({})


class TestDetailsValue:
    """details_value exposes the client-facing value."""

    def test_structured(self):
        assert details_value(Structured({"a": 1})) == {"a": 1}

    def test_raw(self):
        assert details_value(Raw("text")) == "text"
