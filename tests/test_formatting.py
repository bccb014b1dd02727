"""Tests for the format option engine."""

from __future__ import annotations

import pytest

from psqlsh.errors import InvalidFormatValueError, UnknownFormatFieldError
from psqlsh.formatting import FIELDS, FormatOptions, quote_ascii


@pytest.fixture
def formats() -> FormatOptions:
    return FormatOptions()


def test_defaults_are_valid_values(formats: FormatOptions) -> None:
    assert formats.get("format") == "aligned"
    assert formats.get("border") == "1"
    assert formats.get("expanded") == "off"
    assert formats.get("title") == ""


def test_unknown_fields_are_rejected(formats: FormatOptions) -> None:
    with pytest.raises(UnknownFormatFieldError):
        formats.get("bogus")
    with pytest.raises(UnknownFormatFieldError):
        formats.set("bogus", "on")
    with pytest.raises(UnknownFormatFieldError):
        formats.toggle("bogus")


@pytest.mark.parametrize("raw, expected", [("on", "on"), ("TRUE", "on"), ("1", "on"), ("no", "off"), ("f", "off")])
def test_boolean_fields_normalize_tokens(formats: FormatOptions, raw: str, expected: str) -> None:
    assert formats.set("tuples_only", raw) == expected
    assert formats.get("tuples_only") == expected


def test_invalid_values_leave_field_untouched(formats: FormatOptions) -> None:
    with pytest.raises(InvalidFormatValueError):
        formats.set("tuples_only", "maybe")
    with pytest.raises(InvalidFormatValueError):
        formats.set("format", "fancy")
    with pytest.raises(InvalidFormatValueError):
        formats.set("border", "3")
    with pytest.raises(InvalidFormatValueError):
        formats.set("columns", "-1")

    assert formats.get("tuples_only") == "off"
    assert formats.get("format") == "aligned"
    assert formats.get("border") == "1"


def test_text_fields_store_raw_value(formats: FormatOptions) -> None:
    assert formats.set("null", "  (null) ") == "  (null) "


def test_expanded_accepts_auto_and_uses_auto_template(formats: FormatOptions) -> None:
    value = formats.set("expanded", "auto")

    assert value == "auto"
    assert formats.status_line("expanded", value) == "Expanded display is used automatically."


def test_boolean_toggle_flips(formats: FormatOptions) -> None:
    assert formats.toggle("tuples_only") == "on"
    assert formats.toggle("tuples_only") == "off"
    formats.set("expanded", "auto")
    assert formats.toggle("expanded") == "off"


def test_format_toggle_uses_discriminator(formats: FormatOptions) -> None:
    assert formats.toggle("format") == "unaligned"
    assert formats.toggle("format") == "aligned"
    assert formats.toggle("format", "html") == "html"
    assert formats.toggle("format", "html") == "aligned"
    formats.set("format", "unaligned")
    assert formats.toggle("format", "html") == "html"


def test_toggle_clears_title_and_keeps_other_fields(formats: FormatOptions) -> None:
    formats.set("title", "Report")

    assert formats.toggle("title") == ""
    assert formats.toggle("fieldsep") == "|"


def test_status_line_shapes(formats: FormatOptions) -> None:
    assert formats.status_line("border", "2") == "Border style is 2."
    assert formats.status_line("title", "") == "Title is unset."
    assert formats.status_line("title", "Report") == 'Title is "Report".'
    assert formats.status_line("tableattr", "") == "Table attributes unset."
    assert formats.status_line("format", "html") == "Output format is html."
    assert formats.status_line("fieldsep", "\t") == 'Field separator is "\\t".'
    assert formats.status_line("null", "") == 'Null display is "".'


def test_listing_is_sorted_and_padded() -> None:
    fields = tuple(field for field in FIELDS if field.name in {"title", "format"})
    formats = FormatOptions(fields)

    assert list(formats.listing()) == ["format aligned", "title  "]


def test_listing_quotes_separator_fields(formats: FormatOptions) -> None:
    formats.set("title", "Q1")
    lines = {line.split(" ", 1)[0]: line for line in formats.listing()}
    width = max(len(field.name) for field in FIELDS)

    assert lines["recordsep"] == "recordsep".ljust(width) + ' "\\n"'
    assert lines["fieldsep"].endswith(' "|"')
    assert lines["null"].endswith(' ""')
    assert lines["title"].endswith(' "Q1"')
    assert lines["tableattr"] == "tableattr".ljust(width) + " "
    assert lines["format"].endswith(" aligned")
    assert list(lines) == sorted(lines)


def test_quote_ascii_escapes_control_and_unicode() -> None:
    assert quote_ascii("a\tb") == '"a\\tb"'
    assert quote_ascii("é") == '"\\u00e9"'
    assert quote_ascii('say "hi"') == '"say \\"hi\\""'
    assert quote_ascii("back\\slash") == '"back\\\\slash"'


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("\x00", '"\\x00"'),
        ("\x07", '"\\a"'),
        ("\x1b[0m", '"\\x1b[0m"'),
        ("\x7f", '"\\x7f"'),
        ("\u2028", '"\\u2028"'),
        ("\U0001f600", '"\\U0001f600"'),
    ],
)
def test_quote_ascii_uses_go_escapes(raw: str, expected: str) -> None:
    assert quote_ascii(raw) == expected


def test_auto_only_switches_template_for_fields_that_have_one(formats: FormatOptions) -> None:
    assert formats.status_line("title", "auto") == 'Title is "auto".'
    assert formats.status_line("fieldsep", "auto") == 'Field separator is "auto".'
    assert formats.status_line("expanded", "auto") == "Expanded display is used automatically."
