import pytest

from ical_service.services.errors import InvalidValueError
from ical_service.services.escaping import (
    ensure_no_control_characters,
    escape_parameter_value,
    escape_property_value,
    percent_encode_for_uri,
    unescape_property_value,
)


def test_property_value_special_characters_are_escaped():
    assert escape_property_value("a;b,c\\d\ne") == "a\\;b\\,c\\\\d\\ne"


def test_property_value_crlf_becomes_single_escape():
    assert escape_property_value("one\r\ntwo") == "one\\ntwo"


def test_plain_property_value_is_unchanged():
    assert escape_property_value("Hello World") == "Hello World"


@pytest.mark.parametrize(
    "text",
    [
        "semi;colon",
        "comma, separated, list",
        "back\\slash",
        "multi\nline\ntext",
        "\\n is not a newline",
        "mixed;,\\\n end",
    ],
)
def test_unescape_recovers_original_text(text):
    escaped = escape_property_value(text)

    assert "\n" not in escaped
    assert unescape_property_value(escaped) == text


def test_unescape_accepts_uppercase_newline():
    assert unescape_property_value("a\\Nb") == "a\nb"


def test_unescape_keeps_unknown_sequences():
    assert unescape_property_value("a\\xb") == "a\\xb"


def test_parameter_value_without_specials_is_not_quoted():
    assert escape_parameter_value("Test Display Name") == "Test Display Name"


@pytest.mark.parametrize("text", ["Doe, John", "a;b", "http://example.com"])
def test_parameter_value_with_specials_is_quoted(text):
    assert escape_parameter_value(text) == f'"{text}"'


def test_parameter_value_with_double_quote_is_rejected():
    with pytest.raises(InvalidValueError):
        escape_parameter_value('The "Boss"')


def test_percent_encoding_of_addresses():
    assert percent_encode_for_uri("sendby@example.com") == "sendby%40example.com"
    assert percent_encode_for_uri("first last+tag@example.com") == "first%20last%2Btag%40example.com"


def test_property_value_lone_carriage_return_becomes_newline_escape():
    escaped = escape_property_value("a\rb")

    assert escaped == "a\\nb"
    assert "\r" not in escaped


@pytest.mark.parametrize("text", ["Jane\nDoe", "a\rb", "a\r\nb", "nul\x00", "del\x7f"])
def test_parameter_value_with_control_character_is_rejected(text):
    with pytest.raises(InvalidValueError):
        escape_parameter_value(text)


def test_parameter_value_may_contain_tab():
    assert escape_parameter_value("a\tb") == "a\tb"


def test_control_characters_are_reported_with_kind():
    ensure_no_control_characters("plain text", "URI values")

    with pytest.raises(InvalidValueError, match="URI values"):
        ensure_no_control_characters("http://x/a\nb", "URI values")
