"""RFC 5545 escaping helpers for property and parameter values."""
from __future__ import annotations

from urllib.parse import quote

from ical_service.services.errors import InvalidValueError

__all__ = [
    "ensure_no_control_characters",
    "escape_parameter_value",
    "escape_property_value",
    "percent_encode_for_uri",
    "unescape_property_value",
]

_PARAMETER_SPECIALS = (":", ";", ",")
_ALLOWED_CONTROLS = {"\t"}
_UNESCAPE_MAP = {"\\": "\\", ";": ";", ",": ",", "n": "\n", "N": "\n"}


def escape_property_value(text: str) -> str:
    """Escape a TEXT property value.

    Backslash, semicolon and comma get a leading backslash; line breaks are
    replaced by the two character sequence ``\\n``.
    """

    return (
        text.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\r\n", "\n")
        .replace("\r", "\n")
        .replace("\n", "\\n")
    )


def unescape_property_value(text: str) -> str:
    """Reverse :func:`escape_property_value`."""

    result = []
    index = 0
    length = len(text)
    while index < length:
        char = text[index]
        if char == "\\" and index + 1 < length and text[index + 1] in _UNESCAPE_MAP:
            result.append(_UNESCAPE_MAP[text[index + 1]])
            index += 2
            continue
        result.append(char)
        index += 1
    return "".join(result)


def escape_parameter_value(text: str) -> str:
    """Quote a parameter value when it holds ``:``, ``;`` or ``,``.

    Parameter values cannot carry a double quote or a control character,
    quoted or not, so such values are rejected.
    """

    ensure_no_control_characters(text, "Parameter values")
    if '"' in text:
        raise InvalidValueError(f"Parameter values cannot contain double quotes: {text!r}")
    if any(char in text for char in _PARAMETER_SPECIALS):
        return f'"{text}"'
    return text


def ensure_no_control_characters(text: str, kind: str) -> None:
    """Reject CR, LF and other control characters that would break a content line."""

    for char in text:
        if (ord(char) < 32 or ord(char) == 127) and char not in _ALLOWED_CONTROLS:
            raise InvalidValueError(f"{kind} cannot contain control characters: {text!r}")


def percent_encode_for_uri(address: str) -> str:
    """Percent-encode an address for use as the path of a ``mailto:`` URI."""

    return quote(address, safe="")
