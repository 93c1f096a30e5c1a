"""Rendering of typed calendar values into iCalendar text."""
from __future__ import annotations

import base64
from datetime import timedelta
from typing import NamedTuple, Optional, Tuple

from ical_service.models import (
    Attachment,
    BinaryContent,
    Date,
    DateTime,
    EmailAddress,
    GeographicPosition,
    Location,
    MultiDay,
    SingleDay,
    TimeSpan,
    Timestamp,
    Uri,
)
from ical_service.services.errors import InvalidValueError
from ical_service.services.escaping import (
    ensure_no_control_characters,
    escape_parameter_value,
    escape_property_value,
    percent_encode_for_uri,
)

__all__ = [
    "FormattedValue",
    "STRUCTURED_LOCATION_RADIUS",
    "format_attachment",
    "format_binary",
    "format_cal_address",
    "format_date",
    "format_date_time",
    "format_duration",
    "format_geo",
    "format_occurrence",
    "format_structured_location",
    "format_text",
    "format_text_parameter",
    "format_timestamp",
    "format_uri",
    "format_uri_parameter",
    "format_value",
]

DATE_FORMAT = "%Y%m%d"
DATE_TIME_FORMAT = "%Y%m%dT%H%M%S"
UTC_SUFFIX = "Z"
COORDINATE_FORMAT = "{:.6f}"
STRUCTURED_LOCATION_RADIUS = 49

Parameters = Tuple[Tuple[str, str], ...]


class FormattedValue(NamedTuple):
    """A rendered value together with the parameters its type requires."""

    value: str
    parameters: Parameters = ()


def format_date(date: Date) -> str:
    return date.value.strftime(DATE_FORMAT)


def format_date_time(date_time: DateTime) -> str:
    rendered = date_time.wall_clock().strftime(DATE_TIME_FORMAT)
    return rendered + UTC_SUFFIX if date_time.utc else rendered


def format_timestamp(timestamp: Timestamp) -> str:
    return timestamp.value.strftime(DATE_TIME_FORMAT) + UTC_SUFFIX


def format_duration(duration: timedelta) -> str:
    """Render a duration such as ``P1DT2H``, ``-PT15M`` or ``P2W``."""

    sign = "-" if duration < timedelta(0) else ""
    duration = abs(duration)
    days = duration.days
    hours, remainder = divmod(duration.seconds, 3600)
    minutes, seconds = divmod(remainder, 60)

    if days and days % 7 == 0 and not duration.seconds:
        return f"{sign}P{days // 7}W"

    date_part = f"{days}D" if days else ""
    time_part = ""
    if hours:
        time_part += f"{hours}H"
    if minutes:
        time_part += f"{minutes}M"
    if seconds:
        time_part += f"{seconds}S"
    if not date_part and not time_part:
        time_part = "0S"
    return f"{sign}P{date_part}" + (f"T{time_part}" if time_part else "")


def format_binary(content: BinaryContent) -> FormattedValue:
    encoded = base64.b64encode(content.data).decode("ascii")
    return FormattedValue(encoded, (("ENCODING", "BASE64"), ("VALUE", "BINARY")))


def format_uri(uri: Uri) -> str:
    ensure_no_control_characters(uri.value, "URI values")
    return uri.value


def format_uri_parameter(uri: Uri) -> str:
    """Render a URI as a parameter value, quoted only when it holds ``;`` or ``,``."""

    value = format_uri(uri)
    if '"' in value:
        raise InvalidValueError(f"Parameter values cannot contain double quotes: {value!r}")
    if ";" in value or "," in value:
        return f'"{value}"'
    return value


def format_cal_address(address: EmailAddress) -> str:
    return "mailto:" + percent_encode_for_uri(address.value)


def _format_coordinates(position: GeographicPosition, separator: str) -> str:
    return separator.join(
        (
            COORDINATE_FORMAT.format(position.latitude),
            COORDINATE_FORMAT.format(position.longitude),
        )
    )


def format_geo(position: GeographicPosition) -> str:
    return _format_coordinates(position, ";")


def format_text(text: str) -> str:
    return escape_property_value(text)


def format_text_parameter(text: str) -> str:
    return escape_parameter_value(text)


def format_value(value) -> FormattedValue:
    """Render any supported value type.

    Unsupported types raise :class:`InvalidValueError` instead of being
    skipped.
    """

    if isinstance(value, Timestamp):
        return FormattedValue(format_timestamp(value))
    if isinstance(value, DateTime):
        return FormattedValue(format_date_time(value))
    if isinstance(value, Date):
        return FormattedValue(format_date(value))
    if isinstance(value, timedelta):
        return FormattedValue(format_duration(value))
    if isinstance(value, BinaryContent):
        return format_binary(value)
    if isinstance(value, Uri):
        return FormattedValue(format_uri(value))
    if isinstance(value, EmailAddress):
        return FormattedValue(format_cal_address(value))
    if isinstance(value, GeographicPosition):
        return FormattedValue(format_geo(value))
    if isinstance(value, str):
        return FormattedValue(format_text(value))
    raise InvalidValueError(f"Unsupported value type: {type(value).__name__}")


def format_occurrence(occurrence) -> Tuple[FormattedValue, Optional[FormattedValue]]:
    """Return the DTSTART value and, when the occurrence has one, the DTEND value."""

    if isinstance(occurrence, SingleDay):
        return format_value(occurrence.day), None
    if isinstance(occurrence, MultiDay):
        # DTEND is exclusive.
        try:
            end = Date(occurrence.last_day.value + timedelta(days=1))
        except OverflowError as exc:
            raise InvalidValueError(
                "The last day of a multi-day event has no following day."
            ) from exc
        return format_value(occurrence.first_day), format_value(end)
    if isinstance(occurrence, TimeSpan):
        if occurrence.begin.utc != occurrence.end.utc:
            raise InvalidValueError(
                "Begin and end of a time span must both be UTC or both be floating."
            )
        return format_value(occurrence.begin), format_value(occurrence.end)
    raise InvalidValueError(f"Unsupported occurrence type: {type(occurrence).__name__}")


def format_attachment(attachment: Attachment) -> FormattedValue:
    parameters: Parameters = ()
    if attachment.mime_type:
        parameters = (("FMTTYPE", format_text_parameter(attachment.mime_type)),)

    content = attachment.content
    if isinstance(content, (Uri, BinaryContent)):
        formatted = format_value(content)
        return FormattedValue(formatted.value, parameters + formatted.parameters)
    raise InvalidValueError(f"Unsupported attachment content: {type(content).__name__}")


def format_structured_location(location: Location) -> FormattedValue:
    """Render the ``X-APPLE-STRUCTURED-LOCATION`` value for a positioned location."""

    position = location.geographic_position
    if position is None or not location.title:
        raise InvalidValueError("A structured location needs a title and a geographic position.")
    return FormattedValue(
        "geo:" + _format_coordinates(position, ","),
        (
            ("VALUE", "URI"),
            ("X-ADDRESS", format_text_parameter(location.name)),
            ("X-APPLE-RADIUS", str(STRUCTURED_LOCATION_RADIUS)),
            ("X-TITLE", format_text_parameter(location.title)),
        ),
    )
