"""Build iCalendar components and feeds from event entities."""
from __future__ import annotations

import logging
from typing import Iterable, Iterator, Optional

from ical_service.models import Event, Location, Organizer
from ical_service.services.content import Component, ContentLine
from ical_service.services.errors import MissingRequiredFieldError
from ical_service.services.values import (
    FormattedValue,
    format_attachment,
    format_cal_address,
    format_occurrence,
    format_structured_location,
    format_text_parameter,
    format_uri_parameter,
    format_value,
)

__all__ = ["CalendarFactory", "EventFactory", "generate_ics_feed"]

logger = logging.getLogger(__name__)

DEFAULT_PRODUCT_IDENTIFIER = "-//ical-service//Event Export//EN"


def _line(name: str, formatted: FormattedValue) -> ContentLine:
    return ContentLine(name, formatted.value, formatted.parameters)


class EventFactory:
    """Turn an :class:`Event` into a ``VEVENT`` component.

    Properties are emitted in a fixed order and unset optional fields are
    left out entirely.
    """

    def create_component(self, event: Event) -> Component:
        component = Component("VEVENT", list(self._properties(event)))
        logger.debug(
            "Encoded event %s into %d content lines",
            event.unique_identifier,
            len(component.lines),
        )
        return component

    def create_components(self, events: Iterable[Event]) -> Iterator[Component]:
        for event in events:
            yield self.create_component(event)

    def _properties(self, event: Event) -> Iterator[ContentLine]:
        if event.unique_identifier is None:
            raise MissingRequiredFieldError("UID")
        if event.touched_at is None:
            raise MissingRequiredFieldError("DTSTAMP")

        yield _line("UID", format_value(event.unique_identifier.value))
        yield _line("DTSTAMP", format_value(event.touched_at))
        if event.last_modified is not None:
            yield _line("LAST-MODIFIED", format_value(event.last_modified))

        if event.occurrence is not None:
            start, end = format_occurrence(event.occurrence)
            yield _line("DTSTART", start)
            if end is not None:
                yield _line("DTEND", end)

        if event.summary:
            yield _line("SUMMARY", format_value(event.summary))
        if event.description:
            yield _line("DESCRIPTION", format_value(event.description))

        if event.location is not None:
            yield from self._location_properties(event.location)

        for attachment in event.attachments:
            yield _line("ATTACH", format_attachment(attachment))

        if event.organizer is not None:
            yield self._organizer_property(event.organizer)

        if event.url is not None:
            yield _line("URL", format_value(event.url))

    @staticmethod
    def _location_properties(location: Location) -> Iterator[ContentLine]:
        yield _line("LOCATION", format_value(location.name))
        if location.geographic_position is None:
            return
        yield _line("GEO", format_value(location.geographic_position))
        if location.title:
            yield _line("X-APPLE-STRUCTURED-LOCATION", format_structured_location(location))

    @staticmethod
    def _organizer_property(organizer: Organizer) -> ContentLine:
        parameters = []
        if organizer.display_name:
            parameters.append(("CN", format_text_parameter(organizer.display_name)))
        if organizer.directory_entry is not None:
            parameters.append(("DIR", format_uri_parameter(organizer.directory_entry)))
        if organizer.sent_by is not None:
            parameters.append(("SENT-BY", format_cal_address(organizer.sent_by)))
        return ContentLine(
            "ORGANIZER", format_cal_address(organizer.email_address), tuple(parameters)
        )


class CalendarFactory:
    """Wrap event components into a ``VCALENDAR`` component."""

    def __init__(self, event_factory: Optional[EventFactory] = None) -> None:
        self.event_factory = event_factory or EventFactory()

    def create_calendar(
        self,
        events: Iterable[Event],
        *,
        product_identifier: str = DEFAULT_PRODUCT_IDENTIFIER,
    ) -> Component:
        calendar = Component("VCALENDAR")
        calendar.add(ContentLine("PRODID", format_value(product_identifier).value))
        calendar.add(ContentLine("VERSION", "2.0"))
        for component in self.event_factory.create_components(events):
            calendar.add_component(component)
        return calendar


def generate_ics_feed(
    events: Iterable[Event], *, product_identifier: str = DEFAULT_PRODUCT_IDENTIFIER
) -> str:
    """Render ``events`` as a complete iCalendar document."""

    calendar = CalendarFactory().create_calendar(events, product_identifier=product_identifier)
    return calendar.render()
