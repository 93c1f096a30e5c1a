"""HTTP endpoints exporting events as iCalendar text."""
from __future__ import annotations

import logging

from flask import Blueprint, Response

from ical_service.config import get_config
from ical_service.routes.utils import error_response, read_json_object
from ical_service.services.calendar import EventFactory, generate_ics_feed
from ical_service.services.errors import EncodingError
from ical_service.services.events import EventPayloadParser, ValidationError

events_bp = Blueprint("events", __name__)

logger = logging.getLogger(__name__)

CALENDAR_MIMETYPE = "text/calendar"


def _parser() -> EventPayloadParser:
    return EventPayloadParser(max_attachment_bytes=get_config().max_attachment_bytes)


@events_bp.post("/events/ics")
def export_calendar():
    data, error = read_json_object()
    if error is not None:
        return error

    try:
        events = _parser().parse_many(data)
        feed = generate_ics_feed(events, product_identifier=get_config().product_identifier)
    except ValidationError as exc:
        logger.info("Rejected calendar export payload: %s", exc.errors)
        return error_response(422, exc.message, exc.errors)
    except EncodingError as exc:
        logger.warning("Calendar export failed: %s", exc)
        return error_response(422, "Encodage iCalendar impossible.", str(exc))

    response = Response(feed, mimetype=CALENDAR_MIMETYPE)
    response.headers["Content-Disposition"] = (
        f'attachment; filename="{get_config().calendar_filename}"'
    )
    return response


@events_bp.post("/events/vevent")
def export_event_component():
    data, error = read_json_object()
    if error is not None:
        return error

    try:
        event = _parser().parse(data)
        component = EventFactory().create_component(event)
    except ValidationError as exc:
        logger.info("Rejected event payload: %s", exc.errors)
        return error_response(422, exc.message, exc.errors)
    except EncodingError as exc:
        logger.warning("Event encoding failed: %s", exc)
        return error_response(422, "Encodage iCalendar impossible.", str(exc))

    return Response(component.render(), mimetype=CALENDAR_MIMETYPE)
