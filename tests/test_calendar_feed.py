from datetime import date

from ical_service.models import Date, SingleDay
from ical_service.services.calendar import CalendarFactory, generate_ics_feed
from ical_service.services.content import LINE_SEPARATOR


def test_feed_wraps_events_in_calendar(make_event):
    first = make_event("first").set_summary("First")
    second = make_event("second").set_occurrence(SingleDay(Date(date(2030, 12, 24))))

    feed = generate_ics_feed([first, second], product_identifier="-//Test//Feed//EN")

    assert feed == LINE_SEPARATOR.join(
        [
            "BEGIN:VCALENDAR",
            "PRODID:-//Test//Feed//EN",
            "VERSION:2.0",
            "BEGIN:VEVENT",
            "UID:first",
            "DTSTAMP:20191110T112233Z",
            "SUMMARY:First",
            "END:VEVENT",
            "BEGIN:VEVENT",
            "UID:second",
            "DTSTAMP:20191110T112233Z",
            "DTSTART:20301224",
            "END:VEVENT",
            "END:VCALENDAR",
            "",
        ]
    )


def test_empty_calendar_has_header_only():
    calendar = CalendarFactory().create_calendar([])

    assert [line.name for line in calendar.lines] == ["PRODID", "VERSION"]
    assert calendar.components == []
