"""Calendar domain value objects and the event entity."""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from typing import List, Optional, Union

__all__ = [
    "Attachment",
    "BinaryContent",
    "ContentSource",
    "Date",
    "DateTime",
    "EmailAddress",
    "Event",
    "GeographicPosition",
    "Location",
    "MultiDay",
    "Occurrence",
    "Organizer",
    "SingleDay",
    "TimeSpan",
    "Timestamp",
    "UniqueIdentifier",
    "Uri",
]


@dataclass(frozen=True)
class UniqueIdentifier:
    """Opaque token identifying an event."""

    value: str

    @classmethod
    def create(cls) -> "UniqueIdentifier":
        return cls(str(uuid.uuid4()))

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Timestamp:
    """An instant in UTC. Naive datetimes are taken to already be UTC."""

    value: datetime

    def __post_init__(self) -> None:
        if self.value.tzinfo is None:
            object.__setattr__(self, "value", self.value.replace(tzinfo=timezone.utc))
        else:
            object.__setattr__(self, "value", self.value.astimezone(timezone.utc))

    @classmethod
    def now(cls) -> "Timestamp":
        return cls(datetime.now(timezone.utc))


@dataclass(frozen=True)
class Date:
    value: date

    def __post_init__(self) -> None:
        if isinstance(self.value, datetime):
            object.__setattr__(self, "value", self.value.date())


@dataclass(frozen=True)
class DateTime:
    """A date-time that is either floating (local wall clock) or anchored to UTC."""

    value: datetime
    utc: bool = False

    def wall_clock(self) -> datetime:
        """Return the naive date-time that is written to the calendar."""

        if self.utc and self.value.tzinfo is not None:
            return self.value.astimezone(timezone.utc).replace(tzinfo=None)
        return self.value.replace(tzinfo=None)


@dataclass(frozen=True)
class SingleDay:
    day: Date


@dataclass(frozen=True)
class MultiDay:
    first_day: Date
    last_day: Date

    def __post_init__(self) -> None:
        if self.last_day.value < self.first_day.value:
            raise ValueError("The last day of a multi-day event cannot be before the first day.")


@dataclass(frozen=True)
class TimeSpan:
    begin: DateTime
    end: DateTime

    def __post_init__(self) -> None:
        # Mismatched anchors are not comparable; the encoder rejects them.
        if self.begin.utc == self.end.utc and self.end.wall_clock() < self.begin.wall_clock():
            raise ValueError("The end of a time span cannot be before its begin.")


Occurrence = Union[SingleDay, MultiDay, TimeSpan]


@dataclass(frozen=True)
class GeographicPosition:
    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not -90 <= self.latitude <= 90:
            raise ValueError(f"Latitude must be between -90 and 90, got {self.latitude}.")
        if not -180 <= self.longitude <= 180:
            raise ValueError(f"Longitude must be between -180 and 180, got {self.longitude}.")


@dataclass(frozen=True)
class Location:
    """Where an event takes place.

    ``name`` is the free text shown to attendees, ``title`` an optional short
    label used by clients that understand structured locations.
    """

    name: str
    title: Optional[str] = None
    geographic_position: Optional[GeographicPosition] = None

    def with_geographic_position(self, position: GeographicPosition) -> "Location":
        return replace(self, geographic_position=position)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Uri:
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class EmailAddress:
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class BinaryContent:
    data: bytes

    def __post_init__(self) -> None:
        if isinstance(self.data, str):
            object.__setattr__(self, "data", self.data.encode("utf-8"))


ContentSource = Union[Uri, BinaryContent]


@dataclass(frozen=True)
class Attachment:
    content: ContentSource
    mime_type: Optional[str] = None


@dataclass(frozen=True)
class Organizer:
    email_address: EmailAddress
    display_name: Optional[str] = None
    directory_entry: Optional[Uri] = None
    sent_by: Optional[EmailAddress] = None


@dataclass
class Event:
    """Calendar event entity.

    Setters return the event itself so calls can be chained.
    """

    unique_identifier: Optional[UniqueIdentifier] = None
    touched_at: Optional[Timestamp] = None
    last_modified: Optional[Timestamp] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    occurrence: Optional[Occurrence] = None
    location: Optional[Location] = None
    attachments: List[Attachment] = field(default_factory=list)
    organizer: Optional[Organizer] = None
    url: Optional[Uri] = None

    def touch(self, timestamp: Optional[Timestamp] = None) -> "Event":
        self.touched_at = timestamp or Timestamp.now()
        return self

    def set_last_modified(self, timestamp: Timestamp) -> "Event":
        self.last_modified = timestamp
        return self

    def set_summary(self, summary: str) -> "Event":
        self.summary = summary
        return self

    def set_description(self, description: str) -> "Event":
        self.description = description
        return self

    def set_occurrence(self, occurrence: Occurrence) -> "Event":
        self.occurrence = occurrence
        return self

    def set_location(self, location: Location) -> "Event":
        self.location = location
        return self

    def add_attachment(self, attachment: Attachment) -> "Event":
        self.attachments.append(attachment)
        return self

    def set_organizer(self, organizer: Organizer) -> "Event":
        self.organizer = organizer
        return self

    def set_url(self, url: Uri) -> "Event":
        self.url = url
        return self
