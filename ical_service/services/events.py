"""Map JSON payloads onto calendar event entities."""
from __future__ import annotations

import base64
import binascii
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from ical_service.models import (
    Attachment,
    BinaryContent,
    Date,
    DateTime,
    EmailAddress,
    Event,
    GeographicPosition,
    Location,
    MultiDay,
    Organizer,
    SingleDay,
    TimeSpan,
    Timestamp,
    UniqueIdentifier,
    Uri,
)

__all__ = ["EventPayloadParser", "ValidationError"]

OCCURRENCE_TYPES = {"single_day", "multi_day", "time_span"}
DATE_MESSAGE = "Format de date invalide, attendu YYYY-MM-DD."
DATE_TIME_MESSAGE = "Format de date/heure invalide, attendu ISO 8601."


class ValidationError(Exception):
    """Raised when incoming payload validation fails."""

    def __init__(self, errors: Dict[str, List[str]], message: str = "Validation échouée."):
        super().__init__(message)
        self.errors = errors
        self.message = message


def _parse_date(value: Any) -> Optional[date]:
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        return None


def _parse_date_time(value: Any) -> Optional[datetime]:
    if not isinstance(value, str) or not value.strip():
        return None
    stripped = value.strip()
    if stripped.endswith("Z"):
        stripped = stripped[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(stripped)
    except ValueError:
        return None


def _optional_text(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    return value.strip() or None


class EventPayloadParser:
    """Validate an event payload and build the matching :class:`Event`.

    Identity and creation time are generated when the payload omits them.
    """

    def __init__(self, *, max_attachment_bytes: int = 1024 * 1024) -> None:
        self.max_attachment_bytes = max_attachment_bytes

    def parse_many(self, data: Any) -> List[Event]:
        batch = isinstance(data, dict) and "events" in data
        if batch:
            items = data["events"]
            if not isinstance(items, list) or not items:
                raise ValidationError({"events": ["Doit être une liste d'événements non vide."]})
        else:
            items = [data]

        events: List[Event] = []
        errors: Dict[str, List[str]] = {}
        for index, item in enumerate(items):
            try:
                events.append(self.parse(item))
            except ValidationError as exc:
                prefix = f"events[{index}]." if batch else ""
                for field, messages in exc.errors.items():
                    errors.setdefault(prefix + field, []).extend(messages)
        if errors:
            raise ValidationError(errors)
        return events

    def parse(self, data: Any) -> Event:
        if not isinstance(data, dict):
            raise ValidationError(
                {"_schema": ["Payload JSON invalide: un objet JSON (type dict) est requis."]}
            )

        errors: Dict[str, List[str]] = {}
        event = Event()

        uid = data.get("uid")
        if uid is None:
            event.unique_identifier = UniqueIdentifier.create()
        elif not isinstance(uid, str) or not uid.strip():
            errors.setdefault("uid", []).append("Doit être une chaîne non vide.")
        else:
            event.unique_identifier = UniqueIdentifier(uid.strip())

        created_at = data.get("created_at")
        if created_at is None:
            event.touch()
        else:
            parsed = _parse_date_time(created_at)
            if parsed is None:
                errors.setdefault("created_at", []).append(DATE_TIME_MESSAGE)
            else:
                event.touch(Timestamp(parsed))

        if data.get("last_modified") is not None:
            parsed = _parse_date_time(data["last_modified"])
            if parsed is None:
                errors.setdefault("last_modified", []).append(DATE_TIME_MESSAGE)
            else:
                event.set_last_modified(Timestamp(parsed))

        for field in ("summary", "description"):
            value = data.get(field)
            if value is None:
                continue
            if not isinstance(value, str):
                errors.setdefault(field, []).append("Doit être une chaîne.")
            elif value:
                setattr(event, field, value)

        url = _optional_text(data.get("url"))
        if url is not None:
            event.set_url(Uri(url))
        elif data.get("url") is not None and not isinstance(data.get("url"), str):
            errors.setdefault("url", []).append("Doit être une chaîne.")

        if data.get("occurrence") is not None:
            event.occurrence = self._parse_occurrence(data["occurrence"], errors)
        if data.get("location") is not None:
            event.location = self._parse_location(data["location"], errors)
        if data.get("attachments") is not None:
            event.attachments = self._parse_attachments(data["attachments"], errors)
        if data.get("organizer") is not None:
            event.organizer = self._parse_organizer(data["organizer"], errors)

        if errors:
            raise ValidationError(errors)
        return event

    # ------------------------------------------------------------------
    # Nested values
    # ------------------------------------------------------------------
    def _parse_occurrence(self, payload: Any, errors: Dict[str, List[str]]):
        if not isinstance(payload, dict) or payload.get("type") not in OCCURRENCE_TYPES:
            errors.setdefault("occurrence.type", []).append(
                "Type inconnu (single_day, multi_day ou time_span)."
            )
            return None

        kind = payload["type"]
        if kind == "single_day":
            day = _parse_date(payload.get("date"))
            if day is None:
                errors.setdefault("occurrence.date", []).append(DATE_MESSAGE)
                return None
            return SingleDay(Date(day))

        if kind == "multi_day":
            first_day = _parse_date(payload.get("first_day"))
            last_day = _parse_date(payload.get("last_day"))
            if first_day is None:
                errors.setdefault("occurrence.first_day", []).append(DATE_MESSAGE)
            if last_day is None:
                errors.setdefault("occurrence.last_day", []).append(DATE_MESSAGE)
            if first_day is None or last_day is None:
                return None
            try:
                return MultiDay(Date(first_day), Date(last_day))
            except ValueError as exc:
                errors.setdefault("occurrence.last_day", []).append(str(exc))
                return None

        begin = _parse_date_time(payload.get("begin"))
        end = _parse_date_time(payload.get("end"))
        if begin is None:
            errors.setdefault("occurrence.begin", []).append(DATE_TIME_MESSAGE)
        if end is None:
            errors.setdefault("occurrence.end", []).append(DATE_TIME_MESSAGE)
        if begin is None or end is None:
            return None

        utc = payload.get("utc")
        if utc is not None and not isinstance(utc, bool):
            errors.setdefault("occurrence.utc", []).append("Doit être un booléen.")
            return None
        begin_utc = utc if utc is not None else begin.tzinfo is not None
        end_utc = utc if utc is not None else end.tzinfo is not None
        try:
            return TimeSpan(DateTime(begin, begin_utc), DateTime(end, end_utc))
        except ValueError as exc:
            errors.setdefault("occurrence.end", []).append(str(exc))
            return None

    def _parse_location(self, payload: Any, errors: Dict[str, List[str]]):
        if isinstance(payload, str):
            payload = {"name": payload}
        if not isinstance(payload, dict):
            errors.setdefault("location", []).append("Doit être un objet ou une chaîne.")
            return None

        name = _optional_text(payload.get("name"))
        if name is None:
            errors.setdefault("location.name", []).append("Champ requis (string non vide).")
            return None
        location = Location(name, _optional_text(payload.get("title")))

        latitude = payload.get("latitude")
        longitude = payload.get("longitude")
        if latitude is None and longitude is None:
            return location
        if not all(
            isinstance(value, (int, float)) and not isinstance(value, bool)
            for value in (latitude, longitude)
        ):
            errors.setdefault("location.position", []).append(
                "Latitude et longitude doivent être numériques."
            )
            return None
        try:
            position = GeographicPosition(float(latitude), float(longitude))
        except ValueError as exc:
            errors.setdefault("location.position", []).append(str(exc))
            return None
        return location.with_geographic_position(position)

    def _parse_attachments(self, payload: Any, errors: Dict[str, List[str]]) -> List[Attachment]:
        if not isinstance(payload, list):
            errors.setdefault("attachments", []).append("Doit être une liste.")
            return []

        attachments: List[Attachment] = []
        for index, item in enumerate(payload):
            key = f"attachments[{index}]"
            if not isinstance(item, dict):
                errors.setdefault(key, []).append("Doit être un objet.")
                continue
            mime_type = _optional_text(item.get("mime_type"))
            uri = _optional_text(item.get("uri"))
            encoded = item.get("content_base64")
            if (uri is None) == (encoded is None):
                errors.setdefault(key, []).append("Fournir soit 'uri' soit 'content_base64'.")
                continue
            if uri is not None:
                attachments.append(Attachment(Uri(uri), mime_type))
                continue
            try:
                data = base64.b64decode(encoded, validate=True)
            except (binascii.Error, TypeError, ValueError):
                errors.setdefault(key, []).append("Contenu base64 invalide.")
                continue
            if len(data) > self.max_attachment_bytes:
                errors.setdefault(key, []).append(
                    f"Pièce jointe trop volumineuse (max {self.max_attachment_bytes} octets)."
                )
                continue
            attachments.append(Attachment(BinaryContent(data), mime_type))
        return attachments

    def _parse_organizer(self, payload: Any, errors: Dict[str, List[str]]):
        if not isinstance(payload, dict):
            errors.setdefault("organizer", []).append("Doit être un objet.")
            return None
        email = _optional_text(payload.get("email"))
        if email is None:
            errors.setdefault("organizer.email", []).append("Champ requis (string non vide).")
            return None
        directory = _optional_text(payload.get("directory"))
        sent_by = _optional_text(payload.get("sent_by"))
        return Organizer(
            EmailAddress(email),
            _optional_text(payload.get("name")),
            Uri(directory) if directory else None,
            EmailAddress(sent_by) if sent_by else None,
        )
