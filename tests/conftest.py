import sys
from datetime import datetime
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from ical_service.main import create_app
from ical_service.models import Event, Timestamp, UniqueIdentifier


@pytest.fixture
def make_event():
    """Build an event carrying the identity and stamp every VEVENT needs."""

    def _make_event(uid: str = "event1") -> Event:
        return Event(UniqueIdentifier(uid)).touch(
            Timestamp(datetime(2019, 11, 10, 11, 22, 33))
        )

    return _make_event


@pytest.fixture
def client():
    app = create_app()
    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client
