from datetime import date

import pytest
from fastapi.testclient import TestClient

from appointment_api.app.main import create_app
from appointment_api.app.models.appointment import Appointment
from appointment_api.app.services.appointment_store import AppointmentStore


def make(appointment_id: str, day: str, description: str = "visit") -> Appointment:
    return Appointment(appointment_id, date.fromisoformat(day), description)


@pytest.fixture
def store():
    return AppointmentStore()


@pytest.fixture
def sample_store(store):
    """Store holding A (2025-01-10), B (2025-01-05) and C (2025-01-10) in that order."""
    store.add(make("A", "2025-01-10", "x"))
    store.add(make("B", "2025-01-05", "y"))
    store.add(make("C", "2025-01-10", "z"))
    return store


@pytest.fixture
def client(sample_store):
    app = create_app(store=sample_store, seed_file="")
    return TestClient(app)
