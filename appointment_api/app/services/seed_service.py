"""
Start‑up data for the in‑memory store.

The API keeps no durable storage.  To start with a known set of
appointments, point the ``SEED_FILE`` setting at a JSON array of
objects with ``id``, ``date`` (``yyyy-MM-dd``) and ``description``
keys.  Every entry is validated before any is added, and the batch
is inserted in one store operation, so an invalid or duplicate entry
aborts loading and leaves the store unchanged.
"""

import json
import logging
from pathlib import Path

from ..core.exceptions import ValidationError
from ..models.appointment import Appointment, parse_iso_date
from .appointment_store import AppointmentStore

logger = logging.getLogger(__name__)


def load_seed_file(store: AppointmentStore, path: str) -> int:
    """Load appointments from ``path`` into ``store``.

    Returns the number of appointments added.
    """
    seed_path = Path(path)
    with seed_path.open("r", encoding="utf-8") as f:
        entries = json.load(f)
    if not isinstance(entries, list):
        raise ValidationError(f"seed file {seed_path} must contain a JSON array")
    appointments = []
    for position, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ValidationError(f"seed entry {position} must be an object")
        try:
            day = parse_iso_date(entry.get("date"))
            appointments.append(Appointment(entry.get("id"), day, entry.get("description")))
        except ValidationError as exc:
            raise ValidationError(f"seed entry {position}: {exc.message}") from exc
    added = store.add_all(appointments)
    logger.info("Loaded %d appointments from %s", added, seed_path)
    return added
