"""
In‑memory appointment store with two synchronized indexes.

``AppointmentStore`` keeps every appointment in two views:

* ``_by_id`` – a dict from identifier to appointment, used for point
  lookups and duplicate detection.
* ``_by_date`` – a dict from date to a *bucket* (list) of appointments
  sharing that date, in insertion order.  ``_dates`` holds the bucket
  keys in ascending order and is maintained with :mod:`bisect`, so
  ordered and range reads walk the buckets without sorting.

Both views reference the same ``Appointment`` objects.  A single lock
guards every operation, so request handlers running on worker threads
never observe one index updated without the other.  Dates that no
longer have appointments are removed from both ``_by_date`` and
``_dates``.
"""

import bisect
import logging
import threading
from datetime import date
from typing import Dict, Iterable, List, Optional

from ..core.exceptions import DuplicateKeyError, NotFoundError, ValidationError
from ..models.appointment import Appointment

logger = logging.getLogger(__name__)


class AppointmentStore:
    """Indexed store for appointments.

    One instance is created per application (see
    ``appointment_api.app.main.create_app``) and shared by all request
    handlers.
    """

    def __init__(self) -> None:
        self._by_id: Dict[str, Appointment] = {}
        self._by_date: Dict[date, List[Appointment]] = {}
        self._dates: List[date] = []
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def add(self, appointment: Appointment) -> None:
        """Insert ``appointment`` into both indexes.

        Raises ``DuplicateKeyError`` if the identifier is already stored;
        the existing appointment is left unchanged in that case.
        """
        with self._lock:
            if appointment.id in self._by_id:
                logger.warning("Rejected duplicate appointment id %s", appointment.id)
                raise DuplicateKeyError(f"Appointment id {appointment.id} already exists")
            self._insert(appointment)
        logger.info("Added appointment %s on %s", appointment.id, appointment.date.isoformat())

    def add_all(self, appointments: Iterable[Appointment]) -> int:
        """Insert several appointments as one operation.

        Every id is checked against the store and against the rest of the
        batch before anything is inserted, so a ``DuplicateKeyError``
        leaves the store unchanged.  Returns the number inserted.
        """
        batch = list(appointments)
        with self._lock:
            seen = set()
            for appointment in batch:
                if appointment.id in self._by_id or appointment.id in seen:
                    logger.warning("Rejected batch with duplicate appointment id %s", appointment.id)
                    raise DuplicateKeyError(f"Appointment id {appointment.id} already exists")
                seen.add(appointment.id)
            for appointment in batch:
                self._insert(appointment)
        logger.info("Added %d appointments", len(batch))
        return len(batch)

    def delete(self, appointment_id: str) -> Appointment:
        """Remove an appointment from both indexes and return it.

        Raises ``NotFoundError`` if no appointment has that identifier.
        """
        with self._lock:
            removed = self._by_id.pop(appointment_id, None)
            if removed is None:
                logger.warning("Delete of unknown appointment id %s", appointment_id)
                raise NotFoundError(f"Appointment id {appointment_id} does not exist")
            bucket = self._by_date[removed.date]
            # Drop this exact object from its bucket.
            bucket[:] = [a for a in bucket if a is not removed]
            if not bucket:
                del self._by_date[removed.date]
                index = bisect.bisect_left(self._dates, removed.date)
                del self._dates[index]
        logger.info("Deleted appointment %s", appointment_id)
        return removed

    def update_description(self, appointment_id: str, description: str) -> Appointment:
        """Change the description of a stored appointment.

        Raises ``NotFoundError`` for an unknown identifier and
        ``ValidationError`` for an invalid description.  Neither index
        changes because ids and dates are immutable.
        """
        with self._lock:
            appointment = self._by_id.get(appointment_id)
            if appointment is None:
                raise NotFoundError(f"Appointment id {appointment_id} does not exist")
            appointment.set_description(description)
        logger.info("Updated description of appointment %s", appointment_id)
        return appointment

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get(self, appointment_id: str) -> Optional[Appointment]:
        """Return the appointment with ``appointment_id`` or ``None``."""
        with self._lock:
            return self._by_id.get(appointment_id)

    def list_all(self) -> List[Appointment]:
        """Every stored appointment, in no particular order."""
        with self._lock:
            return list(self._by_id.values())

    def list_all_sorted_by_date(self) -> List[Appointment]:
        """Every stored appointment, ascending by date.

        Appointments on the same date keep their insertion order.
        """
        with self._lock:
            return self._collect(self._dates)

    def list_upcoming(self, reference_date: date) -> List[Appointment]:
        """Appointments dated on or after ``reference_date``, ascending."""
        with self._lock:
            start = bisect.bisect_left(self._dates, reference_date)
            return self._collect(self._dates[start:])

    def list_previous(self, reference_date: date) -> List[Appointment]:
        """Appointments dated strictly before ``reference_date``.

        Dates are walked newest first; appointments within one date keep
        their insertion order.
        """
        with self._lock:
            end = bisect.bisect_left(self._dates, reference_date)
            return self._collect(reversed(self._dates[:end]))

    def list_range(
        self,
        start: Optional[date],
        end: Optional[date],
        *,
        inclusive: bool = True,
    ) -> List[Appointment]:
        """Appointments dated between ``start`` and ``end``, ascending.

        Both bounds are included by default.  With ``inclusive=False``
        both bounds are excluded.  Raises ``ValidationError`` when a
        bound is missing or ``end`` is before ``start``.
        """
        if start is None or end is None:
            raise ValidationError("start and end dates are required")
        if end < start:
            raise ValidationError("end date must be on or after start date")
        with self._lock:
            if inclusive:
                lo = bisect.bisect_left(self._dates, start)
                hi = bisect.bisect_right(self._dates, end)
            else:
                lo = bisect.bisect_right(self._dates, start)
                hi = bisect.bisect_left(self._dates, end)
            return self._collect(self._dates[lo:hi])

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_id)

    def __contains__(self, appointment_id: object) -> bool:
        with self._lock:
            return appointment_id in self._by_id

    def _insert(self, appointment: Appointment) -> None:
        # Caller holds the lock and has checked the id is free.
        self._by_id[appointment.id] = appointment
        bucket = self._by_date.get(appointment.date)
        if bucket is None:
            bisect.insort(self._dates, appointment.date)
            bucket = self._by_date[appointment.date] = []
        bucket.append(appointment)

    def _collect(self, dates: Iterable[date]) -> List[Appointment]:
        # Caller holds the lock.
        out: List[Appointment] = []
        for day in dates:
            out.extend(self._by_date[day])
        return out
