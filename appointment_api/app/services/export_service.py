"""
Export of appointment listings.

``ExportService`` picks the dataset for an export *scope* (``all``,
``upcoming``, ``previous`` or ``range``) and renders it as CSV or as a
JSON‑ready list of dicts.  CSV output has a header row and one
appointment per line; any value containing a comma, a quote or a line
break is quoted with internal quotes doubled, so free‑text descriptions
survive a round trip through spreadsheet tools.
"""

import csv
import io
from datetime import date
from typing import List, Optional, Sequence

from ..core.exceptions import ValidationError
from ..models.appointment import Appointment
from .appointment_store import AppointmentStore

CSV_HEADER = ("id", "date", "description")
SCOPES = ("all", "upcoming", "previous", "range")
FORMATS = ("csv", "json")


class ExportService:
    """Select and serialise appointments for download."""

    @classmethod
    def select(
        cls,
        store: AppointmentStore,
        scope: str,
        *,
        reference_date: date,
        start: Optional[date] = None,
        end: Optional[date] = None,
        inclusive: bool = True,
    ) -> List[Appointment]:
        """Return the appointments covered by ``scope``.

        Raises ``ValidationError`` for an unknown scope or for a range
        export without both bounds.
        """
        scope = scope.lower()
        if scope == "all":
            return store.list_all_sorted_by_date()
        if scope == "upcoming":
            return store.list_upcoming(reference_date)
        if scope == "previous":
            return store.list_previous(reference_date)
        if scope == "range":
            if start is None or end is None:
                raise ValidationError("range export requires start and end query parameters")
            return store.list_range(start, end, inclusive=inclusive)
        raise ValidationError(f"unsupported scope {scope!r}; use {'|'.join(SCOPES)}")

    @staticmethod
    def to_csv(appointments: Sequence[Appointment]) -> str:
        buffer = io.StringIO()
        # QUOTE_MINIMAL with the default CRLF terminator quotes values that
        # contain the delimiter, a quote, CR or LF.
        writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL)
        writer.writerow(CSV_HEADER)
        for appointment in appointments:
            writer.writerow((appointment.id, appointment.date.isoformat(), appointment.description))
        return buffer.getvalue()

    @staticmethod
    def to_json(appointments: Sequence[Appointment]) -> List[dict]:
        return [appointment.to_dict() for appointment in appointments]

    @staticmethod
    def filename(scope: str, fmt: str) -> str:
        return f"appointments-{scope.lower()}.{fmt.lower()}"
