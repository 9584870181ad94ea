"""
Appointment domain model.

An ``Appointment`` holds an identifier, a calendar date and a short
description.  The identifier and date are fixed for the lifetime of
the object; the description may be changed through
:meth:`Appointment.set_description`.  Every field is validated when
the object is built and again on every change, so an instance is never
observable in an invalid state.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any

from ..core.exceptions import ValidationError

MAX_ID_LENGTH = 10
MAX_DESCRIPTION_LENGTH = 50
EARLIEST_DATE = date(2000, 1, 1)

_ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)


def parse_iso_date(value: Any) -> date:
    """Parse a ``yyyy-MM-dd`` calendar date.

    Accepts a ``date`` (but not a ``datetime``) or a string in exactly
    that form.  Timestamps, datetime strings and the compact ISO forms
    ``date.fromisoformat`` also understands are rejected.
    """
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not _ISO_DATE.fullmatch(value):
        raise ValidationError("date must be a calendar date in yyyy-MM-dd format")
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise ValidationError(f"date {value!r} is not a valid calendar date") from exc


def _validate_id(value: Any) -> str:
    if not isinstance(value, str):
        raise ValidationError("id is required and must be a string")
    trimmed = value.strip()
    if not trimmed or len(trimmed) > MAX_ID_LENGTH:
        raise ValidationError(f"id must be 1-{MAX_ID_LENGTH} characters")
    return trimmed


def _validate_date(value: Any) -> date:
    # datetime is a subclass of date but carries a time component
    if value is None or isinstance(value, datetime) or not isinstance(value, date):
        raise ValidationError("date is required and must be a calendar date (yyyy-MM-dd)")
    if value < EARLIEST_DATE:
        raise ValidationError(f"date cannot be before {EARLIEST_DATE.isoformat()}")
    return value


def _validate_description(value: Any) -> str:
    if not isinstance(value, str):
        raise ValidationError("description is required and must be a string")
    trimmed = value.strip()
    if not trimmed or len(trimmed) > MAX_DESCRIPTION_LENGTH:
        raise ValidationError(f"description must be 1-{MAX_DESCRIPTION_LENGTH} characters")
    return trimmed


class Appointment:
    """A single scheduled appointment.

    Parameters
    ----------
    id : str
        Unique identifier, 1–10 characters once surrounding whitespace
        is removed.
    date : datetime.date
        Day of the appointment, no earlier than 2000‑01‑01.
    description : str
        Free text, 1–50 characters once surrounding whitespace is
        removed.

    Raises
    ------
    ValidationError
        If any field breaks its rule.  The message names the field.
    """

    __slots__ = ("_id", "_date", "_description")

    def __init__(self, id: str, date: date, description: str) -> None:
        # Validate everything before assigning anything.
        appointment_id = _validate_id(id)
        appointment_date = _validate_date(date)
        text = _validate_description(description)
        self._id = appointment_id
        self._date = appointment_date
        self._description = text

    @property
    def id(self) -> str:
        return self._id

    @property
    def date(self) -> date:
        return self._date

    @property
    def description(self) -> str:
        return self._description

    def set_description(self, description: str) -> None:
        """Replace the description using the same rules as construction.

        The appointment is left untouched when validation fails.
        """
        self._description = _validate_description(description)

    def to_dict(self) -> dict:
        return {"id": self._id, "date": self._date.isoformat(), "description": self._description}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Appointment):
            return NotImplemented
        return (self._id, self._date, self._description) == (other._id, other._date, other._description)

    def __hash__(self) -> int:
        # id and date never change
        return hash((self._id, self._date))

    def __repr__(self) -> str:
        return f"Appointment(id={self._id!r}, date={self._date.isoformat()}, description={self._description!r})"
