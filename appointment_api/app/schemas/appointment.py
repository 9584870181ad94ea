"""
Pydantic models for appointment data.

These schemas define the structure of appointment data exchanged via
the API.  Field rules (lengths, earliest date) are enforced by the
``Appointment`` domain model rather than here, so every rule violation
surfaces through the same ``ValidationError`` and error message.  Dates
are only accepted as ``yyyy-MM-dd`` strings; pydantic's lax parsing of
timestamps and datetime strings is bypassed by ``IsoDate``.
"""

import datetime as dt
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, Field

from ..models.appointment import parse_iso_date

IsoDate = Annotated[dt.date, BeforeValidator(parse_iso_date)]


class AppointmentBase(BaseModel):
    id: str = Field(..., examples=["A12345"])
    date: IsoDate = Field(..., examples=["2025-08-10"])
    description: str = Field(..., examples=["Checkup"])


class AppointmentCreate(AppointmentBase):
    """Schema for creating an appointment."""
    pass


class AppointmentRead(AppointmentBase):
    """Schema for reading an appointment from the API."""

    model_config = {
        "from_attributes": True,
    }


class AppointmentUpdate(BaseModel):
    """Schema for updating an appointment.

    Only the description of an appointment can change.
    """
    description: str = Field(..., examples=["Follow-up visit"])


class StatusResponse(BaseModel):
    """Acknowledgement returned by create and delete."""

    status: str
    id: str
