"""Domain objects held by the appointment store."""

from .appointment import Appointment  # noqa: F401
