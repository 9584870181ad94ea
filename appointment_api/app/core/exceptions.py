"""
Error types raised by the appointment model and store.

All of them describe bad caller input.  The store never retries and
never recovers from them; the HTTP layer maps each type to a client
error status (see ``appointment_api.app.main``).
"""


class AppointmentError(Exception):
    """Base class for appointment errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(AppointmentError, ValueError):
    """A field is missing, malformed or out of range."""


class DuplicateKeyError(AppointmentError):
    """An appointment with the same identifier already exists."""


class NotFoundError(AppointmentError, LookupError):
    """No appointment exists with the requested identifier."""
