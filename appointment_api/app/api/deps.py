"""
Shared FastAPI dependencies.

The appointment store is created once in ``create_app`` and attached to
``app.state``.  Routes receive it through ``Depends(get_store)`` so
tests can build an application around their own store instance.
"""

from fastapi import Request

from ..services.appointment_store import AppointmentStore


def get_store(request: Request) -> AppointmentStore:
    return request.app.state.store
