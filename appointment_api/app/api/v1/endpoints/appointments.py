"""
Appointment endpoints for API v1.

These routes translate HTTP requests into calls on the shared
``AppointmentStore``.  Handlers are plain (non‑async) functions so
FastAPI runs them on its worker thread pool; the store's lock keeps
both indexes consistent across concurrent requests.  Store errors are
turned into responses by the exception handlers registered in
``appointment_api.app.main``.
"""

from datetime import date
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.responses import JSONResponse

from appointment_api.app.api.deps import get_store
from appointment_api.app.core.exceptions import NotFoundError, ValidationError
from appointment_api.app.models.appointment import Appointment
from appointment_api.app.schemas.appointment import (
    AppointmentCreate,
    AppointmentRead,
    AppointmentUpdate,
    IsoDate,
    StatusResponse,
)
from appointment_api.app.services.appointment_store import AppointmentStore
from appointment_api.app.services.export_service import FORMATS, ExportService


router = APIRouter()

# Paths served by the listing routes; an appointment with one of these ids
# could never be fetched through GET /{appointment_id}.
RESERVED_IDS = frozenset({"sorted", "upcoming", "previous", "range", "export"})


def _read(appointments: List[Appointment]) -> List[AppointmentRead]:
    return [AppointmentRead.model_validate(a) for a in appointments]


@router.get("/", response_model=List[AppointmentRead])
def list_appointments(store: AppointmentStore = Depends(get_store)) -> List[AppointmentRead]:
    """Return every appointment in no particular order."""
    return _read(store.list_all())


@router.get("/sorted", response_model=List[AppointmentRead])
def list_sorted(store: AppointmentStore = Depends(get_store)) -> List[AppointmentRead]:
    """Return every appointment, oldest date first."""
    return _read(store.list_all_sorted_by_date())


@router.get("/upcoming", response_model=List[AppointmentRead])
def list_upcoming(
    reference_date: Optional[IsoDate] = Query(None),
    store: AppointmentStore = Depends(get_store),
) -> List[AppointmentRead]:
    """Appointments on or after ``reference_date`` (default: today), soonest first."""
    return _read(store.list_upcoming(reference_date or date.today()))


@router.get("/previous", response_model=List[AppointmentRead])
def list_previous(
    reference_date: Optional[IsoDate] = Query(None),
    store: AppointmentStore = Depends(get_store),
) -> List[AppointmentRead]:
    """Appointments before ``reference_date`` (default: today), newest first."""
    return _read(store.list_previous(reference_date or date.today()))


@router.get("/range", response_model=List[AppointmentRead])
def list_range(
    start: Optional[IsoDate] = Query(None),
    end: Optional[IsoDate] = Query(None),
    bounds: Literal["inclusive", "exclusive"] = Query("inclusive"),
    store: AppointmentStore = Depends(get_store),
) -> List[AppointmentRead]:
    """Appointments between ``start`` and ``end`` (``yyyy-MM-dd``).

    - **bounds** — `inclusive` (default) keeps appointments dated on
      either bound, `exclusive` drops them.
    """
    return _read(store.list_range(start, end, inclusive=bounds == "inclusive"))


@router.get("/export")
def export_appointments(
    fmt: str = Query("csv", alias="format"),
    scope: str = Query("all"),
    start: Optional[IsoDate] = Query(None),
    end: Optional[IsoDate] = Query(None),
    bounds: Literal["inclusive", "exclusive"] = Query("inclusive"),
    store: AppointmentStore = Depends(get_store),
) -> Response:
    """Download appointments as CSV or JSON.

    - **format** — `csv` (default) or `json`.
    - **scope** — `all`, `upcoming`, `previous` or `range`.
    - **start**, **end**, **bounds** — required bounds for the `range` scope.
    """
    fmt = fmt.lower()
    if fmt not in FORMATS:
        raise ValidationError(f"unsupported export format {fmt!r}; use csv or json")
    data = ExportService.select(
        store,
        scope,
        reference_date=date.today(),
        start=start,
        end=end,
        inclusive=bounds == "inclusive",
    )
    headers = {"Content-Disposition": f"attachment; filename={ExportService.filename(scope, fmt)}"}
    if fmt == "csv":
        return Response(content=ExportService.to_csv(data), media_type="text/csv", headers=headers)
    return JSONResponse(content=ExportService.to_json(data), headers=headers)


@router.get("/{appointment_id}", response_model=AppointmentRead)
def get_appointment(appointment_id: str, store: AppointmentStore = Depends(get_store)) -> AppointmentRead:
    """Retrieve a single appointment by its ID.  Raises 404 if not found."""
    appointment = store.get(appointment_id)
    if appointment is None:
        raise NotFoundError(f"Appointment id {appointment_id} does not exist")
    return AppointmentRead.model_validate(appointment)


@router.post("/", response_model=StatusResponse, status_code=status.HTTP_201_CREATED)
def create_appointment(
    payload: AppointmentCreate,
    store: AppointmentStore = Depends(get_store),
) -> StatusResponse:
    """Create a new appointment.

    Field rules are checked by the ``Appointment`` model (400 on
    failure); an existing ID yields 409.  IDs that clash with the
    listing routes (`sorted`, `upcoming`, `previous`, `range`, `export`)
    are rejected with 400.
    """
    appointment = Appointment(payload.id, payload.date, payload.description)
    if appointment.id in RESERVED_IDS:
        raise ValidationError(f"id {appointment.id!r} is reserved by the API")
    store.add(appointment)
    return StatusResponse(status="created", id=appointment.id)


@router.patch("/{appointment_id}", response_model=AppointmentRead)
def update_appointment(
    appointment_id: str,
    updates: AppointmentUpdate,
    store: AppointmentStore = Depends(get_store),
) -> AppointmentRead:
    """Replace the description of an existing appointment."""
    return AppointmentRead.model_validate(store.update_description(appointment_id, updates.description))


@router.delete("/{appointment_id}", response_model=StatusResponse)
def delete_appointment(appointment_id: str, store: AppointmentStore = Depends(get_store)) -> StatusResponse:
    """Delete an appointment by ID.  Raises 404 if it does not exist."""
    store.delete(appointment_id)
    return StatusResponse(status="deleted", id=appointment_id)
