"""
Main entrypoint for the Appointment API.

This module assembles the FastAPI application, sets up logging,
creates the appointment store and includes versioned routers.  The
``create_app`` function builds and configures the app, which is then
instantiated at module import time as ``app``.  Importing the app here
makes it easy to run with uvicorn or another ASGI server, e.g.::

    uvicorn appointment_api.app.main:app --reload

The application title and version are provided via ``Settings`` from
``core.config``.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .api.v1.router import router as v1_router
from .core.config import settings
from .core.exceptions import DuplicateKeyError, NotFoundError, ValidationError
from .core.logging_config import setup_logging
from .services.appointment_store import AppointmentStore
from .services.seed_service import load_seed_file

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message or "Invalid request."})


def register_exception_handlers(app: FastAPI) -> None:
    """Map store and request errors to JSON error responses.

    ``ValidationError`` and malformed requests become 400,
    ``DuplicateKeyError`` 409, ``NotFoundError`` 404 and anything else
    500 with a generic message.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation(request: Request, exc: ValidationError) -> JSONResponse:
        return _error(status.HTTP_400_BAD_REQUEST, exc.message)

    @app.exception_handler(DuplicateKeyError)
    async def handle_duplicate(request: Request, exc: DuplicateKeyError) -> JSONResponse:
        return _error(status.HTTP_409_CONFLICT, exc.message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return _error(status.HTTP_404_NOT_FOUND, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_bad_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        # Collect field errors into one readable message
        parts = []
        for err in exc.errors():
            field = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path"))
            parts.append(f"{field}: {err.get('msg')}" if field else str(err.get("msg")))
        message = "; ".join(dict.fromkeys(parts)) or "Validation failed."
        return _error(status.HTTP_400_BAD_REQUEST, message)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Unexpected server error. Please try again.")


def create_app(store: Optional[AppointmentStore] = None, seed_file: Optional[str] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    store : Optional[AppointmentStore]
        Store shared by all request handlers.  A new empty store is
        created when omitted.
    seed_file : Optional[str]
        JSON file of appointments to load into the store.  Defaults to
        ``settings.seed_file``.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    setup_logging(settings)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)

    app.state.store = store if store is not None else AppointmentStore()
    seed_file = seed_file if seed_file is not None else settings.seed_file
    if seed_file:
        load_seed_file(app.state.store, seed_file)

    register_exception_handlers(app)
    app.include_router(v1_router, prefix="/api/v1")

    @app.get("/", include_in_schema=False)
    async def index() -> dict:
        return {
            "name": settings.project_name,
            "version": settings.api_version,
            "appointments": "/api/v1/appointments/",
            "docs": "/docs",
        }

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
