"""Appointment API client.

This module defines a small client wrapper around the REST API served by
``appointment_api``.  The client uses the ``requests`` library
internally to make HTTP calls.

The client exposes high‑level methods for every appointment route:

* :meth:`list_appointments`, :meth:`list_sorted` – all appointments.
* :meth:`list_upcoming`, :meth:`list_previous` – relative to a reference date.
* :meth:`list_range` – appointments between two dates.
* :meth:`get_appointment`, :meth:`create_appointment`,
  :meth:`update_description`, :meth:`delete_appointment` – single records.
* :meth:`export` – CSV text or JSON list for download.

Every method returns a tuple ``(data, error)``.  On success ``error``
is ``None``; on failure ``data`` is empty and ``error`` is a dictionary
with ``status_code`` and ``message`` keys, taken from the API's
``{"error": ...}`` body when available.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1/appointments"

Error = Dict[str, Any]


class AppointmentClient:
    """Client for interacting with the appointment API."""

    def __init__(
        self,
        *,
        base_url: str,
        timeout: float = 15,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL for the API, e.g. ``http://localhost:8000``.
            timeout: Seconds to wait for each response.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, params: Dict[str, Any] | None = None,
        json_body: Any | None = None, raw: bool = False,
    ) -> Tuple[Optional[Any], Optional[Error]]:
        """Perform an HTTP request to the API.

        Args:
            method: HTTP method (``GET``, ``POST``, ``PATCH``, ``DELETE``).
            path: Path relative to :attr:`base_url`.
            params: Query parameters to include in the request.
            json_body: JSON body to send with the request.
            raw: Return the response text instead of parsed JSON.
        Returns:
            A tuple ``(data, error)``.
        """
        url = f"{self.base_url}{path}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if raw:
                return response.text, None
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                    message = err_json.get("error") or err_json.get("detail") or str(err_json)
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    def _list(self, path: str, params: Dict[str, Any] | None = None) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        data, error = self._request("GET", f"{API_PREFIX}{path}", params=params)
        if error:
            return [], error
        return data if isinstance(data, list) else [], None

    @staticmethod
    def _day(value: date | str | None) -> Optional[str]:
        if value is None:
            return None
        return value.isoformat() if isinstance(value, date) else value

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------
    def list_appointments(self) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        """Retrieve all appointments in no particular order."""
        return self._list("/")

    def list_sorted(self) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        """Retrieve all appointments, oldest date first."""
        return self._list("/sorted")

    def list_upcoming(self, reference_date: date | str | None = None) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        """Appointments on or after ``reference_date`` (server's today when omitted)."""
        params = {"reference_date": self._day(reference_date)} if reference_date else None
        return self._list("/upcoming", params)

    def list_previous(self, reference_date: date | str | None = None) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        """Appointments before ``reference_date``, newest first."""
        params = {"reference_date": self._day(reference_date)} if reference_date else None
        return self._list("/previous", params)

    def list_range(
        self, start: date | str, end: date | str, *, inclusive: bool = True
    ) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        """Appointments between ``start`` and ``end``.

        Args:
            start: First day of the range.
            end: Last day of the range.
            inclusive: Whether appointments dated on either bound are kept.
        """
        params = {
            "start": self._day(start),
            "end": self._day(end),
            "bounds": "inclusive" if inclusive else "exclusive",
        }
        return self._list("/range", params)

    # ------------------------------------------------------------------
    # Single appointment operations
    # ------------------------------------------------------------------
    def get_appointment(self, appointment_id: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Retrieve a single appointment by ID."""
        return self._request("GET", f"{API_PREFIX}/{appointment_id}")

    def create_appointment(
        self, appointment_id: str, appointment_date: date | str, description: str
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Create an appointment.  Returns the API's status payload."""
        payload = {"id": appointment_id, "date": self._day(appointment_date), "description": description}
        return self._request("POST", f"{API_PREFIX}/", json_body=payload)

    def update_description(
        self, appointment_id: str, description: str
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Replace the description of an appointment."""
        return self._request("PATCH", f"{API_PREFIX}/{appointment_id}", json_body={"description": description})

    def delete_appointment(self, appointment_id: str) -> Tuple[bool, Optional[Error]]:
        """Delete an appointment.

        Returns:
            A tuple ``(success, error)``.
        """
        _, error = self._request("DELETE", f"{API_PREFIX}/{appointment_id}")
        if error:
            return False, error
        return True, None

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------
    def export(
        self,
        *,
        fmt: str = "csv",
        scope: str = "all",
        start: date | str | None = None,
        end: date | str | None = None,
        inclusive: bool = True,
    ) -> Tuple[Optional[Any], Optional[Error]]:
        """Download appointments as CSV text or a JSON list.

        Args:
            fmt: ``csv`` or ``json``.
            scope: ``all``, ``upcoming``, ``previous`` or ``range``.
            start: First day of a ``range`` export.
            end: Last day of a ``range`` export.
            inclusive: Whether a ``range`` export keeps appointments dated
                on either bound.
        """
        params: Dict[str, Any] = {
            "format": fmt,
            "scope": scope,
            "bounds": "inclusive" if inclusive else "exclusive",
        }
        if start is not None:
            params["start"] = self._day(start)
        if end is not None:
            params["end"] = self._day(end)
        return self._request("GET", f"{API_PREFIX}/export", params=params, raw=fmt.lower() == "csv")
