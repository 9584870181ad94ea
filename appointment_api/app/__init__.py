"""
Application package initializer.

This package contains the main entrypoint for the API and its
submodules.  The domain model lives in ``models``, the in‑memory
indexed store and the export helpers in ``services``, request and
response payloads in ``schemas`` and the HTTP routes in
``api/v1/endpoints``.  Versioning is handled by grouping routers under
the ``api/<version>/`` hierarchy.
"""

from .main import app  # noqa: F401
