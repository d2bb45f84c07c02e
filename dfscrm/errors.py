"""Error taxonomy for the CRM core and its JSON rendering.

Services raise these; main.py registers ``crm_error_handler`` so every
subclass renders as ``{"error": {"code", "message"}}`` with its status code.
"No match found" is a normal result, never one of these.
"""

from __future__ import annotations

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


def build_error_payload(code: str, message: str, details: dict[str, Any] | None = None) -> dict[str, Any]:
    payload = {"error": {"code": code, "message": message}}
    if details is not None:
        payload["error"]["details"] = details
    return payload


class CRMError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500
    code = "internal_error"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details

    @property
    def payload(self) -> dict[str, Any]:
        return build_error_payload(self.code, self.message, self.details)


class ConfigurationError(CRMError):
    """A required external collaborator (the invoicing store) is not configured."""

    status_code = 503
    code = "integration_not_configured"


class NotFoundError(CRMError):
    status_code = 404
    code = "not_found"


class InvalidInputError(CRMError):
    """Malformed input to a public operation, rejected before any work."""

    status_code = 422
    code = "invalid_input"


async def crm_error_handler(_: Request, exc: CRMError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.payload)
