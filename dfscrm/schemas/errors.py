"""
schemas/errors.py — Structured error response model

Matches the body rendered by errors.crm_error_handler.
"""

from pydantic import BaseModel


class ErrorBody(BaseModel):
    code: str
    message: str
    details: dict | None = None


class ErrorResponse(BaseModel):
    error: ErrorBody
