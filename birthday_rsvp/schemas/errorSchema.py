from typing import List
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error body carried in the ``detail`` key."""

    error: str
    code: str
    details: List[str] = []


class ErrorCodes:
    """Error code constants."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    DUPLICATE_RSVP = "DUPLICATE_RSVP"
    INTERNAL_ERROR = "INTERNAL_ERROR"


def error_detail(error: str, code: str, details: List[str] = None) -> dict:
    return ErrorResponse(error=error, code=code, details=details or []).model_dump()
