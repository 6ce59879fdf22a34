"""
Attendance error taxonomy

Every error carries details.error_code so clients can tell them apart
without parsing the message.
"""
from typing import Optional, Dict, Any

from fastapi import Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError, TimeoutError as PoolTimeoutError

from atams.exceptions import (
    BadRequestException,
    ConflictException,
    NotFoundException,
    ServiceUnavailableException,
)
from atams.logging import get_logger

logger = get_logger(__name__)


def _with_code(code: str, details: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    merged = dict(details or {})
    merged["error_code"] = code
    return merged


class AlreadyPresentError(ConflictException):
    """409 - Student already has an open attendance record for the day"""

    def __init__(self, message: str = "Already Present", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, _with_code("ALREADY_PRESENT", details))


class RecordNotFoundError(NotFoundException):
    """404 - Target record does not exist or is already closed"""

    def __init__(self, message: str = "Record not found", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, _with_code("RECORD_NOT_FOUND", details))


class DuplicateKeyError(ConflictException):
    """409 - Unique key (register number) already taken"""

    def __init__(self, message: str = "Already exists", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, _with_code("DUPLICATE_KEY", details))


class InvalidSessionError(BadRequestException):
    """400 - Session tag is not session1 or session2"""

    def __init__(self, message: str = "Invalid session. Must be 'session1' or 'session2'", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, _with_code("INVALID_SESSION", details))


class StoreUnavailableError(ServiceUnavailableException):
    """503 - Database connection failed or timed out"""

    def __init__(self, message: str = "Database unavailable", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, _with_code("STORE_UNAVAILABLE", details))


async def store_unavailable_handler(request: Request, exc: Exception):
    """Map connection and pool timeout failures to a 503 the UI can retry on"""
    logger.error(
        f"Store unavailable: {str(exc)}",
        extra={
            'extra_data': {
                'error_type': type(exc).__name__,
                'path': request.url.path,
                'method': request.method
            }
        }
    )
    error = StoreUnavailableError()
    return JSONResponse(
        status_code=error.status_code,
        content={
            "success": False,
            "message": error.message,
            "details": error.details
        }
    )


def setup_store_exception_handlers(app) -> None:
    """Register after atams setup_exception_handlers; more specific classes win"""
    app.add_exception_handler(OperationalError, store_unavailable_handler)
    app.add_exception_handler(PoolTimeoutError, store_unavailable_handler)
