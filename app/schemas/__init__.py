from .student import Student, StudentCreate, StudentUpdate, StudentStats
from .attendance import (
    SESSIONS,
    AttendanceState,
    AttendanceRecord,
    AttendanceRow,
    CheckInRequest,
    ScanRequest,
    ScanResponse,
    AttendanceCheckResponse,
    CheckoutRequest,
    CheckoutAllRequest,
    CheckoutAllResponse,
    BatchCheckoutItem,
    BatchCheckoutRequest,
    BatchCheckoutFailure,
    BatchCheckoutResult
)
from .report import SessionEntry, DaySessionAggregate, SessionStats
from .maintenance import DeleteResult, DeleteSessionRequest, DeleteDateRequest, DeleteDateResult
from .auth import LoginRequest, TokenResponse
from .event import EventOut, EventFeed
from .common import DataResponse, PaginationResponse

__all__ = [
    # Student schemas
    "Student",
    "StudentCreate",
    "StudentUpdate",
    "StudentStats",
    # Attendance schemas
    "SESSIONS",
    "AttendanceState",
    "AttendanceRecord",
    "AttendanceRow",
    "CheckInRequest",
    "ScanRequest",
    "ScanResponse",
    "AttendanceCheckResponse",
    "CheckoutRequest",
    "CheckoutAllRequest",
    "CheckoutAllResponse",
    "BatchCheckoutItem",
    "BatchCheckoutRequest",
    "BatchCheckoutFailure",
    "BatchCheckoutResult",
    # Report schemas
    "SessionEntry",
    "DaySessionAggregate",
    "SessionStats",
    # Maintenance schemas
    "DeleteResult",
    "DeleteSessionRequest",
    "DeleteDateRequest",
    "DeleteDateResult",
    # Auth schemas
    "LoginRequest",
    "TokenResponse",
    # Event schemas
    "EventOut",
    "EventFeed",
    # Common schemas
    "DataResponse",
    "PaginationResponse"
]
