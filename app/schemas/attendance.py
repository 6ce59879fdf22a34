"""
Attendance Schemas for records, check-in and checkout
"""
from enum import Enum
from typing import Optional, Literal, List
from datetime import datetime, date as DateType
from pydantic import BaseModel, ConfigDict, Field


SESSIONS = ("session1", "session2")


class AttendanceState(str, Enum):
    """Outcome of evaluating a student's records for one day"""
    NO_RECORD = "NO_RECORD"
    OPEN_PRESENT = "OPEN_PRESENT"
    CLOSED_REOPENABLE = "CLOSED_REOPENABLE"


class AttendanceRecordBase(BaseModel):
    student_id: int
    date: DateType
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None
    session: Optional[Literal["session1", "session2"]] = None
    status: Literal["present", "absent", "late"] = "present"
    notes: Optional[str] = None


class AttendanceRecordInDB(AttendanceRecordBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: Optional[datetime] = None


class AttendanceRecord(AttendanceRecordInDB):
    pass


class AttendanceRow(AttendanceRecord):
    """Attendance record joined with the student it belongs to"""
    student_name: str
    register_number: str
    department: str


# Request/Response schemas for API endpoints
class CheckInRequest(BaseModel):
    """Request schema for marking a student present"""
    student_id: int
    date: Optional[DateType] = None  # Default: today
    check_in_time: Optional[datetime] = None  # Default: now
    notes: Optional[str] = None


class ScanRequest(BaseModel):
    """Request schema for the register-number scan endpoint"""
    register_number: str
    date: Optional[DateType] = None


class ScanResponse(BaseModel):
    """Response schema for the register-number scan endpoint"""
    action: Literal["checked-in", "re-registered"]
    student_name: str
    register_number: str
    record: AttendanceRecord
    message: str


class AttendanceCheckResponse(BaseModel):
    """Evaluation of a student's records on a date"""
    state: AttendanceState
    exists: bool
    is_checked_out: bool
    can_mark_present: bool
    record: Optional[AttendanceRecord] = None


class CheckoutRequest(BaseModel):
    """Session is validated by the service so it maps to InvalidSessionError"""
    session: str
    check_out_time: Optional[datetime] = None  # Default: now
    notes: Optional[str] = None


class CheckoutAllRequest(BaseModel):
    session: str
    date: Optional[DateType] = None  # Default: every open record


class CheckoutAllResponse(BaseModel):
    checked_out_count: int
    session: str
    date: Optional[DateType] = None
    timestamp: datetime


class BatchCheckoutItem(BaseModel):
    id: int
    session: str
    check_out_time: Optional[datetime] = None
    notes: Optional[str] = None


class BatchCheckoutRequest(BaseModel):
    records: List[BatchCheckoutItem] = Field(min_length=1)


class BatchCheckoutFailure(BaseModel):
    id: int
    reason: str


class BatchCheckoutResult(BaseModel):
    """Per-record outcome; partial success is expected"""
    checked_out_count: int
    results: List[AttendanceRecord]
    failed: List[BatchCheckoutFailure]
