"""
Attendance Endpoints - Check-in, scan, checkout and record listing
"""
from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.services.attendance_service import AttendanceService
from app.schemas import (
    AttendanceRecord,
    AttendanceRow,
    AttendanceCheckResponse,
    CheckInRequest,
    ScanRequest,
    ScanResponse,
    CheckoutRequest,
    CheckoutAllRequest,
    CheckoutAllResponse,
    BatchCheckoutRequest,
    BatchCheckoutResult,
    DataResponse,
    PaginationResponse
)
from app.api.deps import event_bus, recent_scans, require_admin
from app.core.config import settings
from app.utils.dates import parse_date, resolve_check_in
from atams.encryption import encrypt_response_data

router = APIRouter()
attendance_service = AttendanceService(event_bus, recent_scans)


@router.get(
    "/check",
    response_model=DataResponse[AttendanceCheckResponse],
    status_code=status.HTTP_200_OK
)
async def check_attendance(
    student_id: int = Query(..., description="Student ID"),
    date: Optional[str] = Query(None, description="Date in YYYY-MM-DD format (default: today)"),
    db: Session = Depends(get_db)
):
    """
    Evaluate a student's attendance for a day

    **Response:**
    - state: NO_RECORD, OPEN_PRESENT or CLOSED_REOPENABLE
    - can_mark_present: false only while an open record exists
    - record: most recent record of the day, if any
    """
    target_date = parse_date(date) or datetime.now().date()

    result = attendance_service.check_attendance(db, student_id, target_date)

    response = DataResponse(
        success=True,
        message="Attendance status retrieved successfully",
        data=result
    )

    return encrypt_response_data(response, settings)


@router.get(
    "/present",
    response_model=DataResponse[List[AttendanceRow]],
    status_code=status.HTTP_200_OK
)
async def get_present_students(
    date: Optional[str] = Query(None, description="Check-in date in YYYY-MM-DD format (default: all dates)"),
    db: Session = Depends(get_db)
):
    """
    Students currently checked in (open records), with student details
    """
    rows = attendance_service.get_present(db, parse_date(date))

    response = DataResponse(
        success=True,
        message="Present students retrieved successfully",
        data=rows
    )

    return encrypt_response_data(response, settings)


@router.get(
    "",
    response_model=PaginationResponse[AttendanceRecord],
    status_code=status.HTTP_200_OK
)
async def list_attendance(
    date: Optional[str] = Query(None, description="Filter by date (YYYY-MM-DD)"),
    student_id: Optional[int] = Query(None, description="Filter by student ID"),
    status: Optional[str] = Query(None, pattern="^(open|closed)$", description="Filter by status (open/closed)"),
    limit: int = Query(1000, ge=1, le=5000, description="Maximum records to return"),
    offset: int = Query(0, ge=0, description="Number of records to skip"),
    db: Session = Depends(get_db)
):
    """
    List attendance records, newest first

    **Query Parameters:**
    - date: YYYY-MM-DD
    - student_id: Filter by specific student
    - status: open (still present) or closed (checked out)
    """
    target_date = parse_date(date)

    records = attendance_service.list_records(db, target_date, student_id, status, offset, limit)
    total = attendance_service.count_records(db, target_date, student_id, status)

    response = PaginationResponse(
        success=True,
        message="Attendance records retrieved successfully",
        data=records,
        total=total,
        page=offset // limit + 1,
        size=limit,
        pages=(total + limit - 1) // limit
    )

    return encrypt_response_data(response, settings)


@router.post(
    "",
    response_model=DataResponse[AttendanceRecord],
    status_code=status.HTTP_201_CREATED
)
async def check_in(
    request: CheckInRequest,
    db: Session = Depends(get_db)
):
    """
    Mark a student present

    **Process:**
    1. Lock the student and evaluate the day's records
    2. Reject if an open record exists
    3. Otherwise insert a new open record (re-registration after checkout)

    **Body:**
    - date only: checks in at the current time of day on that date
    - check_in_time only: the date is taken from it

    **Errors:**
    - 400: check_in_time on a different day than date
    - 404: Student not found or inactive
    - 409: Already present (error_code ALREADY_PRESENT)
    """
    target_date, check_in_time = resolve_check_in(request.date, request.check_in_time, datetime.now())
    record = attendance_service.check_in(
        db,
        request.student_id,
        target_date,
        check_in_time,
        request.notes
    )

    return DataResponse(
        success=True,
        message="Attendance marked successfully",
        data=record
    )


@router.post(
    "/scan",
    response_model=DataResponse[ScanResponse],
    status_code=status.HTTP_201_CREATED
)
async def scan_register_number(
    request: ScanRequest,
    db: Session = Depends(get_db)
):
    """
    Mark present by register number

    **Process:**
    1. Exact lookup of the register number
    2. Repeated submissions within the debounce window are rejected
    3. Check-in as for POST /attendance

    **Response:**
    - action: "checked-in" or "re-registered"

    **Errors:**
    - 404: No student with this register number
    - 409: Already present (error_code ALREADY_PRESENT)
    """
    target_date, scanned_at = resolve_check_in(request.date, None, datetime.now())
    result = attendance_service.scan(db, request.register_number, target_date, scanned_at)

    return DataResponse(
        success=True,
        message=result.message,
        data=result
    )


@router.post(
    "/checkout-all",
    response_model=DataResponse[CheckoutAllResponse],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_admin)]
)
async def checkout_all(
    request: CheckoutAllRequest,
    db: Session = Depends(get_db)
):
    """
    Check out every student still present

    **Authentication:**
    - Requires admin bearer token

    **Body:**
    - session: session1 or session2
    - date: restrict to one date (optional, default every open record)

    **Errors:**
    - 400: Invalid session (error_code INVALID_SESSION)
    """
    result = attendance_service.check_out_all(db, request.session, request.date)

    return DataResponse(
        success=True,
        message=f"Checked out {result.checked_out_count} students",
        data=result
    )


@router.post(
    "/batch-checkout",
    response_model=DataResponse[BatchCheckoutResult],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_admin)]
)
async def batch_checkout(
    request: BatchCheckoutRequest,
    db: Session = Depends(get_db)
):
    """
    Check out several records, each independently

    **Authentication:**
    - Requires admin bearer token

    **Response:**
    - results: records checked out
    - failed: id and reason for every record that could not be checked out
    """
    result = attendance_service.batch_check_out(db, request.records)

    return DataResponse(
        success=True,
        message=f"Successfully checked out {result.checked_out_count} records",
        data=result
    )


@router.put(
    "/{record_id}/checkout",
    response_model=DataResponse[AttendanceRecord],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_admin)]
)
async def checkout(
    record_id: int,
    request: CheckoutRequest,
    db: Session = Depends(get_db)
):
    """
    Check out one record and tag its session

    **Authentication:**
    - Requires admin bearer token

    **Errors:**
    - 400: Invalid session (error_code INVALID_SESSION)
    - 404: Record not found or already checked out (error_code RECORD_NOT_FOUND)
    """
    record = attendance_service.check_out(
        db,
        record_id,
        request.check_out_time or datetime.now(),
        request.session,
        request.notes
    )

    return DataResponse(
        success=True,
        message="Student checked out successfully",
        data=record
    )
