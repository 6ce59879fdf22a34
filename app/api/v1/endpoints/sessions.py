"""
Sessions Endpoints - Day/session reports and CSV exports
"""
from datetime import date as DateType
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.services import export_service, session_aggregator
from app.services.attendance_service import AttendanceService, validate_session
from app.schemas import DaySessionAggregate, SessionStats, DataResponse
from app.core.config import settings
from app.core.exceptions import RecordNotFoundError
from app.utils.dates import parse_date
from app.api.deps import event_bus, recent_scans
from atams.encryption import encrypt_response_data

router = APIRouter()
attendance_service = AttendanceService(event_bus, recent_scans)


def _load_days(
    db: Session,
    date_from: Optional[DateType],
    date_to: Optional[DateType],
    session: Optional[str] = None,
    search: Optional[str] = None
) -> List[DaySessionAggregate]:
    if session:
        validate_session(session)

    rows = attendance_service.get_rows(db, date_from=date_from, date_to=date_to)
    days = session_aggregator.aggregate(rows)
    return session_aggregator.filter_days(days, session=session, search=search)


def _csv_response(content: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )


@router.get(
    "",
    response_model=DataResponse[List[DaySessionAggregate]],
    status_code=status.HTTP_200_OK
)
async def list_sessions(
    date_from: Optional[str] = Query(None, description="Start date (YYYY-MM-DD)"),
    date_to: Optional[str] = Query(None, description="End date (YYYY-MM-DD)"),
    session: Optional[str] = Query(None, description="session1 or session2"),
    search: Optional[str] = Query(None, description="Student name or register number"),
    db: Session = Depends(get_db)
):
    """
    Completed sessions grouped by day, newest first

    **Response:**
    - session1 / session2: checked-out records with their duration
    - present: records still open on that day
    - session1_count, session2_count, total_students
    """
    days = _load_days(
        db,
        parse_date(date_from, "date_from"),
        parse_date(date_to, "date_to"),
        session,
        search
    )

    response = DataResponse(
        success=True,
        message="Session data retrieved successfully",
        data=days
    )

    return encrypt_response_data(response, settings)


@router.get(
    "/stats",
    response_model=DataResponse[SessionStats],
    status_code=status.HTTP_200_OK
)
async def get_session_stats(
    date_from: Optional[str] = Query(None, description="Start date (YYYY-MM-DD)"),
    date_to: Optional[str] = Query(None, description="End date (YYYY-MM-DD)"),
    session: Optional[str] = Query(None, description="session1 or session2"),
    search: Optional[str] = Query(None, description="Student name or register number"),
    db: Session = Depends(get_db)
):
    """
    Totals over the same filters as GET /sessions
    """
    days = _load_days(
        db,
        parse_date(date_from, "date_from"),
        parse_date(date_to, "date_to"),
        session,
        search
    )

    response = DataResponse(
        success=True,
        message="Session statistics retrieved successfully",
        data=session_aggregator.session_stats(days)
    )

    return encrypt_response_data(response, settings)


@router.get("/export", status_code=status.HTTP_200_OK)
async def export_sessions(
    date_from: Optional[str] = Query(None, description="Start date (YYYY-MM-DD)"),
    date_to: Optional[str] = Query(None, description="End date (YYYY-MM-DD)"),
    session: Optional[str] = Query(None, description="session1 or session2"),
    search: Optional[str] = Query(None, description="Student name or register number"),
    db: Session = Depends(get_db)
):
    """
    Download the filtered session report as CSV

    **Response:**
    - text/csv named session_data_<today>.csv
    """
    days = _load_days(
        db,
        parse_date(date_from, "date_from"),
        parse_date(date_to, "date_to"),
        session,
        search
    )

    return _csv_response(export_service.export_days(days), export_service.export_filename())


@router.get("/{day}/{session}/export", status_code=status.HTTP_200_OK)
async def export_single_session(
    day: str,
    session: str,
    db: Session = Depends(get_db)
):
    """
    Download one session of one day as CSV

    **Errors:**
    - 400: Invalid date or session
    - 404: No completed records in that session
    """
    target_date = parse_date(day)
    validate_session(session)

    days = _load_days(db, target_date, target_date, session)
    entries = []
    for aggregate in days:
        if aggregate.date == target_date:
            entries = aggregate.session1 if session == "session1" else aggregate.session2

    if not entries:
        label = export_service.SESSION_EXPORT_LABELS[session]
        raise RecordNotFoundError(f"No records available for {label} on {target_date}")

    return _csv_response(
        export_service.export_session(target_date, session, entries),
        export_service.session_export_filename(target_date, session)
    )
