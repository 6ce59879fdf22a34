"""
Maintenance Endpoints - Destructive attendance cleanup operations
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.services.cleanup_service import CleanupService
from app.schemas import (
    DataResponse,
    DeleteResult,
    DeleteSessionRequest,
    DeleteDateRequest,
    DeleteDateResult
)
from app.api.deps import event_bus, recent_scans, require_admin

router = APIRouter()
cleanup_service = CleanupService(event_bus, recent_scans)


@router.delete(
    "/all",
    response_model=DataResponse[DeleteResult],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_admin)]
)
async def delete_all_attendance(db: Session = Depends(get_db)):
    """
    Delete every attendance record

    **Authentication:**
    - Requires admin bearer token

    **Use case:**
    - Reset before a new term; students are kept
    """
    result = cleanup_service.delete_all(db)

    return DataResponse(
        success=True,
        message=result.message,
        data=result
    )


@router.delete(
    "/session",
    response_model=DataResponse[DeleteDateResult],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_admin)]
)
async def delete_session_attendance(
    request: DeleteSessionRequest,
    db: Session = Depends(get_db)
):
    """
    Delete one session's records for a date

    **Authentication:**
    - Requires admin bearer token

    **Body:**
    - date: check-in date (YYYY-MM-DD)
    - session: session1 or session2

    **Errors:**
    - 400: Invalid session (error_code INVALID_SESSION)
    """
    result = cleanup_service.delete_session(db, request.date, request.session)

    return DataResponse(
        success=True,
        message=result.message,
        data=result
    )


@router.delete(
    "/date",
    response_model=DataResponse[DeleteDateResult],
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_admin)]
)
async def delete_date_attendance(
    request: DeleteDateRequest,
    db: Session = Depends(get_db)
):
    """
    Delete both sessions' records for a date

    **Authentication:**
    - Requires admin bearer token

    **Response:**
    - deleted_count plus the per-session counts that were removed
    """
    result = cleanup_service.delete_date(db, request.date)

    return DataResponse(
        success=True,
        message=result.message,
        data=result
    )
