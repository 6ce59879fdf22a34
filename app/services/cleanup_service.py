"""
Cleanup Service - Destructive maintenance operations on attendance data
"""
from datetime import date
from sqlalchemy.orm import Session

from app.repositories.attendance_record_repository import AttendanceRecordRepository
from app.services.attendance_service import validate_session
from app.services.event_bus import EventBus, EventType
from app.services.recent_scans import RecentScanCache
from app.schemas.maintenance import DeleteResult, DeleteDateResult
from atams.logging import get_logger
from atams.transaction import transaction

logger = get_logger(__name__)

SESSION_LABELS = {"session1": "Session 1", "session2": "Session 2"}


class CleanupService:
    def __init__(self, event_bus: EventBus, recent_scans: RecentScanCache = None) -> None:
        self.record_repo = AttendanceRecordRepository()
        self.event_bus = event_bus
        self.recent_scans = recent_scans

    def _after_delete(self, scope: str, deleted_count: int, **extra) -> None:
        if self.recent_scans is not None:
            self.recent_scans.clear()

        logger.warning(
            f"Attendance records deleted ({scope})",
            extra={'extra_data': {'scope': scope, 'deleted_count': deleted_count, **extra}}
        )
        self.event_bus.publish(EventType.DELETED, {"scope": scope, "deleted_count": deleted_count, **extra})

    def delete_all(self, db: Session) -> DeleteResult:
        """
        Delete every attendance record

        Returns:
            DeleteResult: Number of records deleted
        """
        with transaction(db):
            deleted = self.record_repo.delete_all(db)

        self._after_delete("all", deleted)

        return DeleteResult(
            deleted_count=deleted,
            message=f"Successfully deleted {deleted} attendance records"
        )

    def delete_session(self, db: Session, target_date: date, session: str) -> DeleteDateResult:
        """
        Delete one session's records for the day they checked in on

        Raises:
            InvalidSessionError: Session is not session1 or session2
        """
        validate_session(session)

        with transaction(db):
            counts = self.record_repo.count_by_session_for_date(db, target_date)
            deleted = self.record_repo.delete_by_check_in_date(db, target_date, session)

        self._after_delete("session", deleted, date=str(target_date), session=session)

        return DeleteDateResult(
            deleted_count=deleted,
            message=f"Successfully deleted {deleted} records from {SESSION_LABELS[session]} on {target_date}",
            date=target_date,
            session1_count=counts["session1"] if session == "session1" else 0,
            session2_count=counts["session2"] if session == "session2" else 0,
            session=session
        )

    def delete_date(self, db: Session, target_date: date) -> DeleteDateResult:
        """Delete every record, both sessions and still-open ones, that checked in on a date"""
        with transaction(db):
            counts = self.record_repo.count_by_session_for_date(db, target_date)
            deleted = self.record_repo.delete_by_check_in_date(db, target_date)

        self._after_delete("date", deleted, date=str(target_date))

        return DeleteDateResult(
            deleted_count=deleted,
            message=f"Successfully deleted {deleted} records from {target_date}",
            date=target_date,
            session1_count=counts["session1"],
            session2_count=counts["session2"]
        )
