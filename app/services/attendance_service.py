"""
Attendance Service - Check-in/checkout state machine

Each student has at most one open record per day. A closed record can be
followed by a new check-in (re-registration), which inserts a fresh row and
leaves the closed one untouched.
"""
from typing import List, Optional, Tuple
from datetime import datetime, date
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from app.repositories.student_repository import StudentRepository
from app.repositories.attendance_record_repository import AttendanceRecordRepository
from app.services.event_bus import EventBus, EventType
from app.services.recent_scans import RecentScanCache
from app.schemas.attendance import (
    SESSIONS,
    AttendanceState,
    AttendanceRecord,
    AttendanceRow,
    AttendanceCheckResponse,
    ScanResponse,
    CheckoutAllResponse,
    BatchCheckoutItem,
    BatchCheckoutFailure,
    BatchCheckoutResult
)
from app.core.exceptions import AlreadyPresentError, RecordNotFoundError, InvalidSessionError
from atams.exceptions import AppException, BadRequestException
from atams.logging import get_logger
from atams.transaction import transaction

logger = get_logger(__name__)


def validate_session(session: Optional[str]) -> str:
    """
    Raises:
        InvalidSessionError: If session is not session1 or session2
    """
    if session not in SESSIONS:
        raise InvalidSessionError(details={"session": session})
    return session


def state_of(records: List) -> AttendanceState:
    """Classify a student's records for one day (any order)"""
    if not records:
        return AttendanceState.NO_RECORD
    if any(r.check_out_time is None for r in records):
        return AttendanceState.OPEN_PRESENT
    return AttendanceState.CLOSED_REOPENABLE


class AttendanceService:
    def __init__(self, event_bus: EventBus, recent_scans: RecentScanCache = None) -> None:
        self.student_repo = StudentRepository()
        self.record_repo = AttendanceRecordRepository()
        self.event_bus = event_bus
        self.recent_scans = recent_scans

    def evaluate(self, db: Session, student_id: int, target_date: date) -> AttendanceState:
        records = self.record_repo.get_day_records(db, student_id, target_date)
        return state_of(records)

    def check_attendance(self, db: Session, student_id: int, target_date: date) -> AttendanceCheckResponse:
        """Evaluation plus the most recent record, for the marking UI"""
        records = self.record_repo.get_day_records(db, student_id, target_date)
        state = state_of(records)
        latest = records[0] if records else None

        return AttendanceCheckResponse(
            state=state,
            exists=latest is not None,
            is_checked_out=state == AttendanceState.CLOSED_REOPENABLE,
            can_mark_present=state != AttendanceState.OPEN_PRESENT,
            record=AttendanceRecord.model_validate(latest) if latest else None
        )

    def check_in(
        self,
        db: Session,
        student_id: int,
        target_date: date,
        timestamp: datetime,
        notes: str = None
    ) -> AttendanceRecord:
        record, _ = self._mark_present(db, student_id, target_date, timestamp, notes)
        return record

    def _mark_present(
        self,
        db: Session,
        student_id: int,
        target_date: date,
        timestamp: datetime,
        notes: str = None
    ) -> Tuple[AttendanceRecord, bool]:
        """
        Mark a student present for a day

        The student row is locked for the duration of the transaction so
        concurrent check-ins for one student run one after the other; the
        partial unique index on open records catches anything that slips by.

        Raises:
            RecordNotFoundError: Unknown or inactive student
            BadRequestException: Check-in time is not on the target date
            AlreadyPresentError: Student already has an open record that day
        """
        if timestamp.date() != target_date:
            raise BadRequestException(
                "check_in_time must fall on date",
                details={"date": str(target_date), "check_in_time": timestamp.isoformat()}
            )

        try:
            with transaction(db):
                student = self.student_repo.get_for_update(db, student_id)
                if not student or not student.is_active:
                    raise RecordNotFoundError("Student not found", details={"student_id": student_id})

                state = self.evaluate(db, student_id, target_date)
                if state == AttendanceState.OPEN_PRESENT:
                    raise AlreadyPresentError(details={"student_id": student_id, "date": str(target_date)})

                record = self.record_repo.create_open_record(db, {
                    "student_id": student_id,
                    "date": target_date,
                    "check_in_time": timestamp,
                    "check_out_time": None,
                    "status": "present",
                    "notes": notes
                })
                register_number = student.register_number
                student_name = student.name
        except IntegrityError:
            logger.info(
                "Check-in rejected by open-record index",
                extra={'extra_data': {'student_id': student_id, 'date': str(target_date)}}
            )
            raise AlreadyPresentError(details={"student_id": student_id, "date": str(target_date)})
        except AlreadyPresentError:
            logger.info(
                "Check-in rejected: already present",
                extra={'extra_data': {'student_id': student_id, 'date': str(target_date)}}
            )
            raise

        db.refresh(record)
        re_registered = state == AttendanceState.CLOSED_REOPENABLE

        logger.info(
            "Student checked in",
            extra={
                'extra_data': {
                    'student_id': student_id,
                    'record_id': record.id,
                    'date': str(target_date),
                    're_registered': re_registered
                }
            }
        )
        self.event_bus.publish(EventType.CHECKED_IN, {
            "student_id": student_id,
            "register_number": register_number,
            "student_name": student_name,
            "record_id": record.id,
            "timestamp": timestamp.isoformat(),
            "re_registered": re_registered
        })

        return AttendanceRecord.model_validate(record), re_registered

    def scan(
        self,
        db: Session,
        register_number: str,
        target_date: date,
        timestamp: datetime
    ) -> ScanResponse:
        """
        Mark present by register number, as typed or scanned at the desk

        Raises:
            RecordNotFoundError: No student with this register number
            AlreadyPresentError: Duplicate submission or already present
        """
        register_number = register_number.strip()
        student = self.student_repo.get_by_register_number(db, register_number)
        if not student:
            raise RecordNotFoundError(
                "Student not found with this register number",
                details={"register_number": register_number}
            )

        if self.recent_scans is not None and self.recent_scans.check_and_mark(register_number, target_date):
            logger.info(
                "Scan rejected: repeated within debounce window",
                extra={'extra_data': {'register_number': register_number, 'date': str(target_date)}}
            )
            raise AlreadyPresentError(details={"register_number": register_number, "date": str(target_date)})

        try:
            record, re_registered = self._mark_present(db, student.id, target_date, timestamp)
        except AlreadyPresentError:
            raise
        except AppException:
            # Let a corrected retry through straight away
            if self.recent_scans is not None:
                self.recent_scans.forget(register_number, target_date)
            raise

        return ScanResponse(
            action="re-registered" if re_registered else "checked-in",
            student_name=student.name,
            register_number=student.register_number,
            record=record,
            message=(
                f"{student.name} re-registered at {timestamp.strftime('%H:%M')}"
                if re_registered
                else f"{student.name} marked present at {timestamp.strftime('%H:%M')}"
            )
        )

    def check_out(
        self,
        db: Session,
        record_id: int,
        timestamp: datetime,
        session: str,
        notes: str = None
    ) -> AttendanceRecord:
        """
        Close an open record and tag it with a session

        Raises:
            InvalidSessionError: Session is not session1 or session2
            RecordNotFoundError: No open record with this id
        """
        validate_session(session)

        with transaction(db):
            affected = self.record_repo.close_open_record(db, record_id, timestamp, session, notes)
            if affected == 0:
                raise RecordNotFoundError(
                    "Attendance record not found or already checked out",
                    details={"record_id": record_id}
                )

        record = self.record_repo.get(db, record_id)
        if self.recent_scans is not None:
            # A checked-out student may re-register without waiting out the window
            self.recent_scans.forget(record.student.register_number, record.date)

        logger.info(
            "Student checked out",
            extra={'extra_data': {'record_id': record_id, 'student_id': record.student_id, 'session': session}}
        )
        self.event_bus.publish(EventType.CHECKED_OUT, {
            "record_id": record_id,
            "student_id": record.student_id,
            "session": session,
            "timestamp": timestamp.isoformat()
        })

        return AttendanceRecord.model_validate(record)

    def check_out_all(
        self,
        db: Session,
        session: str,
        target_date: date = None,
        timestamp: datetime = None
    ) -> CheckoutAllResponse:
        """
        Close every open record (optionally one date) with one timestamp

        Raises:
            InvalidSessionError: Session is not session1 or session2
        """
        validate_session(session)
        timestamp = timestamp or datetime.now()

        with transaction(db):
            count = self.record_repo.close_all_open(db, timestamp, session, target_date)

        if self.recent_scans is not None:
            self.recent_scans.clear()

        logger.info(
            "Bulk checkout",
            extra={
                'extra_data': {
                    'checked_out_count': count,
                    'session': session,
                    'date': str(target_date) if target_date else None
                }
            }
        )
        self.event_bus.publish(EventType.CHECKED_OUT_ALL, {
            "checked_out_count": count,
            "session": session,
            "date": str(target_date) if target_date else None,
            "timestamp": timestamp.isoformat()
        })

        return CheckoutAllResponse(
            checked_out_count=count,
            session=session,
            date=target_date,
            timestamp=timestamp
        )

    def batch_check_out(self, db: Session, items: List[BatchCheckoutItem]) -> BatchCheckoutResult:
        """
        Check out several records independently

        A failing item is reported and does not stop the rest.
        """
        results = []
        failed = []

        for item in items:
            try:
                record = self.check_out(
                    db,
                    item.id,
                    item.check_out_time or datetime.now(),
                    item.session,
                    item.notes
                )
            except AppException as e:
                failed.append(BatchCheckoutFailure(id=item.id, reason=e.message))
                continue
            results.append(record)

        logger.info(
            "Batch checkout",
            extra={'extra_data': {'requested': len(items), 'checked_out': len(results), 'failed': len(failed)}}
        )

        return BatchCheckoutResult(
            checked_out_count=len(results),
            results=results,
            failed=failed
        )

    def list_records(
        self,
        db: Session,
        target_date: date = None,
        student_id: int = None,
        status: str = None,
        skip: int = 0,
        limit: int = 1000
    ) -> List[AttendanceRecord]:
        records = self.record_repo.get_records_with_filters(db, target_date, student_id, status, skip, limit)
        return [AttendanceRecord.model_validate(r) for r in records]

    def count_records(
        self,
        db: Session,
        target_date: date = None,
        student_id: int = None,
        status: str = None
    ) -> int:
        return self.record_repo.count_records_with_filters(db, target_date, student_id, status)

    def get_present(self, db: Session, target_date: date = None) -> List[AttendanceRow]:
        """Open records joined with their student, optionally one date"""
        rows = self.record_repo.get_rows_with_students(
            db, date_from=target_date, date_to=target_date, open_only=True
        )
        return [AttendanceRow.model_validate(r) for r in rows]

    def get_rows(self, db: Session, date_from: date = None, date_to: date = None) -> List[AttendanceRow]:
        rows = self.record_repo.get_rows_with_students(db, date_from=date_from, date_to=date_to)
        return [AttendanceRow.model_validate(r) for r in rows]
