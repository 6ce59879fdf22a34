"""
Attendance Record Repository - Data access layer for attendance records

Write methods that take part in a larger operation only flush; the calling
service decides when to commit.
"""
from typing import Optional, List, Dict, Any
from datetime import datetime, date
from sqlalchemy.orm import Session
from sqlalchemy import Date, and_, func

from atams.db import BaseRepository
from app.models.attendance_record import AttendanceRecord
from app.models.student import Student


def _check_in_date():
    """Calendar day of check_in_time, typed so date binds work on every backend"""
    return func.date(AttendanceRecord.check_in_time, type_=Date)


class AttendanceRecordRepository(BaseRepository[AttendanceRecord]):
    def __init__(self):
        super().__init__(AttendanceRecord)

    def get_day_records(self, db: Session, student_id: int, target_date: date) -> List[AttendanceRecord]:
        """All records for a student on a date, most recent first, using ORM"""
        return db.query(AttendanceRecord).filter(
            and_(
                AttendanceRecord.student_id == student_id,
                AttendanceRecord.date == target_date
            )
        ).order_by(AttendanceRecord.check_in_time.desc(), AttendanceRecord.id.desc()).all()

    def create_open_record(self, db: Session, record_data: dict) -> AttendanceRecord:
        """Stage a new open record; the partial unique index fires on flush"""
        db_record = AttendanceRecord(**record_data)
        db.add(db_record)
        db.flush()
        return db_record

    def close_open_record(
        self,
        db: Session,
        record_id: int,
        check_out_time: datetime,
        session: str,
        notes: Optional[str] = None
    ) -> int:
        """Close a record only if it is still open; returns rows affected"""
        values = {
            AttendanceRecord.check_out_time: check_out_time,
            AttendanceRecord.session: session,
        }
        if notes is not None:
            values[AttendanceRecord.notes] = notes

        return db.query(AttendanceRecord).filter(
            and_(
                AttendanceRecord.id == record_id,
                AttendanceRecord.check_out_time.is_(None)
            )
        ).update(values, synchronize_session=False)

    def close_all_open(self, db: Session, check_out_time: datetime, session: str, target_date: date = None) -> int:
        """Set-based checkout of every open record (optionally one date); returns rows affected"""
        query = db.query(AttendanceRecord).filter(AttendanceRecord.check_out_time.is_(None))

        if target_date:
            query = query.filter(AttendanceRecord.date == target_date)

        return query.update(
            {
                AttendanceRecord.check_out_time: check_out_time,
                AttendanceRecord.session: session,
            },
            synchronize_session=False
        )

    def get_records_with_filters(
        self,
        db: Session,
        target_date: date = None,
        student_id: int = None,
        status: str = None,
        skip: int = 0,
        limit: int = 1000
    ) -> List[AttendanceRecord]:
        """Get records with various filters using ORM, newest first"""
        query = db.query(AttendanceRecord)

        if target_date:
            query = query.filter(AttendanceRecord.date == target_date)
        if student_id:
            query = query.filter(AttendanceRecord.student_id == student_id)
        if status == "open":
            query = query.filter(AttendanceRecord.check_out_time.is_(None))
        elif status == "closed":
            query = query.filter(AttendanceRecord.check_out_time.is_not(None))

        return query.order_by(
            AttendanceRecord.date.desc(),
            AttendanceRecord.check_in_time.desc(),
            AttendanceRecord.id.desc()
        ).offset(skip).limit(limit).all()

    def count_records_with_filters(
        self,
        db: Session,
        target_date: date = None,
        student_id: int = None,
        status: str = None
    ) -> int:
        """Count records with filters using native SQL"""
        conditions = []
        params = {}

        if target_date:
            conditions.append("date = :target_date")
            params["target_date"] = target_date
        if student_id:
            conditions.append("student_id = :student_id")
            params["student_id"] = student_id
        if status == "open":
            conditions.append("check_out_time IS NULL")
        elif status == "closed":
            conditions.append("check_out_time IS NOT NULL")

        where_clause = " AND ".join(conditions) if conditions else "1=1"

        query = f"""
            SELECT COUNT(*)
            FROM attendance_records
            WHERE {where_clause}
        """

        return self.execute_raw_sql_scalar(db, query, params)

    def get_rows_with_students(
        self,
        db: Session,
        date_from: date = None,
        date_to: date = None,
        open_only: bool = False
    ) -> List[Dict[str, Any]]:
        """Records joined with their student, keyed for AttendanceRow, using ORM"""
        query = db.query(AttendanceRecord, Student).join(Student, AttendanceRecord.student_id == Student.id)

        if date_from:
            query = query.filter(_check_in_date() >= date_from)
        if date_to:
            query = query.filter(_check_in_date() <= date_to)
        if open_only:
            query = query.filter(AttendanceRecord.check_out_time.is_(None))

        rows = []
        for record, student in query.order_by(AttendanceRecord.check_in_time.desc()).all():
            rows.append({
                "id": record.id,
                "student_id": record.student_id,
                "date": record.date,
                "check_in_time": record.check_in_time,
                "check_out_time": record.check_out_time,
                "session": record.session,
                "status": record.status,
                "notes": record.notes,
                "created_at": record.created_at,
                "student_name": student.name,
                "register_number": student.register_number,
                "department": student.department,
            })
        return rows

    def count_by_session_for_date(self, db: Session, target_date: date) -> Dict[str, int]:
        """Per-session counts for records that checked in on a date using ORM"""
        rows = db.query(AttendanceRecord.session, func.count(AttendanceRecord.id)).filter(
            _check_in_date() == target_date
        ).group_by(AttendanceRecord.session).all()

        counts = {"session1": 0, "session2": 0}
        for session, count in rows:
            if session in counts:
                counts[session] = count
        return counts

    def delete_by_check_in_date(self, db: Session, target_date: date, session: str = None) -> int:
        """Delete records that checked in on a date, optionally one session only"""
        query = db.query(AttendanceRecord).filter(_check_in_date() == target_date)

        if session:
            query = query.filter(AttendanceRecord.session == session)

        return query.delete(synchronize_session=False)

    def delete_all(self, db: Session) -> int:
        """Delete every attendance record; returns rows affected"""
        return db.query(AttendanceRecord).delete(synchronize_session=False)
