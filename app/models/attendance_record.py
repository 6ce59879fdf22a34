"""
Attendance Record Model - One row per check-in, closed at checkout
"""
from sqlalchemy import Column, Integer, String, Date, DateTime, Text, ForeignKey, Index, CheckConstraint, text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from atams.db import Base


class AttendanceRecord(Base):
    """Attendance Record model - Table: attendance_records"""
    __tablename__ = "attendance_records"
    __table_args__ = (
        CheckConstraint("session IN ('session1', 'session2')", name="ck_attendance_records_session"),
        Index("ix_attendance_records_student_date", "student_id", "date"),
        # At most one open record per student per day
        Index(
            "uq_attendance_records_open_per_day",
            "student_id",
            "date",
            unique=True,
            postgresql_where=text("check_out_time IS NULL"),
            sqlite_where=text("check_out_time IS NULL"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False)
    date = Column(Date, nullable=False)
    check_in_time = Column(DateTime, nullable=True)
    check_out_time = Column(DateTime, nullable=True)  # NULL = currently present
    session = Column(String(20), nullable=True)  # 'session1' or 'session2', set at checkout
    status = Column(String(20), nullable=False, default="present")  # 'present', 'absent' or 'late'
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    student = relationship("Student", back_populates="attendance_records")
