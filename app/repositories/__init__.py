from .student_repository import StudentRepository
from .attendance_record_repository import AttendanceRecordRepository

__all__ = [
    "StudentRepository",
    "AttendanceRecordRepository"
]
