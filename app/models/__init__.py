from .student import Student
from .attendance_record import AttendanceRecord

__all__ = [
    "Student",
    "AttendanceRecord"
]
