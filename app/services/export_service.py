"""
Export Service - CSV renditions of session aggregates
"""
import csv
import io
from datetime import datetime, date
from typing import List, Optional

from app.schemas.report import DaySessionAggregate, SessionEntry

CSV_HEADER = [
    "Date",
    "Session",
    "Student Name",
    "Register Number",
    "Department",
    "Check-in Time",
    "Check-out Time",
    "Session Duration",
]

SESSION_EXPORT_LABELS = {
    "session1": "Session 1 (Morning)",
    "session2": "Session 2 (Afternoon)",
}

SESSION_FILE_PREFIXES = {
    "session1": "Session_1_Morning",
    "session2": "Session_2_Afternoon",
}

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def _format_time(value: Optional[datetime]) -> str:
    return value.strftime(TIME_FORMAT) if value else ""


def _row(day: date, label: str, entry: SessionEntry) -> list:
    return [
        day.isoformat(),
        label,
        entry.student_name,
        entry.register_number,
        entry.department,
        _format_time(entry.check_in_time),
        _format_time(entry.check_out_time),
        entry.session_duration or "",
    ]


def export_days(days: List[DaySessionAggregate]) -> str:
    """All completed sessions across the given days, session 1 rows first per day"""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(CSV_HEADER)

    for day in days:
        for entry in day.session1:
            writer.writerow(_row(day.date, "Session 1", entry))
        for entry in day.session2:
            writer.writerow(_row(day.date, "Session 2", entry))

    return output.getvalue()


def export_session(day: date, session: str, entries: List[SessionEntry]) -> str:
    """One session of one day"""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(CSV_HEADER)

    label = SESSION_EXPORT_LABELS[session]
    for entry in entries:
        writer.writerow(_row(day, label, entry))

    return output.getvalue()


def export_filename(today: date = None) -> str:
    return f"session_data_{(today or date.today()).isoformat()}.csv"


def session_export_filename(day: date, session: str) -> str:
    return f"{SESSION_FILE_PREFIXES[session]}_{day.isoformat()}.csv"
