"""
Session Aggregator - Day/session groupings of attendance records

Pure functions over AttendanceRow lists; nothing here touches the store.
Days are keyed on the check-in date so a session stays with the day it
started on.
"""
from datetime import datetime, date
from typing import Dict, Iterable, List, Optional

from app.schemas.attendance import AttendanceRow
from app.schemas.report import SessionEntry, DaySessionAggregate, SessionStats


def format_duration(check_in_time: Optional[datetime], check_out_time: Optional[datetime]) -> Optional[str]:
    """
    Whole hours and minutes between check-in and check-out

    Returns:
        str like "2h 30m", or None while the record is open
    """
    if check_in_time is None or check_out_time is None:
        return None

    total_minutes = int((check_out_time - check_in_time).total_seconds() // 60)
    hours, minutes = divmod(max(total_minutes, 0), 60)
    return f"{hours}h {minutes}m"


def to_entry(row: AttendanceRow) -> SessionEntry:
    return SessionEntry(
        record_id=row.id,
        student_id=row.student_id,
        student_name=row.student_name,
        register_number=row.register_number,
        department=row.department,
        check_in_time=row.check_in_time,
        check_out_time=row.check_out_time,
        session=row.session,
        status=row.status,
        notes=row.notes,
        session_duration=format_duration(row.check_in_time, row.check_out_time),
    )


def _day_of(row: AttendanceRow) -> date:
    return row.check_in_time.date() if row.check_in_time else row.date


def _refresh_counts(day: DaySessionAggregate) -> DaySessionAggregate:
    day.session1_count = len(day.session1)
    day.session2_count = len(day.session2)
    day.total_students = len({e.student_id for e in day.session1} | {e.student_id for e in day.session2})
    return day


def aggregate(rows: Iterable[AttendanceRow]) -> List[DaySessionAggregate]:
    """
    Group records into days and session buckets, newest date first

    Closed records land in session1/session2 by their session tag (untagged
    closed records count as session1). Open records land in present only.
    """
    days: Dict[date, DaySessionAggregate] = {}

    for row in rows:
        day_key = _day_of(row)
        day = days.setdefault(day_key, DaySessionAggregate(date=day_key))
        entry = to_entry(row)

        if row.check_out_time is None:
            day.present.append(entry)
        elif row.session == "session2":
            day.session2.append(entry)
        else:
            day.session1.append(entry)

    for day in days.values():
        for bucket in (day.session1, day.session2, day.present):
            bucket.sort(key=lambda e: (e.check_in_time or datetime.min, e.record_id))
        _refresh_counts(day)

    return [days[key] for key in sorted(days, reverse=True)]


def filter_days(
    days: List[DaySessionAggregate],
    session: Optional[str] = None,
    search: Optional[str] = None
) -> List[DaySessionAggregate]:
    """
    Narrow aggregates to one session and/or a name/register-number search

    Days left with no completed entries are dropped.
    """
    term = search.strip().lower() if search else ""

    def keep(entry: SessionEntry) -> bool:
        if not term:
            return True
        return term in entry.student_name.lower() or term in entry.register_number.lower()

    filtered = []
    for day in days:
        session1 = [e for e in day.session1 if keep(e)] if session in (None, "session1") else []
        session2 = [e for e in day.session2 if keep(e)] if session in (None, "session2") else []
        if not session1 and not session2:
            continue
        present = [e for e in day.present if keep(e)]
        filtered.append(_refresh_counts(
            DaySessionAggregate(date=day.date, session1=session1, session2=session2, present=present)
        ))

    return filtered


def session_stats(days: List[DaySessionAggregate]) -> SessionStats:
    session1_total = sum(day.session1_count for day in days)
    session2_total = sum(day.session2_count for day in days)
    return SessionStats(
        total_days=len(days),
        total_sessions=session1_total + session2_total,
        session1_total=session1_total,
        session2_total=session2_total,
    )
