from datetime import date, datetime

from app.schemas.attendance import AttendanceRow
from app.services import export_service
from app.services.session_aggregator import aggregate, filter_days, format_duration, session_stats


def row(record_id, student_id, check_in, check_out=None, session=None, name=None, register_number=None):
    return AttendanceRow(
        id=record_id,
        student_id=student_id,
        date=check_in.date(),
        check_in_time=check_in,
        check_out_time=check_out,
        session=session,
        status="present",
        student_name=name or f"Student {student_id}",
        register_number=register_number or f"231270{student_id:02d}",
        department="BCA",
    )


def test_format_duration_hours_and_minutes():
    assert format_duration(datetime(2024, 3, 4, 9, 0, 0), datetime(2024, 3, 4, 11, 30, 0)) == "2h 30m"


def test_format_duration_open_record():
    assert format_duration(datetime(2024, 3, 4, 9, 0, 0), None) is None


def test_format_duration_drops_seconds():
    assert format_duration(datetime(2024, 3, 4, 9, 0, 0), datetime(2024, 3, 4, 9, 45, 59)) == "0h 45m"


def test_counts_add_up_for_one_day():
    rows = [
        row(1, 1, datetime(2024, 3, 4, 9), datetime(2024, 3, 4, 12), "session1"),
        row(2, 2, datetime(2024, 3, 4, 9), datetime(2024, 3, 4, 12), "session1"),
        row(3, 1, datetime(2024, 3, 4, 13), datetime(2024, 3, 4, 16), "session2"),
        row(4, 3, datetime(2024, 3, 4, 13), datetime(2024, 3, 4, 16), "session2"),
        row(5, 3, datetime(2024, 3, 4, 8), datetime(2024, 3, 4, 8, 30)),
    ]

    days = aggregate(rows)

    assert len(days) == 1
    day = days[0]
    assert day.session1_count + day.session2_count == len(rows)
    assert day.total_students == 3
    assert day.total_students <= len(rows)
    # Untagged closed record counts as session 1
    assert day.session1_count == 3


def test_open_records_only_in_present():
    rows = [
        row(1, 1, datetime(2024, 3, 4, 9)),
        row(2, 2, datetime(2024, 3, 4, 9), datetime(2024, 3, 4, 11), "session1"),
    ]

    day = aggregate(rows)[0]

    assert [e.record_id for e in day.present] == [1]
    assert day.present[0].session_duration is None
    assert day.session1_count == 1
    assert day.session2_count == 0


def test_days_newest_first():
    rows = [
        row(1, 1, datetime(2024, 3, 2, 9), datetime(2024, 3, 2, 10), "session1"),
        row(2, 1, datetime(2024, 3, 4, 9), datetime(2024, 3, 4, 10), "session1"),
        row(3, 1, datetime(2024, 3, 3, 9), datetime(2024, 3, 3, 10), "session1"),
    ]

    assert [d.date for d in aggregate(rows)] == [date(2024, 3, 4), date(2024, 3, 3), date(2024, 3, 2)]


def test_filter_by_session_and_search():
    rows = [
        row(1, 1, datetime(2024, 3, 4, 9), datetime(2024, 3, 4, 12), "session1", name="Anu Joseph"),
        row(2, 2, datetime(2024, 3, 4, 13), datetime(2024, 3, 4, 16), "session2", name="Bala Murugan"),
        row(3, 3, datetime(2024, 3, 3, 9), datetime(2024, 3, 3, 12), "session1", name="Chitra Devi"),
    ]
    days = aggregate(rows)

    only_session2 = filter_days(days, session="session2")
    assert [d.date for d in only_session2] == [date(2024, 3, 4)]
    assert only_session2[0].session1_count == 0
    assert only_session2[0].session2_count == 1

    by_name = filter_days(days, search="chitra")
    assert [d.date for d in by_name] == [date(2024, 3, 3)]

    by_register_number = filter_days(days, search="23127002")
    assert by_register_number[0].session2[0].student_name == "Bala Murugan"


def test_session_stats():
    rows = [
        row(1, 1, datetime(2024, 3, 4, 9), datetime(2024, 3, 4, 12), "session1"),
        row(2, 1, datetime(2024, 3, 4, 13), datetime(2024, 3, 4, 16), "session2"),
        row(3, 2, datetime(2024, 3, 3, 9), datetime(2024, 3, 3, 12), "session1"),
    ]

    stats = session_stats(filter_days(aggregate(rows)))

    assert stats.total_days == 2
    assert stats.total_sessions == 3
    assert stats.session1_total == 2
    assert stats.session2_total == 1


def test_export_days_csv():
    rows = [
        row(1, 1, datetime(2024, 3, 4, 9), datetime(2024, 3, 4, 11, 30), "session1", name="Anu, Joseph"),
        row(2, 2, datetime(2024, 3, 4, 13), datetime(2024, 3, 4, 16), "session2"),
    ]

    lines = export_service.export_days(aggregate(rows)).splitlines()

    assert lines[0] == "Date,Session,Student Name,Register Number,Department,Check-in Time,Check-out Time,Session Duration"
    assert lines[1] == '2024-03-04,Session 1,"Anu, Joseph",23127001,BCA,2024-03-04 09:00:00,2024-03-04 11:30:00,2h 30m'
    assert lines[2].startswith("2024-03-04,Session 2,Student 2,23127002,")


def test_export_filenames():
    assert export_service.export_filename(date(2024, 3, 4)) == "session_data_2024-03-04.csv"
    assert export_service.session_export_filename(date(2024, 3, 4), "session1") == "Session_1_Morning_2024-03-04.csv"
    assert export_service.session_export_filename(date(2024, 3, 4), "session2") == "Session_2_Afternoon_2024-03-04.csv"
