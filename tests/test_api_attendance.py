from datetime import date, datetime, timedelta

from app.api.deps import event_bus

API = "/api/v1"


def create_student(client, register_number="23127001", name="Anu Joseph", department="BCA"):
    resp = client.post(f"{API}/students", json={
        "name": name,
        "register_number": register_number,
        "department": department,
    })
    assert resp.status_code == 201
    return resp.json()["data"]


def test_scan_checkout_and_re_register(client, admin_headers):
    student = create_student(client)

    first = client.post(f"{API}/attendance/scan", json={"register_number": "23127001"})
    assert first.status_code == 201
    first_data = first.json()["data"]
    assert first_data["action"] == "checked-in"

    again = client.post(f"{API}/attendance/scan", json={"register_number": "23127001"})
    assert again.status_code == 409
    body = again.json()
    assert body["success"] is False
    assert body["message"] == "Already Present"
    assert body["details"]["error_code"] == "ALREADY_PRESENT"

    present = client.get(f"{API}/attendance/present").json()["data"]
    assert [row["student_id"] for row in present] == [student["id"]]

    record_id = first_data["record"]["id"]
    checkout = client.put(
        f"{API}/attendance/{record_id}/checkout",
        json={"session": "session1"},
        headers=admin_headers
    )
    assert checkout.status_code == 200
    assert checkout.json()["data"]["session"] == "session1"
    assert checkout.json()["data"]["check_out_time"] is not None

    third = client.post(f"{API}/attendance/scan", json={"register_number": "23127001"})
    assert third.status_code == 201
    assert third.json()["data"]["action"] == "re-registered"
    assert third.json()["data"]["record"]["id"] != record_id


def test_scan_unknown_register_number(client):
    resp = client.post(f"{API}/attendance/scan", json={"register_number": "99999999"})

    assert resp.status_code == 404
    assert resp.json()["details"]["error_code"] == "RECORD_NOT_FOUND"


def test_check_in_and_check_endpoint(client, make_student):
    student = make_student()

    before = client.get(f"{API}/attendance/check", params={"student_id": student.id, "date": "2024-03-04"})
    assert before.json()["data"]["state"] == "NO_RECORD"

    resp = client.post(f"{API}/attendance", json={
        "student_id": student.id,
        "date": "2024-03-04",
        "check_in_time": "2024-03-04T09:00:00",
    })
    assert resp.status_code == 201

    after = client.get(f"{API}/attendance/check", params={"student_id": student.id, "date": "2024-03-04"})
    assert after.json()["data"]["state"] == "OPEN_PRESENT"
    assert after.json()["data"]["can_mark_present"] is False


def test_invalid_date_is_bad_request(client):
    resp = client.get(f"{API}/attendance", params={"date": "04/03/2024"})

    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid date format. Use YYYY-MM-DD"


def test_admin_operations_require_token(client, make_student, make_record):
    student = make_student()
    record = make_record(student.id)

    assert client.put(f"{API}/attendance/{record.id}/checkout", json={"session": "session1"}).status_code == 401
    assert client.post(f"{API}/attendance/checkout-all", json={"session": "session1"}).status_code == 401
    assert client.delete(f"{API}/attendance/all").status_code == 401

    bad = client.delete(f"{API}/attendance/all", headers={"Authorization": "Bearer not-a-token"})
    assert bad.status_code == 401


def test_login_rejects_bad_credentials(client):
    resp = client.post(f"{API}/auth/login", json={"username": "admin", "password": "wrong"})

    assert resp.status_code == 401
    assert resp.json()["message"] == "Invalid username or password"


def test_me_returns_username(client, admin_headers):
    resp = client.get(f"{API}/auth/me", headers=admin_headers)

    assert resp.status_code == 200
    assert resp.json()["data"]["username"] == "admin"


def test_checkout_invalid_session(client, admin_headers, make_student, make_record):
    student = make_student()
    record = make_record(student.id)

    resp = client.put(
        f"{API}/attendance/{record.id}/checkout",
        json={"session": "session3"},
        headers=admin_headers
    )

    assert resp.status_code == 400
    assert resp.json()["details"]["error_code"] == "INVALID_SESSION"


def test_checkout_all(client, admin_headers, make_student, make_record):
    for _ in range(3):
        make_record(make_student().id)

    resp = client.post(f"{API}/attendance/checkout-all", json={"session": "session2"}, headers=admin_headers)

    assert resp.status_code == 200
    assert resp.json()["data"]["checked_out_count"] == 3
    assert client.get(f"{API}/attendance/present").json()["data"] == []
    closed = client.get(f"{API}/attendance", params={"status": "closed"}).json()
    assert closed["total"] == 3
    assert all(r["session"] == "session2" for r in closed["data"])


def test_batch_checkout(client, admin_headers, make_student, make_record):
    record = make_record(make_student().id)

    resp = client.post(f"{API}/attendance/batch-checkout", json={"records": [
        {"id": record.id, "session": "session1"},
        {"id": 424242, "session": "session1"},
    ]}, headers=admin_headers)

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["checked_out_count"] == 1
    assert data["failed"][0]["id"] == 424242


def test_delete_all(client, admin_headers, make_student, make_record):
    students = [make_student() for _ in range(5)]
    for student in students:
        for minute in range(100):
            check_in = datetime(2024, 3, 4, 9, 0) + timedelta(minutes=minute)
            make_record(student.id, check_in=check_in, check_out=check_in + timedelta(hours=2), session="session1")

    resp = client.delete(f"{API}/attendance/all", headers=admin_headers)

    assert resp.status_code == 200
    assert resp.json()["data"]["deleted_count"] == 500

    listing = client.get(f"{API}/attendance").json()
    assert listing["data"] == []
    assert listing["total"] == 0


def test_delete_session_and_date(client, admin_headers, make_student, make_record):
    day = date(2024, 3, 4)
    student = make_student()
    make_record(student.id, day, datetime(2024, 3, 4, 9), datetime(2024, 3, 4, 12), "session1")
    make_record(student.id, day, datetime(2024, 3, 4, 13), datetime(2024, 3, 4, 16), "session2")
    make_record(student.id, date(2024, 3, 5), datetime(2024, 3, 5, 9), datetime(2024, 3, 5, 12), "session1")

    resp = client.request(
        "DELETE", f"{API}/attendance/session",
        json={"date": "2024-03-04", "session": "session2"},
        headers=admin_headers
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["deleted_count"] == 1
    assert resp.json()["data"]["session2_count"] == 1

    bad = client.request(
        "DELETE", f"{API}/attendance/session",
        json={"date": "2024-03-04", "session": "night"},
        headers=admin_headers
    )
    assert bad.status_code == 400

    resp = client.request("DELETE", f"{API}/attendance/date", json={"date": "2024-03-04"}, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["deleted_count"] == 1
    assert resp.json()["data"]["session1_count"] == 1

    remaining = client.get(f"{API}/attendance").json()
    assert remaining["total"] == 1
    assert remaining["data"][0]["date"] == "2024-03-05"


def test_sessions_report_and_export(client, make_student, make_record):
    student = make_student(name="Anu Joseph")
    make_record(student.id, check_in=datetime(2024, 3, 4, 9), check_out=datetime(2024, 3, 4, 11, 30), session="session1")
    make_record(student.id, check_in=datetime(2024, 3, 4, 13))

    days = client.get(f"{API}/sessions").json()["data"]
    assert len(days) == 1
    assert days[0]["session1_count"] == 1
    assert days[0]["session1"][0]["session_duration"] == "2h 30m"
    assert len(days[0]["present"]) == 1

    stats = client.get(f"{API}/sessions/stats").json()["data"]
    assert stats["total_sessions"] == 1

    export = client.get(f"{API}/sessions/export")
    assert export.status_code == 200
    assert export.headers["content-type"].startswith("text/csv")
    assert "attachment; filename=session_data_" in export.headers["content-disposition"]
    assert "Anu Joseph" in export.text

    single = client.get(f"{API}/sessions/2024-03-04/session1/export")
    assert single.status_code == 200
    assert "Session 1 (Morning)" in single.text
    assert "Session_1_Morning_2024-03-04.csv" in single.headers["content-disposition"]

    empty = client.get(f"{API}/sessions/2024-03-04/session2/export")
    assert empty.status_code == 404
    assert empty.json()["message"] == "No records available for Session 2 (Afternoon) on 2024-03-04"


def test_events_feed(client, make_student):
    student = make_student()
    start = event_bus.last_seq

    client.post(f"{API}/attendance", json={"student_id": student.id})

    feed = client.get(f"{API}/events", params={"after": start}).json()["data"]
    assert feed["last_seq"] == start + 1
    assert [e["type"] for e in feed["events"]] == ["checked-in"]
    assert feed["events"][0]["payload"]["student_id"] == student.id


def test_health(client):
    resp = client.get(f"{API}/health")

    assert resp.status_code == 200
    assert resp.json()["status"] == "OK"
    assert resp.json()["database"] == "connected"


def test_back_dated_check_in_is_reported_on_its_day(client, admin_headers, make_student):
    student = make_student()

    resp = client.post(f"{API}/attendance", json={"student_id": student.id, "date": "2024-03-04"})
    assert resp.status_code == 201
    record = resp.json()["data"]
    assert record["date"] == "2024-03-04"
    assert record["check_in_time"].startswith("2024-03-04T")

    client.put(f"{API}/attendance/{record['id']}/checkout", json={"session": "session1"}, headers=admin_headers)

    days = client.get(f"{API}/sessions").json()["data"]
    assert [d["date"] for d in days] == ["2024-03-04"]


def test_check_in_time_on_other_day_is_rejected(client, make_student):
    student = make_student()

    resp = client.post(f"{API}/attendance", json={
        "student_id": student.id,
        "date": "2024-03-04",
        "check_in_time": "2024-03-05T09:00:00",
    })

    assert resp.status_code == 400
    assert resp.json()["message"] == "check_in_time must fall on date"


def test_events_feed_flags_lost_events(client):
    start = event_bus.last_seq

    current = client.get(f"{API}/events", params={"after": start}).json()["data"]
    assert current["truncated"] is False

    stale = client.get(f"{API}/events", params={"after": start + 10}).json()["data"]
    assert stale["truncated"] is True
    assert stale["events"] == []
