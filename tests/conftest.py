import os

# Settings are read at import time; point everything at in-memory SQLite first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("ATLAS_APP_CODE", "STUDENT_ATTENDANCE")
os.environ.setdefault("ADMIN_USERNAME", "admin")
os.environ.setdefault("ADMIN_PASSWORD", "admin123")
os.environ.setdefault("ADMIN_JWT_SECRET", "test-secret-key-for-admin-tokens-0001")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("ENCRYPTION_ENABLED", "false")

from datetime import datetime, date  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from atams.db import Base  # noqa: E402
from app.db.session import engine, SessionLocal  # noqa: E402
from app.models import Student, AttendanceRecord  # noqa: E402
from app.api.deps import recent_scans  # noqa: E402
from app.main import app  # noqa: E402


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture(autouse=True)
def schema():
    Base.metadata.create_all(bind=engine)
    recent_scans.clear()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin_headers(client):
    resp = client.post("/api/v1/auth/login", json={"username": "admin", "password": "admin123"})
    assert resp.status_code == 200
    token = resp.json()["data"]["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_student(db):
    counter = {"n": 0}

    def _make(register_number=None, name=None, department="BCA", is_active=True):
        counter["n"] += 1
        student = Student(
            name=name or f"Student {counter['n']}",
            register_number=register_number or f"231270{counter['n']:02d}",
            class_year=2023,
            department=department,
            is_active=is_active,
        )
        db.add(student)
        db.commit()
        db.refresh(student)
        return student

    return _make


@pytest.fixture
def make_record(db):
    def _make(student_id, day=None, check_in=None, check_out=None, session=None):
        day = day or date(2024, 3, 4)
        record = AttendanceRecord(
            student_id=student_id,
            date=day,
            check_in_time=check_in or datetime.combine(day, datetime.min.time()).replace(hour=9),
            check_out_time=check_out,
            session=session,
            status="present",
        )
        db.add(record)
        db.commit()
        db.refresh(record)
        return record

    return _make
