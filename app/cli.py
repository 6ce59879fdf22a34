"""
Student Attendance CLI - Schema setup, roster import and connectivity check
"""
import csv
import re
from pathlib import Path
from typing import Dict, List, Tuple

import typer
from rich.console import Console
from rich.table import Table

from app.db.session import SessionLocal, engine
from app.models import Student, AttendanceRecord  # noqa: F401 - registers tables on Base.metadata
from app.repositories.student_repository import StudentRepository
from app.repositories.attendance_record_repository import AttendanceRecordRepository
from app.services.student_service import StudentService, normalize_import_row
from atams.db import Base

app = typer.Typer(
    name="student-attendance",
    help="Student attendance maintenance commands",
    add_completion=False,
)

console = Console()

# Normalized CSV header -> student field
HEADER_ALIASES = {
    "name": "name",
    "student name": "name",
    "name of the student": "name",
    "register number": "register_number",
    "register no": "register_number",
    "reg no": "register_number",
    "department": "department",
    "dept": "department",
    "course": "department",
    "aadhar number": "aadhar_number",
    "phone number": "phone_number",
    "phone": "phone_number",
    "email": "email",
    "email id": "email",
}


def _normalize_header(header: str) -> str:
    return re.sub(r"[\s_.]+", " ", (header or "").strip().lower()).strip()


def read_roster(csv_path: Path) -> Tuple[List[Dict], List[Tuple[int, str, str]]]:
    """
    Parse a roster CSV into student insert dicts

    Returns:
        (rows, skipped) where skipped holds (line number, register number, reason)
    """
    rows = []
    skipped = []
    seen = set()

    with open(csv_path, newline="", encoding="utf-8-sig") as handle:
        reader = csv.DictReader(handle)
        field_map = {
            header: HEADER_ALIASES[_normalize_header(header)]
            for header in (reader.fieldnames or [])
            if _normalize_header(header) in HEADER_ALIASES
        }

        for line_number, raw in enumerate(reader, start=2):
            mapped = {field: raw.get(header) for header, field in field_map.items()}
            register_number = (mapped.get("register_number") or "").strip()

            try:
                row = normalize_import_row(mapped)
            except ValueError as e:
                skipped.append((line_number, register_number, str(e)))
                continue

            if row["register_number"] in seen:
                skipped.append((line_number, register_number, "Duplicate register number in file"))
                continue

            seen.add(row["register_number"])
            rows.append(row)

    return rows, skipped


@app.command("init-db")
def init_db():
    """Create the students and attendance_records tables"""
    Base.metadata.create_all(bind=engine)
    console.print(f"[green]✓[/green] Tables created on [cyan]{_safe_url()}[/cyan]")


@app.command("import-students")
def import_students(
    csv_path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Roster CSV file"),
    keep_existing: bool = typer.Option(
        False, "--keep-existing", help="Add new students only instead of replacing the roster"
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask before replacing data"),
):
    """
    Load students from a roster CSV

    Class year is inferred from the register number and departments are
    standardized. Without --keep-existing all attendance records and
    students are replaced in one transaction.
    """
    rows, skipped = read_roster(csv_path)
    console.print(f"Read [bold]{len(rows)}[/bold] valid rows from [cyan]{csv_path}[/cyan]")

    if not keep_existing and not yes:
        typer.confirm("This deletes all students and attendance records. Continue?", abort=True)

    db = SessionLocal()
    try:
        result = StudentService().replace_all(db, rows, keep_existing=keep_existing)
    finally:
        db.close()

    if not keep_existing:
        console.print(
            f"[yellow]Removed {result['deleted_students']} students "
            f"and {result['deleted_records']} attendance records[/yellow]"
        )
    if result["skipped_existing"]:
        console.print(f"Skipped {result['skipped_existing']} students already registered")

    if skipped:
        table = Table(title=f"Skipped {len(skipped)} rows", show_lines=False)
        table.add_column("Line", justify="right")
        table.add_column("Register Number")
        table.add_column("Reason", style="red")
        for line_number, register_number, reason in skipped:
            table.add_row(str(line_number), register_number or "-", reason)
        console.print(table)

    console.print(f"[green]✓[/green] Inserted {result['inserted']} students")


@app.command("check-db")
def check_db():
    """Verify the database connection and report row counts"""
    db = SessionLocal()
    try:
        student_repo = StudentRepository()
        if not student_repo.check_database_health(db):
            console.print(f"[red]✗[/red] Cannot connect to database ({_safe_url()})")
            raise typer.Exit(code=1)

        student_count = student_repo.count_students(db)
        record_count = AttendanceRecordRepository().count_records_with_filters(db)
    finally:
        db.close()

    console.print(f"[green]✓[/green] Connected to {_safe_url()}")
    console.print(f"  Students: [bold]{student_count}[/bold]")
    console.print(f"  Attendance records: [bold]{record_count}[/bold]")


def _safe_url() -> str:
    return engine.url.render_as_string(hide_password=True)


if __name__ == "__main__":
    app()
