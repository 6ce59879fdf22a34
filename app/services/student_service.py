"""
Student Service - Business logic for the student directory
"""
from typing import List, Dict, Any, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from app.repositories.student_repository import StudentRepository
from app.repositories.attendance_record_repository import AttendanceRecordRepository
from app.schemas.student import Student, StudentCreate, StudentUpdate, StudentStats
from app.core.exceptions import DuplicateKeyError, RecordNotFoundError
from app.utils.departments import count_departments, standardize_department_name
from app.utils.register_numbers import infer_class_year
from atams.exceptions import BadRequestException
from atams.logging import get_logger
from atams.transaction import transaction

logger = get_logger(__name__)


class StudentService:
    def __init__(self) -> None:
        self.repo = StudentRepository()
        self.record_repo = AttendanceRecordRepository()

    def list_students(
        self,
        db: Session,
        department: str = None,
        year: int = None,
        is_active: bool = None,
        skip: int = 0,
        limit: int = 1000
    ) -> List[Student]:
        students = self.repo.get_students_with_filters(
            db, department=department, year=year, is_active=is_active, skip=skip, limit=limit
        )
        return [Student.model_validate(s) for s in students]

    def search_students(
        self,
        db: Session,
        q: str = None,
        register_number: str = None,
        year: int = None,
        limit: int = 100
    ) -> List[Student]:
        """
        Exact register-number lookup, or substring search over name,
        register number and department

        Raises:
            BadRequestException: If neither q nor register_number is given
        """
        if register_number and register_number.strip():
            student = self.repo.get_by_register_number(db, register_number.strip())
            return [Student.model_validate(student)] if student else []

        if not q or not q.strip():
            raise BadRequestException("Search query or register number is required")

        students = self.repo.search_students(db, q.strip(), year=year, limit=limit)
        return [Student.model_validate(s) for s in students]

    def get_student(self, db: Session, student_id: int) -> Student:
        student = self.repo.get_by_id(db, student_id)
        if not student:
            raise RecordNotFoundError("Student not found")
        return Student.model_validate(student)

    def get_by_register_number(self, db: Session, register_number: str) -> Student:
        student = self.repo.get_by_register_number(db, register_number.strip())
        if not student:
            raise RecordNotFoundError(
                "Student not found",
                details={"register_number": register_number}
            )
        return Student.model_validate(student)

    def create_student(self, db: Session, payload: StudentCreate) -> Student:
        """
        Register a new student

        Raises:
            DuplicateKeyError: Register number already taken
            BadRequestException: Class year omitted and not inferable
        """
        if self.repo.check_register_number_exists(db, payload.register_number):
            raise DuplicateKeyError(
                "Student with this register number already exists",
                details={"register_number": payload.register_number}
            )

        class_year = payload.class_year
        if class_year is None:
            try:
                class_year = infer_class_year(payload.register_number)
            except ValueError as e:
                raise BadRequestException(str(e))

        data = payload.model_dump()
        data["class_year"] = class_year

        try:
            obj = self.repo.create(db, data)
        except IntegrityError:
            # Lost a race with a concurrent insert of the same register number
            db.rollback()
            raise DuplicateKeyError(
                "Student with this register number already exists",
                details={"register_number": payload.register_number}
            )

        logger.info(
            "Student created",
            extra={'extra_data': {'student_id': obj.id, 'register_number': obj.register_number}}
        )
        return Student.model_validate(obj)

    def update_student(self, db: Session, student_id: int, payload: StudentUpdate) -> Student:
        obj = self.repo.get_by_id(db, student_id)
        if not obj:
            raise RecordNotFoundError("Student not found")

        update_data = payload.model_dump(exclude_unset=True)
        for field in ("name", "department"):
            if field in update_data:
                value = (update_data[field] or "").strip()
                if not value:
                    raise BadRequestException(f"{field} must not be blank")
                update_data[field] = value

        obj = self.repo.update(db, obj, update_data)
        return Student.model_validate(obj)

    def deactivate_student(self, db: Session, student_id: int) -> Student:
        """Soft delete; attendance history stays intact"""
        obj = self.repo.get_by_id(db, student_id)
        if not obj:
            raise RecordNotFoundError("Student not found")

        obj = self.repo.update(db, obj, {"is_active": False})
        logger.info("Student deactivated", extra={'extra_data': {'student_id': student_id}})
        return Student.model_validate(obj)

    def get_stats(self, db: Session) -> StudentStats:
        by_year = {
            str(row["class_year"]): row["count"]
            for row in self.repo.count_by_year(db)
        }
        return StudentStats(
            total=self.repo.count_students(db),
            active=self.repo.count_students(db, active_only=True),
            by_department=count_departments(self.repo.get_departments(db)),
            by_year=by_year,
        )

    def replace_all(self, db: Session, rows: List[Dict[str, Any]], keep_existing: bool = False) -> Dict[str, int]:
        """
        Load a full student roster in one transaction

        Unless keep_existing is set, attendance records and students are
        emptied first. With keep_existing, rows whose register number is
        already present are skipped.

        Returns:
            dict: {inserted, skipped_existing, deleted_students, deleted_records}
        """
        deleted_records = 0
        deleted_students = 0
        skipped_existing = 0

        with transaction(db):
            if keep_existing:
                fresh = []
                for row in rows:
                    if self.repo.get_by_register_number(db, row["register_number"]):
                        skipped_existing += 1
                    else:
                        fresh.append(row)
                rows = fresh
            else:
                deleted_records = self.record_repo.delete_all(db)
                deleted_students = self.repo.delete_all(db)

            inserted = self.repo.add_many(db, rows)

        result = {
            "inserted": len(inserted),
            "skipped_existing": skipped_existing,
            "deleted_students": deleted_students,
            "deleted_records": deleted_records,
        }
        logger.info("Student roster imported", extra={'extra_data': result})
        return result


def normalize_import_row(row: Dict[str, Optional[str]]) -> Dict[str, Any]:
    """
    Build a student insert dict from one importer row

    Raises:
        ValueError: Missing required field or uninferable class year
    """
    name = (row.get("name") or "").strip()
    register_number = (row.get("register_number") or "").strip()
    department = (row.get("department") or "").strip()

    missing = [
        field for field, value in (
            ("name", name), ("register_number", register_number), ("department", department)
        ) if not value
    ]
    if missing:
        raise ValueError(f"Missing {', '.join(missing)}")

    return {
        "name": name,
        "register_number": register_number,
        "class_year": infer_class_year(register_number),
        "department": standardize_department_name(department),
        "aadhar_number": (row.get("aadhar_number") or "").strip(),
        "phone_number": (row.get("phone_number") or "").strip(),
        "email": (row.get("email") or "").strip(),
        "is_active": True,
    }
