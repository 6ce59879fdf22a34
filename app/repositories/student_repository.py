"""
Student Repository - Data access layer for the student directory
"""
from typing import Optional, List, Dict, Any
from sqlalchemy.orm import Session
from sqlalchemy import or_

from atams.db import BaseRepository
from app.models.student import Student


class StudentRepository(BaseRepository[Student]):
    def __init__(self):
        super().__init__(Student)

    def get_by_id(self, db: Session, student_id: int) -> Optional[Student]:
        """Get student by ID using ORM"""
        return db.query(Student).filter(Student.id == student_id).first()

    def get_for_update(self, db: Session, student_id: int) -> Optional[Student]:
        """Get student by ID and lock the row until the transaction ends"""
        return db.query(Student).filter(Student.id == student_id).with_for_update().first()

    def get_by_register_number(self, db: Session, register_number: str) -> Optional[Student]:
        """Exact match on the register number using ORM"""
        return db.query(Student).filter(Student.register_number == register_number).first()

    def get_students_with_filters(
        self,
        db: Session,
        department: str = None,
        year: int = None,
        is_active: bool = None,
        skip: int = 0,
        limit: int = 1000
    ) -> List[Student]:
        """Get students with optional filters using ORM, ordered by name"""
        query = db.query(Student)

        if department:
            query = query.filter(Student.department.ilike(f"%{department}%"))
        if year:
            query = query.filter(Student.class_year == year)
        if is_active is not None:
            query = query.filter(Student.is_active == is_active)

        return query.order_by(Student.name.asc()).offset(skip).limit(limit).all()

    def search_students(self, db: Session, search: str, year: int = None, limit: int = 100) -> List[Student]:
        """Case-insensitive search over name, register number and department"""
        pattern = f"%{search}%"
        query = db.query(Student).filter(
            or_(
                Student.name.ilike(pattern),
                Student.register_number.ilike(pattern),
                Student.department.ilike(pattern)
            )
        )

        if year:
            query = query.filter(Student.class_year == year)

        return query.order_by(Student.name.asc()).limit(limit).all()

    def check_register_number_exists(self, db: Session, register_number: str) -> bool:
        """Check if register number is taken using native SQL"""
        query = "SELECT 1 FROM students WHERE register_number = :register_number LIMIT 1"
        result = self.execute_raw_sql_scalar(db, query, {"register_number": register_number})
        return result is not None

    def count_students(self, db: Session, active_only: bool = False) -> int:
        """Count students using native SQL"""
        if active_only:
            query = "SELECT COUNT(*) FROM students WHERE is_active = :is_active"
            return self.execute_raw_sql_scalar(db, query, {"is_active": True})
        else:
            query = "SELECT COUNT(*) FROM students"
            return self.execute_raw_sql_scalar(db, query)

    def get_departments(self, db: Session) -> List[str]:
        """Raw department value per student, for standardized grouping"""
        return [row[0] for row in db.query(Student.department).all()]

    def count_by_year(self, db: Session) -> List[Dict[str, Any]]:
        """Student count per class year using native SQL"""
        query = """
            SELECT class_year, COUNT(*) AS count
            FROM students
            GROUP BY class_year
            ORDER BY class_year DESC
        """
        return self.execute_raw_sql_dict(db, query)

    def delete_all(self, db: Session) -> int:
        """Delete every student without committing; caller owns the transaction"""
        return db.query(Student).delete(synchronize_session=False)

    def add_many(self, db: Session, rows: List[Dict[str, Any]]) -> List[Student]:
        """Stage students for insert without committing; caller owns the transaction"""
        students = [Student(**row) for row in rows]
        db.add_all(students)
        db.flush()
        return students

