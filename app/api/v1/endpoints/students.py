"""
Students Endpoints - Student directory management
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.services.student_service import StudentService
from app.schemas import Student, StudentCreate, StudentUpdate, StudentStats, DataResponse
from app.core.config import settings
from atams.encryption import encrypt_response_data

router = APIRouter()
student_service = StudentService()


@router.get(
    "",
    response_model=DataResponse[List[Student]],
    status_code=status.HTTP_200_OK
)
async def list_students(
    department: Optional[str] = Query(None, description="Department (case-insensitive substring)"),
    year: Optional[int] = Query(None, description="Class year, e.g. 2023"),
    active: Optional[bool] = Query(None, description="Filter by active flag"),
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(1000, ge=1, le=5000, description="Maximum records to return"),
    db: Session = Depends(get_db)
):
    """
    Get list of students ordered by name
    """
    students = student_service.list_students(
        db, department=department, year=year, is_active=active, skip=skip, limit=limit
    )

    response = DataResponse(
        success=True,
        message="Students retrieved successfully",
        data=students
    )

    return encrypt_response_data(response, settings)


@router.get(
    "/search",
    response_model=DataResponse[List[Student]],
    status_code=status.HTTP_200_OK
)
async def search_students(
    q: Optional[str] = Query(None, description="Search name, register number or department"),
    register_number: Optional[str] = Query(None, description="Exact register number"),
    year: Optional[int] = Query(None, description="Class year"),
    limit: int = Query(100, ge=1, le=1000, description="Maximum records to return"),
    db: Session = Depends(get_db)
):
    """
    Search students

    **Query Parameters:**
    - register_number: exact match, takes precedence over q
    - q: case-insensitive substring over name, register number and department

    **Errors:**
    - 400: Neither q nor register_number given
    """
    students = student_service.search_students(
        db, q=q, register_number=register_number, year=year, limit=limit
    )

    response = DataResponse(
        success=True,
        message="Students retrieved successfully",
        data=students
    )

    return encrypt_response_data(response, settings)


@router.get(
    "/stats",
    response_model=DataResponse[StudentStats],
    status_code=status.HTTP_200_OK
)
async def get_student_stats(db: Session = Depends(get_db)):
    """
    Directory statistics, grouped by standardized department and class year
    """
    stats = student_service.get_stats(db)

    response = DataResponse(
        success=True,
        message="Student statistics retrieved successfully",
        data=stats
    )

    return encrypt_response_data(response, settings)


@router.get(
    "/{student_id}",
    response_model=DataResponse[Student],
    status_code=status.HTTP_200_OK
)
async def get_student(
    student_id: int,
    db: Session = Depends(get_db)
):
    """
    Get single student by ID
    """
    student = student_service.get_student(db, student_id)

    response = DataResponse(
        success=True,
        message="Student retrieved successfully",
        data=student
    )

    return encrypt_response_data(response, settings)


@router.post(
    "",
    response_model=DataResponse[Student],
    status_code=status.HTTP_201_CREATED
)
async def create_student(
    student: StudentCreate,
    db: Session = Depends(get_db)
):
    """
    Register new student

    **Validation:**
    - name, register_number, department: required, not blank
    - register_number: unique
    - class_year: inferred from the register number when omitted ("23..." -> 2023)

    **Errors:**
    - 409: Register number already exists (error_code DUPLICATE_KEY)
    """
    new_student = student_service.create_student(db, student)

    return DataResponse(
        success=True,
        message="Student created successfully",
        data=new_student
    )


@router.put(
    "/{student_id}",
    response_model=DataResponse[Student],
    status_code=status.HTTP_200_OK
)
async def update_student(
    student_id: int,
    student: StudentUpdate,
    db: Session = Depends(get_db)
):
    """
    Update existing student

    **Updateable fields:**
    - name, class_year, department, aadhar_number, phone_number, email, is_active
    - register_number cannot be changed
    """
    updated_student = student_service.update_student(db, student_id, student)

    return DataResponse(
        success=True,
        message="Student updated successfully",
        data=updated_student
    )


@router.delete(
    "/{student_id}",
    response_model=DataResponse[Student],
    status_code=status.HTTP_200_OK
)
async def deactivate_student(
    student_id: int,
    db: Session = Depends(get_db)
):
    """
    Deactivate student

    **Note:**
    - Students are never hard deleted; attendance history is kept
    - Inactive students cannot be marked present
    """
    student = student_service.deactivate_student(db, student_id)

    return DataResponse(
        success=True,
        message="Student deactivated successfully",
        data=student
    )
