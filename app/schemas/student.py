"""
Student Schemas for request/response validation
"""
from typing import Optional, Dict
from datetime import datetime
from pydantic import BaseModel, ConfigDict, field_validator


class StudentBase(BaseModel):
    name: str
    department: str
    aadhar_number: str = ""
    phone_number: str = ""
    email: str = ""

    @field_validator('name', 'department')
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be blank")
        return v.strip()


class StudentCreate(StudentBase):
    register_number: str
    class_year: Optional[int] = None  # Inferred from register number when omitted

    @field_validator('register_number')
    @classmethod
    def register_number_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be blank")
        return v.strip()


class StudentUpdate(BaseModel):
    """Register number is immutable and therefore not updatable"""
    name: Optional[str] = None
    class_year: Optional[int] = None
    department: Optional[str] = None
    aadhar_number: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator(
        'name', 'class_year', 'department', 'aadhar_number', 'phone_number', 'email', 'is_active'
    )
    @classmethod
    def not_null(cls, v):
        # Omit a field to leave it unchanged; every column is NOT NULL
        if v is None:
            raise ValueError("must not be null")
        return v


class StudentInDB(StudentBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    register_number: str
    class_year: int
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Student(StudentInDB):
    pass


class StudentStats(BaseModel):
    """Directory statistics; department names are standardized"""
    total: int
    active: int
    by_department: Dict[str, int]
    by_year: Dict[str, int]
