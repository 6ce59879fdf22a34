"""
Student Model - Directory of registered students
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from atams.db import Base


class Student(Base):
    """Student model - Table: students"""
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    register_number = Column(String(50), nullable=False, unique=True, index=True)  # Business key, immutable
    class_year = Column(Integer, nullable=False)
    department = Column(String(100), nullable=False)
    aadhar_number = Column(String(20), nullable=False, default="")
    phone_number = Column(String(20), nullable=False, default="")
    email = Column(String(255), nullable=False, default="")
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, onupdate=func.now(), nullable=True)

    attendance_records = relationship(
        "AttendanceRecord",
        back_populates="student",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
