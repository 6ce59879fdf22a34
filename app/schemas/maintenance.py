"""
Maintenance Schemas for destructive attendance operations
"""
from typing import Optional
from datetime import date as DateType
from pydantic import BaseModel


class DeleteResult(BaseModel):
    """Delete operation result"""
    deleted_count: int
    message: str


class DeleteSessionRequest(BaseModel):
    date: DateType
    session: str


class DeleteDateRequest(BaseModel):
    date: DateType


class DeleteDateResult(DeleteResult):
    date: DateType
    session1_count: int
    session2_count: int
    session: Optional[str] = None
