"""
Session report schemas - day/session groupings derived at read time
"""
from typing import Optional, List, Literal
from datetime import datetime, date as DateType
from pydantic import BaseModel, Field


class SessionEntry(BaseModel):
    record_id: int
    student_id: int
    student_name: str
    register_number: str
    department: str
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None
    session: Optional[Literal["session1", "session2"]] = None
    status: str = "present"
    notes: Optional[str] = None
    session_duration: Optional[str] = None  # "2h 30m"; None while open


class DaySessionAggregate(BaseModel):
    date: DateType
    session1: List[SessionEntry] = Field(default_factory=list)
    session2: List[SessionEntry] = Field(default_factory=list)
    present: List[SessionEntry] = Field(default_factory=list)  # Open records
    session1_count: int = 0
    session2_count: int = 0
    total_students: int = 0


class SessionStats(BaseModel):
    total_days: int
    total_sessions: int
    session1_total: int
    session2_total: int
