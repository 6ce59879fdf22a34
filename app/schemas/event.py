"""
Event Schemas for the refresh feed
"""
from typing import Dict, Any, List, Optional
from datetime import datetime
from pydantic import BaseModel


class EventOut(BaseModel):
    seq: int
    type: str
    payload: Dict[str, Any]
    occurred_at: datetime


class EventFeed(BaseModel):
    events: List[EventOut]
    last_seq: int
    oldest_seq: Optional[int] = None  # Oldest event still held; None while empty
    truncated: bool = False  # Events after `after` were lost; reload everything
