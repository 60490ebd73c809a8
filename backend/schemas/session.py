from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from models.dining_session import SessionStatus

# Input schema for staff opening a table
class SessionCreate(BaseModel):
    table_number: int = Field(gt=0)
    started_by_name: Optional[str] = None

# Input schema for a diner joining after scanning the table QR code
class DinerJoin(BaseModel):
    name: str = Field(min_length=1, max_length=100)

class DinerOut(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True

class SessionOut(BaseModel):
    id: int
    table_number: int
    status: SessionStatus
    started_by_name: Optional[str] = None
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    diners: List[DinerOut]

    class Config:
        from_attributes = True

class ParticipantsOut(BaseModel):
    participants: List[str]
    count: int

# Optional body when closing a session
class SessionClose(BaseModel):
    status: SessionStatus = SessionStatus.COMPLETED
