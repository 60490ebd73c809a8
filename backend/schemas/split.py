from pydantic import BaseModel
from typing import List

# Request schema for splitting a shared line between diners
class SplitCreate(BaseModel):
    line_id: int
    participants: List[str]

# Request schema for replacing a split's participants
class SplitParticipantsUpdate(BaseModel):
    participants: List[str]

# Response schema for one diner's part of a shared line
class ShareOut(BaseModel):
    line_id: int
    diner_name: str
    amount: float
