from pydantic import BaseModel
from typing import Optional, List
import datetime as dt

class RosterAssign(BaseModel):
    """Input for putting a user on duty for a date."""
    user_id: int
    date: dt.date

class RosterEntryResponse(BaseModel):
    id: int
    user_id: int
    date: dt.date

    class Config:
        from_attributes = True

class RosterAssignment(BaseModel):
    """A roster entry joined with the assignee's display fields."""
    id: int
    user_id: int
    date: dt.date
    name: str
    email: str
    role: str
    profile_image: Optional[str] = None
    contact_number: Optional[str] = None
    bio: Optional[str] = None

class RosterDay(BaseModel):
    """Everyone on duty for one date, ordered by name."""
    date: dt.date
    assignments: List[RosterAssignment] = []
