from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"

class StatusResponse(BaseModel):
    id: int
    name: str
    color: str
    sort_order: int
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True

class StatusCreate(BaseModel):
    """Input for a new catalog entry; omitted color/order fall back to defaults."""
    name: str = Field(min_length=1, max_length=100)
    color: Optional[str] = Field(default=None, pattern=HEX_COLOR_PATTERN)
    sort_order: Optional[int] = None

class StatusUpdate(BaseModel):
    """Full replacement of a status's mutable fields."""
    name: str = Field(min_length=1, max_length=100)
    color: str = Field(pattern=HEX_COLOR_PATTERN)
    sort_order: int
    is_active: bool
