from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime
from enum import Enum

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

class RoleEnum(str, Enum):
    DEVELOPER = "developer"
    QA = "qa"
    SUPPORT = "support"
    ADMIN = "admin"

class UserCreate(BaseModel):
    email: str = Field(pattern=EMAIL_PATTERN, max_length=255)
    password_hash: str = Field(min_length=1, max_length=255)
    name: str = Field(min_length=1, max_length=255)
    role: RoleEnum
    profile_image: Optional[str] = Field(default=None, max_length=500)
    contact_number: Optional[str] = Field(default=None, max_length=50)
    bio: Optional[str] = None

class UserUpdate(BaseModel):
    """Partial update; only fields that are set are written. Unknown fields are rejected."""
    model_config = ConfigDict(extra="forbid")

    email: Optional[str] = Field(default=None, pattern=EMAIL_PATTERN, max_length=255)
    password_hash: Optional[str] = Field(default=None, min_length=1, max_length=255)
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    role: Optional[RoleEnum] = None
    profile_image: Optional[str] = Field(default=None, max_length=500)
    contact_number: Optional[str] = Field(default=None, max_length=50)
    bio: Optional[str] = None

class UserResponse(BaseModel):
    """Public user fields; never includes the credential hash."""
    id: int
    email: str
    name: str
    role: RoleEnum
    profile_image: Optional[str] = None
    contact_number: Optional[str] = None
    bio: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True

class UserCredentials(BaseModel):
    """Lookup result for the login collaborator, which verifies the hash itself."""
    id: int
    email: str
    name: str
    role: RoleEnum
    password_hash: str
