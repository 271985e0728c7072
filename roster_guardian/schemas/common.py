from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

class MessageResponse(BaseModel):
    """Simple message response."""
    message: str

class UserSummary(BaseModel):
    """Display fields of a user shown next to issues, comments and reactions."""
    id: int
    name: str
    email: str
    profile_image: Optional[str] = None

    class Config:
        from_attributes = True

class AttachmentResponse(BaseModel):
    """Stored attachment metadata (issue or comment)."""
    id: int
    file_path: str
    file_name: str
    file_type: Optional[str] = None
    uploaded_at: datetime

    class Config:
        from_attributes = True

class AttachmentUpload(BaseModel):
    """A file handed to the core by the upload collaborator; bytes are never inspected."""
    file_name: str = Field(min_length=1, max_length=255)
    content_type: Optional[str] = None
    data: bytes = b""
