from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime
from enum import Enum

from roster_guardian.schemas.common import UserSummary, AttachmentResponse

class CommentTypeEnum(str, Enum):
    COMMENT = "comment"
    STATUS_CHANGE = "status_change"

class ReactionTypeEnum(str, Enum):
    THUMBS_UP = "thumbs_up"
    HEART = "heart"
    SMILE = "smile"
    CELEBRATE = "celebrate"
    THINKING = "thinking"

class CommentCreated(BaseModel):
    id: int
    content: str
    failed_attachments: List[str] = []

class ReactionGroup(BaseModel):
    """All reactions of one kind on a comment."""
    reaction_type: ReactionTypeEnum
    count: int
    users: List[UserSummary] = []

class CommentResponse(BaseModel):
    """A thread entry with everything needed to render it."""
    id: int
    issue_id: int
    content: str
    comment_type: CommentTypeEnum
    author: UserSummary
    old_status_id: Optional[int] = None
    old_status_name: Optional[str] = None
    new_status_id: Optional[int] = None
    new_status_name: Optional[str] = None
    attachments: List[AttachmentResponse] = []
    reactions: List[ReactionGroup] = []
    created_at: datetime

class ReactionResponse(BaseModel):
    """
    Reaction row returned by react.

    created is False when the same user already held this kind on the comment.
    """
    id: int
    comment_id: int
    user_id: int
    reaction_type: ReactionTypeEnum
    created: bool = True

    class Config:
        from_attributes = True
