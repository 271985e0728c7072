from pydantic import BaseModel, Field
from typing import Optional, List
import datetime as dt

from roster_guardian.schemas.common import UserSummary, AttachmentResponse
from roster_guardian.schemas.status import StatusResponse

class IssueCreate(BaseModel):
    """Input for reporting an issue against a date."""
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    date: dt.date
    creator_id: int

class IssueCreated(BaseModel):
    """Result of IssueLifecycle.create; the issue exists even if some files failed."""
    id: int
    title: str
    description: str
    date: dt.date
    status_id: int
    failed_attachments: List[str] = []

class IssueSummary(BaseModel):
    """Issue row for day and range listings."""
    id: int
    title: str
    description: str
    date: dt.date
    status_id: int
    status_name: str
    status_color: str
    created_by: int
    creator: UserSummary
    comment_count: int = 0
    created_at: dt.datetime

class IssueDetail(BaseModel):
    id: int
    title: str
    description: str
    date: dt.date
    created_by: int
    creator: UserSummary
    status: StatusResponse
    attachments: List[AttachmentResponse] = []
    created_at: dt.datetime

    class Config:
        from_attributes = True

class IssuesByDate(BaseModel):
    """Issues of one calendar date within a range listing."""
    date: dt.date
    issues: List[IssueSummary] = []

class StatusChangeResult(BaseModel):
    """
    Outcome of a status change request.

    changed is False when the issue already held the requested status;
    in that case nothing was written.
    """
    changed: bool
    message: str
    issue_id: int
    status_id: int
    status_name: str
    comment_id: Optional[int] = None

class IssueDeleted(BaseModel):
    """Result of deleting an issue; removed_files lists stored paths to clean up."""
    message: str
    removed_files: List[str] = []
