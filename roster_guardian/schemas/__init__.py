from roster_guardian.schemas.common import (
    MessageResponse, UserSummary, AttachmentResponse, AttachmentUpload
)
from roster_guardian.schemas.status import StatusResponse, StatusCreate, StatusUpdate
from roster_guardian.schemas.issue import (
    IssueCreate, IssueCreated, IssueSummary, IssueDetail, IssuesByDate,
    StatusChangeResult, IssueDeleted
)
from roster_guardian.schemas.comment import (
    CommentCreated, CommentResponse, ReactionGroup, ReactionResponse,
    CommentTypeEnum, ReactionTypeEnum
)
from roster_guardian.schemas.roster import (
    RosterAssign, RosterEntryResponse, RosterAssignment, RosterDay
)
from roster_guardian.schemas.user import (
    UserCreate, UserUpdate, UserResponse, UserCredentials, RoleEnum
)

__all__ = [
    # Common
    "MessageResponse",
    "UserSummary",
    "AttachmentResponse",
    "AttachmentUpload",
    # Status
    "StatusResponse",
    "StatusCreate",
    "StatusUpdate",
    # Issue
    "IssueCreate",
    "IssueCreated",
    "IssueSummary",
    "IssueDetail",
    "IssuesByDate",
    "StatusChangeResult",
    "IssueDeleted",
    # Comment
    "CommentCreated",
    "CommentResponse",
    "ReactionGroup",
    "ReactionResponse",
    "CommentTypeEnum",
    "ReactionTypeEnum",
    # Roster
    "RosterAssign",
    "RosterEntryResponse",
    "RosterAssignment",
    "RosterDay",
    # User
    "UserCreate",
    "UserUpdate",
    "UserResponse",
    "UserCredentials",
    "RoleEnum",
]
