"""
Database models for the Roster Guardian application.

This module exports all SQLAlchemy models and the value sets
used by their check constraints.
"""

from roster_guardian.models.user import User, VALID_ROLES
from roster_guardian.models.roster import RosterEntry
from roster_guardian.models.issue_status import (
    IssueStatus,
    DEFAULT_STATUSES,
    DEFAULT_STATUS_COLOR,
)
from roster_guardian.models.issue import Issue, IssueAttachment
from roster_guardian.models.comment import (
    Comment,
    CommentAttachment,
    COMMENT_TYPE_COMMENT,
    COMMENT_TYPE_STATUS_CHANGE,
    VALID_COMMENT_TYPES,
)
from roster_guardian.models.reaction import Reaction, VALID_REACTION_TYPES

# Export all models
__all__ = [
    "User",
    "RosterEntry",
    "IssueStatus",
    "Issue",
    "IssueAttachment",
    "Comment",
    "CommentAttachment",
    "Reaction",
    "VALID_ROLES",
    "DEFAULT_STATUSES",
    "DEFAULT_STATUS_COLOR",
    "COMMENT_TYPE_COMMENT",
    "COMMENT_TYPE_STATUS_CHANGE",
    "VALID_COMMENT_TYPES",
    "VALID_REACTION_TYPES",
]
