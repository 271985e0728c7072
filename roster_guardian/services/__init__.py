"""
Services module for the roster, issue and comment business logic.
"""

from roster_guardian.services.attachments import (
    AttachmentStore,
    generate_stored_name,
    persist_attachments
)
from roster_guardian.services.statuses import (
    StatusCatalog,
    get_status_catalog
)
from roster_guardian.services.issues import (
    IssueLifecycle,
    get_issue_lifecycle
)
from roster_guardian.services.comments import (
    CommentLedger,
    get_comment_ledger
)
from roster_guardian.services.roster import (
    RosterLedger,
    get_roster_ledger
)
from roster_guardian.services.users import (
    UserDirectory,
    get_user_directory
)

__all__ = [
    "AttachmentStore",
    "generate_stored_name",
    "persist_attachments",
    "StatusCatalog",
    "get_status_catalog",
    "IssueLifecycle",
    "get_issue_lifecycle",
    "CommentLedger",
    "get_comment_ledger",
    "RosterLedger",
    "get_roster_ledger",
    "UserDirectory",
    "get_user_directory"
]
