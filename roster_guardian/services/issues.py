"""
Issue lifecycle manager.

This module provides the IssueLifecycle class that:
1. Creates day-scoped issues in the catalog's initial status
2. Persists issue attachments with partial-failure reporting
3. Changes issue status atomically together with its audit comment
4. Lists issues per day or date range and deletes them with their threads
"""

import datetime as dt
import logging
from itertools import groupby
from typing import List, Optional, Sequence

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload, selectinload

from roster_guardian.config import settings
from roster_guardian.errors import (
    ConflictError,
    InvalidInputError,
    InvalidStatusError,
    NotFoundError,
)
from roster_guardian.models import (
    COMMENT_TYPE_STATUS_CHANGE,
    Comment,
    CommentAttachment,
    Issue,
    IssueAttachment,
    IssueStatus,
    User,
)
from roster_guardian.schemas import (
    AttachmentUpload,
    IssueCreate,
    IssueCreated,
    IssueDeleted,
    IssueDetail,
    IssuesByDate,
    IssueSummary,
    StatusChangeResult,
    UserSummary,
)
from roster_guardian.services.attachments import AttachmentStore, persist_attachments
from roster_guardian.services.base import BaseService, storage_operation, validate_input
from roster_guardian.services.statuses import StatusCatalog

logger = logging.getLogger(__name__)

# Compare-and-set retries before a status change gives up with ConflictError
MAX_STATUS_CHANGE_ATTEMPTS = 3


def status_change_message(old_name: str, new_name: str) -> str:
    """Audit comment text for a status transition."""
    return f'Status changed from "{old_name}" to "{new_name}"'


class IssueLifecycle(BaseService):
    """Creates, lists, transitions and deletes issues."""

    def __init__(
        self,
        db: AsyncSession,
        attachment_store: Optional[AttachmentStore] = None,
        max_attachments: Optional[int] = None
    ):
        """
        Initialize the lifecycle manager.

        Args:
            db: Async database session
            attachment_store: Collaborator that writes attachment bytes;
                              without one every attachment is reported failed
            max_attachments: Per-issue file limit (defaults to settings)
        """
        super().__init__(db)
        self.attachment_store = attachment_store
        self.max_attachments = (
            settings.MAX_ATTACHMENTS if max_attachments is None else max_attachments
        )

    @storage_operation("create issue")
    async def create(
        self,
        title: str,
        description: str,
        date: dt.date,
        creator_id: int,
        attachments: Sequence[AttachmentUpload] = ()
    ) -> IssueCreated:
        """
        Report an issue against a date.

        The issue is committed before any attachment is stored. Attachment
        failures are listed in the result and never undo the issue.

        Args:
            title: Short summary
            description: Full description
            date: Calendar date the issue belongs to
            creator_id: Reporting user
            attachments: Files to attach

        Returns:
            IssueCreated with the initial status and failed attachment names

        Raises:
            InvalidInputError: If a field is missing or too many files are given
            NotFoundError: If the creator does not exist
            InvalidStatusError: If no active status exists
        """
        data = validate_input(
            IssueCreate, title=title, description=description, date=date, creator_id=creator_id
        )
        if len(attachments) > self.max_attachments:
            raise InvalidInputError(
                f"At most {self.max_attachments} attachments are allowed",
                context={"given": len(attachments)}
            )

        await self._get_or_raise(User, data.creator_id, "User")
        initial = await StatusCatalog(self.db).initial_status()

        issue = Issue(
            title=data.title,
            description=data.description,
            date=data.date,
            created_by=data.creator_id,
            status_id=initial.id,
        )
        self.db.add(issue)
        await self._commit()

        created = IssueCreated(
            id=issue.id,
            title=issue.title,
            description=issue.description,
            date=issue.date,
            status_id=issue.status_id,
        )
        logger.info(f"Created issue {created.id} for {created.date} in status '{initial.name}'")

        created.failed_attachments = await persist_attachments(
            self.db,
            self.attachment_store,
            IssueAttachment,
            "issue_id",
            created.id,
            attachments,
            settings.ISSUE_UPLOAD_PREFIX,
        )
        return created

    async def get(self, issue_id: int) -> IssueDetail:
        """
        Raises:
            NotFoundError: If the issue does not exist
        """
        result = await self.db.execute(
            select(Issue)
            .options(
                joinedload(Issue.creator),
                joinedload(Issue.status),
                selectinload(Issue.attachments),
            )
            .where(Issue.id == issue_id)
            .execution_options(populate_existing=True)
        )
        issue = result.scalar_one_or_none()
        if issue is None:
            raise NotFoundError("Issue not found", context={"issue_id": issue_id})
        return IssueDetail.model_validate(issue)

    async def list_for_date(self, date: dt.date) -> List[IssueSummary]:
        """Issues reported on one date, newest first."""
        return await self._summaries(Issue.date == date)

    async def list_range(self, start_date: dt.date, end_date: dt.date) -> List[IssuesByDate]:
        """
        Issues in an inclusive date range grouped by date.

        Dates ascend; within a date the newest issue comes first. Dates
        without issues are omitted.

        Raises:
            InvalidInputError: If start_date is after end_date
        """
        if start_date > end_date:
            raise InvalidInputError("start_date must not be after end_date")

        summaries = await self._summaries(Issue.date.between(start_date, end_date))
        summaries.sort(key=lambda s: s.date)
        return [
            IssuesByDate(date=day, issues=list(group))
            for day, group in groupby(summaries, key=lambda s: s.date)
        ]

    @storage_operation("change issue status")
    async def change_status(
        self,
        issue_id: int,
        new_status_id: int,
        acting_user_id: int
    ) -> StatusChangeResult:
        """
        Move an issue to another status and log the transition.

        Requesting the status the issue already holds is a no-op: nothing
        is written and the result has changed=False. Otherwise the status
        update and its status_change comment commit together or not at all.
        Any status may follow any other.

        The update only applies if the issue still holds the status read at
        the start; when a concurrent change wins, the request is evaluated
        again against the new state.

        Raises:
            NotFoundError: If the issue or acting user does not exist
            InvalidStatusError: If new_status_id is not in the catalog
            ConflictError: If concurrent changes kept winning
        """
        for attempt in range(1, MAX_STATUS_CHANGE_ATTEMPTS + 1):
            current_status_id = await self.db.scalar(
                select(Issue.status_id).where(Issue.id == issue_id)
            )
            if current_status_id is None:
                raise NotFoundError("Issue not found", context={"issue_id": issue_id})

            if current_status_id == new_status_id:
                current = await self.db.get(IssueStatus, current_status_id)
                return StatusChangeResult(
                    changed=False,
                    message=f'Status unchanged: issue is already "{current.name}"',
                    issue_id=issue_id,
                    status_id=current.id,
                    status_name=current.name,
                )

            new_status = await self.db.get(IssueStatus, new_status_id)
            if new_status is None:
                raise InvalidStatusError(
                    "Unknown issue status", context={"status_id": new_status_id}
                )
            await self._get_or_raise(User, acting_user_id, "User")
            old_status = await self.db.get(IssueStatus, current_status_id)

            # Capture before any rollback expires the loaded rows
            old_name, new_name = old_status.name, new_status.name

            result = await self.db.execute(
                update(Issue)
                .where(Issue.id == issue_id, Issue.status_id == current_status_id)
                .values(status_id=new_status_id)
            )
            if result.rowcount == 0:
                await self.db.rollback()
                logger.info(
                    f"Issue {issue_id} changed status concurrently "
                    f"(attempt {attempt}/{MAX_STATUS_CHANGE_ATTEMPTS}), re-reading"
                )
                continue

            message = status_change_message(old_name, new_name)
            comment = Comment(
                issue_id=issue_id,
                user_id=acting_user_id,
                content=message,
                comment_type=COMMENT_TYPE_STATUS_CHANGE,
                old_status_id=current_status_id,
                new_status_id=new_status_id,
            )
            self.db.add(comment)
            await self._commit()

            logger.info(f"Issue {issue_id}: {message} by user {acting_user_id}")
            return StatusChangeResult(
                changed=True,
                message=message,
                issue_id=issue_id,
                status_id=new_status_id,
                status_name=new_name,
                comment_id=comment.id,
            )

        raise ConflictError(
            "Issue status is being changed by someone else; try again",
            context={"issue_id": issue_id}
        )

    @storage_operation("delete issue")
    async def delete(self, issue_id: int) -> IssueDeleted:
        """
        Delete an issue with its comments, reactions and attachments.

        Returns:
            IssueDeleted listing stored file paths the caller should remove

        Raises:
            NotFoundError: If the issue does not exist
        """
        issue = await self._get_or_raise(Issue, issue_id, "Issue")

        issue_files = await self.db.execute(
            select(IssueAttachment.file_path).where(IssueAttachment.issue_id == issue_id)
        )
        comment_files = await self.db.execute(
            select(CommentAttachment.file_path)
            .join(Comment, CommentAttachment.comment_id == Comment.id)
            .where(Comment.issue_id == issue_id)
        )
        removed_files = list(issue_files.scalars().all()) + list(comment_files.scalars().all())

        # Children go through ON DELETE CASCADE
        await self.db.delete(issue)
        await self._commit()

        logger.info(f"Deleted issue {issue_id} ({len(removed_files)} attachment file(s) released)")
        return IssueDeleted(message="Issue deleted", removed_files=removed_files)

    async def _summaries(self, condition) -> List[IssueSummary]:
        comment_counts = (
            select(Comment.issue_id, func.count(Comment.id).label("comment_count"))
            .group_by(Comment.issue_id)
            .subquery()
        )
        result = await self.db.execute(
            select(Issue, func.coalesce(comment_counts.c.comment_count, 0))
            .outerjoin(comment_counts, comment_counts.c.issue_id == Issue.id)
            .options(joinedload(Issue.creator), joinedload(Issue.status))
            .where(condition)
            .order_by(Issue.created_at.desc(), Issue.id.desc())
            .execution_options(populate_existing=True)
        )

        return [
            IssueSummary(
                id=issue.id,
                title=issue.title,
                description=issue.description,
                date=issue.date,
                status_id=issue.status_id,
                status_name=issue.status.name,
                status_color=issue.status.color,
                created_by=issue.created_by,
                creator=UserSummary.model_validate(issue.creator),
                comment_count=count,
                created_at=issue.created_at,
            )
            for issue, count in result.all()
        ]


def get_issue_lifecycle(
    db: AsyncSession,
    attachment_store: Optional[AttachmentStore] = None
) -> IssueLifecycle:
    """Factory function to create an IssueLifecycle."""
    return IssueLifecycle(db, attachment_store=attachment_store)
