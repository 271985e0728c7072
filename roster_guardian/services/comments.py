"""
Comment and reaction ledger for issue threads.
"""

import logging
from typing import Dict, List, Optional, Sequence

from sqlalchemy import and_, delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload, selectinload

from roster_guardian.config import settings
from roster_guardian.errors import InternalError, InvalidInputError, NotFoundError
from roster_guardian.models import (
    COMMENT_TYPE_COMMENT,
    VALID_REACTION_TYPES,
    Comment,
    CommentAttachment,
    Issue,
    Reaction,
    User,
)
from roster_guardian.schemas import (
    AttachmentResponse,
    AttachmentUpload,
    CommentCreated,
    CommentResponse,
    MessageResponse,
    ReactionGroup,
    ReactionResponse,
    UserSummary,
)
from roster_guardian.services.attachments import AttachmentStore, persist_attachments
from roster_guardian.services.base import BaseService, storage_operation

logger = logging.getLogger(__name__)


class CommentLedger(BaseService):
    """Appends comments to issue threads and tracks reactions on them."""

    def __init__(
        self,
        db: AsyncSession,
        attachment_store: Optional[AttachmentStore] = None,
        max_attachments: Optional[int] = None
    ):
        """
        Args:
            db: Async database session
            attachment_store: Collaborator that writes attachment bytes
            max_attachments: Per-comment file limit (defaults to settings)
        """
        super().__init__(db)
        self.attachment_store = attachment_store
        self.max_attachments = (
            settings.MAX_ATTACHMENTS if max_attachments is None else max_attachments
        )

    @storage_operation("add comment")
    async def add_comment(
        self,
        issue_id: int,
        author_id: int,
        content: Optional[str],
        attachments: Sequence[AttachmentUpload] = ()
    ) -> CommentCreated:
        """
        Append a plain comment to an issue thread.

        A comment needs text, files, or both. The comment commits before its
        attachments are stored; attachment failures are reported, not raised.

        Raises:
            InvalidInputError: If content is blank and no files are given,
                               or too many files are given
            NotFoundError: If the issue or author does not exist
        """
        content = content or ""
        if not content.strip() and not attachments:
            raise InvalidInputError("Comment must have content or attachments")
        if len(attachments) > self.max_attachments:
            raise InvalidInputError(
                f"At most {self.max_attachments} attachments are allowed",
                context={"given": len(attachments)}
            )

        await self._get_or_raise(Issue, issue_id, "Issue")
        await self._get_or_raise(User, author_id, "User")

        comment = Comment(
            issue_id=issue_id,
            user_id=author_id,
            content=content,
            comment_type=COMMENT_TYPE_COMMENT,
        )
        self.db.add(comment)
        await self._commit()

        created = CommentCreated(id=comment.id, content=comment.content)
        logger.info(f"User {author_id} commented on issue {issue_id} (comment {created.id})")

        created.failed_attachments = await persist_attachments(
            self.db,
            self.attachment_store,
            CommentAttachment,
            "comment_id",
            created.id,
            attachments,
            settings.COMMENT_UPLOAD_PREFIX,
        )
        return created

    async def list_for_issue(self, issue_id: int) -> List[CommentResponse]:
        """
        The full thread of an issue, oldest first.

        Each entry carries its author, status transition (for audit entries),
        attachments and reactions grouped by kind.

        Raises:
            NotFoundError: If the issue does not exist
        """
        await self._get_or_raise(Issue, issue_id, "Issue")

        result = await self.db.execute(
            select(Comment)
            .options(
                joinedload(Comment.author),
                joinedload(Comment.old_status),
                joinedload(Comment.new_status),
                selectinload(Comment.attachments),
                selectinload(Comment.reactions).joinedload(Reaction.user),
            )
            .where(Comment.issue_id == issue_id)
            .order_by(Comment.created_at.asc(), Comment.id.asc())
            .execution_options(populate_existing=True)
        )
        return [self._to_response(c) for c in result.scalars().unique().all()]

    @storage_operation("add reaction")
    async def react(self, comment_id: int, user_id: int, reaction_type: str) -> ReactionResponse:
        """
        Add a reaction; reacting twice with the same kind changes nothing.

        Returns:
            ReactionResponse with created=False if the reaction already existed

        Raises:
            InvalidInputError: If reaction_type is unknown
            NotFoundError: If the comment or user does not exist
        """
        self._check_reaction_type(reaction_type)
        await self._get_or_raise(Comment, comment_id, "Comment")
        await self._get_or_raise(User, user_id, "User")

        existing = await self._find_reaction(comment_id, user_id, reaction_type)
        if existing is not None:
            return ReactionResponse(
                id=existing.id,
                comment_id=comment_id,
                user_id=user_id,
                reaction_type=reaction_type,
                created=False,
            )

        reaction = Reaction(comment_id=comment_id, user_id=user_id, reaction_type=reaction_type)
        self.db.add(reaction)
        try:
            await self.db.commit()
        except IntegrityError as e:
            # Lost an insert race against the same reaction
            await self.db.rollback()
            existing = await self._find_reaction(comment_id, user_id, reaction_type)
            if existing is None:
                raise InternalError("Could not add reaction") from e
            return ReactionResponse(
                id=existing.id,
                comment_id=comment_id,
                user_id=user_id,
                reaction_type=reaction_type,
                created=False,
            )

        logger.info(f"User {user_id} reacted '{reaction_type}' on comment {comment_id}")
        return ReactionResponse.model_validate(reaction)

    @storage_operation("remove reaction")
    async def unreact(self, comment_id: int, user_id: int, reaction_type: str) -> MessageResponse:
        """
        Remove a reaction.

        Raises:
            InvalidInputError: If reaction_type is unknown
            NotFoundError: If the user holds no such reaction on the comment
        """
        self._check_reaction_type(reaction_type)

        result = await self.db.execute(
            delete(Reaction).where(
                and_(
                    Reaction.comment_id == comment_id,
                    Reaction.user_id == user_id,
                    Reaction.reaction_type == reaction_type,
                )
            )
        )
        if result.rowcount == 0:
            raise NotFoundError(
                "Reaction not found",
                context={"comment_id": comment_id, "user_id": user_id, "type": reaction_type}
            )
        await self._commit()

        logger.info(f"User {user_id} removed '{reaction_type}' from comment {comment_id}")
        return MessageResponse(message="Reaction removed")

    async def _find_reaction(
        self,
        comment_id: int,
        user_id: int,
        reaction_type: str
    ) -> Optional[Reaction]:
        result = await self.db.execute(
            select(Reaction).where(
                Reaction.comment_id == comment_id,
                Reaction.user_id == user_id,
                Reaction.reaction_type == reaction_type,
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    def _check_reaction_type(reaction_type: str) -> None:
        if reaction_type not in VALID_REACTION_TYPES:
            raise InvalidInputError(
                f"Unknown reaction type '{reaction_type}'",
                context={"allowed": VALID_REACTION_TYPES}
            )

    @staticmethod
    def _to_response(comment: Comment) -> CommentResponse:
        # Groups appear in the order their first reaction was added
        groups: Dict[str, ReactionGroup] = {}
        for reaction in comment.reactions:
            group = groups.setdefault(
                reaction.reaction_type,
                ReactionGroup(reaction_type=reaction.reaction_type, count=0)
            )
            group.count += 1
            group.users.append(UserSummary.model_validate(reaction.user))

        return CommentResponse(
            id=comment.id,
            issue_id=comment.issue_id,
            content=comment.content,
            comment_type=comment.comment_type,
            author=UserSummary.model_validate(comment.author),
            old_status_id=comment.old_status_id,
            old_status_name=comment.old_status.name if comment.old_status else None,
            new_status_id=comment.new_status_id,
            new_status_name=comment.new_status.name if comment.new_status else None,
            attachments=[AttachmentResponse.model_validate(a) for a in comment.attachments],
            reactions=list(groups.values()),
            created_at=comment.created_at,
        )


def get_comment_ledger(
    db: AsyncSession,
    attachment_store: Optional[AttachmentStore] = None
) -> CommentLedger:
    """Factory function to create a CommentLedger."""
    return CommentLedger(db, attachment_store=attachment_store)
