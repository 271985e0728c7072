"""
Comment and CommentAttachment models for issue discussion threads.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from roster_guardian.database import Base


COMMENT_TYPE_COMMENT = "comment"
COMMENT_TYPE_STATUS_CHANGE = "status_change"
VALID_COMMENT_TYPES = [COMMENT_TYPE_COMMENT, COMMENT_TYPE_STATUS_CHANGE]


class Comment(Base):
    """
    An append-only entry in an issue's thread.

    Plain comments are written by users. status_change comments are the
    audit trail written by the lifecycle manager and carry the old and new
    status ids; the content keeps the status names so the sentence survives
    a later status deletion.
    """

    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    issue_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("issues.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=False
    )

    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    comment_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=COMMENT_TYPE_COMMENT,
        server_default=COMMENT_TYPE_COMMENT
    )

    # Only set for status_change comments
    old_status_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("issue_statuses.id", ondelete="SET NULL"),
        nullable=True
    )
    new_status_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("issue_statuses.id", ondelete="SET NULL"),
        nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        server_default=func.now(),
        index=True
    )

    # Relationships
    issue: Mapped["Issue"] = relationship("Issue", back_populates="comments")
    author: Mapped["User"] = relationship("User")
    old_status: Mapped[Optional["IssueStatus"]] = relationship(
        "IssueStatus",
        foreign_keys=[old_status_id]
    )
    new_status: Mapped[Optional["IssueStatus"]] = relationship(
        "IssueStatus",
        foreign_keys=[new_status_id]
    )
    attachments: Mapped[List["CommentAttachment"]] = relationship(
        "CommentAttachment",
        back_populates="comment",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="CommentAttachment.id"
    )
    reactions: Mapped[List["Reaction"]] = relationship(
        "Reaction",
        back_populates="comment",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Reaction.id"
    )

    __table_args__ = (
        CheckConstraint(
            f"comment_type IN ({', '.join(repr(t) for t in VALID_COMMENT_TYPES)})",
            name="check_valid_comment_type"
        ),
        CheckConstraint(
            "comment_type = 'status_change' OR "
            "(old_status_id IS NULL AND new_status_id IS NULL)",
            name="check_plain_comment_has_no_status"
        ),
        CheckConstraint(
            "old_status_id IS NULL OR new_status_id IS NULL OR old_status_id <> new_status_id",
            name="check_status_change_differs"
        ),
    )

    @property
    def is_status_change(self) -> bool:
        return self.comment_type == COMMENT_TYPE_STATUS_CHANGE

    def __repr__(self) -> str:
        return (
            f"<Comment(id={self.id}, issue_id={self.issue_id}, "
            f"type={self.comment_type}, content='{self.content[:50]}')>"
        )


class CommentAttachment(Base):
    """File metadata for an attachment uploaded with a comment."""

    __tablename__ = "comment_attachments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    comment_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("comments.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    file_path: Mapped[str] = mapped_column(String(500), unique=True, nullable=False)
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_type: Mapped[Optional[str]] = mapped_column(String(100))

    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        server_default=func.now()
    )

    comment: Mapped["Comment"] = relationship("Comment", back_populates="attachments")

    def __repr__(self) -> str:
        return f"<CommentAttachment(id={self.id}, comment_id={self.comment_id}, file='{self.file_name}')>"
