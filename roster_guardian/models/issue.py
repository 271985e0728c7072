"""
Issue and IssueAttachment models for day-scoped support issues.
"""

import datetime as dt
from typing import List, Optional

from sqlalchemy import Date, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from roster_guardian.database import Base


class Issue(Base):
    """
    A problem reported against a calendar date.

    status_id always references an existing IssueStatus; it only changes
    through IssueLifecycle.change_status, which logs every transition as a
    status_change comment.
    """

    __tablename__ = "issues"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)

    # Foreign keys
    created_by: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=False
    )
    status_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("issue_statuses.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )

    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime,
        default=dt.datetime.utcnow,
        server_default=func.now()
    )

    # Relationships
    creator: Mapped["User"] = relationship("User")
    status: Mapped["IssueStatus"] = relationship("IssueStatus")
    attachments: Mapped[List["IssueAttachment"]] = relationship(
        "IssueAttachment",
        back_populates="issue",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="IssueAttachment.id"
    )
    comments: Mapped[List["Comment"]] = relationship(
        "Comment",
        back_populates="issue",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Comment.id"
    )

    def __repr__(self) -> str:
        return f"<Issue(id={self.id}, date={self.date}, status_id={self.status_id}, title='{self.title[:50]}')>"


class IssueAttachment(Base):
    """File metadata for an attachment uploaded with an issue."""

    __tablename__ = "issue_attachments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    issue_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("issues.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # Generated stored path is the idempotency key for the metadata row
    file_path: Mapped[str] = mapped_column(String(500), unique=True, nullable=False)
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_type: Mapped[Optional[str]] = mapped_column(String(100))

    uploaded_at: Mapped[dt.datetime] = mapped_column(
        DateTime,
        default=dt.datetime.utcnow,
        server_default=func.now()
    )

    issue: Mapped["Issue"] = relationship("Issue", back_populates="attachments")

    def __repr__(self) -> str:
        return f"<IssueAttachment(id={self.id}, issue_id={self.issue_id}, file='{self.file_name}')>"
