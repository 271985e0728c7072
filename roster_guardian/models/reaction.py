"""
Reaction model for per-user, per-kind acknowledgments on comments.
"""

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from roster_guardian.database import Base


VALID_REACTION_TYPES = ["thumbs_up", "heart", "smile", "celebrate", "thinking"]


class Reaction(Base):
    """
    A user's reaction of one kind on one comment.

    A user may hold several different kinds on the same comment but never
    the same kind twice.
    """

    __tablename__ = "reactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    comment_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("comments.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False
    )
    reaction_type: Mapped[str] = mapped_column(String(20), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        server_default=func.now()
    )

    # Relationships
    comment: Mapped["Comment"] = relationship("Comment", back_populates="reactions")
    user: Mapped["User"] = relationship("User", back_populates="reactions")

    __table_args__ = (
        UniqueConstraint(
            "comment_id", "user_id", "reaction_type",
            name="uq_reaction_comment_user_type"
        ),
        CheckConstraint(
            f"reaction_type IN ({', '.join(repr(r) for r in VALID_REACTION_TYPES)})",
            name="check_valid_reaction_type"
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<Reaction(id={self.id}, comment_id={self.comment_id}, "
            f"user_id={self.user_id}, type={self.reaction_type})>"
        )
