"""
User model for support staff and administrators.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import CheckConstraint, DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from roster_guardian.database import Base


VALID_ROLES = ["developer", "qa", "support", "admin"]


class User(Base):
    """
    A person who can be rostered, report issues and comment.

    The password column holds an opaque credential hash produced outside
    this package; it is stored and returned, never interpreted.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False)

    # Profile fields
    profile_image: Mapped[Optional[str]] = mapped_column(String(500))
    contact_number: Mapped[Optional[str]] = mapped_column(String(50))
    bio: Mapped[Optional[str]] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        server_default=func.now()
    )

    # Relationships (deleted with the user; authored issues and comments are not)
    roster_entries: Mapped[List["RosterEntry"]] = relationship(
        "RosterEntry",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True
    )
    reactions: Mapped[List["Reaction"]] = relationship(
        "Reaction",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True
    )

    __table_args__ = (
        CheckConstraint(
            f"role IN ({', '.join(repr(r) for r in VALID_ROLES)})",
            name="check_valid_role"
        ),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', role={self.role})>"
