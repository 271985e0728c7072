"""
RosterEntry model: one user on duty for one calendar date.
"""

import datetime as dt

from sqlalchemy import Date, DateTime, ForeignKey, Integer, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from roster_guardian.database import Base


class RosterEntry(Base):
    """Assignment of a user to support duty on a date."""

    __tablename__ = "roster"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)

    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime,
        default=dt.datetime.utcnow,
        server_default=func.now()
    )

    user: Mapped["User"] = relationship("User", back_populates="roster_entries")

    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_roster_user_date"),
    )

    def __repr__(self) -> str:
        return f"<RosterEntry(id={self.id}, user_id={self.user_id}, date={self.date})>"
