"""
IssueStatus model: the configurable catalog of states an issue may hold.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String, func, true
from sqlalchemy.orm import Mapped, mapped_column

from roster_guardian.database import Base


DEFAULT_STATUS_COLOR = "#6B7280"

# Seeded on first run: (name, color, sort_order)
DEFAULT_STATUSES = [
    ("open", "#EF4444", 1),
    ("investigation", "#F59E0B", 2),
    ("resolved", "#10B981", 3),
    ("closed", "#6B7280", 4),
]


class IssueStatus(Base):
    """
    A named issue state with presentation metadata.

    Statuses are rows, not an enum: administrators add, rename, reorder
    and deactivate them at runtime. sort_order orders presentation only;
    it does not restrict transitions.
    """

    __tablename__ = "issue_statuses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    color: Mapped[str] = mapped_column(
        String(20),
        default=DEFAULT_STATUS_COLOR,
        server_default=DEFAULT_STATUS_COLOR
    )
    sort_order: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        server_default=true(),
        index=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        server_default=func.now()
    )

    def __repr__(self) -> str:
        return (
            f"<IssueStatus(id={self.id}, name='{self.name}', "
            f"order={self.sort_order}, active={self.is_active})>"
        )
