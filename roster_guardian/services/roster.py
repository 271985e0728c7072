"""
Roster assignment ledger: who is on support duty on which date.
"""

import datetime as dt
import logging
from itertools import groupby
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from roster_guardian.errors import ConflictError, InvalidInputError
from roster_guardian.models import RosterEntry, User
from roster_guardian.schemas import (
    MessageResponse,
    RosterAssign,
    RosterAssignment,
    RosterDay,
    RosterEntryResponse,
)
from roster_guardian.services.base import BaseService, storage_operation, validate_input

logger = logging.getLogger(__name__)


class RosterLedger(BaseService):
    """Assigns users to dates; a user appears at most once per date."""

    @storage_operation("assign roster")
    async def assign(self, user_id: int, date: dt.date) -> RosterEntryResponse:
        """
        Put a user on duty for a date.

        Args:
            user_id: User to assign
            date: Duty date (a date or an ISO "YYYY-MM-DD" string)

        Raises:
            InvalidInputError: If user_id or date is malformed
            NotFoundError: If the user does not exist
            ConflictError: If the user is already assigned to the date
        """
        data = validate_input(RosterAssign, user_id=user_id, date=date)
        await self._get_or_raise(User, data.user_id, "User")
        await self._ensure_slot_free(data.user_id, data.date)

        entry = RosterEntry(user_id=data.user_id, date=data.date)
        self.db.add(entry)
        await self._commit(self._conflict(data.user_id, data.date))

        logger.info(f"Assigned user {data.user_id} to {data.date} (roster {entry.id})")
        return RosterEntryResponse.model_validate(entry)

    @storage_operation("remove roster entry")
    async def unassign(self, roster_id: int) -> MessageResponse:
        """
        Raises:
            NotFoundError: If the entry does not exist
        """
        entry = await self._get_or_raise(RosterEntry, roster_id, "Roster entry")
        user_id, date = entry.user_id, entry.date

        await self.db.delete(entry)
        await self._commit()

        logger.info(f"Removed user {user_id} from {date} (roster {roster_id})")
        return MessageResponse(message="Roster entry removed")

    @storage_operation("update roster entry")
    async def reassign(self, roster_id: int, user_id: int, date: dt.date) -> RosterEntryResponse:
        """
        Move an entry to another user and/or date.

        Raises:
            InvalidInputError: If user_id or date is malformed
            NotFoundError: If the entry or user does not exist
            ConflictError: If the target user is already assigned to the date
        """
        data = validate_input(RosterAssign, user_id=user_id, date=date)
        entry = await self._get_or_raise(RosterEntry, roster_id, "Roster entry")
        await self._get_or_raise(User, data.user_id, "User")
        await self._ensure_slot_free(data.user_id, data.date, exclude_id=roster_id)

        entry.user_id = data.user_id
        entry.date = data.date
        await self._commit(self._conflict(data.user_id, data.date))

        logger.info(f"Roster {roster_id} now assigns user {data.user_id} to {data.date}")
        return RosterEntryResponse.model_validate(entry)

    async def list_range(self, start_date: dt.date, end_date: dt.date) -> List[RosterDay]:
        """
        Assignments in an inclusive date range, grouped by date and ordered
        by assignee name within each date.

        Raises:
            InvalidInputError: If start_date is after end_date
        """
        if start_date > end_date:
            raise InvalidInputError("start_date must not be after end_date")

        result = await self.db.execute(
            select(RosterEntry, User)
            .join(User, RosterEntry.user_id == User.id)
            .where(RosterEntry.date.between(start_date, end_date))
            .order_by(RosterEntry.date, User.name, RosterEntry.id)
        )
        assignments = [
            RosterAssignment(
                id=entry.id,
                user_id=user.id,
                date=entry.date,
                name=user.name,
                email=user.email,
                role=user.role,
                profile_image=user.profile_image,
                contact_number=user.contact_number,
                bio=user.bio,
            )
            for entry, user in result.all()
        ]
        return [
            RosterDay(date=day, assignments=list(group))
            for day, group in groupby(assignments, key=lambda a: a.date)
        ]

    async def _ensure_slot_free(self, user_id: int, date: dt.date, exclude_id: Optional[int] = None) -> None:
        query = select(RosterEntry.id).where(
            RosterEntry.user_id == user_id,
            RosterEntry.date == date,
        )
        if exclude_id is not None:
            query = query.where(RosterEntry.id != exclude_id)
        if await self.db.scalar(query) is not None:
            raise self._conflict(user_id, date)

    @staticmethod
    def _conflict(user_id: int, date: dt.date) -> ConflictError:
        return ConflictError(
            "User is already assigned to this date",
            context={"user_id": user_id, "date": str(date)}
        )


def get_roster_ledger(db: AsyncSession) -> RosterLedger:
    """Factory function to create a RosterLedger."""
    return RosterLedger(db)
