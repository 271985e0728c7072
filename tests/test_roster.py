"""
Tests for the roster assignment ledger.

Tests cover:
- Assigning users to dates with the one-slot-per-user-per-date rule
- Removing and moving assignments
- Range listings grouped by date and ordered by name
"""

import datetime as dt

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from roster_guardian.errors import ConflictError, InvalidInputError, NotFoundError
from roster_guardian.services import RosterLedger


@pytest.mark.asyncio
@pytest.mark.database
@pytest.mark.roster
class TestAssign:
    """Test suite for RosterLedger.assign."""

    async def test_assign_user(self, db_session: AsyncSession, create_user):
        """Test putting a user on duty."""
        user = await create_user()

        entry = await RosterLedger(db_session).assign(user.id, dt.date(2024, 1, 15))

        assert entry.id is not None
        assert entry.user_id == user.id
        assert entry.date == dt.date(2024, 1, 15)

    async def test_duplicate_assignment_conflicts(self, db_session: AsyncSession, create_user):
        """Test that user 7 can be on 2024-01-15 only once."""
        await create_user(id=7)
        ledger = RosterLedger(db_session)
        await ledger.assign(7, dt.date(2024, 1, 15))

        with pytest.raises(ConflictError) as exc_info:
            await ledger.assign(7, dt.date(2024, 1, 15))

        assert exc_info.value.kind == "conflict"
        days = await ledger.list_range(dt.date(2024, 1, 15), dt.date(2024, 1, 15))
        assert len(days) == 1
        assert [a.user_id for a in days[0].assignments] == [7]

    async def test_same_user_on_different_dates(self, db_session: AsyncSession, create_user):
        """Test that uniqueness is per date."""
        user = await create_user()
        ledger = RosterLedger(db_session)

        await ledger.assign(user.id, dt.date(2024, 1, 15))
        await ledger.assign(user.id, dt.date(2024, 1, 16))

        days = await ledger.list_range(dt.date(2024, 1, 15), dt.date(2024, 1, 16))
        assert [d.date for d in days] == [dt.date(2024, 1, 15), dt.date(2024, 1, 16)]

    async def test_assign_with_iso_date_string(self, db_session: AsyncSession, create_user):
        """Test that an ISO date string is parsed into a date."""
        user = await create_user()
        ledger = RosterLedger(db_session)

        entry = await ledger.assign(user.id, "2024-01-15")

        assert entry.date == dt.date(2024, 1, 15)
        with pytest.raises(ConflictError):
            await ledger.assign(user.id, dt.date(2024, 1, 15))

    @pytest.mark.parametrize("bad_date", ["not-a-date", "2024-13-40", None])
    async def test_assign_with_malformed_date(self, db_session: AsyncSession, create_user, bad_date):
        """Test that malformed dates are invalid input, not storage errors."""
        user = await create_user()

        with pytest.raises(InvalidInputError) as exc_info:
            await RosterLedger(db_session).assign(user.id, bad_date)

        assert exc_info.value.kind == "invalid_input"
        assert "date" in exc_info.value.message

    async def test_assign_unknown_user(self, db_session: AsyncSession):
        """Test assigning a user that does not exist."""
        with pytest.raises(NotFoundError):
            await RosterLedger(db_session).assign(999, dt.date(2024, 1, 15))


@pytest.mark.asyncio
@pytest.mark.database
@pytest.mark.roster
class TestUnassignAndReassign:
    """Test suite for unassign/reassign."""

    async def test_unassign(self, db_session: AsyncSession, create_user):
        """Test removing an assignment."""
        user = await create_user()
        ledger = RosterLedger(db_session)
        entry = await ledger.assign(user.id, dt.date(2024, 1, 15))

        result = await ledger.unassign(entry.id)

        assert result.message == "Roster entry removed"
        assert await ledger.list_range(dt.date(2024, 1, 15), dt.date(2024, 1, 15)) == []

    async def test_unassign_missing_entry(self, db_session: AsyncSession):
        """Test removing an entry that does not exist."""
        with pytest.raises(NotFoundError):
            await RosterLedger(db_session).unassign(999)

    async def test_reassign_moves_entry(self, db_session: AsyncSession, create_user):
        """Test moving an entry to another user and date."""
        first = await create_user()
        second = await create_user()
        ledger = RosterLedger(db_session)
        entry = await ledger.assign(first.id, dt.date(2024, 1, 15))

        moved = await ledger.reassign(entry.id, second.id, dt.date(2024, 1, 17))

        assert moved.id == entry.id
        assert moved.user_id == second.id
        assert moved.date == dt.date(2024, 1, 17)

    async def test_reassign_to_same_slot(self, db_session: AsyncSession, create_user):
        """Test that an entry does not conflict with itself."""
        user = await create_user()
        ledger = RosterLedger(db_session)
        entry = await ledger.assign(user.id, dt.date(2024, 1, 15))

        same = await ledger.reassign(entry.id, user.id, dt.date(2024, 1, 15))

        assert same.id == entry.id

    async def test_reassign_into_taken_slot_conflicts(self, db_session: AsyncSession, create_user):
        """Test that moving onto an existing (user, date) fails."""
        user = await create_user()
        ledger = RosterLedger(db_session)
        await ledger.assign(user.id, dt.date(2024, 1, 15))
        other = await ledger.assign(user.id, dt.date(2024, 1, 16))

        with pytest.raises(ConflictError):
            await ledger.reassign(other.id, user.id, dt.date(2024, 1, 15))

    async def test_reassign_with_malformed_date(self, db_session: AsyncSession, create_user):
        """Test that a malformed target date is rejected and the entry kept."""
        user = await create_user()
        ledger = RosterLedger(db_session)
        entry = await ledger.assign(user.id, dt.date(2024, 1, 15))
        entry_id, user_id = entry.id, user.id

        with pytest.raises(InvalidInputError):
            await ledger.reassign(entry_id, user_id, "someday")

        days = await ledger.list_range(dt.date(2024, 1, 15), dt.date(2024, 1, 15))
        assert [a.id for a in days[0].assignments] == [entry_id]

    async def test_reassign_with_iso_date_string(self, db_session: AsyncSession, create_user):
        """Test moving an entry to a date given as an ISO string."""
        user = await create_user()
        ledger = RosterLedger(db_session)
        entry = await ledger.assign(user.id, dt.date(2024, 1, 15))

        moved = await ledger.reassign(entry.id, user.id, "2024-01-20")

        assert moved.date == dt.date(2024, 1, 20)

    async def test_reassign_missing_entry(self, db_session: AsyncSession, create_user):
        """Test moving an entry that does not exist."""
        user = await create_user()

        with pytest.raises(NotFoundError):
            await RosterLedger(db_session).reassign(999, user.id, dt.date(2024, 1, 15))

    async def test_reassign_unknown_user(self, db_session: AsyncSession, create_user):
        """Test moving an entry to a user that does not exist."""
        user = await create_user()
        ledger = RosterLedger(db_session)
        entry = await ledger.assign(user.id, dt.date(2024, 1, 15))

        with pytest.raises(NotFoundError):
            await ledger.reassign(entry.id, 999, dt.date(2024, 1, 15))


@pytest.mark.asyncio
@pytest.mark.database
@pytest.mark.roster
class TestListRange:
    """Test suite for RosterLedger.list_range."""

    async def test_grouped_by_date_and_ordered_by_name(self, db_session: AsyncSession, create_user):
        """Test grouping and ordering of the range listing."""
        zoe = await create_user(name="Zoe Quinn", role="developer")
        adam = await create_user(name="Adam Park", role="qa", profile_image="uploads/adam.png")
        ledger = RosterLedger(db_session)
        await ledger.assign(zoe.id, dt.date(2024, 1, 16))
        await ledger.assign(zoe.id, dt.date(2024, 1, 15))
        await ledger.assign(adam.id, dt.date(2024, 1, 15))
        await ledger.assign(adam.id, dt.date(2024, 1, 30))

        days = await ledger.list_range(dt.date(2024, 1, 15), dt.date(2024, 1, 21))

        assert [d.date for d in days] == [dt.date(2024, 1, 15), dt.date(2024, 1, 16)]
        assert [a.name for a in days[0].assignments] == ["Adam Park", "Zoe Quinn"]
        first = days[0].assignments[0]
        assert first.role == "qa"
        assert first.email == adam.email
        assert first.profile_image == "uploads/adam.png"

    async def test_inverted_range(self, db_session: AsyncSession):
        """Test that start must not be after end."""
        with pytest.raises(InvalidInputError):
            await RosterLedger(db_session).list_range(dt.date(2024, 1, 20), dt.date(2024, 1, 10))
