"""
Tests for the status catalog.

Tests cover:
- Idempotent seeding of the default statuses
- Ordering of active and inactive statuses
- Create/update/delete with conflict and in-use guards
- Initial status selection for new issues
"""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from roster_guardian.errors import (
    ConflictError,
    InUseError,
    InvalidInputError,
    InvalidStatusError,
    NotFoundError,
)
from roster_guardian.services import StatusCatalog


@pytest.mark.asyncio
@pytest.mark.database
@pytest.mark.statuses
class TestSeeding:
    """Test suite for default status seeding."""

    async def test_seed_inserts_canonical_statuses(self, db_session: AsyncSession):
        """Test that an empty catalog receives the four defaults."""
        catalog = StatusCatalog(db_session)

        inserted = await catalog.seed_defaults()
        statuses = await catalog.list_active()

        assert inserted == 4
        assert [s.name for s in statuses] == ["open", "investigation", "resolved", "closed"]
        assert [s.color for s in statuses] == ["#EF4444", "#F59E0B", "#10B981", "#6B7280"]
        assert all(s.is_active for s in statuses)

    async def test_seed_is_idempotent(self, db_session: AsyncSession):
        """Test that seeding twice inserts nothing the second time."""
        catalog = StatusCatalog(db_session)

        await catalog.seed_defaults()
        inserted_again = await catalog.seed_defaults()

        assert inserted_again == 0
        assert len(await catalog.list_all()) == 4

    async def test_seed_fills_only_missing_names(self, db_session: AsyncSession):
        """Test that a renamed or deleted default is re-added by name."""
        catalog = StatusCatalog(db_session)
        await catalog.seed_defaults()
        closed = next(s for s in await catalog.list_all() if s.name == "closed")
        await catalog.delete(closed.id)

        inserted = await catalog.seed_defaults()

        assert inserted == 1
        assert "closed" in [s.name for s in await catalog.list_active()]


@pytest.mark.asyncio
@pytest.mark.database
@pytest.mark.statuses
class TestStatusCatalog:
    """Test suite for catalog administration."""

    async def test_create_applies_defaults(self, db_session: AsyncSession, statuses):
        """Test that color and order default when omitted."""
        created = await StatusCatalog(db_session).create("triage")

        assert created.name == "triage"
        assert created.color == "#6B7280"
        assert created.sort_order == 0
        assert created.is_active is True

    async def test_create_duplicate_name_conflicts(self, db_session: AsyncSession, statuses):
        """Test that status names are unique."""
        with pytest.raises(ConflictError) as exc_info:
            await StatusCatalog(db_session).create("open", color="#000000")

        assert exc_info.value.kind == "conflict"

    async def test_create_rejects_bad_color(self, db_session: AsyncSession):
        """Test that colors must be #RRGGBB."""
        with pytest.raises(InvalidInputError) as exc_info:
            await StatusCatalog(db_session).create("blocked", color="red")

        assert "color" in exc_info.value.message

    async def test_list_active_orders_by_sort_order_then_id(self, db_session: AsyncSession, statuses):
        """Test presentation ordering with ties."""
        catalog = StatusCatalog(db_session)
        first = await catalog.create("needs-info", sort_order=2)
        second = await catalog.create("escalated", sort_order=2)

        names = [s.name for s in await catalog.list_active()]

        assert names == ["open", "investigation", "needs-info", "escalated", "resolved", "closed"]
        assert first.id < second.id

    async def test_update_replaces_fields(self, db_session: AsyncSession, statuses):
        """Test full replacement of a status."""
        updated = await StatusCatalog(db_session).update(
            statuses["investigation"],
            name="investigating",
            color="#123ABC",
            sort_order=5,
            is_active=True,
        )

        assert updated.name == "investigating"
        assert updated.color == "#123ABC"
        assert updated.sort_order == 5

    async def test_deactivated_status_only_in_admin_listing(self, db_session: AsyncSession, statuses):
        """Test that inactive statuses are hidden from list_active."""
        catalog = StatusCatalog(db_session)
        await catalog.update(
            statuses["closed"], name="closed", color="#6B7280", sort_order=4, is_active=False
        )

        assert "closed" not in [s.name for s in await catalog.list_active()]
        assert "closed" in [s.name for s in await catalog.list_all()]

    async def test_update_rename_onto_existing_conflicts(self, db_session: AsyncSession, statuses):
        """Test that renaming onto another status's name fails."""
        with pytest.raises(ConflictError):
            await StatusCatalog(db_session).update(
                statuses["closed"], name="open", color="#6B7280", sort_order=4, is_active=True
            )

    async def test_update_missing_status(self, db_session: AsyncSession):
        """Test updating a status that does not exist."""
        with pytest.raises(NotFoundError):
            await StatusCatalog(db_session).update(
                999, name="ghost", color="#6B7280", sort_order=1, is_active=True
            )

    async def test_get_missing_status(self, db_session: AsyncSession):
        """Test fetching a status that does not exist."""
        with pytest.raises(NotFoundError):
            await StatusCatalog(db_session).get(999)

    async def test_delete_unused_status(self, db_session: AsyncSession, statuses):
        """Test deleting a status no issue holds."""
        catalog = StatusCatalog(db_session)
        triage = await catalog.create("triage", color="#AAAAAA", sort_order=9)

        result = await catalog.delete(triage.id)

        assert "deleted" in result.message
        with pytest.raises(NotFoundError):
            await catalog.get(triage.id)

    async def test_delete_status_in_use(self, db_session: AsyncSession, statuses, create_issue):
        """Test that a status held by an issue cannot be deleted."""
        await create_issue()

        with pytest.raises(InUseError) as exc_info:
            await StatusCatalog(db_session).delete(statuses["open"])

        assert exc_info.value.kind == "in_use"
        assert "open" in [s.name for s in await StatusCatalog(db_session).list_all()]

    async def test_delete_missing_status(self, db_session: AsyncSession):
        """Test deleting a status that does not exist."""
        with pytest.raises(NotFoundError):
            await StatusCatalog(db_session).delete(999)


@pytest.mark.asyncio
@pytest.mark.database
@pytest.mark.statuses
class TestInitialStatus:
    """Test suite for the status given to new issues."""

    async def test_lowest_sort_order_wins(self, db_session: AsyncSession, statuses):
        """Test that 'open' is the initial status of the default catalog."""
        initial = await StatusCatalog(db_session).initial_status()

        assert initial.id == statuses["open"]

    async def test_inactive_statuses_are_skipped(self, db_session: AsyncSession, statuses):
        """Test that deactivating 'open' moves new issues to the next status."""
        catalog = StatusCatalog(db_session)
        await catalog.update(
            statuses["open"], name="open", color="#EF4444", sort_order=1, is_active=False
        )

        initial = await catalog.initial_status()

        assert initial.name == "investigation"

    async def test_empty_catalog(self, db_session: AsyncSession):
        """Test that an empty catalog has no initial status."""
        with pytest.raises(InvalidStatusError):
            await StatusCatalog(db_session).initial_status()
