"""
Status catalog: the administrator-managed set of issue states.
"""

import logging
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from roster_guardian.config import settings
from roster_guardian.errors import ConflictError, InUseError, InvalidStatusError
from roster_guardian.models import DEFAULT_STATUSES, Issue, IssueStatus
from roster_guardian.schemas import MessageResponse, StatusCreate, StatusResponse, StatusUpdate
from roster_guardian.services.base import BaseService, storage_operation, validate_input

logger = logging.getLogger(__name__)


class StatusCatalog(BaseService):
    """Lists, edits and seeds issue statuses."""

    async def list_active(self) -> List[StatusResponse]:
        """Active statuses in presentation order (sort_order, then id)."""
        result = await self.db.execute(
            select(IssueStatus)
            .where(IssueStatus.is_active.is_(True))
            .order_by(IssueStatus.sort_order, IssueStatus.id)
        )
        return [StatusResponse.model_validate(s) for s in result.scalars().all()]

    async def list_all(self) -> List[StatusResponse]:
        """Every status including inactive ones, for administration."""
        result = await self.db.execute(
            select(IssueStatus).order_by(IssueStatus.sort_order, IssueStatus.id)
        )
        return [StatusResponse.model_validate(s) for s in result.scalars().all()]

    async def get(self, status_id: int) -> StatusResponse:
        """
        Raises:
            NotFoundError: If the status does not exist
        """
        status = await self._get_or_raise(IssueStatus, status_id, "Status")
        return StatusResponse.model_validate(status)

    async def initial_status(self) -> IssueStatus:
        """
        Status assigned to newly created issues: the active status with the
        lowest sort_order.

        Raises:
            InvalidStatusError: If the catalog has no active status
        """
        result = await self.db.execute(
            select(IssueStatus)
            .where(IssueStatus.is_active.is_(True))
            .order_by(IssueStatus.sort_order, IssueStatus.id)
            .limit(1)
        )
        status = result.scalar_one_or_none()
        if status is None:
            raise InvalidStatusError("No active issue status is configured")
        return status

    @storage_operation("create status")
    async def create(
        self,
        name: str,
        color: Optional[str] = None,
        sort_order: Optional[int] = None
    ) -> StatusResponse:
        """
        Add a status to the catalog.

        Args:
            name: Unique status name
            color: Hex color (#RRGGBB); defaults to DEFAULT_STATUS_COLOR
            sort_order: Presentation order; defaults to 0

        Raises:
            InvalidInputError: If name or color is malformed
            ConflictError: If a status with this name exists
        """
        data = validate_input(StatusCreate, name=name, color=color, sort_order=sort_order)
        await self._ensure_name_free(data.name)

        status = IssueStatus(
            name=data.name,
            color=data.color or settings.DEFAULT_STATUS_COLOR,
            sort_order=data.sort_order if data.sort_order is not None else 0,
            is_active=True,
        )
        self.db.add(status)
        await self._commit(ConflictError(f"Status '{data.name}' already exists"))

        logger.info(f"Created status '{status.name}' (id={status.id})")
        return StatusResponse.model_validate(status)

    @storage_operation("update status")
    async def update(
        self,
        status_id: int,
        name: str,
        color: str,
        sort_order: int,
        is_active: bool
    ) -> StatusResponse:
        """
        Replace every mutable field of a status.

        Deactivating a status hides it from list_active and from new issues;
        issues already holding it keep it.

        Raises:
            NotFoundError: If the status does not exist
            InvalidInputError: If a field is malformed
            ConflictError: If the new name belongs to another status
        """
        status = await self._get_or_raise(IssueStatus, status_id, "Status")
        data = validate_input(
            StatusUpdate, name=name, color=color, sort_order=sort_order, is_active=is_active
        )
        if data.name != status.name:
            await self._ensure_name_free(data.name)

        status.name = data.name
        status.color = data.color
        status.sort_order = data.sort_order
        status.is_active = data.is_active
        await self._commit(ConflictError(f"Status '{data.name}' already exists"))

        logger.info(f"Updated status {status_id} ('{status.name}', active={status.is_active})")
        return StatusResponse.model_validate(status)

    @storage_operation("delete status")
    async def delete(self, status_id: int) -> MessageResponse:
        """
        Remove a status that no issue currently holds.

        Audit comments that mention the status keep their text; their
        status references are cleared by the database.

        Raises:
            NotFoundError: If the status does not exist
            InUseError: If any issue references the status
        """
        status = await self._get_or_raise(IssueStatus, status_id, "Status")
        name = status.name

        in_use = await self.db.scalar(
            select(func.count(Issue.id)).where(Issue.status_id == status_id)
        )
        if in_use:
            raise InUseError(
                f"Status '{name}' is used by {in_use} issue(s)",
                context={"status_id": status_id, "issues": in_use}
            )

        await self.db.delete(status)
        # The issues foreign key rejects the delete if an issue picked it up meanwhile
        await self._commit(InUseError(f"Status '{name}' is in use"))

        logger.info(f"Deleted status '{name}' (id={status_id})")
        return MessageResponse(message=f"Status '{name}' deleted")

    @storage_operation("seed statuses")
    async def seed_defaults(self) -> int:
        """
        Insert the canonical statuses that are missing by name.

        Safe to call on every startup.

        Returns:
            Number of statuses inserted
        """
        result = await self.db.execute(select(IssueStatus.name))
        existing = set(result.scalars().all())

        missing = [entry for entry in DEFAULT_STATUSES if entry[0] not in existing]
        if not missing:
            return 0

        for name, color, sort_order in missing:
            self.db.add(IssueStatus(name=name, color=color, sort_order=sort_order, is_active=True))

        try:
            await self.db.commit()
        except IntegrityError:
            # Another process seeded first; its rows are equivalent
            await self.db.rollback()
            logger.info("Default statuses were seeded concurrently")
            return 0

        logger.info(f"Seeded {len(missing)} default status(es): {', '.join(m[0] for m in missing)}")
        return len(missing)

    async def _ensure_name_free(self, name: str) -> None:
        existing = await self.db.scalar(select(IssueStatus.id).where(IssueStatus.name == name))
        if existing is not None:
            raise ConflictError(f"Status '{name}' already exists")


def get_status_catalog(db: AsyncSession) -> StatusCatalog:
    """Factory function to create a StatusCatalog."""
    return StatusCatalog(db)
