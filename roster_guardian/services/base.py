"""
Shared plumbing for the core services: session ownership, error
translation and input validation.
"""

import functools
import logging
from typing import Any, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from roster_guardian.errors import (
    InternalError,
    InvalidInputError,
    NotFoundError,
    RosterGuardianError,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)
RowT = TypeVar("RowT")


def validate_input(model: Type[ModelT], **data: Any) -> ModelT:
    """
    Build an input model, turning pydantic errors into InvalidInputError.

    Raises:
        InvalidInputError: Listing the offending fields
    """
    try:
        return model(**data)
    except ValidationError as e:
        fields = sorted({".".join(str(part) for part in err["loc"]) for err in e.errors()})
        raise InvalidInputError(
            f"Invalid value for: {', '.join(fields)}",
            context={"model": model.__name__, "fields": fields}
        ) from e


def storage_operation(action: str):
    """
    Decorate a service method so unexpected storage failures surface as
    InternalError after the session is rolled back and the error logged.

    Typed RosterGuardianError exceptions raised by the method pass through.

    Args:
        action: Short phrase used in the log line and user message
                (e.g. "create issue")
    """
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(self, *args, **kwargs):
            try:
                return await func(self, *args, **kwargs)
            except SQLAlchemyError as e:
                await self.db.rollback()
                logger.error(f"Storage error during {action}: {e}", exc_info=True)
                raise InternalError(f"Could not {action}") from e
        return wrapper
    return decorator


class BaseService:
    """Base class for services that work inside one caller-provided session."""

    def __init__(self, db: AsyncSession):
        """
        Args:
            db: Async database session
        """
        self.db = db

    async def _get_or_raise(self, model: Type[RowT], ident: int, label: str) -> RowT:
        """Load a row by primary key or raise NotFoundError."""
        row = await self.db.get(model, ident)
        if row is None:
            raise NotFoundError(f"{label} not found", context={"id": ident})
        return row

    async def _commit(self, integrity_error: Optional[RosterGuardianError] = None) -> None:
        """
        Commit the current transaction.

        Args:
            integrity_error: Typed error to raise instead of a constraint
                             violation (e.g. ConflictError for a duplicate)

        Raises:
            RosterGuardianError: integrity_error, after rolling back
            IntegrityError: If no integrity_error was given
        """
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            if integrity_error is None:
                raise
            logger.info(f"Constraint violation reported as {integrity_error.kind}: {e.orig}")
            raise integrity_error from e
