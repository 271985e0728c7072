"""
User directory: registration, lookup and profile maintenance.

Passwords arrive already hashed by the caller's credential collaborator
and are stored as-is.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from roster_guardian.errors import ConflictError, InUseError, NotFoundError
from roster_guardian.models import Comment, Issue, User
from roster_guardian.schemas import (
    MessageResponse,
    RoleEnum,
    UserCreate,
    UserCredentials,
    UserResponse,
    UserUpdate,
)
from roster_guardian.services.base import BaseService, storage_operation, validate_input

logger = logging.getLogger(__name__)


class UserDirectory(BaseService):
    """Manages user accounts."""

    @storage_operation("register user")
    async def register(
        self,
        email: str,
        password_hash: str,
        name: str,
        role: str,
        profile_image: Optional[str] = None,
        contact_number: Optional[str] = None,
        bio: Optional[str] = None
    ) -> UserResponse:
        """
        Create a user account.

        Raises:
            InvalidInputError: If a field is missing, malformed or the role is unknown
            ConflictError: If the email is already registered
        """
        data = validate_input(
            UserCreate,
            email=email,
            password_hash=password_hash,
            name=name,
            role=role,
            profile_image=profile_image,
            contact_number=contact_number,
            bio=bio,
        )
        await self._ensure_email_free(data.email)

        user = User(
            email=data.email,
            password=data.password_hash,
            name=data.name,
            role=data.role.value,
            profile_image=data.profile_image,
            contact_number=data.contact_number,
            bio=data.bio,
        )
        self.db.add(user)
        await self._commit(ConflictError("Email is already registered"))

        logger.info(f"Registered user {user.id} with role {user.role}")
        return UserResponse.model_validate(user)

    async def get(self, user_id: int) -> UserResponse:
        """
        Raises:
            NotFoundError: If the user does not exist
        """
        user = await self._get_or_raise(User, user_id, "User")
        return UserResponse.model_validate(user)

    async def get_by_email(self, email: str) -> UserCredentials:
        """
        Look up the stored credential hash for a login attempt.

        Raises:
            NotFoundError: If no user has this email
        """
        user = await self.db.scalar(select(User).where(User.email == email))
        if user is None:
            raise NotFoundError("User not found")
        return UserCredentials(
            id=user.id,
            email=user.email,
            name=user.name,
            role=user.role,
            password_hash=user.password,
        )

    async def list(self) -> List[UserResponse]:
        """All users ordered by name."""
        result = await self.db.execute(select(User).order_by(User.name, User.id))
        return [UserResponse.model_validate(u) for u in result.scalars().all()]

    @storage_operation("update user")
    async def update(self, user_id: int, **fields) -> UserResponse:
        """
        Update the given profile fields; omitted fields are left alone.

        Args:
            user_id: User to update
            fields: Any of email, password_hash, name, role, profile_image,
                    contact_number, bio

        Raises:
            NotFoundError: If the user does not exist
            InvalidInputError: If a field is malformed
            ConflictError: If the new email belongs to another user
        """
        user = await self._get_or_raise(User, user_id, "User")
        changes = validate_input(UserUpdate, **fields).model_dump(exclude_unset=True)

        if changes.get("email") and changes["email"] != user.email:
            await self._ensure_email_free(changes["email"])

        for field, value in changes.items():
            if value is None and field in ("email", "password_hash", "name", "role"):
                continue
            if field == "password_hash":
                user.password = value
            elif field == "role":
                user.role = RoleEnum(value).value
            else:
                setattr(user, field, value)

        await self._commit(ConflictError("Email is already registered"))

        logger.info(f"Updated user {user_id}: {', '.join(sorted(changes)) or 'no changes'}")
        return UserResponse.model_validate(user)

    @storage_operation("delete user")
    async def delete(self, user_id: int) -> MessageResponse:
        """
        Delete a user together with their roster entries and reactions.

        Raises:
            NotFoundError: If the user does not exist
            InUseError: If the user authored issues or comments
        """
        user = await self._get_or_raise(User, user_id, "User")

        issues = await self.db.scalar(
            select(func.count(Issue.id)).where(Issue.created_by == user_id)
        )
        comments = await self.db.scalar(
            select(func.count(Comment.id)).where(Comment.user_id == user_id)
        )
        if issues or comments:
            raise InUseError(
                "User has reported issues or written comments and cannot be deleted",
                context={"user_id": user_id, "issues": issues, "comments": comments}
            )

        await self.db.delete(user)
        await self._commit(InUseError("User is referenced by other records"))

        logger.info(f"Deleted user {user_id}")
        return MessageResponse(message="User deleted")

    @storage_operation("seed admin user")
    async def ensure_admin(
        self,
        email: str,
        password_hash: str,
        name: str
    ) -> Tuple[UserResponse, bool]:
        """
        Create an admin account unless the email is already registered.

        Returns:
            Tuple of (user, created)
        """
        existing = await self.db.scalar(select(User).where(User.email == email))
        if existing is not None:
            logger.info(f"Admin user {email} already exists (id={existing.id})")
            return UserResponse.model_validate(existing), False

        user = await self.register(
            email=email, password_hash=password_hash, name=name, role=RoleEnum.ADMIN.value
        )
        return user, True

    async def _ensure_email_free(self, email: str) -> None:
        if await self.db.scalar(select(User.id).where(User.email == email)) is not None:
            raise ConflictError("Email is already registered")


def get_user_directory(db: AsyncSession) -> UserDirectory:
    """Factory function to create a UserDirectory."""
    return UserDirectory(db)
