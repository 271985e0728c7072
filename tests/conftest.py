"""
Pytest fixtures and configuration for Roster Guardian tests.

This module provides shared fixtures for:
- Test database setup/teardown with async support
- Fake attachment store with injectable failures
- Sample data factories (users, statuses, issues, comments)
"""

import datetime as dt
from typing import AsyncGenerator, Dict

import pytest
import pytest_asyncio
from faker import Faker
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.pool import StaticPool

from roster_guardian.database import Database
from roster_guardian.models import (
    COMMENT_TYPE_COMMENT,
    Comment,
    Issue,
    IssueStatus,
    User,
)
from roster_guardian.schemas import AttachmentUpload
from roster_guardian.services import StatusCatalog

# Initialize Faker for generating test data
fake = Faker()


# In-memory SQLite; StaticPool keeps the single connection (and its data) alive
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def database() -> AsyncGenerator[Database, None]:
    """
    Create a test Database handle with all tables.

    Each test gets a fresh database instance with foreign keys enforced.
    """
    database = Database(TEST_DATABASE_URL, poolclass=StaticPool)
    await database.create_all()

    yield database

    await database.close()


@pytest_asyncio.fixture(scope="function")
async def db_session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    """
    Create test database session.

    Services commit on their own; leftovers are rolled back at teardown.
    """
    async with database.session_factory() as session:
        yield session
        await session.rollback()


class FakeAttachmentStore:
    """
    In-memory attachment store.

    File names listed in fail_names raise on save; fixed_path makes every
    save return the same stored path (to provoke metadata conflicts).
    """

    def __init__(self):
        self.saved: Dict[str, bytes] = {}
        self.fail_names = set()
        self.fixed_path = None

    async def save(self, stored_name: str, upload: AttachmentUpload) -> str:
        if upload.file_name in self.fail_names:
            raise OSError(f"disk full while writing {upload.file_name}")
        path = self.fixed_path or f"uploads/{stored_name}"
        self.saved[path] = upload.data
        return path


@pytest.fixture
def attachment_store() -> FakeAttachmentStore:
    """Fresh fake attachment store."""
    return FakeAttachmentStore()


@pytest.fixture
def make_upload():
    """
    Factory fixture for attachment uploads.

    Returns a function that builds an AttachmentUpload.
    """
    def _make_upload(file_name: str = None, content_type: str = "image/png") -> AttachmentUpload:
        return AttachmentUpload(
            file_name=file_name or fake.file_name(extension="png"),
            content_type=content_type,
            data=fake.binary(length=64),
        )

    return _make_upload


# Database model factory fixtures
@pytest_asyncio.fixture
async def create_user(db_session: AsyncSession):
    """
    Factory fixture for creating test users.

    Returns a function that creates and persists a User.
    """
    async def _create_user(**kwargs) -> User:
        defaults = {
            "email": fake.unique.email(),
            "password": "$2b$10$" + fake.sha256()[:53],
            "name": fake.name(),
            "role": "support",
            "contact_number": fake.phone_number()[:50],
            "bio": fake.sentence(),
        }
        defaults.update(kwargs)

        user = User(**defaults)
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _create_user


@pytest_asyncio.fixture
async def statuses(db_session: AsyncSession) -> Dict[str, int]:
    """
    Seed the default status catalog.

    Returns a mapping of status name to id.
    """
    await StatusCatalog(db_session).seed_defaults()
    result = await db_session.execute(select(IssueStatus.name, IssueStatus.id))
    return {name: status_id for name, status_id in result.all()}


@pytest_asyncio.fixture
async def create_issue(db_session: AsyncSession, statuses: Dict[str, int], create_user):
    """
    Factory fixture for creating test issues directly in the database.

    Returns a function that creates and persists an Issue (status 'open'
    and a fresh creator unless given).
    """
    async def _create_issue(**kwargs) -> Issue:
        if "created_by" not in kwargs:
            creator = await create_user()
            kwargs["created_by"] = creator.id
        defaults = {
            "title": fake.sentence(nb_words=4),
            "description": fake.text(max_nb_chars=200),
            "date": dt.date(2024, 1, 15),
            "status_id": statuses["open"],
        }
        defaults.update(kwargs)

        issue = Issue(**defaults)
        db_session.add(issue)
        await db_session.commit()
        await db_session.refresh(issue)
        return issue

    return _create_issue


@pytest_asyncio.fixture
async def create_comment(db_session: AsyncSession):
    """
    Factory fixture for creating plain comments.

    Returns a function that creates and persists a Comment.
    """
    async def _create_comment(issue_id: int, user_id: int, **kwargs) -> Comment:
        defaults = {
            "issue_id": issue_id,
            "user_id": user_id,
            "content": fake.sentence(),
            "comment_type": COMMENT_TYPE_COMMENT,
        }
        defaults.update(kwargs)

        comment = Comment(**defaults)
        db_session.add(comment)
        await db_session.commit()
        await db_session.refresh(comment)
        return comment

    return _create_comment
