"""
Roster Guardian - process lifecycle.

The storage handle is created on startup, checked against the expected
schema revision, seeded, and disposed on shutdown. Callers (an HTTP facade,
the CLI, tests) obtain sessions from the yielded Database.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from roster_guardian.config import settings
from roster_guardian.database import Database
from roster_guardian.logging_config import configure_logging
from roster_guardian.services import StatusCatalog

logger = logging.getLogger(__name__)


async def startup(database: Database) -> None:
    """
    Verify the schema and seed the status catalog.

    Raises:
        SchemaVersionError: If the database is not at the expected revision
    """
    if settings.VERIFY_SCHEMA_ON_STARTUP:
        await database.verify_schema()
    else:
        logger.warning("Schema verification disabled (VERIFY_SCHEMA_ON_STARTUP=false)")

    if settings.SEED_DEFAULT_STATUSES:
        async with database.session() as db:
            inserted = await StatusCatalog(db).seed_defaults()
        if inserted:
            logger.info(f"Seeded {inserted} default issue status(es)")


@asynccontextmanager
async def lifespan(database_url: Optional[str] = None) -> AsyncGenerator[Database, None]:
    """
    Lifespan context manager for startup and shutdown.

    Handles:
    - Logging configuration
    - Database handle creation and schema verification on startup
    - Default status seeding
    - Database connection cleanup on shutdown

    Example:
        async with lifespan() as database:
            async with database.session() as db:
                await IssueLifecycle(db).list_for_date(date.today())
    """
    configure_logging()
    logger.info("Starting up Roster Guardian...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")

    database = Database(database_url or settings.DATABASE_URL, echo=settings.SQL_ECHO)
    try:
        await startup(database)
        logger.info("Startup complete")

        yield database
    finally:
        logger.info("Shutting down Roster Guardian...")
        await database.close()
        logger.info("Shutdown complete")
