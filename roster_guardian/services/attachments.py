"""
Attachment persistence shared by issues and comments.

File bytes are written by an injected AttachmentStore; this module only
generates stored names and records metadata rows. Attachments are
persisted after their parent row has committed, so a failed file never
undoes the issue or comment it belongs to.
"""

import asyncio
import logging
import posixpath
import time
from typing import List, Optional, Protocol, Sequence, Type
from uuid import uuid4

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from roster_guardian.schemas.common import AttachmentUpload

logger = logging.getLogger(__name__)


class AttachmentStore(Protocol):
    """Collaborator that writes attachment bytes somewhere durable."""

    async def save(self, stored_name: str, upload: AttachmentUpload) -> str:
        """Store the upload under stored_name and return the stored path."""
        ...


def generate_stored_name(prefix: str, file_name: str) -> str:
    """
    Build a collision-resistant stored name.

    Format: <prefix>-<epoch ms>-<8 hex>-<original base name>
    """
    base_name = posixpath.basename(file_name.replace("\\", "/")) or "file"
    epoch_ms = int(time.time() * 1000)
    return f"{prefix}-{epoch_ms}-{uuid4().hex[:8]}-{base_name}"


async def persist_attachments(
    db: AsyncSession,
    store: Optional[AttachmentStore],
    model: Type,
    parent_field: str,
    parent_id: int,
    uploads: Sequence[AttachmentUpload],
    prefix: str,
) -> List[str]:
    """
    Save uploads through the store and record one metadata row per file.

    Files are written concurrently; metadata rows are committed one at a
    time so each success is durable on its own.

    Args:
        db: Async database session (the parent row must already be committed)
        store: Attachment store, or None when uploads are not configured
        model: IssueAttachment or CommentAttachment
        parent_field: Foreign key attribute on model ("issue_id" or "comment_id")
        parent_id: Id of the committed parent row
        uploads: Files to persist
        prefix: Stored name prefix

    Returns:
        Original names of attachments that could not be stored or recorded
    """
    if not uploads:
        return []

    if store is None:
        logger.warning(
            f"No attachment store configured; dropping {len(uploads)} file(s) "
            f"for {parent_field}={parent_id}"
        )
        return [upload.file_name for upload in uploads]

    stored_names = [generate_stored_name(prefix, upload.file_name) for upload in uploads]
    results = await asyncio.gather(
        *(store.save(name, upload) for name, upload in zip(stored_names, uploads)),
        return_exceptions=True
    )

    failed: List[str] = []
    for upload, result in zip(uploads, results):
        if isinstance(result, BaseException):
            logger.warning(
                f"Failed to store attachment '{upload.file_name}' "
                f"for {parent_field}={parent_id}: {result}"
            )
            failed.append(upload.file_name)
            continue

        db.add(model(
            **{parent_field: parent_id},
            file_path=result,
            file_name=upload.file_name,
            file_type=upload.content_type,
        ))
        try:
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.warning(
                f"Failed to record attachment '{upload.file_name}' "
                f"for {parent_field}={parent_id}: {e}"
            )
            failed.append(upload.file_name)

    stored = len(uploads) - len(failed)
    logger.info(f"Stored {stored}/{len(uploads)} attachment(s) for {parent_field}={parent_id}")
    return failed
