"""
Notice ingestion pipeline

validate -> store file (media notices only) -> classify -> persist.
Errors are raised as the typed exceptions from app.core.exceptions; the
routers turn them into response envelopes.
"""
from typing import Any, Optional
from datetime import datetime, timezone
import logging

from app.core.exceptions import PersistenceError, StorageError, ValidationError, FieldError
from app.models.notice import ContentType, NoticeDocument
from app.services.content_classifier import classify, type_from_url
from app.services.file_store import ByteSource, FileStore, StoredFile
from app.services.notice_repository import NoticeRepository
from app.services.notice_validator import (
    FileSubmission,
    UploadDescriptor,
    allowed_mime_types,
    kind_for_mime,
    normalize_mime,
    size_ceiling,
    validate_submission,
)

logger = logging.getLogger(__name__)


class IncomingFile:
    """An uploaded file as the pipeline sees it: declared metadata plus a byte source"""

    def __init__(self, source: ByteSource, file_name: str, mime_type: Optional[str], size: Optional[int] = None):
        self.source = source
        self.file_name = file_name
        self.mime_type = mime_type
        self.size = size

    def descriptor(self) -> UploadDescriptor:
        return UploadDescriptor(file_name=self.file_name, mime_type=self.mime_type, size=self.size)


class NoticeService:
    """Runs one submission through the pipeline"""

    def __init__(self, repository: NoticeRepository, file_store: FileStore, created_by: str):
        self.repository = repository
        self.file_store = file_store
        self.created_by = created_by

    async def submit(
        self,
        title: Optional[str],
        notice_type: Optional[str],
        priority: Any = None,
        content: Optional[str] = None,
        incoming: Optional[IncomingFile] = None,
    ) -> str:
        """Validate, store and persist a notice. Returns the new notice id."""
        result = validate_submission(
            title=title,
            notice_type=notice_type,
            priority=priority,
            content=content,
            upload=incoming.descriptor() if incoming is not None else None,
        )
        if not result.ok:
            logger.info(f"Rejected notice submission: {[str(e) for e in result.errors]}")
        submission = result.raise_for_errors()

        stored: Optional[StoredFile] = None
        if isinstance(submission, FileSubmission):
            stored = await self._store(incoming, submission.kind)
            content_type = classify(submission.kind.value, stored.url, has_content=False)
            notice = NoticeDocument(
                title=submission.title,
                media_url=stored.url,
                priority=submission.priority,
                created_by=self.created_by,
                date=datetime.now(timezone.utc),
                original_file_name=incoming.file_name,
                content_type=content_type,
            )
        else:
            notice = NoticeDocument(
                title=submission.title,
                content=submission.content,
                priority=submission.priority,
                created_by=self.created_by,
                date=datetime.now(timezone.utc),
                content_type=classify(submission.kind.value, None, has_content=True),
            )

        try:
            return await self.repository.create(notice)
        except PersistenceError:
            if stored is not None:
                await self._discard(stored)
            raise

    async def upload(self, incoming: Optional[IncomingFile]) -> StoredFile:
        """Store a single media file on its own, for clients that attach the URL later."""
        if incoming is None or not (incoming.file_name or "").strip():
            raise ValidationError([FieldError("file", "No file uploaded")])

        kind = kind_for_mime(incoming.mime_type)
        if kind is None:
            allowed = sorted(set().union(*(allowed_mime_types(k) for k in ContentType if k != ContentType.TEXT)))
            raise ValidationError([FieldError(
                "file",
                f"Unsupported file type '{normalize_mime(incoming.mime_type) or 'unknown'}'. "
                f"Allowed: {', '.join(allowed)}",
            )])
        named_kind = type_from_url(incoming.file_name)
        if named_kind is not None and named_kind != kind:
            raise ValidationError([FieldError(
                "file",
                f"File extension of '{incoming.file_name.strip()}' does not match file type "
                f"'{normalize_mime(incoming.mime_type)}'",
            )])
        return await self._store(incoming, kind)

    async def _store(self, incoming: IncomingFile, kind: ContentType) -> StoredFile:
        ceiling = size_ceiling(kind)
        if incoming.size is not None and incoming.size > ceiling:
            raise StorageError(
                f"File too large. Max size is {ceiling / (1024 * 1024):g}MB",
                reason=StorageError.SIZE_EXCEEDED,
            )
        return await self.file_store.store(incoming.source, incoming.file_name, max_bytes=ceiling)

    async def _discard(self, stored: StoredFile) -> None:
        try:
            await self.file_store.delete(stored.url)
            logger.info(f"Removed {stored.stored_name} after failed notice write")
        except StorageError as e:
            logger.error(f"Could not remove {stored.stored_name} after failed notice write: {e}")
