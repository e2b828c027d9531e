"""
Notice Repository

Persists notices in MongoDB and serves them back ordered by priority
(1 first) and then newest first. Reads never fail: when the store is
unreachable or holds nothing, a fixed fallback dataset is returned.
"""
from typing import Dict, List
from datetime import datetime, timezone
import logging

from pymongo import ASCENDING, DESCENDING

from app.core.exceptions import PersistenceError
from app.db.database import MongoConnector
from app.models.notice import ContentType, NoticeDocument
from app.services.content_classifier import classify_document

logger = logging.getLogger(__name__)

FALLBACK_NOTICES: List[NoticeDocument] = [
    NoticeDocument(
        id="fallback-1",
        title="Important Announcement",
        content="Classes will be cancelled tomorrow due to weather.",
        priority=1,
        created_by="system",
        date=datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc),
        content_type=ContentType.TEXT,
    ),
    NoticeDocument(
        id="fallback-2",
        title="New PDF Available",
        media_url="https://example.com/new_document.pdf",
        priority=2,
        created_by="system",
        date=datetime(2024, 1, 2, 14, 30, tzinfo=timezone.utc),
        original_file_name="new_document.pdf",
        content_type=ContentType.PDF,
    ),
    NoticeDocument(
        id="fallback-3",
        title="Campus Photo",
        media_url="https://example.com/campus_photo.jpg",
        priority=3,
        created_by="system",
        date=datetime(2024, 1, 3, 9, 15, tzinfo=timezone.utc),
        original_file_name="campus_photo.jpg",
        content_type=ContentType.IMAGE,
    ),
    NoticeDocument(
        id="fallback-4",
        title="Video Update",
        media_url="https://example.com/video_update.mp4",
        priority=3,
        created_by="system",
        date=datetime(2024, 1, 4, 16, 45, tzinfo=timezone.utc),
        original_file_name="video_update.mp4",
        content_type=ContentType.VIDEO,
    ),
    NoticeDocument(
        id="fallback-5",
        title="Orientation Day",
        content="Orientation day for new students on Jan 10th.",
        priority=3,
        created_by="system",
        date=datetime(2024, 1, 5, 10, 0, tzinfo=timezone.utc),
        content_type=ContentType.TEXT,
    ),
]


def sort_notices(notices: List[NoticeDocument]) -> List[NoticeDocument]:
    """Priority ascending, then date descending. Stable, so full ties keep input order."""
    return sorted(notices, key=lambda n: (n.priority, -n.date.timestamp()))


def fallback_notices() -> List[NoticeDocument]:
    return sort_notices([n.model_copy() for n in FALLBACK_NOTICES])


def group_by_content_type(notices: List[NoticeDocument]) -> Dict[str, List[NoticeDocument]]:
    """Split into the four display blocks, keeping order within each"""
    groups: Dict[str, List[NoticeDocument]] = {t.value: [] for t in ContentType}
    for notice in notices:
        groups[notice.content_type.value].append(notice)
    return groups


class NoticeRepository:
    """Repository for notice documents"""

    def __init__(self, connector: MongoConnector, collection_name: str = "notices"):
        self.connector = connector
        self.collection_name = collection_name

    async def create(self, notice: NoticeDocument) -> str:
        """Insert a notice and return its store-assigned id."""
        doc = notice.to_mongo()
        try:
            async with self.connector.acquire(self.collection_name) as handle:
                result = await handle.collection.insert_one(doc, session=handle.session)
        except PersistenceError:
            raise
        except Exception as e:
            logger.error(f"Error creating notice '{notice.title}': {e}")
            raise PersistenceError(f"Failed to save notice: {e}") from e

        if not getattr(result, "acknowledged", False) or result.inserted_id is None:
            logger.error(f"Insert of notice '{notice.title}' was not acknowledged")
            raise PersistenceError("Failed to save notice: write was not acknowledged")

        notice_id = str(result.inserted_id)
        logger.info(f"Created notice {notice_id} ({notice.content_type.value}, priority {notice.priority})")
        return notice_id

    async def list_all(self) -> List[NoticeDocument]:
        """All notices, sorted. Falls back to sample notices when the store is down or empty."""
        try:
            notices = await self._fetch_all()
        except Exception as e:
            logger.warning(f"[fallback] Notice store unavailable, serving {len(FALLBACK_NOTICES)} fallback notices: {e}")
            return fallback_notices()

        if not notices:
            logger.warning(f"[fallback] Notice store returned no notices, serving {len(FALLBACK_NOTICES)} fallback notices")
            return fallback_notices()
        return sort_notices(notices)

    async def _fetch_all(self) -> List[NoticeDocument]:
        notices = []
        async with self.connector.acquire(self.collection_name) as handle:
            cursor = handle.collection.find({}, session=handle.session).sort(
                [("priority", ASCENDING), ("date", DESCENDING), ("_id", ASCENDING)]
            )
            async for doc in cursor:
                try:
                    notices.append(NoticeDocument.from_mongo(doc, classify_document(doc)))
                except Exception as e:
                    logger.warning(f"Skipping malformed notice {doc.get('_id')}: {e}")
        return notices
