"""
MongoDB document model for notices

Stored documents use snake_case keys. Older documents may still carry the
media reference under `imageUrl` and no `content_type`; `from_mongo` maps
those onto the current shape.
"""

from enum import Enum
from typing import Any, Dict, Optional
from datetime import datetime, timezone
from pydantic import BaseModel, Field

DEFAULT_PRIORITY = 3
MIN_PRIORITY = 1
MAX_PRIORITY = 5

LEGACY_MEDIA_KEYS = ("imageUrl", "image_url", "mediaUrl")


class ContentType(str, Enum):
    TEXT = "text"
    PDF = "pdf"
    IMAGE = "image"
    VIDEO = "video"

    @classmethod
    def values(cls):
        return [member.value for member in cls]

    @classmethod
    def parse(cls, value: Any) -> Optional["ContentType"]:
        """Return the member for `value` (case-insensitive) or None"""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class NoticeDocument(BaseModel):
    """A persisted notice"""

    id: Optional[str] = Field(default=None, description="Store-assigned identifier")
    title: str
    content: str = ""
    media_url: str = ""
    priority: int = Field(default=DEFAULT_PRIORITY, ge=MIN_PRIORITY, le=MAX_PRIORITY)
    created_by: str = ""
    date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    original_file_name: Optional[str] = None
    content_type: ContentType = ContentType.TEXT

    def to_mongo(self) -> Dict[str, Any]:
        """Document body for insert_one; the store assigns _id"""
        doc = self.model_dump(exclude={"id"}, mode="python")
        doc["content_type"] = self.content_type.value
        if self.original_file_name is None:
            doc.pop("original_file_name")
        return doc

    @classmethod
    def from_mongo(cls, doc: Dict[str, Any], content_type: ContentType) -> "NoticeDocument":
        """Build from a raw stored document, with `content_type` already reconciled"""
        media_url = doc.get("media_url") or ""
        if not media_url:
            for key in LEGACY_MEDIA_KEYS:
                if doc.get(key):
                    media_url = doc[key]
                    break

        date = doc.get("date") or doc.get("created_at")
        if isinstance(date, str):
            date = datetime.fromisoformat(date.replace("Z", "+00:00"))
        if date is None:
            date = datetime.fromtimestamp(0, tz=timezone.utc)
        elif date.tzinfo is None:
            date = date.replace(tzinfo=timezone.utc)

        return cls(
            id=str(doc["_id"]) if doc.get("_id") is not None else None,
            title=doc.get("title") or "",
            content=doc.get("content") or "",
            media_url=media_url,
            priority=coerce_stored_priority(doc.get("priority")),
            created_by=doc.get("created_by") or doc.get("createdBy") or "",
            date=date,
            original_file_name=doc.get("original_file_name") or doc.get("originalFileName"),
            content_type=content_type,
        )


def coerce_stored_priority(value: Any) -> int:
    """Priority of an already-persisted document; anything unusable reads as the default"""
    try:
        priority = int(value)
    except (TypeError, ValueError):
        return DEFAULT_PRIORITY
    if MIN_PRIORITY <= priority <= MAX_PRIORITY:
        return priority
    return DEFAULT_PRIORITY
