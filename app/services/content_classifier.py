"""
Content-type classification for notices

Precedence, first match wins:
  1. extension of the media URL
  2. declared type, if it is a known content type
  3. text, when there is content and no media URL
  4. text
"""
from typing import Any, Dict, Optional
from urllib.parse import urlsplit
import logging
import posixpath

from app.models.notice import ContentType, LEGACY_MEDIA_KEYS

logger = logging.getLogger(__name__)

EXTENSION_TYPES = {
    ".pdf": ContentType.PDF,
    ".jpg": ContentType.IMAGE,
    ".jpeg": ContentType.IMAGE,
    ".png": ContentType.IMAGE,
    ".gif": ContentType.IMAGE,
    ".webp": ContentType.IMAGE,
    ".svg": ContentType.IMAGE,
    ".mp4": ContentType.VIDEO,
    ".webm": ContentType.VIDEO,
    ".mov": ContentType.VIDEO,
    ".ogg": ContentType.VIDEO,
    ".avi": ContentType.VIDEO,
    ".mkv": ContentType.VIDEO,
}


def type_from_url(media_url: Optional[str]) -> Optional[ContentType]:
    """Content type implied by the URL's file extension, ignoring query and fragment"""
    if not media_url or not media_url.strip():
        return None
    path = urlsplit(media_url.strip()).path
    ext = posixpath.splitext(path)[1].lower()
    return EXTENSION_TYPES.get(ext)


def classify(declared_type: Any, media_url: Optional[str], has_content: bool) -> ContentType:
    inferred = type_from_url(media_url)
    declared = ContentType.parse(declared_type)

    if inferred is not None:
        if declared is not None and declared != inferred:
            logger.warning(
                f"Declared content type '{declared.value}' disagrees with extension of {media_url}; "
                f"using '{inferred.value}'"
            )
        return inferred

    if declared is not None:
        return declared

    if declared_type not in (None, ""):
        logger.warning(f"Ignoring unknown content type '{declared_type}'")

    if has_content and not (media_url or "").strip():
        return ContentType.TEXT

    if (media_url or "").strip():
        logger.warning(f"Could not classify media URL {media_url}; defaulting to text")
    return ContentType.TEXT


def classify_document(doc: Dict[str, Any]) -> ContentType:
    """Classify a raw stored notice document"""
    media_url = doc.get("media_url") or next((doc[k] for k in LEGACY_MEDIA_KEYS if doc.get(k)), None)
    declared = doc.get("content_type", doc.get("contentType"))
    content = doc.get("content")
    has_content = isinstance(content, str) and bool(content.strip())
    return classify(declared, media_url, has_content)
