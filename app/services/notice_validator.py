"""
Notice submission validation

A submission is either a TextSubmission or a FileSubmission for one of the
media kinds. `validate_submission` is pure: it never touches the store and
reports every violated field instead of stopping at the first one.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from app.core.config import settings
from app.core.exceptions import FieldError, ValidationError
from app.models.notice import ContentType, DEFAULT_PRIORITY, MIN_PRIORITY, MAX_PRIORITY
from app.services.content_classifier import type_from_url

ALLOWED_MIME_TYPES: Dict[ContentType, frozenset] = {
    ContentType.IMAGE: frozenset({
        "image/jpeg", "image/png", "image/webp", "image/gif", "image/svg+xml",
    }),
    ContentType.PDF: frozenset({"application/pdf"}),
    ContentType.VIDEO: frozenset({
        "video/mp4", "video/webm", "video/ogg", "video/quicktime",
        "video/x-msvideo", "video/avi", "video/x-matroska", "video/mkv",
    }),
}

_MISSING = object()


@dataclass(frozen=True)
class UploadDescriptor:
    """What the caller declared about an uploaded file; the bytes stay with the caller"""
    file_name: str
    mime_type: Optional[str]
    size: Optional[int] = None


@dataclass(frozen=True)
class TextSubmission:
    title: str
    content: str
    priority: int
    kind: ContentType = ContentType.TEXT


@dataclass(frozen=True)
class FileSubmission:
    title: str
    kind: ContentType
    priority: int
    upload: UploadDescriptor


Submission = Union[TextSubmission, FileSubmission]


@dataclass
class ValidationResult:
    submission: Optional[Submission] = None
    errors: List[FieldError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.submission is not None and not self.errors

    def raise_for_errors(self) -> Submission:
        if not self.ok:
            raise ValidationError(self.errors)
        return self.submission


def normalize_mime(mime_type: Optional[str]) -> str:
    """'Image/PNG; charset=binary' -> 'image/png'"""
    if not mime_type:
        return ""
    return mime_type.split(";", 1)[0].strip().lower()


def allowed_mime_types(kind: ContentType) -> frozenset:
    return ALLOWED_MIME_TYPES.get(kind, frozenset())


def kind_for_mime(mime_type: Optional[str]) -> Optional[ContentType]:
    """Media kind whose allow-list contains `mime_type`, if any"""
    mime = normalize_mime(mime_type)
    for kind, allowed in ALLOWED_MIME_TYPES.items():
        if mime in allowed:
            return kind
    return None


def size_ceiling(kind: Optional[ContentType]) -> int:
    """Maximum accepted upload size in bytes for a media kind"""
    if kind == ContentType.VIDEO:
        return settings.MAX_VIDEO_UPLOAD_SIZE
    return settings.MAX_UPLOAD_SIZE


def format_size(size: int) -> str:
    return f"{size / (1024 * 1024):g}MB"


def parse_priority(raw: Any = _MISSING) -> Union[int, FieldError]:
    """Absent -> default priority; present but not an integer in range -> FieldError."""
    if raw is _MISSING or raw is None:
        return DEFAULT_PRIORITY

    message = f"Priority must be a whole number between {MIN_PRIORITY} and {MAX_PRIORITY}"
    if isinstance(raw, bool):
        return FieldError("priority", message)
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, float):
        if not raw.is_integer():
            return FieldError("priority", message)
        value = int(raw)
    elif isinstance(raw, str):
        text = raw.strip()
        try:
            value = int(text)
        except ValueError:
            try:
                as_float = float(text)
            except ValueError:
                return FieldError("priority", message)
            if not as_float.is_integer():
                return FieldError("priority", message)
            value = int(as_float)
    else:
        return FieldError("priority", message)

    if not MIN_PRIORITY <= value <= MAX_PRIORITY:
        return FieldError("priority", message)
    return value


def _validate_upload(kind: ContentType, upload: Optional[UploadDescriptor]) -> List[FieldError]:
    if upload is None or not (upload.file_name or "").strip():
        return [FieldError("file", f"A file is required for {kind.value} notices")]

    errors = []
    mime = normalize_mime(upload.mime_type)
    allowed = allowed_mime_types(kind)
    if mime not in allowed:
        errors.append(FieldError(
            "file",
            f"Unsupported file type '{mime or 'unknown'}' for {kind.value} notices. "
            f"Allowed: {', '.join(sorted(allowed))}",
        ))

    named_kind = type_from_url(upload.file_name)
    if named_kind is not None and named_kind != kind:
        errors.append(FieldError(
            "file",
            f"File extension of '{upload.file_name.strip()}' does not match {kind.value} notices",
        ))

    ceiling = size_ceiling(kind)
    if upload.size is not None and upload.size > ceiling:
        errors.append(FieldError("file", f"File too large. Max size is {format_size(ceiling)}"))
    return errors


def validate_submission(
    title: Optional[str],
    notice_type: Optional[str],
    priority: Any = _MISSING,
    content: Optional[str] = None,
    upload: Optional[UploadDescriptor] = None,
) -> ValidationResult:
    """Validate raw submission fields into a Submission, collecting one error per violated field."""
    errors: List[FieldError] = []

    clean_title = (title or "").strip()
    if not clean_title:
        errors.append(FieldError("title", "Title is required"))

    kind = ContentType.parse(notice_type)
    if kind is None:
        if notice_type is None or not str(notice_type).strip():
            errors.append(FieldError("noticeType", "Notice type is required"))
        else:
            errors.append(FieldError(
                "noticeType",
                f"Notice type must be one of: {', '.join(ContentType.values())}",
            ))

    parsed_priority = parse_priority(priority)
    if isinstance(parsed_priority, FieldError):
        errors.append(parsed_priority)

    if kind == ContentType.TEXT:
        clean_content = (content or "").strip()
        if not clean_content:
            errors.append(FieldError("content", "Content is required for text notices"))
    elif kind is not None:
        errors.extend(_validate_upload(kind, upload))

    if errors:
        return ValidationResult(errors=errors)

    if kind == ContentType.TEXT:
        return ValidationResult(submission=TextSubmission(
            title=clean_title, content=clean_content, priority=parsed_priority,
        ))
    return ValidationResult(submission=FileSubmission(
        title=clean_title, kind=kind, priority=parsed_priority, upload=upload,
    ))
