"""
Notice domain schemas

API JSON is camelCase; backend code stays snake_case.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import List, Optional

from app.models.notice import ContentType, NoticeDocument


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NoticeOut(CamelModel):
    id: str = Field(..., description="Notice identifier")
    title: str = Field(..., description="Notice title")
    content: str = Field("", description="Body text; empty for media notices")
    media_url: str = Field("", description="Store-relative URL; empty for text notices")
    priority: int = Field(..., description="1 (highest) to 5")
    created_by: str = Field("", description="Ingestion boundary that created the notice")
    date: datetime = Field(..., description="Creation timestamp")
    original_file_name: Optional[str] = Field(None, description="Uploaded file name for media notices")
    content_type: ContentType = Field(..., description="text|pdf|image|video")

    @classmethod
    def from_document(cls, doc: NoticeDocument) -> "NoticeOut":
        return cls(
            id=doc.id or "",
            title=doc.title,
            content=doc.content,
            media_url=doc.media_url,
            priority=doc.priority,
            created_by=doc.created_by,
            date=doc.date,
            original_file_name=doc.original_file_name,
            content_type=doc.content_type,
        )


class GroupedNoticesOut(BaseModel):
    text: List[NoticeOut] = Field(default_factory=list)
    pdf: List[NoticeOut] = Field(default_factory=list)
    image: List[NoticeOut] = Field(default_factory=list)
    video: List[NoticeOut] = Field(default_factory=list)


class FieldErrorOut(BaseModel):
    field: str
    message: str


class SubmissionResponse(CamelModel):
    success: bool
    id: Optional[str] = None
    error: Optional[str] = None
    field_errors: List[FieldErrorOut] = Field(default_factory=list)


class UploadResponse(CamelModel):
    success: bool
    url: Optional[str] = None
    original_filename: Optional[str] = None
    error: Optional[str] = None
