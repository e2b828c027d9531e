from typing import List, Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from app.core.exceptions import PersistenceError, StorageError, ValidationError
from app.routers.dependencies import get_notice_repository, get_notice_service
from app.routers.responses import envelope, storage_failure, validation_failure
from app.schemas.notice_schema import GroupedNoticesOut, NoticeOut, SubmissionResponse
from app.services.bulletin_service import derive_bulletin
from app.services.notice_repository import NoticeRepository, group_by_content_type
from app.services.notice_service import IncomingFile, NoticeService
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


def incoming_file(file: Optional[UploadFile], file_name: Optional[str] = None) -> Optional[IncomingFile]:
    """Wrap an UploadFile; an empty file part counts as no file"""
    if file is None or not file.filename:
        return None
    return IncomingFile(
        source=file,
        file_name=(file_name or "").strip() or file.filename,
        mime_type=file.content_type,
        size=getattr(file, "size", None),
    )


@router.post("/notices", response_model=SubmissionResponse)
async def create_notice(
    title: Optional[str] = Form(None),
    notice_type: Optional[str] = Form(None, alias="noticeType"),
    priority: Optional[str] = Form(None),
    content: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    file_name: Optional[str] = Form(None, alias="fileName"),
    service: NoticeService = Depends(get_notice_service),
):
    """Submit a text notice, or a pdf/image/video notice with its file."""
    try:
        notice_id = await service.submit(
            title=title,
            notice_type=notice_type,
            priority=priority,
            content=content,
            incoming=incoming_file(file, file_name),
        )
        return envelope(SubmissionResponse(success=True, id=notice_id))
    except ValidationError as e:
        return validation_failure(e)
    except StorageError as e:
        logger.error(f"Error storing notice file ({e.reason}): {e}")
        return storage_failure(e)
    except PersistenceError as e:
        logger.error(f"Error saving notice: {e}")
        return envelope(SubmissionResponse(success=False, error=str(e)), status.HTTP_500_INTERNAL_SERVER_ERROR)
    except Exception as e:
        logger.error(f"Unexpected error adding notice: {e}", exc_info=True)
        return envelope(
            SubmissionResponse(success=False, error="An unexpected error occurred while adding the notice."),
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    finally:
        if file is not None:
            await file.close()


@router.get("/notices", response_model=List[NoticeOut])
async def list_notices(repository: NoticeRepository = Depends(get_notice_repository)):
    """All notices, priority 1 first, newest first within a priority."""
    notices = await repository.list_all()
    return [NoticeOut.from_document(n) for n in notices]


@router.get("/notices/grouped", response_model=GroupedNoticesOut)
async def list_notices_grouped(repository: NoticeRepository = Depends(get_notice_repository)):
    """Sorted notices split into text, pdf, image and video blocks."""
    groups = group_by_content_type(await repository.list_all())
    return GroupedNoticesOut(**{
        kind: [NoticeOut.from_document(n) for n in notices] for kind, notices in groups.items()
    })


@router.get("/notices/bulletin", response_model=List[str])
async def get_bulletin(repository: NoticeRepository = Depends(get_notice_repository)):
    """Up to five priority-1 titles for the ticker."""
    return derive_bulletin(await repository.list_all())
