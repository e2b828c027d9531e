from typing import Optional
from fastapi import APIRouter, Depends, File, UploadFile, status
from app.core.exceptions import StorageError, ValidationError
from app.routers.dependencies import get_notice_service
from app.routers.notice_router import incoming_file
from app.routers.responses import envelope, storage_failure, validation_failure
from app.schemas.notice_schema import UploadResponse
from app.services.notice_service import NoticeService
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/uploads", response_model=UploadResponse)
async def upload_file(
    file: Optional[UploadFile] = File(None),
    service: NoticeService = Depends(get_notice_service),
):
    """Store one pdf/image/video file and return its URL."""
    incoming = incoming_file(file)
    try:
        if incoming is not None:
            logger.info(f"Received upload: {incoming.file_name}, size={incoming.size}, type={incoming.mime_type}")
        stored = await service.upload(incoming)
        return envelope(UploadResponse(success=True, url=stored.url, original_filename=stored.original_name))
    except ValidationError as e:
        # 400 when nothing was sent, 415 for a file of the wrong type
        code = status.HTTP_400_BAD_REQUEST if incoming is None else status.HTTP_415_UNSUPPORTED_MEDIA_TYPE
        return validation_failure(e, UploadResponse, code)
    except StorageError as e:
        logger.error(f"Upload failed ({e.reason}): {e}")
        return storage_failure(e, UploadResponse)
    except Exception as e:
        logger.error(f"Unexpected error during upload: {e}", exc_info=True)
        return envelope(
            UploadResponse(success=False, error="Upload failed due to an unexpected server error."),
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    finally:
        if file is not None:
            await file.close()
