from fastapi import Depends, Request
from app.core.config import settings
from app.db.database import MongoConnector, get_connector
from app.services.file_store import FileStore, create_file_store
from app.services.notice_repository import NoticeRepository
from app.services.notice_service import NoticeService


def get_file_store(request: Request) -> FileStore:
    store = getattr(request.app.state, "file_store", None)
    if store is None:
        store = create_file_store()
        request.app.state.file_store = store
    return store


def get_notice_repository(connector: MongoConnector = Depends(get_connector)) -> NoticeRepository:
    return NoticeRepository(connector, settings.NOTICES_COLLECTION)


def get_notice_service(
    repository: NoticeRepository = Depends(get_notice_repository),
    file_store: FileStore = Depends(get_file_store),
) -> NoticeService:
    return NoticeService(repository, file_store, settings.NOTICE_CREATED_BY)
