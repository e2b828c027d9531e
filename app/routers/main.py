from fastapi import APIRouter
from app.routers.notice_router import router as notice_router
from app.routers.upload_router import router as upload_router

api_router = APIRouter()

api_router.include_router(notice_router, tags=["notices"])
api_router.include_router(upload_router, tags=["uploads"])
