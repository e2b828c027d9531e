from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from app.core.config import settings
from app.core.logging_config import configure_logging
from app.db.database import create_connector
from app.routers.main import api_router
from app.services.file_store import create_file_store
import logging

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

file_store = create_file_store()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Validate configuration, prepare the upload directory and connect to MongoDB"""
    logger.info("Starting up Notice Board API...")
    # ConfigurationError propagates and aborts startup
    settings.validate_required()
    await file_store.ensure_directory()

    connector = create_connector()
    await connector.connect()
    app.state.mongo = connector
    app.state.file_store = file_store
    logger.info("Notice Board API started successfully!")

    yield

    logger.info("Shutting down Notice Board API...")
    await connector.close()
    logger.info("Notice Board API shut down successfully!")


# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description=settings.DESCRIPTION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan,
)

# Set up CORS
cors_origins = settings.BACKEND_CORS_ORIGINS
if settings.ENVIRONMENT == "development":
    # In development, allow all origins for easier testing
    cors_origins = ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True if cors_origins != ["*"] else False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=settings.API_V1_STR)

# Stored media is served from the same prefix the file store puts in its URLs
app.mount(settings.UPLOAD_URL_PREFIX, StaticFiles(directory=str(file_store.base_path), check_dir=False), name="uploads")


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Welcome to the Notice Board API",
        "version": settings.VERSION,
        "docs": "/docs",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "version": settings.VERSION}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True if settings.ENVIRONMENT == "development" else False
    )
