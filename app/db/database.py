from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional
from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorClientSession, AsyncIOMotorCollection
from app.core.config import settings
from app.core.exceptions import PersistenceError
import logging

logger = logging.getLogger(__name__)


class CollectionHandle:
    """A collection bound to the client session acquired for one operation"""

    def __init__(self, collection: AsyncIOMotorCollection, session: Optional[AsyncIOMotorClientSession]):
        self.collection = collection
        self.session = session


class MongoConnector:
    """Owns the pooled MongoDB client; hands out one session per logical operation"""

    def __init__(self, uri: str, database_name: str, timeout_ms: int = 5000):
        self.uri = uri
        self.database_name = database_name
        self.timeout_ms = timeout_ms
        self.client: Optional[AsyncIOMotorClient] = None

    async def connect(self) -> bool:
        """Create the client and ping the server. Returns False if the server is unreachable."""
        self.client = AsyncIOMotorClient(
            self.uri,
            tz_aware=True,
            serverSelectionTimeoutMS=self.timeout_ms,
        )
        try:
            await self.client.admin.command("ping")
            logger.info("Connected to MongoDB successfully")
            return True
        except Exception as e:
            # The client keeps reconnecting in the background; reads degrade until it does
            logger.error(f"MongoDB ping failed at startup: {e}")
            return False

    async def close(self):
        """Close database connection"""
        if self.client is not None:
            self.client.close()
            self.client = None
            logger.info("Disconnected from MongoDB")

    @asynccontextmanager
    async def acquire(self, collection_name: str) -> AsyncIterator[CollectionHandle]:
        """Yield a collection handle with its own session, ended on every exit path."""
        if self.client is None:
            raise PersistenceError("MongoDB is not connected")
        try:
            session = await self.client.start_session()
        except Exception as e:
            raise PersistenceError(f"Could not acquire MongoDB session: {e}") from e
        try:
            yield CollectionHandle(self.client[self.database_name][collection_name], session)
        finally:
            await session.end_session()


def create_connector() -> MongoConnector:
    return MongoConnector(settings.MONGODB_URI, settings.DATABASE_NAME, settings.MONGODB_TIMEOUT_MS)


def get_connector(request: Request) -> MongoConnector:
    """FastAPI dependency returning the connector created by the application lifespan"""
    connector = getattr(request.app.state, "mongo", None)
    if connector is None:
        # Unconnected: every acquire() raises PersistenceError, so reads fall back
        logger.warning("MongoDB connector missing from app state")
        return create_connector()
    return connector
