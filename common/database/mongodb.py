"""
Generic MongoDB connection manager.

Provides async MongoDB connectivity via Motor. The connection object is
created by the application entry point and handed to whatever needs it;
there is no module-level database singleton.

Example:
    from common.database import MongoDB, MongoStore

    db = MongoDB()
    await db.connect(uri="mongodb://localhost:27017", database_name="portfolio")
    store = MongoStore(db.db)
"""

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

logger = logging.getLogger(__name__)


class MongoDB:
    """Generic MongoDB connection manager - works with any database."""

    def __init__(self):
        self._client: Optional[AsyncIOMotorClient] = None
        self._database_name: Optional[str] = None
        self._connected: bool = False

    async def connect(
        self,
        uri: str,
        database_name: str,
        server_selection_timeout_ms: int = 5000,
    ) -> None:
        """
        Connect to MongoDB and verify the server is reachable.

        Args:
            uri: MongoDB connection string
            database_name: Name of the database to use
            server_selection_timeout_ms: How long to wait for a reachable server
        """
        # Mask the URI for logging (hide credentials)
        masked_uri = uri.split("@")[-1] if "@" in uri else uri
        logger.info(f"Connecting to MongoDB: {masked_uri}")
        logger.debug(f"Database name: {database_name}")

        try:
            self._client = AsyncIOMotorClient(
                uri,
                tz_aware=True,
                serverSelectionTimeoutMS=server_selection_timeout_ms,
            )
            self._database_name = database_name
            await self._client.admin.command("ping")
            self._connected = True
            logger.info(f"Successfully connected to MongoDB database: {database_name}")
        except Exception as e:
            logger.error(f"Failed to connect to MongoDB: {e}")
            raise

    async def disconnect(self) -> None:
        """Close the MongoDB connection."""
        if self._client:
            logger.info(f"Disconnecting from MongoDB database: {self._database_name}")
            self._client.close()
            self._client = None
            self._database_name = None
            self._connected = False
            logger.debug("MongoDB connection closed")

    @property
    def is_connected(self) -> bool:
        """Check if database is connected."""
        return self._connected

    @property
    def database_name(self) -> Optional[str]:
        """Get the current database name."""
        return self._database_name

    @property
    def db(self) -> AsyncIOMotorDatabase:
        """Get the underlying Motor database instance."""
        if not self._client or not self._database_name:
            raise RuntimeError("Database not connected")
        return self._client[self._database_name]
