"""
Database connection manager for TalentMatch.

Provides MongoDB connection management with both synchronous (PyMongo)
and asynchronous (Motor) client support.
"""

from typing import Any, Optional
from urllib.parse import quote_plus

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, MongoClient
from pymongo.database import Database
from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError

from talentmatch.utils.config import DatabaseSettings, get_settings
from talentmatch.utils.logger import get_logger

logger = get_logger(__name__)

# Characters never valid in a host name that could smuggle extra URI options
_FORBIDDEN_HOST_CHARS = (";", "&", "|", "$", "`")


def build_mongo_uri(db_settings: DatabaseSettings) -> str:
    """
    Build a MongoDB connection URI from settings.

    Credentials are URL-encoded.

    Raises:
        ValueError: If the host is empty or contains shell metacharacters
    """
    host = db_settings.host.strip()
    if not host or any(c in host for c in _FORBIDDEN_HOST_CHARS):
        raise ValueError(f"Invalid database host: {host}")

    auth = ""
    if db_settings.username and db_settings.password:
        auth = f"{quote_plus(db_settings.username)}:{quote_plus(db_settings.password)}@"

    return f"mongodb://{auth}{host}:{db_settings.port}"


class DatabaseManager:
    """
    Manages MongoDB database connections.

    Supports both synchronous and asynchronous operations.
    Implements singleton pattern for connection reuse.
    """

    _instance: Optional["DatabaseManager"] = None
    _sync_client: Optional[MongoClient] = None
    _async_client: Optional[AsyncIOMotorClient] = None

    def __new__(cls) -> "DatabaseManager":
        """Ensure singleton instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        """Initialize database manager with settings."""
        if getattr(self, "_initialized", False):
            return

        self._settings = get_settings()
        self._db_name = self._settings.database.name
        self._uri = build_mongo_uri(self._settings.database)
        self._initialized = True

    @property
    def applications_collection(self) -> str:
        return self._settings.database.applications_collection

    # -------------------------------------------------------------------------
    # Synchronous Client
    # -------------------------------------------------------------------------

    def get_sync_client(self) -> MongoClient:
        """Get or create synchronous MongoDB client."""
        if self._sync_client is None:
            logger.info("Creating synchronous MongoDB client")
            self._sync_client = MongoClient(
                self._uri,
                serverSelectionTimeoutMS=5000,
                connectTimeoutMS=5000,
                maxPoolSize=50,
            )
        return self._sync_client

    def get_sync_database(self) -> Database:
        """Get synchronous database instance."""
        return self.get_sync_client()[self._db_name]

    def get_sync_collection(self, collection_name: str) -> Any:
        """Get a synchronous collection by name."""
        return self.get_sync_database()[collection_name]

    def check_sync_connection(self) -> bool:
        """Check if synchronous connection is healthy."""
        try:
            self.get_sync_client().admin.command("ping")
            return True
        except (ConnectionFailure, ServerSelectionTimeoutError) as e:
            logger.error(f"Sync connection check failed: {e}")
            self._sync_client = None
            return False

    # -------------------------------------------------------------------------
    # Asynchronous Client
    # -------------------------------------------------------------------------

    def get_async_client(self) -> AsyncIOMotorClient:
        """Get or create asynchronous MongoDB client."""
        if self._async_client is None:
            logger.info("Creating asynchronous MongoDB client")
            self._async_client = AsyncIOMotorClient(
                self._uri,
                serverSelectionTimeoutMS=5000,
                connectTimeoutMS=5000,
                maxPoolSize=50,
            )
        return self._async_client

    def get_async_database(self) -> AsyncIOMotorDatabase:
        """Get asynchronous database instance."""
        return self.get_async_client()[self._db_name]

    def get_async_collection(self, collection_name: str) -> Any:
        """Get an asynchronous collection by name."""
        return self.get_async_database()[collection_name]

    # -------------------------------------------------------------------------
    # Lifecycle Management
    # -------------------------------------------------------------------------

    def close(self) -> None:
        """Close whichever clients were opened; they are recreated on next use."""
        if self._sync_client is not None:
            logger.info("Closing synchronous MongoDB client")
            self._sync_client.close()
            self._sync_client = None
        if self._async_client is not None:
            logger.info("Closing asynchronous MongoDB client")
            self._async_client.close()
            self._async_client = None

    # -------------------------------------------------------------------------
    # Index Management
    # -------------------------------------------------------------------------

    async def ensure_indexes(self) -> None:
        """Create the application collection indexes."""
        logger.info("Ensuring database indexes")

        applications = self.get_async_collection(self.applications_collection)
        # One application per applicant per job
        await applications.create_index(
            [("job_id", ASCENDING), ("applicant_id", ASCENDING)], unique=True
        )
        await applications.create_index("status")
        await applications.create_index("company_id")
        await applications.create_index("applied_at")
        await applications.create_index("score")
        await applications.create_index("skills_match")

        logger.info("Database indexes created successfully")


# Global database manager instance
_db_manager: Optional[DatabaseManager] = None


def get_database_manager() -> DatabaseManager:
    """Get the global database manager instance."""
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
    return _db_manager
