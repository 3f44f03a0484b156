"""
Base repository class providing common CRUD operations.

All entity-specific repositories inherit from this base class.
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, Optional, TypeVar

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.collection import Collection
from pymongo.results import InsertOneResult

from talentmatch.data.database import DatabaseManager, get_database_manager
from talentmatch.data.models.base import BaseDocument, utc_now
from talentmatch.utils.logger import get_logger

logger = get_logger(__name__)

# Type variable for document models
T = TypeVar("T", bound=BaseDocument)


class BaseRepository(ABC, Generic[T]):
    """
    Abstract base repository providing common database operations.

    Implements both synchronous and asynchronous CRUD operations.
    Subclasses must define the collection name and model class.
    """

    @property
    @abstractmethod
    def collection_name(self) -> str:
        """Name of the MongoDB collection."""
        pass

    @property
    @abstractmethod
    def model_class(self) -> type[T]:
        """Pydantic model class for this repository."""
        pass

    def __init__(self, db_manager: Optional[DatabaseManager] = None) -> None:
        """Initialize repository with database connection."""
        self._db_manager = db_manager or get_database_manager()

    # -------------------------------------------------------------------------
    # Collection Access
    # -------------------------------------------------------------------------

    def _get_sync_collection(self) -> Collection:
        """Get synchronous collection instance."""
        return self._db_manager.get_sync_collection(self.collection_name)

    def _get_async_collection(self) -> AsyncIOMotorCollection:
        """Get asynchronous collection instance."""
        return self._db_manager.get_async_collection(self.collection_name)

    # -------------------------------------------------------------------------
    # Document Conversion
    # -------------------------------------------------------------------------

    def _to_model(self, document: Optional[dict[str, Any]]) -> Optional[T]:
        """Convert MongoDB document to Pydantic model."""
        if document is None:
            return None
        return self.model_class.model_validate(document)

    def _to_models(self, documents: list[dict[str, Any]]) -> list[T]:
        """Convert list of MongoDB documents to Pydantic models."""
        return [self._to_model(doc) for doc in documents if doc is not None]

    def _to_document(self, model: T) -> dict[str, Any]:
        """Convert Pydantic model to MongoDB document."""
        return model.model_dump_mongo()

    @staticmethod
    def _to_object_id(id_value: str | ObjectId) -> ObjectId:
        """Convert string to ObjectId if needed."""
        if isinstance(id_value, ObjectId):
            return id_value
        return ObjectId(id_value)

    # -------------------------------------------------------------------------
    # Synchronous Operations
    # -------------------------------------------------------------------------

    def create(self, model: T) -> T:
        """Insert a new document and assign its id to the model."""
        collection = self._get_sync_collection()
        document = self._to_document(model)
        document.setdefault("created_at", utc_now())
        document["updated_at"] = document.get("updated_at") or utc_now()

        result: InsertOneResult = collection.insert_one(document)
        model.id = result.inserted_id
        logger.debug(f"Created {self.collection_name} document: {result.inserted_id}")
        return model

    def get_by_id(self, id_value: str | ObjectId) -> Optional[T]:
        """Get a document by its ID."""
        collection = self._get_sync_collection()
        document = collection.find_one({"_id": self._to_object_id(id_value)})
        return self._to_model(document)

    def find(self, query: dict[str, Any], sort_by: str = "created_at", sort_order: int = -1) -> list[T]:
        """Find every document matching a query."""
        collection = self._get_sync_collection()
        cursor = collection.find(query).sort(sort_by, sort_order)
        return self._to_models(list(cursor))

    # -------------------------------------------------------------------------
    # Asynchronous Operations
    # -------------------------------------------------------------------------

    async def create_async(self, model: T) -> T:
        """Insert a new document asynchronously."""
        collection = self._get_async_collection()
        document = self._to_document(model)
        document.setdefault("created_at", utc_now())
        document["updated_at"] = document.get("updated_at") or utc_now()

        result: InsertOneResult = await collection.insert_one(document)
        model.id = result.inserted_id
        logger.debug(f"Created {self.collection_name} document: {result.inserted_id}")
        return model

    async def get_by_id_async(self, id_value: str | ObjectId) -> Optional[T]:
        """Get a document by its ID asynchronously."""
        collection = self._get_async_collection()
        document = await collection.find_one({"_id": self._to_object_id(id_value)})
        return self._to_model(document)

    async def find_async(
        self, query: dict[str, Any], sort_by: str = "created_at", sort_order: int = -1
    ) -> list[T]:
        """Find every document matching a query asynchronously."""
        collection = self._get_async_collection()
        cursor = collection.find(query).sort(sort_by, sort_order)
        documents = await cursor.to_list(length=None)
        return self._to_models(documents)

