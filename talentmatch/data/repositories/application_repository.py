"""
Application repository for TalentMatch.

Persists the entities ApplicationLifecycle mutates. Writes are guarded by
an optimistic version check so two staff members acting on the same
application cannot silently overwrite each other.
"""

from datetime import datetime
from typing import Any, Optional

from bson import ObjectId
from pymongo.results import UpdateResult

from talentmatch.core.exceptions import ConcurrentUpdateError
from talentmatch.data.models.application import Application
from talentmatch.utils.logger import get_logger

from .base import BaseRepository

logger = get_logger(__name__)


class ApplicationRepository(BaseRepository[Application]):
    """Repository for application document operations."""

    @property
    def collection_name(self) -> str:
        return self._db_manager.applications_collection

    @property
    def model_class(self) -> type[Application]:
        return Application

    # -------------------------------------------------------------------------
    # Conditional Writes
    # -------------------------------------------------------------------------

    def _prepare_save(self, application: Application) -> tuple[dict[str, Any], dict[str, Any]]:
        """Build the version-guarded filter and replacement document."""
        if application.id is None:
            raise ValueError("Cannot save an application without an id; use create() first")

        document = self._to_document(application)
        document.pop("_id", None)
        document["version"] = application.version + 1
        return {"_id": application.id, "version": application.version}, document

    def save(self, application: Application) -> Application:
        """
        Replace the stored application if nobody else changed it first.

        Args:
            application: Application as loaded and then mutated by the lifecycle

        Returns:
            The same application with its version bumped

        Raises:
            ConcurrentUpdateError: If the stored version no longer matches
        """
        query, document = self._prepare_save(application)
        result: UpdateResult = self._get_sync_collection().replace_one(query, document)
        return self._finish_save(application, result)

    async def save_async(self, application: Application) -> Application:
        """Replace the stored application asynchronously, version-guarded."""
        query, document = self._prepare_save(application)
        result: UpdateResult = await self._get_async_collection().replace_one(query, document)
        return self._finish_save(application, result)

    def _finish_save(self, application: Application, result: UpdateResult) -> Application:
        if result.matched_count == 0:
            logger.warning(
                f"Version conflict on application {application.id} (expected {application.version})"
            )
            raise ConcurrentUpdateError(application.id, application.version)
        application.version += 1
        logger.debug(f"Saved application {application.id} at version {application.version}")
        return application

    # -------------------------------------------------------------------------
    # Query Operations
    # -------------------------------------------------------------------------

    def build_stats_query(
        self,
        company_id: Optional[str | ObjectId] = None,
        job_id: Optional[str | ObjectId] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> dict[str, Any]:
        """Pre-filter applied before handing documents to the stats aggregator."""
        query: dict[str, Any] = {}
        if company_id is not None:
            query["company_id"] = self._to_object_id(company_id)
        if job_id is not None:
            query["job_id"] = self._to_object_id(job_id)

        applied_at: dict[str, datetime] = {}
        if start is not None:
            applied_at["$gte"] = start
        if end is not None:
            applied_at["$lte"] = end
        if applied_at:
            query["applied_at"] = applied_at
        return query

    def find_for_stats(
        self,
        company_id: Optional[str | ObjectId] = None,
        job_id: Optional[str | ObjectId] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[Application]:
        """Load the applications a statistics request covers."""
        query = self.build_stats_query(company_id, job_id, start, end)
        return self.find(query, sort_by="applied_at")

    async def find_for_stats_async(
        self,
        company_id: Optional[str | ObjectId] = None,
        job_id: Optional[str | ObjectId] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[Application]:
        """Load the applications a statistics request covers, asynchronously."""
        query = self.build_stats_query(company_id, job_id, start, end)
        return await self.find_async(query, sort_by="applied_at")

    def get_by_job_and_applicant(
        self, job_id: str | ObjectId, applicant_id: str | ObjectId
    ) -> Optional[Application]:
        """Find an applicant's existing application to a job."""
        document = self._get_sync_collection().find_one(
            {
                "job_id": self._to_object_id(job_id),
                "applicant_id": self._to_object_id(applicant_id),
            }
        )
        return self._to_model(document)


# Singleton instance
_application_repository: Optional[ApplicationRepository] = None


def get_application_repository() -> ApplicationRepository:
    """Get the application repository singleton instance."""
    global _application_repository
    if _application_repository is None:
        _application_repository = ApplicationRepository()
    return _application_repository
