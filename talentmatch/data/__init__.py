"""
Data layer for TalentMatch.

Provides database connections, data models, and repository classes
for the persistence collaborator the core hands its entities to.

Submodules:
- database: MongoDB connection management
- models: Pydantic data models/schemas
- repositories: Database operations and queries
"""

from .database import DatabaseManager, build_mongo_uri, get_database_manager

__all__ = [
    "DatabaseManager",
    "build_mongo_uri",
    "get_database_manager",
]
