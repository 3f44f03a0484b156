"""
Database repositories for TalentMatch data access.
"""

# Base repository
from .base import BaseRepository

# Entity repositories
from .application_repository import ApplicationRepository, get_application_repository

__all__ = [
    # Base
    "BaseRepository",
    # Application
    "ApplicationRepository",
    "get_application_repository",
]
