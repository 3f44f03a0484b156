"""
Utility modules for TalentMatch.

This package contains shared utilities used across the application:
- config: Configuration management
- logger: Logging infrastructure
- constants: Application-wide constants
"""

from talentmatch.utils.config import (
    AppSettings,
    get_settings,
    reload_settings,
    ROOT_DIR,
)
from talentmatch.utils.constants import (
    APP_NAME,
    APP_DISPLAY_NAME,
    VERSION,
    ALLOWED_TRANSITIONS,
    TERMINAL_STATUSES,
    WEIGHTING_PROFILES,
    ApplicationStatus,
    AuditAction,
    EducationLevel,
    EmploymentType,
    MatchScoreLevel,
    TimelineAction,
)
from talentmatch.utils.logger import (
    setup_logging,
    get_logger,
    audit_log,
    LoggerMixin,
    log,
)

__all__ = [
    # Config
    "AppSettings",
    "get_settings",
    "reload_settings",
    "ROOT_DIR",
    # Constants
    "APP_NAME",
    "APP_DISPLAY_NAME",
    "VERSION",
    "ALLOWED_TRANSITIONS",
    "TERMINAL_STATUSES",
    "WEIGHTING_PROFILES",
    "ApplicationStatus",
    "AuditAction",
    "EducationLevel",
    "EmploymentType",
    "MatchScoreLevel",
    "TimelineAction",
    # Logger
    "setup_logging",
    "get_logger",
    "audit_log",
    "LoggerMixin",
    "log",
]
