"""
Logging infrastructure for TalentMatch.

Uses Loguru for console and file logging. A separate audit.log sink keeps
the application trail: one record per lifecycle mutation (status changes,
withdrawals, notes, messages and interview outcomes), plus SCORING records
when match results are written and ACCESS records when staff open an
application. Contact details and credentials are redacted before writing.
"""

import sys
from typing import Any

from loguru import logger

from talentmatch.utils.config import get_settings


def setup_logging() -> None:
    """
    Configure application-wide logging.

    Sets up console, rotating file and audit sinks from the logging settings.
    """
    settings = get_settings()
    log_settings = settings.logging

    logger.remove()

    # The test suite installs its own sinks
    if settings.environment == "testing":
        return

    # Stack-trace variable dumps only outside production
    enable_diagnose = settings.debug and settings.environment == "development"

    if log_settings.console_output:
        logger.add(
            sys.stderr,
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>",
            level=log_settings.level,
            colorize=True,
            backtrace=True,
            diagnose=enable_diagnose,
        )

    log_file = log_settings.file_path
    log_file.parent.mkdir(parents=True, exist_ok=True)

    logger.add(
        log_file,
        format=log_settings.format,
        level=log_settings.level,
        rotation=log_settings.rotation,
        retention=log_settings.retention,
        compression="zip",
        backtrace=True,
        diagnose=enable_diagnose,
        enqueue=True,
    )

    audit_log_path = log_file.parent / "audit.log"
    logger.add(
        audit_log_path,
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {extra[audit_type]} | {message}",
        level="INFO",
        filter=lambda record: "audit_type" in record["extra"],
        rotation="1 week",
        retention="1 year",
        compression="zip",
        enqueue=True,
    )

    logger.info(f"Logging initialized - Level: {log_settings.level}")


def get_logger(name: str) -> Any:
    """
    Get a logger instance with the specified name.

    Args:
        name: The name for the logger (typically __name__)

    Returns:
        A configured logger instance
    """
    return logger.bind(name=name)


SENSITIVE_KEYS = {
    "password", "passwd", "pwd", "secret", "token", "api_key",
    "apikey", "auth", "credential", "private_key", "access_token",
    "refresh_token", "email", "phone",
}


def _sanitize_for_logging(data: Any) -> Any:
    """Redact sensitive fields from nested dicts and lists."""
    if isinstance(data, dict):
        return {
            k: "***REDACTED***" if any(s in str(k).lower() for s in SENSITIVE_KEYS) else _sanitize_for_logging(v)
            for k, v in data.items()
        }
    elif isinstance(data, list):
        return [_sanitize_for_logging(item) for item in data]
    return data


def audit_log(
    action: str,
    details: dict[str, Any],
    audit_type: str = "LIFECYCLE",
) -> None:
    """
    Write one application audit record.

    The record is bound with ``audit_type`` so only the audit sink picks it
    up. Lifecycle callers pass an AuditAction value and the application id,
    the acting user and the before/after status where one changed.

    Args:
        action: AuditAction value, e.g. "application_status_changed"
        details: Record fields; email, phone and credential keys are redacted
        audit_type: LIFECYCLE for mutations, SCORING for match results,
            ACCESS for staff views
    """
    sanitized_details = _sanitize_for_logging(details)
    logger.bind(audit_type=audit_type).info(f"{action} | {sanitized_details}")


class LoggerMixin:
    """Gives the scorer, lifecycle and aggregator a logger bound to their class name."""

    @property
    def logger(self) -> Any:
        """Get a logger instance for this class."""
        if not hasattr(self, "_logger"):
            self._logger = get_logger(self.__class__.__name__)
        return self._logger


# Module-level logger for quick access
log = logger
