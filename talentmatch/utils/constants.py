"""
Application-wide constants for TalentMatch.

Status enums, the application transition table, the degree hierarchy used
for education scoring and the named weighting profiles of the match scorer.
"""

from enum import Enum
from typing import Final


# =============================================================================
# Application Constants
# =============================================================================

APP_NAME: Final[str] = "TalentMatch"
APP_DISPLAY_NAME: Final[str] = "TalentMatch Matching & Application Engine"
VERSION: Final[str] = "0.1.0"


# =============================================================================
# Enums
# =============================================================================


class ApplicationStatus(str, Enum):
    """Status of a job application."""

    PENDING = "pending"
    REVIEWED = "reviewed"
    SHORTLISTED = "shortlisted"
    INTERVIEW = "interview"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


class TimelineAction(str, Enum):
    """Actions recorded on an application timeline."""

    APPLIED = "applied"
    REVIEWED = "reviewed"
    SHORTLISTED = "shortlisted"
    INTERVIEW_SCHEDULED = "interview_scheduled"
    INTERVIEW_COMPLETED = "interview_completed"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"
    NOTE_ADDED = "note_added"
    COMMUNICATION_SENT = "communication_sent"
    STATUS_UPDATED = "status_updated"


class CommunicationType(str, Enum):
    """Channel used for a communication with the applicant."""

    EMAIL = "email"
    MESSAGE = "message"
    CALL = "call"


class CommunicationStatus(str, Enum):
    """Delivery status of a communication."""

    SENT = "sent"
    DELIVERED = "delivered"
    READ = "read"
    FAILED = "failed"


class InterviewType(str, Enum):
    """Format of a scheduled interview."""

    PHONE = "phone"
    VIDEO = "video"
    IN_PERSON = "in-person"


class EmploymentType(str, Enum):
    """Type of employment for a position."""

    FULL_TIME = "full_time"
    PART_TIME = "part_time"
    CONTRACT = "contract"
    TEMPORARY = "temporary"
    INTERNSHIP = "internship"
    FREELANCE = "freelance"
    VOLUNTEER = "volunteer"
    REMOTE = "remote"
    OTHER = "other"


class EducationLevel(str, Enum):
    """Minimum education a job can require."""

    NONE = "none"
    HIGH_SCHOOL = "high school"
    ASSOCIATE = "associate"
    BACHELOR = "bachelor"
    MASTER = "master"
    DOCTORATE = "doctorate"


class MatchScoreLevel(Enum):
    """Categorical levels for 0-100 match scores."""

    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"

    @classmethod
    def from_score(cls, score: float) -> "MatchScoreLevel":
        """Convert a numeric score to a level."""
        if score >= SCORE_THRESHOLDS["excellent"]:
            return cls.EXCELLENT
        elif score >= SCORE_THRESHOLDS["good"]:
            return cls.GOOD
        elif score >= SCORE_THRESHOLDS["fair"]:
            return cls.FAIR
        return cls.POOR


class AuditAction(str, Enum):
    """Types of lifecycle actions written to the audit log."""

    APPLICATION_CREATED = "application_created"
    APPLICATION_SCORED = "application_scored"
    STATUS_CHANGED = "application_status_changed"
    APPLICATION_VIEWED = "application_viewed"
    NOTE_ADDED = "application_note_added"
    COMMUNICATION_SENT = "application_communication_sent"
    INTERVIEW_COMPLETED = "application_interview_completed"
    APPLICATION_WITHDRAWN = "application_withdrawn"


# =============================================================================
# Lifecycle Constants
# =============================================================================

TERMINAL_STATUSES: Final[frozenset[ApplicationStatus]] = frozenset(
    {
        ApplicationStatus.ACCEPTED,
        ApplicationStatus.REJECTED,
        ApplicationStatus.WITHDRAWN,
    }
)

ALLOWED_TRANSITIONS: Final[dict[ApplicationStatus, frozenset[ApplicationStatus]]] = {
    ApplicationStatus.PENDING: frozenset(
        {
            ApplicationStatus.REVIEWED,
            ApplicationStatus.SHORTLISTED,
            ApplicationStatus.INTERVIEW,
            ApplicationStatus.ACCEPTED,
            ApplicationStatus.REJECTED,
            ApplicationStatus.WITHDRAWN,
        }
    ),
    ApplicationStatus.REVIEWED: frozenset(
        {
            ApplicationStatus.SHORTLISTED,
            ApplicationStatus.INTERVIEW,
            ApplicationStatus.ACCEPTED,
            ApplicationStatus.REJECTED,
            ApplicationStatus.WITHDRAWN,
        }
    ),
    ApplicationStatus.SHORTLISTED: frozenset(
        {
            ApplicationStatus.INTERVIEW,
            ApplicationStatus.ACCEPTED,
            ApplicationStatus.REJECTED,
            ApplicationStatus.WITHDRAWN,
        }
    ),
    ApplicationStatus.INTERVIEW: frozenset(
        {
            ApplicationStatus.ACCEPTED,
            ApplicationStatus.REJECTED,
            ApplicationStatus.WITHDRAWN,
        }
    ),
    ApplicationStatus.ACCEPTED: frozenset(),
    ApplicationStatus.REJECTED: frozenset(),
    ApplicationStatus.WITHDRAWN: frozenset(),
}

# Statuses from which the applicant may still withdraw
WITHDRAWABLE_STATUSES: Final[frozenset[ApplicationStatus]] = frozenset(
    {
        ApplicationStatus.PENDING,
        ApplicationStatus.REVIEWED,
        ApplicationStatus.SHORTLISTED,
        ApplicationStatus.INTERVIEW,
    }
)

# Extra timeline entry appended after status_updated for these targets
STATUS_SIDE_ENTRIES: Final[dict[ApplicationStatus, tuple[TimelineAction, str]]] = {
    ApplicationStatus.INTERVIEW: (TimelineAction.INTERVIEW_SCHEDULED, "Interview scheduled"),
    ApplicationStatus.ACCEPTED: (TimelineAction.ACCEPTED, "Application accepted"),
    ApplicationStatus.REJECTED: (TimelineAction.REJECTED, "Application rejected"),
}


# =============================================================================
# Scoring Constants
# =============================================================================

# Degree keywords checked in insertion order, first substring hit wins
DEGREE_HIERARCHY: Final[dict[str, int]] = {
    "high school": 1,
    "diploma": 2,
    "associate": 3,
    "bachelor": 4,
    "master": 5,
    "phd": 6,
    "doctorate": 6,
}

# Percent weights per criterion for each named weighting profile
WEIGHTING_PROFILES: Final[dict[str, dict[str, int]]] = {
    # Employer reviewing an application against the job
    "employer": {
        "skills": 40,
        "experience": 30,
        "education": 15,
        "location": 15,
        "employment_type": 0,
    },
    # Candidate browsing jobs against their own preferences
    "candidate": {
        "skills": 40,
        "experience": 30,
        "education": 5,
        "location": 15,
        "employment_type": 10,
    },
}

SCORE_THRESHOLDS: Final[dict[str, float]] = {
    "excellent": 85,
    "good": 70,
    "fair": 50,
    "poor": 30,
}
