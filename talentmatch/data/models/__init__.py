"""
Pydantic data models and schemas for TalentMatch.

This module provides all data models used by the scorer, the application
lifecycle and the statistics aggregator.
"""

# Base models
from .base import BaseDocument, EmbeddedModel, PyObjectId, TimestampMixin, to_naive_utc, utc_now

# Profile models
from .profile import (
    CandidateProfile,
    CandidateSkill,
    EducationRecord,
    JobRequirements,
)

# Match models
from .match import (
    CRITERIA,
    MatchBreakdown,
    MatchResult,
    WeightingProfile,
)

# Application models
from .application import (
    ApplicantSnapshot,
    Application,
    CommunicationEntry,
    InterviewDetails,
    NoteEntry,
    QuestionAnswer,
    SubmissionContext,
    TimelineEntry,
    ViewRecord,
)

# Stats models
from .stats import (
    ApplicationStats,
    JobAnalytics,
    JobStatusBreakdown,
    RankedCandidate,
    StatusStats,
)

__all__ = [
    # Base
    "BaseDocument",
    "EmbeddedModel",
    "PyObjectId",
    "TimestampMixin",
    "to_naive_utc",
    "utc_now",
    # Profile
    "CandidateProfile",
    "CandidateSkill",
    "EducationRecord",
    "JobRequirements",
    # Match
    "CRITERIA",
    "MatchBreakdown",
    "MatchResult",
    "WeightingProfile",
    # Application
    "ApplicantSnapshot",
    "Application",
    "CommunicationEntry",
    "InterviewDetails",
    "NoteEntry",
    "QuestionAnswer",
    "SubmissionContext",
    "TimelineEntry",
    "ViewRecord",
    # Stats
    "ApplicationStats",
    "JobAnalytics",
    "JobStatusBreakdown",
    "RankedCandidate",
    "StatusStats",
]
