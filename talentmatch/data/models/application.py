"""
Application data models for TalentMatch.

Defines the job application document together with its append-only logs
(timeline, notes, communications) and view tracking. The status field is
owned by ApplicationLifecycle; nothing else should assign it.
"""

from datetime import datetime, timedelta
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from talentmatch.utils.constants import (
    TERMINAL_STATUSES,
    ApplicationStatus,
    CommunicationStatus,
    CommunicationType,
    InterviewType,
    TimelineAction,
)

from .base import BaseDocument, EmbeddedModel, PyObjectId, to_naive_utc, utc_now


class TimelineEntry(EmbeddedModel):
    """A single fact on the application timeline."""

    action: TimelineAction
    performed_by: Optional[str] = None
    notes: Optional[str] = None
    timestamp: datetime = Field(default_factory=utc_now)
    previous_status: Optional[ApplicationStatus] = None
    new_status: Optional[ApplicationStatus] = None

    @field_validator("timestamp", mode="after")
    @classmethod
    def normalize_timestamp(cls, v: datetime) -> datetime:
        return to_naive_utc(v)


class NoteEntry(EmbeddedModel):
    """Internal note left by staff (or the system) on an application."""

    text: str = Field(..., min_length=1)
    author: Optional[str] = None
    added_at: datetime = Field(default_factory=utc_now)

    @field_validator("added_at", mode="after")
    @classmethod
    def normalize_added_at(cls, v: datetime) -> datetime:
        return to_naive_utc(v)


class CommunicationEntry(EmbeddedModel):
    """A message, email or call logged against an application."""

    type: CommunicationType
    subject: str = ""
    body: str = ""
    author: Optional[str] = None
    sent_at: datetime = Field(default_factory=utc_now)
    status: CommunicationStatus = CommunicationStatus.SENT

    @field_validator("sent_at", mode="after")
    @classmethod
    def normalize_sent_at(cls, v: datetime) -> datetime:
        return to_naive_utc(v)


class ViewRecord(EmbeddedModel):
    """First time a given user opened the application."""

    user: str
    viewed_at: datetime = Field(default_factory=utc_now)

    @field_validator("viewed_at", mode="after")
    @classmethod
    def normalize_viewed_at(cls, v: datetime) -> datetime:
        return to_naive_utc(v)


class InterviewDetails(EmbeddedModel):
    """Interview arrangements and outcome."""

    scheduled_at: Optional[datetime] = None
    interview_type: Optional[InterviewType] = None
    notes: Optional[str] = None
    feedback: Optional[str] = None
    rating: Optional[int] = Field(default=None, ge=1, le=5)

    @field_validator("scheduled_at", mode="after")
    @classmethod
    def normalize_scheduled_at(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)


class QuestionAnswer(EmbeddedModel):
    """Answer to a screening question asked by the job posting."""

    question: str
    answer: str = ""


class ApplicantSnapshot(EmbeddedModel):
    """Applicant data cached on the application at submission time."""

    name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    total_experience_years: float = Field(default=0.0, ge=0)
    skills: list[str] = Field(default_factory=list)


class SubmissionContext(BaseModel):
    """Everything the submission endpoint knows when an application is filed."""

    job_id: PyObjectId
    company_id: PyObjectId
    applicant_id: PyObjectId
    resume: str = Field(..., min_length=1)
    cover_letter: str = ""
    portfolio: str = ""
    linkedin: str = ""
    additional_info: str = ""
    answers: list[QuestionAnswer] = Field(default_factory=list)
    applicant: Optional[ApplicantSnapshot] = None
    applied_at: Optional[datetime] = None

    @field_validator("applied_at", mode="after")
    @classmethod
    def normalize_applied_at(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)


class Application(BaseDocument):
    """
    Job application document.

    Created once in ``pending`` with a single ``applied`` timeline entry and
    mutated exclusively through ApplicationLifecycle.
    """

    # References
    job_id: PyObjectId
    company_id: PyObjectId
    applicant_id: PyObjectId

    # Submission
    resume: str
    cover_letter: str = ""
    portfolio: str = ""
    linkedin: str = ""
    additional_info: str = ""
    answers: list[QuestionAnswer] = Field(default_factory=list)
    applicant_snapshot: ApplicantSnapshot = Field(default_factory=ApplicantSnapshot)

    # Status
    status: ApplicationStatus = ApplicationStatus.PENDING
    rejection_reason: Optional[str] = None
    interview: Optional[InterviewDetails] = None

    # Scores (written by the lifecycle from MatchScorer output)
    score: int = Field(default=0, ge=0, le=100)
    skills_match: int = Field(default=0, ge=0, le=100)

    # Append-only logs
    timeline: list[TimelineEntry] = Field(default_factory=list)
    notes: list[NoteEntry] = Field(default_factory=list)
    communications: list[CommunicationEntry] = Field(default_factory=list)

    # View tracking
    viewed_at: Optional[datetime] = None
    last_viewed_at: Optional[datetime] = None
    viewed_by: list[ViewRecord] = Field(default_factory=list)

    applied_at: datetime = Field(default_factory=utc_now)

    # Optimistic concurrency token, bumped by the repository on every save
    version: int = Field(default=0, ge=0)

    @field_validator("resume")
    @classmethod
    def require_resume(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Resume reference is required")
        return v

    @field_validator("applied_at", "viewed_at", "last_viewed_at", mode="after")
    @classmethod
    def normalize_dates(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Stored dates are naive UTC; offset-carrying input is shifted to match."""
        return to_naive_utc(v)

    @property
    def current_status(self) -> ApplicationStatus:
        return ApplicationStatus(self.status)

    @property
    def is_terminal(self) -> bool:
        return self.current_status in TERMINAL_STATUSES

    @property
    def is_viewed(self) -> bool:
        return self.viewed_at is not None

    def has_viewer(self, user: str) -> bool:
        return any(view.user == str(user) for view in self.viewed_by)

    def days_since_applied(self, now: Optional[datetime] = None) -> int:
        """Whole days since submission, partial days rounded up."""
        delta = abs((to_naive_utc(now) or utc_now()) - self.applied_at)
        days, remainder = divmod(delta, timedelta(days=1))
        return days + (1 if remainder else 0)

    def is_recent(self, now: Optional[datetime] = None) -> bool:
        """Applied within the last 24 hours."""
        return abs((to_naive_utc(now) or utc_now()) - self.applied_at) < timedelta(hours=24)

    def timeline_actions(self) -> list[str]:
        return [TimelineAction(entry.action).value for entry in self.timeline]

    class Settings:
        """MongoDB collection settings."""

        name = "applications"
        indexes = [
            [("job_id", 1), ("applicant_id", 1)],  # Compound unique index
            "status",
            "company_id",
            "applied_at",
            "score",
            "skills_match",
        ]
