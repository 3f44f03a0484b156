"""
Aggregated application statistics models for TalentMatch.

These are read models recomputed from application documents; nothing here
is a source of truth.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class StatusStats(BaseModel):
    """Counts and averages for one application status."""

    count: int = 0
    avg_score: float = 0.0
    avg_skills_match: float = 0.0
    avg_experience: float = 0.0


class ApplicationStats(BaseModel):
    """Dashboard summary for a set of applications."""

    total: int = 0
    viewed: int = 0
    view_rate: int = 0  # Percent of applications viewed, 0-100
    avg_score: float = 0.0
    avg_skills_match: float = 0.0
    by_status: dict[str, StatusStats] = Field(default_factory=dict)
    daily_counts: dict[str, int] = Field(default_factory=dict)  # "YYYY-MM-DD" -> count
    monthly_counts: dict[str, int] = Field(default_factory=dict)  # "YYYY-MM" -> count
    period_start: Optional[datetime] = None
    period_end: Optional[datetime] = None


class RankedCandidate(BaseModel):
    """An application ranked by combined score and skills match."""

    application_id: Optional[str] = None
    applicant_id: str
    name: Optional[str] = None
    status: str
    score: int
    skills_match: int
    rank_score: float
    applied_at: datetime


class JobStatusBreakdown(BaseModel):
    """Per-status figures inside a job analytics row."""

    status: str
    count: int
    avg_score: float
    avg_skills_match: float


class JobAnalytics(BaseModel):
    """Application analytics for a single job."""

    job_id: str
    job_title: Optional[str] = None
    total_applications: int = 0
    by_status: list[JobStatusBreakdown] = Field(default_factory=list)
    avg_response_days: Optional[float] = None  # Mean of viewed_at - applied_at
