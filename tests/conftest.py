"""
Shared test fixtures for the TalentMatch test suite.

Sets environment variables before any talentmatch imports so settings load
in testing mode, then provides factory fixtures for profiles, jobs and
applications plus a lifecycle driven by a fixed clock.
"""

import os

# === Set environment BEFORE any talentmatch imports ===
os.environ.setdefault("APP_ENVIRONMENT", "testing")
os.environ.setdefault("DB_NAME", "talentmatch_test")

from datetime import datetime, timedelta
from typing import Any, Optional

import pytest
from bson import ObjectId

from talentmatch.core.lifecycle import ApplicationLifecycle
from talentmatch.core.matching import MatchScorer
from talentmatch.core.stats import StatsAggregator
from talentmatch.data.models import (
    Application,
    ApplicantSnapshot,
    CandidateProfile,
    JobRequirements,
    SubmissionContext,
)
from talentmatch.utils.constants import ApplicationStatus

FIXED_NOW = datetime(2024, 6, 15, 12, 0, 0)


class FixedClock:
    """Callable clock that only moves when a test advances it."""

    def __init__(self, start: datetime = FIXED_NOW):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


# ---------------------------------------------------------------------------
# Core components
# ---------------------------------------------------------------------------


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def lifecycle(clock):
    return ApplicationLifecycle(clock=clock)


@pytest.fixture
def scorer():
    return MatchScorer(profile="employer")


@pytest.fixture
def aggregator():
    return StatsAggregator(daily_window_days=30, monthly_window_months=12, top_candidates_limit=10)


# ---------------------------------------------------------------------------
# Profile factories
# ---------------------------------------------------------------------------


@pytest.fixture
def make_candidate():
    """Factory that returns a callable to build CandidateProfile models."""

    def _factory(
        skills: Optional[list[Any]] = None,
        total_experience_years: Any = 5,
        education: Optional[list[Any]] = None,
        locations: Optional[list[str]] = None,
        employment_types: Optional[list[str]] = None,
    ) -> CandidateProfile:
        return CandidateProfile(
            skills=["react", "python"] if skills is None else skills,
            total_experience_years=total_experience_years,
            education_records=["Bachelor of Science"] if education is None else education,
            preferred_locations=["Austin, TX"] if locations is None else locations,
            preferred_employment_types=[] if employment_types is None else employment_types,
        )

    return _factory


@pytest.fixture
def make_job():
    """Factory that returns a callable to build JobRequirements models."""

    def _factory(
        required_skills: Optional[list[str]] = None,
        minimum_experience_years: Any = 3,
        education_requirement: Any = "Bachelor",
        location: Optional[str] = "Austin",
        employment_type: Any = None,
    ) -> JobRequirements:
        return JobRequirements(
            required_skills=["React", "Node"] if required_skills is None else required_skills,
            minimum_experience_years=minimum_experience_years,
            education_requirement=education_requirement,
            location=location,
            employment_type=employment_type,
        )

    return _factory


# ---------------------------------------------------------------------------
# Application factories
# ---------------------------------------------------------------------------


@pytest.fixture
def applicant_id():
    return ObjectId()


@pytest.fixture
def make_submission(applicant_id):
    """Factory that returns a callable to build SubmissionContext models."""

    def _factory(**overrides: Any) -> SubmissionContext:
        data: dict[str, Any] = {
            "job_id": ObjectId(),
            "company_id": ObjectId(),
            "applicant_id": applicant_id,
            "resume": "uploads/resumes/jane-smith.pdf",
            "cover_letter": "I would love to join the team.",
            "applicant": {
                "name": "Jane Smith",
                "email": "jane.smith@example.com",
                "location": "Austin, TX",
                "total_experience_years": 5,
                "skills": ["react", "python"],
            },
        }
        data.update(overrides)
        return SubmissionContext(**data)

    return _factory


@pytest.fixture
def application(lifecycle, make_submission):
    """Freshly created pending application with an id, as if loaded from storage."""
    app = lifecycle.create(make_submission())
    app.id = ObjectId()
    return app


@pytest.fixture
def make_application():
    """
    Factory for stored applications used by the aggregator.

    Builds the document directly, bypassing the lifecycle, so tests can
    place applications in any status at any time.
    """

    def _factory(
        status: ApplicationStatus = ApplicationStatus.PENDING,
        score: int = 0,
        skills_match: int = 0,
        applied_at: datetime = FIXED_NOW,
        viewed_at: Optional[datetime] = None,
        job_id: Optional[ObjectId] = None,
        company_id: Optional[ObjectId] = None,
        experience: float = 0.0,
        name: Optional[str] = None,
    ) -> Application:
        return Application(
            _id=ObjectId(),
            job_id=job_id or ObjectId(),
            company_id=company_id or ObjectId(),
            applicant_id=ObjectId(),
            resume="uploads/resumes/cv.pdf",
            applicant_snapshot=ApplicantSnapshot(name=name, total_experience_years=experience),
            status=status,
            score=score,
            skills_match=skills_match,
            applied_at=applied_at,
            viewed_at=viewed_at,
        )

    return _factory
