"""
Candidate-job match scorer.

Computes a 0-100 fit score from independent weighted criteria (skills
overlap, experience sufficiency, education level, location and employment
type). The weights come from a named WeightingProfile so the employer view
and the candidate view share one algorithm.

A criterion that cannot be evaluated, because either side lacks the data,
awards nothing but keeps its weight in the denominator. The final score is
therefore always on the same scale whatever subset of data was present.
"""

from typing import Any, Optional, Union

from pydantic import ValidationError

from talentmatch.data.models import (
    CRITERIA,
    CandidateProfile,
    JobRequirements,
    MatchBreakdown,
    MatchResult,
    WeightingProfile,
)
from talentmatch.utils.config import get_settings
from talentmatch.utils.constants import DEGREE_HIERARCHY
from talentmatch.utils.logger import LoggerMixin, get_logger

logger = get_logger(__name__)

ProfileArg = Union[WeightingProfile, str, None]


def round_half_up(value: float) -> int:
    """Round .5 away from zero for the non-negative values scoring produces."""
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


def degree_rank(degree: Optional[str]) -> int:
    """
    Rank a free-text degree against the degree hierarchy.

    The first hierarchy keyword found as a case-insensitive substring wins;
    unrecognized or empty degrees rank 0.
    """
    if not degree:
        return 0
    text = degree.lower()
    for keyword, rank in DEGREE_HIERARCHY.items():
        if keyword in text:
            return rank
    return 0


def skills_overlap(required: str, candidate_skill: str) -> bool:
    """Lenient skill match: either name is a case-insensitive substring of the other."""
    a = required.strip().lower()
    b = candidate_skill.strip().lower()
    if not a or not b:
        return False
    return a in b or b in a


class MatchScorer(LoggerMixin):
    """
    Weighted multi-criteria scorer.

    Stateless apart from its default weighting profile, so a single instance
    can be shared across threads.
    """

    def __init__(self, profile: ProfileArg = None):
        """
        Initialize the scorer.

        Args:
            profile: Default weighting profile, or the name of a built-in one.
                Falls back to the configured default profile.
        """
        self.profile = self._resolve_profile(profile or get_settings().scoring.default_profile)

    @staticmethod
    def _resolve_profile(profile: Union[WeightingProfile, str]) -> WeightingProfile:
        if isinstance(profile, WeightingProfile):
            return profile
        return WeightingProfile.named(profile)

    @staticmethod
    def _coerce(model_class: type, value: Any) -> Any:
        """Validate collaborator input, degrading to an empty model on structural garbage."""
        if isinstance(value, model_class):
            return value
        try:
            return model_class.model_validate(value or {})
        except ValidationError as e:
            logger.warning(f"Malformed {model_class.__name__} treated as empty: {e.error_count()} error(s)")
            return model_class()

    def score(
        self,
        candidate: Union[CandidateProfile, dict[str, Any]],
        job: Union[JobRequirements, dict[str, Any]],
        profile: ProfileArg = None,
    ) -> MatchResult:
        """
        Score a candidate profile against a job's requirements.

        Args:
            candidate: Candidate profile (or its dict form)
            job: Job requirements (or their dict form)
            profile: Weighting profile for this call, defaults to the scorer's

        Returns:
            MatchResult with the overall score, skills match and breakdown
        """
        weights = self._resolve_profile(profile) if profile else self.profile
        candidate = self._coerce(CandidateProfile, candidate)
        job = self._coerce(JobRequirements, job)

        scorers = {
            "skills": self._score_skills,
            "experience": self._score_experience,
            "education": self._score_education,
            "location": self._score_location,
            "employment_type": self._score_employment_type,
        }

        awarded: dict[str, float] = {}
        evaluated: list[str] = []
        for criterion in CRITERIA:
            weight = weights.weight_for(criterion)
            if weight <= 0:
                continue
            points = scorers[criterion](candidate, job, weight)
            if points is None:
                awarded[criterion] = 0.0
                continue
            awarded[criterion] = min(float(weight), max(0.0, points))
            evaluated.append(criterion)

        total_weight = weights.total_weight
        total_points = sum(awarded.values())
        score = round_half_up(total_points / total_weight * 100) if total_weight > 0 else 0

        matched, missing = self._split_skills(candidate, job)
        skills_match = 0
        if job.required_skills and candidate.skills:
            skills_match = round_half_up(len(matched) / len(job.required_skills) * 100)

        result = MatchResult(
            score=min(100, max(0, score)),
            skills_match=min(100, max(0, skills_match)),
            breakdown=MatchBreakdown(**{k: round(v, 2) for k, v in awarded.items()}),
            profile=weights.name,
            evaluated_criteria=evaluated,
            matched_skills=matched,
            missing_skills=missing,
        )
        self.logger.debug(f"Match computed with profile '{weights.name}': {result.summary()}")
        return result

    # -------------------------------------------------------------------------
    # Criteria
    # -------------------------------------------------------------------------

    def _split_skills(
        self, candidate: CandidateProfile, job: JobRequirements
    ) -> tuple[list[str], list[str]]:
        """Partition the job's required skills into matched and missing."""
        names = candidate.skill_names
        matched, missing = [], []
        for required in job.required_skills:
            if any(skills_overlap(required, name) for name in names):
                matched.append(required)
            else:
                missing.append(required)
        return matched, missing

    def _score_skills(
        self, candidate: CandidateProfile, job: JobRequirements, weight: int
    ) -> Optional[float]:
        if not job.required_skills or not candidate.skills:
            return None
        matched, _ = self._split_skills(candidate, job)
        return len(matched) / len(job.required_skills) * weight

    def _score_experience(
        self, candidate: CandidateProfile, job: JobRequirements, weight: int
    ) -> Optional[float]:
        required = job.minimum_experience_years
        if not required:
            return None
        return min(float(weight), candidate.total_experience_years / required * weight)

    def _score_education(
        self, candidate: CandidateProfile, job: JobRequirements, weight: int
    ) -> Optional[float]:
        if not job.education_requirement or not candidate.education_records:
            return None
        highest = max(degree_rank(record.degree) for record in candidate.education_records)
        return float(weight) if highest >= degree_rank(job.education_requirement) else 0.0

    def _score_location(
        self, candidate: CandidateProfile, job: JobRequirements, weight: int
    ) -> Optional[float]:
        preferred = candidate.primary_location
        if not job.location or not preferred:
            return None
        job_location = job.location.lower()
        preferred = preferred.lower()
        if job_location in preferred or preferred in job_location:
            return float(weight)
        return 0.0

    def _score_employment_type(
        self, candidate: CandidateProfile, job: JobRequirements, weight: int
    ) -> Optional[float]:
        if not job.employment_type or not candidate.preferred_employment_types:
            return None
        return float(weight) if job.employment_type in candidate.preferred_employment_types else 0.0


# Singleton instance
_match_scorer: Optional[MatchScorer] = None


def get_match_scorer() -> MatchScorer:
    """Get the match scorer singleton instance."""
    global _match_scorer
    if _match_scorer is None:
        _match_scorer = MatchScorer()
    return _match_scorer


def compute_match(
    candidate: Union[CandidateProfile, dict[str, Any]],
    job: Union[JobRequirements, dict[str, Any]],
    profile: ProfileArg = None,
) -> MatchResult:
    """Score a candidate against a job with the shared scorer."""
    return get_match_scorer().score(candidate, job, profile=profile)
