"""
Match scoring data models for TalentMatch.

Defines weighting profiles and the transient result of scoring a candidate
profile against a job's requirements.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from talentmatch.utils.constants import WEIGHTING_PROFILES, MatchScoreLevel

from .base import EmbeddedModel

CRITERIA: tuple[str, ...] = ("skills", "experience", "education", "location", "employment_type")


class WeightingProfile(EmbeddedModel):
    """Named set of per-criterion percentage weights."""

    name: str
    skills: int = Field(default=40, ge=0, le=100)
    experience: int = Field(default=30, ge=0, le=100)
    education: int = Field(default=15, ge=0, le=100)
    location: int = Field(default=15, ge=0, le=100)
    employment_type: int = Field(default=0, ge=0, le=100)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        return v.strip().lower()

    @classmethod
    def named(cls, name: str) -> "WeightingProfile":
        """
        Look up a built-in profile.

        Raises:
            KeyError: If no profile has that name
        """
        key = name.strip().lower()
        if key not in WEIGHTING_PROFILES:
            raise KeyError(f"Unknown weighting profile: {name}")
        return cls(name=key, **WEIGHTING_PROFILES[key])

    @classmethod
    def available(cls) -> list[str]:
        return list(WEIGHTING_PROFILES)

    def weight_for(self, criterion: str) -> int:
        return getattr(self, criterion)

    def to_dict(self) -> dict[str, int]:
        return {criterion: self.weight_for(criterion) for criterion in CRITERIA}

    @property
    def total_weight(self) -> int:
        """Sum of all weights, the denominator of the final score."""
        return sum(self.to_dict().values())


class MatchBreakdown(EmbeddedModel):
    """Points awarded per criterion, each capped at that criterion's weight."""

    skills: float = 0.0
    experience: float = 0.0
    education: float = 0.0
    location: float = 0.0
    employment_type: float = 0.0

    @property
    def total_points(self) -> float:
        return self.skills + self.experience + self.education + self.location + self.employment_type


class MatchResult(BaseModel):
    """Result of scoring one candidate profile against one job."""

    score: int = Field(0, ge=0, le=100)
    skills_match: int = Field(0, ge=0, le=100)
    breakdown: MatchBreakdown = Field(default_factory=MatchBreakdown)

    profile: str = "employer"
    evaluated_criteria: list[str] = Field(default_factory=list)
    matched_skills: list[str] = Field(default_factory=list)
    missing_skills: list[str] = Field(default_factory=list)

    @property
    def score_level(self) -> MatchScoreLevel:
        return MatchScoreLevel.from_score(self.score)

    def was_evaluated(self, criterion: str) -> bool:
        return criterion in self.evaluated_criteria

    def summary(self) -> Optional[str]:
        """One-line description for logs and the CLI."""
        if not self.evaluated_criteria:
            return None
        return (
            f"score={self.score} ({self.score_level.value}), skills={self.skills_match}%, "
            f"evaluated={','.join(self.evaluated_criteria)}"
        )
