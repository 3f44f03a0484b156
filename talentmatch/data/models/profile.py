"""
Candidate profile and job requirement models for TalentMatch.

Both are read-only inputs to the match scorer. Their validators normalize
loosely structured collaborator data at the boundary: blank skill names are
dropped, negative or non-numeric years become zero (or absent), and
unrecognized enum values are discarded instead of failing the request.
"""

from typing import Any, Optional

from pydantic import Field, ValidationError, field_validator

from talentmatch.core.exceptions import MalformedInputError
from talentmatch.utils.constants import EducationLevel, EmploymentType
from talentmatch.utils.logger import get_logger

from .base import EmbeddedModel, non_negative_number

logger = get_logger(__name__)

_SEQUENCE_TYPES = (list, tuple, set)


def _lenient_years(value: Any, field: str) -> float:
    """Years value with malformed input replaced by zero."""
    if value is None:
        return 0.0
    try:
        return non_negative_number(value, field)
    except MalformedInputError as e:
        logger.warning(f"{e}; treating as 0")
        return 0.0


def _clean_strings(values: Any) -> list[str]:
    """Strip, drop blanks and de-duplicate case-insensitively, keeping order."""
    if values is None:
        return []
    if isinstance(values, str):
        values = [values]
    elif not isinstance(values, _SEQUENCE_TYPES):
        logger.debug(f"Expected a list of strings, got {values!r}; treating as empty")
        return []
    seen: set[str] = set()
    cleaned = []
    for value in values:
        if not isinstance(value, str):
            continue
        text = value.strip()
        if text and text.lower() not in seen:
            seen.add(text.lower())
            cleaned.append(text)
    return cleaned


def _optional_text(value: Any) -> Optional[str]:
    """Free-text field value, with numbers kept as text and anything else dropped."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def normalize_employment_type(value: Any) -> Optional[str]:
    """Map 'Full-time', 'full time' or 'FULL_TIME' onto an EmploymentType value."""
    if isinstance(value, EmploymentType):
        return value.value
    if not isinstance(value, str):
        return None
    key = value.strip().lower().replace("-", "_").replace(" ", "_")
    try:
        return EmploymentType(key).value
    except ValueError:
        return None


def normalize_education_level(value: Any) -> Optional[str]:
    """
    Map a requirement such as 'Bachelor', "Master's degree", 'PhD' or 'HighSchool'
    onto an EducationLevel value.

    Returns None for 'none'/'any' and for anything unrecognized.
    """
    if isinstance(value, EducationLevel):
        return None if value is EducationLevel.NONE else value.value
    if not isinstance(value, str):
        return None
    text = value.strip().lower()
    if text in ("", "none", "any"):
        return None
    if "phd" in text or "doctor" in text:
        return EducationLevel.DOCTORATE.value
    squashed = text.replace(" ", "").replace("_", "")
    for level in EducationLevel:
        if level is EducationLevel.NONE:
            continue
        if level.value in text or level.value.replace(" ", "") in squashed:
            return level.value
    return None


class CandidateSkill(EmbeddedModel):
    """A single skill on a candidate profile."""

    name: str = Field(..., min_length=1)
    proficiency: Optional[str] = None
    years_of_experience: float = 0.0

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Skill name cannot be blank")
        return v

    @field_validator("proficiency", mode="before")
    @classmethod
    def coerce_proficiency(cls, v: Any) -> Optional[str]:
        return _optional_text(v)

    @field_validator("years_of_experience", mode="before")
    @classmethod
    def sanitize_years(cls, v: Any) -> float:
        return _lenient_years(v, "skill.years_of_experience")


class EducationRecord(EmbeddedModel):
    """A single education entry on a candidate profile."""

    degree: str = ""
    field_of_study: Optional[str] = None
    institution: Optional[str] = None

    @field_validator("degree", mode="before")
    @classmethod
    def default_degree(cls, v: Any) -> str:
        return v.strip() if isinstance(v, str) else ""

    @field_validator("field_of_study", "institution", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Optional[str]:
        return _optional_text(v)


class CandidateProfile(EmbeddedModel):
    """Candidate attributes consumed by the match scorer."""

    skills: list[CandidateSkill] = Field(default_factory=list)
    total_experience_years: float = 0.0
    education_records: list[EducationRecord] = Field(default_factory=list)
    preferred_locations: list[str] = Field(default_factory=list)
    preferred_employment_types: list[EmploymentType] = Field(default_factory=list)

    @field_validator("skills", mode="before")
    @classmethod
    def normalize_skills(cls, v: Any) -> list[Any]:
        """Accept bare skill names and drop entries without a usable name."""
        if not v:
            return []
        if not isinstance(v, _SEQUENCE_TYPES):
            logger.debug(f"Skills must be a list, got {v!r}; treating as empty")
            return []
        skills = []
        for entry in v:
            if isinstance(entry, str):
                entry = {"name": entry}
            elif isinstance(entry, CandidateSkill):
                skills.append(entry)
                continue
            if not isinstance(entry, dict):
                logger.debug(f"Dropping malformed skill entry: {entry!r}")
                continue
            name = entry.get("name")
            if not isinstance(name, str) or not name.strip():
                logger.debug(f"Dropping skill without a name: {entry!r}")
                continue
            try:
                skills.append(CandidateSkill.model_validate(entry))
            except ValidationError as e:
                logger.debug(f"Dropping invalid skill entry {entry!r}: {e.error_count()} error(s)")
        return skills

    @field_validator("total_experience_years", mode="before")
    @classmethod
    def sanitize_total_years(cls, v: Any) -> float:
        return _lenient_years(v, "total_experience_years")

    @field_validator("education_records", mode="before")
    @classmethod
    def normalize_education(cls, v: Any) -> list[Any]:
        if not v:
            return []
        if not isinstance(v, _SEQUENCE_TYPES):
            logger.debug(f"Education records must be a list, got {v!r}; treating as empty")
            return []
        records = []
        for entry in v:
            if isinstance(entry, str):
                entry = {"degree": entry}
            if isinstance(entry, EducationRecord):
                records.append(entry)
            elif isinstance(entry, dict):
                try:
                    records.append(EducationRecord.model_validate(entry))
                except ValidationError as e:
                    logger.debug(
                        f"Dropping invalid education entry {entry!r}: {e.error_count()} error(s)"
                    )
            else:
                logger.debug(f"Dropping malformed education entry: {entry!r}")
        return records

    @field_validator("preferred_locations", mode="before")
    @classmethod
    def clean_locations(cls, v: Any) -> list[str]:
        return _clean_strings(v)

    @field_validator("preferred_employment_types", mode="before")
    @classmethod
    def clean_employment_types(cls, v: Any) -> list[str]:
        if not v:
            return []
        if not isinstance(v, _SEQUENCE_TYPES):
            v = [v]
        types = []
        for entry in v:
            normalized = normalize_employment_type(entry)
            if normalized is None:
                logger.debug(f"Ignoring unknown employment type: {entry!r}")
            elif normalized not in types:
                types.append(normalized)
        return types

    @property
    def skill_names(self) -> list[str]:
        return [s.name for s in self.skills]

    @property
    def primary_location(self) -> Optional[str]:
        """First preferred location, the one location scoring looks at."""
        return self.preferred_locations[0] if self.preferred_locations else None


class JobRequirements(EmbeddedModel):
    """Job attributes consumed by the match scorer."""

    required_skills: list[str] = Field(default_factory=list)
    minimum_experience_years: Optional[float] = None
    education_requirement: Optional[EducationLevel] = None
    location: Optional[str] = None
    employment_type: Optional[EmploymentType] = None

    @field_validator("required_skills", mode="before")
    @classmethod
    def clean_skills(cls, v: Any) -> list[str]:
        return _clean_strings(v)

    @field_validator("minimum_experience_years", mode="before")
    @classmethod
    def sanitize_min_years(cls, v: Any) -> Optional[float]:
        """Zero, negative and non-numeric minimums mean 'no requirement'."""
        if v is None:
            return None
        try:
            years = non_negative_number(v, "minimum_experience_years")
        except MalformedInputError as e:
            logger.warning(f"{e}; treating as not specified")
            return None
        return years if years > 0 else None

    @field_validator("education_requirement", mode="before")
    @classmethod
    def normalize_education(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        level = normalize_education_level(v)
        if level is None and isinstance(v, str) and v.strip().lower() not in ("", "none", "any"):
            logger.warning(f"Unrecognized education requirement {v!r}; treating as not specified")
        return level

    @field_validator("location", mode="before")
    @classmethod
    def clean_location(cls, v: Any) -> Optional[str]:
        if not isinstance(v, str):
            return None
        return v.strip() or None

    @field_validator("employment_type", mode="before")
    @classmethod
    def clean_employment_type(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        normalized = normalize_employment_type(v)
        if normalized is None:
            logger.warning(f"Unknown employment type {v!r}; treating as not specified")
        return normalized

    @property
    def has_requirements(self) -> bool:
        return bool(
            self.required_skills
            or self.minimum_experience_years
            or self.education_requirement
            or self.location
            or self.employment_type
        )
