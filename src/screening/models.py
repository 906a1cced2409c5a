"""Data models for eligibility screening.

Inputs come from an upstream extractor (usually an LLM) and are treated as
untrusted: every field is optional and malformed values are coerced to
documented defaults instead of failing validation. Field names are snake_case
in Python and camelCase on the wire.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from src.utils.logging import get_logger

logger = get_logger("screening.models")

ELIGIBLE = "Eligible"
POTENTIAL_FIT = "Potential Fit"
NOT_A_FIT = "Not a Fit"

Eligibility = Literal["Eligible", "Potential Fit", "Not a Fit"]

EXPERIENCE_LEVELS = ("any", "junior", "mid", "senior")
EDUCATION_LEVELS = ("any", "bachelor", "master", "phd")


def _coerce_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _coerce_text_list(value: Any) -> list[str]:
    """Coerce list-like input into a list of strings.

    A plain string is split on commas; None and other scalars yield an
    empty list. None items are dropped, other items are stringified.
    """
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if not isinstance(value, (list, tuple, set, frozenset)):
        return []
    return [str(item) for item in value if item is not None]


def _coerce_entries(value: Any) -> list[dict]:
    if not isinstance(value, (list, tuple)):
        return []
    return [dict(item) if isinstance(item, Mapping) else {} for item in value]


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_dict(self) -> dict:
        """Serialize to a camelCase dictionary."""
        return self.model_dump(mode="json", by_alias=True)


class ExtractedEducation(_WireModel):
    """Education entry extracted from a resume."""

    model_config = ConfigDict(extra="allow")

    degree: str = ""
    institution: str = ""
    year: str = ""

    @field_validator("degree", "institution", "year", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str:
        return _coerce_text(v)


class ExtractedExperience(_WireModel):
    """Work experience entry extracted from a resume."""

    model_config = ConfigDict(extra="allow")

    title: str = ""
    company: str = ""
    duration: str = ""

    @field_validator("title", "company", "duration", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str:
        return _coerce_text(v)


class AnalysisResult(_WireModel):
    """Candidate signals extracted from a resume.

    Unknown keys (name, email, foundKeywords, ...) are kept so that a batch
    caller can merge the eligibility result back over the original record.
    """

    model_config = ConfigDict(extra="allow")

    extracted_skills: list[str] = Field(default_factory=list)
    extracted_education: list[ExtractedEducation] = Field(default_factory=list)
    extracted_experience: list[ExtractedExperience] = Field(default_factory=list)

    @field_validator("extracted_skills", mode="before")
    @classmethod
    def _skills(cls, v: Any) -> list[str]:
        return _coerce_text_list(v)

    @field_validator("extracted_education", "extracted_experience", mode="before")
    @classmethod
    def _entries(cls, v: Any) -> list[dict]:
        return _coerce_entries(v)

    @classmethod
    def from_raw(cls, data: Any) -> AnalysisResult:
        """Build an AnalysisResult from loosely-typed input, never failing."""
        if isinstance(data, AnalysisResult):
            return data
        if not isinstance(data, Mapping):
            return cls()
        try:
            return cls.model_validate(dict(data))
        except ValidationError as e:
            logger.warning(f"Ignoring malformed analysis result: {e.error_count()} error(s)")
            return cls()


class FilterCriteria(_WireModel):
    """Recruiter-supplied screening filters. Every option is optional."""

    model_config = ConfigDict(extra="ignore")

    experience: str = "any"
    min_education: str = "any"
    required_certs: list[str] = Field(default_factory=list)
    location: str = ""
    preferred_keywords: list[str] = Field(default_factory=list)
    blacklist: list[str] = Field(default_factory=list)
    required_skills: list[str] = Field(default_factory=list)
    min_score: float = 0

    @field_validator("experience", "min_education", mode="before")
    @classmethod
    def _level(cls, v: Any) -> str:
        # Unknown levels are kept as-is and behave like "any".
        return _coerce_text(v) or "any"

    @field_validator("location", mode="before")
    @classmethod
    def _location(cls, v: Any) -> str:
        return _coerce_text(v)

    @field_validator(
        "required_certs",
        "preferred_keywords",
        "blacklist",
        "required_skills",
        mode="before",
    )
    @classmethod
    def _terms(cls, v: Any) -> list[str]:
        return _coerce_text_list(v)

    @field_validator("min_score", mode="before")
    @classmethod
    def _min_score(cls, v: Any) -> float:
        try:
            return float(v)
        except (TypeError, ValueError):
            return 0

    @classmethod
    def from_raw(cls, data: Any) -> FilterCriteria:
        """Build filters from a mapping, a JSON string, or None.

        Malformed JSON or a non-object payload falls back to all defaults.
        """
        if isinstance(data, FilterCriteria):
            return data
        if data is None:
            return cls()
        if isinstance(data, (str, bytes)):
            if not data.strip():
                return cls()
            try:
                data = json.loads(data)
            except ValueError as e:
                logger.warning(f"Failed to parse filters JSON: {e}")
                return cls()
        if not isinstance(data, Mapping):
            logger.warning(f"Ignoring filters of type {type(data).__name__}")
            return cls()
        try:
            return cls.model_validate(dict(data))
        except ValidationError as e:
            logger.warning(f"Ignoring malformed filters: {e.error_count()} error(s)")
            return cls()


class Weights(_WireModel):
    """Immutable snapshot of the five category weights."""

    model_config = ConfigDict(frozen=True)

    skills: float = 40
    experience: float = 20
    education: float = 15
    certs: float = 15
    location: float = 10


class EligibilityBreakdown(_WireModel):
    """Per-category sub-scores behind a composite score."""

    skills_score: int
    keyword_match_count: int
    keyword_total: int
    exp_score: int
    edu_score: int
    cert_score: int
    location_score: int
    preferred_bonus: int
    blacklist_penalty: int
    weights: Weights
    years_of_experience: int = 0
    job_keywords: list[str] = Field(default_factory=list)
    matched_keywords: list[str] = Field(default_factory=list)


class EligibilityResult(_WireModel):
    """Composite eligibility score and verdict for one candidate.

    `ats_score` always equals `eligibility_score`; both names are part of the
    output contract.
    """

    eligibility: Eligibility
    eligibility_score: int = Field(ge=0, le=100)
    ats_score: int = Field(ge=0, le=100)
    eligibility_breakdown: EligibilityBreakdown
