"""Data models for the Tailoring module.

Contains Pydantic models for:
- TailoredResult: Selected experiences, skills and match score for one job
- ValidationVerdict: Fact-check outcome gating document generation
- CoverLetterResult: Structured cover letter with its assembled text
- *Response models: Lenient views of raw LLM JSON (camelCase keys)
"""

from __future__ import annotations

import math
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

CoverLetterTone = Literal["professional", "enthusiastic", "conversational"]

DEFAULT_FOCUS_AREAS = ["technical-depth", "collaboration"]
DEFAULT_RELEVANCE_RATING = 8
DEFAULT_COMPANY_ALIGNMENT = (
    "I am excited about the opportunity to contribute to your team and help drive success."
)


def coerce_number(value: Any) -> float | None:
    """Read a number from LLM output; None when absent or not numeric."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip().rstrip("%").strip())
        except ValueError:
            return None
    else:
        return None
    return None if math.isnan(number) or math.isinf(number) else number


def clamp_int(value: Any, low: int, high: int, default: int) -> int:
    number = coerce_number(value)
    if number is None:
        return default
    return max(low, min(high, round(number)))


def _text(value: Any) -> str:
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value).strip()


def _text_list(value: Any) -> list[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return []
    return [text for text in (_text(item) for item in value) if text]


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a camelCase dictionary."""
        return self.model_dump(mode="json", by_alias=True)


class SelectedExperience(_CamelModel):
    """A position as it appears on the tailored resume."""

    company: str = Field(..., description="Company name (verbatim from profile)")
    role: str = Field(..., description="Role title (verbatim from profile)")
    duration: str = Field(..., description="Date range (verbatim from profile)")
    location: str = Field(default="", description="Location (verbatim from profile)")
    selected_achievements: list[str] = Field(
        default_factory=list, description="Achievements chosen for this job"
    )


class TailoredResult(_CamelModel):
    """Resume content tailored for one job posting."""

    summary: str = Field(..., description="Professional summary for this job")
    selected_experiences: list[SelectedExperience] = Field(
        default_factory=list, description="One entry per profile position"
    )
    relevant_skills: list[str] = Field(
        default_factory=list, description="Skills to feature"
    )
    match_score: int = Field(default=50, ge=0, le=100, description="Fit score (0-100)")
    reasoning: str = Field(default="", description="Why the score was given")
    used_fallback: bool = Field(
        default=False, description="True when the LLM output could not be used"
    )

    @field_validator("match_score", mode="before")
    @classmethod
    def clamp_match_score(cls, v: Any) -> int:
        return clamp_int(v, 0, 100, 50)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TailoredResult:
        """Deserialize from dictionary."""
        return cls.model_validate(data)


class ValidationVerdict(_CamelModel):
    """Fact-check verdict for a tailored resume.

    ``is_valid`` is the gate: documents are only generated when it is True.
    """

    is_valid: bool = Field(default=True, description="No fabrication detected")
    issues: list[str] = Field(default_factory=list, description="Blocking problems")
    warnings: list[str] = Field(default_factory=list, description="Non-blocking notes")
    confidence: int = Field(default=50, ge=0, le=100, description="Confidence (0-100)")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ValidationVerdict:
        """Deserialize from dictionary."""
        return cls.model_validate(data)


class SkillMatch(_CamelModel):
    """A job skill backed by concrete experience."""

    skill: str = Field(default="", description="Skill the posting asks for")
    experience_examples: list[str] = Field(
        default_factory=list, description="Evidence from the work history"
    )
    relevance_rating: int = Field(
        default=DEFAULT_RELEVANCE_RATING, ge=1, le=10, description="Relevance (1-10)"
    )

    @field_validator("skill", mode="before")
    @classmethod
    def coerce_skill(cls, v: Any) -> str:
        return _text(v)

    @field_validator("experience_examples", mode="before")
    @classmethod
    def coerce_examples(cls, v: Any) -> list[str]:
        return _text_list(v)

    @field_validator("relevance_rating", mode="before")
    @classmethod
    def clamp_rating(cls, v: Any) -> int:
        # 0 and missing both mean "not rated"
        if not coerce_number(v):
            return DEFAULT_RELEVANCE_RATING
        return clamp_int(v, 1, 10, DEFAULT_RELEVANCE_RATING)


class GrowthOpportunity(_CamelModel):
    """An area where the role would stretch the candidate."""

    area: str = Field(default="", description="Growth area")
    current_experience: str = Field(default="", description="Related experience today")
    desired_growth: str = Field(default="", description="What the candidate wants to learn")
    why_excited: str = Field(default="", description="Why this role enables it")

    @field_validator(
        "area", "current_experience", "desired_growth", "why_excited", mode="before"
    )
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        return _text(v)


class CoverLetterOptions(BaseModel):
    """Caller-supplied cover letter settings."""

    tone: CoverLetterTone = Field(default="professional", description="Writing tone")
    max_length: int = Field(default=300, gt=0, description="Target length in words")
    focus_areas: list[str] = Field(
        default_factory=lambda: list(DEFAULT_FOCUS_AREAS),
        description="Themes to emphasize",
    )
    company_research: str | None = Field(
        default=None, description="Notes about the company"
    )


class CoverLetterResult(_CamelModel):
    """Structured cover letter plus its deterministic full text."""

    opening: str = Field(..., description="Opening paragraph")
    skill_matches: list[SkillMatch] = Field(..., description="Skill evidence")
    growth_opportunities: list[GrowthOpportunity] = Field(
        ..., description="Growth narrative"
    )
    company_alignment: str = Field(
        default=DEFAULT_COMPANY_ALIGNMENT, description="Why this company"
    )
    closing: str = Field(..., description="Closing paragraph")
    tone: CoverLetterTone = Field(default="professional", description="Writing tone")
    full_letter: str = Field(default="", description="Assembled letter text")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CoverLetterResult:
        """Deserialize from dictionary."""
        return cls.model_validate(data)


class ExperienceDraft(_CamelModel):
    """An experience entry as the LLM returned it (not yet reconciled)."""

    company: str = ""
    role: str = ""
    duration: str = ""
    location: str = ""
    selected_achievements: list[str] = Field(default_factory=list)

    @field_validator("company", "role", "duration", "location", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        return _text(v)

    @field_validator("selected_achievements", mode="before")
    @classmethod
    def coerce_achievements(cls, v: Any) -> list[str]:
        return _text_list(v)


class TailoringResponse(_CamelModel):
    """Raw ``resume-tailor`` output."""

    match_score: Any = None
    reasoning: str = ""
    tailored_summary: str = ""
    selected_experiences: list[ExperienceDraft] = Field(default_factory=list)
    relevant_skills: list[str] = Field(default_factory=list)

    @field_validator("reasoning", "tailored_summary", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        return _text(v)

    @field_validator("selected_experiences", mode="before")
    @classmethod
    def keep_objects(cls, v: Any) -> list[Any]:
        if not isinstance(v, list):
            return []
        return [item for item in v if isinstance(item, dict)]

    @field_validator("relevant_skills", mode="before")
    @classmethod
    def coerce_skills(cls, v: Any) -> list[str]:
        return _text_list(v)


class CoverLetterResponse(_CamelModel):
    """Raw ``cover-letter`` output; required fields are checked by the engine."""

    opening: str = ""
    skill_matches: list[SkillMatch] = Field(default_factory=list)
    growth_opportunities: list[GrowthOpportunity] = Field(default_factory=list)
    company_alignment: str = ""
    closing: str = ""

    @field_validator("opening", "company_alignment", "closing", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        return _text(v)

    @field_validator("skill_matches", "growth_opportunities", mode="before")
    @classmethod
    def keep_objects(cls, v: Any) -> list[Any]:
        if not isinstance(v, list):
            return []
        return [item for item in v if isinstance(item, dict)]
