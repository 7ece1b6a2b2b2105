"""Data models for candidate profiles.

Contains Pydantic models for:
- Profile: The canonical source record (work history with grouped achievements)
- Contact: Personal contact details kept outside the profile
- SimpleProfile: The flattened view every pipeline stage consumes
"""

from __future__ import annotations

from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


class DescriptionGroup(BaseModel):
    """A themed group of achievements within one position."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    description: str = Field(default="", description="Group heading")
    more_info: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("more_info", "moreInfo"),
        description="Achievement statements in this group",
    )


class WorkHistoryEntry(BaseModel):
    """One position in the canonical work history."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    company: str = Field(..., description="Company name")
    role: str = Field(..., description="Role title")
    duration: str = Field(..., description="Date range, e.g. 'Mar 2022 - Present'")
    location: str | None = Field(default=None, description="Work location")
    description: list[DescriptionGroup] = Field(
        default_factory=list, description="Grouped achievements"
    )
    achievements: list[str] = Field(
        default_factory=list, description="Flat achievement list"
    )

    @field_validator("description", mode="before")
    @classmethod
    def coerce_description(cls, v: Any) -> Any:
        # A plain string is a one-line role description, not grouped achievements
        if v is None or isinstance(v, str):
            return []
        return v


class Profile(BaseModel):
    """Canonical candidate profile loaded from YAML or JSON."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str | None = Field(default=None, description="Candidate name")
    title: str = Field(default="", description="Professional title")
    summary: str | None = Field(
        default=None,
        validation_alias=AliasChoices("summary", "description"),
        description="Professional summary; may contain {years}",
    )
    linkedin: str | None = Field(default=None, description="LinkedIn URL")
    github: str | None = Field(default=None, description="GitHub URL")
    work_history: list[WorkHistoryEntry] = Field(
        default_factory=list,
        validation_alias=AliasChoices("work_history", "workHistory"),
        description="Positions, most recent first",
    )

    @model_validator(mode="after")
    def check_unique_positions(self) -> Profile:
        """Company+role pairs must be unique (compared case-insensitively)."""
        seen: set[tuple[str, str]] = set()
        duplicates: list[str] = []
        for entry in self.work_history:
            key = (entry.company.strip().lower(), entry.role.strip().lower())
            if key in seen:
                duplicates.append(f"{entry.company} / {entry.role}")
            seen.add(key)
        if duplicates:
            raise ValueError(
                f"Duplicate company/role entries in work history: {', '.join(duplicates)}"
            )
        return self

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Profile:
        """Deserialize from dictionary."""
        return cls.model_validate(data)


class Contact(BaseModel):
    """Contact details from contact.json.

    Completeness is checked by the profile adapter so that every missing
    field can be reported at once.
    """

    model_config = ConfigDict(extra="ignore")

    name: str = Field(default="", description="Full name")
    email: str = Field(default="", description="Email address")
    phone: str = Field(default="", description="Phone number")
    location: str = Field(default="", description="City, region")
    website: str = Field(default="", description="Personal website")
    linkedin: str | None = Field(default=None, description="LinkedIn URL")
    github: str | None = Field(default=None, description="GitHub URL")


class SimplePosition(BaseModel):
    """A position with its achievements flattened."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    company: str = Field(..., description="Company name")
    role: str = Field(..., description="Role title")
    duration: str = Field(..., description="Date range")
    location: str = Field(default="", description="Work location")
    achievements: list[str] = Field(
        default_factory=list, description="Achievements in profile order"
    )


class SimpleProfile(BaseModel):
    """Flattened profile consumed by every pipeline stage."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = Field(..., description="Candidate name")
    email: str = Field(..., description="Contact email")
    phone: str = Field(..., description="Contact phone")
    location: str = Field(..., description="Candidate location")
    website: str = Field(default="", description="Personal website")
    linkedin: str = Field(default="", description="LinkedIn URL")
    github: str = Field(default="", description="GitHub URL")
    summary: str = Field(default="", description="Professional summary")
    years_of_experience: int = Field(default=0, ge=0, description="Whole years")
    work_history: list[SimplePosition] = Field(
        default_factory=list, description="Positions, most recent first"
    )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SimpleProfile:
        """Deserialize from dictionary."""
        return cls.model_validate(data)
