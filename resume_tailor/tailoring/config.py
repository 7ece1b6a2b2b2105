"""Configuration settings for the Tailoring module.

Provides settings for reconciliation limits, templates, and document output.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_TEMPLATE_DIR = Path(__file__).parent / "templates"


class TailoringConfig(BaseSettings):
    """Configuration for the tailoring system.

    Settings can be overridden via environment variables prefixed with TAILORING_.

    Example: TAILORING_GENERATE_PDF=false
    """

    model_config = SettingsConfigDict(
        env_prefix="TAILORING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Reconciliation
    fallback_achievements: Annotated[int, Field(ge=1)] = Field(
        default=5,
        description="Achievements kept per position when the LLM output is unusable",
    )
    seed_achievements: Annotated[int, Field(ge=1)] = Field(
        default=2,
        description="Achievements seeded into positions the LLM omitted",
    )
    fallback_match_score: Annotated[int, Field(ge=0, le=100)] = Field(
        default=50,
        description="Match score used when the LLM gives none",
    )
    snap_prefix_chars: Annotated[int, Field(ge=1)] = Field(
        default=50,
        description="Prefix length used to snap achievements to the original text",
    )

    # Template settings
    template_dir: Path = Field(
        default=PACKAGE_TEMPLATE_DIR,
        description="Directory containing HTML/CSS templates",
    )
    resume_template: str = Field(
        default="resume.html",
        description="Resume template filename",
    )
    cover_letter_template: str = Field(
        default="cover_letter.html",
        description="Cover letter template filename",
    )

    # Output settings
    generate_pdf: bool = Field(
        default=True,
        description="Print PDFs next to the HTML output",
    )
    cover_letter_suffix: str = Field(
        default="_cover_letter",
        description="Suffix added to the output stem for cover letter files",
    )

    @field_validator("template_dir", mode="before")
    @classmethod
    def convert_to_path(cls, v: str | Path) -> Path:
        """Convert string paths to Path objects."""
        if isinstance(v, str):
            return Path(v)
        return v

    def template_file(self, name: str) -> Path:
        """Resolve a template file, preferring template_dir over the packaged copy."""
        candidate = self.template_dir / name
        if candidate.exists():
            return candidate
        return PACKAGE_TEMPLATE_DIR / name


_tailoring_config: TailoringConfig | None = None


def get_tailoring_config() -> TailoringConfig:
    """Get the tailoring configuration singleton."""
    global _tailoring_config
    if _tailoring_config is None:
        _tailoring_config = TailoringConfig()
    return _tailoring_config


def reset_tailoring_config() -> None:
    """Reset the configuration singleton (useful for testing)."""
    global _tailoring_config
    _tailoring_config = None
