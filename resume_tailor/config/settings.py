"""Configuration settings for Resume Tailor."""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings have sensible defaults and can be overridden via
    environment variables or a .env file (e.g. PROFILE_PATH=me.yaml).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Source data
    profile_path: Path = Field(
        default=Path("./profile.yaml"),
        description="Path to the canonical profile (YAML or JSON)",
    )
    contact_path: Path = Field(
        default=Path("./contact.json"),
        description="Path to the local contact configuration (JSON)",
    )

    prompts_path: Path = Field(
        default=Path("./prompts.json"),
        description="Custom prompt templates layered over the built-in set",
    )

    # Output
    output_dir: Path = Field(
        default=Path("./generated"),
        description="Directory for generated documents",
    )
    resume_filename: str = Field(
        default="resume.html",
        description="Default resume filename inside output_dir",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR",
    )
    log_file: Path | None = Field(
        default=None,
        description="Optional file that receives a copy of the log output",
    )

    @field_validator(
        "profile_path",
        "contact_path",
        "prompts_path",
        "output_dir",
        "log_file",
        mode="before",
    )
    @classmethod
    def convert_to_path(cls, v: str | Path | None) -> Path | None:
        """Convert string paths to Path objects."""
        if v == "":
            return None
        if isinstance(v, str):
            return Path(v)
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a known level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()

    def default_resume_path(self) -> Path:
        """Resume output path used when the CLI gets no --output."""
        return self.output_dir / self.resume_filename


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the application settings singleton."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset the settings singleton (useful for testing)."""
    global _settings
    _settings = None
