"""Document exporters.

Pure functions rendering tailoring and cover letter results to HTML (Jinja2
templates) and plain text. No LLM calls and no file I/O beyond reading the
templates.
"""

from __future__ import annotations

from datetime import date, datetime
from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from resume_tailor.profile import SimpleProfile
from resume_tailor.tailoring.config import (
    PACKAGE_TEMPLATE_DIR,
    TailoringConfig,
    get_tailoring_config,
)
from resume_tailor.tailoring.cover_letter import SALUTATION, SIGN_OFF
from resume_tailor.tailoring.models import CoverLetterResult, TailoredResult


@lru_cache(maxsize=8)
def _environment(template_dir: Path) -> Environment:
    return Environment(
        loader=FileSystemLoader([str(template_dir), str(PACKAGE_TEMPLATE_DIR)]),
        autoescape=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )


def _load_styles(config: TailoringConfig) -> str:
    """Load CSS from the template directory, falling back to the packaged copy."""
    styles_path = config.template_file("styles.css")
    return styles_path.read_text(encoding="utf-8") if styles_path.exists() else ""


def format_letter_date(value: date | datetime) -> str:
    """Format a date as e.g. ``October 19, 2026``."""
    return f"{value:%B} {value.day}, {value.year}"


def resume_to_html(
    profile: SimpleProfile,
    tailored: TailoredResult,
    *,
    config: TailoringConfig | None = None,
) -> str:
    """Render the tailored resume as a letter-sized HTML document."""
    config = config or get_tailoring_config()
    template = _environment(config.template_dir).get_template(config.resume_template)

    links = [
        (label, url)
        for label, url in (
            ("LinkedIn", profile.linkedin),
            ("GitHub", profile.github),
            ("Website", profile.website),
        )
        if url
    ]

    return template.render(
        name=profile.name,
        email=profile.email,
        phone=profile.phone,
        location=profile.location,
        links=links,
        summary=tailored.summary,
        skills=tailored.relevant_skills,
        experiences=tailored.selected_experiences,
        styles=_load_styles(config),
    )


def cover_letter_to_html(
    result: CoverLetterResult,
    profile: SimpleProfile,
    *,
    letter_date: date | datetime | None = None,
    config: TailoringConfig | None = None,
) -> str:
    """Render the cover letter as an HTML document.

    Args:
        result: Structured cover letter.
        profile: Candidate profile (name and contact header).
        letter_date: Date printed on the letter (defaults to today).
        config: Optional TailoringConfig. Uses global config if not provided.
    """
    config = config or get_tailoring_config()
    template = _environment(config.template_dir).get_template(
        config.cover_letter_template
    )

    return template.render(
        name=profile.name,
        email=profile.email,
        phone=profile.phone,
        date=format_letter_date(letter_date or date.today()),
        salutation=SALUTATION,
        sign_off=SIGN_OFF,
        letter=result,
        styles=_load_styles(config),
    )


def cover_letter_to_text(result: CoverLetterResult) -> str:
    """Plain-text export: the assembled letter, newline-terminated."""
    return result.full_letter.rstrip("\n") + "\n"
