"""Profile loading and flattening.

Turns the canonical profile plus the local contact file into the
SimpleProfile every pipeline stage consumes, and renders it as text for
prompts.
"""

from __future__ import annotations

import json
import logging
import math
import re
from collections.abc import Iterable
from datetime import date, datetime
from pathlib import Path

import yaml
from pydantic import ValidationError

from resume_tailor.config.settings import Settings, get_settings
from resume_tailor.profile.models import (
    Contact,
    Profile,
    SimplePosition,
    SimpleProfile,
    WorkHistoryEntry,
)

logger = logging.getLogger(__name__)

REQUIRED_CONTACT_FIELDS = ("name", "email", "phone", "location", "website")

DAYS_PER_YEAR = 365.25

_MONTHS = {
    name: index
    for index, name in enumerate(
        ["jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec"],
        start=1,
    )
}

_RANGE_SEPARATOR = re.compile(
    r"\s+(?:-|–|—|to)\s+|\s*[–—]\s*|\s*-(?=\s*[A-Za-z])", re.IGNORECASE
)
_MONTH_NAME_YEAR = re.compile(r"^([A-Za-z]+)\.?,?\s+(\d{4})$")
_MONTH_SLASH_YEAR = re.compile(r"^(\d{1,2})/(\d{4})$")
_YEAR_DASH_MONTH = re.compile(r"^(\d{4})-(\d{1,2})$")
_YEAR_ONLY = re.compile(r"^(\d{4})$")


class ProfileConfigError(Exception):
    """Raised when profile or contact configuration is missing or incomplete."""


def parse_duration_start(duration: str) -> date | None:
    """Parse the start date of a duration string.

    Accepts ``Mon YYYY``, ``Month YYYY``, ``MM/YYYY``, ``YYYY-MM`` and
    ``YYYY`` starts, e.g. ``"Mar 2022 - Present"`` -> 2022-03-01.

    Returns:
        First day of the start month, or None if the start is unparseable.
    """
    if not duration:
        return None
    start = _RANGE_SEPARATOR.split(duration.strip(), maxsplit=1)[0].strip()

    match = _MONTH_NAME_YEAR.match(start)
    if match:
        month = _MONTHS.get(match.group(1)[:3].lower())
        if month is None:
            return None
        return date(int(match.group(2)), month, 1)

    match = _MONTH_SLASH_YEAR.match(start)
    if match:
        month = int(match.group(1))
        return date(int(match.group(2)), month, 1) if 1 <= month <= 12 else None

    match = _YEAR_DASH_MONTH.match(start)
    if match:
        month = int(match.group(2))
        return date(int(match.group(1)), month, 1) if 1 <= month <= 12 else None

    match = _YEAR_ONLY.match(start)
    if match:
        return date(int(match.group(1)), 1, 1)

    return None


def calculate_years_of_experience(
    durations: Iterable[str], now: date | datetime | None = None
) -> int:
    """Whole years from the earliest parseable start date to ``now``.

    Unparseable starts are skipped; with no parseable start the result is 0.
    """
    starts = [d for d in (parse_duration_start(s) for s in durations) if d is not None]
    if not starts:
        return 0

    if now is None:
        today = date.today()
    elif isinstance(now, datetime):
        today = now.date()
    else:
        today = now

    years = (today - min(starts)).days / DAYS_PER_YEAR
    return max(0, math.floor(years + 0.5))


def format_work_history(
    profile: SimpleProfile,
    *,
    include_location: bool = True,
    heading: str = "Achievements",
) -> str:
    """Render the work history as the block used inside prompts.

    Each position is a ``company | role | duration | location`` line followed
    by its achievements as ``- `` bullets; positions are blank-line separated.
    """
    blocks = []
    for job in profile.work_history:
        fields = [job.company, job.role, job.duration]
        if include_location:
            fields.append(job.location)
        lines = [" | ".join(fields), f"{heading}:"]
        lines.extend(f"- {achievement}" for achievement in job.achievements)
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def profile_as_text(profile: SimpleProfile) -> str:
    """Render the profile as a markdown document."""
    lines = [
        "# Professional Profile",
        "",
        f"**Name:** {profile.name}",
        f"**Location:** {profile.location}",
        f"**Email:** {profile.email}",
        f"**Phone:** {profile.phone}",
        f"**LinkedIn:** {profile.linkedin}",
        f"**GitHub:** {profile.github}",
        f"**Website:** {profile.website}",
        "",
        "## Professional Summary",
        "",
        profile.summary,
        "",
        "## Work History",
        "",
    ]
    for job in profile.work_history:
        lines.append(f"### {job.role} at {job.company}")
        lines.append(f"**Duration:** {job.duration}")
        lines.append(f"**Location:** {job.location}")
        lines.append("")
        lines.append("**Achievements:**")
        lines.extend(f"- {achievement}" for achievement in job.achievements)
        lines.append("")
    return "\n".join(lines)


def _flatten_achievements(entry: WorkHistoryEntry) -> list[str]:
    achievements: list[str] = []
    grouped = [item for group in entry.description for item in group.more_info]
    for achievement in [*grouped, *entry.achievements]:
        if achievement and achievement.strip() and achievement not in achievements:
            achievements.append(achievement)
    return achievements


class ProfileAdapter:
    """Loads profile sources and produces the flattened SimpleProfile."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    def load_profile(self, path: Path | str | None = None) -> Profile:
        """Load and validate the canonical profile from YAML or JSON.

        Raises:
            FileNotFoundError: If the profile file does not exist.
            ValueError: If the file cannot be parsed or fails validation.
        """
        profile_path = Path(path) if path is not None else self.settings.profile_path
        if not profile_path.exists():
            raise FileNotFoundError(f"Profile not found: {profile_path}")

        raw = profile_path.read_text(encoding="utf-8")
        suffix = profile_path.suffix.lower()
        if suffix == ".json" or (
            suffix not in {".yaml", ".yml"} and raw.lstrip().startswith("{")
        ):
            try:
                data = json.loads(raw)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON profile: {profile_path}") from e
        else:
            try:
                data = yaml.safe_load(raw)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML profile: {profile_path}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(f"Profile must be a mapping/dict: {profile_path}")

        try:
            profile = Profile.model_validate(data)
        except ValidationError as e:
            raise ValueError(f"Invalid profile {profile_path}: {e}") from e

        logger.debug(
            f"Loaded profile from {profile_path} ({len(profile.work_history)} positions)"
        )
        return profile

    def load_contact(self, path: Path | str | None = None) -> Contact:
        """Load contact details and check that every required field is set.

        Raises:
            ProfileConfigError: If the file is missing, unreadable, or incomplete.
        """
        contact_path = Path(path) if path is not None else self.settings.contact_path
        if not contact_path.exists():
            raise ProfileConfigError(
                f"{contact_path} not found. Create it from contact.example.json "
                f"(cp contact.example.json {contact_path.name}) and fill in your "
                "contact information."
            )

        try:
            data = json.loads(contact_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ProfileConfigError(f"Invalid JSON in {contact_path}: {e}") from e

        if not isinstance(data, dict):
            raise ProfileConfigError(f"{contact_path} must contain a JSON object")

        missing = [
            field
            for field in REQUIRED_CONTACT_FIELDS
            if not isinstance(data.get(field), str) or not data[field].strip()
        ]
        if missing:
            raise ProfileConfigError(
                f"{contact_path} is missing required fields: {', '.join(missing)}"
            )

        return Contact.model_validate(data)

    def load(
        self,
        profile_path: Path | str | None = None,
        contact_path: Path | str | None = None,
    ) -> SimpleProfile:
        """Load both sources and flatten them.

        Contact problems surface first since they are the common setup mistake.
        """
        contact = self.load_contact(contact_path)
        profile = self.load_profile(profile_path)
        return self.to_simple_profile(profile, contact)

    def to_simple_profile(
        self,
        profile: Profile,
        contact: Contact,
        *,
        now: date | datetime | None = None,
    ) -> SimpleProfile:
        """Flatten the canonical profile for LLM consumption.

        Args:
            profile: Canonical profile.
            contact: Validated contact details.
            now: Reference date for tenure (defaults to today).

        Returns:
            SimpleProfile with achievements flattened per position.
        """
        positions = [
            SimplePosition(
                company=entry.company,
                role=entry.role,
                duration=entry.duration,
                location=entry.location
                or ("Remote" if "remote" in entry.role.lower() else contact.location),
                achievements=_flatten_achievements(entry),
            )
            for entry in profile.work_history
        ]

        years = calculate_years_of_experience(
            (entry.duration for entry in profile.work_history), now
        )

        if profile.summary and profile.summary.strip():
            summary = profile.summary.strip().replace("{years}", str(years))
        else:
            title = profile.title.strip() or "Professional"
            summary = f"{title} with {years}+ years of experience."

        return SimpleProfile(
            name=contact.name,
            email=contact.email,
            phone=contact.phone,
            location=contact.location,
            website=contact.website,
            linkedin=profile.linkedin or contact.linkedin or "",
            github=profile.github or contact.github or "",
            summary=summary,
            years_of_experience=years,
            work_history=positions,
        )
