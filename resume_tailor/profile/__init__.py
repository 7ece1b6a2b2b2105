"""Candidate profile loading.

Public API:
    - ProfileAdapter: Loads profile + contact files into a SimpleProfile
    - SimpleProfile / SimplePosition: Flattened view used by the pipeline
    - format_work_history / profile_as_text: Text renderings for prompts
"""

from resume_tailor.profile.adapter import (
    REQUIRED_CONTACT_FIELDS,
    ProfileAdapter,
    ProfileConfigError,
    calculate_years_of_experience,
    format_work_history,
    parse_duration_start,
    profile_as_text,
)
from resume_tailor.profile.models import (
    Contact,
    DescriptionGroup,
    Profile,
    SimplePosition,
    SimpleProfile,
    WorkHistoryEntry,
)

__all__ = [
    "ProfileAdapter",
    "ProfileConfigError",
    "REQUIRED_CONTACT_FIELDS",
    "parse_duration_start",
    "calculate_years_of_experience",
    "format_work_history",
    "profile_as_text",
    "Profile",
    "Contact",
    "DescriptionGroup",
    "WorkHistoryEntry",
    "SimpleProfile",
    "SimplePosition",
]
