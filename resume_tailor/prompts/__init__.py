"""Prompt template store.

Public API:
    - PromptLibrary: Named templates with fill/export/import
    - PromptTemplate: Template model
    - FilledPrompt: System/user messages produced by a fill
"""

from resume_tailor.prompts.defaults import (
    COVER_LETTER_ID,
    RESUME_TAILOR_ID,
    SKILLS_EXTRACTION_ID,
    VALIDATION_ID,
    default_templates,
)
from resume_tailor.prompts.library import (
    MissingPlaceholderError,
    PromptLibrary,
    PromptTemplateError,
)
from resume_tailor.prompts.models import FilledPrompt, ImportReport, PromptTemplate

__all__ = [
    "PromptLibrary",
    "PromptTemplate",
    "FilledPrompt",
    "ImportReport",
    "PromptTemplateError",
    "MissingPlaceholderError",
    "default_templates",
    "RESUME_TAILOR_ID",
    "VALIDATION_ID",
    "SKILLS_EXTRACTION_ID",
    "COVER_LETTER_ID",
]
