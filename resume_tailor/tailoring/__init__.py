"""Resume and cover letter tailoring module.

This module provides functionality for:
- Tailoring resume content to a job with strict reconciliation against the profile
- Fact-checking the tailored content with an independent LLM call
- Generating structured cover letters
- Exporting and rendering documents to HTML, PDF and text

Main Entry Point:
    TailoringPipeline - Orchestrates the complete tailoring run

Example:
    from resume_tailor.tailoring import TailoringPipeline

    pipeline = TailoringPipeline()
    result = pipeline.run(profile, posting, "Director of QA", "Acme",
                          output_path="generated/resume.html")

    if result.success:
        print(f"Resume: {result.resume_html_path}")
        print(f"Cover Letter: {result.cover_letter_html_path}")
"""

from resume_tailor.tailoring.config import (
    TailoringConfig,
    get_tailoring_config,
    reset_tailoring_config,
)
from resume_tailor.tailoring.cover_letter import (
    CoverLetterEngine,
    CoverLetterError,
    assemble_full_letter,
)
from resume_tailor.tailoring.engine import ResumeTailoringEngine
from resume_tailor.tailoring.exporters import (
    cover_letter_to_html,
    cover_letter_to_text,
    resume_to_html,
)
from resume_tailor.tailoring.models import (
    CoverLetterOptions,
    CoverLetterResult,
    GrowthOpportunity,
    SelectedExperience,
    SkillMatch,
    TailoredResult,
    ValidationVerdict,
)
from resume_tailor.tailoring.renderer import DocumentRenderer, RenderResult
from resume_tailor.tailoring.service import PipelineResult, TailoringPipeline
from resume_tailor.tailoring.skills import SkillExtractor
from resume_tailor.tailoring.validator import LLMValidator

__all__ = [
    # Main pipeline
    "TailoringPipeline",
    "PipelineResult",
    # Configuration
    "TailoringConfig",
    "get_tailoring_config",
    "reset_tailoring_config",
    # Engines
    "ResumeTailoringEngine",
    "LLMValidator",
    "SkillExtractor",
    "CoverLetterEngine",
    "CoverLetterError",
    "assemble_full_letter",
    # Export / render
    "resume_to_html",
    "cover_letter_to_html",
    "cover_letter_to_text",
    "DocumentRenderer",
    "RenderResult",
    # Models
    "TailoredResult",
    "SelectedExperience",
    "ValidationVerdict",
    "CoverLetterOptions",
    "CoverLetterResult",
    "SkillMatch",
    "GrowthOpportunity",
]
