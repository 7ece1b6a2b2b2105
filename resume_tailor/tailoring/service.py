"""Main Tailoring Pipeline.

Orchestrates a complete run from profile and job posting to tailored resume,
validation verdict, cover letter, and rendered documents.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path

from resume_tailor.llm import ChatGateway, LLMConfig, LLMError, OllamaGateway
from resume_tailor.profile import SimpleProfile
from resume_tailor.prompts import PromptLibrary, PromptTemplateError
from resume_tailor.tailoring.config import TailoringConfig, get_tailoring_config
from resume_tailor.tailoring.cover_letter import CoverLetterEngine, CoverLetterError
from resume_tailor.tailoring.engine import ResumeTailoringEngine
from resume_tailor.tailoring.models import (
    CoverLetterOptions,
    CoverLetterResult,
    TailoredResult,
    ValidationVerdict,
)
from resume_tailor.tailoring.renderer import DocumentRenderer
from resume_tailor.tailoring.skills import SkillExtractor
from resume_tailor.tailoring.validator import LLMValidator

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Result of a complete tailoring run."""

    success: bool
    error: str | None = None

    # Stage outputs
    tailored: TailoredResult | None = None
    verdict: ValidationVerdict | None = None
    cover_letter: CoverLetterResult | None = None

    # File paths
    resume_html_path: str | None = None
    resume_pdf_path: str | None = None
    cover_letter_html_path: str | None = None
    cover_letter_pdf_path: str | None = None
    cover_letter_text_path: str | None = None

    # Metadata
    completed_at: datetime = field(default_factory=datetime.now)


class TailoringPipeline:
    """Sequential tailoring pipeline.

    1. Tailor resume content (fills skills via the skill extractor if none came back)
    2. Validate against the profile; an invalid verdict stops the run
    3. Render the resume
    4. Generate and render the cover letter (optional)

    With ``cover_letter_only`` steps 1-3 are skipped.
    """

    def __init__(
        self,
        config: TailoringConfig | None = None,
        *,
        llm_config: LLMConfig | None = None,
        prompts: PromptLibrary | None = None,
        gateway: ChatGateway | None = None,
        renderer: DocumentRenderer | None = None,
    ):
        """Initialize the pipeline.

        Args:
            config: Optional TailoringConfig. Uses global config if not provided.
            llm_config: Optional LLMConfig for the per-task gateways.
            prompts: Prompt library shared by every engine.
            gateway: One gateway for every stage instead of per-task gateways.
            renderer: Optional document renderer.
        """
        self.config = config or get_tailoring_config()
        self.prompts = prompts or PromptLibrary()

        def gateway_for(task: str) -> ChatGateway:
            return gateway or OllamaGateway.for_task(task, llm_config)

        self.tailoring_engine = ResumeTailoringEngine(
            gateway_for("tailor"), self.prompts, self.config
        )
        self.validator = LLMValidator(gateway_for("validate"), self.prompts)
        self.skill_extractor = SkillExtractor(gateway_for("analyze"), self.prompts)
        self.cover_letter_engine = CoverLetterEngine(
            gateway_for("cover-letter"), self.prompts
        )
        self.renderer = renderer or DocumentRenderer(config=self.config)

    def run(
        self,
        profile: SimpleProfile,
        job_posting: str,
        job_title: str,
        company: str,
        *,
        output_path: Path | str,
        generate_cover_letter: bool = True,
        cover_letter_only: bool = False,
        options: CoverLetterOptions | None = None,
        letter_date: date | None = None,
    ) -> PipelineResult:
        """Run the pipeline.

        Args:
            profile: Flattened candidate profile.
            job_posting: Job posting text.
            job_title: Target job title.
            company: Target company.
            output_path: Resume output path; cover letter files are named after it.
            generate_cover_letter: Whether to generate a cover letter.
            cover_letter_only: Skip the resume stages.
            options: Cover letter options.
            letter_date: Date printed on the cover letter.

        Returns:
            PipelineResult with stage outputs and file paths, or an error.
        """
        logger.info(f"Starting tailoring pipeline for {company} - {job_title}")
        result = PipelineResult(success=False)

        try:
            if not cover_letter_only:
                if not self._run_resume_stages(
                    result, profile, job_posting, job_title, company, output_path
                ):
                    return result

            if generate_cover_letter or cover_letter_only:
                logger.info("Generating cover letter...")
                cover_letter = self.cover_letter_engine.generate(
                    profile, job_posting, job_title, company, options
                )
                result.cover_letter = cover_letter

                render = self.renderer.render_cover_letter(
                    profile, cover_letter, output_path, letter_date=letter_date
                )
                if render.file_path is None:
                    result.error = f"Failed to render cover letter: {render.error}"
                    return result
                if not render.success:
                    logger.warning(f"Cover letter PDF not written: {render.error}")
                result.cover_letter_html_path = render.file_path
                result.cover_letter_pdf_path = render.pdf_path
                result.cover_letter_text_path = render.text_path

        except (LLMError, CoverLetterError, PromptTemplateError) as e:
            logger.error(f"Tailoring pipeline failed: {e}")
            result.error = str(e)
            return result

        logger.info("Tailoring pipeline completed successfully")
        result.success = True
        result.completed_at = datetime.now()
        return result

    def _run_resume_stages(
        self,
        result: PipelineResult,
        profile: SimpleProfile,
        job_posting: str,
        job_title: str,
        company: str,
        output_path: Path | str,
    ) -> bool:
        logger.info("Step 1: Tailoring resume...")
        tailored = self.tailoring_engine.tailor(profile, job_posting, job_title, company)

        if not tailored.relevant_skills:
            logger.info("No skills from tailoring, extracting from job posting...")
            skills = self.skill_extractor.extract(profile, job_posting)
            if skills:
                tailored = tailored.model_copy(update={"relevant_skills": skills})
        result.tailored = tailored

        logger.info("Step 2: Validating tailored content...")
        verdict = self.validator.validate(profile, tailored)
        result.verdict = verdict
        if not verdict.is_valid:
            result.error = "Validation failed: " + (
                "; ".join(verdict.issues) or "tailored content does not match the profile"
            )
            logger.error(result.error)
            return False

        logger.info("Step 3: Rendering resume...")
        render = self.renderer.render_resume(profile, tailored, output_path)
        if render.file_path is None:
            result.error = f"Failed to render resume: {render.error}"
            return False
        if not render.success:
            logger.warning(f"Resume PDF not written: {render.error}")
        result.resume_html_path = render.file_path
        result.resume_pdf_path = render.pdf_path
        return True
