"""Cover Letter Engine.

Generates a structured cover letter (opening, skill matches, growth
narrative, company alignment, closing) with one LLM call and assembles the
full text deterministically from those parts.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from resume_tailor.llm import ChatGateway, OllamaGateway
from resume_tailor.profile import SimpleProfile, format_work_history
from resume_tailor.prompts import COVER_LETTER_ID, PromptLibrary
from resume_tailor.tailoring.models import (
    DEFAULT_COMPANY_ALIGNMENT,
    CoverLetterOptions,
    CoverLetterResponse,
    CoverLetterResult,
)
from resume_tailor.utils.json_extract import JSONExtractionError, parse_json_object

logger = logging.getLogger(__name__)

SALUTATION = "Dear Hiring Manager,"
SIGN_OFF = "Sincerely,"


class CoverLetterError(Exception):
    """Raised when the LLM does not produce a usable cover letter."""


def assemble_full_letter(result: CoverLetterResult, candidate_name: str) -> str:
    """Assemble the letter text in its fixed section order.

    Salutation, opening, key qualifications, growth areas, company alignment
    (when non-empty), closing, signature. Tone never affects the order.
    """
    sections: list[str] = [f"{SALUTATION}\n", result.opening, ""]

    sections.append("Key qualifications:")
    for match in result.skill_matches:
        sections.append(f"\n{match.skill}: {' '.join(match.experience_examples)}")
    sections.append("")

    sections.append("I'm particularly excited about:")
    for opportunity in result.growth_opportunities:
        sections.append(
            f"\n{opportunity.area}: {opportunity.why_excited} {opportunity.desired_growth}"
        )
    sections.append("")

    if result.company_alignment and result.company_alignment.strip():
        sections.append(result.company_alignment)
        sections.append("")

    sections.append(result.closing)
    sections.append("")
    sections.append(SIGN_OFF)
    sections.append(candidate_name)

    return "\n".join(sections)


class CoverLetterEngine:
    """Generates cover letters from a profile and a job posting."""

    def __init__(
        self,
        gateway: ChatGateway | None = None,
        prompts: PromptLibrary | None = None,
    ):
        """Initialize the engine.

        Args:
            gateway: LLM gateway. Defaults to the gateway for the "cover-letter" task.
            prompts: Prompt library shared across the run.
        """
        self.gateway = gateway or OllamaGateway.for_task("cover-letter")
        self.prompts = prompts or PromptLibrary()

    def generate(
        self,
        profile: SimpleProfile,
        job_posting: str,
        job_title: str,
        company: str,
        options: CoverLetterOptions | None = None,
    ) -> CoverLetterResult:
        """Generate a cover letter.

        Args:
            profile: Flattened candidate profile.
            job_posting: Job posting text.
            job_title: Target job title.
            company: Target company.
            options: Tone, length, focus areas and company research.

        Returns:
            CoverLetterResult with ``full_letter`` assembled.

        Raises:
            CoverLetterError: If the response is unparseable or misses a required part.
            PromptTemplateError: If the cover-letter template is not registered.
            LLMError: If the backend call fails.
        """
        options = options or CoverLetterOptions()
        logger.info(f"Generating {options.tone} cover letter for {company} - {job_title}")

        filled = self.prompts.fill_required(
            COVER_LETTER_ID,
            {
                "name": profile.name,
                "summary": profile.summary,
                "work_history": format_work_history(
                    profile, include_location=False, heading="Key Achievements"
                ),
                "job_title": job_title,
                "company": company,
                "job_posting": job_posting,
                "tone": options.tone,
                "max_length": options.max_length,
                "focus_areas": ", ".join(options.focus_areas),
                "company_research": options.company_research or "Not provided",
            },
        )

        response = self.gateway.chat(filled.to_messages())
        result = self.parse_response(response, options)
        result.full_letter = assemble_full_letter(result, profile.name)

        logger.info(
            f"Cover letter ready: {len(result.skill_matches)} skill matches, "
            f"{len(result.growth_opportunities)} growth areas"
        )
        return result

    def parse_response(
        self, response: str, options: CoverLetterOptions | None = None
    ) -> CoverLetterResult:
        """Parse raw LLM output into a CoverLetterResult (without full text).

        Raises:
            CoverLetterError: If parsing fails or a required part is missing.
        """
        options = options or CoverLetterOptions()
        try:
            parsed = CoverLetterResponse.model_validate(parse_json_object(response))
        except (JSONExtractionError, ValidationError) as e:
            logger.error(f"Failed to parse cover letter response: {e}")
            logger.debug(f"Raw cover letter response: {response}")
            raise CoverLetterError("Failed to parse LLM response for cover letter") from e

        skill_matches = [match for match in parsed.skill_matches if match.skill]
        growth = [item for item in parsed.growth_opportunities if item.area]

        missing = [
            name
            for name, value in (
                ("opening", parsed.opening),
                ("skillMatches", skill_matches),
                ("growthOpportunities", growth),
                ("closing", parsed.closing),
            )
            if not value
        ]
        if missing:
            raise CoverLetterError(
                "Invalid cover letter structure from LLM - missing required fields: "
                + ", ".join(missing)
            )

        return CoverLetterResult(
            opening=parsed.opening,
            skill_matches=skill_matches,
            growth_opportunities=growth,
            company_alignment=parsed.company_alignment or DEFAULT_COMPANY_ALIGNMENT,
            closing=parsed.closing,
            tone=options.tone,
        )
