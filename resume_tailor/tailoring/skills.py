"""Skill extraction from job postings."""

from __future__ import annotations

import logging

from resume_tailor.llm import ChatGateway, OllamaGateway
from resume_tailor.profile import SimpleProfile, format_work_history
from resume_tailor.prompts import SKILLS_EXTRACTION_ID, PromptLibrary
from resume_tailor.utils.json_extract import JSONExtractionError, parse_json_value

logger = logging.getLogger(__name__)

MAX_SKILLS = 7


class SkillExtractor:
    """Pulls the job skills that the candidate can actually back up.

    Used to fill the resume's skills section when the tailoring call returned
    none. Output problems are never fatal here: the result is just empty.
    """

    def __init__(
        self,
        gateway: ChatGateway | None = None,
        prompts: PromptLibrary | None = None,
    ):
        self.gateway = gateway or OllamaGateway.for_task("analyze")
        self.prompts = prompts or PromptLibrary()

    def extract(self, profile: SimpleProfile, job_posting: str) -> list[str]:
        """Return up to seven skills, or [] if the response is unusable.

        Raises:
            PromptTemplateError: If the skills-extraction template is not registered.
            LLMError: If the backend call fails.
        """
        filled = self.prompts.fill_required(
            SKILLS_EXTRACTION_ID,
            {
                "job_posting": job_posting,
                "candidate_experience": "\n\n".join(
                    part
                    for part in (profile.summary, format_work_history(profile))
                    if part
                ),
            },
        )

        response = self.gateway.chat(filled.to_messages())
        skills = self.parse_response(response)
        logger.info(f"Extracted {len(skills)} skills from job posting")
        return skills

    @staticmethod
    def parse_response(response: str) -> list[str]:
        """Read a JSON array (or ``{"skills": [...]}``) of skill names."""
        try:
            data = parse_json_value(response)
        except JSONExtractionError as e:
            logger.warning(f"Failed to parse skills response: {e}")
            return []

        if isinstance(data, dict):
            data = data.get("skills")
        if not isinstance(data, list):
            logger.warning("Skills response is not a list")
            return []

        skills: list[str] = []
        seen: set[str] = set()
        for item in data:
            if not isinstance(item, str):
                continue
            skill = item.strip()
            if skill and skill.lower() not in seen:
                seen.add(skill.lower())
                skills.append(skill)
        return skills[:MAX_SKILLS]
