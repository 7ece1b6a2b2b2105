"""Resume Tailoring Engine.

Asks the LLM to select and adapt resume content for a job, then forces the
answer back onto the profile: every position comes out with its exact
company/role/duration/location, achievements are snapped to the original
wording where possible, and every profile position appears exactly once.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from resume_tailor.llm import ChatGateway, OllamaGateway
from resume_tailor.profile import SimplePosition, SimpleProfile, format_work_history
from resume_tailor.prompts import RESUME_TAILOR_ID, PromptLibrary
from resume_tailor.tailoring.config import TailoringConfig, get_tailoring_config
from resume_tailor.tailoring.models import (
    ExperienceDraft,
    SelectedExperience,
    TailoredResult,
    TailoringResponse,
    clamp_int,
)
from resume_tailor.utils.json_extract import JSONExtractionError, parse_json_object

logger = logging.getLogger(__name__)

FALLBACK_REASONING = "Failed to parse LLM response, using fallback with all profile data"


def fuzzy_match(a: str, b: str) -> bool:
    """Case-insensitive equality or substring containment in either direction.

    Blank values never match.
    """
    a, b = a.strip().lower(), b.strip().lower()
    if not a or not b:
        return False
    return a == b or a in b or b in a


def snap_achievement(text: str, originals: list[str], prefix_chars: int = 50) -> str:
    """Return the original achievement ``text`` was taken from, if any.

    An exact (case-insensitive) match wins; otherwise the first original where
    either lower-cased text contains the other's first ``prefix_chars``
    characters. Unmatched text is returned unchanged.
    """
    lowered = text.strip().lower()
    for original in originals:
        if original.strip().lower() == lowered:
            return original

    for original in originals:
        candidate = original.lower()
        if lowered[:prefix_chars] in candidate or candidate[:prefix_chars] in lowered:
            return original
    return text


class ResumeTailoringEngine:
    """Tailors a profile's resume content to one job posting."""

    def __init__(
        self,
        gateway: ChatGateway | None = None,
        prompts: PromptLibrary | None = None,
        config: TailoringConfig | None = None,
    ):
        """Initialize the engine.

        Args:
            gateway: LLM gateway. Defaults to the gateway for the "tailor" task.
            prompts: Prompt library shared across the run.
            config: Optional TailoringConfig. Uses global config if not provided.
        """
        self.config = config or get_tailoring_config()
        self.gateway = gateway or OllamaGateway.for_task("tailor")
        self.prompts = prompts or PromptLibrary()

    def tailor(
        self,
        profile: SimpleProfile,
        job_posting: str,
        job_title: str,
        company: str,
    ) -> TailoredResult:
        """Select and adapt resume content for a job.

        Args:
            profile: Flattened candidate profile.
            job_posting: Job posting text.
            job_title: Target job title.
            company: Target company.

        Returns:
            TailoredResult covering every profile position exactly once.

        Raises:
            PromptTemplateError: If the resume-tailor template is not registered.
            LLMError: If the backend call fails.
        """
        logger.info(f"Tailoring resume for {company} - {job_title}")

        filled = self.prompts.fill_required(
            RESUME_TAILOR_ID,
            {
                "name": profile.name,
                "summary": profile.summary,
                "work_history": format_work_history(profile),
                "num_positions": len(profile.work_history),
                "job_title": job_title,
                "company": company,
                "job_posting": job_posting,
            },
        )

        response = self.gateway.chat(filled.to_messages())

        try:
            parsed = TailoringResponse.model_validate(parse_json_object(response))
        except (JSONExtractionError, ValidationError) as e:
            logger.warning(f"Failed to parse tailoring response, using fallback: {e}")
            logger.debug(f"Raw tailoring response: {response}")
            return self.fallback_result(profile)

        experiences = self.reconcile(profile, parsed.selected_experiences)
        result = TailoredResult(
            summary=parsed.tailored_summary or profile.summary,
            selected_experiences=experiences,
            relevant_skills=_dedupe(parsed.relevant_skills),
            match_score=clamp_int(
                parsed.match_score, 0, 100, self.config.fallback_match_score
            ),
            reasoning=parsed.reasoning or "No reasoning provided",
        )

        logger.info(
            f"Tailored {len(result.selected_experiences)} positions, "
            f"{len(result.relevant_skills)} skills, match score {result.match_score}"
        )
        return result

    def fallback_result(self, profile: SimpleProfile) -> TailoredResult:
        """Deterministic result built from the profile alone."""
        limit = self.config.fallback_achievements
        return TailoredResult(
            summary=profile.summary,
            selected_experiences=[
                _select(position, position.achievements[:limit])
                for position in profile.work_history
            ],
            relevant_skills=[],
            match_score=self.config.fallback_match_score,
            reasoning=FALLBACK_REASONING,
            used_fallback=True,
        )

    def reconcile(
        self, profile: SimpleProfile, drafts: list[ExperienceDraft]
    ) -> list[SelectedExperience]:
        """Map LLM experiences back onto the profile.

        Drafts whose company and role both fuzzy-match a profile position take
        that position's exact values; drafts matching nothing are dropped as
        fabricated. Duplicates are merged, and positions left out (or left
        without achievements) are seeded with their first original
        achievements. The result follows profile order.
        """
        positions = profile.work_history
        selected: dict[int, list[str]] = {}

        for draft in drafts:
            index = self._find_position(positions, draft)
            if index is None:
                logger.warning(
                    f"Dropping experience not in profile: {draft.company!r} / {draft.role!r}"
                )
                continue

            originals = positions[index].achievements
            achievements = selected.setdefault(index, [])
            for text in draft.selected_achievements:
                if not text.strip():
                    continue
                snapped = snap_achievement(text, originals, self.config.snap_prefix_chars)
                if snapped not in achievements:
                    achievements.append(snapped)

        seed = self.config.seed_achievements
        experiences = []
        for index, position in enumerate(positions):
            achievements = selected.get(index)
            if index not in selected:
                logger.info(f"Adding omitted position: {position.company} - {position.role}")
            if not achievements:
                achievements = position.achievements[:seed]
            experiences.append(_select(position, achievements))
        return experiences

    @staticmethod
    def _find_position(
        positions: list[SimplePosition], draft: ExperienceDraft
    ) -> int | None:
        """Exact company+role match first, then exact role at a fuzzy company,
        then fuzzy containment on both.

        A promotion at one company (Engineer, Senior Engineer) must not send
        the senior entry to the junior slot just because one role contains
        the other.
        """
        def same(a: str, b: str) -> bool:
            return a.strip().lower() == b.strip().lower()

        passes = (
            (same, same),
            (fuzzy_match, same),
            (fuzzy_match, fuzzy_match),
        )
        for company_matches, role_matches in passes:
            for index, position in enumerate(positions):
                if company_matches(position.company, draft.company) and role_matches(
                    position.role, draft.role
                ):
                    return index
        return None


def _select(position: SimplePosition, achievements: list[str]) -> SelectedExperience:
    return SelectedExperience(
        company=position.company,
        role=position.role,
        duration=position.duration,
        location=position.location,
        selected_achievements=list(achievements),
    )


def _dedupe(items: list[str]) -> list[str]:
    seen: set[str] = set()
    unique = []
    for item in items:
        key = item.lower()
        if key not in seen:
            seen.add(key)
            unique.append(item)
    return unique
