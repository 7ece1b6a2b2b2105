"""Unit tests for the ResumeTailoringEngine.

Tests for reconciliation against the profile, achievement snapping,
fallback behavior, and prompt filling.
"""

import json

import pytest

from resume_tailor.llm import LLMError
from resume_tailor.profile import SimplePosition
from resume_tailor.prompts import PromptLibrary, PromptTemplateError
from resume_tailor.tailoring.engine import (
    FALLBACK_REASONING,
    ResumeTailoringEngine,
    fuzzy_match,
    snap_achievement,
)
from resume_tailor.tailoring.models import ExperienceDraft


def tailoring_response(experiences, **overrides) -> str:
    payload = {
        "matchScore": 82,
        "reasoning": "Strong automation leadership match.",
        "tailoredSummary": "QA leader focused on automation at scale.",
        "selectedExperiences": experiences,
        "relevantSkills": ["Playwright", "Contract testing", "playwright"],
    }
    payload.update(overrides)
    return json.dumps(payload)


class TestFuzzyMatch:
    """Tests for company/role matching."""

    def test_case_insensitive_equality(self):
        assert fuzzy_match("Acme Health", "acme health")

    def test_substring_in_either_direction(self):
        assert fuzzy_match("Acme", "Acme Health")
        assert fuzzy_match("Senior SDET", "SDET")

    def test_unrelated_values_do_not_match(self):
        assert not fuzzy_match("Nope Corp", "Acme Health")

    def test_blank_never_matches(self):
        assert not fuzzy_match("", "Acme Health")
        assert not fuzzy_match("   ", "Acme Health")


class TestSnapAchievement:
    """Tests for snapping LLM-edited achievements back to the original text."""

    originals = [
        "Built a 12-person QA organization across three product lines",
        "Introduced risk-based release gates that cut escaped defects by 40%",
    ]

    def test_exact_match_ignores_case(self):
        snapped = snap_achievement(self.originals[1].upper(), self.originals)
        assert snapped == self.originals[1]

    def test_reworded_tail_snaps_to_original(self):
        edited = (
            "Built a 12-person QA organization across three product lines, "
            "raising release confidence"
        )
        assert snap_achievement(edited, self.originals) == self.originals[0]

    def test_truncated_text_snaps_to_original(self):
        assert snap_achievement("Introduced risk-based release gates", self.originals) == (
            self.originals[1]
        )

    def test_unmatched_text_is_returned_unchanged(self):
        text = "Shipped a brand new mobile app in two weeks"
        assert snap_achievement(text, self.originals) == text

    def test_prefix_length_is_configurable(self):
        edited = "Built a 12-person team that did something else entirely"
        assert snap_achievement(edited, self.originals, prefix_chars=10) == self.originals[0]
        assert snap_achievement(edited, self.originals, prefix_chars=50) == edited


class TestTailor:
    """Tests for ResumeTailoringEngine.tailor."""

    def test_every_position_appears_once_in_profile_order(
        self, make_gateway, sample_profile, job_posting, tailoring_config
    ):
        """Dropped, fabricated, duplicated and reordered entries are reconciled."""
        acme, beta, gamma = sample_profile.work_history
        response = tailoring_response(
            [
                {
                    "company": "Beta",
                    "role": "SDET",
                    "duration": "2015 - 2022",
                    "selectedAchievements": [beta.achievements[0]],
                },
                {
                    "company": "Nope Corp",
                    "role": "Chief Quality Officer",
                    "selectedAchievements": ["Invented software testing"],
                },
                {
                    "company": "acme health",
                    "role": "Director of Quality Engineering",
                    "location": "Mars",
                    "selectedAchievements": [acme.achievements[2]],
                },
                {
                    "company": "Beta Logistics",
                    "role": "Senior SDET",
                    "selectedAchievements": [beta.achievements[1], beta.achievements[0]],
                },
            ]
        )
        engine = ResumeTailoringEngine(
            make_gateway(response), config=tailoring_config
        )

        result = engine.tailor(sample_profile, job_posting, "Head of QA", "Delta Robotics")

        assert [e.company for e in result.selected_experiences] == [
            "Acme Health",
            "Beta Logistics",
            "Gamma Systems",
        ]
        first, second, third = result.selected_experiences
        assert first.location == acme.location
        assert first.selected_achievements == [acme.achievements[2]]
        assert second.duration == beta.duration
        assert second.selected_achievements == beta.achievements[:2]
        # Omitted position is seeded with its first two achievements
        assert third.selected_achievements == gamma.achievements[:2]
        assert all(
            "Invented software testing" not in e.selected_achievements
            for e in result.selected_experiences
        )
        assert not result.used_fallback

    def test_fabricated_slot_and_omitted_position_are_restored(
        self, make_gateway, sample_profile, job_posting, tailoring_config
    ):
        """A matched, B replaced by a made-up employer, C omitted: three entries out."""
        acme, beta, gamma = sample_profile.work_history
        response = tailoring_response(
            [
                {
                    "company": acme.company,
                    "role": acme.role,
                    "selectedAchievements": acme.achievements[:1],
                },
                {
                    "company": "Nope Corp",
                    "role": beta.role,
                    "selectedAchievements": beta.achievements,
                },
            ]
        )
        engine = ResumeTailoringEngine(make_gateway(response), config=tailoring_config)

        result = engine.tailor(sample_profile, job_posting, "Head of QA", "Delta")

        assert len(result.selected_experiences) == 3
        assert "Nope Corp" not in [e.company for e in result.selected_experiences]
        assert result.selected_experiences[1].selected_achievements == beta.achievements[:2]
        assert result.selected_experiences[2].selected_achievements == gamma.achievements[:2]

    def test_identity_fields_are_copied_verbatim(
        self, make_gateway, sample_profile, job_posting, tailoring_config
    ):
        response = tailoring_response(
            [
                {
                    "company": "ACME",
                    "role": "director of quality",
                    "duration": "forever",
                    "location": "Remote",
                    "selectedAchievements": ["Led migration of 2,000 UI tests"],
                }
            ]
        )
        engine = ResumeTailoringEngine(make_gateway(response), config=tailoring_config)

        result = engine.tailor(sample_profile, job_posting, "Head of QA", "Delta")

        profile_fields = [
            (p.company, p.role, p.duration, p.location) for p in sample_profile.work_history
        ]
        result_fields = [
            (e.company, e.role, e.duration, e.location) for e in result.selected_experiences
        ]
        assert result_fields == profile_fields
        assert result.selected_experiences[0].selected_achievements == [
            "Led migration of 2,000 UI tests from Selenium to Playwright"
        ]

    def test_summary_skills_and_score(
        self, make_gateway, sample_profile, job_posting, tailoring_config
    ):
        engine = ResumeTailoringEngine(
            make_gateway(tailoring_response([])), config=tailoring_config
        )

        result = engine.tailor(sample_profile, job_posting, "Head of QA", "Delta")

        assert result.summary == "QA leader focused on automation at scale."
        assert result.relevant_skills == ["Playwright", "Contract testing"]
        assert result.match_score == 82
        assert result.reasoning == "Strong automation leadership match."

    @pytest.mark.parametrize(
        ("score", "expected"),
        [(140, 100), (-5, 0), ("75", 75), ("88%", 88), ("high", 50), (None, 50)],
    )
    def test_match_score_is_clamped(
        self, make_gateway, sample_profile, job_posting, tailoring_config, score, expected
    ):
        engine = ResumeTailoringEngine(
            make_gateway(tailoring_response([], matchScore=score)),
            config=tailoring_config,
        )

        result = engine.tailor(sample_profile, job_posting, "Head of QA", "Delta")

        assert result.match_score == expected

    def test_missing_summary_and_reasoning_use_defaults(
        self, make_gateway, sample_profile, job_posting, tailoring_config
    ):
        response = tailoring_response([], tailoredSummary="", reasoning=None)
        engine = ResumeTailoringEngine(make_gateway(response), config=tailoring_config)

        result = engine.tailor(sample_profile, job_posting, "Head of QA", "Delta")

        assert result.summary == sample_profile.summary
        assert result.reasoning == "No reasoning provided"

    def test_fenced_response_with_commentary_is_parsed(
        self, make_gateway, sample_profile, job_posting, tailoring_config
    ):
        response = (
            "<think>Weighing the roles...</think>\nHere you go:\n```json\n"
            + tailoring_response([])
            + "\n```\nGood luck!"
        )
        engine = ResumeTailoringEngine(make_gateway(response), config=tailoring_config)

        result = engine.tailor(sample_profile, job_posting, "Head of QA", "Delta")

        assert result.match_score == 82
        assert not result.used_fallback

    def test_placeholder_in_commentary_does_not_force_fallback(
        self, make_gateway, sample_profile, job_posting, tailoring_config
    ):
        response = "I filled the {company} slot.\n" + tailoring_response([])
        engine = ResumeTailoringEngine(make_gateway(response), config=tailoring_config)

        result = engine.tailor(sample_profile, job_posting, "Head of QA", "Delta")

        assert result.match_score == 82
        assert not result.used_fallback

    def test_unparseable_response_uses_fallback(
        self, make_gateway, sample_profile, job_posting, tailoring_config
    ):
        engine = ResumeTailoringEngine(
            make_gateway("I'm sorry, I can't produce JSON today."),
            config=tailoring_config,
        )

        result = engine.tailor(sample_profile, job_posting, "Head of QA", "Delta")

        assert result.used_fallback
        assert result.match_score == 50
        assert result.reasoning == FALLBACK_REASONING
        assert result.relevant_skills == []
        assert result.summary == sample_profile.summary
        assert [e.selected_achievements for e in result.selected_experiences] == [
            p.achievements[:5] for p in sample_profile.work_history
        ]

    def test_prompt_contains_profile_and_job(
        self, make_gateway, sample_profile, job_posting, tailoring_config
    ):
        gateway = make_gateway(tailoring_response([]))
        engine = ResumeTailoringEngine(gateway, config=tailoring_config)

        engine.tailor(sample_profile, job_posting, "Head of QA", "Delta Robotics")

        messages = gateway.calls[0]
        assert [m["role"] for m in messages] == ["system", "user"]
        prompt = gateway.last_user_prompt
        assert "Acme Health | Director of Quality Engineering | Mar 2022 - Present" in prompt
        assert "Delta Robotics" in prompt
        assert "Head of QA" in prompt
        assert "{work_history}" not in prompt

    def test_llm_error_propagates(
        self, make_gateway, sample_profile, job_posting, tailoring_config
    ):
        engine = ResumeTailoringEngine(
            make_gateway(LLMError("connection refused")), config=tailoring_config
        )

        with pytest.raises(LLMError):
            engine.tailor(sample_profile, job_posting, "Head of QA", "Delta")

    def test_missing_template_raises(
        self, make_gateway, sample_profile, job_posting, tailoring_config
    ):
        engine = ResumeTailoringEngine(
            make_gateway(), prompts=PromptLibrary([]), config=tailoring_config
        )

        with pytest.raises(PromptTemplateError):
            engine.tailor(sample_profile, job_posting, "Head of QA", "Delta")


class TestReconcile:
    """Tests for ResumeTailoringEngine.reconcile."""

    def test_empty_selection_is_seeded(self, make_gateway, sample_profile, tailoring_config):
        engine = ResumeTailoringEngine(make_gateway(), config=tailoring_config)
        drafts = [
            ExperienceDraft(company="Gamma Systems", role="QA Engineer", selected_achievements=[])
        ]

        experiences = engine.reconcile(sample_profile, drafts)

        assert experiences[2].selected_achievements == (
            sample_profile.work_history[2].achievements[:2]
        )

    def test_unmatched_achievement_text_is_kept(
        self, make_gateway, sample_profile, tailoring_config
    ):
        engine = ResumeTailoringEngine(make_gateway(), config=tailoring_config)
        drafts = [
            ExperienceDraft(
                company="Gamma Systems",
                role="QA Engineer",
                selected_achievements=["Championed quality culture"],
            )
        ]

        experiences = engine.reconcile(sample_profile, drafts)

        # The validator is the second line of defense for reworded claims
        assert experiences[2].selected_achievements == ["Championed quality culture"]

    def test_company_match_alone_is_not_enough(
        self, make_gateway, sample_profile, tailoring_config
    ):
        engine = ResumeTailoringEngine(make_gateway(), config=tailoring_config)
        drafts = [
            ExperienceDraft(
                company="Acme Health",
                role="Chief Executive Officer",
                selected_achievements=["Took the company public"],
            )
        ]

        experiences = engine.reconcile(sample_profile, drafts)

        assert experiences[0].selected_achievements == (
            sample_profile.work_history[0].achievements[:2]
        )

    def test_promotion_at_one_company_keeps_roles_apart(
        self, make_gateway, sample_profile, tailoring_config
    ):
        profile = sample_profile.model_copy(
            update={
                "work_history": [
                    SimplePosition(
                        company="Acme",
                        role="Engineer",
                        duration="2015 - 2018",
                        achievements=["Shipped the billing service", "Wrote on-call runbooks"],
                    ),
                    SimplePosition(
                        company="Acme",
                        role="Senior Engineer",
                        duration="2018 - Present",
                        achievements=[
                            "Led the platform rewrite to Kubernetes",
                            "Mentored four engineers",
                        ],
                    ),
                ]
            }
        )
        engine = ResumeTailoringEngine(make_gateway(), config=tailoring_config)
        drafts = [
            ExperienceDraft(
                company="Acme",
                role="Senior Engineer",
                selected_achievements=["Led the platform rewrite to Kubernetes"],
            )
        ]

        experiences = engine.reconcile(profile, drafts)

        assert [e.role for e in experiences] == ["Engineer", "Senior Engineer"]
        assert experiences[1].selected_achievements == [
            "Led the platform rewrite to Kubernetes"
        ]
        assert experiences[0].selected_achievements == [
            "Shipped the billing service",
            "Wrote on-call runbooks",
        ]

    def test_exact_role_wins_over_fuzzy_role_when_company_is_reworded(
        self, make_gateway, sample_profile, tailoring_config
    ):
        profile = sample_profile.model_copy(
            update={
                "work_history": [
                    SimplePosition(
                        company="Acme Corp",
                        role="Engineer",
                        duration="2015 - 2018",
                        achievements=["Shipped the billing service"],
                    ),
                    SimplePosition(
                        company="Acme Corp",
                        role="Senior Engineer",
                        duration="2018 - Present",
                        achievements=["Led the platform rewrite to Kubernetes"],
                    ),
                ]
            }
        )
        engine = ResumeTailoringEngine(make_gateway(), config=tailoring_config)
        drafts = [
            ExperienceDraft(
                company="Acme",
                role="senior engineer",
                selected_achievements=["Led the platform rewrite to Kubernetes"],
            )
        ]

        experiences = engine.reconcile(profile, drafts)

        assert experiences[1].selected_achievements == [
            "Led the platform rewrite to Kubernetes"
        ]
        assert experiences[0].selected_achievements == ["Shipped the billing service"]
