"""Unit tests for the HTML and text exporters."""

from datetime import date

import pytest

from resume_tailor.tailoring.config import TailoringConfig
from resume_tailor.tailoring.cover_letter import assemble_full_letter
from resume_tailor.tailoring.exporters import (
    cover_letter_to_html,
    cover_letter_to_text,
    format_letter_date,
    resume_to_html,
)
from resume_tailor.tailoring.models import (
    CoverLetterResult,
    GrowthOpportunity,
    SelectedExperience,
    SkillMatch,
    TailoredResult,
)


@pytest.fixture
def tailored(sample_profile) -> TailoredResult:
    return TailoredResult(
        summary="Quality leader who builds <automation> teams & platforms.",
        selected_experiences=[
            SelectedExperience(
                company=position.company,
                role=position.role,
                duration=position.duration,
                location=position.location,
                selected_achievements=position.achievements[:1],
            )
            for position in sample_profile.work_history
        ],
        relevant_skills=["Playwright", "Contract testing"],
        match_score=80,
    )


@pytest.fixture
def letter(sample_profile) -> CoverLetterResult:
    result = CoverLetterResult(
        opening="I am applying for the Head of QA role.",
        skill_matches=[
            SkillMatch(skill="Automation", experience_examples=["Migrated 2,000 tests."])
        ],
        growth_opportunities=[
            GrowthOpportunity(
                area="Robotics",
                current_experience="service testing",
                desired_growth="learn hardware-in-the-loop testing.",
                why_excited="Physical systems raise the bar.",
            )
        ],
        company_alignment="Your safety focus matches mine.",
        closing="I would welcome a conversation.",
    )
    result.full_letter = assemble_full_letter(result, sample_profile.name)
    return result


class TestFormatLetterDate:
    """Tests for the letter date format."""

    def test_long_date_without_padding(self):
        assert format_letter_date(date(2026, 3, 5)) == "March 5, 2026"


class TestResumeToHtml:
    """Tests for resume HTML export."""

    def test_contains_profile_and_tailored_content(
        self, sample_profile, tailored, tailoring_config
    ):
        html = resume_to_html(sample_profile, tailored, config=tailoring_config)

        assert "<h1>Jordan Reyes</h1>" in html
        assert "jordan@example.com | 555-010-2000 | Austin, TX" in html
        assert "LinkedIn: https://linkedin.com/in/jordanreyes" in html
        assert "Playwright • Contract testing" in html
        for position in sample_profile.work_history:
            assert position.role in html
            assert position.achievements[0] in html
        assert "@page" in html

    def test_text_is_escaped(self, sample_profile, tailored, tailoring_config):
        html = resume_to_html(sample_profile, tailored, config=tailoring_config)
        assert "&lt;automation&gt; teams &amp; platforms" in html

    def test_experiences_follow_result_order(
        self, sample_profile, tailored, tailoring_config
    ):
        html = resume_to_html(sample_profile, tailored, config=tailoring_config)
        offsets = [html.index(e.company) for e in tailored.selected_experiences]
        assert offsets == sorted(offsets)

    def test_skills_section_omitted_when_empty(
        self, sample_profile, tailored, tailoring_config
    ):
        html = resume_to_html(
            sample_profile,
            tailored.model_copy(update={"relevant_skills": []}),
            config=tailoring_config,
        )
        assert "<h2>Skills</h2>" not in html

    def test_custom_template_dir_overrides_package_templates(
        self, tmp_path, sample_profile, tailored
    ):
        (tmp_path / "resume.html").write_text(
            "<p>{{ name }} / {{ experiences | length }}</p>", encoding="utf-8"
        )
        config = TailoringConfig(_env_file=None, template_dir=tmp_path)

        html = resume_to_html(sample_profile, tailored, config=config)

        assert html == "<p>Jordan Reyes / 3</p>"


class TestCoverLetterExport:
    """Tests for cover letter HTML and text export."""

    def test_html_sections(self, sample_profile, letter, tailoring_config):
        html = cover_letter_to_html(
            letter, sample_profile, letter_date=date(2026, 10, 19), config=tailoring_config
        )

        assert "October 19, 2026" in html
        assert "Dear Hiring Manager," in html
        assert "<strong>Automation:</strong> Migrated 2,000 tests." in html
        assert (
            "Building on my experience with service testing, "
            "I'm eager to learn hardware-in-the-loop testing." in html
        )
        assert "Your safety focus matches mine." in html
        assert "Sincerely," in html
        assert html.index("I am applying") < html.index("I would welcome")

    def test_text_is_full_letter_with_one_trailing_newline(self, letter):
        text = cover_letter_to_text(letter)
        assert text == letter.full_letter + "\n"
        assert cover_letter_to_text(letter.model_copy(update={"full_letter": "Hi\n\n"})) == (
            "Hi\n"
        )
