"""Integration tests for the full tailoring pipeline.

Runs from profile and contact files on disk through job posting loading,
tailoring, validation and cover letter generation to documents on disk.
The LLM is a scripted gateway, so no Ollama server is needed.
"""

import json
from datetime import date

import pytest
import yaml

from resume_tailor.config.settings import Settings
from resume_tailor.jobs import load_job_posting
from resume_tailor.profile import ProfileAdapter
from resume_tailor.tailoring import CoverLetterOptions, DocumentRenderer, TailoringPipeline

pytestmark = pytest.mark.integration

PROFILE = {
    "title": "Quality Engineering Leader",
    "summary": "Quality engineering leader with {years}+ years of experience.",
    "linkedin": "https://linkedin.com/in/sam",
    "work_history": [
        {
            "company": "Northwind",
            "role": "Head of QA",
            "duration": "Jan 2020 - Present",
            "description": [
                {
                    "description": "Leadership",
                    "more_info": [
                        "Grew the QA team from 3 to 11 engineers",
                        "Owned release sign-off for 4 product lines",
                    ],
                }
            ],
        },
        {
            "company": "Contoso",
            "role": "Remote Test Automation Engineer",
            "duration": "06/2015 - 12/2019",
            "achievements": [
                "Built the Cypress end-to-end suite from scratch",
                "Cut flaky test rate from 12% to 2%",
                "Ran load tests for Black Friday traffic",
            ],
        },
    ],
}

CONTACT = {
    "name": "Sam Patel",
    "email": "sam@example.com",
    "phone": "555-0100",
    "location": "Denver, CO",
    "website": "https://sampatel.dev",
}

POSTING_HTML = """
<html><head><style>body { color: red; }</style><script>track();</script></head>
<body>
  <h1>QA Manager &amp; Automation Lead</h1>
  <p>Fabrikam is hiring a QA Manager to lead automation across our web and
  mobile products. You will manage a team of engineers, own release quality,
  and modernize our end-to-end test suites.</p>
  <ul><li>5+ years of QA experience</li><li>Cypress or Playwright</li>
  <li>Experience reducing flaky tests</li><li>People leadership</li></ul>
</body></html>
"""


def tailor_response() -> str:
    return json.dumps(
        {
            "matchScore": 88,
            "reasoning": "Leadership plus hands-on automation.",
            "tailoredSummary": "QA leader who pairs team building with automation depth.",
            "selectedExperiences": [
                {
                    "company": "Contoso",
                    "role": "Test Automation Engineer",
                    "selectedAchievements": [
                        "Cut flaky test rate from 12% to 2% across the suite",
                        "Built the Cypress end-to-end suite from scratch",
                    ],
                },
                {
                    "company": "Fabricated Inc",
                    "role": "VP Quality",
                    "selectedAchievements": ["Led 200 engineers"],
                },
            ],
            "relevantSkills": ["Cypress", "Flaky test reduction", "Team leadership"],
        }
    )


COVER_LETTER = json.dumps(
    {
        "opening": "I am excited to apply for the QA Manager role at Fabrikam.",
        "skillMatches": [
            {
                "skill": "Test automation",
                "experienceExamples": ["Built the Cypress end-to-end suite from scratch."],
                "relevanceRating": 9,
            },
            {
                "skill": "Leadership",
                "experienceExamples": ["Grew the QA team from 3 to 11 engineers."],
                "relevanceRating": 8,
            },
        ],
        "growthOpportunities": [
            {
                "area": "Mobile testing",
                "currentExperience": "web end-to-end testing",
                "desiredGrowth": "extend automation to native mobile apps.",
                "whyExcited": "Fabrikam ships on both platforms.",
            }
        ],
        "companyAlignment": "Fabrikam's focus on release quality matches my own.",
        "closing": "I would welcome the chance to discuss the role.",
    }
)


@pytest.fixture
def workspace(tmp_path):
    (tmp_path / "profile.yaml").write_text(yaml.safe_dump(PROFILE), encoding="utf-8")
    (tmp_path / "contact.json").write_text(json.dumps(CONTACT), encoding="utf-8")
    (tmp_path / "posting.html").write_text(POSTING_HTML, encoding="utf-8")
    return tmp_path


def test_pipeline_from_files_to_documents(workspace, make_gateway, tailoring_config):
    settings = Settings(
        _env_file=None,
        profile_path=workspace / "profile.yaml",
        contact_path=workspace / "contact.json",
        output_dir=workspace / "generated",
    )
    profile = ProfileAdapter(settings).load()
    posting = load_job_posting(workspace / "posting.html")

    assert profile.work_history[1].location == "Remote"
    assert profile.work_history[0].location == "Denver, CO"
    assert "track()" not in posting
    assert "QA Manager & Automation Lead" in posting

    gateway = make_gateway(
        tailor_response(),
        json.dumps({"isValid": True, "issues": [], "warnings": [], "confidence": 90}),
        COVER_LETTER,
    )
    pipeline = TailoringPipeline(
        tailoring_config,
        gateway=gateway,
        renderer=DocumentRenderer(config=tailoring_config),
    )

    result = pipeline.run(
        profile,
        posting,
        "QA Manager",
        "Fabrikam",
        output_path=settings.default_resume_path(),
        options=CoverLetterOptions(tone="enthusiastic", focus_areas=["leadership"]),
        letter_date=date(2026, 10, 19),
    )

    assert result.success, result.error
    experiences = result.tailored.selected_experiences
    assert [(e.company, e.role) for e in experiences] == [
        ("Northwind", "Head of QA"),
        ("Contoso", "Remote Test Automation Engineer"),
    ]
    assert experiences[0].selected_achievements == [
        "Grew the QA team from 3 to 11 engineers",
        "Owned release sign-off for 4 product lines",
    ]
    assert experiences[1].selected_achievements == [
        "Cut flaky test rate from 12% to 2%",
        "Built the Cypress end-to-end suite from scratch",
    ]

    generated = workspace / "generated"
    resume_html = (generated / "resume.html").read_text(encoding="utf-8")
    assert "Fabricated Inc" not in resume_html
    assert "Led 200 engineers" not in resume_html
    assert "Cut flaky test rate from 12% to 2%" in resume_html

    letter_text = (generated / "resume_cover_letter.txt").read_text(encoding="utf-8")
    assert letter_text.startswith("Dear Hiring Manager,")
    assert letter_text.rstrip().endswith("Sam Patel")
    assert "October 19, 2026" in (generated / "resume_cover_letter.html").read_text(
        encoding="utf-8"
    )

    # The validator saw the reconciled content, not the raw model output
    validation_prompt = gateway.calls[1][-1]["content"]
    assert "Fabricated Inc" not in validation_prompt
    assert "Northwind" in validation_prompt
