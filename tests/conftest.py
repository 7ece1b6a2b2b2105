"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import os
from collections.abc import Callable

# Keep litellm on its bundled model cost map during tests: its import-time
# remote fetch (and background retry thread) can deadlock imports offline.
os.environ.setdefault("LITELLM_LOCAL_MODEL_COST_MAP", "True")

import pytest

from resume_tailor.config.settings import reset_settings
from resume_tailor.llm.config import reset_llm_config
from resume_tailor.profile import SimplePosition, SimpleProfile
from resume_tailor.tailoring.config import TailoringConfig, reset_tailoring_config
from resume_tailor.utils.logging import reset_logging


class FakeGateway:
    """Scripted chat gateway: returns queued responses in order."""

    def __init__(self, *responses: str | Exception, is_available: bool = True):
        self.responses = list(responses)
        self.is_available = is_available
        self.calls: list[list[dict[str, str]]] = []

    def available(self) -> bool:
        return self.is_available

    def chat(self, messages: list[dict[str, str]]) -> str:
        self.calls.append(messages)
        if not self.responses:
            raise AssertionError("FakeGateway ran out of scripted responses")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def last_user_prompt(self) -> str:
        return self.calls[-1][-1]["content"]


@pytest.fixture(autouse=True)
def reset_singletons():
    """Every test starts from fresh configuration and logging state."""
    yield
    reset_settings()
    reset_llm_config()
    reset_tailoring_config()
    reset_logging()


@pytest.fixture
def make_gateway() -> Callable[..., FakeGateway]:
    """Factory for scripted gateways."""
    return FakeGateway


@pytest.fixture
def tailoring_config() -> TailoringConfig:
    """Tailoring config with PDF output disabled and no .env lookup."""
    return TailoringConfig(_env_file=None, generate_pdf=False)


@pytest.fixture
def sample_profile() -> SimpleProfile:
    """Three-position profile used across the tailoring tests."""
    return SimpleProfile(
        name="Jordan Reyes",
        email="jordan@example.com",
        phone="555-010-2000",
        location="Austin, TX",
        website="https://jordanreyes.dev",
        linkedin="https://linkedin.com/in/jordanreyes",
        github="https://github.com/jordanreyes",
        summary="Quality engineering leader with 12+ years of experience.",
        years_of_experience=12,
        work_history=[
            SimplePosition(
                company="Acme Health",
                role="Director of Quality Engineering",
                duration="Mar 2022 - Present",
                location="Austin, TX",
                achievements=[
                    "Built a 12-person QA organization across three product lines",
                    "Introduced risk-based release gates that cut escaped defects by 40%",
                    "Led migration of 2,000 UI tests from Selenium to Playwright",
                ],
            ),
            SimplePosition(
                company="Beta Logistics",
                role="Senior SDET",
                duration="Jun 2017 - Feb 2022",
                location="Remote",
                achievements=[
                    "Designed a contract-testing suite covering 30 internal services",
                    "Reduced CI pipeline time from 45 to 12 minutes through test sharding",
                    "Mentored five engineers into automation roles",
                ],
            ),
            SimplePosition(
                company="Gamma Systems",
                role="QA Engineer",
                duration="Jan 2014 - May 2017",
                location="Dallas, TX",
                achievements=[
                    "Automated regression testing for the billing platform",
                    "Wrote the team's first performance test plan",
                ],
            ),
        ],
    )


@pytest.fixture
def job_posting() -> str:
    """A plain-text job posting long enough to pass the loader's minimum."""
    return (
        "Head of QA at Delta Robotics\n\n"
        "We are looking for a quality leader to build our test automation "
        "strategy. You will grow a team of SDETs, own release quality and "
        "partner with engineering on CI/CD. Requirements: 8+ years in QA, "
        "experience with Playwright or Selenium, contract testing, and "
        "mentoring engineers. Nice to have: robotics or embedded experience."
    )
