"""LLM Validator.

Fact-checks a tailored resume against the original profile with a second,
independently prompted LLM call, and normalizes the model's judgment into a
ValidationVerdict.

An unparseable verdict yields ``is_valid=True`` with confidence 50 and a
warning; it never blocks the run.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from resume_tailor.llm import ChatGateway, OllamaGateway
from resume_tailor.profile import SimpleProfile, format_work_history
from resume_tailor.prompts import VALIDATION_ID, PromptLibrary
from resume_tailor.tailoring.models import TailoredResult, ValidationVerdict, clamp_int
from resume_tailor.utils.json_extract import JSONExtractionError, parse_json_object

logger = logging.getLogger(__name__)

PARSE_FAILURE_WARNING = "Failed to parse validation response"
DEFAULT_CONFIDENCE = 50

_TEXT_KEYS = ("issue", "description", "message", "warning", "detail", "text")
_CONTEXT_KEYS = ("company", "role")
_NO_ISSUE = re.compile(
    r"^\s*(?:no\s+(?:issues?|problems?|fabrications?)(?:\s+(?:found|detected|identified))?"
    r"|none|n/?a)\s*[.!]?\s*$",
    re.IGNORECASE,
)


def render_finding(item: Any) -> str | None:
    """Render one issue/warning entry as a readable string.

    Objects carrying a text field become ``"<company> - <role>: <text>"``
    (context parts only when present); other objects fall back to compact JSON.
    """
    if item is None:
        return None
    if isinstance(item, str):
        return item.strip() or None
    if isinstance(item, dict):
        text = next(
            (
                str(item[key]).strip()
                for key in _TEXT_KEYS
                if isinstance(item.get(key), (str, int, float)) and str(item[key]).strip()
            ),
            None,
        )
        if text is None:
            return json.dumps(item, ensure_ascii=False, separators=(",", ":"))
        context = " - ".join(
            str(item[key]).strip()
            for key in _CONTEXT_KEYS
            if isinstance(item.get(key), str) and item[key].strip()
        )
        return f"{context}: {text}" if context else text
    return json.dumps(item, ensure_ascii=False, separators=(",", ":"))


def normalize_findings(value: Any) -> list[str]:
    """Normalize an issues/warnings field, dropping "no issues found" filler."""
    if isinstance(value, (str, dict)):
        value = [value]
    if not isinstance(value, list):
        return []

    findings = []
    for item in value:
        text = render_finding(item)
        if text and not _NO_ISSUE.match(text):
            findings.append(text)
    return findings


def _explicitly_false(value: Any) -> bool:
    if value is False:
        return True
    return isinstance(value, str) and value.strip().lower() == "false"


class LLMValidator:
    """Second-opinion fact checker for tailored resumes."""

    def __init__(
        self,
        gateway: ChatGateway | None = None,
        prompts: PromptLibrary | None = None,
    ):
        self.gateway = gateway or OllamaGateway.for_task("validate")
        self.prompts = prompts or PromptLibrary()

    def validate(self, profile: SimpleProfile, tailored: TailoredResult) -> ValidationVerdict:
        """Check a tailored result against the original profile.

        Raises:
            PromptTemplateError: If the validation template is not registered.
            LLMError: If the backend call fails.
        """
        tailored_experiences = json.dumps(
            [experience.to_dict() for experience in tailored.selected_experiences],
            indent=2,
            ensure_ascii=False,
        )
        filled = self.prompts.fill_required(
            VALIDATION_ID,
            {
                "original_work_history": format_work_history(profile),
                "tailored_experiences": tailored_experiences,
            },
        )

        response = self.gateway.chat(filled.to_messages())
        verdict = self.parse_response(response)

        if verdict.is_valid:
            logger.info(f"Validation passed ({verdict.confidence}% confident)")
        else:
            logger.warning(f"Validation failed with {len(verdict.issues)} issue(s)")
        return verdict

    def parse_response(self, response: str) -> ValidationVerdict:
        """Turn raw validator output into a verdict; never raises."""
        try:
            data = parse_json_object(response)
        except JSONExtractionError as e:
            logger.warning(f"{PARSE_FAILURE_WARNING}: {e}")
            logger.debug(f"Raw validation response: {response}")
            return ValidationVerdict(
                is_valid=True,
                issues=[],
                warnings=[PARSE_FAILURE_WARNING],
                confidence=DEFAULT_CONFIDENCE,
            )

        is_valid_value = data.get("isValid", data.get("is_valid"))
        return ValidationVerdict(
            is_valid=not _explicitly_false(is_valid_value),
            issues=normalize_findings(data.get("issues")),
            warnings=normalize_findings(data.get("warnings")),
            confidence=clamp_int(data.get("confidence"), 0, 100, DEFAULT_CONFIDENCE),
        )
