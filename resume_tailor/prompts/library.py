"""Prompt Library.

Holds the prompt templates used by each pipeline stage and fills them with
run-specific values. One library instance is built per run and injected into
every engine, so tests can swap in a custom template set.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterable, Mapping

from pydantic import ValidationError

from resume_tailor.prompts.defaults import default_templates
from resume_tailor.prompts.models import FilledPrompt, ImportReport, PromptTemplate

logger = logging.getLogger(__name__)

OUTPUT_FORMAT_KEY = "output_format"

_PLACEHOLDER = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")


class PromptTemplateError(Exception):
    """Raised when a prompt template cannot be used."""


class MissingPlaceholderError(PromptTemplateError):
    """Raised by strict fills when placeholders have no value."""

    def __init__(self, template_id: str, missing: list[str]):
        super().__init__(
            f"Template '{template_id}' has unfilled placeholders: {', '.join(missing)}"
        )
        self.template_id = template_id
        self.missing = missing


class PromptLibrary:
    """Store of named prompt templates."""

    def __init__(self, templates: Iterable[PromptTemplate] | None = None):
        """Initialize the library.

        Args:
            templates: Optional template set. Uses the built-in defaults if not provided.
        """
        self._templates: dict[str, PromptTemplate] = {}
        for template in templates if templates is not None else default_templates():
            self.add_template(template)

    def get_template(self, template_id: str) -> PromptTemplate | None:
        """Get a template by ID, or None if unknown."""
        return self._templates.get(template_id)

    def require_template(self, template_id: str) -> PromptTemplate:
        """Get a template by ID.

        Raises:
            PromptTemplateError: If the template is not registered.
        """
        template = self.get_template(template_id)
        if template is None:
            raise PromptTemplateError(f"Failed to load '{template_id}' prompt template")
        return template

    def add_template(self, template: PromptTemplate) -> None:
        """Add or replace a template."""
        self._templates[template.id] = template

    def list_templates(self) -> list[PromptTemplate]:
        """Return all templates in registration order."""
        return list(self._templates.values())

    def fill_template(
        self,
        template_id: str,
        values: Mapping[str, object],
        *,
        strict: bool = False,
    ) -> FilledPrompt | None:
        """Fill a template with run-specific values.

        Every ``{key}`` occurrence is replaced in a single pass, so text
        inserted from ``values`` is never scanned for placeholders again. The
        template's output format goes where ``{output_format}`` appears, or is
        appended when the template has no such marker.

        Args:
            template_id: ID of the template to fill.
            values: Placeholder values; non-string values are converted with str().
            strict: Raise instead of warning when placeholders are left unfilled.

        Returns:
            FilledPrompt, or None if the template ID is unknown.

        Raises:
            MissingPlaceholderError: If ``strict`` and placeholders have no value.
        """
        template = self.get_template(template_id)
        if template is None:
            return None
        return self._fill(template, values, strict=strict)

    def fill_required(
        self,
        template_id: str,
        values: Mapping[str, object],
        *,
        strict: bool = False,
    ) -> FilledPrompt:
        """Fill a template that must be registered.

        Raises:
            PromptTemplateError: If the template is not registered.
            MissingPlaceholderError: If ``strict`` and placeholders have no value.
        """
        return self._fill(self.require_template(template_id), values, strict=strict)

    def _fill(
        self, template: PromptTemplate, values: Mapping[str, object], *, strict: bool
    ) -> FilledPrompt:
        replacements = {key: str(value) for key, value in values.items()}
        has_format_marker = f"{{{OUTPUT_FORMAT_KEY}}}" in template.user_prompt_template
        replacements.setdefault(OUTPUT_FORMAT_KEY, template.output_format)

        missing: list[str] = []

        def substitute(match: re.Match[str]) -> str:
            key = match.group(1)
            if key in replacements:
                return replacements[key]
            if key not in missing:
                missing.append(key)
            return match.group(0)

        user_prompt = _PLACEHOLDER.sub(substitute, template.user_prompt_template)

        if missing:
            if strict:
                raise MissingPlaceholderError(template.id, missing)
            logger.warning(
                f"Template '{template.id}' left placeholders unfilled: {', '.join(missing)}"
            )

        if not has_format_marker and template.output_format:
            user_prompt = f"{user_prompt.rstrip()}\n\n{template.output_format}"

        return FilledPrompt(system=template.system_prompt, user=user_prompt)

    def export_templates(self) -> str:
        """Export all templates as a JSON array (camelCase keys)."""
        return json.dumps(
            [template.to_dict() for template in self._templates.values()],
            indent=2,
            ensure_ascii=False,
        )

    def import_templates(self, text: str) -> ImportReport:
        """Import templates from JSON text.

        Accepts a JSON array of templates, a single template object, or an
        object with a ``templates`` array. Never raises: malformed input is
        reported and leaves the current set unchanged, and entries that fail
        validation are skipped while valid ones are added or replaced.

        Args:
            text: JSON text, typically produced by export_templates().

        Returns:
            ImportReport listing imported IDs and per-entry errors.
        """
        report = ImportReport()

        try:
            data = json.loads(text)
        except (json.JSONDecodeError, TypeError) as e:
            report.errors.append(f"Invalid JSON: {e}")
            logger.error(f"Failed to import templates: {e}")
            return report

        if isinstance(data, dict) and isinstance(data.get("templates"), list):
            entries = data["templates"]
        elif isinstance(data, dict):
            entries = [data]
        elif isinstance(data, list):
            entries = data
        else:
            report.errors.append("Expected a JSON array of templates")
            logger.error("Failed to import templates: unexpected top-level JSON type")
            return report

        for index, entry in enumerate(entries):
            if not isinstance(entry, dict):
                report.errors.append(f"Entry {index}: expected an object")
                continue
            try:
                template = PromptTemplate.from_dict(entry)
            except ValidationError as e:
                label = entry.get("id") or f"#{index}"
                report.errors.append(
                    f"Entry {label}: {e.error_count()} validation error(s)"
                )
                logger.warning(f"Skipping invalid template {label}: {e}")
                continue
            self.add_template(template)
            report.imported.append(template.id)

        logger.info(
            f"Imported {len(report.imported)} template(s), skipped {len(report.errors)}"
        )
        return report
