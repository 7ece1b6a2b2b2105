"""Document renderer using WeasyPrint.

Writes exported HTML/text to disk and prints letter-sized PDFs next to it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path

from resume_tailor.profile import SimpleProfile
from resume_tailor.tailoring.config import TailoringConfig, get_tailoring_config
from resume_tailor.tailoring.exporters import (
    cover_letter_to_html,
    cover_letter_to_text,
    resume_to_html,
)
from resume_tailor.tailoring.models import CoverLetterResult, TailoredResult

logger = logging.getLogger(__name__)


@dataclass
class RenderResult:
    """Result of a rendering operation.

    ``file_path`` is the HTML document; it is kept even when PDF printing fails.
    """

    success: bool
    file_path: str | None = None
    pdf_path: str | None = None
    text_path: str | None = None
    error: str | None = None
    rendered_at: datetime = field(default_factory=datetime.now)


def output_stem(output_path: Path | str) -> Path:
    """Output path without its extension (``generated/resume.html`` -> ``generated/resume``)."""
    path = Path(output_path)
    return path.with_suffix("") if path.suffix else path


class DocumentRenderer:
    """Writes resumes and cover letters as HTML, PDF and text files."""

    def __init__(self, config: TailoringConfig | None = None):
        """Initialize the renderer.

        Args:
            config: Optional TailoringConfig. Uses global config if not provided.
        """
        self.config = config or get_tailoring_config()

    def resume_paths(self, output_path: Path | str) -> tuple[Path, Path]:
        """HTML and PDF paths for a resume."""
        stem = output_stem(output_path)
        return stem.with_name(f"{stem.name}.html"), stem.with_name(f"{stem.name}.pdf")

    def cover_letter_paths(self, output_path: Path | str) -> tuple[Path, Path, Path]:
        """HTML, PDF and text paths for a cover letter."""
        stem = output_stem(output_path)
        base = f"{stem.name}{self.config.cover_letter_suffix}"
        return (
            stem.with_name(f"{base}.html"),
            stem.with_name(f"{base}.pdf"),
            stem.with_name(f"{base}.txt"),
        )

    def _write_pdf(self, html_content: str, pdf_path: Path) -> None:
        """Print HTML to PDF (imported lazily: WeasyPrint needs system libraries)."""
        from weasyprint import HTML

        HTML(string=html_content, base_url=str(self.config.template_dir)).write_pdf(
            str(pdf_path)
        )

    def _print_pdf(self, html_content: str, pdf_path: Path) -> str | None:
        """Print a PDF; returns an error message instead of raising."""
        try:
            self._write_pdf(html_content, pdf_path)
        except Exception as e:
            logger.error(f"Failed to render PDF {pdf_path}: {e}")
            return str(e)
        logger.info(f"Rendered PDF to {pdf_path}")
        return None

    def render_resume(
        self,
        profile: SimpleProfile,
        tailored: TailoredResult,
        output_path: Path | str,
    ) -> RenderResult:
        """Write the resume as ``<stem>.html`` and ``<stem>.pdf``.

        Args:
            profile: Candidate profile.
            tailored: Tailored resume content.
            output_path: Target path; its extension is replaced.

        Returns:
            RenderResult with file paths or error.
        """
        html_path, pdf_path = self.resume_paths(output_path)
        try:
            html_content = resume_to_html(profile, tailored, config=self.config)
            html_path.parent.mkdir(parents=True, exist_ok=True)
            html_path.write_text(html_content, encoding="utf-8")
        except Exception as e:
            logger.error(f"Failed to render resume: {e}")
            return RenderResult(success=False, error=str(e))

        logger.info(f"Wrote resume HTML to {html_path}")
        if not self.config.generate_pdf:
            return RenderResult(success=True, file_path=str(html_path))

        error = self._print_pdf(html_content, pdf_path)
        return RenderResult(
            success=error is None,
            file_path=str(html_path),
            pdf_path=None if error else str(pdf_path),
            error=error,
        )

    def render_cover_letter(
        self,
        profile: SimpleProfile,
        result: CoverLetterResult,
        output_path: Path | str,
        *,
        letter_date: date | None = None,
    ) -> RenderResult:
        """Write the cover letter as ``<stem>_cover_letter.html/.pdf/.txt``.

        Args:
            profile: Candidate profile.
            result: Cover letter content.
            output_path: Resume output path the cover letter files are named after.
            letter_date: Date printed on the letter (defaults to today).

        Returns:
            RenderResult with file paths or error.
        """
        html_path, pdf_path, text_path = self.cover_letter_paths(output_path)
        try:
            html_content = cover_letter_to_html(
                result, profile, letter_date=letter_date, config=self.config
            )
            html_path.parent.mkdir(parents=True, exist_ok=True)
            html_path.write_text(html_content, encoding="utf-8")
            text_path.write_text(cover_letter_to_text(result), encoding="utf-8")
        except Exception as e:
            logger.error(f"Failed to render cover letter: {e}")
            return RenderResult(success=False, error=str(e))

        logger.info(f"Wrote cover letter to {html_path} and {text_path}")
        if not self.config.generate_pdf:
            return RenderResult(
                success=True, file_path=str(html_path), text_path=str(text_path)
            )

        error = self._print_pdf(html_content, pdf_path)
        return RenderResult(
            success=error is None,
            file_path=str(html_path),
            pdf_path=None if error else str(pdf_path),
            text_path=str(text_path),
            error=error,
        )
