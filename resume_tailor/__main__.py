"""Main entry point for Resume Tailor.

Usage:
    python -m resume_tailor tailor --job-file posting.txt --job-title "QA Lead" --company Acme
    python -m resume_tailor tailor --job-url https://example.com/jobs/42 --job-title X --company Y
    python -m resume_tailor check
    python -m resume_tailor prompts list
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from resume_tailor import __version__
from resume_tailor.config.settings import Settings
from resume_tailor.utils.logging import configure_logging

logger = logging.getLogger(__name__)

RULE = "─" * 55


def positive_int(value: str) -> int:
    """argparse type for strictly positive integers."""
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer: {value}")
    return number


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="resume-tailor",
        description="Resume Tailor - Fact-preserving resume and cover letter tailoring",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s tailor --job-file posting.txt --job-title "QA Lead" --company Acme
  %(prog)s tailor --job-url https://example.com/jobs/42 --job-title "QA Lead" --company Acme
  %(prog)s tailor --job-file posting.txt --job-title "QA Lead" --company Acme --no-cover-letter
  %(prog)s check
  %(prog)s prompts view cover-letter
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Override log level from settings",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Tailor
    tailor_parser = subparsers.add_parser(
        "tailor", help="Tailor the resume and write a cover letter for one job"
    )
    source_group = tailor_parser.add_mutually_exclusive_group(required=True)
    source_group.add_argument("--job-file", help="Path to a saved job posting")
    source_group.add_argument("--job-url", help="URL of a public job posting")
    tailor_parser.add_argument("--job-title", required=True, help="Target job title")
    tailor_parser.add_argument("--company", required=True, help="Target company")
    tailor_parser.add_argument(
        "--output",
        help="Resume output path (default: OUTPUT_DIR/RESUME_FILENAME)",
    )
    tailor_parser.add_argument("--profile", help="Profile file (YAML or JSON)")
    tailor_parser.add_argument("--contact", help="Contact file (JSON)")
    tailor_parser.add_argument(
        "--tone",
        choices=["professional", "enthusiastic", "conversational"],
        default="professional",
        help="Cover letter tone",
    )
    tailor_parser.add_argument(
        "--max-length",
        type=positive_int,
        default=300,
        help="Target cover letter length in words",
    )
    tailor_parser.add_argument(
        "--focus-area",
        action="append",
        dest="focus_areas",
        help="Cover letter focus area (repeatable)",
    )
    tailor_parser.add_argument(
        "--company-research",
        help="Notes about the company to weave into the cover letter",
    )
    letter_group = tailor_parser.add_mutually_exclusive_group()
    letter_group.add_argument(
        "--no-cover-letter",
        action="store_true",
        help="Skip cover letter generation",
    )
    letter_group.add_argument(
        "--cover-letter-only",
        action="store_true",
        help="Generate only the cover letter",
    )

    # Check
    subparsers.add_parser("check", help="Check that the Ollama backend is reachable")

    # Prompts
    prompts_parser = subparsers.add_parser("prompts", help="Manage prompt templates")
    prompt_actions = prompts_parser.add_subparsers(dest="action", help="Prompt actions")
    prompt_actions.add_parser("list", help="List available templates")
    view_parser = prompt_actions.add_parser("view", help="Show one template")
    view_parser.add_argument("template_id", help="Template ID")
    export_parser = prompt_actions.add_parser("export", help="Export templates as JSON")
    export_parser.add_argument(
        "file", nargs="?", help="Output file (default: print to stdout)"
    )
    import_parser = prompt_actions.add_parser(
        "import", help="Import templates and save them as custom prompts"
    )
    import_parser.add_argument("file", help="JSON file produced by 'prompts export'")

    return parser


def load_prompt_library(settings: Settings):
    """Built-in templates with the saved custom templates layered on top."""
    from resume_tailor.prompts import PromptLibrary

    library = PromptLibrary()
    prompts_path = settings.prompts_path
    if prompts_path.is_file():
        report = library.import_templates(prompts_path.read_text(encoding="utf-8"))
        for error in report.errors:
            logger.warning(f"Ignoring custom prompt in {prompts_path}: {error}")
        if report.imported:
            logger.info(f"Loaded custom prompts from {prompts_path}: {report.imported}")
    return library


def save_custom_prompts(library, prompts_path: Path) -> int:
    """Write the templates that differ from the built-in set. Returns how many."""
    from resume_tailor.prompts import PromptLibrary, default_templates

    defaults = {template.id: template for template in default_templates()}
    custom = PromptLibrary(
        template
        for template in library.list_templates()
        if defaults.get(template.id) != template
    )
    prompts_path.parent.mkdir(parents=True, exist_ok=True)
    prompts_path.write_text(custom.export_templates() + "\n", encoding="utf-8")
    return len(custom.list_templates())


def run_tailor(parsed: argparse.Namespace, settings: Settings) -> int:
    """Run the tailoring pipeline for one job."""
    from resume_tailor.jobs import JobPostingError, load_job_posting
    from resume_tailor.llm import OllamaGateway
    from resume_tailor.profile import ProfileAdapter, ProfileConfigError
    from resume_tailor.tailoring import CoverLetterOptions, TailoringPipeline

    try:
        profile = ProfileAdapter(settings).load(parsed.profile, parsed.contact)
    except (ProfileConfigError, FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        job_posting = load_job_posting(parsed.job_file or parsed.job_url)
    except JobPostingError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    probe = OllamaGateway()
    if not probe.available():
        print(
            f"Error: Ollama is not reachable at {probe.base_url}. "
            "Start it with 'ollama serve' or set LLM_BASE_URL.",
            file=sys.stderr,
        )
        return 1

    options = CoverLetterOptions(
        tone=parsed.tone,
        max_length=parsed.max_length,
        company_research=parsed.company_research,
    )
    if parsed.focus_areas:
        options = options.model_copy(update={"focus_areas": parsed.focus_areas})

    output_path = Path(parsed.output) if parsed.output else settings.default_resume_path()

    print(f"Tailoring for {parsed.company} - {parsed.job_title}")
    print(f"  Candidate: {profile.name} ({profile.years_of_experience}+ years)")
    print(f"  Positions: {len(profile.work_history)}")

    pipeline = TailoringPipeline(prompts=load_prompt_library(settings))
    result = pipeline.run(
        profile,
        job_posting,
        parsed.job_title,
        parsed.company,
        output_path=output_path,
        generate_cover_letter=not parsed.no_cover_letter,
        cover_letter_only=parsed.cover_letter_only,
        options=options,
    )

    if result.tailored is not None:
        tailored = result.tailored
        print(f"\nMatch score: {tailored.match_score}/100")
        if tailored.used_fallback:
            print("  (model output could not be parsed; used the profile's top achievements)")
        print(f"Reasoning: {tailored.reasoning}")
        if tailored.relevant_skills:
            print(f"Skills: {', '.join(tailored.relevant_skills)}")

    if result.verdict is not None:
        verdict = result.verdict
        print(f"\nValidation confidence: {verdict.confidence}%")
        for issue in verdict.issues:
            print(f"  ISSUE: {issue}")
        for warning in verdict.warnings:
            print(f"  WARNING: {warning}")

    if not result.success:
        print(f"\nError: {result.error}", file=sys.stderr)
        if result.verdict is not None and not result.verdict.is_valid:
            print("No documents were written.", file=sys.stderr)
        return 1

    print("\nGenerated files:")
    for label, path in (
        ("Resume (HTML)", result.resume_html_path),
        ("Resume (PDF)", result.resume_pdf_path),
        ("Cover letter (HTML)", result.cover_letter_html_path),
        ("Cover letter (PDF)", result.cover_letter_pdf_path),
        ("Cover letter (text)", result.cover_letter_text_path),
    ):
        if path:
            print(f"  {label}: {path}")
    return 0


def run_check() -> int:
    """Probe the backend and show which task models are installed."""
    from resume_tailor.llm import OllamaGateway, get_llm_config, resolve_model

    config = get_llm_config()
    gateway = OllamaGateway(config)
    if not gateway.available():
        print(f"Ollama is NOT reachable at {gateway.base_url}", file=sys.stderr)
        print("Start it with 'ollama serve' or set LLM_BASE_URL.", file=sys.stderr)
        return 1

    print(f"Ollama is running at {gateway.base_url}")
    installed = gateway.list_models()
    print(f"\nInstalled models ({len(installed)}):")
    for name in installed:
        print(f"  - {name}")

    print("\nTask models:")
    for task, model in config.task_models.items():
        resolved = resolve_model(model, config.model_aliases)
        status = "ok" if resolved in installed else "not installed"
        print(f"  {task:<14} {resolved} ({status})")
    return 0


def run_prompts(parsed: argparse.Namespace, settings: Settings) -> int:
    """List, view, export or import prompt templates."""
    library = load_prompt_library(settings)

    if parsed.action == "list":
        templates = library.list_templates()
        print("Available prompt templates:\n")
        for template in templates:
            print(f"  {template.name} ({template.id})")
            if template.description:
                print(f"    {template.description}")
        print(f"\nTotal: {len(templates)} templates")
        return 0

    if parsed.action == "view":
        template = library.get_template(parsed.template_id)
        if template is None:
            print(f"Error: Template '{parsed.template_id}' not found", file=sys.stderr)
            return 1
        print(template.name)
        print(f"ID: {template.id}")
        print(f"Description: {template.description}")
        sections = [
            ("SYSTEM PROMPT", template.system_prompt),
            ("USER PROMPT TEMPLATE", template.user_prompt_template),
            ("OUTPUT FORMAT", template.output_format),
        ]
        if template.examples:
            sections.append(("EXAMPLES", "\n\n".join(template.examples)))
        for heading, body in sections:
            print(f"\n{heading}:\n{RULE}\n{body}\n{RULE}")
        return 0

    if parsed.action == "export":
        exported = library.export_templates()
        if not parsed.file:
            print(exported)
            return 0
        export_path = Path(parsed.file)
        export_path.parent.mkdir(parents=True, exist_ok=True)
        export_path.write_text(exported + "\n", encoding="utf-8")
        print(f"Exported {len(library.list_templates())} templates to {export_path}")
        return 0

    if parsed.action == "import":
        import_path = Path(parsed.file)
        if not import_path.is_file():
            print(f"Error: File not found: {import_path}", file=sys.stderr)
            return 1
        report = library.import_templates(import_path.read_text(encoding="utf-8"))
        for error in report.errors:
            print(f"  SKIPPED {error}", file=sys.stderr)
        if report.imported:
            saved = save_custom_prompts(library, settings.prompts_path)
            print(f"Imported: {', '.join(report.imported)}")
            print(f"Saved {saved} custom template(s) to {settings.prompts_path}")
        return 0 if report.ok else 1

    print("Error: choose one of: list, view, export, import", file=sys.stderr)
    return 1


def main(args: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        args: Command line arguments. Uses sys.argv if not provided.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    parser = create_parser()
    parsed = parser.parse_args(args)

    try:
        settings = Settings()
    except Exception as e:
        print(f"Error loading settings: {e}", file=sys.stderr)
        return 1

    configure_logging(
        level=parsed.log_level or settings.log_level, log_file=settings.log_file
    )

    if parsed.command is None:
        parser.print_help()
        return 0

    if parsed.command == "tailor":
        return run_tailor(parsed, settings)
    if parsed.command == "check":
        return run_check()
    if parsed.command == "prompts":
        return run_prompts(parsed, settings)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
