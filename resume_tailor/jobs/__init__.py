"""Job posting input (local file or public URL)."""

from resume_tailor.jobs.fetcher import (
    MIN_POSTING_CHARS,
    JobPostingError,
    fetch_job_posting,
    html_to_text,
    load_job_posting,
)

__all__ = [
    "JobPostingError",
    "MIN_POSTING_CHARS",
    "fetch_job_posting",
    "html_to_text",
    "load_job_posting",
]
