"""Job posting loading from local files or public URLs."""

from __future__ import annotations

import html
import logging
import re
from pathlib import Path

import httpx

logger = logging.getLogger(__name__)

# Anything shorter is a bot wall or a JS-rendered shell, not a posting
MIN_POSTING_CHARS = 200
FETCH_TIMEOUT_SECONDS = 30.0

_HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; resume-tailor/0.1)",
    "Accept": "text/html,application/xhtml+xml,text/plain",
    "Accept-Language": "en-US,en;q=0.9",
}

_BLOCK_TAGS = ("br", "p", "div", "li", "tr", "h1", "h2", "h3", "h4", "h5", "h6")


class JobPostingError(Exception):
    """Raised when a job posting cannot be loaded or is not usable."""


def html_to_text(raw: str) -> str:
    """Strip HTML down to readable plain text.

    Removes style/script/noscript blocks with their content, turns block
    elements into line breaks, drops remaining tags, decodes entities and
    collapses whitespace.
    """
    if not raw or not raw.strip():
        return ""

    text = raw
    for tag in ("script", "style", "noscript"):
        text = re.sub(rf"<{tag}[^>]*>[\s\S]*?</{tag}\s*>", " ", text, flags=re.IGNORECASE)
    text = re.sub(r"<!--[\s\S]*?-->", " ", text)

    for tag in _BLOCK_TAGS:
        text = re.sub(rf"</?{tag}\b[^>]*>", "\n", text, flags=re.IGNORECASE)

    text = re.sub(r"<[^>]+>", " ", text)
    text = html.unescape(text).replace("\xa0", " ")

    text = re.sub(r"[ \t\r\f\v]+", " ", text)
    text = re.sub(r" ?\n ?", "\n", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def fetch_job_posting(
    url: str,
    *,
    client: httpx.Client | None = None,
    min_chars: int = MIN_POSTING_CHARS,
    timeout: float = FETCH_TIMEOUT_SECONDS,
) -> str:
    """Fetch a public job posting and return its plain text.

    Args:
        url: http(s) URL of the posting.
        client: Optional httpx client; owned by the caller.
        min_chars: Minimum length of the stripped text.
        timeout: Request timeout in seconds.

    Returns:
        The posting as plain text.

    Raises:
        JobPostingError: On HTTP/transport errors or implausibly short content.
    """
    logger.info(f"Fetching job posting from {url}")
    try:
        if client is not None:
            response = client.get(url, headers=_HEADERS, timeout=timeout)
        else:
            with httpx.Client(
                follow_redirects=True, timeout=timeout, headers=_HEADERS
            ) as own_client:
                response = own_client.get(url)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise JobPostingError(
            f"HTTP {e.response.status_code} fetching job posting: {url}"
        ) from e
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise JobPostingError(f"Failed to fetch job posting {url}: {e}") from e

    content_type = response.headers.get("content-type", "")
    body = response.text
    text = body.strip() if content_type.startswith("text/plain") else html_to_text(body)

    if len(text) < min_chars:
        raise JobPostingError(
            f"Job posting at {url} has only {len(text)} characters of text "
            f"(minimum {min_chars}). The page is probably JavaScript-rendered or "
            "blocks automated access; save the posting to a file and use --job-file."
        )

    logger.debug(f"Fetched {len(text)} characters of posting text")
    return text


def load_job_posting(
    source: str | Path,
    *,
    client: httpx.Client | None = None,
    min_chars: int = MIN_POSTING_CHARS,
) -> str:
    """Load a job posting from a file path or an http(s) URL.

    Local files are used as-is (HTML files are stripped to text).

    Raises:
        JobPostingError: If the file is missing/empty or the fetch fails.
    """
    if isinstance(source, str) and re.match(r"^https?://", source, re.IGNORECASE):
        return fetch_job_posting(source, client=client, min_chars=min_chars)

    path = Path(source)
    if not path.is_file():
        raise JobPostingError(f"Job posting file not found: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise JobPostingError(f"Could not read job posting {path}: {e}") from e

    if path.suffix.lower() in {".html", ".htm"}:
        text = html_to_text(text)

    if not text.strip():
        raise JobPostingError(f"Job posting file is empty: {path}")
    return text
