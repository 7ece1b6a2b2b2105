"""JSON extraction from free-form LLM responses.

Local models frequently wrap JSON in markdown code fences or surround it with
commentary ("Here is the result: {...} Let me know..."). Every pipeline stage
parses model output through these helpers so they all tolerate the same noise.
"""

from __future__ import annotations

import json
import re
from typing import Any

_FENCE_OPEN = re.compile(r"^```[A-Za-z0-9_-]*[ \t]*\n?")
_FENCE_CLOSE = re.compile(r"\n?```\s*$")
_INNER_FENCE = re.compile(r"```[A-Za-z0-9_-]*\s*\n(.*?)\n?```", re.DOTALL)
# Reasoning models (deepseek-r1, qwen3) emit <think>...</think> before the answer
_THINK_BLOCK = re.compile(r"<think>.*?</think>", re.DOTALL | re.IGNORECASE)

_NOT_FOUND = object()


class JSONExtractionError(ValueError):
    """Raised when no parseable JSON value can be found in a response."""


def strip_code_fences(content: str) -> str:
    """Remove surrounding markdown code fences (```json ... ``` or ``` ... ```).

    Args:
        content: Raw response content.

    Returns:
        Content without the outer fence markers, stripped.
    """
    content = content.strip()

    if content.startswith("```"):
        content = _FENCE_OPEN.sub("", content, count=1)
        content = _FENCE_CLOSE.sub("", content, count=1)
        return content.strip()

    # Fenced block preceded by commentary
    match = _INNER_FENCE.search(content)
    if match:
        return match.group(1).strip()

    return content


def extract_balanced(
    text: str, open_char: str = "{", close_char: str = "}", start: int = 0
) -> str | None:
    """Return the first balanced ``open_char``...``close_char`` span in text.

    The search begins at ``start``. Brackets inside JSON string literals are
    ignored.
    """
    start = text.find(open_char, start)
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for idx in range(start, len(text)):
        ch = text[idx]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
        elif ch == open_char:
            depth += 1
        elif ch == close_char:
            depth -= 1
            if depth == 0:
                return text[start : idx + 1]
    return None


def _decode_balanced(
    text: str, open_char: str, close_char: str
) -> tuple[Any, json.JSONDecodeError | None]:
    """Decode the first balanced span that is valid JSON.

    A span that fails to decode is skipped whole and the search resumes after
    it, so a placeholder like ``{company}`` in commentary does not hide the
    payload that follows. Returns ``(_NOT_FOUND, last_error)`` when nothing
    decodes.
    """
    last_error: json.JSONDecodeError | None = None
    start = text.find(open_char)
    while start != -1:
        block = extract_balanced(text, open_char, close_char, start)
        if block is None:
            break
        try:
            # strict=False tolerates raw newlines inside string values
            return json.loads(block, strict=False), None
        except json.JSONDecodeError as e:
            last_error = e
        start = text.find(open_char, start + len(block))
    return _NOT_FOUND, last_error


def parse_json_object(content: str | None) -> dict[str, Any]:
    """Parse the first decodable JSON object found in an LLM response.

    Args:
        content: Raw response content.

    Returns:
        The decoded object.

    Raises:
        JSONExtractionError: If no JSON object can be located or decoded.
    """
    if not content or not content.strip():
        raise JSONExtractionError("Response is empty")

    cleaned = strip_code_fences(_THINK_BLOCK.sub("", content))
    parsed, error = _decode_balanced(cleaned, "{", "}")
    if parsed is _NOT_FOUND:
        if error is not None:
            raise JSONExtractionError(f"Invalid JSON in response: {error}") from error
        raise JSONExtractionError("No JSON object found in response")
    return parsed


def parse_json_value(content: str | None) -> Any:
    """Parse the first JSON object or array found in an LLM response.

    Whichever of ``{`` / ``[`` appears first in the text is tried first.

    Raises:
        JSONExtractionError: If nothing parseable is found.
    """
    if not content or not content.strip():
        raise JSONExtractionError("Response is empty")

    cleaned = strip_code_fences(_THINK_BLOCK.sub("", content))

    pairs = [("{", "}"), ("[", "]")]
    positions = {open_char: cleaned.find(open_char) for open_char, _ in pairs}
    pairs.sort(key=lambda p: positions[p[0]] if positions[p[0]] != -1 else len(cleaned))

    last_error: json.JSONDecodeError | None = None
    for open_char, close_char in pairs:
        parsed, error = _decode_balanced(cleaned, open_char, close_char)
        if parsed is not _NOT_FOUND:
            return parsed
        last_error = error or last_error

    if last_error is not None:
        raise JSONExtractionError(f"Invalid JSON in response: {last_error}") from last_error
    raise JSONExtractionError("No JSON value found in response")
