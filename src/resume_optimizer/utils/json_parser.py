"""Utility to extract JSON from LLM responses."""

from __future__ import annotations

import json
import re

_OPENING_FENCE_RE = re.compile(r"\A```[\w-]*[ \t]*\n?")
_CLOSING_FENCE_RE = re.compile(r"\n?[ \t]*```\Z")


def extract_json(text: str) -> dict | list:
    """Extract JSON from LLM response, handling ```json blocks.

    Tries in order:
    1. Direct json.loads
    2. Strip a fence at the start and end of the text, then json.loads
    3. Find first '{' to last '}' and parse
    """
    text = (text or "").strip()

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    body = strip_code_fence(text)
    if body != text:
        try:
            return json.loads(body)
        except json.JSONDecodeError:
            pass

    result = _extract_braces(body)
    if result is not None:
        return result

    raise ValueError(f"Could not extract JSON from text: {text[:200]}...")


def strip_code_fence(text: str) -> str:
    """Remove an opening fence at the start and a closing fence at the end.

    Backticks elsewhere in the text are left alone. A reply cut off before
    the closing marker keeps everything after the opening line.
    """
    text = text.strip()
    if not text.startswith("```"):
        return text
    body = _OPENING_FENCE_RE.sub("", text, count=1)
    body = _CLOSING_FENCE_RE.sub("", body, count=1)
    return body.strip()


def _extract_braces(text: str) -> dict | None:
    """Try to extract JSON object from first '{' to last '}'."""
    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end != -1 and end > start:
        try:
            return json.loads(text[start : end + 1])
        except json.JSONDecodeError:
            pass
    return None
