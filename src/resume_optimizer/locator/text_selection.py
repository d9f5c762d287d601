"""Locate the span of a form field's value that a suggestion refers to."""

from __future__ import annotations

import re

# Heuristic tuning parameters
ADJACENCY_WINDOW = 200
MAX_ANCHOR_WORDS = 4
FIRST_WORD_SENTENCE_LIMIT = 150
FIRST_WORD_CHUNK = 100

_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")
_SENTENCE_END_RE = re.compile(r"[.!?]\s")
_LETTER_RE = re.compile(r"[a-zA-Z]")


def find_selection(content: str, target: str) -> tuple[int, int] | None:
    """Return (start, end) offsets in ``content`` for ``target``, or None.

    Tries, in order: exact match, case-insensitive match, whitespace
    normalized match, the sentence with the most target words, and two
    significant words close to each other.
    """
    if not content or not target or not target.strip():
        return None

    for strategy in (
        _exact,
        _case_insensitive,
        _normalized,
        _containing_sentence,
        _word_adjacency,
    ):
        span = strategy(content, target)
        if span is not None:
            start, end = span
            return start, min(end, len(content))
    return None


def _exact(content: str, target: str) -> tuple[int, int] | None:
    start = content.find(target)
    if start == -1:
        return None
    return start, start + len(target)


def _case_insensitive(content: str, target: str) -> tuple[int, int] | None:
    start = content.lower().find(target.lower())
    if start == -1:
        return None
    return start, start + len(target)


def _normalized(content: str, target: str) -> tuple[int, int] | None:
    normalized, offsets = _normalize_with_offsets(content)
    needle = re.sub(r"\s+", " ", target).strip().lower()
    index = normalized.lower().find(needle)
    if index == -1:
        return None
    return offsets[index], offsets[index + len(needle) - 1] + 1


def _normalize_with_offsets(text: str) -> tuple[str, list[int]]:
    """Collapse whitespace runs to one space; map each output char to its source offset."""
    chars: list[str] = []
    offsets: list[int] = []
    in_space = False
    for index, char in enumerate(text):
        if char.isspace():
            if not in_space and chars:
                chars.append(" ")
                offsets.append(index)
            in_space = True
        else:
            chars.append(char)
            offsets.append(index)
            in_space = False
    if chars and chars[-1] == " ":
        chars.pop()
        offsets.pop()
    return "".join(chars), offsets


def _containing_sentence(content: str, target: str) -> tuple[int, int] | None:
    sentences = [s.strip() for s in _SENTENCE_SPLIT_RE.split(content) if s.strip()]
    target_words = [w for w in target.lower().split() if len(w) > 2]
    if not target_words:
        return None

    needed = min(2, len(target_words))
    best: str | None = None
    best_count = 0
    for sentence in sentences:
        lowered = sentence.lower()
        count = sum(1 for word in target_words if word in lowered)
        if count >= needed and count > best_count:
            best, best_count = sentence, count

    if best is None:
        return None
    start = content.lower().find(best.lower())
    if start == -1:
        return None
    return start, start + len(best)


def _word_adjacency(content: str, target: str) -> tuple[int, int] | None:
    words = [w for w in target.split() if len(w) > 3 and _LETTER_RE.search(w)][:MAX_ANCHOR_WORDS]
    if not words:
        return None
    lowered = content.lower()

    for first, second in zip(words, words[1:]):
        start = lowered.find(first.lower())
        if start == -1:
            continue
        window = lowered[start : min(start + ADJACENCY_WINDOW, len(content))]
        if second.lower() in window:
            end_match = _SENTENCE_END_RE.search(content, start)
            if end_match:
                return start, end_match.start() + 1
            return start, min(start + int(len(target) * 1.2), len(content))

    start = lowered.find(words[0].lower())
    if start == -1:
        return None
    end_match = _SENTENCE_END_RE.search(content, start)
    if end_match and end_match.start() - start < FIRST_WORD_SENTENCE_LIMIT:
        return start, end_match.start() + 1
    return start, min(start + FIRST_WORD_CHUNK, len(content))
