"""Suggestion Applier - deterministic, pure application of a suggestion to a resume.

``apply_suggestion`` never mutates its input: it returns a new document, or
the same document when no rule covers the suggestion.
"""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import Callable

from resume_optimizer.errors import UnsupportedSuggestion
from resume_optimizer.models.analysis import ResumeSuggestion, Section, SuggestionType
from resume_optimizer.models.resume import Project, ResumeDocument, SkillGroup, new_item_id

logger = logging.getLogger(__name__)

APPLICABLE_TYPES = frozenset({SuggestionType.MODIFY, SuggestionType.HIGHLIGHT, SuggestionType.ADD})

_BULLET_RE = re.compile(r"^\s*[-•*]\s*")

TECHNICAL_HINTS = ("technical", "programming")
TECHNICAL_CONTENT_HINTS = ("javascript", "python", "react")
TECHNICAL_CATEGORIES = ("technical", "programming", "development")
SOFT_HINTS = ("soft", "communication", "leadership")
SOFT_CATEGORIES = ("soft", "interpersonal", "communication")


def can_apply_suggestion(suggestion: ResumeSuggestion) -> bool:
    """Whether the suggestion is eligible for automatic application."""
    return (
        suggestion.type in APPLICABLE_TYPES
        and suggestion.section in _HANDLERS
        and (bool(suggestion.suggested_content) or suggestion.type is SuggestionType.HIGHLIGHT)
    )


def apply_suggestion(document: ResumeDocument, suggestion: ResumeSuggestion) -> ResumeDocument:
    """Return a new document reflecting the suggestion, or the input when unmappable."""
    handler = _HANDLERS[suggestion.section]
    try:
        return handler(document.model_copy(deep=True), suggestion)
    except UnsupportedSuggestion as exc:
        logger.info("Skipping suggestion %r: %s", suggestion.title, exc)
        return document


def parse_bullets(text: str) -> list[str]:
    """Split text into lines, strip bullet markers and whitespace, drop empty lines."""
    lines = (_BULLET_RE.sub("", line).strip() for line in text.splitlines())
    return [line for line in lines if line]


def parse_skills(text: str) -> list[str]:
    """Parse a comma list, a newline list, or a single skill."""
    if "," in text:
        skills = [part.strip() for part in text.split(",")]
    elif "\n" in text:
        skills = parse_bullets(text)
    else:
        skills = [text.strip()]
    return [skill for skill in skills if skill]


def _require_item(document: ResumeDocument, suggestion: ResumeSuggestion):
    if not suggestion.item_id:
        raise UnsupportedSuggestion(f"{suggestion.section.value} suggestion has no itemId")
    item = document.find_item(suggestion.section, suggestion.item_id)
    if item is None:
        raise UnsupportedSuggestion(
            f"No {suggestion.section.value} entry with id {suggestion.item_id!r}"
        )
    return item


def _unsupported(suggestion: ResumeSuggestion) -> UnsupportedSuggestion:
    return UnsupportedSuggestion(
        f"no rule for {suggestion.type.value} in {suggestion.section.value}"
    )


def _apply_personal_info(doc: ResumeDocument, suggestion: ResumeSuggestion) -> ResumeDocument:
    if (
        suggestion.type is SuggestionType.MODIFY
        and suggestion.suggested_content
        and suggestion.mentions("summary", "objective")
    ):
        doc.personal_info.summary = suggestion.suggested_content
        return doc
    raise _unsupported(suggestion)


def _apply_work_experience(doc: ResumeDocument, suggestion: ResumeSuggestion) -> ResumeDocument:
    if suggestion.type is SuggestionType.HIGHLIGHT:
        _require_item(doc, suggestion).visible = True
        return doc
    if suggestion.type is not SuggestionType.MODIFY or not suggestion.suggested_content:
        raise _unsupported(suggestion)

    experience = _require_item(doc, suggestion)
    target = _work_experience_field(suggestion)
    if target == "description":
        experience.description = suggestion.suggested_content
    elif target == "highlights":
        highlights = parse_bullets(suggestion.suggested_content)
        if not highlights:
            raise UnsupportedSuggestion("suggested highlights are empty")
        experience.highlights = highlights
    else:
        raise UnsupportedSuggestion("cannot tell which work experience field to modify")
    return doc


def _work_experience_field(suggestion: ResumeSuggestion) -> str | None:
    # Title first, then description
    for text in (suggestion.title.lower(), suggestion.description.lower()):
        if "description" in text:
            return "description"
        if "highlight" in text or "bullet" in text:
            return "highlights"
    return None


def _apply_skills(doc: ResumeDocument, suggestion: ResumeSuggestion) -> ResumeDocument:
    if suggestion.type is SuggestionType.HIGHLIGHT:
        _require_item(doc, suggestion).visible = True
        return doc
    if suggestion.type is not SuggestionType.ADD or not suggestion.suggested_content:
        raise _unsupported(suggestion)

    group = _target_skill_group(doc, suggestion)
    existing = {skill.lower() for skill in group.skills}
    to_add = []
    for skill in parse_skills(suggestion.suggested_content):
        if skill.lower() not in existing:
            existing.add(skill.lower())
            to_add.append(skill)

    if not to_add:
        raise UnsupportedSuggestion("all suggested skills are already listed")
    if not any(g is group for g in doc.skills):
        doc.skills.append(group)
    group.skills.extend(to_add)
    return doc


def _target_skill_group(doc: ResumeDocument, suggestion: ResumeSuggestion) -> SkillGroup:
    """Pick the category for an added skill; the returned group may be new and unattached."""
    named = doc.find_item(Section.SKILLS, suggestion.item_id)
    if named is not None:
        return named

    title = suggestion.title.lower()
    content = (suggestion.suggested_content or "").lower()
    if any(h in title for h in TECHNICAL_HINTS) or any(h in content for h in TECHNICAL_CONTENT_HINTS):
        wanted = TECHNICAL_CATEGORIES
    elif any(h in title for h in SOFT_HINTS):
        wanted = SOFT_CATEGORIES
    else:
        wanted = TECHNICAL_HINTS

    for group in doc.skills:
        if any(w in group.category.lower() for w in wanted):
            return group

    # Label matches `wanted` so a repeat lookup finds it
    label = "Soft Skills" if wanted is SOFT_CATEGORIES else "Technical Skills"
    return SkillGroup(id=new_item_id("skill"), category=label, skills=[], visible=True)


def _apply_projects(doc: ResumeDocument, suggestion: ResumeSuggestion) -> ResumeDocument:
    if suggestion.type is SuggestionType.ADD and suggestion.suggested_content:
        doc.projects.append(
            Project(
                id=new_item_id("project"),
                name=suggestion.title or "New Project",
                description=suggestion.suggested_content,
                technologies=[],
                start_date=str(date.today().year),
                url="",
            )
        )
        return doc
    if suggestion.type is SuggestionType.HIGHLIGHT:
        _require_item(doc, suggestion).visible = True
        return doc
    if (
        suggestion.type is SuggestionType.MODIFY
        and suggestion.suggested_content
        and suggestion.mentions("description")
    ):
        _require_item(doc, suggestion).description = suggestion.suggested_content
        return doc
    raise _unsupported(suggestion)


def _apply_education(doc: ResumeDocument, suggestion: ResumeSuggestion) -> ResumeDocument:
    if suggestion.type is SuggestionType.HIGHLIGHT:
        _require_item(doc, suggestion).visible = True
        return doc
    raise _unsupported(suggestion)


_HANDLERS: dict[Section, Callable[[ResumeDocument, ResumeSuggestion], ResumeDocument]] = {
    Section.PERSONAL_INFO: _apply_personal_info,
    Section.WORK_EXPERIENCE: _apply_work_experience,
    Section.SKILLS: _apply_skills,
    Section.PROJECTS: _apply_projects,
    Section.EDUCATION: _apply_education,
}

_missing = set(Section) - set(_HANDLERS)
if _missing:
    raise RuntimeError(f"No suggestion handler for sections: {sorted(s.value for s in _missing)}")
