"""Pydantic models for analysis output and the completed-suggestions ledger."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from resume_optimizer.models.resume import ResumeModel


class Section(str, Enum):
    PERSONAL_INFO = "personalInfo"
    WORK_EXPERIENCE = "workExperience"
    SKILLS = "skills"
    PROJECTS = "projects"
    EDUCATION = "education"


class SuggestionType(str, Enum):
    HIGHLIGHT = "highlight"
    MODIFY = "modify"
    ADD = "add"
    REORDER = "reorder"
    REMOVE = "remove"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ResumeSuggestion(ResumeModel):
    section: Section
    type: SuggestionType
    priority: Priority = Priority.MEDIUM
    title: str
    description: str = ""
    current_content: str | None = None
    suggested_content: str | None = None
    item_id: str | None = None

    @field_validator("item_id", mode="before")
    @classmethod
    def _coerce_item_id(cls, value):
        # Models sometimes emit numeric ids
        if isinstance(value, int):
            return str(value)
        return value

    @property
    def key(self) -> str:
        return f"{self.section.value}-{self.type.value}-{self.title}"

    def mentions(self, *words: str) -> bool:
        """True if the title or description mentions any of the words."""
        text = f"{self.title} {self.description}".lower()
        return any(word in text for word in words)


class CompletedSuggestion(ResumeSuggestion):
    completed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class TokenUsage(BaseModel):
    """Token accounting from the model call (snake_case keys, as the call reports them)."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class ResumeAnalysis(ResumeModel):
    overall_score: int
    key_requirements: list[str] = Field(default_factory=list)
    matching_strengths: list[str] = Field(default_factory=list)
    gaps: list[str] = Field(default_factory=list)
    suggestions: list[ResumeSuggestion] = Field(default_factory=list)
    summary: str = ""
    usage: TokenUsage | None = None

    @field_validator("overall_score", mode="before")
    @classmethod
    def _clamp_score(cls, value):
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return max(0, min(100, round(value)))
        return value

    def without(self, suggestion: ResumeSuggestion) -> ResumeAnalysis:
        """Return a copy with one occurrence of the suggestion removed."""
        remaining = list(self.suggestions)
        for index, item in enumerate(remaining):
            if item is suggestion:
                del remaining[index]
                break
        else:
            if suggestion in remaining:
                remaining.remove(suggestion)
        return self.model_copy(update={"suggestions": remaining})

    def by_priority(self, priority: Priority) -> list[ResumeSuggestion]:
        return [s for s in self.suggestions if s.priority == priority]
