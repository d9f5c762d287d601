"""Data models for the resume suggestion engine."""

from resume_optimizer.models.analysis import (
    CompletedSuggestion,
    Priority,
    ResumeAnalysis,
    ResumeSuggestion,
    Section,
    SuggestionType,
    TokenUsage,
)
from resume_optimizer.models.resume import (
    Education,
    PersonalInfo,
    Project,
    ResumeDocument,
    SkillGroup,
    WorkExperience,
    new_item_id,
)

__all__ = [
    "CompletedSuggestion",
    "Education",
    "PersonalInfo",
    "Priority",
    "Project",
    "ResumeAnalysis",
    "ResumeDocument",
    "ResumeSuggestion",
    "Section",
    "SkillGroup",
    "SuggestionType",
    "TokenUsage",
    "WorkExperience",
    "new_item_id",
]
