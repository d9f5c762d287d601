"""Pydantic models for the structured resume document."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

if TYPE_CHECKING:
    from resume_optimizer.models.analysis import Section

# Collections addressed by item identifier, keyed by the JSON section name.
LIST_SECTIONS: dict[str, str] = {
    "workExperience": "work_experience",
    "education": "education",
    "skills": "skills",
    "projects": "projects",
}


def new_item_id(prefix: str = "item") -> str:
    """Return a fresh identifier for a list entry. Identifiers are never reused."""
    return f"{prefix}_{uuid.uuid4().hex}"


class ResumeModel(BaseModel):
    """Base for resume models: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PersonalInfo(ResumeModel):
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    website: str | None = None
    linkedin: str | None = None
    github: str | None = None
    summary: str = ""


class WorkExperience(ResumeModel):
    id: str = Field(default_factory=lambda: new_item_id("experience"))
    company: str = ""
    position: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    is_current_role: bool = False
    description: str = ""
    highlights: list[str] = Field(default_factory=list)
    visible: bool = True


class Education(ResumeModel):
    id: str = Field(default_factory=lambda: new_item_id("education"))
    institution: str = ""
    degree: str = ""
    field: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    gpa: str | None = None
    honors: str | None = None
    visible: bool = True


class SkillGroup(ResumeModel):
    id: str = Field(default_factory=lambda: new_item_id("skill"))
    category: str = ""
    skills: list[str] = Field(default_factory=list)
    visible: bool = True


class Project(ResumeModel):
    id: str = Field(default_factory=lambda: new_item_id("project"))
    name: str = ""
    description: str = ""
    technologies: list[str] = Field(default_factory=list)
    start_date: str = ""
    end_date: str | None = None
    url: str | None = None
    visible: bool = True


class ResumeDocument(ResumeModel):
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    work_experience: list[WorkExperience] = Field(default_factory=list)
    education: list[Education] = Field(default_factory=list)
    skills: list[SkillGroup] = Field(default_factory=list)
    projects: list[Project] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_unique_ids(self) -> ResumeDocument:
        for section, attr in LIST_SECTIONS.items():
            ids = [item.id for item in getattr(self, attr)]
            if len(ids) != len(set(ids)):
                raise ValueError(f"Duplicate item id in {section}")
        return self

    def items(self, section: Section | str) -> list:
        """Return the entry list for a list section (workExperience, skills, ...)."""
        attr = LIST_SECTIONS.get(str(getattr(section, "value", section)))
        if attr is None:
            raise KeyError(f"{section} is not a list section")
        return getattr(self, attr)

    def find_item(self, section: Section | str, item_id: str | None):
        """Resolve an entry by identifier, or None when absent."""
        if not item_id:
            return None
        for item in self.items(section):
            if item.id == item_id:
                return item
        return None

    def move_item(self, section: Section | str, item_id: str, new_index: int) -> ResumeDocument:
        """Return a copy with the entry moved to new_index. Identifiers are untouched."""
        doc = self.model_copy(deep=True)
        entries = doc.items(section)
        for index, item in enumerate(entries):
            if item.id == item_id:
                entries.insert(max(0, min(new_index, len(entries) - 1)), entries.pop(index))
                return doc
        raise KeyError(f"No item {item_id!r} in {section}")

    def to_json(self, indent: int | None = 2) -> str:
        return self.model_dump_json(by_alias=True, indent=indent)
