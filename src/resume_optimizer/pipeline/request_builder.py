"""Analysis Request Builder - turns a resume and job description into a prompt pair."""

from __future__ import annotations

from dataclasses import dataclass

from resume_optimizer.errors import EmptyJobDescription
from resume_optimizer.models.analysis import CompletedSuggestion, ResumeSuggestion
from resume_optimizer.models.resume import ResumeDocument

SYSTEM_PROMPT = """\
You are an expert resume reviewer and ATS (applicant tracking system) specialist.
You compare a candidate's structured resume against a job description, score the
match, and propose concrete, individually actionable edits.

Respond ONLY with a JSON object in exactly this shape:
{
  "overallScore": 0,
  "keyRequirements": ["requirement from the job description"],
  "matchingStrengths": ["strength the resume already demonstrates"],
  "gaps": ["requirement the resume does not cover"],
  "summary": "two or three sentence overview of the fit",
  "suggestions": [
    {
      "section": "personalInfo | workExperience | skills | projects | education",
      "type": "highlight | modify | add | reorder | remove",
      "priority": "high | medium | low",
      "title": "short imperative title",
      "description": "why this change improves the match",
      "currentContent": "exact existing text being changed (modify/remove)",
      "suggestedContent": "replacement or new text (modify/add)",
      "itemId": "id of the resume entry this applies to"
    }
  ]
}

Field types: overallScore is an integer 0-100; keyRequirements, matchingStrengths
and gaps are arrays of strings; summary is a string; suggestions is an array of
objects. currentContent, suggestedContent and itemId may be omitted when they do
not apply. Every id you reference MUST be copied from the resume JSON; never
refer to entries by position.

SCORING RUBRIC (weights sum to 100%):
- Skills match: 30%
- Experience relevance: 25%
- Domain/industry match: 15%
- Education: 10%
- Keyword density: 10%
- Responsibilities alignment: 10%

Score bands:
- 90-100: exceptional match, ready to submit
- 75-89: strong match, minor refinements
- 60-74: good match, several gaps to address
- 50-59: fair match, significant rework needed
- below 50: poor match for this role

SECTION RULES:
- personalInfo: use "modify" with a title that mentions "summary" or "objective"
  when rewriting the professional summary; suggestedContent is the full new summary.
- workExperience: always set itemId. To rewrite the role description use a title
  containing "description". To rewrite achievements use a title containing
  "highlight" or "bullet" and put one bullet per line in suggestedContent, each
  starting with "- ".
- skills: each suggestion addresses EXACTLY ONE skill. Never bundle several skills
  into one suggestion. Use "add" to add a skill (suggestedContent is the single
  skill name), "remove" to drop one (currentContent is the single skill name) and
  "modify" to rename one (currentContent is the old name, suggestedContent the new
  one). Set itemId to the id of the skill category the skill belongs to.
- projects: use "add" for a new project (title is the project name,
  suggestedContent its description) or "modify" with a title containing
  "description" and the project's itemId.
- education: use "highlight" with the entry's itemId to emphasise relevant
  coursework or honors.

Quote currentContent verbatim from the resume so the edit can be located.
Order suggestions with the highest impact first."""

AUDIT_SYSTEM_PROMPT = (
    "You are a helpful assistant, resume expert, and career advisor. You are able to "
    "provide feedback on resumes and suggest improvements and optimizations. You can "
    "also help users tailor their resumes for specific job applications."
)


@dataclass(frozen=True)
class AnalysisRequest:
    """A system-role instruction string plus the user-role payload."""

    system: str
    user: str

    def messages(self) -> list[dict]:
        return [
            {"role": "system", "content": self.system},
            {"role": "user", "content": self.user},
        ]


def build_analysis_request(
    document: ResumeDocument,
    job_description: str,
    completed: list[CompletedSuggestion] | list[ResumeSuggestion] | None = None,
) -> AnalysisRequest:
    """Build the structured-analysis prompt pair."""
    if not job_description or not job_description.strip():
        raise EmptyJobDescription()

    parts = [
        "Analyze this resume against the job description below.",
        "",
        "JOB DESCRIPTION:",
        "---",
        job_description.strip(),
        "---",
        "",
        "RESUME (JSON):",
        document.to_json(indent=2),
    ]
    if completed:
        parts += ["", format_completed_suggestions(completed)]
    parts += ["", "Respond with the JSON object only."]
    return AnalysisRequest(system=SYSTEM_PROMPT, user="\n".join(parts))


def format_completed_suggestions(
    completed: list[CompletedSuggestion] | list[ResumeSuggestion],
) -> str:
    """Enumerate suggestions the user already completed so they are not repeated."""
    lines = [
        "PREVIOUSLY COMPLETED SUGGESTIONS:",
        "The candidate has already applied the following changes. Do NOT suggest them "
        "again or suggest equivalent edits; the resume above already reflects them.",
    ]
    for number, suggestion in enumerate(completed, start=1):
        lines.append(
            f"{number}. [{suggestion.section.value}/{suggestion.type.value}] {suggestion.title}"
        )
        if suggestion.description:
            lines.append(f"   Description: {suggestion.description}")
        if suggestion.current_content:
            lines.append(f"   Before: {suggestion.current_content}")
        if suggestion.suggested_content:
            lines.append(f"   After: {suggestion.suggested_content}")
    return "\n".join(lines)


def build_audit_request(document: ResumeDocument, job_description: str) -> AnalysisRequest:
    """Build the free-text audit prompt used when structured analysis fails."""
    if not job_description or not job_description.strip():
        raise EmptyJobDescription()
    user = (
        "Audit the following resume for the given job description:\n\n"
        f"Resume:\n{document.to_json(indent=2)}\n\n"
        f"Job Description:\n{job_description.strip()}"
    )
    return AnalysisRequest(system=AUDIT_SYSTEM_PROMPT, user=user)
