"""Shared test fixtures."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock

import pytest

from resume_optimizer.clients.llm_client import LLMClient, LLMResponse
from resume_optimizer.models.analysis import ResumeSuggestion
from resume_optimizer.models.resume import ResumeDocument
from resume_optimizer.sample_data import sample_resume


class FakeTimer:
    def __init__(self, delay: float, callback):
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Collects scheduled callbacks so tests can fire them deterministically."""

    def __init__(self):
        self.timers: list[FakeTimer] = []

    def call_later(self, delay: float, callback) -> FakeTimer:
        timer = FakeTimer(delay, callback)
        self.timers.append(timer)
        return timer

    def run_all(self) -> None:
        timers, self.timers = self.timers, []
        for timer in timers:
            if not timer.cancelled:
                timer.callback()


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def sample_document() -> ResumeDocument:
    return sample_resume()


@pytest.fixture
def sample_jd_text() -> str:
    return """Senior Backend Engineer

Responsibilities:
- Design and operate high-traffic Python services on AWS
- Own Kubernetes deployments and observability
- Mentor engineers and lead technical design reviews

Requirements:
- 5+ years of Python or Go
- Kubernetes, Docker, PostgreSQL
- Strong communication skills
"""


@pytest.fixture
def sample_analysis_payload() -> dict:
    return {
        "overallScore": 72,
        "keyRequirements": ["Python", "Kubernetes", "AWS"],
        "matchingStrengths": ["Python experience", "AWS"],
        "gaps": ["No Kubernetes experience listed"],
        "suggestions": [
            {
                "section": "skills",
                "type": "add",
                "priority": "high",
                "title": "Add Kubernetes",
                "description": "The role requires Kubernetes operations experience.",
                "suggestedContent": "Kubernetes",
                "itemId": "3",
            },
            {
                "section": "workExperience",
                "type": "modify",
                "priority": "medium",
                "title": "Quantify highlights",
                "description": "Rewrite highlight bullets with metrics.",
                "currentContent": "Reduced API response time by 40% through optimization and caching strategies",
                "suggestedContent": "- Built X serving 10k users\n- Reduced latency by 30%",
                "itemId": "1",
            },
        ],
        "summary": "Solid backend profile with a Kubernetes gap.",
    }


@pytest.fixture
def sample_analysis_text(sample_analysis_payload) -> str:
    return "```json\n" + json.dumps(sample_analysis_payload) + "\n```"


@pytest.fixture
def skill_suggestion() -> ResumeSuggestion:
    return ResumeSuggestion(
        section="skills",
        type="add",
        priority="high",
        title="Add Kubernetes",
        description="The role requires Kubernetes operations experience.",
        suggested_content="Kubernetes",
        item_id="3",
    )


@pytest.fixture
def mock_llm(sample_analysis_text) -> AsyncMock:
    llm = AsyncMock(spec=LLMClient)
    llm.generate.return_value = LLMResponse(
        text=sample_analysis_text, input_tokens=1200, output_tokens=400
    )
    return llm
