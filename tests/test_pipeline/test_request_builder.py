"""Tests for analysis request building."""

import pytest

from resume_optimizer.errors import EmptyJobDescription
from resume_optimizer.models.analysis import CompletedSuggestion, ResumeSuggestion
from resume_optimizer.pipeline.request_builder import (
    AUDIT_SYSTEM_PROMPT,
    SYSTEM_PROMPT,
    build_analysis_request,
    build_audit_request,
    format_completed_suggestions,
)


class TestBuildAnalysisRequest:
    def test_messages_are_system_then_user(self, sample_document, sample_jd_text):
        request = build_analysis_request(sample_document, sample_jd_text)
        messages = request.messages()
        assert [m["role"] for m in messages] == ["system", "user"]
        assert messages[0]["content"] == SYSTEM_PROMPT

    def test_user_payload_contains_jd_and_resume(self, sample_document, sample_jd_text):
        request = build_analysis_request(sample_document, sample_jd_text)
        assert "Senior Backend Engineer" in request.user
        assert '"workExperience"' in request.user
        assert '"id": "1"' in request.user
        assert "PREVIOUSLY COMPLETED" not in request.user

    def test_system_prompt_declares_rubric_and_rules(self):
        assert "Skills match: 30%" in SYSTEM_PROMPT
        assert "Experience relevance: 25%" in SYSTEM_PROMPT
        assert "EXACTLY ONE skill" in SYSTEM_PROMPT
        assert "90-100" in SYSTEM_PROMPT

    @pytest.mark.parametrize("jd", ["", "   \n\t "])
    def test_blank_job_description_raises(self, sample_document, jd):
        with pytest.raises(EmptyJobDescription):
            build_analysis_request(sample_document, jd)

    def test_completed_suggestions_enumerated(self, sample_document, sample_jd_text):
        completed = [
            CompletedSuggestion(
                section="skills",
                type="add",
                title="Add Kubernetes",
                description="Needed for the role",
                suggested_content="Kubernetes",
            )
        ]
        request = build_analysis_request(sample_document, sample_jd_text, completed)
        assert "PREVIOUSLY COMPLETED SUGGESTIONS" in request.user
        assert "1. [skills/add] Add Kubernetes" in request.user
        assert "After: Kubernetes" in request.user


class TestFormatCompletedSuggestions:
    def test_before_and_after_lines(self):
        text = format_completed_suggestions(
            [
                ResumeSuggestion(
                    section="workExperience",
                    type="modify",
                    title="Rewrite description",
                    current_content="old text",
                    suggested_content="new text",
                ),
                ResumeSuggestion(section="education", type="highlight", title="Honors"),
            ]
        )
        assert "1. [workExperience/modify] Rewrite description" in text
        assert "   Before: old text" in text
        assert "   After: new text" in text
        assert "2. [education/highlight] Honors" in text


class TestBuildAuditRequest:
    def test_audit_prompt(self, sample_document, sample_jd_text):
        request = build_audit_request(sample_document, sample_jd_text)
        assert request.system == AUDIT_SYSTEM_PROMPT
        assert request.user.startswith("Audit the following resume")
        assert "Job Description:" in request.user

    def test_blank_job_description_raises(self, sample_document):
        with pytest.raises(EmptyJobDescription):
            build_audit_request(sample_document, " ")
