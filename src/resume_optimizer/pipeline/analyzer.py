"""Resume analyzer - runs the structured analysis call and the free-text audit call."""

from __future__ import annotations

import logging

from resume_optimizer.clients.llm_client import DEFAULT_MODEL, LLMClient
from resume_optimizer.models.analysis import CompletedSuggestion, ResumeAnalysis
from resume_optimizer.models.resume import ResumeDocument
from resume_optimizer.pipeline.request_builder import (
    build_analysis_request,
    build_audit_request,
)
from resume_optimizer.pipeline.response_parser import parse_analysis

logger = logging.getLogger(__name__)


class ResumeAnalyzer:
    def __init__(
        self,
        llm: LLMClient,
        model: str = DEFAULT_MODEL,
        temperature: float = 0.3,
        max_tokens: int = 8192,
    ):
        self.llm = llm
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.calls: list[tuple[str, int, int]] = []  # (model, input_tokens, output_tokens)

    async def analyze(
        self,
        document: ResumeDocument,
        job_description: str,
        completed: list[CompletedSuggestion] | None = None,
    ) -> ResumeAnalysis:
        """Request a scored, structured analysis of the resume for the job.

        Raises MalformedAnalysisResponse when the reply cannot be decoded and
        ModelCallFailure when the call itself fails.
        """
        request = build_analysis_request(document, job_description, completed)
        response = await self.llm.generate(
            messages=request.messages(),
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        self.calls.append((self.model, response.input_tokens, response.output_tokens))
        analysis = parse_analysis(response.text, usage=response.usage)
        logger.debug(
            "Analysis: score=%d, %d suggestions", analysis.overall_score, len(analysis.suggestions)
        )
        return analysis

    async def audit(self, document: ResumeDocument, job_description: str) -> str:
        """Free-text audit with the provider's default temperature and no schema."""
        request = build_audit_request(document, job_description)
        response = await self.llm.generate(
            messages=request.messages(),
            model=self.model,
            max_tokens=self.max_tokens,
        )
        self.calls.append((self.model, response.input_tokens, response.output_tokens))
        return response.text.strip()
