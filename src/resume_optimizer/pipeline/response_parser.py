"""Analysis Response Parser - validates the model's reply into a ResumeAnalysis."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from resume_optimizer.errors import MalformedAnalysisResponse
from resume_optimizer.models.analysis import ResumeAnalysis, ResumeSuggestion, TokenUsage
from resume_optimizer.utils.json_parser import extract_json

logger = logging.getLogger(__name__)


def parse_analysis(text: str, usage: TokenUsage | None = None) -> ResumeAnalysis:
    """Decode a raw model reply into a ResumeAnalysis.

    The reply may be wrapped in a markdown code fence, with or without a
    language tag. Suggestions that fail validation are dropped; anything
    else that does not fit the schema raises MalformedAnalysisResponse.
    """
    try:
        data = extract_json(text)
    except ValueError as exc:
        raise MalformedAnalysisResponse("Analysis reply is not valid JSON", raw_text=text) from exc

    if not isinstance(data, dict):
        raise MalformedAnalysisResponse(
            f"Expected a JSON object, got {type(data).__name__}", raw_text=text
        )
    if "overallScore" not in data and "overall_score" not in data:
        raise MalformedAnalysisResponse("Analysis reply has no overallScore", raw_text=text)

    payload = dict(data)
    payload["suggestions"] = _parse_suggestions(data.get("suggestions"))
    for key in ("keyRequirements", "matchingStrengths", "gaps"):
        if key in payload and not isinstance(payload[key], list):
            payload[key] = [str(payload[key])]
    payload.pop("usage", None)

    try:
        analysis = ResumeAnalysis.model_validate(payload)
    except ValidationError as exc:
        raise MalformedAnalysisResponse(
            f"Analysis reply does not match the schema: {exc.error_count()} error(s)",
            raw_text=text,
        ) from exc

    if usage is not None:
        analysis = analysis.model_copy(update={"usage": usage})
    return analysis


def _parse_suggestions(items) -> list[ResumeSuggestion]:
    if not isinstance(items, list):
        return []

    result = []
    for item in items:
        if not isinstance(item, dict):
            continue
        try:
            result.append(ResumeSuggestion.model_validate(item))
        except ValidationError:
            logger.warning("Dropping invalid suggestion: %s", item.get("title", item))
    return result
