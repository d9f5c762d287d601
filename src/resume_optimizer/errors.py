"""Error taxonomy for the suggestion engine.

Every error here is recoverable at the session level: none of them leaves
the resume document in a partially modified state.
"""

from __future__ import annotations


class ResumeOptimizerError(Exception):
    """Base class for all resume optimizer errors."""


class MissingCredential(ResumeOptimizerError):
    """No model-access key is configured; the optimize action is refused."""

    def __init__(self, message: str = "An API key is required before running an analysis"):
        super().__init__(message)


class EmptyJobDescription(ResumeOptimizerError, ValueError):
    """The job description is blank; no request is built."""

    def __init__(self, message: str = "A job description is required to optimize against"):
        super().__init__(message)


class OptimizationInProgress(ResumeOptimizerError):
    """A second optimize call was made while the first is still in flight."""

    def __init__(self, message: str = "An analysis is already running for this session"):
        super().__init__(message)


class ModelCallFailure(ResumeOptimizerError):
    """Network, auth or rate-limit failure from the model call."""


class MalformedAnalysisResponse(ResumeOptimizerError, ValueError):
    """The model reply could not be decoded into a ResumeAnalysis.

    Attributes:
        message: Error description
        raw_text: The reply that failed to decode (truncated in the message)
    """

    def __init__(self, message: str, raw_text: str | None = None):
        self.message = message
        self.raw_text = raw_text

        parts = [message]
        if raw_text:
            snippet = raw_text[:200] + "..." if len(raw_text) > 200 else raw_text
            parts.append(f"\nRaw response:\n{snippet}")

        super().__init__("\n".join(parts))


class UnlocatableTarget(ResumeOptimizerError):
    """No node in the UI tree matched the suggestion."""


class UnsupportedSuggestion(ResumeOptimizerError):
    """No deterministic rule exists for the suggestion's section/type combination."""
