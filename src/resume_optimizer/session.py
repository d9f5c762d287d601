"""Editor session - the application state the suggestion engine operates on."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

from resume_optimizer.clients.llm_client import LLMClient
from resume_optimizer.config import AppConfig
from resume_optimizer.errors import (
    EmptyJobDescription,
    MalformedAnalysisResponse,
    MissingCredential,
    ModelCallFailure,
    OptimizationInProgress,
)
from resume_optimizer.locator.target_locator import TargetLocator
from resume_optimizer.locator.tree import UITree
from resume_optimizer.logging.cost_calculator import calculate_cost
from resume_optimizer.logging.models import UsageLog
from resume_optimizer.logging.usage_store import UsageStore
from resume_optimizer.models.analysis import CompletedSuggestion, ResumeAnalysis, ResumeSuggestion
from resume_optimizer.models.resume import ResumeDocument
from resume_optimizer.pipeline import suggestion_applier
from resume_optimizer.pipeline.analyzer import ResumeAnalyzer
from resume_optimizer.sample_data import sample_resume
from resume_optimizer.scheduling import DebouncedWriter, Scheduler, ThreadingScheduler
from resume_optimizer.storage.session_store import SessionStore

logger = logging.getLogger(__name__)

# on_notice(level, title, detail); level is "success" | "info" | "warning" | "error"
Notifier = Callable[[str, str, str], None]


@dataclass
class OptimizationResult:
    """Either a structured analysis or, in degraded mode, free-text audit output."""

    analysis: ResumeAnalysis | None = None
    audit_text: str = ""

    @property
    def degraded(self) -> bool:
        return self.analysis is None


class EditorSession:
    """Owns the resume document, the current analysis and the completed ledger."""

    def __init__(
        self,
        store: SessionStore | None = None,
        *,
        config: AppConfig | None = None,
        api_key: str = "",
        llm_factory: Callable[[str], LLMClient] | None = None,
        scheduler: Scheduler | None = None,
        usage_store: UsageStore | None = None,
        on_notice: Notifier | None = None,
        session_id: str = "anonymous",
    ):
        self.config = config or AppConfig()
        self.store = store
        self.api_key = api_key
        self.usage_store = usage_store
        self.on_notice = on_notice
        self.session_id = session_id
        self.scheduler = scheduler or ThreadingScheduler()
        self._llm_factory = llm_factory or (
            lambda key: LLMClient(api_key=key, timeout=self.config.llm.timeout)
        )

        self.document = ResumeDocument()
        self.job_description = ""
        self.analysis: ResumeAnalysis | None = None
        self.audit_text = ""
        self.completed: list[CompletedSuggestion] = []
        self.is_optimizing = False

        self._previewing: set[str] = set()
        self._preview_snapshot: ResumeDocument | None = None

        delay = self.config.storage.save_debounce_seconds
        self._document_writer = (
            DebouncedWriter(store.save_document, delay, self.scheduler) if store else None
        )
        self._ledger_writer = (
            DebouncedWriter(store.save_ledger, delay, self.scheduler) if store else None
        )

    def _notify(self, level: str, title: str, detail: str = "") -> None:
        if self.on_notice:
            self.on_notice(level, title, detail)

    # --- document state ---

    def restore(self) -> None:
        """Load the saved document and ledger, falling back to the sample resume."""
        document = None
        ledger: list[CompletedSuggestion] = []
        if self.store is not None:
            try:
                document = self.store.load_document()
            except ValueError:
                logger.warning("Saved resume could not be read, using sample data", exc_info=True)
            try:
                ledger = self.store.load_ledger()
            except ValueError:
                logger.warning("Saved completed suggestions could not be read", exc_info=True)
        self.document = document or sample_resume()
        self.completed = ledger

    def update_document(self, document: ResumeDocument) -> None:
        """Replace the document and schedule a debounced save."""
        if document == self.document:
            return
        self.document = document
        if self._document_writer is not None:
            self._document_writer.submit(document)

    def load_sample_data(self) -> None:
        self.update_document(sample_resume())
        self.flush()
        self._notify("success", "Sample data loaded", "Sample resume data has been loaded")

    def clear_all(self) -> None:
        """Reset to an empty document and forget everything persisted."""
        self.document = ResumeDocument()
        self.completed = []
        self._previewing.clear()
        self._preview_snapshot = None
        if self.store is not None:
            self._cancel_and_clear(self._document_writer, self.store.clear_document)
            self._cancel_and_clear(self._ledger_writer, self.store.clear_ledger)
        self._notify("success", "All data cleared", "Resume data has been cleared")

    def flush(self) -> None:
        """Write any pending debounced saves now."""
        for writer in (self._document_writer, self._ledger_writer):
            if writer is not None:
                writer.flush()

    @staticmethod
    def _cancel_and_clear(writer: DebouncedWriter | None, clear: Callable[[], None]) -> None:
        # Delete under the writer's lock so an in-flight save cannot land afterwards
        if writer is None:
            clear()
        else:
            writer.cancel(then=clear)

    # --- optimization ---

    async def optimize(self) -> OptimizationResult:
        """Analyze the document against the job description.

        Falls back to a free-text audit when the structured reply cannot be
        decoded. Session state is only changed when a call succeeds.
        """
        if self.is_optimizing:
            raise OptimizationInProgress()
        if not self.api_key:
            self._notify("error", "API key required", "Set your API key in settings first.")
            raise MissingCredential()
        if not self.job_description.strip():
            self._notify("error", "Job description required", "Provide a job description to optimize against.")
            raise EmptyJobDescription()

        self.is_optimizing = True
        started = time.monotonic()
        document = self.document
        job_description = self.job_description
        completed = list(self.completed)
        try:
            analyzer = ResumeAnalyzer(
                self._llm_factory(self.api_key),
                model=self.config.llm.model,
                temperature=self.config.analysis.temperature,
                max_tokens=self.config.analysis.max_tokens,
            )
            try:
                analysis = await analyzer.analyze(document, job_description, completed)
            except MalformedAnalysisResponse as exc:
                logger.warning("Structured analysis failed, falling back to audit: %s", exc.message)
            except ModelCallFailure as exc:
                self._record_usage("analysis", started, analyzer, error=str(exc))
                self._notify("error", "Analysis failed", "Check your API key and try again.")
                raise
            else:
                self.analysis = analysis
                self.audit_text = ""
                self._record_usage("analysis", started, analyzer, analysis=analysis)
                self._notify(
                    "success",
                    "Resume analysis complete",
                    f"Found {len(analysis.suggestions)} suggestions for improvement",
                )
                return OptimizationResult(analysis=analysis)

            try:
                text = await analyzer.audit(document, job_description)
            except ModelCallFailure as exc:
                self._record_usage("audit", started, analyzer, error=str(exc))
                self._notify("error", "Analysis failed", "Check your API key and try again.")
                raise
            self.analysis = None
            self.audit_text = text
            self._record_usage("audit", started, analyzer)
            self._notify(
                "warning",
                "Using basic analysis",
                "Advanced analysis failed, showing basic suggestions instead.",
            )
            return OptimizationResult(audit_text=text)
        finally:
            self.is_optimizing = False

    def _record_usage(
        self,
        mode: str,
        started: float,
        analyzer: ResumeAnalyzer,
        analysis: ResumeAnalysis | None = None,
        error: str | None = None,
    ) -> None:
        if self.usage_store is None:
            return
        self.usage_store.save_log(
            UsageLog(
                session_id=self.session_id,
                mode=mode,
                model=analyzer.model,
                overall_score=analysis.overall_score if analysis else None,
                suggestion_count=len(analysis.suggestions) if analysis else 0,
                completed_count=len(self.completed),
                elapsed_seconds=time.monotonic() - started,
                prompt_tokens=sum(call[1] for call in analyzer.calls),
                completion_tokens=sum(call[2] for call in analyzer.calls),
                estimated_cost_usd=calculate_cost(analyzer.calls),
                success=error is None,
                error_message=error,
            )
        )

    # --- suggestions ---

    def apply_suggestion(self, suggestion: ResumeSuggestion) -> bool:
        """Apply a suggestion to the document. Returns whether anything changed."""
        if not suggestion_applier.can_apply_suggestion(suggestion):
            logger.info("Suggestion %r cannot be applied automatically", suggestion.title)
            return False
        updated = suggestion_applier.apply_suggestion(self.document, suggestion)
        if updated == self.document:
            self._notify("info", "Nothing to apply", f"Edit manually: {suggestion.title}")
            return False
        self.update_document(updated)
        self._notify("success", "Suggestion applied", suggestion.title)
        return True

    def preview_suggestion(self, suggestion: ResumeSuggestion, active: bool) -> None:
        """Toggle a preview; clearing the last preview restores the original document."""
        if active:
            if not self._previewing:
                self._preview_snapshot = self.document
            self._previewing.add(suggestion.key)
            if suggestion_applier.can_apply_suggestion(suggestion):
                self.update_document(
                    suggestion_applier.apply_suggestion(self.document, suggestion)
                )
                self._notify("info", "Preview active", f"Previewing: {suggestion.title}")
            return

        self._previewing.discard(suggestion.key)
        if not self._previewing and self._preview_snapshot is not None:
            self.update_document(self._preview_snapshot)
            self._preview_snapshot = None
            self._notify("info", "Preview cleared", "Showing original resume")

    def go_to_suggestion(self, suggestion: ResumeSuggestion, tree: UITree) -> bool:
        """Scroll to and highlight the element the suggestion refers to."""
        locator = TargetLocator(
            tree,
            self.scheduler,
            field_highlight_seconds=self.config.locator.field_highlight_seconds,
            content_highlight_seconds=self.config.locator.content_highlight_seconds,
        )
        if locator.highlight_target(suggestion):
            self._notify("success", "Found target!", "This is where you should make the change.")
            return True
        what = "add button" if suggestion.type.value == "add" else "content"
        self._notify(
            "warning",
            "Section opened",
            f"Couldn't find specific {what} - look for the relevant {suggestion.section.value} area.",
        )
        return False

    def mark_done(self, suggestion: ResumeSuggestion) -> bool:
        """Move a suggestion from the active analysis into the completed ledger."""
        if self.analysis is None:
            return False
        self.analysis = self.analysis.without(suggestion)
        entry = CompletedSuggestion(
            **suggestion.model_dump(), completed_at=datetime.now(timezone.utc)
        )
        self.completed = [*self.completed, entry]
        if self._ledger_writer is not None:
            self._ledger_writer.submit(list(self.completed))
        self._notify("success", "Suggestion marked as completed", f"Completed: {suggestion.title}")
        return True

    def clear_completed(self) -> None:
        """Empty the ledger and delete its persisted form."""
        self.completed = []
        if self.store is not None:
            self._cancel_and_clear(self._ledger_writer, self.store.clear_ledger)
        self._notify("success", "Cleared completed suggestions", "Previous optimization history cleared")
