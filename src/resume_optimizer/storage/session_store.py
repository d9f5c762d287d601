"""SQLite store for the resume document and completed-suggestions ledger."""

from __future__ import annotations

import json
import sqlite3
import time
from datetime import datetime
from pathlib import Path

from pydantic import TypeAdapter

from resume_optimizer.models.analysis import CompletedSuggestion
from resume_optimizer.models.resume import ResumeDocument

DEFAULT_DB_PATH = Path.home() / ".resume-optimizer" / "session.db"
DEFAULT_DOCUMENT_TTL_DAYS = 30
DEFAULT_LEDGER_TTL_DAYS = 7

DOCUMENT_KEY = "resume_document"
LEDGER_KEY = "completed_suggestions"

_ledger_adapter = TypeAdapter(list[CompletedSuggestion])


class SessionStore:
    """Key/payload store with a staleness window per key."""

    def __init__(
        self,
        db_path: str | Path = DEFAULT_DB_PATH,
        document_ttl_days: int = DEFAULT_DOCUMENT_TTL_DAYS,
        ledger_ttl_days: int = DEFAULT_LEDGER_TTL_DAYS,
    ):
        self.db_path = Path(db_path)
        self.ttl_seconds = {
            DOCUMENT_KEY: document_ttl_days * 86400,
            LEDGER_KEY: ledger_ttl_days * 86400,
        }
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS session_state (
                    key TEXT PRIMARY KEY,
                    payload_json TEXT NOT NULL,
                    saved_at REAL NOT NULL
                )
            """)

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(str(self.db_path))

    def _get(self, key: str) -> str | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT payload_json, saved_at FROM session_state WHERE key = ?",
                (key,),
            ).fetchone()

        if row is None:
            return None

        payload_json, saved_at = row
        if time.time() - saved_at > self.ttl_seconds[key]:
            self._delete(key)
            return None
        return payload_json

    def _put(self, key: str, payload_json: str) -> None:
        with self._connect() as conn:
            conn.execute(
                """INSERT OR REPLACE INTO session_state
                   (key, payload_json, saved_at)
                   VALUES (?, ?, ?)""",
                (key, payload_json, time.time()),
            )

    def _delete(self, key: str) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM session_state WHERE key = ?", (key,))

    def saved_at(self, key: str = DOCUMENT_KEY) -> datetime | None:
        """Timestamp of the last save for a key."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT saved_at FROM session_state WHERE key = ?", (key,)
            ).fetchone()
        return datetime.fromtimestamp(row[0]) if row else None

    # --- resume document ---

    def save_document(self, document: ResumeDocument) -> None:
        self._put(DOCUMENT_KEY, document.to_json(indent=None))

    def load_document(self) -> ResumeDocument | None:
        """Load the saved document unless it is older than the staleness window."""
        payload = self._get(DOCUMENT_KEY)
        if payload is None:
            return None
        return ResumeDocument.model_validate_json(payload)

    def clear_document(self) -> None:
        self._delete(DOCUMENT_KEY)

    # --- completed-suggestions ledger ---

    def save_ledger(self, ledger: list[CompletedSuggestion]) -> None:
        payload = json.dumps(
            [entry.model_dump(mode="json", by_alias=True) for entry in ledger]
        )
        self._put(LEDGER_KEY, payload)

    def load_ledger(self) -> list[CompletedSuggestion]:
        payload = self._get(LEDGER_KEY)
        if payload is None:
            return []
        return _ledger_adapter.validate_json(payload)

    def clear_ledger(self) -> None:
        self._delete(LEDGER_KEY)

    def clear(self) -> int:
        """Clear all saved state. Returns count of deleted rows."""
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM session_state")
            return cursor.rowcount
