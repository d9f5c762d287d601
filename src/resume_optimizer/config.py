"""Application configuration loaded from config.yaml."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml


@dataclass(frozen=True)
class LLMConfig:
    model: str = "claude-sonnet-4-5-20250929"
    timeout: int = 120

    def __post_init__(self) -> None:
        if not 1 <= self.timeout <= 600:
            raise ValueError(f"llm.timeout must be between 1 and 600, got {self.timeout}")


@dataclass(frozen=True)
class AnalysisConfig:
    temperature: float = 0.3
    max_tokens: int = 8192

    def __post_init__(self) -> None:
        if not 0.0 <= self.temperature <= 1.0:
            raise ValueError(
                f"analysis.temperature must be between 0 and 1, got {self.temperature}"
            )
        if self.max_tokens < 256:
            raise ValueError(f"analysis.max_tokens must be at least 256, got {self.max_tokens}")


@dataclass(frozen=True)
class StorageConfig:
    db_path: str = "~/.resume-optimizer/session.db"
    usage_db_path: str = "~/.resume-optimizer/usage.db"
    document_ttl_days: int = 30
    ledger_ttl_days: int = 7
    save_debounce_seconds: float = 2.0

    def __post_init__(self) -> None:
        if not 0 <= self.document_ttl_days <= 365:
            raise ValueError(
                f"storage.document_ttl_days must be between 0 and 365, got {self.document_ttl_days}"
            )
        if not 0 <= self.ledger_ttl_days <= 365:
            raise ValueError(
                f"storage.ledger_ttl_days must be between 0 and 365, got {self.ledger_ttl_days}"
            )
        if self.save_debounce_seconds < 0:
            raise ValueError(
                f"storage.save_debounce_seconds must not be negative, got {self.save_debounce_seconds}"
            )

    @property
    def resolved_db_path(self) -> Path:
        return Path(self.db_path).expanduser()

    @property
    def resolved_usage_db_path(self) -> Path:
        return Path(self.usage_db_path).expanduser()


@dataclass(frozen=True)
class LocatorConfig:
    field_highlight_seconds: float = 4.0
    content_highlight_seconds: float = 6.0

    def __post_init__(self) -> None:
        for name in ("field_highlight_seconds", "content_highlight_seconds"):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"locator.{name} must be positive, got {value}")


@dataclass(frozen=True)
class AppConfig:
    llm: LLMConfig = field(default_factory=LLMConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    locator: LocatorConfig = field(default_factory=LocatorConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults."""
    if path is None:
        # Look for config.yaml relative to the project root
        candidates = [
            Path.cwd() / "config.yaml",
            Path(__file__).resolve().parent.parent.parent / "config.yaml",
        ]
        for c in candidates:
            if c.exists():
                path = c
                break

    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text()) or {}

    return AppConfig(
        llm=LLMConfig(**raw.get("llm", {})),
        analysis=AnalysisConfig(**raw.get("analysis", {})),
        storage=StorageConfig(**raw.get("storage", {})),
        locator=LocatorConfig(**raw.get("locator", {})),
    )
