"""Application configuration loaded from config.yaml."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml


@dataclass(frozen=True)
class LLMConfig:
    model: str = "claude-sonnet-4-5-20250929"
    timeout: int = 120
    max_tokens: int = 4096
    temperature: float = 0.2
    # 1 = a single request per analysis; >1 retries transport failures only
    max_attempts: int = 1

    def __post_init__(self) -> None:
        if not 1 <= self.timeout <= 600:
            raise ValueError(f"llm.timeout must be between 1 and 600, got {self.timeout}")
        if not 256 <= self.max_tokens <= 64000:
            raise ValueError(f"llm.max_tokens must be between 256 and 64000, got {self.max_tokens}")
        if not 0.0 <= self.temperature <= 1.0:
            raise ValueError(f"llm.temperature must be between 0 and 1, got {self.temperature}")
        if not 1 <= self.max_attempts <= 5:
            raise ValueError(f"llm.max_attempts must be between 1 and 5, got {self.max_attempts}")


@dataclass(frozen=True)
class ExportConfig:
    filename_prefix: str = "job_market_report"
    mime_type: str = "text/csv"

    def __post_init__(self) -> None:
        if not self.filename_prefix.strip():
            raise ValueError("export.filename_prefix must not be empty")


@dataclass(frozen=True)
class AppConfig:
    llm: LLMConfig = field(default_factory=LLMConfig)
    export: ExportConfig = field(default_factory=ExportConfig)


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
        export=ExportConfig(**raw.get("export", {})),
    )
