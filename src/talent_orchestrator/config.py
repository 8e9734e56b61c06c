"""Application configuration loaded from config.yaml."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml


def _check_range(name: str, value: float, low: float, high: float) -> None:
    if not low <= value <= high:
        raise ValueError(f"{name} must be between {low} and {high}, got {value}")


@dataclass(frozen=True)
class LLMConfig:
    fast_model: str = "claude-haiku-4-5-20251001"
    quality_model: str = "claude-sonnet-4-5-20250929"
    timeout: int = 60

    def __post_init__(self) -> None:
        _check_range("timeout", self.timeout, 1, 600)


@dataclass(frozen=True)
class LimitsConfig:
    max_jobs: int = 20
    max_tailored_jobs: int = 5
    token_budget_total: int = 60_000
    token_budget_max: int = 120_000

    def __post_init__(self) -> None:
        _check_range("max_jobs", self.max_jobs, 1, 50)
        _check_range("max_tailored_jobs", self.max_tailored_jobs, 1, 10)
        _check_range("token_budget_max", self.token_budget_max, 1_000, 120_000)
        _check_range("token_budget_total", self.token_budget_total, 1_000, self.token_budget_max)


@dataclass(frozen=True)
class GuardrailConfig:
    max_job_description: int = 3_000
    max_explanation: int = 800
    max_cover_letter_body: int = 3_000
    max_summary: int = 1_500
    max_bullet: int = 600
    max_ats_keywords: int = 30
    max_change_log: int = 50

    def __post_init__(self) -> None:
        for name in (
            "max_job_description",
            "max_explanation",
            "max_cover_letter_body",
            "max_summary",
            "max_bullet",
        ):
            _check_range(name, getattr(self, name), 2, 100_000)
        _check_range("max_ats_keywords", self.max_ats_keywords, 0, 1_000)
        _check_range("max_change_log", self.max_change_log, 0, 1_000)


@dataclass(frozen=True)
class PipelineConfig:
    stand_in: bool = False
    run_timeout: float | None = None

    def __post_init__(self) -> None:
        if self.run_timeout is not None:
            _check_range("run_timeout", self.run_timeout, 1, 3_600)


@dataclass(frozen=True)
class HistoryConfig:
    enabled: bool = True
    db_path: str = "~/.talent-orchestrator/runs.db"

    @property
    def resolved_db_path(self) -> Path:
        return Path(self.db_path).expanduser()


@dataclass(frozen=True)
class AppConfig:
    llm: LLMConfig = field(default_factory=LLMConfig)
    limits: LimitsConfig = field(default_factory=LimitsConfig)
    guardrails: GuardrailConfig = field(default_factory=GuardrailConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults.

    Environment variables ``AI_FAST_MODEL`` and ``AI_QUALITY_MODEL`` override
    the model names, and ``MOCK_AI=1`` forces the stand-in pipeline.
    """
    if path is None:
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

    llm_raw = dict(raw.get("llm") or {})
    if os.environ.get("AI_FAST_MODEL"):
        llm_raw["fast_model"] = os.environ["AI_FAST_MODEL"]
    if os.environ.get("AI_QUALITY_MODEL"):
        llm_raw["quality_model"] = os.environ["AI_QUALITY_MODEL"]

    pipeline_raw = dict(raw.get("pipeline") or {})
    if os.environ.get("MOCK_AI") == "1":
        pipeline_raw["stand_in"] = True

    return AppConfig(
        llm=LLMConfig(**llm_raw),
        limits=LimitsConfig(**(raw.get("limits") or {})),
        guardrails=GuardrailConfig(**(raw.get("guardrails") or {})),
        pipeline=PipelineConfig(**pipeline_raw),
        history=HistoryConfig(**(raw.get("history") or {})),
    )
