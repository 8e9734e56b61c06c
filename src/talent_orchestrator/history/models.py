"""Run history data models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from talent_orchestrator.models.guard import GuardReport
from talent_orchestrator.models.tailoring import CoverLetterPack, TailoredResume


class RunRecord(BaseModel):
    """One orchestrator run as recorded for audit."""

    run_id: str
    run_type: str
    resume_hash: str
    status: str = "running"  # running | ok | partial | blocked | failed
    token_budget_total: int = 0
    token_budget_used: int = 0
    estimated_cost_usd: float = 0.0
    notes: list[str] = Field(default_factory=list)
    error_message: str | None = None
    started_at: datetime = Field(default_factory=datetime.now)
    completed_at: datetime | None = None


class RunJobRecord(BaseModel):
    """One ranked job of a recorded run."""

    run_id: str
    job_index: int
    job_id: str
    job_title: str | None = None
    job_company: str | None = None
    score: int | None = None
    must_have_pct: float | None = None
    tailored: bool = False
    guard_verdict: str | None = None
    # Application materials, present only for tailored jobs
    tailored_resume: TailoredResume | None = None
    cover_letter: CoverLetterPack | None = None
    guard_report: GuardReport | None = None
