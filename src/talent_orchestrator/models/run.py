"""Pydantic models for orchestrator input and output envelopes."""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field

from talent_orchestrator.models.guard import GuardReport
from talent_orchestrator.models.job import JobPosting
from talent_orchestrator.models.match import MatchResult
from talent_orchestrator.models.resume import ResumeProfile
from talent_orchestrator.models.tailoring import CoverLetterPack, TailoredResume


class RunType(str, Enum):
    """How far down the pipeline a run goes."""

    RESUME_REVIEW = "resume_review"  # parse resume only
    JOB_MATCH = "job_match"  # + parse jobs and score matches
    APPLY_PACK = "apply_pack"  # + tailored resume, cover letter, truth guard


RunStatus = Literal["ok", "partial", "blocked"]


class JobInput(BaseModel):
    job_id: str | None = Field(default=None, min_length=1, max_length=200)
    source: Literal["linkedin", "indeed", "company_site", "internal"] | None = None
    url: str | None = None
    raw_text: str = Field(min_length=1)


class CandidateHints(BaseModel):
    location: str | None = None
    target_roles: list[str] = []
    work_auth: str | None = None  # e.g. "citizen", "open_to_relocation", "needs_visa"


class RunLimits(BaseModel):
    """Per-run overrides; None falls back to the configured default."""

    max_jobs: int | None = Field(default=None, ge=1, le=50)
    max_tailored_jobs: int | None = Field(default=None, ge=1, le=10)
    token_budget_total: int | None = Field(default=None, ge=1_000, le=120_000)


class RunCache(BaseModel):
    """Structures computed by an earlier run. Read-only for the whole run."""

    resume: ResumeProfile | None = None
    jobs_by_id: dict[str, JobPosting] = {}


class RunInput(BaseModel):
    run_type: RunType
    resume_text: str
    candidate_hints: CandidateHints | None = None
    jobs: list[JobInput] = Field(default_factory=list, max_length=50)
    limits: RunLimits = Field(default_factory=RunLimits)
    run_id: str | None = None
    cache: RunCache = Field(default_factory=RunCache)


class BudgetInfo(BaseModel):
    token_budget_total: int
    token_used_estimate: int
    stopped_reason: str = ""  # empty unless the run stopped early


class RankedJob(BaseModel):
    job_id: str
    job: JobPosting
    match: MatchResult


class TailoredOutput(BaseModel):
    job_id: str
    tailored_resume: TailoredResume
    cover_letter: CoverLetterPack
    guard_report: GuardReport


class RunOutput(BaseModel):
    run_id: str
    status: RunStatus
    budget: BudgetInfo
    resume: ResumeProfile | None = None
    ranked_jobs: list[RankedJob] = []
    tailored_outputs: list[TailoredOutput] = []
    notes_for_ui: list[str] = []
    error: str | None = None

    @classmethod
    def blocked(
        cls,
        run_id: str,
        error: str,
        *,
        token_budget_total: int,
        token_used_estimate: int = 0,
        stopped_reason: str | None = None,
        notes: list[str] | None = None,
    ) -> "RunOutput":
        """Envelope for runs a caller refuses or cannot complete."""
        return cls(
            run_id=run_id,
            status="blocked",
            budget=BudgetInfo(
                token_budget_total=token_budget_total,
                token_used_estimate=token_used_estimate,
                stopped_reason=stopped_reason or error,
            ),
            notes_for_ui=notes or [],
            error=error,
        )
