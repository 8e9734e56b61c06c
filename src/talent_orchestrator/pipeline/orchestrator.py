"""Main pipeline orchestrator - runs the staged agent pipeline for one run.

run_type routing:
    resume_review -> parse resume
    job_match     -> + parse jobs, score matches
    apply_pack    -> + tailored resume, cover letter, truth guard (one retry)
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field

from talent_orchestrator.clients.llm_client import LLMClient
from talent_orchestrator.config import GuardrailConfig, LimitsConfig
from talent_orchestrator.errors import BudgetExceededError, RunTimeoutError
from talent_orchestrator.history.run_store import RunStore, hash_text
from talent_orchestrator.models.job import JobPosting
from talent_orchestrator.models.resume import ResumeProfile
from talent_orchestrator.models.run import (
    JobInput,
    RankedJob,
    RunInput,
    RunLimits,
    RunOutput,
    RunStatus,
    RunType,
    TailoredOutput,
)
from talent_orchestrator.pipeline.budget import Budget
from talent_orchestrator.pipeline.cover_letter_writer import CoverLetterWriter
from talent_orchestrator.pipeline.guardrails import apply_guardrails
from talent_orchestrator.pipeline.job_parser import JobParser
from talent_orchestrator.pipeline.match_scorer import MatchScorer
from talent_orchestrator.pipeline.resume_parser import ResumeParser
from talent_orchestrator.pipeline.resume_tailor import ResumeTailor
from talent_orchestrator.pipeline.stand_in import build_stand_in_output
from talent_orchestrator.pipeline.truth_guard import TruthGuard

logger = logging.getLogger(__name__)

# Jobs below EITHER threshold are never tailored.
MATCH_SCORE_THRESHOLD = 55
MUST_HAVE_THRESHOLD = 60
MAX_TAILOR_ATTEMPTS = 2


def agent_log(
    run_id: str,
    agent: str,
    status: str,
    *,
    job_id: str | None = None,
    tier: str | None = None,
    cached: bool = False,
    tokens: int | None = None,
    attempt: int | None = None,
    **extra,
) -> None:
    """One line per agent invocation: status is ok, skipped, error or budget_exceeded."""
    details = "".join(f" {key}={value}" for key, value in extra.items())
    logger.info(
        "[%s] %s run_id=%s job_id=%s tier=%s cached=%s tokens=%s attempt=%s%s",
        agent, status, run_id, job_id, tier, cached, tokens, attempt, details,
    )


@dataclass
class RunContext:
    """State owned by one run and passed to every stage."""

    run_id: str
    budget: Budget
    deadline: float | None = None
    status: RunStatus = "ok"
    notes: list[str] = field(default_factory=list)
    # Job structures available to later stages, from the cache or parsed this run
    job_structures: dict[str, JobPosting] = field(default_factory=dict)

    def note(self, message: str) -> None:
        self.notes.append(message)

    def mark_partial(self) -> None:
        self.status = "partial"

    def checkpoint(self, label: str) -> None:
        """Raise RunTimeoutError once the deadline has passed. Called between model calls."""
        if self.deadline is not None and time.monotonic() >= self.deadline:
            raise RunTimeoutError(f"run {self.run_id} deadline passed before {label}")


class RunOrchestrator:
    """Orchestrates the 6-agent resume, matching and application pack pipeline."""

    def __init__(
        self,
        llm: LLMClient,
        *,
        limits: LimitsConfig | None = None,
        guardrails: GuardrailConfig | None = None,
        stand_in: bool = False,
        recorder: RunStore | None = None,
        run_timeout: float | None = None,
    ):
        self.resume_parser = ResumeParser(llm)
        self.job_parser = JobParser(llm)
        self.match_scorer = MatchScorer(llm)
        self.resume_tailor = ResumeTailor(llm)
        self.cover_letter_writer = CoverLetterWriter(llm)
        self.truth_guard = TruthGuard(llm)
        self.limits = limits or LimitsConfig()
        self.guardrails = guardrails or GuardrailConfig()
        self.stand_in = stand_in
        self.recorder = recorder
        self.run_timeout = run_timeout

    async def run(self, run_input: RunInput, *, timeout: float | None = None) -> RunOutput:
        """Execute one run and return its output.

        Args:
            run_input: Run type, resume text, jobs, limits and optional cache.
            timeout: Seconds the run may take. Checked between model calls;
                overrides the orchestrator-wide ``run_timeout``.

        Raises:
            BudgetExceededError, AgentOutputError or a transport error when the
            resume cannot be parsed; RunTimeoutError when the deadline passes.
        """
        run_id = run_input.run_id or str(uuid.uuid4())
        max_jobs, max_tailored, token_budget = self._resolve_limits(run_input.limits)

        if self.stand_in:
            logger.debug("Run %s: stand-in mode, skipping model calls", run_id)
            output = build_stand_in_output(run_input, run_id, token_budget)
            return apply_guardrails(output, self.guardrails)

        timeout = timeout if timeout is not None else self.run_timeout
        ctx = RunContext(
            run_id=run_id,
            budget=Budget(token_budget),
            deadline=time.monotonic() + timeout if timeout is not None else None,
        )
        logger.info(
            "Run started: run_id=%s run_type=%s jobs=%d token_budget=%d resume_hash=%s",
            run_id, run_input.run_type.value, len(run_input.jobs), token_budget,
            hash_text(run_input.resume_text)[:16],
        )
        self._record("record_start", run_id, run_input.run_type.value,
                     hash_text(run_input.resume_text), token_budget)

        try:
            output = await self._execute(run_input, ctx, max_jobs, max_tailored)
        except Exception as exc:
            logger.error("Run failed: run_id=%s error=%s", run_id, exc)
            self._record("record_failure", run_id, str(exc))
            raise

        apply_guardrails(output, self.guardrails)
        logger.info(
            "Run complete: run_id=%s run_type=%s status=%s ranked=%d tailored=%d tokens_used=%d",
            run_id, run_input.run_type.value, output.status, len(output.ranked_jobs),
            len(output.tailored_outputs), ctx.budget.used,
        )
        self._record("record_completion", run_id, output)
        return output

    async def _execute(
        self,
        run_input: RunInput,
        ctx: RunContext,
        max_jobs: int,
        max_tailored: int,
    ) -> RunOutput:
        resume = await self._parse_resume(run_input, ctx)
        if run_input.run_type is RunType.RESUME_REVIEW:
            return self._output(ctx, resume)

        jobs = self._assign_job_ids(run_input.jobs[:max_jobs], ctx)
        await self._parse_jobs(jobs, run_input, ctx)
        ranked = await self._score_jobs(jobs, resume, run_input, ctx)
        if run_input.run_type is RunType.JOB_MATCH:
            return self._output(ctx, resume, ranked)

        tailored = await self._tailor_jobs(ranked, resume, ctx, max_tailored)
        return self._output(ctx, resume, ranked, tailored)

    # --- Stage 1: resume ---

    async def _parse_resume(self, run_input: RunInput, ctx: RunContext) -> ResumeProfile:
        """Failures here end the run; every later stage needs the resume."""
        agent = self.resume_parser.name
        if run_input.cache.resume is not None:
            agent_log(ctx.run_id, agent, "skipped", cached=True)
            ctx.note("resume: served from cache")
            return run_input.cache.resume.model_copy(deep=True)

        ctx.checkpoint(agent)
        result = await self.resume_parser.parse(run_input.resume_text, budget=ctx.budget)
        agent_log(ctx.run_id, agent, "ok", tier=self.resume_parser.tier, tokens=result.tokens)
        return result.data

    # --- Stage 2: job parsing ---

    async def _parse_jobs(
        self,
        jobs: list[tuple[str, JobInput]],
        run_input: RunInput,
        ctx: RunContext,
    ) -> None:
        agent = self.job_parser.name
        for job_id, job_input in jobs:
            cached = run_input.cache.jobs_by_id.get(job_id)
            if cached is not None:
                ctx.job_structures[job_id] = cached.model_copy(deep=True)
                agent_log(ctx.run_id, agent, "skipped", job_id=job_id, cached=True)
                ctx.note(f"job {job_id}: served from cache")
                continue

            if ctx.budget.exhausted():
                ctx.mark_partial()
                ctx.note(f"stopped parsing jobs at {job_id}: budget exhausted")
                break

            ctx.checkpoint(f"{agent}:{job_id}")
            try:
                result = await self.job_parser.parse(
                    job_input.raw_text, budget=ctx.budget, job_id=job_id,
                )
            except BudgetExceededError:
                # Every remaining parse would fail the same admission check
                ctx.mark_partial()
                agent_log(ctx.run_id, agent, "budget_exceeded", job_id=job_id)
                ctx.note(f"budget exceeded while parsing job {job_id}; remaining jobs not parsed")
                break
            except Exception as exc:
                agent_log(ctx.run_id, agent, "error", job_id=job_id, err=repr(exc))
                ctx.note(f"job {job_id}: parse error, skipped")
                continue

            ctx.job_structures[job_id] = result.data
            agent_log(
                ctx.run_id, agent, "ok",
                job_id=job_id, tier=self.job_parser.tier, tokens=result.tokens,
            )

    # --- Stage 3: scoring ---

    async def _score_jobs(
        self,
        jobs: list[tuple[str, JobInput]],
        resume: ResumeProfile,
        run_input: RunInput,
        ctx: RunContext,
    ) -> list[RankedJob]:
        agent = self.match_scorer.name
        ranked: list[RankedJob] = []
        for job_id, _ in jobs:
            job = ctx.job_structures.get(job_id)
            if job is None:
                continue

            if ctx.budget.exhausted():
                ctx.mark_partial()
                ctx.note(f"stopped scoring at job {job_id}: budget exhausted")
                break

            ctx.checkpoint(f"{agent}:{job_id}")
            try:
                result = await self.match_scorer.score(
                    resume, job, run_input.candidate_hints,
                    budget=ctx.budget, job_id=job_id,
                )
            except BudgetExceededError:
                ctx.mark_partial()
                agent_log(ctx.run_id, agent, "budget_exceeded", job_id=job_id)
                ctx.note(f"budget exceeded while scoring job {job_id}, skipped")
                continue
            except Exception as exc:
                agent_log(ctx.run_id, agent, "error", job_id=job_id, err=repr(exc))
                ctx.note(f"job {job_id}: scoring error, skipped")
                continue

            match = result.data
            ranked.append(RankedJob(job_id=job_id, job=job, match=match))
            agent_log(
                ctx.run_id, agent, "ok",
                job_id=job_id, tier=self.match_scorer.tier, tokens=result.tokens,
                score=match.score, recommendation=match.recommendation,
            )

        # Stable sort: equal scores keep input order
        ranked.sort(key=lambda r: r.match.score, reverse=True)
        return ranked

    # --- Stage 4: tailoring ---

    async def _tailor_jobs(
        self,
        ranked: list[RankedJob],
        resume: ResumeProfile,
        ctx: RunContext,
        max_tailored: int,
    ) -> list[TailoredOutput]:
        eligible = [
            r for r in ranked
            if r.match.score >= MATCH_SCORE_THRESHOLD
            and r.match.must_have_coverage_pct >= MUST_HAVE_THRESHOLD
        ]
        skipped = len(ranked) - len(eligible)
        if skipped:
            ctx.note(
                f"{skipped} job(s) skipped: score < {MATCH_SCORE_THRESHOLD} "
                f"or must-haves < {MUST_HAVE_THRESHOLD}%"
            )
        if not eligible:
            ctx.note("no jobs passed thresholds; tailoring skipped")

        outputs: list[TailoredOutput] = []
        for entry in eligible[:max_tailored]:
            if ctx.budget.exhausted():
                ctx.mark_partial()
                ctx.note(f"stopped tailoring at job {entry.job_id}: budget exhausted")
                break
            output = await self._tailor_job(entry, resume, ctx)
            if output is not None:
                outputs.append(output)
        return outputs

    async def _tailor_job(
        self,
        entry: RankedJob,
        resume: ResumeProfile,
        ctx: RunContext,
    ) -> TailoredOutput | None:
        """Tailor, write and guard one job; retry the triple once on a guard FAIL.

        Returns None when the job drops out (budget or agent failure).
        """
        job_id, job = entry.job_id, entry.job
        for attempt in range(1, MAX_TAILOR_ATTEMPTS + 1):
            try:
                ctx.checkpoint(f"{self.resume_tailor.name}:{job_id}")
                tailored = await self.resume_tailor.tailor(
                    resume, job, budget=ctx.budget, job_id=job_id, attempt=attempt,
                )
                agent_log(
                    ctx.run_id, self.resume_tailor.name, "ok", job_id=job_id,
                    tier=self.resume_tailor.tier, tokens=tailored.tokens, attempt=attempt,
                )

                ctx.checkpoint(f"{self.cover_letter_writer.name}:{job_id}")
                letter = await self.cover_letter_writer.write(
                    resume, job, tailored.data, budget=ctx.budget, job_id=job_id, attempt=attempt,
                )
                agent_log(
                    ctx.run_id, self.cover_letter_writer.name, "ok", job_id=job_id,
                    tier=self.cover_letter_writer.tier, tokens=letter.tokens, attempt=attempt,
                )

                ctx.checkpoint(f"{self.truth_guard.name}:{job_id}")
                guard = await self.truth_guard.check(
                    resume, tailored.data, letter.data,
                    budget=ctx.budget, job_id=job_id, attempt=attempt,
                )
            except RunTimeoutError:
                raise
            except BudgetExceededError:
                ctx.mark_partial()
                agent_log(ctx.run_id, "tailor_job", "budget_exceeded", job_id=job_id, attempt=attempt)
                ctx.note(f"budget exceeded during tailoring job {job_id} (attempt {attempt})")
                return None
            except Exception as exc:
                agent_log(ctx.run_id, "tailor_job", "error", job_id=job_id, attempt=attempt, err=repr(exc))
                ctx.note(f"job {job_id}: tailoring error (attempt {attempt}): {exc}")
                return None

            report = guard.data
            agent_log(
                ctx.run_id, self.truth_guard.name, "ok", job_id=job_id,
                tier=self.truth_guard.tier, tokens=guard.tokens, attempt=attempt,
                verdict=report.verdict, issue_count=len(report.issues),
                confidence=report.confidence,
            )
            output = TailoredOutput(
                job_id=job_id,
                tailored_resume=tailored.data,
                cover_letter=letter.data,
                guard_report=report,
            )
            if report.passed:
                return output
            if attempt == MAX_TAILOR_ATTEMPTS:
                ctx.note(
                    f"job {job_id}: guard FAIL on retry (attempt {attempt}); returning with "
                    f"{len(report.issues)} unresolved issue(s)"
                )
                logger.warning(
                    "Guard FAIL after max retries: run_id=%s job_id=%s issues=%d",
                    ctx.run_id, job_id, len(report.issues),
                )
                return output

            ctx.note(f"job {job_id}: guard FAIL (attempt {attempt}), retrying tailor + cover letter + guard")
            logger.warning(
                "Guard FAIL, retrying: run_id=%s job_id=%s issues=%d",
                ctx.run_id, job_id, len(report.issues),
            )
        return None

    # --- helpers ---

    def _resolve_limits(self, limits: RunLimits) -> tuple[int, int, int]:
        max_jobs = limits.max_jobs or self.limits.max_jobs
        max_tailored = limits.max_tailored_jobs or self.limits.max_tailored_jobs
        token_budget = limits.token_budget_total or self.limits.token_budget_total
        if token_budget > self.limits.token_budget_max:
            logger.warning(
                "Token budget %d above cap %d; using the cap",
                token_budget, self.limits.token_budget_max,
            )
            token_budget = self.limits.token_budget_max
        return max_jobs, max_tailored, token_budget

    @staticmethod
    def _assign_job_ids(jobs: list[JobInput], ctx: RunContext) -> list[tuple[str, JobInput]]:
        """Give every job a string key; missing ids get an ephemeral UUID.

        A repeated id keeps its first posting. Later ones are dropped with a note.
        """
        keyed: dict[str, JobInput] = {}
        for job in jobs:
            job_id = job.job_id or str(uuid.uuid4())
            if job_id in keyed:
                agent_log(ctx.run_id, "assign_job_ids", "skipped", job_id=job_id, reason="duplicate_id")
                ctx.note(f"job {job_id}: duplicate id, skipped")
                continue
            keyed[job_id] = job
        return list(keyed.items())

    @staticmethod
    def _output(
        ctx: RunContext,
        resume: ResumeProfile,
        ranked: list[RankedJob] | None = None,
        tailored: list[TailoredOutput] | None = None,
    ) -> RunOutput:
        return RunOutput(
            run_id=ctx.run_id,
            status=ctx.status,
            budget=ctx.budget.to_info(),
            resume=resume,
            ranked_jobs=ranked or [],
            tailored_outputs=tailored or [],
            notes_for_ui=ctx.notes,
        )

    def _record(self, method: str, *args) -> None:
        """Forward an audit event to the recorder; never fails the run."""
        if self.recorder is None:
            return
        try:
            getattr(self.recorder, method)(*args)
        except Exception:
            logger.warning("Run recorder %s failed (non-fatal)", method, exc_info=True)
