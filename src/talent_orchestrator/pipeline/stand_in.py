"""Deterministic stand-in output for integration tests; makes no model calls."""

from __future__ import annotations

from talent_orchestrator.models.guard import GuardReport
from talent_orchestrator.models.job import JobPosting
from talent_orchestrator.models.match import MatchResult
from talent_orchestrator.models.resume import (
    ResumeEducation,
    ResumeExperience,
    ResumeProfile,
)
from talent_orchestrator.models.run import (
    BudgetInfo,
    RankedJob,
    RunInput,
    RunOutput,
    RunType,
    TailoredOutput,
)
from talent_orchestrator.models.tailoring import (
    CoverLetterPack,
    TailoredExperience,
    TailoredResume,
)

MAX_STAND_IN_JOBS = 3

TOKENS_USED: dict[RunType, int] = {
    RunType.RESUME_REVIEW: 100,
    RunType.JOB_MATCH: 500,
    RunType.APPLY_PACK: 2000,
}


def stand_in_resume() -> ResumeProfile:
    return ResumeProfile(
        name="Test User",
        email="test@example.com",
        location="Lagos, Nigeria",
        headline="Stand-in Candidate",
        summary="Stand-in resume for integration testing.",
        years_of_experience=3,
        skills=["JavaScript", "TypeScript", "React"],
        experience=[
            ResumeExperience(
                company="Stand-in Corp",
                title="Software Engineer",
                start_date="2021-01",
                description="Built stand-in features",
                metrics=["Increased performance by 30%"],
                technologies=["JavaScript", "React"],
            ),
        ],
        education=[
            ResumeEducation(
                institution="Stand-in University",
                degree="BSc",
                field="Computer Science",
                graduation_year="2020",
            ),
        ],
        languages=["English"],
    )


def stand_in_job() -> JobPosting:
    return JobPosting(
        title="Stand-in Job Title",
        company="Stand-in Company",
        location="Remote",
        type="Full-time",
        seniority="Mid-level",
        must_have_skills=["JavaScript"],
        nice_to_have_skills=["Python"],
        description="Stand-in job description",
    )


def stand_in_match(job_id: str) -> MatchResult:
    return MatchResult(
        score=75,
        must_have_coverage_pct=80,
        nice_to_have_coverage_pct=60,
        matched_skills=["JavaScript", "TypeScript"],
        missing_nice_to_haves=["Python"],
        location_match=True,
        work_auth_ok=True,
        visa_ok=True,
        seniority_match="match",
        recommendation="apply",
        explanation=f"Stand-in match explanation for job {job_id}",
    )


def stand_in_tailored(job_id: str) -> TailoredOutput:
    return TailoredOutput(
        job_id=job_id,
        tailored_resume=TailoredResume(
            summary=f"Stand-in tailored resume for job {job_id}.",
            skills=["JavaScript", "TypeScript", "React"],
            experience=[
                TailoredExperience(
                    company="Stand-in Corp",
                    title="Software Engineer",
                    period="2021-01 - Present",
                    bullets=["Built stand-in features for job requirements"],
                ),
            ],
            ats_keywords=["JavaScript", "TypeScript"],
            change_log=["Tailored summary for role"],
        ),
        cover_letter=CoverLetterPack(
            subject_line="Application for Stand-in Position",
            salutation="Dear Hiring Manager,",
            body=(
                "I am excited to apply for this stand-in position. My experience with "
                "JavaScript and TypeScript makes me a strong candidate."
            ),
            closing="Thank you for your consideration.",
            tone="professional",
            word_count=20,
        ),
        guard_report=GuardReport(verdict="PASS", confidence=0.99),
    )


def build_stand_in_output(run_input: RunInput, run_id: str, token_budget_total: int) -> RunOutput:
    """Canned output shaped like a real run of the same type."""
    run_type = run_input.run_type
    budget = BudgetInfo(
        token_budget_total=token_budget_total,
        token_used_estimate=TOKENS_USED[run_type],
    )
    output = RunOutput(
        run_id=run_id,
        status="ok",
        budget=budget,
        resume=stand_in_resume(),
        notes_for_ui=[f"[stand-in] {run_type.value}"],
    )
    if run_type is RunType.RESUME_REVIEW:
        return output

    job_ids = [
        job.job_id or f"stand-in-{i}"
        for i, job in enumerate(run_input.jobs[:MAX_STAND_IN_JOBS], start=1)
    ]
    output.ranked_jobs = [
        RankedJob(job_id=job_id, job=stand_in_job(), match=stand_in_match(job_id))
        for job_id in job_ids
    ]
    if run_type is RunType.APPLY_PACK:
        output.tailored_outputs = [stand_in_tailored(job_id) for job_id in job_ids]
    return output
