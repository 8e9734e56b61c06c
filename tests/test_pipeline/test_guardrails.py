"""Tests for output size caps."""

from talent_orchestrator.config import GuardrailConfig
from talent_orchestrator.models.guard import GuardReport
from talent_orchestrator.models.job import JobPosting
from talent_orchestrator.models.match import MatchResult
from talent_orchestrator.models.run import (
    BudgetInfo,
    RankedJob,
    RunOutput,
    TailoredOutput,
)
from talent_orchestrator.models.tailoring import CoverLetterPack, TailoredResume
from talent_orchestrator.pipeline.guardrails import ELLIPSIS, apply_guardrails, clip


def _output(match_json, tailored_json, cover_letter_json, *, size: int) -> RunOutput:
    long_text = "x" * size
    tailored = TailoredResume.model_validate({
        **tailored_json,
        "summary": long_text,
        "ats_keywords": [f"kw{i}" for i in range(40)],
        "change_log": [f"change {i}" for i in range(60)],
        "experience": [
            {"company": "Paystack", "title": "Engineer", "period": "2021", "bullets": [long_text, "short"]},
        ],
    })
    return RunOutput(
        run_id="run-1",
        status="ok",
        budget=BudgetInfo(token_budget_total=10_000, token_used_estimate=100),
        ranked_jobs=[
            RankedJob(
                job_id="j1",
                job=JobPosting(title="Engineer", description=long_text),
                match=MatchResult.model_validate({**match_json, "explanation": long_text}),
            ),
        ],
        tailored_outputs=[
            TailoredOutput(
                job_id="j1",
                tailored_resume=tailored,
                cover_letter=CoverLetterPack.model_validate({**cover_letter_json, "body": long_text}),
                guard_report=GuardReport(verdict="PASS", confidence=0.9),
            ),
        ],
    )


class TestClip:
    def test_short_text_untouched(self):
        assert clip("hello", 10) == "hello"

    def test_exact_limit_untouched(self):
        assert clip("a" * 10, 10) == "a" * 10

    def test_long_text_ends_with_ellipsis(self):
        clipped = clip("a" * 20, 10)
        assert len(clipped) == 10
        assert clipped.endswith(ELLIPSIS)

    def test_idempotent(self):
        once = clip("a" * 20, 10)
        assert clip(once, 10) == once


class TestApplyGuardrails:
    def test_caps_every_field(self, match_json, tailored_json, cover_letter_json):
        output = apply_guardrails(_output(match_json, tailored_json, cover_letter_json, size=5_000))
        limits = GuardrailConfig()

        ranked = output.ranked_jobs[0]
        assert len(ranked.job.description) == limits.max_job_description
        assert len(ranked.match.explanation) == limits.max_explanation

        tailored = output.tailored_outputs[0]
        assert len(tailored.cover_letter.body) == limits.max_cover_letter_body
        assert len(tailored.tailored_resume.summary) == limits.max_summary
        assert len(tailored.tailored_resume.ats_keywords) == limits.max_ats_keywords
        assert len(tailored.tailored_resume.change_log) == limits.max_change_log
        bullets = tailored.tailored_resume.experience[0].bullets
        assert len(bullets[0]) == limits.max_bullet
        assert bullets[1] == "short"

    def test_keeps_list_order(self, match_json, tailored_json, cover_letter_json):
        output = apply_guardrails(_output(match_json, tailored_json, cover_letter_json, size=10))
        assert output.tailored_outputs[0].tailored_resume.ats_keywords[:2] == ["kw0", "kw1"]

    def test_small_fields_untouched(self, match_json, tailored_json, cover_letter_json):
        output = apply_guardrails(_output(match_json, tailored_json, cover_letter_json, size=10))
        assert output.ranked_jobs[0].job.description == "x" * 10
        assert output.tailored_outputs[0].cover_letter.body == "x" * 10

    def test_second_pass_is_noop(self, match_json, tailored_json, cover_letter_json):
        output = apply_guardrails(_output(match_json, tailored_json, cover_letter_json, size=5_000))
        first = output.model_dump()
        assert apply_guardrails(output).model_dump() == first

    def test_custom_limits(self, match_json, tailored_json, cover_letter_json):
        limits = GuardrailConfig(max_explanation=20)
        output = apply_guardrails(_output(match_json, tailored_json, cover_letter_json, size=100), limits)
        assert len(output.ranked_jobs[0].match.explanation) == 20

    def test_missing_description(self, match_json):
        output = RunOutput(
            run_id="run-1",
            status="ok",
            budget=BudgetInfo(token_budget_total=10_000, token_used_estimate=0),
            ranked_jobs=[
                RankedJob(job_id="j1", job=JobPosting(), match=MatchResult.model_validate(match_json)),
            ],
        )
        assert apply_guardrails(output).ranked_jobs[0].job.description is None
