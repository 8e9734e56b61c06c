"""Tests for the stand-in pipeline."""

from talent_orchestrator.models.run import JobInput, RunInput, RunType
from talent_orchestrator.pipeline.stand_in import MAX_STAND_IN_JOBS, build_stand_in_output


def _input(run_type: RunType, jobs: list[JobInput] | None = None) -> RunInput:
    return RunInput(run_type=run_type, resume_text="resume", jobs=jobs or [])


class TestStandIn:
    def test_resume_review(self):
        output = build_stand_in_output(_input(RunType.RESUME_REVIEW), "run-1", 60_000)
        assert output.status == "ok"
        assert output.resume is not None
        assert output.ranked_jobs == []
        assert output.tailored_outputs == []
        assert output.budget.token_used_estimate == 100
        assert output.notes_for_ui == ["[stand-in] resume_review"]

    def test_job_match_caps_jobs(self):
        jobs = [JobInput(job_id=f"job-{i}", raw_text="text") for i in range(5)]
        output = build_stand_in_output(_input(RunType.JOB_MATCH, jobs), "run-1", 60_000)
        assert len(output.ranked_jobs) == MAX_STAND_IN_JOBS
        assert [r.job_id for r in output.ranked_jobs] == ["job-0", "job-1", "job-2"]
        assert output.tailored_outputs == []
        assert output.budget.token_used_estimate == 500

    def test_generated_job_ids(self):
        jobs = [JobInput(raw_text="text"), JobInput(raw_text="text")]
        output = build_stand_in_output(_input(RunType.JOB_MATCH, jobs), "run-1", 60_000)
        assert [r.job_id for r in output.ranked_jobs] == ["stand-in-1", "stand-in-2"]

    def test_apply_pack(self):
        jobs = [JobInput(job_id="j1", raw_text="text")]
        output = build_stand_in_output(_input(RunType.APPLY_PACK, jobs), "run-1", 60_000)
        assert [t.job_id for t in output.tailored_outputs] == ["j1"]
        assert output.tailored_outputs[0].guard_report.passed
        assert output.budget.token_used_estimate == 2_000
        match = output.ranked_jobs[0].match
        assert match.recommendation == "apply"
