"""Tests for pipeline agents with mocked LLM."""

import json

import pytest

from talent_orchestrator.clients.llm_client import LLMResponse
from talent_orchestrator.errors import (
    BudgetExceededError,
    SchemaValidationError,
    UnparseableOutputError,
)
from talent_orchestrator.models.guard import GuardReport
from talent_orchestrator.models.job import JobPosting
from talent_orchestrator.models.match import MatchResult
from talent_orchestrator.models.resume import ResumeProfile
from talent_orchestrator.models.run import CandidateHints
from talent_orchestrator.models.tailoring import CoverLetterPack, TailoredResume
from talent_orchestrator.pipeline.base import usage_tokens
from talent_orchestrator.pipeline.budget import Budget, estimate_tokens
from talent_orchestrator.pipeline.cover_letter_writer import CoverLetterWriter
from talent_orchestrator.pipeline.job_parser import JobParser
from talent_orchestrator.pipeline.match_scorer import MatchScorer
from talent_orchestrator.pipeline.resume_parser import PROMPT_OVERHEAD, ResumeParser
from talent_orchestrator.pipeline.resume_tailor import ResumeTailor
from talent_orchestrator.pipeline.truth_guard import TruthGuard
from talent_orchestrator.pipeline.validators import validate_agent_output


def _reply(data, input_tokens=100, output_tokens=50) -> LLMResponse:
    text = data if isinstance(data, str) else json.dumps(data)
    return LLMResponse(text=text, input_tokens=input_tokens, output_tokens=output_tokens)


class TestResumeParser:
    @pytest.mark.asyncio
    async def test_parse(self, mock_llm_client, sample_resume_text, resume_json):
        mock_llm_client.complete.return_value = _reply(resume_json)
        budget = Budget(10_000)
        result = await ResumeParser(mock_llm_client).parse(sample_resume_text, budget=budget)

        assert isinstance(result.data, ResumeProfile)
        assert result.data.name == "Ada Obi"
        assert result.tokens == 150
        assert budget.used == 150

    @pytest.mark.asyncio
    async def test_prompt_includes_resume(self, mock_llm_client, sample_resume_text, resume_json):
        mock_llm_client.complete.return_value = _reply(resume_json)
        await ResumeParser(mock_llm_client).parse(sample_resume_text, budget=Budget(10_000))

        args, kwargs = mock_llm_client.complete.call_args
        assert "ResumeParserAgent" in args[0]
        assert "Paystack" in args[1]
        assert kwargs["tier"] == "fast"

    @pytest.mark.asyncio
    async def test_refused_before_call(self, mock_llm_client, sample_resume_text):
        """Admission uses the text estimate plus prompt overhead."""
        estimate = estimate_tokens(sample_resume_text) + PROMPT_OVERHEAD
        budget = Budget(estimate - 1)
        with pytest.raises(BudgetExceededError, match="ResumeParserAgent"):
            await ResumeParser(mock_llm_client).parse(sample_resume_text, budget=budget)
        mock_llm_client.complete.assert_not_called()
        assert budget.used == 0

    @pytest.mark.asyncio
    async def test_fenced_output(self, mock_llm_client, sample_resume_text, resume_json):
        mock_llm_client.complete.return_value = _reply(f"```json\n{json.dumps(resume_json)}\n```")
        result = await ResumeParser(mock_llm_client).parse(sample_resume_text, budget=Budget(10_000))
        assert result.data.email == "ada.obi@example.com"

    @pytest.mark.asyncio
    async def test_unparseable_output_still_consumes(self, mock_llm_client, sample_resume_text):
        mock_llm_client.complete.return_value = _reply("Sorry, I cannot help with that.")
        budget = Budget(10_000)
        with pytest.raises(UnparseableOutputError):
            await ResumeParser(mock_llm_client).parse(sample_resume_text, budget=budget)
        assert budget.used == 150


class TestJobParser:
    @pytest.mark.asyncio
    async def test_parse(self, mock_llm_client, sample_job_text, job_json):
        mock_llm_client.complete.return_value = _reply(job_json)
        result = await JobParser(mock_llm_client).parse(sample_job_text, budget=Budget(10_000), job_id="j1")

        assert isinstance(result.data, JobPosting)
        assert result.data.visa_sponsorship == "NO"
        assert result.data.eligible_countries == ["NG", "KE", "ZA"]

    @pytest.mark.asyncio
    async def test_schema_error_names_field(self, mock_llm_client, sample_job_text, job_json):
        mock_llm_client.complete.return_value = _reply({**job_json, "eligible_countries": ["Nigeria"]})
        budget = Budget(10_000)
        with pytest.raises(SchemaValidationError) as exc_info:
            await JobParser(mock_llm_client).parse(sample_job_text, budget=budget, job_id="j1")

        err = exc_info.value
        assert err.field_path.startswith("eligible_countries")
        assert err.job_id == "j1"
        assert "JobParserAgent:j1" in str(err)
        assert budget.used == 150


class TestMatchScorer:
    @pytest.mark.asyncio
    async def test_score(self, mock_llm_client, sample_resume, sample_job, match_json):
        mock_llm_client.complete.return_value = _reply(match_json)
        result = await MatchScorer(mock_llm_client).score(
            sample_resume, sample_job, budget=Budget(10_000), job_id="j1",
        )
        assert isinstance(result.data, MatchResult)
        assert result.data.score == 82
        assert mock_llm_client.complete.call_args.kwargs["max_tokens"] == 1024

    @pytest.mark.asyncio
    async def test_hints_in_prompt(self, mock_llm_client, sample_resume, sample_job, match_json):
        mock_llm_client.complete.return_value = _reply(match_json)
        hints = CandidateHints(location="Lagos", work_auth="citizen")
        await MatchScorer(mock_llm_client).score(
            sample_resume, sample_job, hints, budget=Budget(10_000), job_id="j1",
        )
        content = mock_llm_client.complete.call_args.args[1]
        assert "CANDIDATE PROFILE HINTS" in content
        assert "citizen" in content

    @pytest.mark.asyncio
    async def test_fixed_estimate(self, mock_llm_client, sample_resume, sample_job):
        budget = Budget(799)
        with pytest.raises(BudgetExceededError):
            await MatchScorer(mock_llm_client).score(sample_resume, sample_job, budget=budget, job_id="j1")
        mock_llm_client.complete.assert_not_called()


class TestTailoringAgents:
    @pytest.mark.asyncio
    async def test_tailor_uses_quality_tier(self, mock_llm_client, sample_resume, sample_job, tailored_json):
        mock_llm_client.complete.return_value = _reply(tailored_json)
        result = await ResumeTailor(mock_llm_client).tailor(
            sample_resume, sample_job, budget=Budget(10_000), job_id="j1",
        )
        assert isinstance(result.data, TailoredResume)
        kwargs = mock_llm_client.complete.call_args.kwargs
        assert kwargs["tier"] == "quality"
        assert kwargs["max_tokens"] == 4096

    @pytest.mark.asyncio
    async def test_tailor_refusal_label_has_attempt(self, mock_llm_client, sample_resume, sample_job):
        budget = Budget(2_999)
        with pytest.raises(BudgetExceededError):
            await ResumeTailor(mock_llm_client).tailor(
                sample_resume, sample_job, budget=budget, job_id="j1", attempt=2,
            )
        assert budget.stopped_reason == "token budget exceeded before ResumeTailorAgent:j1:a2"

    @pytest.mark.asyncio
    async def test_cover_letter(
        self, mock_llm_client, sample_resume, sample_job, tailored_json, cover_letter_json,
    ):
        mock_llm_client.complete.return_value = _reply(cover_letter_json)
        tailored = TailoredResume.model_validate(tailored_json)
        result = await CoverLetterWriter(mock_llm_client).write(
            sample_resume, sample_job, tailored, budget=Budget(10_000), job_id="j1",
        )
        assert isinstance(result.data, CoverLetterPack)
        assert "TAILORED RESUME" in mock_llm_client.complete.call_args.args[1]

    @pytest.mark.asyncio
    async def test_guard_fail(
        self, mock_llm_client, sample_resume, tailored_json, cover_letter_json, guard_fail_json,
    ):
        mock_llm_client.complete.return_value = _reply(guard_fail_json)
        result = await TruthGuard(mock_llm_client).check(
            sample_resume,
            TailoredResume.model_validate(tailored_json),
            CoverLetterPack.model_validate(cover_letter_json),
            budget=Budget(10_000),
            job_id="j1",
        )
        assert isinstance(result.data, GuardReport)
        assert not result.data.passed
        assert result.data.issues[0].severity == "high"


class TestUsageTokens:
    def test_reported_usage(self):
        assert usage_tokens(LLMResponse(text="x", input_tokens=10, output_tokens=5), "sys", "c") == 15

    def test_estimates_when_missing(self):
        response = LLMResponse(text="a" * 40)
        assert usage_tokens(response, "s" * 20, "c" * 20) == 10 + 10

    def test_mixed(self):
        response = LLMResponse(text="a" * 40, input_tokens=7)
        assert usage_tokens(response, "sys", "content") == 7 + 10


class TestValidateAgentOutput:
    def test_valid(self, match_json):
        result = validate_agent_output(MatchResult, match_json, "MatchScorerAgent")
        assert result.score == 82

    def test_missing_field(self, match_json):
        data = dict(match_json)
        del data["seniority_match"]
        with pytest.raises(SchemaValidationError) as exc_info:
            validate_agent_output(MatchResult, data, "MatchScorerAgent", "j1")
        assert exc_info.value.field_path == "seniority_match"
        assert exc_info.value.agent == "MatchScorerAgent"

    def test_nested_path(self, resume_json):
        data = {**resume_json, "experience": [{"title": "Engineer"}]}
        with pytest.raises(SchemaValidationError) as exc_info:
            validate_agent_output(ResumeProfile, data, "ResumeParserAgent")
        assert exc_info.value.field_path == "experience.0.company"
