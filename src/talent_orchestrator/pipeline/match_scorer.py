"""Agent 3: Match Scorer - Scores candidate/job fit with a fixed rubric."""

from __future__ import annotations

from talent_orchestrator.models.job import JobPosting
from talent_orchestrator.models.match import MatchResult
from talent_orchestrator.models.resume import ResumeProfile
from talent_orchestrator.models.run import CandidateHints
from talent_orchestrator.pipeline.base import Agent, AgentResult
from talent_orchestrator.pipeline.budget import Budget

SYSTEM_PROMPT = """\
You are MatchScorerAgent. Score the fit between a candidate's resume and a job.
Do not inflate scores to help a candidate.

SCORING RUBRIC (compute in this exact order):

1. must_have_coverage_pct = (# must_have_skills satisfied / total must_have_skills) * 100
   nice_to_have_coverage_pct = (# nice_to_have_skills satisfied / total nice_to_have_skills) * 100
   If a list is empty, treat coverage as 100.

2. skill_match_pct = (must_have_coverage_pct * 0.7) + (nice_to_have_coverage_pct * 0.3)

3. seniority_match_score: "match" -> 100, "over" -> 60, "under" -> 40, "unknown" -> 50

4. location_auth_score (out of 100):
   location_match = true -> +50, work_auth_ok = true -> +30, visa_ok = true -> +20

5. score = (skill_match_pct * 0.50) + (seniority_match_score * 0.20)
         + (location_auth_score * 0.20) + (other_score * 0.10)
   other_score: 100 if years_of_experience and education broadly fit; 50 if uncertain;
   0 if clearly mismatched. Round score to the nearest integer.

FIELD DEFINITIONS:
- location_match: true if candidate location overlaps job location OR job is remote.
- work_auth_ok: true if the candidate's work_auth_status is compatible with the job's
  eligible countries OR status is unknown.
- visa_ok: true if visa_sponsorship = "YES" OR candidate does not need sponsorship.
- recommendation: "apply" if score >= 70, "stretch" if 55-69, "skip" if < 55.
- explanation: 2-3 sentences. Be specific. No fabrication.

Return ONLY valid JSON - no prose, no markdown fences.

Output this exact schema:
{
  "score": number,
  "must_have_coverage_pct": number,
  "nice_to_have_coverage_pct": number,
  "matched_skills": string[],
  "missing_must_haves": string[],
  "missing_nice_to_haves": string[],
  "location_match": boolean,
  "work_auth_ok": boolean,
  "visa_ok": boolean,
  "seniority_match": "match"|"over"|"under"|"unknown",
  "recommendation": "apply"|"stretch"|"skip",
  "explanation": string
}"""

ESTIMATED_COST = 800


class MatchScorer(Agent[MatchResult]):
    name = "MatchScorerAgent"
    system_prompt = SYSTEM_PROMPT
    output_model = MatchResult
    tier = "fast"
    max_tokens = 1024

    async def score(
        self,
        resume: ResumeProfile,
        job: JobPosting,
        hints: CandidateHints | None = None,
        *,
        budget: Budget,
        job_id: str | None = None,
    ) -> AgentResult[MatchResult]:
        """Score how well the resume fits one parsed job."""
        parts = [
            "CANDIDATE RESUME JSON:",
            resume.model_dump_json(indent=2),
            "\nJOB JSON:",
            job.model_dump_json(indent=2),
        ]
        if hints is not None:
            parts += ["\nCANDIDATE PROFILE HINTS:", hints.model_dump_json(indent=2)]
        return await self._invoke(
            "\n".join(parts),
            budget=budget,
            estimated_cost=ESTIMATED_COST,
            job_id=job_id,
        )
