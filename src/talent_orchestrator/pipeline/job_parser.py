"""Agent 2: Job Parser - Extracts structured requirements from a job posting."""

from __future__ import annotations

from talent_orchestrator.models.job import JobPosting
from talent_orchestrator.pipeline.base import Agent, AgentResult
from talent_orchestrator.pipeline.budget import Budget, estimate_tokens

SYSTEM_PROMPT = """\
You are JobParserAgent. Your only job is to extract structured data from a job posting.

NON-NEGOTIABLE:
- Extract only what is explicitly stated. Do not infer or fabricate.
- Separate must_have_skills (words like "required", "must", "essential") from
  nice_to_have_skills ("preferred", "nice to have", "bonus", "plus").
- If salary is not stated, use null.
- eligible_countries: use ISO-3166 alpha-2 codes only. Empty array if not specified.
- Return ONLY valid JSON - no prose, no markdown fences.

Output this exact schema:
{
  "title": string|null,
  "company": string|null,
  "location": string|null,
  "type": "Full-time"|"Part-time"|"Contract"|"Freelance"|"Internship"|null,
  "seniority": "Junior"|"Mid-level"|"Senior"|"Lead"|"Executive"|null,
  "salary_min": number|null,
  "salary_max": number|null,
  "currency": string|null,
  "must_have_skills": string[],
  "nice_to_have_skills": string[],
  "visa_sponsorship": "YES"|"NO"|"UNKNOWN",
  "relocation_assistance": boolean,
  "eligible_countries": string[],
  "description": string|null,
  "requirements": string[],
  "responsibilities": string[]
}"""

PROMPT_OVERHEAD = 600


class JobParser(Agent[JobPosting]):
    name = "JobParserAgent"
    system_prompt = SYSTEM_PROMPT
    output_model = JobPosting
    tier = "fast"
    max_tokens = 2048

    async def parse(
        self, raw_text: str, *, budget: Budget, job_id: str | None = None
    ) -> AgentResult[JobPosting]:
        """Parse one raw job posting."""
        return await self._invoke(
            f"JOB POSTING:\n{raw_text}",
            budget=budget,
            estimated_cost=estimate_tokens(raw_text) + PROMPT_OVERHEAD,
            job_id=job_id,
        )
