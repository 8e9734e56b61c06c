"""Agent 4: Resume Tailor - Rephrases existing resume facts toward one job."""

from __future__ import annotations

from talent_orchestrator.models.job import JobPosting
from talent_orchestrator.models.resume import ResumeProfile
from talent_orchestrator.models.tailoring import TailoredResume
from talent_orchestrator.pipeline.base import Agent, AgentResult
from talent_orchestrator.pipeline.budget import Budget

SYSTEM_PROMPT = """\
You are ResumeTailorAgent. Rewrite the candidate's resume to target a specific job.

NON-NEGOTIABLE:
- Only use skills, experience, and facts already present in the resume.
- Never add employers, titles, dates, metrics, tools, or certifications not in the original.
- If a metric would strengthen a bullet but is missing, write a placeholder such as
  "[X%]" or "[N projects]" and add an entry for it to the warnings array.
- Keep ats_keywords strictly to terms found in the job description.
- change_log must have one entry per modified bullet or section.
- Return ONLY valid JSON - no prose, no markdown fences.

Output this exact schema:
{
  "summary": string,
  "skills": string[],
  "experience": [
    {
      "company": string,
      "title": string,
      "period": string,
      "bullets": string[]
    }
  ],
  "ats_keywords": string[],
  "warnings": string[],
  "change_log": string[]
}"""

ESTIMATED_COST = 3000


class ResumeTailor(Agent[TailoredResume]):
    name = "ResumeTailorAgent"
    system_prompt = SYSTEM_PROMPT
    output_model = TailoredResume
    tier = "quality"
    max_tokens = 4096

    async def tailor(
        self,
        resume: ResumeProfile,
        job: JobPosting,
        *,
        budget: Budget,
        job_id: str | None = None,
        attempt: int = 1,
    ) -> AgentResult[TailoredResume]:
        """Rewrite the resume for one job using only facts it already contains."""
        content = "\n".join([
            "CANDIDATE RESUME JSON:",
            resume.model_dump_json(indent=2),
            "\nTARGET JOB JSON:",
            job.model_dump_json(indent=2),
        ])
        return await self._invoke(
            content,
            budget=budget,
            estimated_cost=ESTIMATED_COST,
            job_id=job_id,
            label=f"{self._label(job_id)}:a{attempt}",
        )
