"""Agent 5: Cover Letter Writer - Three truthful paragraphs for one job."""

from __future__ import annotations

from talent_orchestrator.models.job import JobPosting
from talent_orchestrator.models.resume import ResumeProfile
from talent_orchestrator.models.tailoring import CoverLetterPack, TailoredResume
from talent_orchestrator.pipeline.base import Agent, AgentResult
from talent_orchestrator.pipeline.budget import Budget

SYSTEM_PROMPT = """\
You are CoverLetterAgent. Write a compelling, truthful cover letter.

NON-NEGOTIABLE:
- Use only facts from the resume. No fabrication of projects, metrics, or roles.
- 3 paragraphs: (1) hook + role fit, (2) key evidence from experience,
  (3) motivation + call-to-action.
- body must contain exactly 3 paragraphs separated by double newlines (\\n\\n).
  Do not include the salutation or closing in the body.
- The body MUST be 200-300 words. Put the exact word count in word_count.
- salutation addresses the hiring manager by title if known from the job JSON,
  else "Dear Hiring Manager,".
- tone is one of "professional", "warm", "direct".
- Return ONLY valid JSON - no prose, no markdown fences.

Output this exact schema:
{
  "subject_line": string,
  "salutation": string,
  "body": string,
  "closing": string,
  "tone": "professional"|"warm"|"direct",
  "word_count": number
}"""

ESTIMATED_COST = 1500


class CoverLetterWriter(Agent[CoverLetterPack]):
    name = "CoverLetterAgent"
    system_prompt = SYSTEM_PROMPT
    output_model = CoverLetterPack
    tier = "quality"
    max_tokens = 2048

    async def write(
        self,
        resume: ResumeProfile,
        job: JobPosting,
        tailored: TailoredResume,
        *,
        budget: Budget,
        job_id: str | None = None,
        attempt: int = 1,
    ) -> AgentResult[CoverLetterPack]:
        content = "\n".join([
            "CANDIDATE RESUME JSON:",
            resume.model_dump_json(indent=2),
            "\nTARGET JOB JSON:",
            job.model_dump_json(indent=2),
            "\nTAILORED RESUME (context):",
            tailored.model_dump_json(indent=2),
        ])
        return await self._invoke(
            content,
            budget=budget,
            estimated_cost=ESTIMATED_COST,
            job_id=job_id,
            label=f"{self._label(job_id)}:a{attempt}",
        )
