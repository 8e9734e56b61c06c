"""Agent 1: Resume Parser - Extracts explicit facts from resume text."""

from __future__ import annotations

from talent_orchestrator.models.resume import ResumeProfile
from talent_orchestrator.pipeline.base import Agent, AgentResult
from talent_orchestrator.pipeline.budget import Budget, estimate_tokens

SYSTEM_PROMPT = """\
You are ResumeParserAgent. Your only job is to extract structured data from a resume.

NON-NEGOTIABLE:
- Extract only what is explicitly written. Never infer, add, or fabricate.
- If a field is not present, use null or an empty array.
- Do NOT infer work_auth_status from nationality or location.
- Return ONLY valid JSON - no prose, no markdown fences.

Output this exact schema:
{
  "name": string|null,
  "email": string|null,
  "phone": string|null,
  "location": string|null,
  "headline": string|null,
  "summary": string|null,
  "years_of_experience": number|null,
  "skills": string[],
  "experience": [
    {
      "company": string,
      "title": string,
      "start_date": string|null,
      "end_date": string|null,
      "description": string|null,
      "metrics": string[],
      "technologies": string[]
    }
  ],
  "education": [
    {
      "institution": string,
      "degree": string|null,
      "field": string|null,
      "graduation_year": string|null
    }
  ],
  "languages": string[],
  "certifications": string[],
  "work_auth_status": string|null
}"""

PROMPT_OVERHEAD = 600


class ResumeParser(Agent[ResumeProfile]):
    name = "ResumeParserAgent"
    system_prompt = SYSTEM_PROMPT
    output_model = ResumeProfile
    tier = "fast"
    max_tokens = 2048

    async def parse(self, resume_text: str, *, budget: Budget) -> AgentResult[ResumeProfile]:
        """Parse resume text into a ResumeProfile."""
        return await self._invoke(
            f"RESUME TEXT:\n{resume_text}",
            budget=budget,
            estimated_cost=estimate_tokens(resume_text) + PROMPT_OVERHEAD,
        )
