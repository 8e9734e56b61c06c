"""Agent 6: Truth Guard - Audits generated materials against the original resume."""

from __future__ import annotations

import logging

from talent_orchestrator.models.guard import GuardReport
from talent_orchestrator.models.resume import ResumeProfile
from talent_orchestrator.models.tailoring import CoverLetterPack, TailoredResume
from talent_orchestrator.pipeline.base import Agent, AgentResult
from talent_orchestrator.pipeline.budget import Budget

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """\
You are TruthConsistencyGuardAgent. Audit a tailored resume and cover letter for fabrications.

YOUR JOB:
- Compare the tailored resume and cover letter against the original resume.
- Flag any employer, title, date, metric, tool, certification, or claim that does NOT
  appear in the original as a "fabrication".
- Flag exaggerations (e.g. "led a team of 50" when the original says "worked in a team").
- Flag statements that contradict each other or the original as "inconsistency".
- A tool or technology claimed in the tailored resume but absent from the original
  experience or skills is a "fabrication" with severity "high".
- Items in brackets such as "[X%]" or "[N projects]" are placeholders: list every one of
  them in requires_user_confirmation, never in issues.
- verdict: "PASS" only if no high or medium severity issue remains; otherwise "FAIL".
- confidence: your certainty in the verdict (0.0-1.0). If the original has fewer than
  3 jobs, confidence is at most 0.7.

Return ONLY valid JSON - no prose, no markdown fences.

Output this exact schema:
{
  "verdict": "PASS"|"FAIL",
  "issues": [
    {
      "type": "fabrication"|"inconsistency"|"exaggeration",
      "field": string,
      "original_value": string,
      "fabricated_value": string,
      "severity": "high"|"medium"|"low"
    }
  ],
  "requires_user_confirmation": string[],
  "confidence": number
}"""

ESTIMATED_COST = 1500


class TruthGuard(Agent[GuardReport]):
    name = "TruthConsistencyGuardAgent"
    system_prompt = SYSTEM_PROMPT
    output_model = GuardReport
    tier = "quality"
    max_tokens = 2048

    async def check(
        self,
        original: ResumeProfile,
        tailored: TailoredResume,
        cover_letter: CoverLetterPack,
        *,
        budget: Budget,
        job_id: str | None = None,
        attempt: int = 1,
    ) -> AgentResult[GuardReport]:
        """Compare generated materials with the original resume."""
        content = "\n".join([
            "ORIGINAL RESUME JSON:",
            original.model_dump_json(indent=2),
            "\nTAILORED RESUME JSON:",
            tailored.model_dump_json(indent=2),
            "\nCOVER LETTER JSON:",
            cover_letter.model_dump_json(indent=2),
        ])
        result = await self._invoke(
            content,
            budget=budget,
            estimated_cost=ESTIMATED_COST,
            job_id=job_id,
            label=f"{self._label(job_id)}:a{attempt}",
        )
        report = result.data
        if report.passed and len(report.requires_user_confirmation) < len(tailored.warnings):
            logger.info(
                "Guard listed %d placeholder(s), tailor warned about %d",
                len(report.requires_user_confirmation), len(tailored.warnings),
            )
        return result
