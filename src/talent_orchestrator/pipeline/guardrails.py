"""Post-run size caps applied once to the assembled output."""

from __future__ import annotations

import logging

from talent_orchestrator.config import GuardrailConfig
from talent_orchestrator.models.run import RunOutput

logger = logging.getLogger(__name__)

ELLIPSIS = "…"


def clip(text: str, limit: int) -> str:
    """Cut ``text`` to at most ``limit`` characters, ellipsis included."""
    if len(text) <= limit:
        return text
    return text[: limit - 1] + ELLIPSIS


def _clip_field(value: str, limit: int, run_id: str, job_id: str, field: str) -> str:
    clipped = clip(value, limit)
    if clipped != value:
        logger.warning(
            "Field truncated: run_id=%s job_id=%s field=%s length=%d max=%d",
            run_id, job_id, field, len(value), limit,
        )
    return clipped


def _cap_list(items: list[str], limit: int, run_id: str, job_id: str, field: str) -> list[str]:
    if len(items) <= limit:
        return items
    logger.warning(
        "List truncated: run_id=%s job_id=%s field=%s items=%d max=%d",
        run_id, job_id, field, len(items), limit,
    )
    return items[:limit]


def apply_guardrails(output: RunOutput, limits: GuardrailConfig | None = None) -> RunOutput:
    """Cap oversized fields of ``output`` in place and return it.

    Clipped strings end up exactly at their limit, so a second pass is a no-op.
    """
    limits = limits or GuardrailConfig()
    run_id = output.run_id

    for ranked in output.ranked_jobs:
        job = ranked.job
        if job.description:
            job.description = _clip_field(
                job.description, limits.max_job_description, run_id, ranked.job_id,
                "job.description",
            )
        ranked.match.explanation = _clip_field(
            ranked.match.explanation, limits.max_explanation, run_id, ranked.job_id,
            "match.explanation",
        )

    for tailored in output.tailored_outputs:
        job_id = tailored.job_id
        letter = tailored.cover_letter
        letter.body = _clip_field(
            letter.body, limits.max_cover_letter_body, run_id, job_id, "cover_letter.body",
        )

        resume = tailored.tailored_resume
        resume.summary = _clip_field(
            resume.summary, limits.max_summary, run_id, job_id, "tailored_resume.summary",
        )
        resume.ats_keywords = _cap_list(
            resume.ats_keywords, limits.max_ats_keywords, run_id, job_id,
            "tailored_resume.ats_keywords",
        )
        resume.change_log = _cap_list(
            resume.change_log, limits.max_change_log, run_id, job_id,
            "tailored_resume.change_log",
        )
        for i, exp in enumerate(resume.experience):
            exp.bullets = [
                _clip_field(
                    bullet, limits.max_bullet, run_id, job_id,
                    f"tailored_resume.experience.{i}.bullets.{j}",
                )
                for j, bullet in enumerate(exp.bullets)
            ]

    return output
