"""Pydantic models for Match Scorer output."""

from __future__ import annotations

import logging
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

logger = logging.getLogger(__name__)

APPLY_THRESHOLD = 70
STRETCH_THRESHOLD = 55

Recommendation = Literal["apply", "stretch", "skip"]


def recommendation_for(score: float) -> Recommendation:
    """apply at 70+, stretch at 55-69, skip below 55."""
    if score >= APPLY_THRESHOLD:
        return "apply"
    if score >= STRETCH_THRESHOLD:
        return "stretch"
    return "skip"


class MatchResult(BaseModel):
    # score = skills 50% + seniority 20% + location/authorization 20% + other 10%
    score: int = Field(ge=0, le=100)
    must_have_coverage_pct: float = Field(ge=0, le=100)
    nice_to_have_coverage_pct: float = Field(ge=0, le=100)
    matched_skills: list[str] = []
    missing_must_haves: list[str] = []
    missing_nice_to_haves: list[str] = []
    location_match: bool
    work_auth_ok: bool
    visa_ok: bool
    seniority_match: Literal["match", "over", "under", "unknown"]
    recommendation: Recommendation
    explanation: str

    @field_validator("score", mode="before")
    @classmethod
    def round_score(cls, value):
        if isinstance(value, float):
            return round(value)
        return value

    @model_validator(mode="after")
    def recommendation_follows_score(self) -> "MatchResult":
        expected = recommendation_for(self.score)
        if self.recommendation != expected:
            logger.warning(
                "Match recommendation %r disagrees with score %d; using %r",
                self.recommendation, self.score, expected,
            )
            self.recommendation = expected
        return self
