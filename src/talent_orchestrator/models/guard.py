"""Pydantic models for Truth-Consistency Guard output."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

BLOCKING_SEVERITIES = ("high", "medium")


class GuardIssue(BaseModel):
    type: Literal["fabrication", "inconsistency", "exaggeration"]
    field: str
    original_value: str
    fabricated_value: str
    severity: Literal["high", "medium", "low"]


class GuardReport(BaseModel):
    verdict: Literal["PASS", "FAIL"]
    issues: list[GuardIssue] = []
    requires_user_confirmation: list[str] = []
    confidence: float = Field(ge=0, le=1)

    @field_validator("verdict", mode="before")
    @classmethod
    def upper_verdict(cls, value):
        return value.upper() if isinstance(value, str) else value

    @model_validator(mode="after")
    def blocking_issues_fail(self) -> "GuardReport":
        if any(issue.severity in BLOCKING_SEVERITIES for issue in self.issues):
            self.verdict = "FAIL"
        return self

    @property
    def passed(self) -> bool:
        return self.verdict == "PASS"
