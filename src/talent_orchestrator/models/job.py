"""Pydantic models for Job Parser output."""

from __future__ import annotations

import re
from typing import Literal

from pydantic import BaseModel, field_validator

_COUNTRY_CODE = re.compile(r"^[A-Z]{2}$")


class JobPosting(BaseModel):
    title: str | None = None
    company: str | None = None
    location: str | None = None
    type: str | None = None  # Full-time, Part-time, Contract, Freelance, Internship
    seniority: str | None = None  # Junior, Mid-level, Senior, Lead, Executive
    salary_min: float | None = None
    salary_max: float | None = None
    currency: str | None = None
    must_have_skills: list[str] = []
    nice_to_have_skills: list[str] = []
    visa_sponsorship: Literal["YES", "NO", "UNKNOWN"] = "UNKNOWN"
    relocation_assistance: bool = False
    eligible_countries: list[str] = []  # ISO-3166 alpha-2
    description: str | None = None
    requirements: list[str] = []
    responsibilities: list[str] = []

    @field_validator("visa_sponsorship", mode="before")
    @classmethod
    def upper_visa(cls, value):
        if value is None:
            return "UNKNOWN"
        return value.upper() if isinstance(value, str) else value

    @field_validator("eligible_countries", mode="before")
    @classmethod
    def normalize_countries(cls, value):
        if value is None:
            return []
        if isinstance(value, list):
            return [v.strip().upper() if isinstance(v, str) else v for v in value]
        return value

    @field_validator("eligible_countries")
    @classmethod
    def iso_alpha2_only(cls, value: list[str]) -> list[str]:
        for code in value:
            if not _COUNTRY_CODE.match(code):
                raise ValueError(f"not an ISO-3166 alpha-2 code: {code!r}")
        return value
