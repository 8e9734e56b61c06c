"""Pydantic models for Resume Parser output."""

from __future__ import annotations

from pydantic import BaseModel


class ResumeExperience(BaseModel):
    company: str
    title: str
    start_date: str | None = None
    end_date: str | None = None  # None while the role is current
    description: str | None = None
    metrics: list[str] = []
    technologies: list[str] = []


class ResumeEducation(BaseModel):
    institution: str
    degree: str | None = None
    field: str | None = None
    graduation_year: str | None = None


class ResumeProfile(BaseModel):
    """Facts extracted from the resume text; absent facts stay None or empty."""

    name: str | None = None
    email: str | None = None
    phone: str | None = None
    location: str | None = None
    headline: str | None = None
    summary: str | None = None
    years_of_experience: float | None = None
    skills: list[str] = []
    experience: list[ResumeExperience] = []
    education: list[ResumeEducation] = []
    languages: list[str] = []
    certifications: list[str] = []
    work_auth_status: str | None = None  # only when stated, never inferred
