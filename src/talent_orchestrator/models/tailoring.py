"""Pydantic models for Resume Tailor and Cover Letter output."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class TailoredExperience(BaseModel):
    company: str
    title: str
    period: str
    bullets: list[str] = []


class TailoredResume(BaseModel):
    summary: str
    skills: list[str] = []
    experience: list[TailoredExperience] = []
    ats_keywords: list[str] = []
    warnings: list[str] = []  # bracket placeholders needing the candidate's confirmation
    change_log: list[str] = []


class CoverLetterPack(BaseModel):
    subject_line: str
    salutation: str
    body: str  # 3 paragraphs, 200-300 words
    closing: str
    tone: Literal["professional", "warm", "direct"]
    word_count: int = Field(ge=0)
