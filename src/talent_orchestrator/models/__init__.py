"""Data models for the orchestration pipeline."""

from talent_orchestrator.models.guard import GuardIssue, GuardReport
from talent_orchestrator.models.job import JobPosting
from talent_orchestrator.models.match import MatchResult, recommendation_for
from talent_orchestrator.models.resume import (
    ResumeEducation,
    ResumeExperience,
    ResumeProfile,
)
from talent_orchestrator.models.run import (
    BudgetInfo,
    CandidateHints,
    JobInput,
    RankedJob,
    RunCache,
    RunInput,
    RunLimits,
    RunOutput,
    RunType,
    TailoredOutput,
)
from talent_orchestrator.models.tailoring import (
    CoverLetterPack,
    TailoredExperience,
    TailoredResume,
)

__all__ = [
    "BudgetInfo",
    "CandidateHints",
    "CoverLetterPack",
    "GuardIssue",
    "GuardReport",
    "JobInput",
    "JobPosting",
    "MatchResult",
    "RankedJob",
    "ResumeEducation",
    "ResumeExperience",
    "ResumeProfile",
    "RunCache",
    "RunInput",
    "RunLimits",
    "RunOutput",
    "RunType",
    "TailoredExperience",
    "TailoredOutput",
    "TailoredResume",
    "recommendation_for",
]
