"""Shared test fixtures."""

from __future__ import annotations

import json
from collections import defaultdict
from unittest.mock import AsyncMock

import pytest

from talent_orchestrator.clients.llm_client import LLMClient, LLMResponse
from talent_orchestrator.models.job import JobPosting
from talent_orchestrator.models.resume import ResumeProfile


@pytest.fixture
def sample_resume_text() -> str:
    return """Ada Obi
ada.obi@example.com | +234 801 234 5678 | Lagos, Nigeria

Senior Frontend Engineer with 6 years of experience building React applications.

Experience
- Paystack (2021-03 - present), Senior Frontend Engineer
  - Led migration of the merchant dashboard to TypeScript
  - Cut bundle size by 35% through code splitting
- Andela (2018-01 - 2021-02), Software Engineer
  - Built React and Node.js features for US clients

Skills: JavaScript, TypeScript, React, Node.js, GraphQL, Jest
Education: BSc Computer Science, University of Lagos, 2017
"""


@pytest.fixture
def sample_job_text() -> str:
    return """Senior React Engineer - Remote (EMEA)
Acme Payments

We are hiring a senior engineer to own our checkout web app.

Must have:
- 5+ years of React and TypeScript
- Experience with GraphQL

Nice to have:
- Next.js
- Payments domain experience

Visa sponsorship is not available. Candidates must be based in NG, KE or ZA.
"""


@pytest.fixture
def resume_json() -> dict:
    return {
        "name": "Ada Obi",
        "email": "ada.obi@example.com",
        "phone": "+234 801 234 5678",
        "location": "Lagos, Nigeria",
        "headline": "Senior Frontend Engineer",
        "summary": "Senior Frontend Engineer with 6 years of experience building React applications.",
        "years_of_experience": 6,
        "skills": ["JavaScript", "TypeScript", "React", "Node.js", "GraphQL", "Jest"],
        "experience": [
            {
                "company": "Paystack",
                "title": "Senior Frontend Engineer",
                "start_date": "2021-03",
                "end_date": None,
                "description": "Merchant dashboard",
                "metrics": ["Cut bundle size by 35%"],
                "technologies": ["React", "TypeScript"],
            },
        ],
        "education": [
            {
                "institution": "University of Lagos",
                "degree": "BSc",
                "field": "Computer Science",
                "graduation_year": "2017",
            },
        ],
        "languages": ["English"],
        "certifications": [],
        "work_auth_status": None,
    }


@pytest.fixture
def job_json() -> dict:
    return {
        "title": "Senior React Engineer",
        "company": "Acme Payments",
        "location": "Remote (EMEA)",
        "type": "Full-time",
        "seniority": "Senior",
        "salary_min": None,
        "salary_max": None,
        "currency": None,
        "must_have_skills": ["React", "TypeScript", "GraphQL"],
        "nice_to_have_skills": ["Next.js"],
        "visa_sponsorship": "NO",
        "relocation_assistance": False,
        "eligible_countries": ["NG", "KE", "ZA"],
        "description": "Own the checkout web app.",
        "requirements": ["5+ years of React and TypeScript"],
        "responsibilities": ["Own the checkout web app"],
    }


@pytest.fixture
def match_json() -> dict:
    return {
        "score": 82,
        "must_have_coverage_pct": 100,
        "nice_to_have_coverage_pct": 0,
        "matched_skills": ["React", "TypeScript", "GraphQL"],
        "missing_must_haves": [],
        "missing_nice_to_haves": ["Next.js"],
        "location_match": True,
        "work_auth_ok": True,
        "visa_ok": True,
        "seniority_match": "match",
        "recommendation": "apply",
        "explanation": "Strong React and TypeScript overlap; based in an eligible country.",
    }


@pytest.fixture
def tailored_json() -> dict:
    return {
        "summary": "Senior Frontend Engineer with 6 years of React and TypeScript experience.",
        "skills": ["React", "TypeScript", "GraphQL", "JavaScript"],
        "experience": [
            {
                "company": "Paystack",
                "title": "Senior Frontend Engineer",
                "period": "2021-03 - Present",
                "bullets": ["Led migration of the merchant dashboard to TypeScript"],
            },
        ],
        "ats_keywords": ["React", "TypeScript", "GraphQL"],
        "warnings": [],
        "change_log": ["Reordered skills to lead with React"],
    }


@pytest.fixture
def cover_letter_json() -> dict:
    return {
        "subject_line": "Application: Senior React Engineer",
        "salutation": "Dear Hiring Manager,",
        "body": "I would like to apply for the Senior React Engineer role at Acme Payments.",
        "closing": "Kind regards,\nAda Obi",
        "tone": "professional",
        "word_count": 14,
    }


@pytest.fixture
def guard_pass_json() -> dict:
    return {
        "verdict": "PASS",
        "issues": [],
        "requires_user_confirmation": [],
        "confidence": 0.95,
    }


@pytest.fixture
def guard_fail_json() -> dict:
    return {
        "verdict": "FAIL",
        "issues": [
            {
                "type": "fabrication",
                "field": "experience[0].bullets[1]",
                "original_value": "",
                "fabricated_value": "Managed a team of 12",
                "severity": "high",
            },
        ],
        "requires_user_confirmation": [],
        "confidence": 0.9,
    }


@pytest.fixture
def sample_resume(resume_json) -> ResumeProfile:
    return ResumeProfile.model_validate(resume_json)


@pytest.fixture
def sample_job(job_json) -> JobPosting:
    return JobPosting.model_validate(job_json)


def _to_response(item) -> LLMResponse:
    if isinstance(item, LLMResponse):
        return item
    text = item if isinstance(item, str) else json.dumps(item)
    return LLMResponse(text=text, input_tokens=100, output_tokens=100, model="test-model")


@pytest.fixture
def mock_llm_client() -> LLMClient:
    """Mocked LLMClient; set ``complete`` return values per test."""
    client = AsyncMock(spec=LLMClient)
    client.complete = AsyncMock(
        return_value=LLMResponse(text="{}", input_tokens=100, output_tokens=100, model="test-model")
    )
    return client


@pytest.fixture
def make_llm():
    """Build a mocked LLMClient that answers per agent.

    ``scripts`` maps an agent name (e.g. ``"JobParserAgent"``) to either one
    response reused for every call or a list consumed in order. A response is
    a dict (sent as JSON), raw text, an LLMResponse or an exception to raise.
    Each dict/text reply reports 100 input and 100 output tokens.
    """

    def factory(scripts: dict) -> AsyncMock:
        client = AsyncMock(spec=LLMClient)
        client.calls = defaultdict(int)
        queues = {name: list(s) if isinstance(s, list) else s for name, s in scripts.items()}

        async def complete(system, content, *, tier="fast", max_tokens=2048):
            agent = system.split(".", 1)[0].removeprefix("You are ").strip()
            client.calls[agent] += 1
            script = queues[agent]
            item = script.pop(0) if isinstance(script, list) else script
            if isinstance(item, Exception):
                raise item
            return _to_response(item)

        client.complete = AsyncMock(side_effect=complete)
        return client

    return factory
