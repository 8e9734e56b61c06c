"""Validate extracted agent output against its canonical model."""

from __future__ import annotations

import logging
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from talent_orchestrator.errors import SchemaValidationError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def validate_agent_output(
    model: type[ModelT],
    raw: dict,
    agent: str,
    job_id: str | None = None,
) -> ModelT:
    """Return ``model`` built from ``raw`` or raise SchemaValidationError.

    The error carries the first failing field path; up to three issues are logged.
    """
    try:
        return model.model_validate(raw)
    except ValidationError as exc:
        issues = exc.errors()[:3]
        for i, issue in enumerate(issues, start=1):
            logger.debug("%s issue %d: [%s] %s", agent, i, _path(issue), issue["msg"])
        first = issues[0] if issues else None
        raise SchemaValidationError(
            agent=agent,
            job_id=job_id,
            field_path=_path(first) if first else "<root>",
            message=first["msg"] if first else "unknown validation error",
        ) from exc


def _path(issue: dict) -> str:
    return ".".join(str(part) for part in issue.get("loc", ())) or "<root>"
