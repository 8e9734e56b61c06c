"""Exceptions raised by the orchestration pipeline."""

from __future__ import annotations


class OrchestratorError(Exception):
    """Base class for every pipeline failure."""


class BudgetExceededError(OrchestratorError):
    """A pre-flight admission check refused a model call."""

    def __init__(self, stopped_reason: str):
        super().__init__(stopped_reason)
        self.stopped_reason = stopped_reason


class RunTimeoutError(OrchestratorError):
    """The run deadline passed before the next model call could start."""


class AgentOutputError(OrchestratorError):
    """An agent returned output the pipeline cannot use."""

    def __init__(self, message: str, *, agent: str, job_id: str | None = None):
        super().__init__(message)
        self.agent = agent
        self.job_id = job_id


class UnparseableOutputError(AgentOutputError):
    """No JSON object could be extracted from the model text."""


class SchemaValidationError(AgentOutputError):
    """Extracted JSON does not match the agent's output shape."""

    def __init__(
        self,
        *,
        agent: str,
        field_path: str,
        message: str,
        job_id: str | None = None,
    ):
        label = f"{agent}:{job_id}" if job_id else agent
        super().__init__(
            f"[{label}] schema validation failed at [{field_path}]: {message}",
            agent=agent,
            job_id=job_id,
        )
        self.field_path = field_path
        self.detail = message
