"""Shared call path for every agent: admit, complete, account, extract, validate."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import BaseModel

from talent_orchestrator.clients.llm_client import LLMClient, LLMResponse, Tier
from talent_orchestrator.pipeline.budget import Budget, estimate_tokens
from talent_orchestrator.pipeline.validators import validate_agent_output
from talent_orchestrator.utils.json_parser import extract_json

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass
class AgentResult(Generic[ModelT]):
    data: ModelT
    tokens: int


def usage_tokens(response: LLMResponse, system: str, content: str) -> int:
    """Reported usage when available, else a character-count estimate per side."""
    input_tokens = response.input_tokens
    if input_tokens is None:
        input_tokens = estimate_tokens(system + content)
    output_tokens = response.output_tokens
    if output_tokens is None:
        output_tokens = estimate_tokens(response.text)
    return input_tokens + output_tokens


class Agent(Generic[ModelT]):
    """One narrow instruction paired with one output model."""

    name: str = "Agent"
    system_prompt: str = ""
    output_model: type[ModelT]
    tier: Tier = "fast"
    max_tokens: int = 2048

    def __init__(self, llm: LLMClient):
        self.llm = llm

    async def _invoke(
        self,
        content: str,
        *,
        budget: Budget,
        estimated_cost: int,
        job_id: str | None = None,
        label: str | None = None,
    ) -> AgentResult[ModelT]:
        budget.assert_available(estimated_cost, label or self._label(job_id))
        response = await self.llm.complete(
            self.system_prompt,
            content,
            tier=self.tier,
            max_tokens=self.max_tokens,
        )
        tokens = usage_tokens(response, self.system_prompt, content)
        # Spent tokens count even when the output turns out to be unusable
        budget.consume(tokens)
        raw = extract_json(response.text, agent=self.name, job_id=job_id)
        data = validate_agent_output(self.output_model, raw, self.name, job_id)
        return AgentResult(data=data, tokens=tokens)

    def _label(self, job_id: str | None) -> str:
        return f"{self.name}:{job_id}" if job_id else self.name
