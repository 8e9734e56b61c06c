"""Claude completion service with async support and retry logic."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

import anthropic
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

Tier = Literal["fast", "quality"]

_TRANSIENT_ERRORS = (
    anthropic.APIConnectionError,
    anthropic.RateLimitError,
    anthropic.InternalServerError,
)

# USD per 1M tokens. Models missing here are counted as free.
MODEL_PRICING: dict[str, tuple[float, float]] = {
    "claude-haiku-4-5-20251001": (1.00, 5.00),
    "claude-sonnet-4-5-20250929": (3.00, 15.00),
}


def estimate_cost(calls: list[tuple[str, int, int]]) -> float:
    """USD estimate for (model, input_tokens, output_tokens) entries of the token log."""
    total = 0.0
    for model, input_tokens, output_tokens in calls:
        input_price, output_price = MODEL_PRICING.get(model, (0.0, 0.0))
        total += (input_tokens * input_price + output_tokens * output_price) / 1_000_000
    return total


@dataclass
class LLMResponse:
    """Raw completion text plus usage counts, when the service reports them."""

    text: str
    input_tokens: int | None = None
    output_tokens: int | None = None
    model: str = ""


class LLMClient:
    """Async Claude client selecting a model by tier, with exponential-backoff retries."""

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float | None = None,
        *,
        fast_model: str = "claude-haiku-4-5-20251001",
        quality_model: str = "claude-sonnet-4-5-20250929",
    ):
        kwargs: dict = {}
        if api_key is not None:
            kwargs["api_key"] = api_key
        if timeout is not None:
            kwargs["timeout"] = timeout
        self.client = anthropic.AsyncAnthropic(**kwargs)
        self.models: dict[str, str] = {"fast": fast_model, "quality": quality_model}
        self._token_log: list[tuple[str, int, int]] = []  # (model, input_tokens, output_tokens)

    def model_for(self, tier: Tier) -> str:
        try:
            return self.models[tier]
        except KeyError:
            raise ValueError(f"Unknown model tier: {tier!r}") from None

    @retry(
        retry=retry_if_exception_type(_TRANSIENT_ERRORS),
        stop=stop_after_attempt(3),
        wait=wait_exponential(min=1, max=10),
        reraise=True,
    )
    async def _call_api(
        self,
        system: str,
        content: str,
        model: str,
        max_tokens: int,
    ) -> anthropic.types.Message:
        """Make the actual API call with retry logic."""
        return await self.client.messages.create(
            model=model,
            max_tokens=max_tokens,
            system=system,
            messages=[{"role": "user", "content": content}],
        )

    async def complete(
        self,
        system: str,
        content: str,
        *,
        tier: Tier = "fast",
        max_tokens: int = 2048,
    ) -> LLMResponse:
        """Send one instruction + content pair and return the text with usage."""
        model = self.model_for(tier)
        logger.debug("LLM call: model=%s max_tokens=%d", model, max_tokens)
        try:
            message = await self._call_api(
                system=system,
                content=content,
                model=model,
                max_tokens=max_tokens,
            )
        except Exception:
            logger.error("LLM call failed", exc_info=True)
            raise

        text = "".join(
            block.text for block in message.content if getattr(block, "type", "text") == "text"
        )
        usage = getattr(message, "usage", None)
        input_tokens = getattr(usage, "input_tokens", None)
        output_tokens = getattr(usage, "output_tokens", None)
        logger.debug("LLM response: %s input, %s output tokens", input_tokens, output_tokens)
        self._token_log.append((model, input_tokens or 0, output_tokens or 0))
        return LLMResponse(
            text=text,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            model=model,
        )

    def get_token_summary(self) -> dict:
        """Return accumulated token usage with its USD estimate and reset the log."""
        summary = {
            "input": sum(t[1] for t in self._token_log),
            "output": sum(t[2] for t in self._token_log),
            "calls": list(self._token_log),
            "cost_usd": estimate_cost(self._token_log),
        }
        self._token_log.clear()
        return summary
