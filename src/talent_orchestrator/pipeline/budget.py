"""Per-run token budget with pre-flight admission checks."""

from __future__ import annotations

import math

from talent_orchestrator.errors import BudgetExceededError
from talent_orchestrator.models.run import BudgetInfo


def estimate_tokens(text: str) -> int:
    """Deterministic estimate, ~4 characters per token."""
    return math.ceil(len(text) / 4)


class Budget:
    """Token allowance owned by exactly one run.

    The first admission failure sets ``stopped_reason``; later failures
    leave it untouched.
    """

    def __init__(self, total: int):
        self.total = total
        self.used = 0
        self.stopped_reason = ""

    def consume(self, tokens: int) -> None:
        self.used += tokens

    def exhausted(self) -> bool:
        return self.used >= self.total

    def assert_available(self, estimated_cost: int, label: str) -> None:
        """Raise BudgetExceededError if admitting ``estimated_cost`` would exceed the total."""
        if self.used + estimated_cost > self.total:
            reason = f"token budget exceeded before {label}"
            if not self.stopped_reason:
                self.stopped_reason = reason
            raise BudgetExceededError(reason)

    def to_info(self) -> BudgetInfo:
        return BudgetInfo(
            token_budget_total=self.total,
            token_used_estimate=self.used,
            stopped_reason=self.stopped_reason,
        )
