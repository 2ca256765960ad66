"""Thinking mode configuration and budget estimation."""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .errors import JsonError

MAX_THINKING_BUDGET = 24576
_U32_MAX = 2**32 - 1
_COMPLEXITY_MARKERS = ("step by step", "analyze", "explain")
_WORDS_PER_BONUS = 100
_LENGTH_BONUS = 256


@dataclass(frozen=True)
class ThinkingConfig:
    """Thinking budget for a request; a budget of None lets the model decide."""

    thinking_budget: int | None = None

    @property
    def is_auto(self) -> bool:
        return self.thinking_budget is None

    @classmethod
    def with_budget(cls, tokens: int) -> ThinkingConfig:
        """A configuration with an exact token budget."""
        if isinstance(tokens, bool) or not isinstance(tokens, int) or tokens < 0:
            raise ValueError("Thinking budget must be a non-negative integer")
        if tokens > MAX_THINKING_BUDGET:
            raise ValueError(f"Thinking budget cannot exceed {MAX_THINKING_BUDGET} tokens")
        return cls(thinking_budget=tokens)

    @classmethod
    def auto(cls) -> ThinkingConfig:
        """A configuration that lets the model choose its budget."""
        return cls(thinking_budget=None)

    @classmethod
    def disabled(cls) -> ThinkingConfig:
        """A configuration that turns thinking off."""
        return cls(thinking_budget=0)

    def to_dict(self) -> dict[str, Any]:
        return {"thinkingBudget": self.thinking_budget}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ThinkingConfig:
        if not isinstance(data, Mapping):
            raise JsonError("expected an object for ThinkingConfig")
        if "thinkingBudget" not in data:
            raise JsonError("missing field `thinkingBudget`")
        budget = data["thinkingBudget"]
        if budget is None:
            return cls.auto()
        if isinstance(budget, bool) or not isinstance(budget, int) or not 0 <= budget <= _U32_MAX:
            raise JsonError(f"invalid thinking budget {budget!r}")
        return cls(thinking_budget=budget)


class TaskComplexity(enum.Enum):
    """Task complexity levels, valued by their base thinking budget."""

    SIMPLE = 0
    MODERATE = 512
    COMPLEX = 2048
    VERY_COMPLEX = 8192


def estimate_thinking_budget(prompt: str, task_type: TaskComplexity) -> int:
    """Estimate a thinking budget from the prompt and the task's complexity."""
    multiplier = 1.5 if any(marker in prompt for marker in _COMPLEXITY_MARKERS) else 1.0
    adjusted = int(task_type.value * multiplier)
    length_bonus = (len(prompt.split()) // _WORDS_PER_BONUS) * _LENGTH_BONUS
    return min(adjusted + length_bonus, MAX_THINKING_BUDGET)