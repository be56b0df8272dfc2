"""
Assisted walkthrough.

A student who is stuck can walk through a problem's solution steps.  Each
step is either revealed (costing part of the score) or typed by the student
(free).  Posting the full answer into the input boxes costs a fixed amount.
The accumulated deduction is subtracted from the problem's score.
"""

from __future__ import annotations

import re
from typing import Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .answer_hash import AnswerPart
from .graders import round_half_up

COST_SCHEDULES: dict[int, tuple[float, ...]] = {
    2: (0.2, 0.4),
    3: (0.1, 0.2, 0.3),
    4: (0.1, 0.1, 0.2, 0.2),
    5: (0.1, 0.1, 0.1, 0.1, 0.2),
}
POST_COST = 0.2
MIN_STEP_COST = 0.1
FALLBACK_STEP = "Refer to the answer."

_STATUS_PREFIX = re.compile(r"^(Not complete|Incomplete|Complete):\s*", re.IGNORECASE)


class StepState(BaseModel):
    """Progress on one walkthrough step."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    revealed: bool = False
    user_typed: Optional[str] = None

    @property
    def done(self) -> bool:
        return self.revealed or self.user_typed is not None


def walkthrough_steps(steps: Optional[Sequence[str]], hint: Optional[str] = None) -> list[str]:
    """Steps to walk through: explicit steps, else the hint, else a stock step."""
    if steps:
        return list(steps)
    if hint:
        return [hint]
    return [FALLBACK_STEP]


def step_costs(total: int) -> list[float]:
    """
    Cost of revealing each step of a ``total``-step walkthrough.

    Examples:
        >>> step_costs(3)
        [0.1, 0.2, 0.3]
        >>> step_costs(1)
        [0.6]
        >>> step_costs(8)
        [0.1, 0.1, 0.1, 0.1, 0.1, 0.1, 0.1, 0.1]
    """
    if total in COST_SCHEDULES:
        return list(COST_SCHEDULES[total])
    if total <= 0:
        return []
    return [max(MIN_STEP_COST, round_half_up(0.6 / total, 1))] * total


def current_step(step_states: Sequence[StepState]) -> int:
    """Index of the next step to work on, one past the last finished step."""
    last_done = -1
    for index, state in enumerate(step_states):
        if state.done:
            last_done = index
    return min(last_done + 1, len(step_states))


class Walkthrough(BaseModel):
    """
    Walkthrough progress for one problem.

    Instances are immutable in use: every action returns a new instance.
    """

    step_states: list[StepState] = Field(default_factory=list)
    deduction: float = 0.0

    @classmethod
    def resume(
        cls,
        total_steps: int,
        step_states: Optional[Sequence[StepState]] = None,
        deduction: Optional[float] = None,
    ) -> "Walkthrough":
        """Continue saved progress, fitting it to the current step count."""
        states = list(step_states or [])[:total_steps]
        states.extend(StepState() for _ in range(total_steps - len(states)))
        return cls(step_states=states, deduction=deduction or 0.0)

    @property
    def total_steps(self) -> int:
        return len(self.step_states)

    @property
    def current_step(self) -> int:
        return current_step(self.step_states)

    @property
    def finished(self) -> bool:
        return all(state.done for state in self.step_states)

    @property
    def next_cost(self) -> float:
        """Cost of revealing the current step, 0 once every step is done."""
        index = self.current_step
        if index >= self.total_steps:
            return 0.0
        return step_costs(self.total_steps)[index]

    def _with_step(self, step: StepState, cost: float) -> "Walkthrough":
        states = list(self.step_states)
        states[self.current_step] = step
        return Walkthrough(step_states=states, deduction=round_half_up(self.deduction + cost, 1))

    def reveal_step(self) -> "Walkthrough":
        """Reveal the current step and charge its cost."""
        if self.current_step >= self.total_steps:
            return self
        return self._with_step(StepState(revealed=True), self.next_cost)

    def type_step(self, text: str) -> "Walkthrough":
        """Record the student's own working for the current step, free of charge."""
        text = text.strip()
        if not text or self.current_step >= self.total_steps:
            return self
        return self._with_step(StepState(revealed=False, user_typed=text), 0.0)

    def post_answer(self) -> "Walkthrough":
        """Charge for having the full answer filled in."""
        return Walkthrough(
            step_states=list(self.step_states),
            deduction=round_half_up(self.deduction + POST_COST, 1),
        )


def posted_answer_values(parts: Sequence[AnswerPart]) -> list[str]:
    """
    Plain-text answers to fill into the input boxes.

    Markup is reduced the way a student would type it: math delimiters and
    braces go, fractions become ``a/b``, roots become ``sqrt(a)`` and any
    status prefix is dropped.
    """
    values = []
    for part in parts:
        value = part.value.replace("$", "")
        value = re.sub(r"\\frac\{([^}]+)\}\{([^}]+)\}", r"\1/\2", value)
        value = re.sub(r"\\sqrt\{([^}]+)\}", r"sqrt(\1)", value)
        value = value.replace("\\cdot", "*")
        value = re.sub(r"\\text\{[^}]*\}", "", value)
        value = value.replace("\\", "").replace("{", "").replace("}", "")
        value = _STATUS_PREFIX.sub("", value)
        values.append(value.strip())
    return values
