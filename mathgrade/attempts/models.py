"""
Per-problem progress records.

Field names are snake_case in Python and camelCase when serialized, so
snapshots written by earlier clients load unchanged.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..answer.walkthrough import StepState


class ProblemStatus(str, Enum):
    """Lifecycle of a problem within the current retry cycle."""

    UNANSWERED = "unanswered"
    INCORRECT = "incorrect"
    CORRECT = "correct"
    REVEALED = "revealed"

    @property
    def terminal(self) -> bool:
        return self in (ProblemStatus.CORRECT, ProblemStatus.REVEALED)


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_wire(self) -> dict:
        """Serialize with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


class AttemptRecord(_CamelModel):
    """
    One submission in a problem's history.

    Only ``results``, ``correct`` and ``disputed`` change after the entry is
    appended, and only through a dispute.
    """

    answers: list[str] = Field(default_factory=list)
    results: list[bool] = Field(default_factory=list)
    correct: bool = False
    disputed: Optional[list[bool]] = None


class ProblemState(_CamelModel):
    """
    Everything persisted for one problem.

    Attributes:
        attempts: Submissions made over all cycles
        cycle_start: Value of ``attempts`` when the current cycle began
        status: Verdict for the current cycle
        user_answers: Last submitted (or restored) inputs, one per part
        results: Per-part verdict of the last submission
        history: Every submission, oldest first
        hint_used: The hint was opened
        automation_used: The walkthrough was used
        automation_deduction: Accumulated walkthrough deduction
        automation_step_states: Walkthrough progress per step
    """

    attempts: int = Field(default=0, ge=0)
    cycle_start: int = Field(default=0, ge=0)
    status: ProblemStatus = ProblemStatus.UNANSWERED
    user_answers: list[str] = Field(default_factory=list)
    results: Optional[list[bool]] = None
    history: list[AttemptRecord] = Field(default_factory=list)
    hint_used: Optional[bool] = None
    automation_used: Optional[bool] = None
    automation_deduction: Optional[float] = None
    automation_step_states: Optional[list[StepState]] = None

    @property
    def cycle_attempts(self) -> int:
        return max(self.attempts - self.cycle_start, 0)

    @classmethod
    def fresh(cls, part_count: int) -> "ProblemState":
        """State of a problem nobody has touched yet."""
        return cls(user_answers=[""] * part_count)
