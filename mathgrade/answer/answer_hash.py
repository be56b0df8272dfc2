"""
Answer data structures.

- AnswerPart: one canonical answer blank (optionally labeled)
- MatchStrategy: which comparison rule accepted an answer
- MatchResult: outcome of comparing one typed answer to one canonical answer
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, StrictBool


class AnswerPart(BaseModel):
    """
    One canonical answer blank.

    Attributes:
        label: Display label, empty for single-answer problems
        value: Canonical answer, possibly LaTeX-flavoured (``$x = 0$``)
    """

    model_config = ConfigDict(frozen=True)

    label: str = ""
    value: str


AnswerSpec = Union[str, AnswerPart, dict, list]


def to_answer_parts(answer: AnswerSpec) -> list[AnswerPart]:
    """
    Normalize a problem's answer into a list of parts.

    A bare string becomes one unlabeled part; a list of parts (or of
    ``{"label", "value"}`` dicts) is validated as-is.
    """
    if isinstance(answer, list):
        return [
            part if isinstance(part, AnswerPart) else AnswerPart.model_validate(part)
            for part in answer
        ]
    if isinstance(answer, AnswerPart):
        return [answer]
    if isinstance(answer, dict):
        return [AnswerPart.model_validate(answer)]
    return [AnswerPart(label="", value=str(answer))]


class MatchStrategy(str, Enum):
    """Comparison rules, in the order the matcher tries them."""

    CANONICAL = "canonical"
    COMPLETE = "complete"
    VARIABLE_PREFIX = "variable_prefix"
    FACTOR_ORDER = "factor_order"
    LIGHT = "light"
    LIGHT_COMPLETE = "light_complete"
    LIGHT_VARIABLE_PREFIX = "light_variable_prefix"
    LIGHT_FACTOR_ORDER = "light_factor_order"
    NUMERIC = "numeric"
    LIGHT_NUMERIC = "light_numeric"


class MatchResult(BaseModel):
    """
    Result of comparing a typed answer against a canonical answer.

    Truthiness follows ``correct`` so results can be used directly in
    conditions.
    """

    correct: StrictBool = False
    strategy: Optional[MatchStrategy] = None
    student_answer: str = ""
    correct_answer: str = ""

    def __bool__(self) -> bool:
        return self.correct

    @classmethod
    def accepted(
        cls, strategy: MatchStrategy, student_ans: str, correct_ans: str
    ) -> "MatchResult":
        return cls(
            correct=True,
            strategy=strategy,
            student_answer=student_ans,
            correct_answer=correct_ans,
        )

    @classmethod
    def rejected(cls, student_ans: str, correct_ans: str) -> "MatchResult":
        return cls(correct=False, student_answer=student_ans, correct_answer=correct_ans)
