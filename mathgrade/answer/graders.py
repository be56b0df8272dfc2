"""
Score computation.

Scores are a pure read-side function of a problem's persisted state plus the
global correction policy.  The first correct attempt is worth 1; later
attempts are discounted according to the policy, and hint or walkthrough
assistance is deducted afterwards.
"""

from __future__ import annotations

import math
import re
from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ..attempts.models import ProblemState

HINT_DEDUCTION = 0.25
DEFAULT_AUTOMATION_DEDUCTION = 0.5

_TRAILING_ZEROS = re.compile(r"\.?0+$")


class CorrectionPolicy(str, Enum):
    """
    How attempts after the first are discounted.

    Values are the persisted setting strings.
    """

    ZERO = "0"
    FULL = "1"
    HALF = "0.5"
    HALF_TO_THE_POWER_N = "half_n"


def score(attempts: int, policy: CorrectionPolicy) -> Optional[float]:
    """
    Score a correct answer reached after ``attempts`` submissions.

    Returns None when ``attempts`` is not positive.

    Examples:
        >>> score(1, CorrectionPolicy.ZERO)
        1.0
        >>> score(3, CorrectionPolicy.HALF_TO_THE_POWER_N)
        0.25
    """
    if attempts <= 0:
        return None
    if attempts == 1:
        return 1.0

    policy = CorrectionPolicy(policy)
    if policy is CorrectionPolicy.ZERO:
        return 0.0
    if policy is CorrectionPolicy.FULL:
        return 1.0
    if policy is CorrectionPolicy.HALF:
        return 0.5
    return 0.5 ** (attempts - 1)


def effective_attempts(state: "ProblemState") -> int:
    """Attempt count used for scoring: the earliest correct entry, else ``attempts``."""
    for index, record in enumerate(state.history):
        if record.correct:
            return index + 1
    return state.attempts


def problem_score(
    state: "ProblemState",
    policy: CorrectionPolicy,
    hint_deduction: float = HINT_DEDUCTION,
    default_automation_deduction: float = DEFAULT_AUTOMATION_DEDUCTION,
) -> Optional[float]:
    """
    Score one problem.

    Correct problems score by effective attempts, revealed problems score 0,
    and problems without a verdict (unanswered or still being retried)
    score None.  Hint and walkthrough deductions are then subtracted
    independently, each floored at 0.

    Args:
        state: Persisted problem state
        policy: Correction policy for attempts after the first
        hint_deduction: Amount taken off when a hint was used
        default_automation_deduction: Amount taken off for a walkthrough
            that recorded no deduction of its own

    Returns:
        Score in ``[0, 1]`` or None
    """
    # mathgrade.attempts imports this package at load time
    from ..attempts.models import ProblemStatus

    if state.status == ProblemStatus.CORRECT:
        value = score(max(effective_attempts(state), 1), policy)
    elif state.status == ProblemStatus.REVEALED:
        value = 0.0
    else:
        return None

    if value is None:
        return None

    if state.hint_used:
        value = max(0.0, value - hint_deduction)
    if state.automation_used:
        deduction = state.automation_deduction
        if deduction is None:
            deduction = default_automation_deduction
        value = max(0.0, value - deduction)

    return value


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with ties away from zero for positive values, like a calculator."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def percent(part: float, total: float) -> int:
    """Whole percentage of ``part`` over ``total``; 0 when ``total`` is 0."""
    if total <= 0:
        return 0
    return int(round_half_up(part / total * 100))


def format_score(value: Optional[float]) -> str:
    """
    Display form of a score.

    Examples:
        >>> format_score(None)
        '—'
        >>> format_score(0.5)
        '0.5'
        >>> format_score(0.125)
        '0.125'
    """
    if value is None:
        return "—"
    if value == 1:
        return "1"
    if value == 0:
        return "0"
    return _TRAILING_ZEROS.sub("", f"{value:.3f}")
