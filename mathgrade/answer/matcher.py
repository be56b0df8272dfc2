"""
Answer equivalence.

Decides whether a typed answer is the same as a stored canonical answer
despite differing notation, factor order or algebraic form.  Rules are tried
in a fixed order and the first success wins:

    1. canonicalized strings are equal
    2. canonical answer is the sentinel "Complete" and the typed answer
       re-derives the problem expression
    3. equal after stripping a ``<letter> =`` prefix from either or both sides
    4. same factors in a different order
    5. rules 1-4 again on lightly normalized strings
    6. numeric equivalence on canonicalized, then lightly normalized strings

Multi-blank problems are graded with an order-free, first-come-first-served
assignment of inputs to parts.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from ..math.canonical import (
    canonicalize,
    light_normalize,
    strip_status_prefix,
    strip_variable_prefix,
)
from ..math.factors import factors_match
from ..math.numeric import numerically_equivalent
from .answer_hash import AnswerPart, MatchResult, MatchStrategy

logger = logging.getLogger(__name__)


def _prefix_equal(user: str, correct: str) -> bool:
    # Stripping a bare string is a no-op, so the three combinations suffice
    return (
        strip_variable_prefix(user) == strip_variable_prefix(correct)
        or user == strip_variable_prefix(correct)
        or strip_variable_prefix(user) == correct
    )


def _rederives_problem(user: str, problem: str) -> bool:
    return user == problem or factors_match(user, problem) or numerically_equivalent(user, problem)


def _textual_match(
    user: str,
    correct: str,
    problem: Optional[str],
    is_complete: bool,
    strategies: tuple[MatchStrategy, MatchStrategy, MatchStrategy, MatchStrategy],
) -> Optional[MatchStrategy]:
    """Run rules 1-4 on one pair of normalized strings."""
    equal, complete, prefix, factor = strategies

    if user == correct:
        return equal
    if is_complete and problem and _rederives_problem(user, problem):
        return complete
    if _prefix_equal(user, correct):
        return prefix
    if factors_match(user, correct):
        return factor
    return None


def check_answer(
    user_input: str, canonical_answer: str, problem_text: Optional[str] = None
) -> MatchResult:
    """
    Compare a typed answer to a canonical answer.

    Args:
        user_input: What the student typed
        canonical_answer: Stored answer, possibly carrying a
            ``Complete:``/``Incomplete:``/``Not complete:`` prefix
        problem_text: Problem statement, used when the canonical answer is
            the sentinel ``Complete`` (the expression is already factored)

    Returns:
        MatchResult naming the first rule that accepted the answer, or a
        rejected result
    """
    correct, is_complete = strip_status_prefix(canonical_answer)

    norm_user = canonicalize(user_input)
    norm_correct = canonicalize(correct)
    norm_problem = canonicalize(problem_text) if problem_text else None

    strategy = _textual_match(
        norm_user,
        norm_correct,
        norm_problem,
        is_complete,
        (
            MatchStrategy.CANONICAL,
            MatchStrategy.COMPLETE,
            MatchStrategy.VARIABLE_PREFIX,
            MatchStrategy.FACTOR_ORDER,
        ),
    )

    light_user = light_normalize(user_input)
    light_correct = light_normalize(correct)
    if strategy is None:
        light_problem = light_normalize(problem_text) if problem_text else None
        strategy = _textual_match(
            light_user,
            light_correct,
            light_problem,
            is_complete,
            (
                MatchStrategy.LIGHT,
                MatchStrategy.LIGHT_COMPLETE,
                MatchStrategy.LIGHT_VARIABLE_PREFIX,
                MatchStrategy.LIGHT_FACTOR_ORDER,
            ),
        )

    if strategy is None and numerically_equivalent(norm_user, norm_correct):
        strategy = MatchStrategy.NUMERIC
    if strategy is None and numerically_equivalent(light_user, light_correct):
        strategy = MatchStrategy.LIGHT_NUMERIC

    if strategy is None:
        logger.debug("No match for %r against %r", user_input, canonical_answer)
        return MatchResult.rejected(user_input, canonical_answer)

    logger.debug("Matched %r against %r via %s", user_input, canonical_answer, strategy.value)
    return MatchResult.accepted(strategy, user_input, canonical_answer)


def answers_match(
    user_input: str, canonical_answer: str, problem_text: Optional[str] = None
) -> bool:
    """
    Return True if the typed answer is equivalent to the canonical answer.

    Examples:
        >>> answers_match("0", "$x = 0$")
        True
        >>> answers_match("(x+8)(x+2)", "$(x + 2)(x + 8)$")
        True
        >>> answers_match("(x-1)(x+6)", "(x+1)(x+6)")
        False
    """
    return check_answer(user_input, canonical_answer, problem_text).correct


def match_multi_part(
    user_inputs: Sequence[str],
    parts: Sequence[AnswerPart],
    problem_text: Optional[str] = None,
    matcher: Callable[[str, str, Optional[str]], bool] = answers_match,
) -> list[bool]:
    """
    Grade every answer blank of a problem.

    A single-part problem compares its one input directly.  With several
    parts, inputs are taken in order and each claims the first unclaimed
    part (in part order) it matches; inputs that claim nothing are false.
    This is greedy, not a maximum bipartite matching: the scan order is the
    tie-breaking rule and is kept as-is because changing it changes grades.

    Args:
        user_inputs: Typed answers, one per blank (missing blanks count as "")
        parts: Canonical answer parts
        problem_text: Problem statement, forwarded to the matcher
        matcher: Pairwise equivalence test

    Returns:
        One boolean per part, True where the input at that position matched
    """
    inputs = list(user_inputs)

    def _input(i: int) -> str:
        return inputs[i] if i < len(inputs) and inputs[i] else ""

    if len(parts) <= 1:
        return [matcher(_input(i), part.value, problem_text) for i, part in enumerate(parts)]

    claimed = [False] * len(parts)
    results = [False] * len(parts)

    for i in range(len(parts)):
        for j, part in enumerate(parts):
            if not claimed[j] and matcher(_input(i), part.value, problem_text):
                results[i] = True
                claimed[j] = True
                break

    return results
