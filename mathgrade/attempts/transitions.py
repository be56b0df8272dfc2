"""
Problem state transitions.

Every function here is pure: it takes a ``ProblemState`` and returns a new
one.  Invalid calls (blank submissions, out-of-range dispute indices, a
submission after the cycle has ended) return the input object itself, so
callers can detect a no-op with ``new is old`` and skip the write.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from ..answer.answer_hash import AnswerPart
from ..answer.matcher import match_multi_part
from ..answer.walkthrough import Walkthrough
from .models import AttemptRecord, ProblemState, ProblemStatus

logger = logging.getLogger(__name__)

MultiPartMatcher = Callable[[Sequence[str], Sequence[AnswerPart], Optional[str]], list[bool]]


def _is_blank(inputs: Sequence[str]) -> bool:
    return all(not (value or "").strip() for value in inputs)


def submit(
    state: ProblemState,
    inputs: Sequence[str],
    parts: Sequence[AnswerPart],
    max_retries: int,
    problem_text: Optional[str] = None,
    matcher: MultiPartMatcher = match_multi_part,
) -> ProblemState:
    """
    Grade a submission and advance the retry cycle.

    The attempt counter always grows by one.  The status becomes correct
    when every part matched, revealed once the cycle has used up
    ``max_retries`` submissions, and incorrect otherwise.

    Args:
        state: Current state
        inputs: Typed answers, one per part
        parts: Canonical answer parts
        max_retries: Submissions allowed per cycle before the answer is revealed
        problem_text: Problem statement, forwarded to the matcher
        matcher: Multi-part grading function

    Returns:
        The new state, or ``state`` itself when nothing was submitted or the
        cycle is already over
    """
    if _is_blank(inputs):
        return state
    if state.status.terminal:
        logger.debug("Ignoring submission on %s problem", state.status.value)
        return state

    answers = [value or "" for value in inputs]
    answers.extend([""] * (len(parts) - len(answers)))

    results = list(matcher(answers, parts, problem_text))
    all_correct = all(results)

    attempts = state.attempts + 1
    cycle_attempts = attempts - state.cycle_start

    if all_correct:
        status = ProblemStatus.CORRECT
    elif cycle_attempts >= max_retries:
        status = ProblemStatus.REVEALED
    else:
        status = ProblemStatus.INCORRECT

    record = AttemptRecord(answers=answers, results=results, correct=all_correct)
    return state.model_copy(
        update={
            "attempts": attempts,
            "status": status,
            "user_answers": answers,
            "results": results,
            "history": [*state.history, record],
        }
    )


def reset(state: ProblemState, part_count: int) -> ProblemState:
    """Start a new retry cycle, keeping the attempt count and history."""
    return state.model_copy(
        update={
            "status": ProblemStatus.UNANSWERED,
            "cycle_start": state.attempts,
            "user_answers": [""] * part_count,
            "results": None,
        }
    )


def dispute(state: ProblemState, history_index: int, part_index: int) -> ProblemState:
    """
    Accept a previously rejected part of a past submission.

    The entry's ``correct`` flag is recomputed from its results and the part
    is flagged as disputed.  If any entry is now correct, the earliest one
    becomes the scoring basis: the status turns correct and the last
    answers, results and attempt count are taken from that entry.  This can
    only lower the attempt count, never below 1.
    """
    if not 0 <= history_index < len(state.history):
        return state
    entry = state.history[history_index]
    if not 0 <= part_index < len(entry.results):
        return state

    results = list(entry.results)
    results[part_index] = True
    disputed = list(entry.disputed) if entry.disputed is not None else [False] * len(results)
    disputed.extend([False] * (len(results) - len(disputed)))
    disputed[part_index] = True

    history = list(state.history)
    history[history_index] = entry.model_copy(
        update={"results": results, "correct": all(results), "disputed": disputed}
    )

    updates: dict = {"history": history}
    earliest = next((i for i, record in enumerate(history) if record.correct), None)
    if earliest is not None:
        attempts = earliest + 1
        updates.update(
            status=ProblemStatus.CORRECT,
            results=list(history[earliest].results),
            user_answers=list(history[earliest].answers),
            attempts=attempts,
            cycle_start=min(state.cycle_start, attempts),
        )

    return state.model_copy(update=updates)


def use_hint(state: ProblemState) -> ProblemState:
    """Record that the hint was opened."""
    if state.hint_used:
        return state
    return state.model_copy(update={"hint_used": True})


def apply_walkthrough(state: ProblemState, walkthrough: Walkthrough) -> ProblemState:
    """Store walkthrough progress and its accumulated deduction."""
    return state.model_copy(
        update={
            "automation_used": True,
            "automation_deduction": walkthrough.deduction,
            "automation_step_states": list(walkthrough.step_states),
        }
    )


def resume_walkthrough(state: ProblemState, total_steps: int) -> Walkthrough:
    """Walkthrough progress saved on ``state``, fitted to ``total_steps``."""
    return Walkthrough.resume(
        total_steps, state.automation_step_states, state.automation_deduction
    )
