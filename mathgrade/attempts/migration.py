"""
Loading persisted progress.

Snapshots written by older clients may lack history or carry fields the
current model rejects.  ``migrate_state`` is run once per load and always
returns a usable ``ProblemState``; it never writes anything back.
"""

from __future__ import annotations

import logging
from typing import Any, Union

from pydantic import ValidationError

from .models import AttemptRecord, ProblemState, ProblemStatus

logger = logging.getLogger(__name__)


def _rebuild_history(state: ProblemState) -> list[AttemptRecord]:
    correct = state.status == ProblemStatus.CORRECT
    results = list(state.results) if state.results is not None else [correct] * len(state.user_answers)
    return [AttemptRecord(answers=list(state.user_answers), results=results, correct=correct)]


def migrate_state(
    raw: Union[ProblemState, dict[str, Any], None], part_count: int
) -> ProblemState:
    """
    Normalize a persisted snapshot.

    - Missing snapshot: a fresh state with one blank answer per part.
    - Unreadable snapshot: logged and replaced by a fresh state.
    - Attempts recorded but no history: one entry is synthesized from the
      last answers, results and status.
    - ``cycle_start`` past ``attempts``: clamped to ``attempts``.
    - Fewer stored answers than parts: padded with blanks.

    Args:
        raw: Stored value (model or wire dict), or None
        part_count: Number of answer blanks the problem has now

    Returns:
        A new ProblemState; ``raw`` is left untouched
    """
    if raw is None:
        return ProblemState.fresh(part_count)

    try:
        if isinstance(raw, ProblemState):
            state = raw.model_copy(deep=True)
        else:
            state = ProblemState.model_validate(raw)
    except ValidationError as e:
        logger.warning("Discarding unreadable progress snapshot: %s", e.errors()[:3])
        return ProblemState.fresh(part_count)

    updates: dict[str, Any] = {}

    if len(state.user_answers) < part_count:
        updates["user_answers"] = list(state.user_answers) + [""] * (
            part_count - len(state.user_answers)
        )

    if state.attempts > 0 and not state.history:
        logger.info("Reconstructing history for snapshot with %d attempts", state.attempts)
        source = state.model_copy(update=updates) if updates else state
        updates["history"] = _rebuild_history(source)

    if state.cycle_start > state.attempts:
        updates["cycle_start"] = state.attempts

    if updates:
        state = state.model_copy(update=updates)
    return state
