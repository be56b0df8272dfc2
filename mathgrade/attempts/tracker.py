"""
Attempt tracker.

Owns every problem's ``ProblemState``.  States are read from the store once,
migrated, and cached; each transition is written through to the store
before the call returns.  Transitions on one key are serialized by a lock
per key, so history, status and attempt count always change together.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Iterable, Optional, Sequence

from ..answer.answer_hash import AnswerPart
from ..answer.walkthrough import Walkthrough
from . import transitions
from .migration import migrate_state
from .models import ProblemState
from .store import ProgressStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 2


class AttemptTracker:
    """
    Per-problem state machine with a write-through cache.

    Args:
        store: Durable progress store
        max_retries: Submissions allowed per cycle before the answer is revealed
    """

    def __init__(self, store: ProgressStore, max_retries: int = DEFAULT_MAX_RETRIES):
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        self.store = store
        self.max_retries = max_retries
        self._cache: dict[str, ProblemState] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock(self, key: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    def _load(self, key: str, part_count: int) -> ProblemState:
        state = self._cache.get(key)
        if state is None:
            state = migrate_state(self.store.get(key), part_count)
            self._cache[key] = state
        return state

    def _apply(
        self,
        key: str,
        part_count: int,
        transition: Callable[[ProblemState], ProblemState],
    ) -> ProblemState:
        with self._lock(key):
            state = self._load(key, part_count)
            new_state = transition(state)
            if new_state is state:
                return state
            self.store.put(key, new_state.to_wire())
            self._cache[key] = new_state
            return new_state

    def load(self, key: str, part_count: int = 1) -> ProblemState:
        """Current state of ``key``"""
        with self._lock(key):
            return self._load(key, part_count)

    def submit(
        self,
        key: str,
        inputs: Sequence[str],
        parts: Sequence[AnswerPart],
        problem_text: Optional[str] = None,
    ) -> ProblemState:
        """Grade ``inputs`` against ``parts`` and record the attempt"""
        state = self._apply(
            key,
            len(parts),
            lambda s: transitions.submit(
                s, inputs, parts, self.max_retries, problem_text=problem_text
            ),
        )
        logger.info(
            "Submission for %s: status=%s attempts=%d",
            key,
            state.status.value,
            state.attempts,
        )
        return state

    def reset(self, key: str, part_count: int = 1) -> ProblemState:
        """Start a new retry cycle for ``key``"""
        return self._apply(key, part_count, lambda s: transitions.reset(s, part_count))

    def dispute(
        self, key: str, history_index: int, part_index: int, part_count: int = 1
    ) -> ProblemState:
        """
        Accept part ``part_index`` of history entry ``history_index``.

        Callers must have authorized the request; out-of-range indices leave
        the state untouched.
        """
        state = self._apply(
            key,
            part_count,
            lambda s: transitions.dispute(s, history_index, part_index),
        )
        logger.info(
            "Dispute on %s entry %d part %d: status=%s",
            key,
            history_index,
            part_index,
            state.status.value,
        )
        return state

    def use_hint(self, key: str, part_count: int = 1) -> ProblemState:
        """Record that the hint for ``key`` was opened"""
        return self._apply(key, part_count, transitions.use_hint)

    def walkthrough(self, key: str, total_steps: int, part_count: int = 1) -> Walkthrough:
        """Saved walkthrough progress for ``key``"""
        return transitions.resume_walkthrough(self.load(key, part_count), total_steps)

    def _walkthrough_action(
        self,
        key: str,
        total_steps: int,
        part_count: int,
        action: Callable[[Walkthrough], Walkthrough],
    ) -> ProblemState:
        def transition(state: ProblemState) -> ProblemState:
            current = transitions.resume_walkthrough(state, total_steps)
            updated = action(current)
            if updated is current:
                return state
            return transitions.apply_walkthrough(state, updated)

        return self._apply(key, part_count, transition)

    def reveal_step(self, key: str, total_steps: int, part_count: int = 1) -> ProblemState:
        """Reveal the next walkthrough step and charge its cost"""
        return self._walkthrough_action(
            key, total_steps, part_count, lambda w: w.reveal_step()
        )

    def type_step(
        self, key: str, total_steps: int, text: str, part_count: int = 1
    ) -> ProblemState:
        """Record the student's own working for the next walkthrough step"""
        return self._walkthrough_action(
            key, total_steps, part_count, lambda w: w.type_step(text)
        )

    def post_answer(self, key: str, total_steps: int, part_count: int = 1) -> ProblemState:
        """Charge for filling in the full answer"""
        return self._walkthrough_action(
            key, total_steps, part_count, lambda w: w.post_answer()
        )

    def reset_all(self, keys: Iterable[str]) -> None:
        """Forget ``keys`` entirely, attempts and history included"""
        keys = list(keys)
        for key in keys:
            with self._lock(key):
                self.store.delete([key])
                self._cache.pop(key, None)
        logger.info("Cleared progress for %d problems", len(keys))
