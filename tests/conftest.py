"""
Shared pytest fixtures for the grading core.

This module provides:
- Answer part builders
- Problem state builders with history
- In-memory store and tracker fixtures
- A helper for asserting Pydantic validation errors
"""

import pytest
from typing import Any, Sequence
from pydantic import BaseModel, ValidationError

from mathgrade.answer import AnswerPart
from mathgrade.attempts import (
    AttemptRecord,
    AttemptTracker,
    InMemoryProgressStore,
    ProblemState,
    ProblemStatus,
)


@pytest.fixture
def make_parts():
    """Build answer parts from bare values, labeled S1, S2, ... when several."""
    def _make(*values: str) -> list[AnswerPart]:
        if len(values) == 1:
            return [AnswerPart(value=values[0])]
        return [AnswerPart(label=f"S{i + 1}", value=v) for i, v in enumerate(values)]
    return _make


@pytest.fixture
def make_state():
    """
    Build a ProblemState from a compact history description.

    Each history item is ``(answers, results)``; ``correct`` is derived.
    ``attempts`` defaults to the history length.
    """
    def _make(
        history: Sequence[tuple[Sequence[str], Sequence[bool]]] = (),
        status: ProblemStatus = ProblemStatus.UNANSWERED,
        **overrides: Any,
    ) -> ProblemState:
        records = [
            AttemptRecord(answers=list(a), results=list(r), correct=all(r))
            for a, r in history
        ]
        fields: dict[str, Any] = {
            "attempts": len(records),
            "status": status,
            "history": records,
            "user_answers": list(records[-1].answers) if records else [""],
            "results": list(records[-1].results) if records else None,
        }
        fields.update(overrides)
        return ProblemState(**fields)
    return _make


@pytest.fixture
def store() -> InMemoryProgressStore:
    """Empty in-memory progress store"""
    return InMemoryProgressStore()


@pytest.fixture
def tracker(store: InMemoryProgressStore) -> AttemptTracker:
    """Tracker with the default retry budget of 2"""
    return AttemptTracker(store, max_retries=2)


@pytest.fixture
def assert_validation_error():
    """Helper to assert that a ValidationError is raised with expected details."""
    def _assert_validation(
        model_class: type[BaseModel],
        data: dict[str, Any],
        expected_field: str | None = None,
    ) -> ValidationError:
        """
        Assert that validating ``data`` raises ValidationError.

        Args:
            model_class: The Pydantic model class
            data: Invalid data to validate
            expected_field: Field name (or alias) expected in the error location

        Returns:
            The ValidationError that was raised
        """
        with pytest.raises(ValidationError) as exc_info:
            model_class.model_validate(data)

        error = exc_info.value
        if expected_field:
            field_errors = [e for e in error.errors() if e["loc"][0] == expected_field]
            assert len(field_errors) > 0, f"Expected error for field '{expected_field}' not found"

        return error

    return _assert_validation
