"""Tests for the attempt tracker and its write-through store."""

import threading

import pytest

from mathgrade.attempts import (
    AttemptTracker,
    InMemoryProgressStore,
    ProblemState,
    ProblemStatus,
)


@pytest.fixture
def parts(make_parts):
    return make_parts("$x = 0$", "$x = 3$", "$x = 4$")


class TestInMemoryProgressStore:
    """Dictionary-backed store."""

    def test_get_missing(self, store):
        assert store.get("1.1") is None

    def test_put_copies(self, store):
        snapshot = {"attempts": 1, "userAnswers": ["1"]}
        store.put("1.1", snapshot)
        snapshot["userAnswers"].append("2")

        assert store.get("1.1") == {"attempts": 1, "userAnswers": ["1"]}

    def test_get_copies(self, store):
        store.put("1.1", {"userAnswers": ["1"]})
        store.get("1.1")["userAnswers"].append("2")
        assert store.get("1.1") == {"userAnswers": ["1"]}

    def test_delete_ignores_unknown(self, store):
        store.put("1.1", {})
        store.delete(["1.1", "9.9"])
        assert store.keys() == []

    def test_initial_data(self):
        store = InMemoryProgressStore({"2.3": {"attempts": 1}})
        assert store.keys() == ["2.3"]


class TestAttemptTracker:
    """State machine with a write-through cache."""

    def test_rejects_zero_retries(self, store):
        with pytest.raises(ValueError):
            AttemptTracker(store, max_retries=0)

    def test_load_fresh(self, tracker):
        state = tracker.load("1.1", part_count=3)
        assert state == ProblemState.fresh(3)

    def test_load_does_not_write(self, tracker, store):
        tracker.load("1.1")
        assert store.get("1.1") is None

    def test_submit_writes_through(self, tracker, store, parts):
        state = tracker.submit("1.1", ["4", "0", "3"], parts)

        assert state.status == ProblemStatus.CORRECT
        stored = store.get("1.1")
        assert stored["status"] == "correct"
        assert stored["attempts"] == 1
        assert stored["userAnswers"] == ["4", "0", "3"]
        assert stored["history"][0]["correct"] is True

    def test_retry_budget(self, tracker, parts):
        tracker.submit("1.1", ["4", "0", "5"], parts)
        assert tracker.load("1.1", 3).status == ProblemStatus.INCORRECT

        state = tracker.submit("1.1", ["4", "0", "6"], parts)
        assert state.status == ProblemStatus.REVEALED
        assert state.attempts == 2

    def test_no_op_does_not_write(self, parts):
        class CountingStore(InMemoryProgressStore):
            def __init__(self):
                super().__init__()
                self.writes = 0

            def put(self, key, snapshot):
                self.writes += 1
                super().put(key, snapshot)

        store = CountingStore()
        tracker = AttemptTracker(store)

        tracker.submit("1.1", ["", "", ""], parts)
        tracker.dispute("1.1", 0, 0, part_count=3)
        assert store.writes == 0

        tracker.use_hint("1.1", part_count=3)
        tracker.use_hint("1.1", part_count=3)
        assert store.writes == 1

    def test_reset_then_retry(self, tracker, store, parts):
        tracker.submit("1.1", ["1", "2", "5"], parts)
        tracker.submit("1.1", ["1", "2", "6"], parts)

        state = tracker.reset("1.1", part_count=3)
        assert state.status == ProblemStatus.UNANSWERED
        assert store.get("1.1")["cycleStart"] == 2

        state = tracker.submit("1.1", ["0", "3", "4"], parts)
        assert state.status == ProblemStatus.CORRECT
        assert state.attempts == 3
        assert len(state.history) == 3

    def test_dispute_written_through(self, tracker, store, make_parts):
        parts = make_parts("$(x + 2)(x + 8)$")
        tracker.submit("1.1", ["(x+2)(x+9)"], parts)
        tracker.submit("1.1", ["(x+2)(x+10)"], parts)

        state = tracker.dispute("1.1", 0, 0)
        assert state.status == ProblemStatus.CORRECT
        assert state.attempts == 1
        assert store.get("1.1")["history"][0]["disputed"] == [True]

    def test_state_survives_new_tracker(self, store, parts):
        AttemptTracker(store).submit("1.1", ["0", "3", "9"], parts)

        state = AttemptTracker(store).load("1.1", 3)
        assert state.attempts == 1
        assert state.results == [True, True, False]

    def test_walkthrough_actions(self, tracker, store):
        tracker.reveal_step("1.1", total_steps=3)
        tracker.type_step("1.1", 3, "x(x+3)")
        state = tracker.post_answer("1.1", 3)

        assert state.automation_used is True
        assert state.automation_deduction == pytest.approx(0.3)
        assert store.get("1.1")["automationStepStates"][1]["userTyped"] == "x(x+3)"

        walkthrough = tracker.walkthrough("1.1", 3)
        assert walkthrough.current_step == 2
        assert walkthrough.next_cost == 0.3

    def test_blank_typed_step_does_not_write(self, tracker, store):
        tracker.type_step("1.1", 2, "   ")
        assert store.get("1.1") is None

    def test_reset_all(self, tracker, store, parts):
        tracker.submit("1.1", ["0", "3", "4"], parts)
        tracker.submit("1.2", ["0", "3", "5"], parts)
        tracker.submit("2.1", ["0", "3", "4"], parts)

        tracker.reset_all(["1.1", "1.2", "1.3"])

        assert store.keys() == ["2.1"]
        assert tracker.load("1.1", 3) == ProblemState.fresh(3)
        assert tracker.load("2.1", 3).status == ProblemStatus.CORRECT

    def test_concurrent_submissions_counted(self, tracker, store, parts):
        threads = [
            threading.Thread(target=tracker.submit, args=("1.1", ["9", "9", "9"], parts))
            for _ in range(8)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        state = tracker.load("1.1", 3)
        assert state.attempts == 2
        assert state.status == ProblemStatus.REVEALED
        assert len(store.get("1.1")["history"]) == 2
