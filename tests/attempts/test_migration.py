"""Tests for loading and normalizing stored snapshots."""

import logging

from mathgrade.attempts import ProblemState, ProblemStatus, migrate_state


class TestMigrateState:
    """Normalization of persisted progress."""

    def test_missing_snapshot(self):
        state = migrate_state(None, 3)
        assert state == ProblemState.fresh(3)
        assert state.user_answers == ["", "", ""]

    def test_camel_case_snapshot(self):
        raw = {
            "attempts": 1,
            "cycleStart": 0,
            "status": "correct",
            "userAnswers": ["4"],
            "results": [True],
            "history": [{"answers": ["4"], "results": [True], "correct": True}],
            "hintUsed": True,
        }
        state = migrate_state(raw, 1)

        assert state.status == ProblemStatus.CORRECT
        assert state.hint_used is True
        assert state.history[0].answers == ["4"]

    def test_wire_round_trip(self, make_state):
        state = make_state(history=[(["1"], [False])], status=ProblemStatus.INCORRECT)
        assert migrate_state(state.to_wire(), 1) == state

    def test_legacy_nulls_accepted(self):
        raw = {"attempts": 0, "status": "unanswered", "hintUsed": None, "automationUsed": None}
        state = migrate_state(raw, 1)
        assert state.hint_used is None
        assert state.user_answers == [""]

    def test_history_rebuilt(self):
        raw = {"attempts": 2, "status": "revealed", "userAnswers": ["1", "2"], "results": [True, False]}
        state = migrate_state(raw, 2)

        assert state.attempts == 2
        assert len(state.history) == 1
        record = state.history[0]
        assert record.answers == ["1", "2"]
        assert record.results == [True, False]
        assert not record.correct

    def test_history_rebuilt_without_results(self):
        raw = {"attempts": 1, "status": "correct", "userAnswers": ["4"]}
        state = migrate_state(raw, 1)
        assert state.history[0].results == [True]
        assert state.history[0].correct

    def test_answers_padded_to_part_count(self):
        state = migrate_state({"userAnswers": ["1"]}, 3)
        assert state.user_answers == ["1", "", ""]

    def test_cycle_start_clamped(self):
        state = migrate_state({"attempts": 1, "cycleStart": 4, "history": [{"answers": ["1"]}]}, 1)
        assert state.cycle_start == 1

    def test_unreadable_snapshot_replaced(self, caplog):
        with caplog.at_level(logging.WARNING, logger="mathgrade.attempts.migration"):
            state = migrate_state({"attempts": -3, "status": "bogus"}, 2)

        assert state == ProblemState.fresh(2)
        assert "Discarding unreadable progress snapshot" in caplog.text

    def test_model_input_not_shared(self, make_state):
        original = make_state(history=[(["1"], [False])], status=ProblemStatus.INCORRECT)
        migrated = migrate_state(original, 1)

        assert migrated == original
        assert migrated is not original
        assert migrated.history[0] is not original.history[0]
