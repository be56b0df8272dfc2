"""
Attempt tracking.

- models: persisted problem state
- migration: normalizing older snapshots on load
- transitions: pure submit / reset / dispute / hint / walkthrough updates
- store: progress storage interface
- tracker: state machine with write-through cache
"""

from .migration import migrate_state
from .models import AttemptRecord, ProblemState, ProblemStatus
from .store import InMemoryProgressStore, ProgressStore
from .tracker import DEFAULT_MAX_RETRIES, AttemptTracker

__all__ = [
    "AttemptRecord",
    "ProblemState",
    "ProblemStatus",
    "migrate_state",
    "ProgressStore",
    "InMemoryProgressStore",
    "AttemptTracker",
    "DEFAULT_MAX_RETRIES",
]
