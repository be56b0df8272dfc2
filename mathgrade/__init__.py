"""mathgrade - grading engine for math self-study problems.

Subpackages:
- mathgrade.parser: Restricted expression parsing and evaluation
- mathgrade.math: Canonicalization, factor and numeric comparison
- mathgrade.answer: Answer equivalence, scoring and walkthrough deductions
- mathgrade.attempts: Per-problem attempt tracking and persistence
"""

__version__ = "0.1.0"

from .answer import CorrectionPolicy, answers_match, match_multi_part, problem_score, score
from .attempts import AttemptTracker, ProblemState, ProblemStatus

__all__ = [
    "AttemptTracker",
    "CorrectionPolicy",
    "ProblemState",
    "ProblemStatus",
    "answers_match",
    "match_multi_part",
    "problem_score",
    "score",
]
