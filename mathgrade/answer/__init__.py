"""
Answer checking and scoring.

- answer_hash: answer parts and match results
- matcher: ordered equivalence chain and multi-part assignment
- graders: correction policies and score computation
- walkthrough: assisted walkthrough steps and deductions
"""

from .answer_hash import (
    AnswerPart,
    AnswerSpec,
    MatchResult,
    MatchStrategy,
    to_answer_parts,
)
from .graders import (
    DEFAULT_AUTOMATION_DEDUCTION,
    HINT_DEDUCTION,
    CorrectionPolicy,
    effective_attempts,
    format_score,
    percent,
    problem_score,
    round_half_up,
    score,
)
from .matcher import answers_match, check_answer, match_multi_part
from .walkthrough import (
    COST_SCHEDULES,
    POST_COST,
    StepState,
    Walkthrough,
    current_step,
    posted_answer_values,
    step_costs,
    walkthrough_steps,
)

__all__ = [
    "AnswerPart",
    "AnswerSpec",
    "MatchResult",
    "MatchStrategy",
    "to_answer_parts",
    "CorrectionPolicy",
    "HINT_DEDUCTION",
    "DEFAULT_AUTOMATION_DEDUCTION",
    "score",
    "effective_attempts",
    "problem_score",
    "format_score",
    "percent",
    "round_half_up",
    "answers_match",
    "check_answer",
    "match_multi_part",
    "COST_SCHEDULES",
    "POST_COST",
    "StepState",
    "Walkthrough",
    "current_step",
    "posted_answer_values",
    "step_costs",
    "walkthrough_steps",
]
