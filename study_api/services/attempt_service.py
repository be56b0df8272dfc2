"""
Attempt service.

Connects the corpus to the attempt tracker: looks problems up by key, runs
the transition and turns the resulting state into a response.
"""

from typing import List, Optional

from mathgrade.answer import (
    DEFAULT_AUTOMATION_DEDUCTION,
    HINT_DEDUCTION,
    CorrectionPolicy,
    posted_answer_values,
    problem_score,
    step_costs,
)
from mathgrade.attempts import AttemptTracker, ProblemState

from ..models.domain import (
    HintResponse,
    ProblemLocation,
    ProblemStateResponse,
    ResetAllResponse,
    WalkthroughResponse,
)
from ..repositories.corpus_repository import CorpusRepositoryInterface
from ..core.config import settings
from ..core.errors import ValidationError
from ..core.logging import get_logger

logger = get_logger(__name__)


class AttemptService:
    """
    Service for per-problem actions.

    Every mutating call is written through to the progress store by the
    tracker before it returns.
    """

    def __init__(
        self,
        repository: CorpusRepositoryInterface,
        tracker: AttemptTracker,
        policy: CorrectionPolicy = CorrectionPolicy.ZERO,
        hint_deduction: float = HINT_DEDUCTION,
        default_automation_deduction: float = DEFAULT_AUTOMATION_DEDUCTION,
    ):
        self.repository = repository
        self.tracker = tracker
        self.policy = CorrectionPolicy(policy)
        self.hint_deduction = hint_deduction
        self.default_automation_deduction = default_automation_deduction

        logger.info(
            "AttemptService initialized",
            extra_data={
                "max_retries": tracker.max_retries,
                "correction_policy": self.policy.value
            }
        )

    def score(self, state: ProblemState) -> Optional[float]:
        """Score of ``state`` under the configured policy and deductions"""
        return problem_score(
            state,
            self.policy,
            hint_deduction=self.hint_deduction,
            default_automation_deduction=self.default_automation_deduction,
        )

    def _respond(self, location: ProblemLocation, state: ProblemState) -> ProblemStateResponse:
        return ProblemStateResponse.from_domain(
            location.key,
            state,
            self.tracker.max_retries,
            self.score(state),
            location.problem.parts,
        )

    def _walkthrough_response(
        self,
        location: ProblemLocation,
        posted_answers: Optional[List[str]] = None,
    ) -> WalkthroughResponse:
        steps = location.problem.walkthrough_steps
        walkthrough = self.tracker.walkthrough(
            location.key, len(steps), len(location.problem.parts)
        )
        # Step text is only disclosed once revealed
        return WalkthroughResponse(
            key=location.key,
            total_steps=len(steps),
            step_costs=step_costs(len(steps)),
            revealed_steps=[
                text if state.revealed else None
                for text, state in zip(steps, walkthrough.step_states)
            ],
            typed_steps=[state.user_typed for state in walkthrough.step_states],
            current_step=walkthrough.current_step,
            finished=walkthrough.finished,
            next_cost=walkthrough.next_cost,
            deduction=walkthrough.deduction,
            posted_answers=posted_answers,
        )

    async def get_state(self, problem_key: str) -> ProblemStateResponse:
        """Current progress on a problem"""
        location = await self.repository.locate(problem_key)
        state = self.tracker.load(problem_key, len(location.problem.parts))
        return self._respond(location, state)

    async def submit(self, problem_key: str, answers: List[str]) -> ProblemStateResponse:
        """
        Grade answers for a problem.

        Raises:
            ProblemNotFoundError: If the key is not in the corpus
            ValidationError: If more answers than blanks are given
        """
        location = await self.repository.locate(problem_key)
        parts = location.problem.parts

        if len(answers) > len(parts):
            raise ValidationError(
                f"Problem '{problem_key}' has {len(parts)} answer blank(s), got {len(answers)}",
                field="answers"
            )

        state = self.tracker.submit(
            problem_key, answers, parts, problem_text=location.problem.text
        )

        logger.info(
            "Answers graded",
            extra_data={
                "problem_key": problem_key,
                "status": state.status.value,
                "attempts": state.attempts,
                "results": state.results
            }
        )

        return self._respond(location, state)

    async def reset(self, problem_key: str) -> ProblemStateResponse:
        """Start a new retry cycle"""
        location = await self.repository.locate(problem_key)
        state = self.tracker.reset(problem_key, len(location.problem.parts))

        logger.info(
            "Problem reset",
            extra_data={"problem_key": problem_key, "attempts": state.attempts}
        )

        return self._respond(location, state)

    async def dispute(
        self, problem_key: str, history_index: int, part_index: int
    ) -> ProblemStateResponse:
        """Accept a rejected part of a past submission; callers authorize first"""
        location = await self.repository.locate(problem_key)
        state = self.tracker.dispute(
            problem_key, history_index, part_index, len(location.problem.parts)
        )

        logger.info(
            "Dispute applied",
            extra_data={
                "problem_key": problem_key,
                "history_index": history_index,
                "part_index": part_index,
                "status": state.status.value,
                "attempts": state.attempts
            }
        )

        return self._respond(location, state)

    async def use_hint(self, problem_key: str) -> HintResponse:
        """Open the hint, recording the deduction"""
        location = await self.repository.locate(problem_key)
        state = self.tracker.use_hint(problem_key, len(location.problem.parts))
        return HintResponse(hint=location.problem.hint, state=self._respond(location, state))

    async def get_walkthrough(self, problem_key: str) -> WalkthroughResponse:
        """Walkthrough progress for a problem"""
        location = await self.repository.locate(problem_key)
        return self._walkthrough_response(location)

    async def reveal_step(self, problem_key: str) -> WalkthroughResponse:
        """Reveal the next walkthrough step"""
        location = await self.repository.locate(problem_key)
        self.tracker.reveal_step(
            problem_key,
            len(location.problem.walkthrough_steps),
            len(location.problem.parts),
        )
        return self._walkthrough_response(location)

    async def type_step(self, problem_key: str, text: str) -> WalkthroughResponse:
        """Record the student's own working for the next walkthrough step"""
        location = await self.repository.locate(problem_key)
        self.tracker.type_step(
            problem_key,
            len(location.problem.walkthrough_steps),
            text,
            len(location.problem.parts),
        )
        return self._walkthrough_response(location)

    async def post_answer(self, problem_key: str) -> WalkthroughResponse:
        """Fill in the full answer at the walkthrough's posting cost"""
        location = await self.repository.locate(problem_key)
        self.tracker.post_answer(
            problem_key,
            len(location.problem.walkthrough_steps),
            len(location.problem.parts),
        )
        return self._walkthrough_response(
            location, posted_answers=posted_answer_values(location.problem.parts)
        )

    async def reset_group(self, group_id: str) -> ResetAllResponse:
        """Clear every record of a problem group, history included"""
        group = await self.repository.get_group(group_id)
        keys = group.keys
        self.tracker.reset_all(keys)

        logger.info(
            "Group progress cleared",
            extra_data={"group_id": group_id, "problems": len(keys)}
        )

        return ResetAllResponse(cleared=keys)


# Factory function for dependency injection
def get_attempt_service(
    repository: CorpusRepositoryInterface,
    tracker: AttemptTracker
) -> AttemptService:
    """Create attempt service instance from settings"""
    return AttemptService(
        repository,
        tracker,
        policy=CorrectionPolicy(settings.CORRECTION_POLICY),
        hint_deduction=settings.HINT_DEDUCTION,
        default_automation_deduction=settings.DEFAULT_AUTOMATION_DEDUCTION,
    )
