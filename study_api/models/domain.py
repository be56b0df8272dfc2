"""
Domain models for the study API.

Corpus entities mirror the problem JSON document; request and response
models are what the HTTP layer exchanges with the UI.
"""

from typing import List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from mathgrade.answer import AnswerPart, format_score, to_answer_parts, walkthrough_steps
from mathgrade.attempts import AttemptRecord, ProblemState, ProblemStatus


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Corpus

class Problem(_CamelModel):
    """One problem of a group"""
    num: int
    text: str
    answer: Union[str, List[AnswerPart]]
    hint: Optional[str] = None
    steps: Optional[List[str]] = None

    @property
    def parts(self) -> List[AnswerPart]:
        return to_answer_parts(self.answer)

    @property
    def walkthrough_steps(self) -> List[str]:
        return walkthrough_steps(self.steps, self.hint)


class ProblemGroup(_CamelModel):
    """A set of problems sharing one instruction"""
    id: str
    instruction: str = ""
    problems: List[Problem] = Field(default_factory=list)

    def key(self, problem: Problem) -> str:
        """Progress key of ``problem``"""
        return f"{self.id}.{problem.num}"

    @property
    def keys(self) -> List[str]:
        return [self.key(p) for p in self.problems]


class Section(_CamelModel):
    """A textbook section with its exercise groups"""
    id: str
    title: str
    monitoring_progress: List[ProblemGroup] = Field(default_factory=list)
    edge_cases: List[ProblemGroup] = Field(default_factory=list)
    corner_cases: List[ProblemGroup] = Field(default_factory=list)

    def groups(self, include_edge: bool = False, include_corner: bool = False) -> List[ProblemGroup]:
        """Groups in display order, optional ones on request"""
        groups = list(self.monitoring_progress)
        if include_edge:
            groups.extend(self.edge_cases)
        if include_corner:
            groups.extend(self.corner_cases)
        return groups

    @property
    def all_groups(self) -> List[ProblemGroup]:
        return self.groups(include_edge=True, include_corner=True)


class Corpus(_CamelModel):
    """The whole problem document"""
    title: str = ""
    sections: List[Section] = Field(default_factory=list)


class ProblemLocation(BaseModel):
    """A problem together with the group and section it belongs to"""
    section: Section
    group: ProblemGroup
    problem: Problem

    @property
    def key(self) -> str:
        return self.group.key(self.problem)


# Requests

class SubmitRequest(BaseModel):
    """Answers for every blank of a problem"""
    answers: List[str] = Field(..., min_length=1)

    @field_validator("answers")
    @classmethod
    def limit_length(cls, v: List[str]) -> List[str]:
        """Reject oversized input"""
        for answer in v:
            if len(answer) > 10000:
                raise ValueError("Answer too long (max 10000 characters)")
        return v


class DisputeRequest(_CamelModel):
    """History entry and part to accept"""
    history_index: int = Field(..., ge=0)
    part_index: int = Field(..., ge=0)


class TypeStepRequest(BaseModel):
    """Student's own working for the current walkthrough step"""
    text: str = Field(..., min_length=1, max_length=10000)


# Responses

class AttemptRecordResponse(_CamelModel):
    """One history entry"""
    answers: List[str]
    results: List[bool]
    correct: bool
    disputed: Optional[List[bool]] = None

    @classmethod
    def from_domain(cls, record: AttemptRecord) -> "AttemptRecordResponse":
        return cls(
            answers=record.answers,
            results=record.results,
            correct=record.correct,
            disputed=record.disputed,
        )


class ProblemStateResponse(_CamelModel):
    """Progress on one problem as shown to the student"""
    key: str
    status: ProblemStatus
    attempts: int
    cycle_attempts: int
    retries_left: int
    user_answers: List[str]
    results: Optional[List[bool]] = None
    history: List[AttemptRecordResponse] = Field(default_factory=list)
    hint_used: bool = False
    automation_used: bool = False
    automation_deduction: Optional[float] = None
    score: Optional[float] = None
    score_display: str = "—"
    correct_answers: Optional[List[AnswerPart]] = None

    @classmethod
    def from_domain(
        cls,
        key: str,
        state: ProblemState,
        max_retries: int,
        score: Optional[float],
        parts: List[AnswerPart],
    ) -> "ProblemStateResponse":
        # Answers are shown only once the cycle is over
        show_answer = state.status in (ProblemStatus.CORRECT, ProblemStatus.REVEALED)
        return cls(
            key=key,
            status=state.status,
            attempts=state.attempts,
            cycle_attempts=state.cycle_attempts,
            retries_left=max(max_retries - state.cycle_attempts, 0),
            user_answers=state.user_answers,
            results=state.results,
            history=[AttemptRecordResponse.from_domain(r) for r in state.history],
            hint_used=bool(state.hint_used),
            automation_used=bool(state.automation_used),
            automation_deduction=state.automation_deduction,
            score=score,
            score_display=format_score(score),
            correct_answers=parts if show_answer else None,
        )


class HintResponse(_CamelModel):
    """Hint text plus the updated state"""
    hint: Optional[str]
    state: ProblemStateResponse


class WalkthroughResponse(_CamelModel):
    """Walkthrough progress for one problem"""
    key: str
    total_steps: int
    step_costs: List[float]
    revealed_steps: List[Optional[str]]
    typed_steps: List[Optional[str]]
    current_step: int
    finished: bool
    next_cost: float
    deduction: float
    posted_answers: Optional[List[str]] = None


class ResetAllResponse(_CamelModel):
    """Keys whose progress was cleared"""
    cleared: List[str]


# Reports

class ReportRow(_CamelModel):
    """One problem line of a report"""
    num: int
    text: str
    attempts: int
    status: ProblemStatus
    score: Optional[float] = None
    score_display: str = "—"


class GroupReport(_CamelModel):
    """Rows under one group instruction"""
    id: str
    instruction: str
    rows: List[ReportRow] = Field(default_factory=list)


class SectionReport(_CamelModel):
    """Score totals for one section"""
    id: str
    title: str
    groups: List[GroupReport] = Field(default_factory=list)
    total: int = 0
    answered: int = 0
    earned: float = 0.0
    percent: int = 0


class CorpusReport(_CamelModel):
    """Score totals over every section"""
    title: str
    correction_policy: str
    sections: List[SectionReport] = Field(default_factory=list)
    total: int = 0
    answered: int = 0
    earned: float = 0.0
    percent: int = 0


class GroupSummary(_CamelModel):
    """Retry statistics of a problem group"""
    id: str
    problem_count: int
    completed: int
    total_attempts: int
    correct_on_first_try: int
    revealed: int
    all_done: bool


# Corpus views (answers withheld)

class ProblemView(_CamelModel):
    """A problem as presented before it is answered"""
    key: str
    num: int
    text: str
    part_labels: List[str]
    has_hint: bool
    step_count: int

    @classmethod
    def from_domain(cls, group: ProblemGroup, problem: Problem) -> "ProblemView":
        return cls(
            key=group.key(problem),
            num=problem.num,
            text=problem.text,
            part_labels=[part.label for part in problem.parts],
            has_hint=bool(problem.hint),
            step_count=len(problem.walkthrough_steps),
        )


class GroupView(_CamelModel):
    """A problem group without its answers"""
    id: str
    instruction: str
    problems: List[ProblemView]

    @classmethod
    def from_domain(cls, group: ProblemGroup) -> "GroupView":
        return cls(
            id=group.id,
            instruction=group.instruction,
            problems=[ProblemView.from_domain(group, p) for p in group.problems],
        )


class SectionView(_CamelModel):
    """A section without its answers"""
    id: str
    title: str
    monitoring_progress: List[GroupView]
    edge_cases: List[GroupView]
    corner_cases: List[GroupView]

    @classmethod
    def from_domain(cls, section: Section) -> "SectionView":
        return cls(
            id=section.id,
            title=section.title,
            monitoring_progress=[GroupView.from_domain(g) for g in section.monitoring_progress],
            edge_cases=[GroupView.from_domain(g) for g in section.edge_cases],
            corner_cases=[GroupView.from_domain(g) for g in section.corner_cases],
        )


class SectionSummaryResponse(_CamelModel):
    """Section listing entry"""
    id: str
    title: str
    problem_count: int

    @classmethod
    def from_domain(cls, section: Section) -> "SectionSummaryResponse":
        return cls(
            id=section.id,
            title=section.title,
            problem_count=sum(len(g.problems) for g in section.monitoring_progress),
        )
