"""
Report service.

Builds score reports for a section or the whole corpus, and retry
statistics for a problem group.
"""

from typing import List, Optional
import re

from mathgrade.answer import (
    DEFAULT_AUTOMATION_DEDUCTION,
    HINT_DEDUCTION,
    CorrectionPolicy,
    effective_attempts,
    format_score,
    percent,
    problem_score,
)
from mathgrade.attempts import AttemptTracker, ProblemStatus

from ..models.domain import (
    CorpusReport,
    GroupReport,
    GroupSummary,
    ProblemGroup,
    ReportRow,
    Section,
    SectionReport,
)
from ..repositories.corpus_repository import CorpusRepositoryInterface
from ..core.config import settings
from ..core.logging import get_logger

logger = get_logger(__name__)

SHORT_TEXT_LIMIT = 60
SHORT_TEXT_CUT = 57


def short_problem(text: Optional[str]) -> str:
    """
    Shorten problem text for a report row.

    Text longer than the limit is cut and suffixed with ``...``; a math span
    left open by the cut is closed so the row still renders.
    """
    if not text:
        return ""
    if len(text) <= SHORT_TEXT_LIMIT:
        return text
    truncated = text[:SHORT_TEXT_CUT]
    if len(re.findall(r"\$", truncated)) % 2:
        truncated += "$"
    return truncated + "..."


class ReportService:
    """Service for read-only score reports"""

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

        logger.info("ReportService initialized")

    def _group_report(self, group: ProblemGroup) -> GroupReport:
        rows = []
        for problem in group.problems:
            state = self.tracker.load(group.key(problem), len(problem.parts))
            score = problem_score(
                state,
                self.policy,
                hint_deduction=self.hint_deduction,
                default_automation_deduction=self.default_automation_deduction,
            )
            rows.append(
                ReportRow(
                    num=problem.num,
                    text=short_problem(problem.text),
                    attempts=effective_attempts(state),
                    status=state.status,
                    score=score,
                    score_display=format_score(score),
                )
            )
        return GroupReport(id=group.id, instruction=group.instruction, rows=rows)

    def _section_report(
        self, section: Section, include_edge: bool, include_corner: bool
    ) -> SectionReport:
        groups = [
            self._group_report(group)
            for group in section.groups(include_edge=include_edge, include_corner=include_corner)
        ]

        rows = [row for group in groups for row in group.rows]
        total = len(rows)
        answered = sum(1 for row in rows if row.status != ProblemStatus.UNANSWERED)
        earned = sum(row.score for row in rows if row.score is not None)

        return SectionReport(
            id=section.id,
            title=section.title,
            groups=groups,
            total=total,
            answered=answered,
            earned=earned,
            percent=percent(earned, total),
        )

    async def section_report(
        self,
        section_id: str,
        include_edge: bool = False,
        include_corner: bool = False,
    ) -> SectionReport:
        """Score report for one section"""
        section = await self.repository.get_section(section_id)
        report = self._section_report(section, include_edge, include_corner)

        logger.info(
            "Section report built",
            extra_data={
                "section_id": section_id,
                "total": report.total,
                "answered": report.answered,
                "percent": report.percent
            }
        )

        return report

    async def corpus_report(
        self, include_edge: bool = False, include_corner: bool = False
    ) -> CorpusReport:
        """Score report over every section"""
        corpus = await self.repository.get_corpus()
        sections: List[SectionReport] = [
            self._section_report(section, include_edge, include_corner)
            for section in corpus.sections
        ]

        total = sum(s.total for s in sections)
        earned = sum(s.earned for s in sections)

        return CorpusReport(
            title=corpus.title,
            correction_policy=self.policy.value,
            sections=sections,
            total=total,
            answered=sum(s.answered for s in sections),
            earned=earned,
            percent=percent(earned, total),
        )

    async def group_summary(self, group_id: str) -> GroupSummary:
        """Retry statistics over the finished problems of a group"""
        group = await self.repository.get_group(group_id)
        states = [
            self.tracker.load(group.key(problem), len(problem.parts))
            for problem in group.problems
        ]
        completed = [s for s in states if s.status.terminal]

        return GroupSummary(
            id=group.id,
            problem_count=len(states),
            completed=len(completed),
            total_attempts=sum(s.attempts for s in completed),
            correct_on_first_try=sum(
                1 for s in completed
                if s.status == ProblemStatus.CORRECT and s.attempts == 1
            ),
            revealed=sum(1 for s in completed if s.status == ProblemStatus.REVEALED),
            all_done=len(completed) == len(states),
        )


# Factory function for dependency injection
def get_report_service(
    repository: CorpusRepositoryInterface,
    tracker: AttemptTracker
) -> ReportService:
    """Create report service instance from settings"""
    return ReportService(
        repository,
        tracker,
        policy=CorrectionPolicy(settings.CORRECTION_POLICY),
        hint_deduction=settings.HINT_DEDUCTION,
        default_automation_deduction=settings.DEFAULT_AUTOMATION_DEDUCTION,
    )
