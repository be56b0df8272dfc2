"""
Tests for ReportService.

Unit tests for score reports and group statistics.
"""

import pytest

from mathgrade.attempts import ProblemStatus

from study_api.core.errors import SectionNotFoundError
from study_api.services import short_problem


def test_short_problem_keeps_short_text():
    """Test short text is unchanged"""
    assert short_problem("$x^2 + 10x + 16$") == "$x^2 + 10x + 16$"
    assert short_problem(None) == ""


def test_short_problem_truncates():
    """Test long text is cut with an ellipsis"""
    text = "Find two consecutive integers whose product is one hundred and thirty-two."
    short = short_problem(text)

    assert len(short) == 60
    assert short.endswith("...")


def test_short_problem_closes_math():
    """Test a cut inside a math span is closed"""
    text = "Factor " + "$" + "x^2 + " * 12 + "1$"
    short = short_problem(text)

    assert short.count("$") == 2
    assert short.endswith("$...")


@pytest.mark.asyncio
async def test_section_report_empty(report_service):
    """Test report before any attempt"""
    report = await report_service.section_report("7.1")

    assert report.total == 3
    assert report.answered == 0
    assert report.earned == 0.0
    assert report.percent == 0
    assert all(row.score_display == "—" for g in report.groups for row in g.rows)


@pytest.mark.asyncio
async def test_section_report_scores(report_service, attempt_service):
    """Test rows reflect attempts, status and score"""
    await attempt_service.submit("7.1.1.1", ["2x(x^2+1)"])
    await attempt_service.submit("7.1.1.2", ["x"])
    await attempt_service.submit("7.1.1.2", ["y"])

    report = await report_service.section_report("7.1")
    rows = report.groups[0].rows

    assert rows[0].status == ProblemStatus.CORRECT
    assert rows[0].attempts == 1
    assert rows[0].score == 1.0
    assert rows[1].status == ProblemStatus.REVEALED
    assert rows[1].score == 0.0
    assert rows[1].score_display == "0"
    assert report.answered == 2
    assert report.percent == 33


@pytest.mark.asyncio
async def test_section_report_optional_groups(report_service):
    """Test edge and corner cases only on request"""
    report = await report_service.section_report("7.1", include_edge=True)

    assert [g.id for g in report.groups] == ["7.1.1", "7.1.2", "7.1.E"]
    assert report.total == 4


@pytest.mark.asyncio
async def test_section_report_not_found(report_service):
    """Test unknown section raises error"""
    with pytest.raises(SectionNotFoundError):
        await report_service.section_report("0.0")


@pytest.mark.asyncio
async def test_corpus_report(report_service, attempt_service):
    """Test totals over every section"""
    await attempt_service.submit("7.2.1.1", ["(x+2)(x+8)"])
    await attempt_service.submit("7.2.1.2", ["(x-3)(x+5)"])

    report = await report_service.corpus_report()

    assert [s.id for s in report.sections] == ["7.1", "7.2"]
    assert report.total == 5
    assert report.earned == 2.0
    assert report.percent == 40
    assert report.correction_policy == "0"


@pytest.mark.asyncio
async def test_group_summary(report_service, attempt_service):
    """Test retry statistics over finished problems"""
    await attempt_service.submit("7.2.1.1", ["(x+2)(x+8)"])
    await attempt_service.submit("7.2.1.2", ["1"])

    summary = await report_service.group_summary("7.2.1")

    assert summary.problem_count == 2
    assert summary.completed == 1
    assert summary.total_attempts == 1
    assert summary.correct_on_first_try == 1
    assert summary.all_done is False
