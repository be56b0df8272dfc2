"""Domain models package"""

from .domain import (
    Problem,
    ProblemGroup,
    Section,
    Corpus,
    ProblemLocation,
    SubmitRequest,
    DisputeRequest,
    TypeStepRequest,
    AttemptRecordResponse,
    ProblemStateResponse,
    HintResponse,
    WalkthroughResponse,
    ResetAllResponse,
    ReportRow,
    GroupReport,
    SectionReport,
    CorpusReport,
    GroupSummary,
    ProblemView,
    GroupView,
    SectionView,
    SectionSummaryResponse,
)

__all__ = [
    "Problem",
    "ProblemGroup",
    "Section",
    "Corpus",
    "ProblemLocation",
    "SubmitRequest",
    "DisputeRequest",
    "TypeStepRequest",
    "AttemptRecordResponse",
    "ProblemStateResponse",
    "HintResponse",
    "WalkthroughResponse",
    "ResetAllResponse",
    "ReportRow",
    "GroupReport",
    "SectionReport",
    "CorpusReport",
    "GroupSummary",
    "ProblemView",
    "GroupView",
    "SectionView",
    "SectionSummaryResponse",
]
