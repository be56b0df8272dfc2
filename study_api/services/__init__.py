"""Services package"""

from .attempt_service import AttemptService, get_attempt_service
from .report_service import ReportService, get_report_service, short_problem

__all__ = [
    "AttemptService",
    "get_attempt_service",
    "ReportService",
    "get_report_service",
    "short_problem",
]
