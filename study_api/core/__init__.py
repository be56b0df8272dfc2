"""Core utilities package"""

from .config import settings, get_settings
from .logging import setup_logging, get_logger, get_context_logger
from .errors import (
    StudyError,
    ProblemNotFoundError,
    SectionNotFoundError,
    ValidationError,
    AuthorizationError,
    CorpusLoadError,
    register_error_handlers,
)

__all__ = [
    "settings",
    "get_settings",
    "setup_logging",
    "get_logger",
    "get_context_logger",
    "StudyError",
    "ProblemNotFoundError",
    "SectionNotFoundError",
    "ValidationError",
    "AuthorizationError",
    "CorpusLoadError",
    "register_error_handlers",
]
