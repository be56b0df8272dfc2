"""
Application exceptions and error handling.

Every error response has the shape
``{"error": {"type": ..., "message": ..., "details": ...}}``.
"""

from typing import Any, Dict, Optional
from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from .logging import get_logger

logger = get_logger(__name__)


# Custom Exceptions

class StudyError(Exception):
    """Base exception for the study API"""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ProblemNotFoundError(StudyError):
    """Raised when a problem key is not in the corpus"""

    def __init__(self, problem_key: str):
        super().__init__(
            message=f"Problem '{problem_key}' not found",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"problem_key": problem_key}
        )


class SectionNotFoundError(StudyError):
    """Raised when a section id is not in the corpus"""

    def __init__(self, section_id: str):
        super().__init__(
            message=f"Section '{section_id}' not found",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"section_id": section_id}
        )


class ValidationError(StudyError):
    """Raised for invalid request content"""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details=details
        )


class AuthorizationError(StudyError):
    """Raised for authorization failures"""

    def __init__(self, message: str = "Permission denied"):
        super().__init__(
            message=message,
            status_code=status.HTTP_403_FORBIDDEN
        )


class CorpusLoadError(StudyError):
    """Raised when the problem corpus cannot be read"""

    def __init__(self, path: str, error: str):
        super().__init__(
            message=f"Failed to load problem corpus '{path}': {error}",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details={"path": path, "error": error}
        )


# Error Response Models

def create_error_response(
    error: Exception,
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
    include_details: bool = True
) -> JSONResponse:
    """Create standardized error response"""

    error_data = {
        "error": {
            "type": error.__class__.__name__,
            "message": str(error),
        }
    }

    if isinstance(error, StudyError) and include_details:
        error_data["error"]["details"] = error.details

    log = logger.error if status_code >= 500 else logger.warning
    log(
        f"Error occurred: {error}",
        extra_data={
            "error_type": error.__class__.__name__,
            "status_code": status_code,
            **(error.details if isinstance(error, StudyError) else {})
        },
        exc_info=status_code >= 500
    )

    return JSONResponse(
        status_code=status_code,
        content=error_data
    )


# Exception Handlers

async def study_error_handler(request: Request, exc: StudyError) -> JSONResponse:
    """Handle StudyError exceptions"""
    return create_error_response(exc, exc.status_code)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTPException exceptions"""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "type": "HTTPException",
                "message": exc.detail,
            }
        }
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request validation errors"""
    logger.warning(
        "Validation error",
        extra_data={"errors": exc.errors()}
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": {
                "type": "ValidationError",
                "message": "Request validation failed",
                "details": jsonable_errors(exc),
            }
        }
    )


def jsonable_errors(exc: RequestValidationError) -> list:
    """Validation errors without the non-serializable ``ctx``/``input`` payloads"""
    return [
        {key: value for key, value in err.items() if key in ("type", "loc", "msg")}
        for err in exc.errors()
    ]


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected errors"""
    logger.exception(
        "Unexpected error occurred",
        extra_data={"path": request.url.path}
    )

    # Don't expose internal errors in production
    from .config import settings
    include_details = settings.DEBUG

    message = str(exc) if include_details else "An internal error occurred"

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "type": "InternalServerError",
                "message": message,
            }
        }
    )


def register_error_handlers(app):
    """Register error handlers with FastAPI app"""
    app.add_exception_handler(StudyError, study_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)
