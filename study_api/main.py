"""
FastAPI backend for the math study tool.

Exposes problem progress, grading, disputes, hints, the assisted
walkthrough and score reports over a layered architecture:
- Service layer for business logic
- Repository pattern for the corpus and progress data
- Structured logging
- Consistent error responses
- Dependency injection
"""

from contextlib import asynccontextmanager
from typing import List, Optional
import hmac

from fastapi import Depends, FastAPI, Header
from fastapi.middleware.cors import CORSMiddleware

from mathgrade.attempts import AttemptTracker

from .core import (
    settings,
    setup_logging,
    get_logger,
    register_error_handlers,
    AuthorizationError,
)
from .models import (
    CorpusReport,
    DisputeRequest,
    GroupSummary,
    HintResponse,
    ProblemStateResponse,
    ResetAllResponse,
    SectionReport,
    SectionSummaryResponse,
    SectionView,
    SubmitRequest,
    TypeStepRequest,
    WalkthroughResponse,
)
from .repositories import JsonCorpusRepository, JsonFileProgressStore, get_corpus_repository
from .services import AttemptService, ReportService, get_attempt_service, get_report_service

# Setup logging
setup_logging()
logger = get_logger(__name__)


# Lifecycle management
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    logger.info(
        "Starting Math Study API",
        extra_data={
            "environment": settings.ENVIRONMENT,
            "debug": settings.DEBUG,
            "max_retries": settings.MAX_RETRIES,
            "correction_policy": settings.CORRECTION_POLICY
        }
    )
    yield
    logger.info("Shutting down Math Study API")


app = FastAPI(
    title=settings.APP_NAME,
    description="REST API for self-study math problems with answer checking and scoring",
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan
)

register_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=settings.CORS_ALLOW_METHODS,
    allow_headers=settings.CORS_ALLOW_HEADERS,
)


# Dependency injection
_tracker: Optional[AttemptTracker] = None


def get_tracker() -> AttemptTracker:
    """Get attempt tracker instance (singleton)"""
    global _tracker

    if _tracker is None:
        _tracker = AttemptTracker(JsonFileProgressStore(), max_retries=settings.MAX_RETRIES)

    return _tracker


def get_attempt_service_dep(
    repository: JsonCorpusRepository = Depends(get_corpus_repository),
    tracker: AttemptTracker = Depends(get_tracker),
) -> AttemptService:
    """Get attempt service instance"""
    return get_attempt_service(repository, tracker)


def get_report_service_dep(
    repository: JsonCorpusRepository = Depends(get_corpus_repository),
    tracker: AttemptTracker = Depends(get_tracker),
) -> ReportService:
    """Get report service instance"""
    return get_report_service(repository, tracker)


def require_dispute_token(x_dispute_token: Optional[str] = Header(None)) -> None:
    """Allow disputes only with the configured token"""
    expected = settings.DISPUTE_TOKEN
    if not expected:
        raise AuthorizationError("Disputes are disabled")
    if not x_dispute_token or not hmac.compare_digest(x_dispute_token, expected):
        logger.warning("Rejected dispute with invalid token")
        raise AuthorizationError("Invalid dispute token")


# API Routes

@app.get("/")
async def read_root():
    """API root endpoint"""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "endpoints": {
            "sections": "/sections",
            "section": "/sections/{section_id}",
            "section_report": "/sections/{section_id}/report",
            "report": "/report",
            "problem": "/problems/{problem_key}",
            "submit": "/problems/{problem_key}/submit",
            "reset": "/problems/{problem_key}/reset",
            "dispute": "/problems/{problem_key}/dispute",
            "hint": "/problems/{problem_key}/hint",
            "walkthrough": "/problems/{problem_key}/walkthrough",
            "group_summary": "/groups/{group_id}/summary",
            "group_reset": "/groups/{group_id}/reset-all",
            "health": "/health"
        }
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT
    }


@app.get("/sections", response_model=List[SectionSummaryResponse])
async def list_sections(
    repository: JsonCorpusRepository = Depends(get_corpus_repository)
):
    """List sections"""
    sections = await repository.list_sections()
    return [SectionSummaryResponse.from_domain(s) for s in sections]


@app.get("/sections/{section_id}", response_model=SectionView)
async def get_section(
    section_id: str,
    repository: JsonCorpusRepository = Depends(get_corpus_repository)
):
    """Get a section's problems, answers withheld"""
    section = await repository.get_section(section_id)
    return SectionView.from_domain(section)


@app.get("/sections/{section_id}/report", response_model=SectionReport)
async def get_section_report(
    section_id: str,
    edge: bool = False,
    corner: bool = False,
    service: ReportService = Depends(get_report_service_dep)
):
    """Score report for a section, edge and corner cases on request"""
    return await service.section_report(section_id, include_edge=edge, include_corner=corner)


@app.get("/report", response_model=CorpusReport)
async def get_report(
    edge: bool = False,
    corner: bool = False,
    service: ReportService = Depends(get_report_service_dep)
):
    """Score report over every section"""
    return await service.corpus_report(include_edge=edge, include_corner=corner)


@app.get("/problems/{problem_key}", response_model=ProblemStateResponse)
async def get_problem_state(
    problem_key: str,
    service: AttemptService = Depends(get_attempt_service_dep)
):
    """Current progress on a problem"""
    return await service.get_state(problem_key)


@app.post("/problems/{problem_key}/submit", response_model=ProblemStateResponse)
async def submit_answers(
    problem_key: str,
    request: SubmitRequest,
    service: AttemptService = Depends(get_attempt_service_dep)
):
    """
    Submit answers for a problem.

    A submission whose blanks are all empty, or one made after the answer
    was accepted or revealed, leaves the state unchanged.
    """
    logger.info(
        "Submitting answers",
        extra_data={"problem_key": problem_key, "num_answers": len(request.answers)}
    )

    return await service.submit(problem_key, request.answers)


@app.post("/problems/{problem_key}/reset", response_model=ProblemStateResponse)
async def reset_problem(
    problem_key: str,
    service: AttemptService = Depends(get_attempt_service_dep)
):
    """Start a new retry cycle; attempts and history are kept"""
    return await service.reset(problem_key)


@app.post(
    "/problems/{problem_key}/dispute",
    response_model=ProblemStateResponse,
    dependencies=[Depends(require_dispute_token)]
)
async def dispute_answer(
    problem_key: str,
    request: DisputeRequest,
    service: AttemptService = Depends(get_attempt_service_dep)
):
    """Accept a previously rejected answer part"""
    return await service.dispute(problem_key, request.history_index, request.part_index)


@app.post("/problems/{problem_key}/hint", response_model=HintResponse)
async def open_hint(
    problem_key: str,
    service: AttemptService = Depends(get_attempt_service_dep)
):
    """Show the hint and record its deduction"""
    return await service.use_hint(problem_key)


@app.get("/problems/{problem_key}/walkthrough", response_model=WalkthroughResponse)
async def get_walkthrough(
    problem_key: str,
    service: AttemptService = Depends(get_attempt_service_dep)
):
    """Walkthrough progress"""
    return await service.get_walkthrough(problem_key)


@app.post("/problems/{problem_key}/walkthrough/reveal", response_model=WalkthroughResponse)
async def reveal_walkthrough_step(
    problem_key: str,
    service: AttemptService = Depends(get_attempt_service_dep)
):
    """Reveal the next step"""
    return await service.reveal_step(problem_key)


@app.post("/problems/{problem_key}/walkthrough/type", response_model=WalkthroughResponse)
async def type_walkthrough_step(
    problem_key: str,
    request: TypeStepRequest,
    service: AttemptService = Depends(get_attempt_service_dep)
):
    """Enter the next step yourself"""
    return await service.type_step(problem_key, request.text)


@app.post("/problems/{problem_key}/walkthrough/post", response_model=WalkthroughResponse)
async def post_walkthrough_answer(
    problem_key: str,
    service: AttemptService = Depends(get_attempt_service_dep)
):
    """Fill in the full answer"""
    return await service.post_answer(problem_key)


@app.get("/groups/{group_id}/summary", response_model=GroupSummary)
async def get_group_summary(
    group_id: str,
    service: ReportService = Depends(get_report_service_dep)
):
    """Retry statistics of a problem group"""
    return await service.group_summary(group_id)


@app.post("/groups/{group_id}/reset-all", response_model=ResetAllResponse)
async def reset_group(
    group_id: str,
    service: AttemptService = Depends(get_attempt_service_dep)
):
    """Clear every record of a problem group, history included"""
    return await service.reset_group(group_id)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "study_api.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
