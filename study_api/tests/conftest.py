"""
Pytest configuration and fixtures.

Provides a small problem corpus on disk, file-backed progress and a test
client wired to both.
"""

import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from mathgrade.answer import CorrectionPolicy
from mathgrade.attempts import AttemptTracker

from study_api.core import settings
from study_api.main import app, get_tracker
from study_api.repositories import (
    JsonCorpusRepository,
    JsonFileProgressStore,
    get_corpus_repository,
)
from study_api.services import AttemptService, ReportService

DISPUTE_TOKEN = "instructor-override"

SAMPLE_CORPUS = {
    "title": "Factoring Polynomials",
    "sections": [
        {
            "id": "7.1",
            "title": "Greatest Common Factor",
            "monitoringProgress": [
                {
                    "id": "7.1.1",
                    "instruction": "Factor out the greatest common factor.",
                    "problems": [
                        {
                            "num": 1,
                            "text": "$2x^3 + 2x$",
                            "answer": "$2x(x^2 + 1)$",
                            "hint": "Both terms share a factor of $2x$.",
                            "steps": [
                                "The GCF of $2x^3$ and $2x$ is $2x$.",
                                "Divide each term by $2x$: $2x(x^2 + 1)$",
                            ],
                        },
                        {
                            "num": 2,
                            "text": "$2x(x^2 + 1)$",
                            "answer": "Complete",
                        },
                    ],
                },
                {
                    "id": "7.1.2",
                    "instruction": "Solve the equation.",
                    "problems": [
                        {
                            "num": 1,
                            "text": "$x^2 - 7x + 12 = 0$",
                            "answer": [
                                {"label": "S1", "value": "$x = 3$"},
                                {"label": "S2", "value": "$x = 4$"},
                            ],
                        }
                    ],
                },
            ],
            "edgeCases": [
                {
                    "id": "7.1.E",
                    "instruction": "Factor completely.",
                    "problems": [
                        {
                            "num": 1,
                            "text": "$x^4 - 1$",
                            "answer": "$(x^2 + 1)(x - 1)(x + 1)$",
                        }
                    ],
                }
            ],
        },
        {
            "id": "7.2",
            "title": "Factoring Trinomials",
            "monitoringProgress": [
                {
                    "id": "7.2.1",
                    "instruction": "Factor the trinomial.",
                    "problems": [
                        {"num": 1, "text": "$x^2 + 10x + 16$", "answer": "$(x + 2)(x + 8)$"},
                        {"num": 2, "text": "$x^2 + 2x - 15$", "answer": "$(x + 5)(x - 3)$"},
                    ],
                }
            ],
        },
    ],
}


@pytest.fixture
def corpus_file(tmp_path: Path) -> Path:
    """Sample corpus written to a temporary file"""
    path = tmp_path / "problems.json"
    path.write_text(json.dumps(SAMPLE_CORPUS), encoding="utf-8")
    return path


@pytest.fixture
def progress_file(tmp_path: Path) -> Path:
    """Location of the progress document"""
    return tmp_path / "progress.json"


@pytest.fixture
def corpus_repository(corpus_file: Path) -> JsonCorpusRepository:
    """Corpus repository over the sample corpus"""
    return JsonCorpusRepository(corpus_file)


@pytest.fixture
def progress_store(progress_file: Path) -> JsonFileProgressStore:
    """Empty file-backed progress store"""
    return JsonFileProgressStore(progress_file)


@pytest.fixture
def tracker(progress_store: JsonFileProgressStore) -> AttemptTracker:
    """Tracker with the default retry budget"""
    return AttemptTracker(progress_store, max_retries=2)


@pytest.fixture
def attempt_service(corpus_repository, tracker) -> AttemptService:
    """Attempt service scoring with the zero correction policy"""
    return AttemptService(corpus_repository, tracker, policy=CorrectionPolicy.ZERO)


@pytest.fixture
def report_service(corpus_repository, tracker) -> ReportService:
    """Report service scoring with the zero correction policy"""
    return ReportService(corpus_repository, tracker, policy=CorrectionPolicy.ZERO)


@pytest.fixture
def client(corpus_repository, tracker, monkeypatch) -> TestClient:
    """FastAPI test client over the sample corpus and temporary progress"""
    monkeypatch.setattr(settings, "DISPUTE_TOKEN", DISPUTE_TOKEN)
    monkeypatch.setattr(settings, "CORRECTION_POLICY", "0")

    app.dependency_overrides[get_corpus_repository] = lambda: corpus_repository
    app.dependency_overrides[get_tracker] = lambda: tracker
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def dispute_headers() -> dict:
    """Headers carrying the configured dispute token"""
    return {"X-Dispute-Token": DISPUTE_TOKEN}
