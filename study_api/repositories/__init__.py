"""Repositories package"""

from .corpus_repository import (
    CorpusRepositoryInterface,
    JsonCorpusRepository,
    get_corpus_repository,
)
from .progress_repository import JsonFileProgressStore

__all__ = [
    "CorpusRepositoryInterface",
    "JsonCorpusRepository",
    "get_corpus_repository",
    "JsonFileProgressStore",
]
