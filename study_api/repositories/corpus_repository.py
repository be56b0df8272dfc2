"""
Problem corpus repository.

Implements the Repository pattern for the problem document.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional
import json

from pydantic import ValidationError as PydanticValidationError

from ..models.domain import Corpus, ProblemGroup, ProblemLocation, Section
from ..core.errors import CorpusLoadError, ProblemNotFoundError, SectionNotFoundError
from ..core.logging import get_logger
from ..core.config import settings

logger = get_logger(__name__)


class CorpusRepositoryInterface(ABC):
    """Abstract interface for corpus repository"""

    @abstractmethod
    async def get_corpus(self) -> Corpus:
        """Get the whole corpus"""
        pass

    @abstractmethod
    async def list_sections(self) -> List[Section]:
        """List all sections"""
        pass

    @abstractmethod
    async def get_section(self, section_id: str) -> Section:
        """Get a section by ID"""
        pass

    @abstractmethod
    async def get_group(self, group_id: str) -> ProblemGroup:
        """Get a problem group by ID"""
        pass

    @abstractmethod
    async def locate(self, problem_key: str) -> ProblemLocation:
        """Find a problem by its progress key"""
        pass


class JsonCorpusRepository(CorpusRepositoryInterface):
    """
    Corpus read from a single JSON document.

    The document is parsed on first use and kept in memory.
    """

    def __init__(self, problems_file: Optional[Path] = None):
        self.problems_file = Path(problems_file or settings.PROBLEMS_FILE)

        self._corpus: Optional[Corpus] = None
        self._sections: Dict[str, Section] = {}
        self._groups: Dict[str, ProblemGroup] = {}
        self._locations: Dict[str, ProblemLocation] = {}

        logger.info(
            "Initialized JsonCorpusRepository",
            extra_data={"problems_file": str(self.problems_file)}
        )

    async def get_corpus(self) -> Corpus:
        """Get the whole corpus"""
        if self._corpus is None:
            self._load()
        return self._corpus

    async def get_section(self, section_id: str) -> Section:
        """Get a section by ID"""
        await self.get_corpus()

        section = self._sections.get(section_id)
        if section is None:
            logger.warning(
                "Section not found",
                extra_data={"section_id": section_id}
            )
            raise SectionNotFoundError(section_id)
        return section

    async def get_group(self, group_id: str) -> ProblemGroup:
        """Get a problem group by ID"""
        await self.get_corpus()

        group = self._groups.get(group_id)
        if group is None:
            raise ProblemNotFoundError(group_id)
        return group

    async def locate(self, problem_key: str) -> ProblemLocation:
        """Find a problem by its progress key"""
        await self.get_corpus()

        location = self._locations.get(problem_key)
        if location is None:
            logger.warning(
                "Problem not found",
                extra_data={"problem_key": problem_key}
            )
            raise ProblemNotFoundError(problem_key)
        return location

    async def list_sections(self) -> List[Section]:
        """List all sections"""
        corpus = await self.get_corpus()
        return list(corpus.sections)

    def _load(self) -> None:
        """Parse the corpus file and build lookup indexes"""
        try:
            with open(self.problems_file, "r", encoding="utf-8") as f:
                data = json.load(f)
            corpus = Corpus.model_validate(data)
        except (OSError, json.JSONDecodeError, PydanticValidationError) as e:
            logger.error(
                "Failed to load problem corpus",
                extra_data={
                    "problems_file": str(self.problems_file),
                    "error": str(e)
                }
            )
            raise CorpusLoadError(str(self.problems_file), str(e)) from e

        sections: Dict[str, Section] = {}
        groups: Dict[str, ProblemGroup] = {}
        locations: Dict[str, ProblemLocation] = {}

        for section in corpus.sections:
            sections[section.id] = section
            for group in section.all_groups:
                groups[group.id] = group
                for problem in group.problems:
                    key = group.key(problem)
                    if key in locations:
                        logger.warning(
                            "Duplicate problem key",
                            extra_data={"problem_key": key}
                        )
                    locations[key] = ProblemLocation(
                        section=section, group=group, problem=problem
                    )

        self._corpus = corpus
        self._sections = sections
        self._groups = groups
        self._locations = locations

        logger.info(
            "Problem corpus loaded",
            extra_data={
                "sections": len(sections),
                "problems": len(locations)
            }
        )


# Singleton instance
_corpus_repository: Optional[JsonCorpusRepository] = None


def get_corpus_repository() -> JsonCorpusRepository:
    """Get corpus repository instance (singleton)"""
    global _corpus_repository

    if _corpus_repository is None:
        _corpus_repository = JsonCorpusRepository()

    return _corpus_repository
