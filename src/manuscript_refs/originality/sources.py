"""
Candidate sources for the plagiarism check.

External literature and the internal corpus are both "a list of candidates
plus a rule for what text to compare"; the checker iterates over sources
without knowing which kind it has.
"""
import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from ..config import Config
from ..models import ArticleRecord, Candidate
from .collaborators import ExternalMetadataSearch, InternalCorpusStore

logger = logging.getLogger(__name__)


class CandidateSource(ABC):
    """One origin of comparison candidates."""

    service: str = ""

    @abstractmethod
    async def candidates(self, article: ArticleRecord) -> List[Candidate]:
        """Candidates worth comparing against ``article``."""

    @abstractmethod
    def comparison_texts(self, article: ArticleRecord, candidate: Candidate) -> Tuple[str, str]:
        """The (article text, candidate text) pair to score."""


class ExternalCandidateSource(CandidateSource):
    """Published works found by searching on the article's title and abstract.

    Search results usually carry only an abstract, so the article's abstract
    is what they are compared with.
    """

    service = 'external'

    def __init__(self, search: ExternalMetadataSearch, max_query_chars: Optional[int] = None):
        self.search = search
        self.max_query_chars = max_query_chars or Config.EXTERNAL_QUERY_MAX_CHARS

    def build_query(self, article: ArticleRecord) -> str:
        query = " ".join(part for part in (article.title, article.abstract) if part)
        return query[:self.max_query_chars].strip()

    async def candidates(self, article: ArticleRecord) -> List[Candidate]:
        query = self.build_query(article)
        if not query:
            logger.info(f"Article {article.id} has no title or abstract to search with")
            return []
        return await self.search.search(query)

    def comparison_texts(self, article: ArticleRecord, candidate: Candidate) -> Tuple[str, str]:
        return article.abstract or article.content or article.title, candidate.text


class InternalCandidateSource(CandidateSource):
    """Other articles already held in the corpus, compared on full content."""

    service = 'internal'

    def __init__(self, corpus: InternalCorpusStore, limit: Optional[int] = None):
        self.corpus = corpus
        self.limit = limit or Config.INTERNAL_CORPUS_LIMIT

    async def candidates(self, article: ArticleRecord) -> List[Candidate]:
        return await self.corpus.sample(article.id, self.limit)

    def comparison_texts(self, article: ArticleRecord, candidate: Candidate) -> Tuple[str, str]:
        return article.content or article.abstract or article.title, candidate.text
