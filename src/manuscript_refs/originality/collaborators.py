"""
Collaborators consumed by the plagiarism checker.

The interfaces are async because real implementations talk to a database or
an HTTP API. ``InMemoryArticleStore`` serves tests and embedding applications;
``CrossRefCandidateSearch`` queries CrossRef with aiohttp.
"""
import asyncio
import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import aiohttp

from ..citations.metadata import crossref_authors, strip_markup
from ..config import Config
from ..models import ArticleRecord, Candidate
from ..utils.error_handling import ArticleNotFoundError, ExternalServiceError
from ..utils.logging_setup import log_api_call

logger = logging.getLogger(__name__)


class ArticleStore(ABC):
    """Source of the article being checked."""

    @abstractmethod
    async def get(self, article_id: str) -> ArticleRecord:
        """
        Fetch an article.

        Raises:
            ArticleNotFoundError: If no article has this id
        """


class InternalCorpusStore(ABC):
    """Previously stored articles to compare against."""

    @abstractmethod
    async def sample(self, exclude_id: str, limit: int) -> List[Candidate]:
        """Up to ``limit`` stored articles, never including ``exclude_id``."""


class ExternalMetadataSearch(ABC):
    """Published literature search."""

    @abstractmethod
    async def search(self, query: str) -> List[Candidate]:
        """Candidates matching a free-text query."""


class InMemoryArticleStore(ArticleStore, InternalCorpusStore):
    """Dictionary-backed article store that also serves as the internal corpus."""

    def __init__(self, articles: Optional[List[ArticleRecord]] = None):
        self._articles: Dict[str, ArticleRecord] = {}
        self._lock = threading.Lock()
        for article in articles or []:
            self._articles[article.id] = article

    def add(self, article_id: str, title: str = "", abstract: Optional[str] = None,
            content: Optional[str] = None, authors: Optional[List[str]] = None) -> ArticleRecord:
        """Store (or replace) an article."""
        record = ArticleRecord(
            id=article_id, title=title, abstract=abstract, content=content, authors=list(authors or []),
        )
        with self._lock:
            self._articles[article_id] = record
        return record

    async def get(self, article_id: str) -> ArticleRecord:
        with self._lock:
            record = self._articles.get(article_id)
        if record is None:
            raise ArticleNotFoundError(article_id)
        return record

    async def sample(self, exclude_id: str, limit: int) -> List[Candidate]:
        with self._lock:
            records = [a for a in self._articles.values() if a.id != exclude_id]
        return [
            Candidate(
                title=a.title,
                authors=list(a.authors),
                abstract=a.abstract,
                content=a.content,
                source_id=a.id,
            )
            for a in records[:limit]
        ]


class CrossRefCandidateSearch(ExternalMetadataSearch):
    """CrossRef works search returning abstracts as comparison text."""

    def __init__(self, rows: Optional[int] = None, timeout: Optional[float] = None,
                 api_url: Optional[str] = None):
        self.rows = rows or Config.EXTERNAL_RESULT_ROWS
        self.timeout = timeout or Config.COLLABORATOR_TIMEOUT
        self.api_url = api_url or Config.CROSSREF_API_URL

    async def search(self, query: str) -> List[Candidate]:
        if not query.strip():
            return []
        params = {
            "query.bibliographic": query,
            "rows": str(self.rows),
            "mailto": Config.CROSSREF_MAILTO,
        }
        log_api_call("Crossref", "search", params)
        data = await self._get_json(params)
        items = data.get("message", {}).get("items", [])
        return [self._to_candidate(item) for item in items]

    async def _get_json(self, params: Dict[str, str]) -> Dict[str, Any]:
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(self.api_url, params=params) as response:
                    if response.status != 200:
                        text = await response.text()
                        raise ExternalServiceError("Crossref API request failed", response.status, text[:500])
                    return await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise ExternalServiceError(f"Crossref API request failed: {e}") from e

    @staticmethod
    def _to_candidate(item: Dict[str, Any]) -> Candidate:
        titles = item.get("title") or [""]
        doi = item.get("DOI") or None
        return Candidate(
            title=titles[0],
            authors=[str(a) for a in crossref_authors(item)],
            abstract=strip_markup(item.get("abstract")),
            url=item.get("URL") or (f"https://doi.org/{doi}" if doi else None),
            doi=doi,
            source_id=f"crossref:{doi}" if doi else None,
        )
