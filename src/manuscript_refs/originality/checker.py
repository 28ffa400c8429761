"""
Plagiarism checking against external literature and the internal corpus.

A check never fails as a whole: an unreachable article store, a search that
times out or a comparison that raises each reduce the evidence in the report
and are logged, but the report always completes.
"""
import asyncio
import hashlib
import logging
from typing import Dict, List, Optional, Tuple

from ..config import Config
from ..models import ArticleRecord, Candidate, PlagiarismReport, PlagiarismSource, TextMatch
from ..utils.error_handling import ArticleNotFoundError
from .collaborators import ArticleStore
from .report_store import InMemoryReportStore, ReportStore
from .similarity import TextSimilarityAnalyzer
from .sources import CandidateSource

logger = logging.getLogger(__name__)


def source_key(source: PlagiarismSource) -> str:
    """Sources describing the same work share a key: DOI, else URL, else id."""
    if source.doi:
        return f"doi:{source.doi.lower()}"
    if source.url:
        return f"url:{source.url}"
    return f"id:{source.source_id}"


def merge_sources(sources: List[PlagiarismSource]) -> List[PlagiarismSource]:
    """Keep the strongest entry per work, strongest first."""
    best: Dict[str, PlagiarismSource] = {}
    for source in sources:
        key = source_key(source)
        if key not in best or source.similarity > best[key].similarity:
            best[key] = source
    return sorted(best.values(), key=lambda s: s.similarity, reverse=True)


def collect_text_matches(sources: List[PlagiarismSource]) -> List[TextMatch]:
    """Matches of all sources, one per (text, position); stronger sources win."""
    seen = set()
    matches = []
    for source in sources:
        for match in source.matches:
            key = (match.original_text, match.start_position)
            if key not in seen:
                seen.add(key)
                matches.append(match)
    return matches


class PlagiarismChecker:
    """Scores an article against every candidate source and persists the report."""

    def __init__(
        self,
        article_store: ArticleStore,
        sources: List[CandidateSource],
        report_store: Optional[ReportStore] = None,
        analyzer: Optional[TextSimilarityAnalyzer] = None,
        similarity_floor: Optional[float] = None,
        collaborator_timeout: Optional[float] = None,
        comparison_timeout: Optional[float] = None,
    ):
        self.article_store = article_store
        self.sources = list(sources)
        self.report_store = report_store or InMemoryReportStore()
        self.analyzer = analyzer or TextSimilarityAnalyzer()
        self.similarity_floor = Config.SIMILARITY_FLOOR if similarity_floor is None else similarity_floor
        self.collaborator_timeout = collaborator_timeout or Config.COLLABORATOR_TIMEOUT
        self.comparison_timeout = comparison_timeout or Config.COMPARISON_TIMEOUT

    async def check_plagiarism(self, article_id: str) -> PlagiarismReport:
        """
        Run a full check for ``article_id``.

        All candidate sources are queried concurrently and every comparison
        runs in a worker thread; results are merged only once all of them have
        settled. The finished report replaces any earlier one for the article.
        """
        article = await self._fetch_article(article_id)

        outcomes: List[Tuple[str, List[PlagiarismSource]]] = await asyncio.gather(
            *(self._check_source(source, article) for source in self.sources)
        )

        found = [s for _, kept in outcomes for s in kept]
        sources = merge_sources(found)
        contributed = {service for service, kept in outcomes if kept}

        report = PlagiarismReport(
            article_id=article_id,
            overall_similarity=max((s.similarity for s in sources), default=0.0),
            sources=sources,
            text_matches=collect_text_matches(sources),
            status='completed',
            service=contributed.pop() if len(contributed) == 1 else 'combined',
        )
        logger.info(
            f"Plagiarism check for article {article_id} completed: "
            f"{len(sources)} sources, overall similarity {report.overall_similarity:.2f}"
        )

        try:
            await asyncio.to_thread(self.report_store.save, report)
        except Exception as e:
            logger.error(f"Could not persist plagiarism report for article {article_id}: {e}")
        return report

    def get_plagiarism_report(self, article_id: str) -> Optional[PlagiarismReport]:
        """The last persisted report for ``article_id``, or None; nothing is recomputed."""
        return self.report_store.get(article_id)

    async def _fetch_article(self, article_id: str) -> ArticleRecord:
        try:
            return await asyncio.wait_for(self.article_store.get(article_id), self.collaborator_timeout)
        except ArticleNotFoundError:
            logger.warning(f"Article {article_id} not found; checking with empty text")
        except asyncio.TimeoutError:
            logger.warning(f"Article fetch for {article_id} timed out after {self.collaborator_timeout}s")
        except Exception as e:
            logger.warning(f"Article fetch for {article_id} failed: {e}")
        return ArticleRecord(id=article_id)

    async def _check_source(
        self, source: CandidateSource, article: ArticleRecord
    ) -> Tuple[str, List[PlagiarismSource]]:
        """Candidates of one source scored and filtered; failures yield no sources."""
        try:
            candidates = await asyncio.wait_for(source.candidates(article), self.collaborator_timeout)
        except asyncio.TimeoutError:
            logger.warning(f"{source.service} candidate lookup timed out after {self.collaborator_timeout}s")
            return source.service, []
        except Exception as e:
            logger.warning(f"{source.service} candidate lookup failed: {e}")
            return source.service, []

        candidates = [c for c in candidates if not c.source_id or c.source_id != article.id]
        results = await asyncio.gather(
            *(
                asyncio.wait_for(
                    asyncio.to_thread(self._score, source, article, candidate),
                    self.comparison_timeout,
                )
                for candidate in candidates
            ),
            return_exceptions=True,
        )

        kept = []
        for candidate, result in zip(candidates, results):
            if isinstance(result, BaseException):
                logger.warning(f"Comparison with '{(candidate.title or '')[:60]}' failed: {result!r}")
                continue
            if result.similarity > self.similarity_floor:
                kept.append(result)
        logger.info(f"{source.service}: {len(kept)} of {len(candidates)} candidates above similarity floor")
        return source.service, kept

    def _score(self, source: CandidateSource, article: ArticleRecord, candidate: Candidate) -> PlagiarismSource:
        text, candidate_text = source.comparison_texts(article, candidate)
        comparison = self.analyzer.compare(text, candidate_text)
        title = candidate.title or ""

        source_id = candidate.source_id or candidate.doi or candidate.url or (
            f"{source.service}:{hashlib.sha1(title.encode('utf-8')).hexdigest()[:10]}"
        )
        for match in comparison.matches:
            match.source_id = source_id
            match.source_title = title
            match.source_url = candidate.url

        return PlagiarismSource(
            source_id=source_id,
            title=title,
            authors=list(candidate.authors or []),
            similarity=comparison.similarity,
            matched_words=comparison.matched_words,
            total_words=comparison.total_words,
            matches=comparison.matches,
            url=candidate.url,
            doi=candidate.doi,
        )
