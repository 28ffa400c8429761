"""
Reference & originality engine.

``ReferenceEngine`` wires the citation tools and the plagiarism checker to
their collaborators. The module-level functions delegate to a shared default
engine, created on first use.
"""
import asyncio
import logging
import threading
from typing import List, Optional

from .citations.analyzer import ReferenceAnalyzer
from .citations.bibliography import BibliographyBuilder
from .citations.extractor import CitationExtractor
from .citations.formatter import CitationFormatter
from .citations.metadata import MetadataLookup, ScholarlyMetadataLookup, search_citation_metadata as _search_metadata
from .citations.validator import CitationValidator
from .config import Config
from .models import (
    BibliographyEntry,
    Citation,
    FormattedCitation,
    PlagiarismReport,
    ReferenceAnalysis,
    SimilarityAnalysis,
    ValidationResult,
)
from .originality.checker import PlagiarismChecker
from .originality.collaborators import (
    ArticleStore,
    CrossRefCandidateSearch,
    ExternalMetadataSearch,
    InMemoryArticleStore,
    InternalCorpusStore,
)
from .originality.report_store import InMemoryReportStore, JsonFileReportStore, ReportStore
from .originality.similarity import TextSimilarityAnalyzer
from .originality.sources import ExternalCandidateSource, InternalCandidateSource
from .utils.logging_setup import log_operation, setup_logging

logger = logging.getLogger(__name__)

_logging_configured = False
_logging_lock = threading.Lock()


def configure_logging() -> None:
    """Apply the LOG_LEVEL and LOG_DIR settings to the root logger.

    For applications embedding the engine; the library itself never calls it.
    Repeated calls are no-ops.
    """
    global _logging_configured
    with _logging_lock:
        if not _logging_configured:
            setup_logging(Config.LOG_DIR or None, Config.LOG_LEVEL)
            _logging_configured = True


def _default_report_store() -> ReportStore:
    report_dir = Config.get_report_dir()
    return JsonFileReportStore(report_dir) if report_dir else InMemoryReportStore()


class ReferenceEngine:
    """Facade over citation handling and originality checking."""

    def __init__(
        self,
        article_store: Optional[ArticleStore] = None,
        corpus_store: Optional[InternalCorpusStore] = None,
        external_search: Optional[ExternalMetadataSearch] = None,
        report_store: Optional[ReportStore] = None,
        metadata_lookup: Optional[MetadataLookup] = None,
        check_urls: Optional[bool] = None,
    ):
        if article_store is None:
            article_store = InMemoryArticleStore()
        if corpus_store is None and isinstance(article_store, InternalCorpusStore):
            corpus_store = article_store

        self.extractor = CitationExtractor()
        self.validator = CitationValidator(check_urls=check_urls)
        self.bibliography = BibliographyBuilder()
        self.analyzer = ReferenceAnalyzer()
        self.similarity = TextSimilarityAnalyzer()
        self.metadata_lookup = metadata_lookup or ScholarlyMetadataLookup()

        sources = [ExternalCandidateSource(external_search or CrossRefCandidateSearch())]
        if corpus_store is not None:
            sources.append(InternalCandidateSource(corpus_store))
        self.checker = PlagiarismChecker(
            article_store=article_store,
            sources=sources,
            report_store=report_store or _default_report_store(),
            analyzer=self.similarity,
        )

    def extract_citations(self, text: str) -> List[Citation]:
        return self.extractor.extract_citations(text)

    def validate_citations(self, citations: List[Citation]) -> List[ValidationResult]:
        return self.validator.validate_citations(citations)

    def format_citation(self, citation: Citation, style: str, position: Optional[int] = None) -> FormattedCitation:
        return CitationFormatter.format_citation(citation, style, position)

    def generate_bibliography(self, citations: List[Citation], style: Optional[str] = None) -> List[BibliographyEntry]:
        return self.bibliography.generate_bibliography(citations, style or Config.DEFAULT_STYLE)

    def analyze_references(self, citations: List[Citation]) -> ReferenceAnalysis:
        return self.analyzer.analyze_references(citations, self.validate_citations(citations))

    def analyze_similarity(self, text_a: str, text_b: str) -> SimilarityAnalysis:
        return self.similarity.analyze_similarity(text_a, text_b)

    def search_citation_metadata(self, query: str) -> List[Citation]:
        log_operation("Metadata search", query)
        return _search_metadata(query, self.metadata_lookup)

    async def check_plagiarism_async(self, article_id: str) -> PlagiarismReport:
        """Coroutine form of ``check_plagiarism`` for callers already in an event loop."""
        log_operation("Plagiarism check", f"article {article_id}")
        return await self.checker.check_plagiarism(article_id)

    def check_plagiarism(self, article_id: str) -> PlagiarismReport:
        """Run a plagiarism check to completion. Must not be called from a running event loop."""
        return asyncio.run(self.check_plagiarism_async(article_id))

    def get_plagiarism_report(self, article_id: str) -> Optional[PlagiarismReport]:
        return self.checker.get_plagiarism_report(article_id)


# Singleton engine instance
_engine: Optional[ReferenceEngine] = None
_engine_lock = threading.Lock()


def get_engine() -> ReferenceEngine:
    global _engine
    if _engine is None:
        with _engine_lock:
            if _engine is None:
                _engine = ReferenceEngine()
    return _engine


def set_engine(engine: Optional[ReferenceEngine]) -> None:
    """Replace the shared engine (None resets it to a fresh default on next use)."""
    global _engine
    with _engine_lock:
        _engine = engine


def extract_citations(text: str) -> List[Citation]:
    return get_engine().extract_citations(text)


def validate_citations(citations: List[Citation]) -> List[ValidationResult]:
    return get_engine().validate_citations(citations)


def format_citation(citation: Citation, style: str, position: Optional[int] = None) -> FormattedCitation:
    return get_engine().format_citation(citation, style, position)


def generate_bibliography(citations: List[Citation], style: Optional[str] = None) -> List[BibliographyEntry]:
    return get_engine().generate_bibliography(citations, style)


def analyze_references(citations: List[Citation]) -> ReferenceAnalysis:
    return get_engine().analyze_references(citations)


def analyze_similarity(text_a: str, text_b: str) -> SimilarityAnalysis:
    return get_engine().analyze_similarity(text_a, text_b)


def search_citation_metadata(query: str) -> List[Citation]:
    return get_engine().search_citation_metadata(query)


def check_plagiarism(article_id: str) -> PlagiarismReport:
    return get_engine().check_plagiarism(article_id)


async def check_plagiarism_async(article_id: str) -> PlagiarismReport:
    return await get_engine().check_plagiarism_async(article_id)


def get_plagiarism_report(article_id: str) -> Optional[PlagiarismReport]:
    return get_engine().get_plagiarism_report(article_id)
