"""Text similarity and plagiarism checking."""
from .similarity import TextSimilarityAnalyzer, analyze_similarity
from .collaborators import (
    ArticleStore,
    InternalCorpusStore,
    ExternalMetadataSearch,
    InMemoryArticleStore,
    CrossRefCandidateSearch,
)
from .sources import CandidateSource, ExternalCandidateSource, InternalCandidateSource
from .report_store import ReportStore, InMemoryReportStore, JsonFileReportStore
from .checker import PlagiarismChecker

__all__ = [
    'TextSimilarityAnalyzer',
    'analyze_similarity',
    'ArticleStore',
    'InternalCorpusStore',
    'ExternalMetadataSearch',
    'InMemoryArticleStore',
    'CrossRefCandidateSearch',
    'CandidateSource',
    'ExternalCandidateSource',
    'InternalCandidateSource',
    'ReportStore',
    'InMemoryReportStore',
    'JsonFileReportStore',
    'PlagiarismChecker',
]
