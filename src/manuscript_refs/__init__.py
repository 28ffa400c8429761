"""Reference and originality analysis for scholarly manuscripts."""
from .config import Config
from .engine import (
    ReferenceEngine,
    configure_logging,
    get_engine,
    set_engine,
    extract_citations,
    validate_citations,
    format_citation,
    generate_bibliography,
    analyze_references,
    analyze_similarity,
    search_citation_metadata,
    check_plagiarism,
    check_plagiarism_async,
    get_plagiarism_report,
)
from .models import (
    Author,
    Citation,
    ValidationResult,
    FormattedCitation,
    BibliographyEntry,
    ReferenceAnalysis,
    SimilarityAnalysis,
    TextMatch,
    PlagiarismSource,
    PlagiarismReport,
)
from .utils.error_handling import (
    ReferenceEngineError,
    UnsupportedStyleError,
    ExternalServiceError,
    ArticleNotFoundError,
)

__version__ = "1.0.0"
__all__ = [
    "Config",
    "ReferenceEngine",
    "configure_logging",
    "get_engine",
    "set_engine",
    "extract_citations",
    "validate_citations",
    "format_citation",
    "generate_bibliography",
    "analyze_references",
    "analyze_similarity",
    "search_citation_metadata",
    "check_plagiarism",
    "check_plagiarism_async",
    "get_plagiarism_report",
    "Author",
    "Citation",
    "ValidationResult",
    "FormattedCitation",
    "BibliographyEntry",
    "ReferenceAnalysis",
    "SimilarityAnalysis",
    "TextMatch",
    "PlagiarismSource",
    "PlagiarismReport",
    "ReferenceEngineError",
    "UnsupportedStyleError",
    "ExternalServiceError",
    "ArticleNotFoundError",
]
