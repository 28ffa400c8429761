"""Citation extraction, validation, formatting and analysis."""
from .extractor import CitationExtractor, extract_citations
from .validator import CitationValidator, validate_citations
from .formatter import CitationFormatter, STYLES, format_citation
from .bibliography import BibliographyBuilder, generate_bibliography, export_bibtex, save_bibliography_to_word
from .analyzer import ReferenceAnalyzer, analyze_references
from .metadata import MetadataLookup, ScholarlyMetadataLookup, search_citation_metadata

__all__ = [
    'CitationExtractor',
    'extract_citations',
    'CitationValidator',
    'validate_citations',
    'CitationFormatter',
    'STYLES',
    'format_citation',
    'BibliographyBuilder',
    'generate_bibliography',
    'export_bibtex',
    'save_bibliography_to_word',
    'ReferenceAnalyzer',
    'analyze_references',
    'MetadataLookup',
    'ScholarlyMetadataLookup',
    'search_citation_metadata',
]
