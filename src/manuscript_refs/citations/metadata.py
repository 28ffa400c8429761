"""Citation metadata lookup against CrossRef and Semantic Scholar."""
import hashlib
import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from ..config import Config
from ..models import Author, Citation
from ..name_utils import parse_author
from ..utils.api_utils import safe_crossref_request, safe_semantic_scholar_request
from ..utils.error_handling import ExternalServiceError, api_error_handler
from .analyzer import get_dedupe_key
from .extractor import normalize_doi

logger = logging.getLogger(__name__)

DOI_QUERY = re.compile(r"^10\.\d{4,9}/\S+$")
JATS_TAG = re.compile(r"<[^>]+>")

CROSSREF_TYPES = {
    "journal-article": 'journal',
    "book": 'book',
    "monograph": 'book',
    "edited-book": 'book',
    "book-chapter": 'book',
    "proceedings-article": 'conference',
}


def strip_markup(text: Optional[str]) -> Optional[str]:
    """Remove JATS/XML tags CrossRef embeds in abstracts."""
    if not text:
        return text
    return " ".join(JATS_TAG.sub(" ", text).split())


def _first(values: Any) -> str:
    if isinstance(values, list):
        return values[0] if values else ""
    return values or ""


def _crossref_year(item: Dict[str, Any]) -> Optional[int]:
    """Extract publication year from CrossRef response."""
    for key in ["published-print", "published-online", "issued"]:
        if key in item and "date-parts" in item[key]:
            parts = item[key]["date-parts"]
            if parts and parts[0] and parts[0][0]:
                try:
                    return int(parts[0][0])
                except (TypeError, ValueError):
                    return None
    return None


def crossref_authors(item: Dict[str, Any]) -> List[Author]:
    """Parse author information from a CrossRef work."""
    authors = []
    for a in item.get("author", []):
        family = a.get("family") or a.get("name") or ""
        if not family:
            continue
        orcid = a.get("ORCID")
        if orcid:
            orcid = orcid.rsplit("/", 1)[-1]
        authors.append(Author(first_name=a.get("given", ""), last_name=family, orcid=orcid))
    return authors


def crossref_item_to_citation(item: Dict[str, Any]) -> Citation:
    """Parse a CrossRef work into a Citation."""
    doi = item.get("DOI", "") or None
    citation = Citation(
        id=f"crossref-{doi.lower()}" if doi else f"crossref-{_stable_id(item.get('title'))}",
        type=CROSSREF_TYPES.get((item.get("type") or "").lower(), 'unknown'),
        title=_first(item.get("title")),
        authors=crossref_authors(item),
        year=_crossref_year(item),
        journal=_first(item.get("container-title")) or None,
        volume=item.get("volume") or None,
        issue=item.get("issue") or None,
        pages=item.get("page") or None,
        doi=doi,
        url=item.get("URL") or None,
        publisher=item.get("publisher") or None,
        isbn=_first(item.get("ISBN")) or None,
        keywords=list(item.get("subject") or []),
    )
    if citation.type == 'book':
        citation.journal = None
    return citation


def semantic_scholar_paper_to_citation(paper: Dict[str, Any]) -> Citation:
    """Parse a Semantic Scholar paper into a Citation."""
    authors = [parse_author(a["name"]) for a in paper.get("authors") or [] if a.get("name")]

    year = paper.get("year")
    if not year:
        pub_date = paper.get("publicationDate") or ""
        year = pub_date.split("-")[0] if pub_date else None
    try:
        year = int(year) if year else None
    except (TypeError, ValueError):
        year = None

    doi = (paper.get("externalIds") or {}).get("DOI") or None
    venue = paper.get("venue") or None
    paper_id = paper.get("paperId") or _stable_id(paper.get("title"))
    return Citation(
        id=f"s2-{paper_id}",
        type='journal' if venue else 'unknown',
        title=paper.get("title") or "",
        authors=authors,
        year=year,
        journal=venue,
        doi=doi,
        url=paper.get("url") or None,
    )


def _stable_id(value: Any) -> str:
    return hashlib.sha1(str(value or "").encode("utf-8")).hexdigest()[:10]


class MetadataLookup(ABC):
    """Finds citation records for a DOI or free-text title query."""

    @abstractmethod
    def by_doi_or_title(self, query: str) -> List[Citation]:
        """Return matching citations; empty when nothing is found."""


class ScholarlyMetadataLookup(MetadataLookup):
    """CrossRef DOI lookup, then CrossRef and Semantic Scholar search."""

    def __init__(self, rows: Optional[int] = None):
        self.rows = rows or Config.EXTERNAL_RESULT_ROWS

    def by_doi_or_title(self, query: str) -> List[Citation]:
        """
        Look up citation metadata.

        A DOI query that resolves returns just that work. Otherwise CrossRef
        bibliographic search results come first, then Semantic Scholar's, with
        duplicates removed. Any failing service only contributes nothing.
        """
        query = (query or "").strip()
        if not query:
            return []

        doi = normalize_doi(query)
        if DOI_QUERY.match(doi):
            found = self.search_doi(doi)
            if found:
                return [found]

        results = self.search_crossref(query) + self.search_semantic_scholar(query)
        unique = []
        seen = set()
        for citation in results:
            key = get_dedupe_key(citation)
            if key not in seen:
                seen.add(key)
                unique.append(citation)
        logger.info(f"Metadata search for '{query[:60]}' returned {len(unique)} results")
        return unique

    @api_error_handler(fallback=None)
    def search_doi(self, doi: str) -> Optional[Citation]:
        """Look up work by DOI."""
        try:
            data = safe_crossref_request(f"{Config.CROSSREF_API_URL}/{quote(doi, safe='/')}")
        except ExternalServiceError as e:
            if e.status_code == 404:
                logger.info(f"DOI {doi} not found on CrossRef")
                return None
            raise
        item = data.get("message") or {}
        return crossref_item_to_citation(item) if item else None

    @api_error_handler(fallback=[])
    def search_crossref(self, query: str) -> List[Citation]:
        """CrossRef bibliographic search."""
        data = safe_crossref_request(
            Config.CROSSREF_API_URL,
            {"query.bibliographic": query, "rows": self.rows},
        )
        items = data.get("message", {}).get("items", [])
        return [crossref_item_to_citation(item) for item in items]

    @api_error_handler(fallback=[])
    def search_semantic_scholar(self, query: str) -> List[Citation]:
        """Semantic Scholar paper search (free, no key required)."""
        data = safe_semantic_scholar_request(
            Config.SEMANTIC_SCHOLAR_API_URL,
            {
                "query": query,
                "limit": self.rows,
                "fields": "title,authors,year,venue,externalIds,publicationDate,url",
            },
        )
        papers = data.get("data") or []
        if not papers:
            logger.info(f"No results from Semantic Scholar for: {query}")
        return [semantic_scholar_paper_to_citation(p) for p in papers]


def search_citation_metadata(query: str, lookup: Optional[MetadataLookup] = None) -> List[Citation]:
    """Citations matching a DOI or title; never raises for lookup failures."""
    lookup = lookup or ScholarlyMetadataLookup()
    try:
        return lookup.by_doi_or_title(query)
    except Exception as e:
        logger.error(f"Metadata lookup failed for '{query}': {e}")
        return []
