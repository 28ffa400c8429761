"""
Citation extraction from free-form manuscript text.

Three independent rules each scan the text and return raw matches:

- ``DoiRule``: bare DOIs and their ``doi:`` / resolver-URL forms
- ``UrlRule``: http(s) links other than DOI resolver links; a DOI inside a
  publisher link is recorded as that DOI
- ``FormattedReferenceRule``: reference-list lines in author-year or
  bracket-numbered shape

``CitationExtractor`` runs the rules and merges the matches so that one cited
work is represented by one Citation, whichever surface forms it appears in.
"""
import hashlib
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, fields
from typing import Dict, List, Optional

from ..models import Citation
from ..name_utils import parse_author_list

logger = logging.getLogger(__name__)

DOI_PATTERN = re.compile(
    r"(?:(?:https?://)?(?:dx\.)?doi\.org/|\bdoi:\s*)?(10\.\d{4,9}/[^\s\"<>]+)",
    re.IGNORECASE,
)
DOI_PREFIX_PATTERN = re.compile(r"^(?:(?:https?://)?(?:dx\.)?doi\.org/|doi:\s*)", re.IGNORECASE)
DOI_RESOLVER_PATTERN = re.compile(r"^https?://(?:dx\.)?doi\.org/10\.", re.IGNORECASE)
URL_PATTERN = re.compile(r"https?://[^\s<>\"']+", re.IGNORECASE)

_CLOSERS = {")": "(", "]": "[", "}": "{"}
_TRAILING_PUNCTUATION = ".,;:!?'\""


def trim_token(token: str) -> str:
    """Drop sentence punctuation and unbalanced closing brackets glued to a DOI or URL."""
    while token:
        last = token[-1]
        if last in _TRAILING_PUNCTUATION:
            token = token[:-1]
        elif last in _CLOSERS and token.count(_CLOSERS[last]) < token.count(last):
            token = token[:-1]
        else:
            break
    return token


def normalize_doi(doi: Optional[str]) -> str:
    """Dedup key for a DOI: prefix stripped, lower-cased."""
    if not doi:
        return ""
    return DOI_PREFIX_PATTERN.sub("", doi.strip()).strip().lower()


@dataclass
class RawMatch:
    """One rule hit: the record it produced and where in the text it starts."""
    rule: str
    start: int
    citation: Citation


class ExtractionRule(ABC):
    """A single extraction heuristic."""

    name: str = ""

    @abstractmethod
    def find(self, text: str) -> List[RawMatch]:
        """Return every match of this rule in ``text``."""


class DoiRule(ExtractionRule):
    """DOIs, optionally written as ``doi:``, ``DOI:`` or a doi.org URL."""

    name = "doi"

    def find(self, text: str) -> List[RawMatch]:
        matches = []
        for m in DOI_PATTERN.finditer(text):
            doi = trim_token(m.group(1))
            if not doi or "/" not in doi:
                continue
            matches.append(RawMatch(
                rule=self.name,
                start=m.start(),
                citation=Citation(id="", type='unknown', doi=doi, raw_text=m.group(0).strip()),
            ))
        return matches


class UrlRule(ExtractionRule):
    """Web links.

    Resolver links belong to the DOI rule. A publisher link that carries a DOI
    is recorded under that DOI so it merges with the DOI rule's match.
    """

    name = "url"

    def find(self, text: str) -> List[RawMatch]:
        matches = []
        for m in URL_PATTERN.finditer(text):
            url = trim_token(m.group(0))
            if not url or DOI_RESOLVER_PATTERN.match(url):
                continue
            embedded = DOI_PATTERN.search(url)
            if embedded:
                citation = Citation(id="", type='unknown', doi=trim_token(embedded.group(1)), url=url, raw_text=url)
            else:
                citation = Citation(id="", type='website', url=url, raw_text=url)
            matches.append(RawMatch(rule=self.name, start=m.start(), citation=citation))
        return matches


class FormattedReferenceRule(ExtractionRule):
    """Reference-list lines.

    Author-year: ``Surname, I. (Year). Title. Journal, Vol(Issue), Pages.``
    Numbered:    ``[n] A. Surname, "Title," Journal, vol. X, no. Y, pp. Z, Year.``
    """

    name = "formatted"

    AUTHOR_YEAR_LINE = re.compile(
        r"^(?P<authors>[^()\[\]]+?)\s*\((?P<year>\d{4})[a-z]?(?:,[^)]*)?\)\.?\s+"
        r"(?P<title>.+?[.?!])(?:\s+(?P<rest>.*))?$"
    )
    NUMBERED_LINE = re.compile(
        r'^\[(?P<num>\d+)\]\s+(?P<authors>[^"“]+?),?\s+["“]'
        r'(?P<title>[^"”]+?),?["”],?\s*(?P<rest>.*)$'
    )
    SURNAME_INITIAL = re.compile(r"[^\W\d_][\w'\-]*,\s+[A-Z]\.")
    JOURNAL_DETAILS = re.compile(
        r"^(?P<journal>[^,\d][^,]*),\s*(?P<volume>\d+)(?:\s*\((?P<issue>[^)]+)\))?"
        r"(?:,\s*(?P<pages>[A-Za-z]?\d+(?:\s*[-–]\s*[A-Za-z]?\d+)?))?"
    )
    VOLUME = re.compile(r"\bvol\.\s*([\w\-]+)", re.IGNORECASE)
    NUMBER = re.compile(r"\bno\.\s*([\w\-]+)", re.IGNORECASE)
    PAGES = re.compile(r"\bpp?\.\s*(\d+(?:\s*[-–]\s*\d+)?)", re.IGNORECASE)
    YEAR = re.compile(r"\b(1[5-9]\d{2}|20\d{2})\b")
    LEADING_MARKER = re.compile(r"^(?:[-*•]\s+|\d+[.)]\s+)")

    def find(self, text: str) -> List[RawMatch]:
        matches = []
        offset = 0
        for line in text.splitlines(keepends=True):
            start = offset
            offset += len(line)
            stripped = line.strip()
            if len(stripped) < 15:
                continue
            citation = self._parse_numbered(stripped) or self._parse_author_year(stripped)
            if citation is not None:
                citation.raw_text = stripped
                matches.append(RawMatch(rule=self.name, start=start, citation=citation))
        return matches

    def _parse_author_year(self, line: str) -> Optional[Citation]:
        line = self.LEADING_MARKER.sub("", line)
        m = self.AUTHOR_YEAR_LINE.match(line)
        if not m or not self.SURNAME_INITIAL.search(m.group("authors")):
            return None

        citation = Citation(
            id="",
            title=m.group("title").rstrip(".").strip(),
            authors=parse_author_list(m.group("authors")),
            year=int(m.group("year")),
        )
        rest = (m.group("rest") or "").strip()
        self._attach_identifiers(citation, rest)

        details = self.JOURNAL_DETAILS.match(rest)
        if details:
            citation.journal = details.group("journal").strip()
            citation.volume = details.group("volume")
            citation.issue = details.group("issue")
            citation.pages = _clean_pages(details.group("pages"))
        elif rest and not rest.lower().startswith(("http", "doi", "10.")):
            # Book-like remainder: "Publisher." or "City: Publisher."
            publisher = rest.split(". ")[0].rstrip(".").strip()
            if ":" in publisher:
                location, publisher = [p.strip() for p in publisher.split(":", 1)]
                citation.location = location or None
            citation.publisher = publisher or None

        citation.type = self._classify(citation)
        return citation

    def _parse_numbered(self, line: str) -> Optional[Citation]:
        m = self.NUMBERED_LINE.match(line)
        if not m:
            return None

        citation = Citation(
            id="",
            title=m.group("title").strip().rstrip(","),
            authors=parse_author_list(m.group("authors")),
        )
        rest = m.group("rest").strip()
        self._attach_identifiers(citation, rest)

        first_segment = rest.split(",")[0].strip().rstrip(".")
        if first_segment and not re.match(r"^(?:vol\.|no\.|pp?\.|\d|doi|https?:)", first_segment, re.IGNORECASE):
            citation.journal = first_segment

        volume = self.VOLUME.search(rest)
        number = self.NUMBER.search(rest)
        pages = self.PAGES.search(rest)
        citation.volume = volume.group(1) if volume else None
        citation.issue = number.group(1) if number else None
        citation.pages = _clean_pages(pages.group(1)) if pages else None

        remainder = self.PAGES.sub("", rest)
        years = self.YEAR.findall(DOI_PATTERN.sub("", remainder))
        citation.year = int(years[-1]) if years else None

        citation.type = self._classify(citation)
        return citation

    @staticmethod
    def _attach_identifiers(citation: Citation, rest: str) -> None:
        doi = DOI_PATTERN.search(rest)
        if doi:
            citation.doi = trim_token(doi.group(1))
        for url in URL_PATTERN.finditer(rest):
            candidate = trim_token(url.group(0))
            if not DOI_RESOLVER_PATTERN.match(candidate):
                citation.url = candidate
                break

    @staticmethod
    def _classify(citation: Citation) -> str:
        if citation.volume or citation.pages or citation.journal:
            return 'journal'
        if citation.publisher:
            return 'book'
        return 'unknown'


def _clean_pages(pages: Optional[str]) -> Optional[str]:
    if not pages:
        return None
    return re.sub(r"\s*[-–]\s*", "-", pages.strip())


DEFAULT_RULES: List[ExtractionRule] = [DoiRule(), UrlRule(), FormattedReferenceRule()]


class CitationExtractor:
    """Runs the extraction rules in order and merges their output."""

    def __init__(self, rules: Optional[List[ExtractionRule]] = None):
        self.rules = list(rules) if rules is not None else list(DEFAULT_RULES)

    def extract_citations(self, text: str) -> List[Citation]:
        """
        Extract deduplicated citations from ``text``.

        Output follows the order in which each work first appears in the text
        and is a pure function of the input.
        """
        if not text:
            return []

        raw: List[RawMatch] = []
        counts: Dict[str, int] = {}
        for rule in self.rules:
            found = rule.find(text)
            counts[rule.name] = len(found)
            raw.extend(found)

        citations = self.merge(raw)
        logger.info(
            f"Extracted {len(citations)} citations from text "
            f"({', '.join(f'{name}={n}' for name, n in counts.items())})"
        )
        return citations

    @staticmethod
    def identity_key(citation: Citation) -> str:
        """Merge key: normalized DOI, else literal URL, else the raw line."""
        if citation.doi:
            return f"doi:{normalize_doi(citation.doi)}"
        if citation.url:
            return f"url:{citation.url}"
        return f"ref:{' '.join((citation.raw_text or citation.title).lower().split())}"

    def merge(self, raw: List[RawMatch]) -> List[Citation]:
        """Collapse matches describing the same work into the richest record."""
        # Stable: rule order breaks ties at the same offset
        ordered = sorted(raw, key=lambda m: m.start)

        groups: Dict[str, List[RawMatch]] = {}
        for match in ordered:
            groups.setdefault(self.identity_key(match.citation), []).append(match)

        merged = []
        for key, group in groups.items():
            best = max(group, key=lambda m: m.citation.populated_field_count())
            citation = _copy_citation(best.citation)
            for other in group:
                if other is not best:
                    _backfill(citation, other.citation)
            citation.id = f"{best.rule}-{hashlib.sha1(key.encode('utf-8')).hexdigest()[:10]}"
            merged.append(citation)
        return merged


def _copy_citation(citation: Citation) -> Citation:
    data = {f.name: getattr(citation, f.name) for f in fields(citation)}
    data['authors'] = list(citation.authors)
    data['keywords'] = list(citation.keywords)
    return Citation(**data)


def _backfill(target: Citation, source: Citation) -> None:
    """Copy fields the target lacks from a less complete record of the same work."""
    for f in fields(target):
        if f.name in ('id', 'raw_text'):
            continue
        if not getattr(target, f.name) and getattr(source, f.name):
            setattr(target, f.name, getattr(source, f.name))
    if target.type == 'unknown' and source.type != 'unknown':
        target.type = source.type


_default_extractor = CitationExtractor()


def extract_citations(text: str) -> List[Citation]:
    """Extract deduplicated citations from manuscript text."""
    return _default_extractor.extract_citations(text)
