"""Data models for citations, reference analysis and originality reports."""
from dataclasses import dataclass, asdict, field, fields
from datetime import datetime, timezone
from typing import List, Dict, Any, Optional, Literal

CitationType = Literal['journal', 'book', 'conference', 'website', 'unknown']
ReportStatus = Literal['pending', 'completed', 'failed']
ReportService = Literal['internal', 'external', 'combined']


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _snake(name: str) -> str:
    return "".join("_" + c.lower() if c.isupper() else c for c in name)


def _camelize(value: Any) -> Any:
    if isinstance(value, dict):
        return {_camel(k): _camelize(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_camelize(v) for v in value]
    return value


def _known_kwargs(cls, data: Dict[str, Any]) -> Dict[str, Any]:
    """Accept camelCase or snake_case keys and drop anything the dataclass doesn't define."""
    names = {f.name for f in fields(cls)}
    out = {}
    for key, value in data.items():
        name = key if key in names else _snake(key)
        if name in names:
            out[name] = value
    return out


def _blank_nulls(kwargs: Dict[str, Any], *names: str) -> Dict[str, Any]:
    """JSON null in a text field means empty text."""
    for name in names:
        if name in kwargs and kwargs[name] is None:
            kwargs[name] = ""
    return kwargs


@dataclass
class Author:
    """Author information."""
    first_name: str = ""
    last_name: str = ""
    middle_name: Optional[str] = None
    suffix: Optional[str] = None
    orcid: Optional[str] = None

    def __str__(self):
        if self.first_name:
            return f"{self.last_name}, {self.first_name}"
        return self.last_name

    @property
    def given_names(self) -> List[str]:
        """All given-name parts, middle names included."""
        parts = (self.first_name or "").split()
        if self.middle_name:
            parts.extend(self.middle_name.split())
        return parts

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Author':
        return cls(**_blank_nulls(_known_kwargs(cls, data), 'first_name', 'last_name'))


@dataclass
class Citation:
    """A structured bibliographic reference."""
    id: str
    type: CitationType = 'unknown'
    title: str = ""
    authors: List[Author] = field(default_factory=list)
    year: Optional[int] = None
    journal: Optional[str] = None
    volume: Optional[str] = None
    issue: Optional[str] = None
    pages: Optional[str] = None
    doi: Optional[str] = None
    url: Optional[str] = None
    publisher: Optional[str] = None
    isbn: Optional[str] = None
    keywords: List[str] = field(default_factory=list)
    access_date: Optional[str] = None
    location: Optional[str] = None
    raw_text: Optional[str] = None

    # Fields that say something about the cited work (id and raw_text don't)
    DESCRIPTIVE_FIELDS = (
        'title', 'authors', 'year', 'journal', 'volume', 'issue', 'pages',
        'doi', 'url', 'publisher', 'isbn', 'keywords', 'access_date', 'location',
    )

    @property
    def first_author_last_name(self) -> str:
        return self.authors[0].last_name if self.authors else ""

    def populated_field_count(self) -> int:
        """Number of descriptive fields carrying a value."""
        count = 0
        for name in self.DESCRIPTIVE_FIELDS:
            value = getattr(self, name)
            if value:
                count += 1
        if self.type != 'unknown':
            count += 1
        return count

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a camelCase dictionary for JSON serialization."""
        data = _camelize(asdict(self))
        return {k: v for k, v in data.items() if v is not None}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Citation':
        """Create a Citation from a dictionary (camelCase or snake_case keys)."""
        kwargs = _blank_nulls(_known_kwargs(cls, data), 'id', 'title')
        if kwargs.get('type') is None:
            kwargs.pop('type', None)
        if kwargs.get('keywords') is None:
            kwargs.pop('keywords', None)
        kwargs['authors'] = [
            a if isinstance(a, Author) else Author.from_dict(a)
            for a in kwargs.get('authors') or []
        ]
        if kwargs.get('year') not in (None, ""):
            try:
                kwargs['year'] = int(kwargs['year'])
            except (TypeError, ValueError):
                kwargs['year'] = None
        return cls(**kwargs)


@dataclass
class ValidationResult:
    """Outcome of validating one citation."""
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return _camelize(asdict(self))


@dataclass(frozen=True)
class FormattedCitation:
    """A citation rendered in one style."""
    citation: Citation
    style: str
    formatted_text: str
    in_text_citation: str


@dataclass
class BibliographyEntry:
    """One entry of a bibliography; its position in the list is its number."""
    citation: Citation
    formatted_text: str
    in_text_citation: str
    style: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'citation': self.citation.to_dict(),
            'formattedText': self.formatted_text,
            'inTextCitation': self.in_text_citation,
            'style': self.style,
        }


@dataclass
class ReferenceAnalysis:
    """Quality report for a reference list."""
    total_references: int
    valid_references: int
    invalid_references: int
    duplicate_references: int
    quality_score: int
    recommendations: List[str] = field(default_factory=list)
    missing_fields: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return _camelize(asdict(self))


@dataclass
class SimilarityAnalysis:
    """Lexical overlap between two blocks of text."""
    similarity: float
    matched_phrases: List[str] = field(default_factory=list)
    suspicious_patterns: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return _camelize(asdict(self))


@dataclass
class TextMatch:
    """A span of the checked text that also appears in a source."""
    original_text: str
    matched_text: str
    similarity: float
    start_position: int
    end_position: int
    source_id: Optional[str] = None
    source_title: Optional[str] = None
    source_url: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TextMatch':
        return cls(**_known_kwargs(cls, data))


@dataclass
class PlagiarismSource:
    """A candidate document that overlaps the checked article."""
    source_id: str
    title: str
    authors: List[str]
    similarity: float
    matched_words: int
    total_words: int
    matches: List[TextMatch] = field(default_factory=list)
    url: Optional[str] = None
    doi: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PlagiarismSource':
        kwargs = _known_kwargs(cls, data)
        kwargs['matches'] = [TextMatch.from_dict(m) for m in kwargs.get('matches') or []]
        return cls(**kwargs)


@dataclass
class PlagiarismReport:
    """Outcome of one plagiarism check for an article."""
    article_id: str
    overall_similarity: float
    sources: List[PlagiarismSource] = field(default_factory=list)
    text_matches: List[TextMatch] = field(default_factory=list)
    status: ReportStatus = 'pending'
    service: ReportService = 'combined'
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a camelCase dictionary for JSON serialization."""
        data = _camelize(asdict(self))
        data['generatedAt'] = self.generated_at.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PlagiarismReport':
        """Create a report from its JSON form."""
        kwargs = _known_kwargs(cls, data)
        kwargs['sources'] = [PlagiarismSource.from_dict(s) for s in kwargs.get('sources') or []]
        kwargs['text_matches'] = [TextMatch.from_dict(m) for m in kwargs.get('text_matches') or []]
        if isinstance(kwargs.get('generated_at'), str):
            kwargs['generated_at'] = datetime.fromisoformat(kwargs['generated_at'])
        return cls(**kwargs)


@dataclass
class Candidate:
    """A document considered as a possible source during a plagiarism check."""
    title: str = ""
    authors: List[str] = field(default_factory=list)
    abstract: Optional[str] = None
    content: Optional[str] = None
    url: Optional[str] = None
    doi: Optional[str] = None
    source_id: Optional[str] = None

    @property
    def text(self) -> str:
        """Best available text: full content, then abstract, then title."""
        return self.content or self.abstract or self.title or ""


@dataclass
class ArticleRecord:
    """The fields of a stored article the originality check reads."""
    id: str
    title: str = ""
    abstract: Optional[str] = None
    content: Optional[str] = None
    authors: List[str] = field(default_factory=list)
