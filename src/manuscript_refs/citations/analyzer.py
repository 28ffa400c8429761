"""
Reference-list quality analysis.

The quality score averages a per-citation completeness score and then
deducts for duplicates:

- 50 points if the citation has no validation errors
- 30 points spread over title, authors and year
- 10 points for a DOI
- 5 points spread over venue (journal or publisher), volume and pages
- 5 points if there are no warnings

The set score is the mean minus ``10 * duplicate_ratio``, clamped to 0..100.
"""
import logging
from collections import Counter
from typing import Dict, List, Optional

from ..models import Citation, ReferenceAnalysis, ValidationResult
from .extractor import normalize_doi
from .validator import validate_citations

logger = logging.getLogger(__name__)

# Fields reported in missing_fields when absent from most of the list
TRACKED_FIELDS = ('title', 'authors', 'year', 'doi', 'journal', 'volume', 'pages', 'url')


def get_dedupe_key(citation: Citation) -> str:
    """
    Deterministic identity key for duplicate detection.

    Normalized DOI if present, otherwise lower-cased alphanumeric title plus
    first author surname. Citations with neither a DOI nor a title fall back
    to their URL, then to their id, which never collides.
    """
    doi = normalize_doi(citation.doi)
    if doi:
        return f"doi:{doi}"

    title = "".join(c for c in (citation.title or "").lower() if c.isalnum())
    if title:
        return f"{title}|{citation.first_author_last_name.lower()}"
    if citation.url:
        return f"url:{citation.url}"
    return f"id:{citation.id}"


def count_duplicates(citations: List[Citation]) -> int:
    """Every repeat of an identity key beyond its first occurrence counts once."""
    counts = Counter(get_dedupe_key(c) for c in citations)
    return sum(n - 1 for n in counts.values() if n > 1)


def citation_quality(citation: Citation, result: ValidationResult) -> float:
    """Completeness score of a single citation, 0..100."""
    score = 50.0 if result.is_valid else 0.0
    core = [bool((citation.title or "").strip()), bool(citation.authors), bool(citation.year)]
    score += 30.0 * sum(core) / len(core)
    if citation.doi:
        score += 10.0
    optional = [bool(citation.journal or citation.publisher), bool(citation.volume), bool(citation.pages)]
    score += 5.0 * sum(optional) / len(optional)
    if not result.warnings:
        score += 5.0
    return score


class ReferenceAnalyzer:
    """Summarises validity, duplication and completeness of a reference list."""

    def analyze_references(
        self,
        citations: List[Citation],
        validations: Optional[List[ValidationResult]] = None,
    ) -> ReferenceAnalysis:
        """
        Analyse a reference list.

        Args:
            citations: The reference list
            validations: Precomputed validation results aligned with ``citations``;
                computed here when omitted
        """
        if validations is None or len(validations) != len(citations):
            validations = validate_citations(citations)

        total = len(citations)
        valid = sum(1 for v in validations if v.is_valid)
        invalid = total - valid
        duplicates = count_duplicates(citations)

        analysis = ReferenceAnalysis(
            total_references=total,
            valid_references=valid,
            invalid_references=invalid,
            duplicate_references=duplicates,
            quality_score=self._quality_score(citations, validations, duplicates),
            recommendations=self._recommendations(citations, invalid, duplicates),
            missing_fields=self._missing_fields(citations),
        )
        logger.info(
            f"Analyzed {total} references: {valid} valid, {invalid} invalid, "
            f"{duplicates} duplicates, score {analysis.quality_score}"
        )
        return analysis

    @staticmethod
    def _quality_score(
        citations: List[Citation],
        validations: List[ValidationResult],
        duplicates: int,
    ) -> int:
        if not citations:
            return 0
        mean = sum(citation_quality(c, v) for c, v in zip(citations, validations)) / len(citations)
        score = mean - 10.0 * (duplicates / len(citations))
        return int(round(max(0.0, min(100.0, score))))

    @staticmethod
    def _recommendations(citations: List[Citation], invalid: int, duplicates: int) -> List[str]:
        recommendations = []
        if invalid:
            recommendations.append(f"Fix {invalid} invalid citation(s)")

        journals_without_doi = sum(1 for c in citations if c.type == 'journal' and not c.doi)
        if journals_without_doi:
            recommendations.append(f"Add DOIs to {journals_without_doi} journal citation(s)")

        without_year = sum(1 for c in citations if not c.year)
        if without_year:
            recommendations.append(f"Add publication years to {without_year} citation(s)")

        if duplicates:
            recommendations.append(f"Remove {duplicates} duplicate citation(s)")

        if not recommendations and citations:
            recommendations.append("Citations are well-formatted and complete")
        return recommendations

    @staticmethod
    def _missing_fields(citations: List[Citation]) -> List[str]:
        if not citations:
            return []
        missing: Dict[str, int] = {}
        for citation in citations:
            for name in TRACKED_FIELDS:
                if not getattr(citation, name):
                    missing[name] = missing.get(name, 0) + 1
        return [name for name in TRACKED_FIELDS if missing.get(name, 0) > len(citations) / 2]


def analyze_references(
    citations: List[Citation],
    validations: Optional[List[ValidationResult]] = None,
) -> ReferenceAnalysis:
    """Quality report for a reference list."""
    return ReferenceAnalyzer().analyze_references(citations, validations)
