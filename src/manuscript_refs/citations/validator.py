"""Citation completeness and format checks."""
import logging
import re
from typing import Callable, List, Optional

import requests

from ..config import Config
from ..models import Citation, ValidationResult

logger = logging.getLogger(__name__)

DOI_FORMAT = re.compile(r"^10\.\d{4,9}/\S+$")

# Titles produced by lookups or parsers when nothing real was found
PLACEHOLDER_TITLES = {"unknown title", "untitled", "no title", "parsed title"}


class CitationValidator:
    """
    Validates citations one at a time.

    Every rule appends to the result's errors, warnings or suggestions; only
    errors make a citation invalid.
    """

    def __init__(self, check_urls: Optional[bool] = None, url_timeout: float = 5.0):
        self.check_urls = Config.VALIDATE_URLS if check_urls is None else check_urls
        self.url_timeout = url_timeout

    def validate_citations(self, citations: List[Citation]) -> List[ValidationResult]:
        """Validate each citation; results are aligned with the input list."""
        return [self.validate_single(citation) for citation in citations]

    def validate_single(self, citation: Citation) -> ValidationResult:
        """Check a single citation against all rules."""
        result = ValidationResult(is_valid=True)

        rules: List[Callable[[Citation, ValidationResult], None]] = [
            self._check_title,
            self._check_authors,
            self._check_year,
            self._check_type_specific,
            self._check_doi_format,
            self._check_orcid,
        ]
        if self.check_urls:
            rules.append(self._check_url_reachable)

        for rule in rules:
            rule(citation, result)

        result.is_valid = not result.errors
        return result

    # --- Rules ---

    @staticmethod
    def _check_title(citation: Citation, result: ValidationResult) -> None:
        title = (citation.title or "").strip()
        if not title or title.lower() in PLACEHOLDER_TITLES:
            result.errors.append("Title is missing or unknown")

    @staticmethod
    def _check_authors(citation: Citation, result: ValidationResult) -> None:
        if not citation.authors:
            result.errors.append("No authors specified")

    @staticmethod
    def _check_year(citation: Citation, result: ValidationResult) -> None:
        if not citation.year:
            result.warnings.append("Publication year is missing")

    @staticmethod
    def _check_type_specific(citation: Citation, result: ValidationResult) -> None:
        if citation.type == 'journal':
            if not citation.journal:
                result.warnings.append("Journal name is missing")
            if not citation.doi and not citation.url:
                result.suggestions.append("Consider adding DOI or URL for accessibility")
        elif citation.type == 'book':
            if not citation.publisher:
                result.warnings.append("Publisher is missing")
            if not citation.isbn:
                result.suggestions.append("Consider adding ISBN")
        elif citation.type == 'website':
            if not citation.url:
                result.errors.append("URL is required for website citations")
            if not citation.access_date:
                result.warnings.append("Access date is recommended for website citations")

    @staticmethod
    def _check_doi_format(citation: Citation, result: ValidationResult) -> None:
        if citation.doi and not DOI_FORMAT.match(citation.doi.strip()):
            result.errors.append("Invalid DOI format")

    @staticmethod
    def _check_orcid(citation: Citation, result: ValidationResult) -> None:
        if citation.authors and not any(a.orcid for a in citation.authors):
            result.suggestions.append("Consider adding ORCID iDs for the authors")

    def _check_url_reachable(self, citation: Citation, result: ValidationResult) -> None:
        if not citation.url:
            return
        try:
            response = requests.head(citation.url, allow_redirects=True, timeout=self.url_timeout)
            if not response.ok:
                result.warnings.append("URL may not be accessible")
        except requests.exceptions.RequestException as e:
            logger.debug(f"URL check failed for {citation.url}: {e}")
            result.warnings.append("Could not verify URL accessibility")


def validate_citations(citations: List[Citation], check_urls: Optional[bool] = None) -> List[ValidationResult]:
    """Validate citations; one result per input citation, same order."""
    return CitationValidator(check_urls=check_urls).validate_citations(citations)
