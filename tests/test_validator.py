"""Tests for citation validation."""
from unittest.mock import MagicMock, patch

import requests

from manuscript_refs.citations.validator import CitationValidator, validate_citations
from manuscript_refs.models import Author, Citation


def _author():
    return [Author(first_name="Jane", last_name="Doe")]


class TestCoreRules:
    """Required fields and DOI format."""

    def test_empty_citation_is_invalid(self):
        result = validate_citations([Citation(id="x", title="", authors=[])])[0]
        assert result.is_valid is False
        assert "Title is missing or unknown" in result.errors
        assert "No authors specified" in result.errors

    def test_whitespace_and_placeholder_titles(self):
        results = validate_citations([
            Citation(id="a", title="   ", authors=_author()),
            Citation(id="b", title="Unknown Title", authors=_author()),
        ])
        assert all("Title is missing or unknown" in r.errors for r in results)

    def test_invalid_doi(self):
        result = validate_citations([Citation(id="x", title="T", authors=_author(), doi="doi-123")])[0]
        assert "Invalid DOI format" in result.errors
        assert not result.is_valid

    def test_valid_doi(self):
        result = validate_citations([
            Citation(id="x", title="T", authors=_author(), year=2020, doi="10.1000/xyz123")
        ])[0]
        assert result.is_valid
        assert result.errors == []

    def test_missing_year_is_only_a_warning(self):
        result = validate_citations([Citation(id="x", title="T", authors=_author())])[0]
        assert result.is_valid
        assert "Publication year is missing" in result.warnings

    def test_results_align_with_input(self, doe_citation):
        bad = Citation(id="bad")
        results = validate_citations([doe_citation, bad, doe_citation])
        assert [r.is_valid for r in results] == [True, False, True]

    def test_empty_list(self):
        assert validate_citations([]) == []


class TestTypeSpecificRules:
    """Checks that depend on the citation type."""

    def test_journal_without_name_or_identifier(self):
        result = validate_citations([
            Citation(id="x", type='journal', title="T", authors=_author(), year=2020)
        ])[0]
        assert result.is_valid
        assert "Journal name is missing" in result.warnings
        assert "Consider adding DOI or URL for accessibility" in result.suggestions

    def test_book_checks(self):
        result = validate_citations([
            Citation(id="x", type='book', title="T", authors=_author(), year=2020)
        ])[0]
        assert "Publisher is missing" in result.warnings
        assert "Consider adding ISBN" in result.suggestions

    def test_website_requires_url(self):
        result = validate_citations([
            Citation(id="x", type='website', title="T", authors=_author(), year=2020)
        ])[0]
        assert not result.is_valid
        assert "URL is required for website citations" in result.errors
        assert "Access date is recommended for website citations" in result.warnings

    def test_suggestions_never_affect_validity(self, doe_citation):
        result = validate_citations([doe_citation])[0]
        assert result.suggestions
        assert result.is_valid

    def test_orcid_suppresses_suggestion(self, doe_citation):
        doe_citation.authors[0].orcid = "0000-0002-1825-0097"
        result = validate_citations([doe_citation])[0]
        assert not any("ORCID" in s for s in result.suggestions)


class TestUrlCheck:
    """Optional URL reachability probe."""

    def _website(self):
        return Citation(
            id="w", type='website', title="T", authors=_author(), year=2020,
            url="https://example.org/page", access_date="2024-01-01",
        )

    @patch('requests.head')
    def test_unreachable_url(self, mock_head):
        mock_head.return_value = MagicMock(ok=False, status_code=404)
        result = CitationValidator(check_urls=True).validate_single(self._website())
        assert "URL may not be accessible" in result.warnings
        assert result.is_valid

    @patch('requests.head')
    def test_url_check_error(self, mock_head):
        mock_head.side_effect = requests.exceptions.ConnectionError("down")
        result = CitationValidator(check_urls=True).validate_single(self._website())
        assert "Could not verify URL accessibility" in result.warnings

    @patch('requests.head')
    def test_url_check_disabled(self, mock_head):
        CitationValidator(check_urls=False).validate_single(self._website())
        mock_head.assert_not_called()
