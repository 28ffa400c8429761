"""Tests for citation extraction."""
import pytest

from manuscript_refs.citations.extractor import (
    CitationExtractor,
    DoiRule,
    FormattedReferenceRule,
    UrlRule,
    extract_citations,
    normalize_doi,
    trim_token,
)

DOI = "10.1038/s41558-023-01234-5"


class TestTokenHelpers:
    """Tests for DOI/URL clean-up helpers."""

    def test_trim_trailing_punctuation(self):
        assert trim_token("10.1000/xyz.") == "10.1000/xyz"
        assert trim_token("https://example.org/a,") == "https://example.org/a"

    def test_trim_unbalanced_closer(self):
        assert trim_token("10.1000/xyz)") == "10.1000/xyz"
        # Balanced brackets are part of the identifier
        assert trim_token("10.1002/(SICI)1097") == "10.1002/(SICI)1097"

    def test_normalize_doi(self):
        assert normalize_doi("https://doi.org/10.1000/ABC") == "10.1000/abc"
        assert normalize_doi("DOI: 10.1000/ABC") == "10.1000/abc"
        assert normalize_doi(None) == ""


class TestRules:
    """Each rule works in isolation."""

    def test_doi_rule_finds_prefixed_forms(self):
        matches = DoiRule().find(f"doi:{DOI} and https://dx.doi.org/{DOI}")
        assert [m.citation.doi for m in matches] == [DOI, DOI]

    def test_url_rule_skips_doi_resolver(self):
        matches = UrlRule().find(f"https://doi.org/{DOI} https://example.org/report.pdf.")
        assert len(matches) == 1
        assert matches[0].citation.url == "https://example.org/report.pdf"
        assert matches[0].citation.type == 'website'

    def test_url_rule_records_doi_in_publisher_link(self):
        url = "https://onlinelibrary.wiley.com/doi/10.1002/anie.202012345"
        matches = UrlRule().find(f"See {url}.")
        assert len(matches) == 1
        assert matches[0].citation.doi == "10.1002/anie.202012345"
        assert matches[0].citation.url == url

    def test_formatted_rule_author_year(self):
        line = (
            "Doe, J. (2023). Climate adaptation in coastal cities. "
            "Nature Climate Change, 13(4), 123-130."
        )
        matches = FormattedReferenceRule().find(line)
        assert len(matches) == 1
        citation = matches[0].citation
        assert citation.title == "Climate adaptation in coastal cities"
        assert citation.authors[0].last_name == "Doe"
        assert citation.authors[0].first_name == "J."
        assert citation.year == 2023
        assert citation.journal == "Nature Climate Change"
        assert (citation.volume, citation.issue, citation.pages) == ("13", "4", "123-130")
        assert citation.type == 'journal'

    def test_formatted_rule_multiple_authors(self):
        line = "Smith, A., & Jones, B. (2021). Urban heat islands. Science, 371, 45-50."
        citation = FormattedReferenceRule().find(line)[0].citation
        assert [a.last_name for a in citation.authors] == ["Smith", "Jones"]
        assert citation.volume == "371"
        assert citation.pages == "45-50"

    def test_formatted_rule_numbered(self):
        line = (
            '[1] J. A. Doe and B. Smith, "Deep learning for citation analysis," '
            'IEEE Trans. Knowl. Data Eng., vol. 12, no. 3, pp. 45-67, 2020.'
        )
        citation = FormattedReferenceRule().find(line)[0].citation
        assert citation.title == "Deep learning for citation analysis"
        assert [a.last_name for a in citation.authors] == ["Doe", "Smith"]
        assert citation.authors[0].first_name == "J. A."
        assert citation.journal.startswith("IEEE Trans")
        assert (citation.volume, citation.issue, citation.pages) == ("12", "3", "45-67")
        assert citation.year == 2020
        assert citation.type == 'journal'

    def test_formatted_rule_ignores_prose(self):
        assert FormattedReferenceRule().find("This paragraph discusses prior work at length.") == []


class TestCitationExtractor:
    """Tests for the merged extraction output."""

    def test_empty_text(self):
        assert extract_citations("") == []

    def test_doi_surface_forms_collapse(self):
        text = f"See {DOI}, also https://doi.org/{DOI} and DOI: {DOI}."
        citations = extract_citations(text)
        assert len(citations) == 1
        assert citations[0].doi == DOI

    def test_publisher_link_with_doi_is_one_citation(self):
        url = "https://onlinelibrary.wiley.com/doi/10.1002/anie.202012345"
        citations = extract_citations(f"See {url} for details.")
        assert len(citations) == 1
        assert citations[0].doi == "10.1002/anie.202012345"
        assert citations[0].url == url

    def test_publisher_link_and_bare_doi_merge(self):
        text = "10.1002/anie.202012345 and https://onlinelibrary.wiley.com/doi/10.1002/anie.202012345"
        assert len(extract_citations(text)) == 1

    def test_parenthesised_dois(self):
        text = f"({DOI}) ... (10.1126/science.abc1234)"
        citations = extract_citations(text)
        assert [c.doi for c in citations] == [DOI, "10.1126/science.abc1234"]

    def test_formatted_line_absorbs_its_doi(self):
        text = (
            "Doe, J. (2023). Climate adaptation in coastal cities. "
            f"Nature Climate Change, 13(4), 123-130. https://doi.org/{DOI}"
        )
        citations = extract_citations(text)
        assert len(citations) == 1
        citation = citations[0]
        assert citation.doi == DOI
        assert citation.title == "Climate adaptation in coastal cities"
        assert citation.id.startswith("formatted-")

    def test_output_follows_text_order(self):
        text = "Read https://example.org/first then 10.1000/second and https://example.org/third"
        citations = extract_citations(text)
        assert [c.url or c.doi for c in citations] == [
            "https://example.org/first", "10.1000/second", "https://example.org/third",
        ]

    def test_idempotent(self):
        text = (
            "Smith, A., & Jones, B. (2021). Urban heat islands. Science, 371, 45-50.\n"
            f"Background: {DOI} and https://example.org/data\n"
        )
        assert extract_citations(text) == extract_citations(text)

    def test_custom_rule_set(self):
        extractor = CitationExtractor(rules=[UrlRule()])
        citations = extractor.extract_citations(f"{DOI} https://example.org/x")
        assert len(citations) == 1
        assert citations[0].url == "https://example.org/x"

    @pytest.mark.parametrize("text", ["no references here", "(2020) nothing to see"])
    def test_no_matches(self, text):
        assert extract_citations(text) == []
