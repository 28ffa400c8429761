"""Tests for reference-list analysis."""
from dataclasses import replace

from manuscript_refs.citations.analyzer import analyze_references, citation_quality
from manuscript_refs.citations.validator import validate_citations
from manuscript_refs.models import Author, Citation


def _poor(cid):
    return Citation(id=cid, title="", authors=[])


class TestCounts:
    """Validity and duplicate counts."""

    def test_valid_and_invalid(self, doe_citation, smith_citation):
        analysis = analyze_references([doe_citation, smith_citation, _poor("p1")])
        assert analysis.total_references == 3
        assert analysis.valid_references == 2
        assert analysis.invalid_references == 1

    def test_duplicates_by_doi(self, doe_citation):
        upper = replace(doe_citation, id="copy-1", doi=doe_citation.doi.upper())
        prefixed = replace(doe_citation, id="copy-2", doi=f"https://doi.org/{doe_citation.doi}")
        analysis = analyze_references([doe_citation, upper, prefixed])
        assert analysis.duplicate_references == 2
        assert any("duplicate" in r for r in analysis.recommendations)

    def test_duplicates_by_title_and_author(self):
        a = Citation(id="a", title="Urban Heat!", authors=[Author("A", "Smith")], year=2020)
        b = Citation(id="b", title="urban heat", authors=[Author("B", "Smith")], year=2020)
        c = Citation(id="c", title="urban heat", authors=[Author("C", "Jones")], year=2020)
        assert analyze_references([a, b, c]).duplicate_references == 1

    def test_untitled_citations_are_not_duplicates(self):
        assert analyze_references([_poor("p1"), _poor("p2")]).duplicate_references == 0

    def test_precomputed_validations(self, doe_citation):
        validations = validate_citations([doe_citation])
        validations[0].is_valid = False
        assert analyze_references([doe_citation], validations).invalid_references == 1


class TestQualityScore:
    """Bounded, monotonic quality score."""

    def test_complete_set_scores_high(self, doe_citation, smith_citation):
        assert analyze_references([doe_citation, smith_citation]).quality_score > 80

    def test_poor_set_scores_lower(self, doe_citation):
        good = analyze_references([doe_citation]).quality_score
        bare = Citation(id="bare", title="Something", authors=[Author("A", "B")])
        poor = analyze_references([doe_citation, _poor("p1"), _poor("p2"), bare]).quality_score
        assert poor < good - 30

    def test_bounds(self, doe_citation):
        assert analyze_references([]).quality_score == 0
        assert 0 <= analyze_references([_poor("p")]).quality_score <= 100
        assert analyze_references([doe_citation] * 5).quality_score <= 100

    def test_completeness_increases_score(self, doe_citation):
        partial = replace(doe_citation, doi=None)
        result = validate_citations([partial])[0]
        full_result = validate_citations([doe_citation])[0]
        assert citation_quality(doe_citation, full_result) > citation_quality(partial, result)


class TestRecommendations:
    """Recommendation strings and missing fields."""

    def test_clean_list(self, doe_citation):
        analysis = analyze_references([doe_citation])
        assert analysis.recommendations == ["Citations are well-formatted and complete"]

    def test_specific_fixes(self):
        journal = Citation(id="j", type='journal', title="T", authors=[Author("A", "B")], journal="J")
        analysis = analyze_references([journal, _poor("p")])
        assert "Fix 1 invalid citation(s)" in analysis.recommendations
        assert "Add DOIs to 1 journal citation(s)" in analysis.recommendations
        assert "Add publication years to 2 citation(s)" in analysis.recommendations

    def test_missing_fields(self, doe_citation):
        analysis = analyze_references([doe_citation, _poor("p1"), _poor("p2")])
        assert "doi" in analysis.missing_fields
        assert "year" in analysis.missing_fields
        assert "url" in analysis.missing_fields

    def test_empty_list(self):
        analysis = analyze_references([])
        assert analysis.total_references == 0
        assert analysis.recommendations == []
        assert analysis.missing_fields == []
