"""Tests for text similarity analysis."""
import pytest

from manuscript_refs.originality.similarity import (
    Tile,
    TextSimilarityAnalyzer,
    analyze_similarity,
    greedy_tiles,
    tokenize,
)

BIOLOGY = "The mitochondria is the powerhouse of the cell and produces energy through respiration."
FINANCE = "Stock markets fell sharply yesterday as investors reacted to rising interest rates."
SHARED = "The quick brown fox jumps over the lazy dog near the river"


class TestTokenization:
    """Tokenizer behaviour."""

    def test_casefold_and_strip_punctuation(self):
        assert [t.word for t in tokenize("Hello, WORLD! It's")] == ["hello", "world", "it", "s"]

    def test_spans_point_into_original(self):
        text = "  Alpha, beta"
        tokens = tokenize(text)
        assert [text[t.start:t.end] for t in tokens] == ["Alpha", "beta"]

    def test_empty(self):
        assert tokenize("") == []
        assert tokenize(None) == []


class TestGreedyTiles:
    """Shared-run detection."""

    def test_maximal_run(self):
        assert greedy_tiles(["a", "b", "c", "d"], ["x", "a", "b", "c"], 2) == [Tile(0, 1, 3)]

    def test_source_tokens_used_once(self):
        tiles = greedy_tiles(["a", "b", "a", "b"], ["a", "b"], 2)
        assert tiles == [Tile(0, 0, 2)]

    def test_too_short(self):
        assert greedy_tiles(["a"], ["a", "b"], 2) == []

    def test_repetitive_text_is_one_tile(self):
        words = ["again"] * 6000
        assert greedy_tiles(words, words, 5) == [Tile(0, 0, 6000)]

    def test_repetitive_source_longer_than_text(self):
        assert greedy_tiles(["again"] * 300, ["again"] * 6000, 5) == [Tile(0, 0, 300)]


class TestAnalyzeSimilarity:
    """Score boundaries, phrases and guidance."""

    def test_identical_texts(self):
        analysis = analyze_similarity(BIOLOGY, BIOLOGY)
        assert analysis.similarity > 0.9
        assert analysis.recommendations[0] == "High similarity detected - review manually for potential overlap"

    def test_unrelated_texts(self):
        analysis = analyze_similarity(BIOLOGY, FINANCE)
        assert analysis.similarity < 0.3
        assert analysis.matched_phrases == []
        assert analysis.recommendations == ["Low similarity - appears to be original content"]

    def test_paraphrase_scores_in_between(self):
        a = "Coastal cities must adapt to rising sea levels caused by climate change."
        b = "Rising sea levels driven by climate change force coastal cities to adapt their infrastructure."
        similarity = analyze_similarity(a, b).similarity
        assert 0 < similarity < 0.9

    def test_case_and_punctuation_ignored(self):
        assert analyze_similarity(BIOLOGY.upper(), BIOLOGY.replace(",", "").lower()).similarity > 0.9

    def test_verbatim_overlap_flagged(self):
        analysis = analyze_similarity(f"Some introduction first. {SHARED}.", f"{SHARED} and something else.")
        assert "the quick brown fox jumps over the lazy dog near the river" in analysis.matched_phrases
        assert any(p.startswith("Verbatim overlap of 12 words") for p in analysis.suspicious_patterns)
        assert "Verbatim passages detected - add quotation marks and citations" in analysis.recommendations

    def test_high_similarity_sentence(self):
        a = "Renewable energy adoption accelerated across Europe during the last decade."
        b = "During the last decade, renewable energy adoption accelerated across Europe."
        analysis = analyze_similarity(a, b)
        assert any(p.startswith("High similarity sentence") for p in analysis.suspicious_patterns)

    @pytest.mark.parametrize("a, b", [(None, "text"), ("", ""), ("text", None), ("...", "!!!")])
    def test_degenerate_inputs(self, a, b):
        analysis = analyze_similarity(a, b)
        assert analysis.similarity == 0.0
        assert analysis.matched_phrases == []

    def test_score_bounded(self):
        similarity = analyze_similarity(SHARED, SHARED + " " + SHARED).similarity
        assert 0.0 <= similarity <= 1.0


class TestCompare:
    """Match spans used by the plagiarism checker."""

    def test_match_positions(self):
        text = f"Some introduction first. {SHARED}."
        source = f"Earlier work said: {SHARED.upper()}!"
        comparison = TextSimilarityAnalyzer().compare(text, source)

        assert len(comparison.matches) == 1
        match = comparison.matches[0]
        assert match.start_position == text.index("The quick")
        assert match.original_text == SHARED
        assert text[match.start_position:match.end_position] == SHARED
        assert match.matched_text == SHARED.upper()
        assert comparison.matched_words == 12
        assert comparison.total_words == 15

    def test_custom_ngram_size(self):
        comparison = TextSimilarityAnalyzer(ngram_size=2).compare("red apple pie", "green apple pie")
        assert comparison.phrases == ["apple pie"]
