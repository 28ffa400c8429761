"""
Lexical similarity between two texts.

Both texts are case-folded and split into word tokens (punctuation dropped).
Shared passages are found by greedy string tiling: every n-gram of the first
text is looked up in an index of the second text's n-grams and extended to the
longest run of identical tokens; tokens already used by a tile are not reused.

The score blends two signals:

- coverage: tokens of both texts inside tiles, over all tokens of both texts
- Jaccard overlap of the two content-word vocabularies (stopwords removed)

``similarity = 0.6 * coverage + 0.4 * jaccard``, rounded to four places.
Identical texts score 1.0; texts sharing no phrases and few content words
score well under 0.3.
"""
import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from ..config import Config
from ..models import SimilarityAnalysis, TextMatch

logger = logging.getLogger(__name__)

TOKEN_PATTERN = re.compile(r"[^\W_]+")
SENTENCE_SPLIT = re.compile(r"(?<=[.!?])\s+")

COVERAGE_WEIGHT = 0.6
JACCARD_WEIGHT = 0.4

# Occurrences of one n-gram in the source that are tried as tile starts
MAX_TILE_CANDIDATES = 50

# Sentence-level checks are quadratic; only this many sentences per side are compared
MAX_SENTENCES = 50
SENTENCE_MIN_CHARS = 30
SENTENCE_JACCARD_THRESHOLD = 0.9

STOPWORDS = {
    "a", "an", "and", "are", "as", "at", "be", "been", "by", "for", "from",
    "has", "have", "in", "into", "is", "it", "its", "of", "on", "or", "that",
    "the", "their", "this", "to", "was", "were", "which", "with",
}


@dataclass
class Token:
    word: str
    start: int
    end: int


@dataclass
class Tile:
    """A maximal run of identical tokens shared by both texts."""
    a_start: int
    b_start: int
    length: int


@dataclass
class Comparison:
    """Result of comparing a text against one source text."""
    similarity: float
    matched_words: int
    total_words: int
    matches: List[TextMatch] = field(default_factory=list)
    phrases: List[str] = field(default_factory=list)
    verbatim_phrases: List[str] = field(default_factory=list)


def tokenize(text: Optional[str]) -> List[Token]:
    """Case-folded word tokens with their character spans in ``text``."""
    if not text:
        return []
    return [Token(m.group(0).casefold(), m.start(), m.end()) for m in TOKEN_PATTERN.finditer(text)]


def content_words(words: List[str]) -> Set[str]:
    """Vocabulary without stopwords; falls back to every word for stopword-only text."""
    vocabulary = {w for w in words if w not in STOPWORDS}
    return vocabulary or set(words)


def jaccard(a: Set[str], b: Set[str]) -> float:
    if not a or not b:
        return 0.0
    return len(a & b) / len(a | b)


def greedy_tiles(a: List[str], b: List[str], n: int) -> List[Tile]:
    """Non-overlapping shared runs of at least ``n`` tokens, in order of ``a``."""
    if n <= 0 or len(a) < n or len(b) < n:
        return []

    index: Dict[Tuple[str, ...], List[int]] = {}
    for j in range(len(b) - n + 1):
        index.setdefault(tuple(b[j:j + n]), []).append(j)

    used_b = [False] * len(b)
    tiles = []
    i = 0
    while i <= len(a) - n:
        best: Optional[Tile] = None
        for j in index.get(tuple(a[i:i + n]), [])[:MAX_TILE_CANDIDATES]:
            if any(used_b[j:j + n]):
                continue
            length = n
            while (
                i + length < len(a)
                and j + length < len(b)
                and not used_b[j + length]
                and a[i + length] == b[j + length]
            ):
                length += 1
            if best is None or length > best.length:
                best = Tile(i, j, length)
            if length == len(a) - i:
                break

        if best is None:
            i += 1
            continue
        for k in range(best.b_start, best.b_start + best.length):
            used_b[k] = True
        tiles.append(best)
        i += best.length
    return tiles


def split_sentences(text: Optional[str]) -> List[str]:
    if not text:
        return []
    return [s.strip() for s in SENTENCE_SPLIT.split(text) if s.strip()]


class TextSimilarityAnalyzer:
    """Scores lexical overlap and reports shared passages."""

    def __init__(self, ngram_size: Optional[int] = None, verbatim_min_words: Optional[int] = None):
        self.ngram_size = ngram_size or Config.NGRAM_SIZE
        self.verbatim_min_words = verbatim_min_words or Config.VERBATIM_MIN_WORDS

    def compare(self, text: Optional[str], source_text: Optional[str]) -> Comparison:
        """
        Compare ``text`` against ``source_text``.

        The returned matches carry character positions in ``text`` and the
        corresponding passage of ``source_text``.
        """
        text = text or ""
        source_text = source_text or ""
        a_tokens = tokenize(text)
        b_tokens = tokenize(source_text)
        if not a_tokens or not b_tokens:
            return Comparison(similarity=0.0, matched_words=0, total_words=len(a_tokens))

        a_words = [t.word for t in a_tokens]
        b_words = [t.word for t in b_tokens]
        n = min(self.ngram_size, len(a_words), len(b_words))
        tiles = greedy_tiles(a_words, b_words, n)

        covered = sum(t.length for t in tiles)
        coverage = (2 * covered) / (len(a_words) + len(b_words))
        overlap = jaccard(content_words(a_words), content_words(b_words))
        similarity = round(min(1.0, COVERAGE_WEIGHT * coverage + JACCARD_WEIGHT * overlap), 4)

        matches = []
        phrases = []
        verbatim = []
        for tile in tiles:
            first, last = a_tokens[tile.a_start], a_tokens[tile.a_start + tile.length - 1]
            source_first = b_tokens[tile.b_start]
            source_last = b_tokens[tile.b_start + tile.length - 1]
            phrase = " ".join(a_words[tile.a_start:tile.a_start + tile.length])
            matches.append(TextMatch(
                original_text=text[first.start:last.end],
                matched_text=source_text[source_first.start:source_last.end],
                similarity=1.0,
                start_position=first.start,
                end_position=last.end,
            ))
            if phrase not in phrases:
                phrases.append(phrase)
            if tile.length >= self.verbatim_min_words and phrase not in verbatim:
                verbatim.append(phrase)

        return Comparison(
            similarity=similarity,
            matched_words=covered,
            total_words=len(a_words),
            matches=matches,
            phrases=phrases,
            verbatim_phrases=verbatim,
        )

    def similar_sentences(self, text: Optional[str], source_text: Optional[str]) -> List[str]:
        """Sentences of ``text`` whose vocabulary nearly equals a sentence of ``source_text``."""
        source_sets = [
            set(t.word for t in tokenize(s))
            for s in split_sentences(source_text)[:MAX_SENTENCES]
            if len(s) > SENTENCE_MIN_CHARS
        ]
        found = []
        for sentence in split_sentences(text)[:MAX_SENTENCES]:
            if len(sentence) <= SENTENCE_MIN_CHARS:
                continue
            words = set(t.word for t in tokenize(sentence))
            if any(jaccard(words, other) > SENTENCE_JACCARD_THRESHOLD for other in source_sets):
                found.append(sentence)
        return found

    def analyze_similarity(self, text_a: Optional[str], text_b: Optional[str]) -> SimilarityAnalysis:
        """Similarity score, shared phrases, verbatim indicators and guidance."""
        comparison = self.compare(text_a, text_b)

        suspicious = [
            f'Verbatim overlap of {len(p.split())} words: "{p}"' for p in comparison.verbatim_phrases
        ]
        suspicious.extend(
            f'High similarity sentence: "{s[:100]}"' for s in self.similar_sentences(text_a, text_b)
        )

        analysis = SimilarityAnalysis(
            similarity=comparison.similarity,
            matched_phrases=comparison.phrases,
            suspicious_patterns=suspicious,
            recommendations=self._recommendations(comparison.similarity, comparison.phrases, suspicious),
        )
        logger.debug(
            f"Similarity {analysis.similarity:.4f} with {len(analysis.matched_phrases)} shared phrases"
        )
        return analysis

    @staticmethod
    def _recommendations(similarity: float, phrases: List[str], suspicious: List[str]) -> List[str]:
        if similarity >= 0.8:
            recommendations = ["High similarity detected - review manually for potential overlap"]
        elif similarity >= 0.5:
            recommendations = ["Moderate similarity detected - check that shared passages are quoted and cited"]
        elif similarity >= 0.3:
            recommendations = ["Some overlap detected - consider paraphrasing shared phrases"]
        else:
            recommendations = ["Low similarity - appears to be original content"]

        if len(phrases) > 5:
            recommendations.append("Multiple shared phrases found - verify that borrowed wording is cited")
        if suspicious:
            recommendations.append("Verbatim passages detected - add quotation marks and citations")
        return recommendations


def analyze_similarity(text_a: Optional[str], text_b: Optional[str]) -> SimilarityAnalysis:
    """Lexical similarity analysis of two texts."""
    return TextSimilarityAnalyzer().analyze_similarity(text_a, text_b)
