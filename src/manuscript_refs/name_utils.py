"""
Name parsing and comparison utilities.
"""
import re
import unicodedata
from typing import List, Tuple

from .models import Author

# Common particles in multi-word surnames
NAME_PARTICLES = {
    "van", "von", "der", "den", "ter", "ten",
    "de", "del", "della", "di", "da", "dos", "du",
    "la", "le", "lo", "las", "los"
}


def normalize_for_comparison(text: str) -> str:
    """
    Normalize text for comparison by removing accents/diacritics and converting to lowercase.

    Examples:
        "José" -> "jose"
        "Müller" -> "muller"
        "García" -> "garcia"
    """
    if not text:
        return ""
    # Normalize to NFD (decomposed form) to separate base characters from diacritics
    nfd = unicodedata.normalize('NFD', text)
    # Filter out combining characters (diacritics)
    without_accents = ''.join(char for char in nfd if unicodedata.category(char) != 'Mn')
    return without_accents.casefold()


def looks_like_initial(token: str) -> bool:
    t = token.strip().replace(".", "")
    return len(t) == 1 and t.isalpha()


def initials(author: Author, with_periods: bool = True, separator: str = " ") -> str:
    """Initials of every given name: "J. A." / "JA".

    Hyphenated given names keep the hyphen ("Jean-Paul" -> "J.-P.").
    """
    out = []
    for name in author.given_names:
        pieces = [p for p in name.replace(".", " ").split("-") if p.strip()]
        if not pieces:
            continue
        letters = [p.strip()[0].upper() + ("." if with_periods else "") for p in pieces]
        out.append("-".join(letters) if with_periods else "".join(letters))
    return separator.join(out)


def split_full_name(full_name: str) -> Tuple[str, str]:
    """Split "Given Names Surname" into (given, surname), keeping surname particles.

    "Juan Carlos de la Cruz" -> ("Juan Carlos", "de la Cruz")
    "de la Cruz J" -> ("J", "de la Cruz")
    """
    parts = full_name.strip().split()
    n = len(parts)

    if n == 0:
        return "", ""
    if n == 1:
        return "", parts[0]

    # "Smith J" / "de la Cruz J": trailing initial
    if looks_like_initial(parts[-1]) and not looks_like_initial(parts[0]):
        return parts[-1], " ".join(parts[:-1])

    surname_tokens_rev = [parts[-1]]
    i = n - 2
    while i > 0:
        token = parts[i]
        if token.lower() in NAME_PARTICLES:
            surname_tokens_rev.append(token)
            i -= 1
        else:
            break
    surname = " ".join(reversed(surname_tokens_rev))
    given = " ".join(parts[:i + 1]).strip()
    return given, surname


def parse_author(text: str) -> Author:
    """Parse one author string in any of the common reference-list shapes.

    Handles "Smith, J. A.", "Smith, John", "J. A. Smith", "John Smith" and the
    Vancouver "Smith JA".
    """
    text = text.strip().strip(",;").strip()
    if not text:
        return Author()

    if "," in text:
        family, given = [x.strip() for x in text.split(",", 1)]
        return Author(first_name=_expand_initials(given), last_name=family)

    # Vancouver: "Smith JA"
    vancouver = re.match(r"^(.+?)\s+([A-Z]{1,3})$", text)
    if vancouver:
        return Author(first_name=" ".join(vancouver.group(2)), last_name=vancouver.group(1))

    given, family = split_full_name(text)
    return Author(first_name=_expand_initials(given), last_name=family)


def parse_author_list(text: str) -> List[Author]:
    """Parse a reference-list author block into authors.

    Splits "Smith, J. A., & Doe, B." (surname-first) and
    "A. Smith, B. Doe, and C. Lee" (given-first).
    """
    text = re.sub(r"\bet al\.?", "", text)
    # Fold the final-author connector into a plain separator
    text = re.sub(r"\s*,?\s*(?:&|\band\b)\s+", ", ", text).strip(" ,")
    if not text:
        return []

    if re.match(r"^(?:[A-Z]\.\s?-?)+\s*[^\W\d_]", text):
        # Given-first: "A. Smith, B. Doe"
        return [parse_author(chunk) for chunk in text.split(",") if chunk.strip()]

    surname_first = re.findall(r"([^\W\d_][\w'\-]*(?:\s[^\W\d_][\w'\-]*)*),\s+((?:[A-Z]\.\s?-?)+)", text)
    if surname_first:
        return [
            Author(first_name=_expand_initials(given.strip()), last_name=family.strip())
            for family, given in surname_first
        ]

    return [parse_author(chunk) for chunk in text.split(",") if chunk.strip()]


def _expand_initials(given: str) -> str:
    """Turn run-together initials into spaced ones: "J.A." -> "J. A."."""
    given = given.strip()
    if re.fullmatch(r"(?:[A-Z]\.\s?-?)+", given):
        return " ".join(re.findall(r"[A-Z]\.", given))
    return given
