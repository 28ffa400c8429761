"""Citation formatting in the supported reference styles.

Each style is a ``StyleSpec`` in the ``STYLES`` table: how authors are listed,
how the title is wrapped, how the full reference is assembled and how the
in-text marker looks. Adding a style means adding one entry.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from ..config import Config
from ..models import Author, Citation, FormattedCitation
from ..name_utils import initials
from ..utils.error_handling import UnsupportedStyleError

logger = logging.getLogger(__name__)

UNKNOWN_AUTHOR = "Unknown Author"


def _terminate(text: str) -> str:
    """End a sentence with a period unless it already has closing punctuation."""
    text = (text or "").strip()
    if not text or text[-1] in ".?!":
        return text
    return text + "."


def _year(citation: Citation) -> str:
    return str(citation.year) if citation.year else "n.d."


def _vol_issue(citation: Citation) -> str:
    if citation.volume and citation.issue:
        return f"{citation.volume}({citation.issue})"
    if citation.volume:
        return citation.volume
    if citation.issue:
        return f"({citation.issue})"
    return ""


def _full_given(author: Author) -> str:
    return " ".join(author.given_names)


# --- Author list renderers ---

def _surname_initials(author: Author) -> str:
    given = initials(author)
    return f"{author.last_name}, {given}" if given else author.last_name


def format_apa_authors(authors: List[Author]) -> str:
    """APA: "Doe, J., Smith, A., & Lee, K."; past 20 authors the list is elided."""
    if not authors:
        return UNKNOWN_AUTHOR
    names = [_surname_initials(a) for a in authors]
    if len(names) == 1:
        return names[0]
    if len(names) > 20:
        return ", ".join(names[:19]) + ", ... " + names[-1]
    return ", ".join(names[:-1]) + ", & " + names[-1]


def format_mla_authors(authors: List[Author]) -> str:
    """MLA: "Doe, John", "Doe, John, and Jane Smith", "Doe, John, et al."."""
    if not authors:
        return UNKNOWN_AUTHOR
    first = authors[0]
    lead = f"{first.last_name}, {_full_given(first)}" if first.given_names else first.last_name
    if len(authors) == 1:
        return lead
    if len(authors) == 2:
        second = authors[1]
        return f"{lead}, and {' '.join(_full_given(second).split() + [second.last_name])}"
    return f"{lead}, et al."


def format_chicago_authors(authors: List[Author]) -> str:
    if not authors:
        return UNKNOWN_AUTHOR
    names = [_surname_initials(a) for a in authors]
    if len(names) == 1:
        return names[0]
    return ", ".join(names[:-1]) + ", and " + names[-1]


def format_harvard_authors(authors: List[Author]) -> str:
    """Format author list in Harvard style."""
    if not authors:
        return UNKNOWN_AUTHOR
    names = [_surname_initials(a) for a in authors]
    if len(names) == 1:
        return names[0]
    return ", ".join(names[:-1]) + " and " + names[-1]


def format_vancouver_authors(authors: List[Author]) -> str:
    """Vancouver: "Doe JA, Smith B"; more than six authors become "et al"."""
    if not authors:
        return UNKNOWN_AUTHOR
    names = []
    for author in authors[:6]:
        given = initials(author, with_periods=False, separator="")
        names.append(f"{author.last_name} {given}".strip())
    text = ", ".join(names)
    if len(authors) > 6:
        text += ", et al"
    return text


def format_ieee_authors(authors: List[Author]) -> str:
    """IEEE: "J. A. Doe", "A and B", "A, B, and C"; more than six become "et al."."""
    if not authors:
        return UNKNOWN_AUTHOR

    def flip_name(author: Author) -> str:
        return f"{initials(author)} {author.last_name}".strip()

    if len(authors) > 6:
        return f"{flip_name(authors[0])} et al."
    flipped = [flip_name(a) for a in authors]
    if len(flipped) == 1:
        return flipped[0]
    if len(flipped) == 2:
        return flipped[0] + " and " + flipped[1]
    return ", ".join(flipped[:-1]) + ", and " + flipped[-1]


# --- Title wrappers ---

def _plain_title(title: str) -> str:
    return _terminate(title)


def _double_quoted_title(title: str) -> str:
    return f'"{_terminate(title)}"'


def _single_quoted_title(title: str) -> str:
    return f"'{(title or '').strip()}'"


def _comma_quoted_title(title: str) -> str:
    title = (title or "").strip()
    if title and title[-1] in "?!":
        return f'"{title}"'
    return f'"{title},"'


# --- Full references ---

def _apa_reference(citation: Citation, spec: 'StyleSpec') -> str:
    text = f"{spec.render_authors(citation.authors)} ({_year(citation)}). {spec.wrap_title(citation.title)}"
    if citation.journal:
        source = citation.journal
        vol_issue = _vol_issue(citation)
        if vol_issue:
            source += f", {vol_issue}"
        if citation.pages:
            source += f", {citation.pages}"
        text += f" {source}."
    elif citation.publisher:
        text += f" {citation.publisher}."
    if citation.doi:
        text += f" https://doi.org/{citation.doi}"
    elif citation.url:
        text += f" {citation.url}"
    return text


def _mla_reference(citation: Citation, spec: 'StyleSpec') -> str:
    text = f"{_terminate(spec.render_authors(citation.authors))} {spec.wrap_title(citation.title)}"
    segments = []
    if citation.journal:
        segments.append(citation.journal)
        if citation.volume:
            segments.append(f"vol. {citation.volume}")
        if citation.issue:
            segments.append(f"no. {citation.issue}")
    elif citation.publisher:
        segments.append(citation.publisher)
    if citation.year:
        segments.append(str(citation.year))
    if citation.pages:
        segments.append(f"pp. {citation.pages}")
    if segments:
        text += " " + ", ".join(segments) + "."
    return text


def _chicago_reference(citation: Citation, spec: 'StyleSpec') -> str:
    text = f"{spec.render_authors(citation.authors)} ({_year(citation)}). {spec.wrap_title(citation.title)}"
    if citation.journal:
        source = citation.journal
        if citation.volume:
            source += f" {citation.volume}"
        if citation.issue:
            source += f", no. {citation.issue}"
        if citation.pages:
            source += f": {citation.pages}"
        text += f" {source}."
    elif citation.publisher:
        publisher = f"{citation.location}: {citation.publisher}" if citation.location else citation.publisher
        text += f" {publisher}."
    if citation.doi:
        text += f" https://doi.org/{citation.doi}"
    elif citation.url:
        text += f" {citation.url}"
    return text


def _harvard_reference(citation: Citation, spec: 'StyleSpec') -> str:
    author_str = spec.render_authors(citation.authors)
    if citation.journal:
        result = f"{author_str} ({_year(citation)}) {spec.wrap_title(citation.title)}, {citation.journal}"
        vol_issue = _vol_issue(citation)
        if vol_issue:
            result += f", {vol_issue}"
        if citation.pages:
            result += f", pp. {citation.pages}"
        if citation.doi:
            result += f". doi:{citation.doi}"
        else:
            result += "."
        return result

    result = f"{author_str} ({_year(citation)}) {_terminate(citation.title)}"
    if citation.publisher:
        result += f" {citation.publisher}."
    if citation.url:
        result += f" Available at: {citation.url}"
        if citation.access_date:
            result += f" (Accessed: {citation.access_date})"
        result += "."
    return result


def _vancouver_reference(citation: Citation, spec: 'StyleSpec') -> str:
    text = f"{_terminate(spec.render_authors(citation.authors))} {spec.wrap_title(citation.title)}"
    if citation.journal:
        text += f" {_terminate(citation.journal)}"
        if citation.year:
            locator = str(citation.year)
            if citation.volume:
                locator += f";{citation.volume}"
            if citation.issue:
                locator += f"({citation.issue})"
            if citation.pages:
                locator += f":{citation.pages}"
            text += f" {locator}."
    elif citation.publisher:
        publisher = f"{citation.location}: {citation.publisher}" if citation.location else citation.publisher
        text += f" {publisher}"
        text += f"; {citation.year}." if citation.year else "."
    elif citation.year:
        text += f" {citation.year}."
    return text


def _ieee_reference(citation: Citation, spec: 'StyleSpec') -> str:
    author_str = spec.render_authors(citation.authors)
    segments = []
    if citation.journal:
        segments.append(citation.journal)
    elif citation.publisher:
        segments.append(citation.publisher)
    if citation.volume:
        segments.append(f"vol. {citation.volume}")
    if citation.issue:
        segments.append(f"no. {citation.issue}")
    if citation.pages:
        segments.append(f"pp. {citation.pages}")
    if citation.year:
        segments.append(str(citation.year))

    if not segments:
        return f'{author_str}, "{_terminate(citation.title)}"'
    return f"{author_str}, {spec.wrap_title(citation.title)} " + ", ".join(segments) + "."


# --- In-text markers ---

def _surnames(citation: Citation) -> List[str]:
    return [a.last_name or "Unknown" for a in citation.authors]


def _author_year_marker(conjunction: str, max_named: int) -> Callable[[Citation, Optional[int]], str]:
    """Builds "(Doe, 2023)" markers; lists longer than ``max_named`` collapse to "et al."."""
    def marker(citation: Citation, position: Optional[int] = None) -> str:
        names = _surnames(citation)
        if not names:
            label = "Unknown"
        elif len(names) == 1:
            label = names[0]
        elif len(names) > max_named:
            label = f"{names[0]} et al."
        elif len(names) == 2:
            label = f"{names[0]} {conjunction} {names[1]}"
        else:
            label = ", ".join(names[:-1]) + f", {conjunction} " + names[-1]
        return f"({label}, {_year(citation)})"
    return marker


def _mla_marker(citation: Citation, position: Optional[int] = None) -> str:
    names = _surnames(citation)
    if not names:
        return "(Unknown)"
    if len(names) == 1:
        return f"({names[0]})"
    if len(names) == 2:
        return f"({names[0]} and {names[1]})"
    return f"({names[0]} et al.)"


def _numeric_marker(citation: Citation, position: Optional[int] = None) -> str:
    return f"[{position if position is not None else 1}]"


@dataclass(frozen=True)
class StyleSpec:
    """Everything that distinguishes one reference style from another."""
    name: str
    render_authors: Callable[[List[Author]], str]
    wrap_title: Callable[[str], str]
    reference: Callable[[Citation, 'StyleSpec'], str]
    in_text: Callable[[Citation, Optional[int]], str]
    numeric: bool = False


STYLES: Dict[str, StyleSpec] = {
    Config.STYLE_APA: StyleSpec(
        name=Config.STYLE_APA,
        render_authors=format_apa_authors,
        wrap_title=_plain_title,
        reference=_apa_reference,
        in_text=_author_year_marker("&", 2),
    ),
    Config.STYLE_MLA: StyleSpec(
        name=Config.STYLE_MLA,
        render_authors=format_mla_authors,
        wrap_title=_double_quoted_title,
        reference=_mla_reference,
        in_text=_mla_marker,
    ),
    Config.STYLE_CHICAGO: StyleSpec(
        name=Config.STYLE_CHICAGO,
        render_authors=format_chicago_authors,
        wrap_title=_double_quoted_title,
        reference=_chicago_reference,
        in_text=_author_year_marker("and", 3),
    ),
    Config.STYLE_HARVARD: StyleSpec(
        name=Config.STYLE_HARVARD,
        render_authors=format_harvard_authors,
        wrap_title=_single_quoted_title,
        reference=_harvard_reference,
        in_text=_author_year_marker("and", 2),
    ),
    Config.STYLE_VANCOUVER: StyleSpec(
        name=Config.STYLE_VANCOUVER,
        render_authors=format_vancouver_authors,
        wrap_title=_plain_title,
        reference=_vancouver_reference,
        in_text=_numeric_marker,
        numeric=True,
    ),
    Config.STYLE_IEEE: StyleSpec(
        name=Config.STYLE_IEEE,
        render_authors=format_ieee_authors,
        wrap_title=_comma_quoted_title,
        reference=_ieee_reference,
        in_text=_numeric_marker,
        numeric=True,
    ),
}


def get_style(style: str) -> StyleSpec:
    """Look up a style by identifier (case-insensitive).

    Raises:
        UnsupportedStyleError: If the identifier is not a known style
    """
    key = style.strip().lower() if isinstance(style, str) else style
    spec = STYLES.get(key)
    if spec is None:
        raise UnsupportedStyleError(style)
    return spec


class CitationFormatter:
    """Format citations and references in different styles."""

    @staticmethod
    def format_citation(citation: Citation, style: str, position: Optional[int] = None) -> FormattedCitation:
        """
        Render a citation in one style.

        Args:
            citation: The citation to render
            style: One of apa, mla, chicago, harvard, vancouver, ieee
            position: 1-based bibliography position, used by numeric styles

        Raises:
            UnsupportedStyleError: For an unknown style identifier
        """
        spec = get_style(style)
        formatted = FormattedCitation(
            citation=citation,
            style=spec.name,
            formatted_text=spec.reference(citation, spec),
            in_text_citation=spec.in_text(citation, position),
        )
        logger.debug(f"Formatted citation {citation.id} as {spec.name}")
        return formatted


def format_citation(citation: Citation, style: str, position: Optional[int] = None) -> FormattedCitation:
    """Render a citation in the given style."""
    return CitationFormatter.format_citation(citation, style, position)
