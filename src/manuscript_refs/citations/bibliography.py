"""Bibliography generation and export (BibTeX, Word)."""
import logging
import os
from datetime import datetime
from typing import List, Optional

from docx import Document

from ..models import BibliographyEntry, Citation
from ..name_utils import normalize_for_comparison
from .formatter import format_citation, get_style

logger = logging.getLogger(__name__)


def sort_for_bibliography(citations: List[Citation]) -> List[Citation]:
    """
    Alphabetical by the first author's surname, accent- and case-insensitive.

    The sort is stable, so citations with equal keys keep their input order.
    Citations without authors use an empty key and come first.
    """
    def sort_key(citation: Citation) -> str:
        return normalize_for_comparison(citation.first_author_last_name)
    return sorted(citations, key=sort_key)


class BibliographyBuilder:
    """Builds the sorted, styled reference list for a manuscript."""

    def generate_bibliography(self, citations: List[Citation], style: str) -> List[BibliographyEntry]:
        """
        Render every citation, in bibliography order.

        Numeric styles (vancouver, ieee) number entries by their position in
        the sorted list. Every input citation yields exactly one entry.

        Raises:
            UnsupportedStyleError: For an unknown style identifier
        """
        spec = get_style(style)
        entries = []
        for idx, citation in enumerate(sort_for_bibliography(citations), start=1):
            formatted = format_citation(citation, spec.name, position=idx if spec.numeric else None)
            entries.append(BibliographyEntry(
                citation=citation,
                formatted_text=formatted.formatted_text,
                in_text_citation=formatted.in_text_citation,
                style=spec.name,
            ))
        logger.info(f"Generated {spec.name} bibliography with {len(entries)} entries")
        return entries


def generate_bibliography(citations: List[Citation], style: str) -> List[BibliographyEntry]:
    """Sorted, styled bibliography entries for ``citations``."""
    return BibliographyBuilder().generate_bibliography(citations, style)


def _bibtex_type(citation: Citation) -> str:
    if citation.type == 'book':
        return 'book'
    if citation.type == 'conference':
        return 'inproceedings'
    if citation.type == 'website':
        return 'misc'
    return 'article'


def export_bibtex(citations: List[Citation]) -> str:
    """
    Export citations in BibTeX format.

    Args:
        citations: Citations to export

    Returns:
        str: Citations formatted in BibTeX
    """
    bibtex_entries = []
    used_keys = set()

    for citation in citations:
        # Generate a unique key for the entry
        first_author = citation.first_author_last_name
        year = citation.year or 'nd'
        base_key = f"{first_author}{year}".lower().replace(' ', '') or 'ref'
        entry_key = base_key
        suffix = ord('a')
        while entry_key in used_keys:
            entry_key = f"{base_key}{chr(suffix)}"
            suffix += 1
        used_keys.add(entry_key)

        entry = [f"@{_bibtex_type(citation)}{{{entry_key},"]

        if citation.title:
            entry.append(f'    title = {{{citation.title}}},')
        if citation.authors:
            authors = ' and '.join(str(a) for a in citation.authors)
            entry.append(f'    author = {{{authors}}},')
        if citation.year:
            entry.append(f'    year = {{{citation.year}}},')
        if citation.journal:
            entry.append(f'    journal = {{{citation.journal}}},')
        if citation.volume:
            entry.append(f'    volume = {{{citation.volume}}},')
        if citation.issue:
            entry.append(f'    number = {{{citation.issue}}},')
        if citation.pages:
            entry.append(f'    pages = {{{citation.pages}}},')
        if citation.doi:
            entry.append(f'    doi = {{{citation.doi}}},')

        if citation.url:
            entry.append(f'    url = {{{citation.url}}},')
        elif citation.doi:
            entry.append(f'    url = {{https://doi.org/{citation.doi}}},')

        if citation.publisher:
            entry.append(f'    publisher = {{{citation.publisher}}},')
        if citation.isbn:
            entry.append(f'    isbn = {{{citation.isbn}}},')

        # Remove trailing comma from last field
        if entry[-1].endswith(','):
            entry[-1] = entry[-1][:-1]

        entry.append('}')
        bibtex_entries.append('\n'.join(entry))

    return '\n\n'.join(bibtex_entries)


def save_bibliography_to_word(
    entries: List[BibliographyEntry],
    folder: str,
    filename: str,
    style: Optional[str] = None,
) -> str:
    """Write bibliography entries to a .docx file and return its path."""
    os.makedirs(folder, exist_ok=True)
    style_name = style or (entries[0].style if entries else "")
    doc = Document()
    doc.add_heading("References", level=1)
    doc.add_paragraph(
        f"Generated {datetime.now():%Y-%m-%d %H:%M}. "
        f"Style: {style_name.upper()}. "
        "Some fields (publisher, DOI, year) may require manual checking."
    )
    doc.add_paragraph("")
    for entry in entries:
        doc.add_paragraph(entry.formatted_text)
    path = os.path.join(folder, filename)
    doc.save(path)
    logger.info(f"Saved {len(entries)} references to {path}")
    return path
