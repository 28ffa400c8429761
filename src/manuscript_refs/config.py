"""Configuration loader with environment variable support."""
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Application configuration."""

    # API Configuration
    CROSSREF_MAILTO: str = os.getenv("CROSSREF_MAILTO", "your.email@example.com")
    CROSSREF_API_URL: str = os.getenv("CROSSREF_API_URL", "https://api.crossref.org/works")
    SEMANTIC_SCHOLAR_API_URL: str = os.getenv(
        "SEMANTIC_SCHOLAR_API_URL",
        "https://api.semanticscholar.org/graph/v1/paper/search",
    )
    REQUEST_TIMEOUT: float = _env_float("REQUEST_TIMEOUT", 10.0)

    # Collaborator bounds (seconds)
    COLLABORATOR_TIMEOUT: float = _env_float("COLLABORATOR_TIMEOUT", 5.0)
    COMPARISON_TIMEOUT: float = _env_float("COMPARISON_TIMEOUT", 10.0)

    # Similarity
    SIMILARITY_FLOOR: float = _env_float("SIMILARITY_FLOOR", 0.3)
    NGRAM_SIZE: int = _env_int("NGRAM_SIZE", 5)
    VERBATIM_MIN_WORDS: int = _env_int("VERBATIM_MIN_WORDS", 8)

    # Candidate sources
    INTERNAL_CORPUS_LIMIT: int = _env_int("INTERNAL_CORPUS_LIMIT", 100)
    EXTERNAL_QUERY_MAX_CHARS: int = _env_int("EXTERNAL_QUERY_MAX_CHARS", 200)
    EXTERNAL_RESULT_ROWS: int = _env_int("EXTERNAL_RESULT_ROWS", 5)

    # Citation Styles
    STYLE_APA: str = "apa"
    STYLE_MLA: str = "mla"
    STYLE_CHICAGO: str = "chicago"
    STYLE_HARVARD: str = "harvard"
    STYLE_VANCOUVER: str = "vancouver"
    STYLE_IEEE: str = "ieee"
    DEFAULT_STYLE: str = os.getenv("DEFAULT_STYLE", STYLE_APA)

    # Validation
    VALIDATE_URLS: bool = _env_bool("VALIDATE_URLS", False)

    # Persistence
    REPORT_DIR: str = os.getenv("REPORT_DIR", "")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_DIR: str = os.getenv("LOG_DIR", "")

    @classmethod
    def get_report_dir(cls) -> Optional[Path]:
        """Directory for persisted plagiarism reports, or None for in-memory storage."""
        return Path(cls.REPORT_DIR) if cls.REPORT_DIR else None
