"""Pytest configuration and fixtures."""
import os
import sys
from pathlib import Path
from typing import Generator

import pytest
from unittest.mock import MagicMock, patch

# Make the src/ package importable without installation
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from manuscript_refs.models import Author, Citation  # noqa: E402


@pytest.fixture
def doe_citation() -> Citation:
    """A complete single-author journal citation."""
    return Citation(
        id="doe-2023",
        type='journal',
        title="Climate Adaptation in Coastal Cities",
        authors=[Author(first_name="John", last_name="Doe")],
        year=2023,
        journal="Nature Climate Change",
        volume="13",
        issue="4",
        pages="123-130",
        doi="10.1038/s41558-023-01234-5",
    )


@pytest.fixture
def smith_citation() -> Citation:
    """A two-author journal citation."""
    return Citation(
        id="smith-2021",
        type='journal',
        title="Urban Heat Islands",
        authors=[
            Author(first_name="Alice", last_name="Smith"),
            Author(first_name="Bob", last_name="Jones"),
        ],
        year=2021,
        journal="Science",
        volume="371",
        pages="45-50",
        doi="10.1126/science.abc1234",
    )


@pytest.fixture
def mock_requests_get() -> Generator[MagicMock, None, None]:
    """Mock for requests.get."""
    with patch('requests.get') as mock_get:
        yield mock_get


@pytest.fixture(autouse=True)
def mock_environment_vars() -> None:
    """Set up test environment variables."""
    os.environ.update({
        "CROSSREF_MAILTO": "test@example.com",
        "LOG_LEVEL": "WARNING",
    })
