"""Shared fixtures: a small Documenter search index."""

from pathlib import Path

import pytest

from docsearch.ingestion.load_index import parse_index_text
from docsearch.models.index import SearchIndex

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def index_path() -> Path:
    return FIXTURES / "search_index.js"


@pytest.fixture
def index_text(index_path: Path) -> str:
    return index_path.read_text(encoding="utf-8")


@pytest.fixture
def sample_index(index_text: str) -> SearchIndex:
    return parse_index_text(index_text)


def make_entry(location, page, title="", text="", category="page"):
    return {
        "location": location,
        "page": page,
        "title": title,
        "text": text,
        "category": category,
    }
