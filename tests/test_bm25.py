"""Tests for the Tantivy BM25 index and store."""

from pathlib import Path

import pytest

from docsearch.ingestion.index_bm25 import build_bm25_index
from docsearch.models import Category, SearchIndex
from docsearch.retrieval.bm25_store import BM25Store


@pytest.fixture
def bm25_store(sample_index: SearchIndex) -> BM25Store:
    return BM25Store(build_bm25_index(sample_index))


def test_search_returns_stored_entry(bm25_store: BM25Store, sample_index: SearchIndex) -> None:
    hits = bm25_store.search("istrait")
    assert hits[0].position == 7
    assert hits[0].location == "reference/#BinaryTraits.istrait"
    assert hits[0].category is Category.FUNCTION
    assert hits[0].text == sample_index.docs[7].text
    assert hits[0].sparse_score > 0


def test_empty_fields_round_trip(bm25_store: BM25Store) -> None:
    hits = bm25_store.search("defining")
    assert [hit.position for hit in hits] == [0]
    assert hits[0].text == ""


def test_searches_title_and_text(bm25_store: BM25Store) -> None:
    positions = {hit.position for hit in bm25_store.search("macros")}
    assert positions == {4, 5}


def test_category_filter(bm25_store: BM25Store) -> None:
    hits = bm25_store.search("trait", categories=["macro"])
    assert [hit.position for hit in hits] == [6]


def test_top_k(bm25_store: BM25Store) -> None:
    assert len(bm25_store.search("trait", top_k=2)) == 2


def test_blank_query(bm25_store: BM25Store) -> None:
    assert bm25_store.search("  ") == []


def test_lenient_parse_of_odd_query(bm25_store: BM25Store) -> None:
    hits = bm25_store.search("@trait AND")
    assert hits


def test_missing_directory(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        BM25Store(tmp_path / "missing")


def test_on_disk_index_reopens(sample_index: SearchIndex, tmp_path: Path) -> None:
    index_dir = tmp_path / "bm25"
    build_bm25_index(sample_index, index_dir)
    store = BM25Store(index_dir)
    assert [hit.position for hit in store.search("canfly")] == [10]
