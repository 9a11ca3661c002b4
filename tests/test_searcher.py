"""Tests for the fused searcher."""

import logging

import pytest

from docsearch.ingestion.index_bm25 import build_bm25_index
from docsearch.models import SearchIndex
from docsearch.retrieval.bm25_store import BM25Store
from docsearch.retrieval.searcher import RRF_K, IndexSearcher


@pytest.fixture
def searcher(sample_index: SearchIndex) -> IndexSearcher:
    return IndexSearcher(sample_index, BM25Store(build_bm25_index(sample_index)))


def test_fused_hit_carries_both_scores(searcher: IndexSearcher) -> None:
    hits = searcher.search("istrait")
    top = hits[0]
    assert top.position == 7
    assert top.match_score is not None
    assert top.sparse_score is not None
    assert top.fused_score == pytest.approx(2.0 / (RRF_K + 1))


def test_fused_results_have_unique_positions(searcher: IndexSearcher) -> None:
    hits = searcher.search("trait")
    positions = [hit.position for hit in hits]
    assert len(positions) == len(set(positions))
    scores = [hit.fused_score for hit in hits]
    assert scores == sorted(scores, reverse=True)


def test_category_filter_applies_to_both_rankings(searcher: IndexSearcher) -> None:
    hits = searcher.search("trait", categories=["macro"])
    assert [hit.position for hit in hits] == [6]


def test_top_k(searcher: IndexSearcher) -> None:
    assert len(searcher.search("trait", top_k=3)) == 3


def test_matcher_modes_skip_bm25(searcher: IndexSearcher) -> None:
    hits = searcher.search("trait type", mode="substring")
    assert [hit.position for hit in hits] == [7, 6]
    assert all(hit.sparse_score is None for hit in hits)


def test_unknown_mode(searcher: IndexSearcher) -> None:
    with pytest.raises(ValueError):
        searcher.search("trait", mode="semantic")


def test_without_bm25_falls_back_to_matcher(sample_index: SearchIndex, caplog) -> None:
    searcher = IndexSearcher(sample_index)
    with caplog.at_level(logging.WARNING):
        hits = searcher.search("canfly")
    assert [hit.position for hit in hits] == [10]
    assert hits[0].fused_score == pytest.approx(1.0 / (RRF_K + 1))
    assert "BM25 store unavailable" in caplog.text


def test_out_of_date_bm25_hits_are_dropped(caplog) -> None:
    zebra = {"location": "a/#", "page": "A", "title": "A", "text": "zebra", "category": "page"}
    yak = {"location": "b/#", "page": "B", "title": "B", "text": "yak", "category": "page"}
    store = BM25Store(build_bm25_index(SearchIndex(docs=[zebra, yak])))
    searcher = IndexSearcher(SearchIndex(docs=[yak]), store)

    with caplog.at_level(logging.WARNING):
        assert searcher.search("zebra") == []
        hits = searcher.search("yak")
    assert [(hit.position, hit.location) for hit in hits] == [(0, "b/#")]
    assert hits[0].sparse_score is None
    assert "re-run index_bm25" in caplog.text
