"""Searcher that fuses the token matcher and BM25 rankings with RRF."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Union

from docsearch.config import settings
from docsearch.models.entry import Category
from docsearch.models.index import SearchIndex
from docsearch.models.search import SearchHit
from docsearch.retrieval.bm25_store import BM25Store
from docsearch.retrieval.matcher import EntryMatcher

logger = logging.getLogger(__name__)

RRF_K = 50
SEARCH_MODES = ("fused", "tokens", "substring")


class IndexSearcher:
    """Combines the in-memory matcher with an optional BM25 store."""

    def __init__(
        self,
        index: SearchIndex,
        bm25_store: Optional[BM25Store] = None,
    ) -> None:
        self.index = index
        self.matcher = EntryMatcher(index)
        self.bm25_store = bm25_store

    def _rrf_merge(
        self,
        match_results: Iterable[SearchHit],
        sparse_results: Iterable[SearchHit],
    ) -> Dict[int, SearchHit]:
        fused: Dict[int, SearchHit] = {}

        def apply_rrf(candidates: Iterable[SearchHit], attr: str) -> None:
            for rank, hit in enumerate(candidates, start=1):
                existing = fused.get(hit.position, hit)
                fused[hit.position] = existing.model_copy(
                    update={
                        attr: getattr(hit, attr),
                        "fused_score": (existing.fused_score or 0.0) + 1.0 / (RRF_K + rank),
                    }
                )

        apply_rrf(match_results, "match_score")
        apply_rrf(sparse_results, "sparse_score")
        return fused

    def _current_hits(self, sparse_hits: List[SearchHit]) -> List[SearchHit]:
        """Drop BM25 hits whose position no longer holds the same entry."""
        current: List[SearchHit] = []
        stale = 0
        for hit in sparse_hits:
            if hit.position < len(self.index.docs):
                entry = self.index.docs[hit.position]
                if (entry.location, entry.title, entry.text) == (hit.location, hit.title, hit.text):
                    current.append(hit)
                    continue
            stale += 1
        if stale:
            logger.warning(
                "Dropped %s BM25 hits that do not match the loaded index; re-run index_bm25.",
                stale,
            )
        return current

    def search(
        self,
        query: str,
        top_k: Optional[int] = None,
        categories: Optional[Iterable[Union[Category, str]]] = None,
        mode: str = "fused",
    ) -> List[SearchHit]:
        if mode not in SEARCH_MODES:
            raise ValueError(f"Unknown search mode {mode!r}; expected one of {SEARCH_MODES}.")
        top_k = top_k or settings.default_top_k
        categories = list(categories or [])

        if mode != "fused":
            return self.matcher.match(query, categories=categories, mode=mode, limit=top_k)

        match_hits = self.matcher.match(query, categories=categories)
        sparse_hits: List[SearchHit] = []
        if self.bm25_store:
            sparse_hits = self._current_hits(
                self.bm25_store.search(query, top_k=top_k, categories=categories)
            )
        else:
            logger.warning("BM25 store unavailable; ranking with the token matcher only.")

        fused = self._rrf_merge(match_hits, sparse_hits)
        ranked = sorted(
            fused.values(),
            key=lambda hit: (-(hit.fused_score or 0.0), hit.position),
        )
        return ranked[:top_k]
