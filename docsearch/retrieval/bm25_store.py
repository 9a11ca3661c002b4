"""Tantivy-based sparse retriever."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

import tantivy

from docsearch.config import settings
from docsearch.ingestion.index_bm25 import build_schema
from docsearch.models.entry import Category
from docsearch.models.search import SearchHit

logger = logging.getLogger(__name__)

DEFAULT_FIELDS = ["title", "page", "text"]


class BM25Store:
    """Wrapper around a Tantivy index."""

    def __init__(self, index: Union[tantivy.Index, Path, str, None] = None):
        self.schema = build_schema()
        if isinstance(index, tantivy.Index):
            self.index = index
        else:
            index_dir = Path(index or settings.bm25_index_dir)
            if not index_dir.exists():
                raise FileNotFoundError(
                    f"BM25 index directory {index_dir} does not exist. Run index_bm25 first."
                )
            self.index = tantivy.Index(self.schema, path=str(index_dir), reuse=True)
        self.searcher = self.index.searcher()

    def _parse_query(self, query_text: str) -> tantivy.Query:
        query, errors = self.index.parse_query_lenient(
            query_text,
            default_field_names=DEFAULT_FIELDS,
            field_boosts={
                "title": settings.title_boost,
                "page": settings.page_boost,
                "text": settings.text_boost,
            },
        )
        if errors:
            logger.debug("Tantivy lenient parse warnings: %s", errors)
        return query

    def _category_filter(self, categories: Iterable[Union[Category, str]]) -> tantivy.Query:
        return tantivy.Query.boolean_query(
            [
                (
                    tantivy.Occur.Should,
                    tantivy.Query.term_query(self.schema, "category", Category(category).value),
                )
                for category in categories
            ]
        )

    def search(
        self,
        query_text: str,
        top_k: int = 32,
        categories: Optional[Iterable[Union[Category, str]]] = None,
    ) -> List[SearchHit]:
        if not query_text.strip():
            return []
        query = self._parse_query(query_text)
        categories = list(categories or [])
        if categories:
            query = tantivy.Query.boolean_query(
                [
                    (tantivy.Occur.Must, query),
                    (tantivy.Occur.Must, self._category_filter(categories)),
                ]
            )
        result = self.searcher.search(query, limit=top_k)
        retrieved: List[SearchHit] = []
        for score, doc_addr in result.hits:
            stored = self.searcher.doc(doc_addr)
            retrieved.append(
                SearchHit(
                    location=stored.get_first("location") or "",
                    page=stored.get_first("page") or "",
                    title=stored.get_first("title") or "",
                    text=stored.get_first("text") or "",
                    category=stored.get_first("category"),
                    position=int(stored.get_first("position")),
                    sparse_score=float(score),
                )
            )
        return retrieved
