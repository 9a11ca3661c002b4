"""FastAPI application entry point."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query

from docsearch.config import settings
from docsearch.ingestion.load_index import IndexFormatError, read_index
from docsearch.ingestion.validate_index import ValidationReport, validate_index
from docsearch.models.entry import Category
from docsearch.models.index import SearchIndex
from docsearch.models.page import PageOutline
from docsearch.models.search import SearchRequest, SearchResponse
from docsearch.retrieval.bm25_store import BM25Store
from docsearch.retrieval.searcher import IndexSearcher

logger = logging.getLogger(__name__)

app = FastAPI(
    title="docsearch",
    description="Read-only access to a documentation search index",
    version="0.1.0",
)


@lru_cache(maxsize=1)
def get_index() -> SearchIndex:
    index = read_index(settings.index_path_obj)
    logger.info("Loaded %s entries from %s", len(index), settings.index_path)
    return index


@lru_cache(maxsize=1)
def get_bm25_store() -> Optional[BM25Store]:
    try:
        return BM25Store()
    except FileNotFoundError as exc:
        logger.warning("%s Searching with the token matcher only.", exc)
        return None


@lru_cache(maxsize=4)
def build_searcher(index: SearchIndex, bm25_store: Optional[BM25Store]) -> IndexSearcher:
    return IndexSearcher(index, bm25_store)


def index_dependency() -> SearchIndex:
    try:
        return get_index()
    except (FileNotFoundError, IndexFormatError) as exc:
        logger.error("Search index unavailable: %s", exc)
        raise HTTPException(status_code=503, detail=f"Search index unavailable: {exc}") from exc


def bm25_dependency() -> Optional[BM25Store]:
    return get_bm25_store()


@app.get("/health")
def health() -> dict[str, str]:
    """Simple readiness probe."""
    return {"status": "ok"}


@app.get("/docs-index")
def docs_index(index: SearchIndex = Depends(index_dependency)) -> Dict[str, Any]:
    """Return the index in the shape the browser widget loads."""
    return index.model_dump(mode="json")


@app.get("/pages", response_model=List[PageOutline])
def pages(index: SearchIndex = Depends(index_dependency)) -> List[PageOutline]:
    return index.outline()


@app.get("/search", response_model=SearchResponse)
def search(
    q: str = Query(..., min_length=1),
    category: List[Category] = Query(default=[]),
    mode: str = Query("fused", pattern="^(fused|tokens|substring)$"),
    limit: int = Query(settings.default_top_k, ge=1, le=500),
    index: SearchIndex = Depends(index_dependency),
    bm25_store: Optional[BM25Store] = Depends(bm25_dependency),
) -> SearchResponse:
    """Search entry titles and text."""
    request = SearchRequest(query=q, categories=category, mode=mode, limit=limit)
    searcher = build_searcher(index, bm25_store)
    hits = searcher.search(
        request.query,
        top_k=request.limit,
        categories=request.categories,
        mode=request.mode,
    )
    return SearchResponse(query=request.query, total=len(hits), hits=hits)


@app.get("/validate", response_model=ValidationReport)
def validate(index: SearchIndex = Depends(index_dependency)) -> ValidationReport:
    return validate_index(index)
