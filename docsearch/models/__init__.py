"""Typed models shared across the application."""

from .entry import API_CATEGORIES, Category, DocEntry
from .index import SearchIndex
from .page import PageOutline
from .search import SearchHit, SearchRequest, SearchResponse

__all__ = [
    "API_CATEGORIES",
    "Category",
    "DocEntry",
    "PageOutline",
    "SearchHit",
    "SearchIndex",
    "SearchRequest",
    "SearchResponse",
]
