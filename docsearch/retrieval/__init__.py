"""Search stack utilities."""

from .bm25_store import BM25Store
from .matcher import EntryMatcher, filter_entries
from .searcher import IndexSearcher

__all__ = ["BM25Store", "EntryMatcher", "IndexSearcher", "filter_entries"]
