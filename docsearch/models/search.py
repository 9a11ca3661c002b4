"""Search request/response models."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from .entry import Category, DocEntry


class SearchHit(DocEntry):
    """Entry extended with its position in the index and search scores."""

    position: int
    match_score: Optional[float] = None
    sparse_score: Optional[float] = None
    fused_score: Optional[float] = None

    @classmethod
    def from_entry(cls, entry: DocEntry, position: int, **scores: float) -> "SearchHit":
        return cls(position=position, **entry.model_dump(), **scores)


class SearchRequest(BaseModel):
    """Payload describing a search job."""

    query: str
    categories: List[Category] = Field(default_factory=list)
    mode: str = "fused"
    limit: int = 20


class SearchResponse(BaseModel):
    """Response returned by the search endpoint."""

    query: str
    total: int
    hits: List[SearchHit]
