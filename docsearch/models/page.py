"""Page-level summaries derived from index entries."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class PageOutline(BaseModel):
    """Section headings and API items of one documentation page."""

    page: str
    page_path: str
    sections: List[str] = Field(default_factory=list)
    api: List[str] = Field(default_factory=list)
    entry_count: int = 0
