"""The search index as a whole."""

from __future__ import annotations

from typing import Dict, List, Set, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from .entry import Category, DocEntry
from .page import PageOutline


class SearchIndex(BaseModel):
    """Ordered, read-only collection of documentation entries."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    docs: Tuple[DocEntry, ...] = Field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.docs)

    def pages(self) -> List[str]:
        """Page names in order of first appearance."""
        seen: Dict[str, None] = {}
        for entry in self.docs:
            seen.setdefault(entry.page, None)
        return list(seen)

    def entries_for_page(self, page: str) -> List[DocEntry]:
        return [entry for entry in self.docs if entry.page == page]

    def by_category(self, *categories: Union[Category, str]) -> List[DocEntry]:
        wanted = {Category(category) for category in categories}
        return [entry for entry in self.docs if entry.category in wanted]

    def lookup(self, location: str) -> List[DocEntry]:
        return [entry for entry in self.docs if entry.location == location]

    def page_paths(self) -> Dict[str, Set[str]]:
        paths: Dict[str, Set[str]] = {}
        for entry in self.docs:
            paths.setdefault(entry.page, set()).add(entry.page_path)
        return paths

    def outline(self) -> List[PageOutline]:
        """Summarize every page: its sections and API-reference items."""
        outlines: Dict[str, PageOutline] = {}
        for entry in self.docs:
            outline = outlines.get(entry.page)
            if outline is None:
                outline = PageOutline(page=entry.page, page_path=entry.page_path)
                outlines[entry.page] = outline
            outline.entry_count += 1
            if entry.category == Category.SECTION and entry.title:
                outline.sections.append(entry.title)
            elif entry.is_api and entry.title:
                outline.api.append(entry.title)
        return list(outlines.values())
