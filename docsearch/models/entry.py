"""Entry-level models for the documentation search index."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class Category(str, Enum):
    """Kind of documentation unit an entry represents."""

    PAGE = "page"
    SECTION = "section"
    FUNCTION = "function"
    MACRO = "macro"
    TYPE = "type"
    CONSTANT = "constant"


API_CATEGORIES = frozenset(
    {Category.FUNCTION, Category.MACRO, Category.TYPE, Category.CONSTANT}
)


class DocEntry(BaseModel):
    """A single page fragment in the search index."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    location: str
    page: str
    title: str
    text: str
    category: Category

    @property
    def page_path(self) -> str:
        return self.location.split("#", 1)[0]

    @property
    def anchor(self) -> str:
        _, sep, anchor = self.location.partition("#")
        return anchor if sep else ""

    @property
    def is_api(self) -> bool:
        return self.category in API_CATEGORIES

    @property
    def has_content(self) -> bool:
        return bool(self.title or self.text)
