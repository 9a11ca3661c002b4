"""In-memory substring/token filter over entry titles and text."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from docsearch.models.entry import Category, DocEntry
from docsearch.models.index import SearchIndex
from docsearch.models.search import SearchHit
from docsearch.utils.tokenization import count_occurrences, normalize, tokenize

logger = logging.getLogger(__name__)

MATCH_MODES = ("tokens", "substring")
TITLE_WEIGHT = 2.0
TEXT_WEIGHT = 1.0


class EntryMatcher:
    """Linear scan that mirrors what the browser search widget does."""

    def __init__(self, index: SearchIndex) -> None:
        self.index = index
        self._folded: List[Tuple[str, str]] = [
            (normalize(entry.title), normalize(entry.text)) for entry in index.docs
        ]

    def _needles(self, query: str, mode: str) -> List[str]:
        if mode == "tokens":
            return tokenize(query)
        if mode == "substring":
            needle = normalize(query.strip())
            return [needle] if needle else []
        raise ValueError(f"Unknown match mode {mode!r}; expected one of {MATCH_MODES}.")

    @staticmethod
    def _score(title: str, text: str, needles: Sequence[str]) -> Optional[float]:
        score = 0.0
        for needle in needles:
            in_title = count_occurrences(title, needle)
            in_text = count_occurrences(text, needle)
            if not in_title and not in_text:
                return None
            score += TITLE_WEIGHT * in_title + TEXT_WEIGHT * in_text
        return score

    def match(
        self,
        query: str,
        categories: Optional[Iterable[Union[Category, str]]] = None,
        mode: str = "tokens",
        limit: Optional[int] = None,
    ) -> List[SearchHit]:
        needles = self._needles(query, mode)
        if not needles:
            return []
        wanted = {Category(category) for category in categories} if categories else None

        hits: List[SearchHit] = []
        for position, (entry, (title, text)) in enumerate(zip(self.index.docs, self._folded)):
            if wanted is not None and entry.category not in wanted:
                continue
            score = self._score(title, text, needles)
            if score is None:
                continue
            hits.append(SearchHit.from_entry(entry, position, match_score=score))

        hits.sort(key=lambda hit: (-(hit.match_score or 0.0), hit.position))
        logger.debug("Matcher found %s hits for %r", len(hits), query)
        return hits[:limit] if limit is not None else hits


def filter_entries(index: SearchIndex, query: str, mode: str = "tokens") -> List[DocEntry]:
    """Plain entries matching a query, in document order."""
    hits = EntryMatcher(index).match(query, mode=mode)
    return [index.docs[hit.position] for hit in sorted(hits, key=lambda hit: hit.position)]
