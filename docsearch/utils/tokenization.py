"""Query tokenization shared by the in-memory matcher."""

from __future__ import annotations

import re
from typing import List

TOKEN_PATTERN = re.compile(r"[\w@.!]+")


def normalize(text: str) -> str:
    return text.casefold()


def tokenize(text: str) -> List[str]:
    """Split a query into case-folded word tokens, keeping macro sigils."""
    tokens = []
    for token in TOKEN_PATTERN.findall(normalize(text)):
        token = token.strip(".")
        if token:
            tokens.append(token)
    return tokens


def count_occurrences(haystack: str, needle: str) -> int:
    if not needle:
        return 0
    return haystack.count(needle)
