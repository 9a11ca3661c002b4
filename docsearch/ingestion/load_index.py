"""Load and serialize Documenter-style search indexes."""

from __future__ import annotations

import json
import logging
import re
import sys
from pathlib import Path
from typing import Any, List, Optional

from pydantic import ValidationError

from docsearch.config import settings
from docsearch.models.entry import DocEntry
from docsearch.models.index import SearchIndex

logger = logging.getLogger(__name__)

JS_ASSIGNMENT_PATTERN = re.compile(
    r"^\s*(?:var|let|const)\s+(?P<name>[A-Za-z_$][\w$]*)\s*=\s*"
)
FORMATS = ("json", "js")


class IndexFormatError(ValueError):
    """Raised when a search index does not have the expected shape."""


def detect_format(text: str) -> str:
    return "js" if JS_ASSIGNMENT_PATTERN.match(text) else "json"


def strip_js_wrapper(text: str) -> str:
    """Return the JSON literal of a `var name = {...};` assignment."""
    match = JS_ASSIGNMENT_PATTERN.match(text)
    if not match:
        return text
    body = text[match.end():].rstrip()
    if body.endswith(";"):
        body = body[:-1]
    return body


def parse_payload(payload: Any) -> SearchIndex:
    """Validate decoded JSON and build the index from it."""
    if not isinstance(payload, dict) or "docs" not in payload:
        raise IndexFormatError("Search index must be a mapping with a 'docs' key.")
    extra = sorted(set(payload) - {"docs"})
    if extra:
        raise IndexFormatError(f"Unexpected top-level keys in search index: {extra}")
    docs = payload["docs"]
    if not isinstance(docs, list):
        raise IndexFormatError(
            f"'docs' must be a sequence of entries, got {type(docs).__name__}."
        )

    entries: List[DocEntry] = []
    for position, raw in enumerate(docs):
        try:
            entries.append(DocEntry.model_validate(raw))
        except ValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in error['loc']) or 'entry'}: {error['msg']}"
                for error in exc.errors()
            )
            raise IndexFormatError(
                f"Invalid entry at position {position}: {problems}"
            ) from exc
    return SearchIndex(docs=entries)


def parse_index_text(text: str) -> SearchIndex:
    body = strip_js_wrapper(text)
    try:
        payload = json.loads(body)
    except json.JSONDecodeError as exc:
        raise IndexFormatError(f"Malformed search index JSON: {exc}") from exc
    return parse_payload(payload)


def read_index(path: Path) -> SearchIndex:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Search index {path} does not exist.")
    index = parse_index_text(path.read_text(encoding="utf-8-sig"))
    logger.debug("Loaded %s entries from %s", len(index), path)
    return index


def _entry_json(entry: DocEntry) -> str:
    return json.dumps(
        entry.model_dump(mode="json"), ensure_ascii=False, separators=(",", ":")
    )


def dump_index(index: SearchIndex, fmt: str = "json", variable: Optional[str] = None) -> str:
    """Serialize compactly; the js form matches the Documenter file layout."""
    if fmt not in FORMATS:
        raise ValueError(f"Unknown index format {fmt!r}; expected one of {FORMATS}.")
    entries = ",".join(_entry_json(entry) for entry in index.docs)
    if fmt == "js":
        name = variable or settings.js_variable_name
        return f'var {name} = {{"docs":\n[{entries}]\n}}\n'
    return f'{{"docs":[{entries}]}}\n'


def write_index(index: SearchIndex, path: Path, fmt: Optional[str] = None) -> Path:
    path = Path(path)
    if fmt is None:
        fmt = "js" if path.suffix == ".js" else "json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_index(index, fmt), encoding="utf-8")
    return path


def main() -> int:
    logging.basicConfig(level=settings.log_level)
    source = settings.index_path_obj
    try:
        index = read_index(source)
    except (FileNotFoundError, IndexFormatError) as exc:
        logger.error("Unable to load search index: %s", exc)
        return 1
    output = write_index(index, settings.json_output_path_obj)
    logger.info("Wrote %s entries from %s to %s", len(index), source, output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
