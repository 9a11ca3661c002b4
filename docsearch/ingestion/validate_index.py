"""Structural integrity checks for a loaded search index."""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, Dict, List, Optional, Set

from pydantic import BaseModel, Field, computed_field

from docsearch.config import settings
from docsearch.ingestion.load_index import (
    FORMATS,
    IndexFormatError,
    dump_index,
    parse_index_text,
    parse_payload,
    strip_js_wrapper,
)
from docsearch.models.entry import Category
from docsearch.models.index import SearchIndex

logger = logging.getLogger(__name__)

KNOWN_CATEGORIES = frozenset(category.value for category in Category)


class Issue(BaseModel):
    """One problem found in the index."""

    code: str
    severity: str = "error"
    position: Optional[int] = None
    message: str


class ValidationReport(BaseModel):
    """Outcome of validating an index."""

    entry_count: int = 0
    page_count: int = 0
    issues: List[Issue] = Field(default_factory=list)

    @property
    def errors(self) -> List[Issue]:
        return [issue for issue in self.issues if issue.severity == "error"]

    @property
    def warnings(self) -> List[Issue]:
        return [issue for issue in self.issues if issue.severity == "warning"]

    @computed_field
    @property
    def ok(self) -> bool:
        return not self.errors


def validate_raw(payload: Any) -> List[Issue]:
    """Check categories on decoded JSON before it is turned into models."""
    docs = payload.get("docs") if isinstance(payload, dict) else None
    if not isinstance(docs, list):
        return []
    issues: List[Issue] = []
    for position, raw in enumerate(docs):
        if not isinstance(raw, dict):
            issues.append(
                Issue(
                    code="malformed",
                    position=position,
                    message=f"Entry must be a mapping, got {type(raw).__name__}.",
                )
            )
            continue
        category = raw.get("category")
        if category not in KNOWN_CATEGORIES:
            issues.append(
                Issue(
                    code="unknown-category",
                    position=position,
                    message=f"Category {category!r} is not one of {sorted(KNOWN_CATEGORIES)}.",
                )
            )
    return issues


def check_page_paths(index: SearchIndex) -> List[Issue]:
    issues: List[Issue] = []
    path_by_page: Dict[str, str] = {}
    page_by_path: Dict[str, str] = {}
    for position, entry in enumerate(index.docs):
        expected = path_by_page.setdefault(entry.page, entry.page_path)
        owner = page_by_path.setdefault(entry.page_path, entry.page)
        if entry.page_path != expected:
            issues.append(
                Issue(
                    code="page-path-mismatch",
                    position=position,
                    message=(
                        f"Location {entry.location!r} does not start with page path "
                        f"{expected!r} used by page {entry.page!r}."
                    ),
                )
            )
        elif owner != entry.page:
            issues.append(
                Issue(
                    code="page-path-mismatch",
                    position=position,
                    message=(
                        f"Page path {entry.page_path!r} of page {entry.page!r} "
                        f"already belongs to page {owner!r}."
                    ),
                )
            )
    return issues


def check_content(index: SearchIndex) -> List[Issue]:
    return [
        Issue(
            code="empty-entry",
            position=position,
            message=f"Entry at {entry.location!r} has neither a title nor text.",
        )
        for position, entry in enumerate(index.docs)
        if not entry.has_content and entry.category != Category.PAGE
    ]


def check_page_order(index: SearchIndex) -> List[Issue]:
    issues: List[Issue] = []
    closed: Set[str] = set()
    reported: Set[str] = set()
    current: Optional[str] = None
    for position, entry in enumerate(index.docs):
        if entry.page == current:
            continue
        if current is not None:
            closed.add(current)
        current = entry.page
        if current in closed and current not in reported:
            reported.add(current)
            issues.append(
                Issue(
                    code="page-not-contiguous",
                    severity="warning",
                    position=position,
                    message=f"Entries of page {current!r} are split into separate runs.",
                )
            )
    return issues


def check_round_trip(index: SearchIndex) -> List[Issue]:
    issues: List[Issue] = []
    for fmt in FORMATS:
        try:
            restored = parse_index_text(dump_index(index, fmt))
        except IndexFormatError as exc:
            issues.append(
                Issue(code="round-trip", message=f"Re-parsing {fmt} output failed: {exc}")
            )
            continue
        if restored.docs != index.docs:
            issues.append(
                Issue(
                    code="round-trip",
                    message=f"Re-parsing {fmt} output changed the sequence of entries.",
                )
            )
    return issues


def validate_index(index: SearchIndex) -> ValidationReport:
    """Run every integrity check and collect the issues."""
    report = ValidationReport(entry_count=len(index), page_count=len(index.pages()))
    if not index.docs:
        report.issues.append(
            Issue(code="empty-index", severity="warning", message="The index has no entries.")
        )
        return report
    report.issues.extend(check_page_paths(index))
    report.issues.extend(check_content(index))
    report.issues.extend(check_page_order(index))
    report.issues.extend(check_round_trip(index))
    return report


def validate_text(text: str) -> ValidationReport:
    """Validate index source text, reporting unknown categories before parsing."""
    try:
        payload = json.loads(strip_js_wrapper(text))
    except json.JSONDecodeError as exc:
        return ValidationReport(
            issues=[Issue(code="malformed", message=f"Malformed search index JSON: {exc}")]
        )
    raw_issues = validate_raw(payload)
    if raw_issues:
        return ValidationReport(
            entry_count=len(payload["docs"]),
            issues=raw_issues,
        )
    try:
        index = parse_payload(payload)
    except IndexFormatError as exc:
        return ValidationReport(issues=[Issue(code="malformed", message=str(exc))])
    return validate_index(index)


def main() -> int:
    logging.basicConfig(level=settings.log_level)
    path = settings.index_path_obj
    if not path.exists():
        logger.error("Search index %s does not exist.", path)
        return 1
    report = validate_text(path.read_text(encoding="utf-8-sig"))
    for issue in report.issues:
        log = logger.error if issue.severity == "error" else logger.warning
        log("[%s] entry %s: %s", issue.code, issue.position, issue.message)
    logger.info(
        "Checked %s entries across %s pages: %s errors, %s warnings",
        report.entry_count,
        report.page_count,
        len(report.errors),
        len(report.warnings),
    )
    return 0 if report.ok else 1


if __name__ == "__main__":
    sys.exit(main())
