"""Build a Tantivy BM25 index over the search index entries."""

from __future__ import annotations

import logging
import shutil
import sys
from pathlib import Path
from typing import Optional

import tantivy

from docsearch.config import settings
from docsearch.ingestion.load_index import IndexFormatError, read_index
from docsearch.models.entry import DocEntry
from docsearch.models.index import SearchIndex

logger = logging.getLogger(__name__)


def build_schema() -> tantivy.Schema:
    builder = tantivy.SchemaBuilder()
    builder.add_text_field("location", stored=True, tokenizer_name="raw")
    builder.add_text_field("page", stored=True)
    builder.add_text_field("title", stored=True)
    builder.add_text_field("text", stored=True)
    builder.add_text_field("category", stored=True, tokenizer_name="raw")
    builder.add_integer_field("position", stored=True, indexed=True)
    return builder.build()


def prepare_index(schema: tantivy.Schema, index_dir: Optional[Path] = None) -> tantivy.Index:
    if index_dir is None:
        return tantivy.Index(schema)
    if index_dir.exists():
        shutil.rmtree(index_dir)
    index_dir.mkdir(parents=True, exist_ok=True)
    return tantivy.Index(schema, path=str(index_dir), reuse=False)


def add_entry(writer: tantivy.IndexWriter, entry: DocEntry, position: int) -> None:
    writer.add_document(
        tantivy.Document(
            location=entry.location,
            page=entry.page,
            title=entry.title,
            text=entry.text,
            category=entry.category.value,
            position=position,
        )
    )


def build_bm25_index(index: SearchIndex, index_dir: Optional[Path] = None) -> tantivy.Index:
    """Index every entry; an in-memory index is built when no directory is given."""
    bm25 = prepare_index(build_schema(), index_dir)
    writer = bm25.writer()
    for position, entry in enumerate(index.docs):
        add_entry(writer, entry, position)
    writer.commit()
    writer.wait_merging_threads()
    bm25.reload()
    return bm25


def main() -> int:
    logging.basicConfig(level=settings.log_level)
    try:
        index = read_index(settings.index_path_obj)
    except (FileNotFoundError, IndexFormatError) as exc:
        logger.error("Unable to load search index: %s", exc)
        return 1
    build_bm25_index(index, settings.bm25_index_path_obj)
    logger.info("Indexed %s entries into %s", len(index), settings.bm25_index_dir)
    return 0


if __name__ == "__main__":
    sys.exit(main())
