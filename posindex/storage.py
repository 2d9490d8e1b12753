"""
Whole-file persistence for a positional index.

File format (JSON, one file per index):
    {"format": "posindex", "version": 1,
     "terms": {term: [[doc_id, [pos, ...]], ...]}}

Terms are written sorted and postings sorted by doc_id, so saving the same
index twice produces identical bytes.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from .posting import PositionalIndex
from .tokenizer import tokenize

logger = logging.getLogger(__name__)

FORMAT_NAME = "posindex"
FORMAT_VERSION = 1


class IndexFormatError(ValueError):
    """Raised when a file is not a valid serialized positional index."""


def save_index(index: PositionalIndex, path: str | Path) -> None:
    """
    Serialize the index to JSON on disk, replacing any existing file.
    Written to a temporary file first so a failed save leaves the old file intact.
    """
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "format": FORMAT_NAME,
        "version": FORMAT_VERSION,
        "terms": index.to_dict(),
    }
    tmp_path = p.with_name(p.name + ".tmp")
    try:
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False)
        os.replace(tmp_path, p)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    logger.debug(f"Saved index with {len(index)} terms to {p}")


def load_index(path: str | Path) -> PositionalIndex:
    """Load an index saved by save_index()."""
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Index file not found: {p}")
    if not p.is_file():
        raise IndexFormatError(f"Index path {p} is not a file")

    try:
        data = json.loads(p.read_bytes().decode("utf-8"))
    except (ValueError, RecursionError) as e:
        raise IndexFormatError(f"Index file {p} is not valid JSON: {e}") from e

    index = _index_from_data(data, p)
    logger.debug(f"Loaded index with {len(index)} terms from {p}")
    return index


def load_or_create_index(path: str | Path) -> PositionalIndex:
    """Load the index at path, or return an empty one if the file does not exist."""
    if not Path(path).exists():
        logger.info(f"No index at {path}, starting from an empty index")
        return PositionalIndex()
    return load_index(path)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _index_from_data(data, path: Path) -> PositionalIndex:
    if not isinstance(data, dict) or data.get("format") != FORMAT_NAME:
        raise IndexFormatError(f"{path} is not a {FORMAT_NAME} index file")
    version = data.get("version")
    if version != FORMAT_VERSION:
        raise IndexFormatError(f"Unsupported index version {version!r} in {path}")
    terms = data.get("terms")
    if not isinstance(terms, dict):
        raise IndexFormatError(f"Invalid index format in {path}: 'terms' must be an object")

    index = PositionalIndex()
    for term, postings in terms.items():
        if tokenize(term) != [term]:
            raise IndexFormatError(f"Invalid term {term!r} in {path}")
        if not isinstance(postings, list) or not postings:
            raise IndexFormatError(f"Invalid posting list for term {term!r} in {path}")
        seen: set[int] = set()
        for entry in postings:
            if not isinstance(entry, list) or len(entry) != 2:
                raise IndexFormatError(f"Invalid posting for term {term!r} in {path}")
            doc_id, positions = entry
            if not _is_int(doc_id) or doc_id < 0 or doc_id in seen:
                raise IndexFormatError(
                    f"Invalid document id {doc_id!r} for term {term!r} in {path}"
                )
            seen.add(doc_id)
            if (
                not isinstance(positions, list)
                or not positions
                or not all(_is_int(pos) for pos in positions)
                or positions[0] < 0
                or any(a >= b for a, b in zip(positions, positions[1:]))
            ):
                raise IndexFormatError(
                    f"Invalid positions for term {term!r}, doc {doc_id} in {path}"
                )
            try:
                index.add_posting(term, doc_id, positions)
            except ValueError as e:
                raise IndexFormatError(f"Invalid term {term!r} in {path}: {e}") from e
    return index
