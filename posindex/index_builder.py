"""
Index builder: bulk-indexes corpus files into a positional index.
Each blank-line separated paragraph of a corpus file is one document; ids are
assigned consecutively. Also reports the largest posting lists.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from .posting import PositionalIndex
from .tokenizer import extract_text_from_html, read_text_file, split_paragraphs

logger = logging.getLogger(__name__)

DEFAULT_TOP_N = 10

_UNITS = ("B", "KB", "MB", "GB", "TB")


def index_paragraphs(
    index: PositionalIndex,
    paragraphs: Iterable[str],
    start_id: int = 0,
) -> int:
    """
    Index each non-empty paragraph under consecutive doc ids from start_id.
    Returns the next unused doc id.
    """
    doc_id = start_id
    for paragraph in paragraphs:
        if not paragraph.strip():
            continue
        index.index(doc_id, paragraph)
        doc_id += 1
    return doc_id


def build_index_from_files(
    index: PositionalIndex,
    paths: Iterable[Path],
    *,
    start_id: int = 0,
    html: bool = False,
) -> tuple[int, int]:
    """
    Index every paragraph of every file into index (in-memory).
    - html: strip markup with BeautifulSoup before splitting into paragraphs.
    Files that cannot be read are skipped with a warning.
    Returns (num_docs, next_doc_id).
    """
    next_doc_id = start_id
    for filepath in paths:
        filepath = Path(filepath)
        try:
            content = read_text_file(filepath)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read {filepath}: {e}")
            continue

        if html:
            # get_text joins blocks with spaces, so the whole page is one document
            paragraphs = [extract_text_from_html(content)]
        else:
            paragraphs = split_paragraphs(content)

        before = next_doc_id
        next_doc_id = index_paragraphs(index, paragraphs, start_id=next_doc_id)
        logger.debug(f"Indexed {next_doc_id - before} documents from {filepath}")

    return next_doc_id - start_id, next_doc_id


def top_posting_lists(index: PositionalIndex, n: int = DEFAULT_TOP_N) -> list[tuple[str, int]]:
    """Return the n largest posting lists as (term, size), largest first."""
    sizes = index.posting_list_sizes_by_term()
    ranked = sorted(sizes.items(), key=lambda x: (-x[1], x[0]))
    return ranked[:n]


def bytes_to_human_readable(size: int) -> str:
    value = float(size)
    i = 0
    while value >= 1024.0 and i < len(_UNITS) - 1:
        value /= 1024.0
        i += 1
    return f"{value:.2f} {_UNITS[i]}"
