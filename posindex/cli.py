"""
Command-line interface for a file-backed positional index.

Each invocation loads the named index file, runs one command, and saves the
index again if the command changed it.

Usage:
    posindex index docs.json 1 "here is some content"
    posindex search docs.json "is some"
    posindex term_list_size docs.json
    posindex posting_list_sizes docs.json
    posindex top_posting_lists docs.json -n 5

A query or text starting with "-" must follow "--":
    posindex search docs.json -- "-foo"
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable

from .index_builder import DEFAULT_TOP_N, bytes_to_human_readable, top_posting_lists
from .storage import load_index, load_or_create_index, save_index
from .tokenizer import extract_text_from_html


def document_id(value: str) -> int:
    """argparse type for document ids: non-negative integers."""
    try:
        doc_id = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid document id: {value!r}")
    if doc_id < 0:
        raise argparse.ArgumentTypeError(f"document id must be non-negative: {value!r}")
    return doc_id


def positive_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid count: {value!r}")
    if n <= 0:
        raise argparse.ArgumentTypeError(f"count must be positive: {value!r}")
    return n


def handle_index(args) -> None:
    index = load_or_create_index(args.index_name)
    text = extract_text_from_html(args.text) if args.html else args.text
    index.index(args.document_id, text)
    save_index(index, args.index_name)
    print(f"Indexed document {args.document_id} into {args.index_name}")


def handle_search(args) -> None:
    index = load_index(args.index_name)
    print(index.search(args.query_text))


def handle_term_list_size(args) -> None:
    index = load_index(args.index_name)
    print(index.term_list_size())


def handle_posting_list_sizes(args) -> None:
    index = load_index(args.index_name)
    print(index.posting_list_sizes())


def handle_top_posting_lists(args) -> None:
    index = load_index(args.index_name)
    top = top_posting_lists(index, args.n)
    print(f"Top {len(top)} posting lists:")
    for term, size in top:
        print(f"{term}: {bytes_to_human_readable(size)}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="posindex",
        description="Manage a file-backed positional inverted index.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    index_parser = subparsers.add_parser("index", help="Index a document")
    index_parser.add_argument("index_name", type=Path, help="Path to the index file")
    index_parser.add_argument("document_id", type=document_id, help="Document id")
    index_parser.add_argument("text", help="Document text")
    index_parser.add_argument(
        "--html",
        action="store_true",
        help="Treat the text as HTML and index only its visible text.",
    )
    index_parser.set_defaults(func=handle_index)

    search_parser = subparsers.add_parser("search", help="Search the index (AND query)")
    search_parser.add_argument("index_name", type=Path, help="Path to the index file")
    search_parser.add_argument("query_text", help="Query terms")
    search_parser.set_defaults(func=handle_search)

    term_parser = subparsers.add_parser(
        "term_list_size", help="Print the approximate term list size in bytes"
    )
    term_parser.add_argument("index_name", type=Path, help="Path to the index file")
    term_parser.set_defaults(func=handle_term_list_size)

    sizes_parser = subparsers.add_parser(
        "posting_list_sizes",
        help="Print the approximate size of each posting list in bytes (term order)",
    )
    sizes_parser.add_argument("index_name", type=Path, help="Path to the index file")
    sizes_parser.set_defaults(func=handle_posting_list_sizes)

    top_parser = subparsers.add_parser(
        "top_posting_lists", help="Print the largest posting lists"
    )
    top_parser.add_argument("index_name", type=Path, help="Path to the index file")
    top_parser.add_argument(
        "-n",
        type=positive_int,
        default=DEFAULT_TOP_N,
        help="Number of posting lists to show.",
    )
    top_parser.set_defaults(func=handle_top_posting_lists)

    return parser


def main(argv: Iterable[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        args.func(args)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: could not access index {args.index_name}: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
