"""
Bulk-index corpus files into a positional index and print analytics.
Every blank-line separated paragraph becomes one document, numbered
consecutively from --start-id.

Usage:
    python build_index.py data/index.json corpus/*.txt

Output:
  - the index file (created, or extended if it already exists)
  - analytics table and largest posting lists printed to console
"""

import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent))

from posindex.index_builder import (
    DEFAULT_TOP_N,
    build_index_from_files,
    bytes_to_human_readable,
    top_posting_lists,
)
from posindex.storage import IndexFormatError, load_or_create_index, save_index


def main() -> None:
    import argparse
    parser = argparse.ArgumentParser(description="Bulk-index corpus files into a positional index")
    parser.add_argument("index", type=Path, help="Path to the index file")
    parser.add_argument("files", type=Path, nargs="+", help="Corpus files to index")
    parser.add_argument(
        "--start-id",
        type=int,
        default=0,
        help="Document id of the first paragraph (default: 0)",
    )
    parser.add_argument(
        "--html",
        action="store_true",
        help="Treat each file as one HTML document",
    )
    parser.add_argument(
        "--top",
        type=int,
        default=DEFAULT_TOP_N,
        help="Number of largest posting lists to show",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s - %(message)s")

    if args.start_id < 0:
        parser.error("--start-id must be non-negative")

    try:
        index = load_or_create_index(args.index)
    except IndexFormatError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    num_docs, next_id = build_index_from_files(
        index, args.files, start_id=args.start_id, html=args.html
    )
    if num_docs == 0:
        print("No documents found in the given files.")
        sys.exit(1)

    save_index(index, args.index)

    posting_bytes = sum(index.posting_list_sizes())
    index_size_kb = args.index.stat().st_size / 1024

    print("\n" + "=" * 50)
    print("INDEX ANALYTICS")
    print("=" * 50)
    print()
    print("| Metric                      | Value |")
    print("|-----------------------------|-------|")
    print(f"| Documents indexed           | {num_docs} |")
    print(f"| Unique terms                | {len(index)} |")
    print(f"| Term list size              | {bytes_to_human_readable(index.term_list_size())} |")
    print(f"| Total posting list size     | {bytes_to_human_readable(posting_bytes)} |")
    print(f"| Index file size (KB)        | {index_size_kb:.2f} |")
    print()
    print(f"Top {args.top} posting lists:")
    for term, size in top_posting_lists(index, args.top):
        print(f"  {term}: {bytes_to_human_readable(size)}")
    print()
    print("=" * 50)
    print(f"\nIndex saved to: {args.index}")
    print(f"Next free document id: {next_id}")
    print()


if __name__ == "__main__":
    main()
