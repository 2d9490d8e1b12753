"""Positional inverted index package."""

from .posting import Posting, PositionalIndex
from .storage import IndexFormatError, load_index, load_or_create_index, save_index
from .index_builder import build_index_from_files, top_posting_lists
from .tokenizer import tokenize
