"""
Tokenizer for the positional index.
Terms are lowercased whitespace-delimited substrings; punctuation is kept.
Also extracts text from HTML and reads corpus files for bulk indexing.
"""

import re
import warnings
from pathlib import Path
from bs4 import BeautifulSoup, XMLParsedAsHTMLWarning, MarkupResemblesLocatorWarning
warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)
warnings.filterwarnings("ignore", category=MarkupResemblesLocatorWarning)

from nltk.tokenize import WhitespaceTokenizer

_TOKENIZER = WhitespaceTokenizer()

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")


def tokenize(text: str) -> list[str]:
    """
    Split text on whitespace and lowercase every token.
    Returns the tokens in document order; position i of the result is the
    0-based token position used in postings.
    """
    if not text:
        return []
    return [t.lower() for t in _TOKENIZER.tokenize(text)]


def term_positions(tokens: list[str]) -> dict[str, list[int]]:
    """Map each distinct token to the ascending list of positions it occurs at."""
    positions: dict[str, list[int]] = {}
    for pos, token in enumerate(tokens):
        if token not in positions:
            positions[token] = []
        positions[token].append(pos)
    return positions


def extract_text_from_html(html_content: str) -> str:
    """
    Extract visible text from HTML content, stripping tags and scripts.
    """
    soup = BeautifulSoup(html_content, "lxml")
    # Remove script and style elements
    for element in soup(["script", "style"]):
        element.decompose()
    return soup.get_text(separator=" ", strip=True)


def split_paragraphs(text: str) -> list[str]:
    """Split text on blank lines; each non-empty paragraph becomes one document."""
    paragraphs = (p.strip() for p in _PARAGRAPH_BREAK.split(text))
    return [p for p in paragraphs if p]


def read_text_file(filepath: Path) -> str:
    """
    Read a text file, handling common encodings.
    """
    for encoding in ("utf-8", "latin-1", "cp1252"):
        try:
            return Path(filepath).read_text(encoding=encoding)
        except UnicodeDecodeError:
            continue
    raise ValueError(f"Could not decode file: {filepath}")
