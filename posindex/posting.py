"""
Posting and positional inverted index data structures.

A posting records every position at which a term occurs in one document.
The index maps term -> {doc_id: positions} and answers AND-only queries.
"""

from dataclasses import dataclass, field
from typing import Iterator

from .tokenizer import tokenize, term_positions

# Approximate in-memory cost of one posting (doc id + position count) and of
# one stored position, in bytes.
POSTING_OVERHEAD_BYTES = 16
POSITION_BYTES = 8


@dataclass
class Posting:
    """
    Represents a term's occurrences in a document.
    - doc_id: document identifier
    - positions: 0-based token positions, strictly increasing
    """

    doc_id: int
    positions: list[int] = field(default_factory=list)

    @property
    def tf(self) -> int:
        return len(self.positions)


def _check_utf8(text: str) -> None:
    try:
        text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise ValueError(f"Text is not valid UTF-8: {e.reason}") from e


def _check_doc_id(doc_id: int) -> None:
    if isinstance(doc_id, bool) or not isinstance(doc_id, int):
        raise TypeError(f"Document id must be an int, got {type(doc_id).__name__}")
    if doc_id < 0:
        raise ValueError(f"Document id must be non-negative, got {doc_id}")


class PositionalIndex:
    """
    Positional inverted index: map from term -> {doc_id: positions}.
    Re-indexing a document replaces its postings instead of appending.
    """

    def __init__(self) -> None:
        self._index: dict[str, dict[int, list[int]]] = {}
        # doc_id -> terms it has postings for; derived, never persisted
        self._doc_terms: dict[int, set[str]] = {}

    def index(self, document_id: int, text: str) -> None:
        """
        Tokenize text and store the positions of each distinct term for
        document_id. Postings the document held for terms missing from the
        new text are dropped.
        """
        _check_doc_id(document_id)
        _check_utf8(text)
        positions = term_positions(tokenize(text))

        stale = self._doc_terms.get(document_id, set()) - set(positions)
        for term in stale:
            self._remove_posting(term, document_id)

        for term, term_pos in positions.items():
            self.add_posting(term, document_id, term_pos)

    def add_posting(self, term: str, doc_id: int, positions: list[int]) -> None:
        """Set the posting for (term, doc_id), replacing any previous one."""
        _check_doc_id(doc_id)
        _check_utf8(term)
        if term not in self._index:
            self._index[term] = {}
        self._index[term][doc_id] = list(positions)
        if doc_id not in self._doc_terms:
            self._doc_terms[doc_id] = set()
        self._doc_terms[doc_id].add(term)

    def _remove_posting(self, term: str, doc_id: int) -> None:
        postings = self._index[term]
        del postings[doc_id]
        if not postings:
            del self._index[term]
        doc_terms = self._doc_terms[doc_id]
        doc_terms.discard(term)
        if not doc_terms:
            del self._doc_terms[doc_id]

    def search(self, query_text: str) -> list[int]:
        """
        AND query: ids of documents containing every query term, ascending.
        An empty query or any unknown term yields [].
        """
        terms = set(tokenize(query_text))
        if not terms:
            return []
        if any(term not in self._index for term in terms):
            return []

        # Start from the shortest posting list.
        ordered = sorted(terms, key=lambda t: len(self._index[t]))
        result = set(self._index[ordered[0]])
        for term in ordered[1:]:
            result.intersection_update(self._index[term])
            if not result:
                return []
        return sorted(result)

    def get_postings(self, term: str) -> list[Posting]:
        """Return the postings for a term sorted by doc_id, or empty list."""
        postings = self._index.get(term, {})
        return [Posting(doc_id, list(postings[doc_id])) for doc_id in sorted(postings)]

    def term_list_size(self) -> int:
        """Total UTF-8 byte length of all distinct terms."""
        return sum(len(term.encode("utf-8")) for term in self.terms())

    def posting_list_sizes(self) -> list[int]:
        """Approximate byte size of each posting list, in sorted term order."""
        return [self._posting_list_size(term) for term in sorted(self._index)]

    def posting_list_sizes_by_term(self) -> dict[str, int]:
        return {term: self._posting_list_size(term) for term in sorted(self._index)}

    def _posting_list_size(self, term: str) -> int:
        return sum(
            POSTING_OVERHEAD_BYTES + POSITION_BYTES * p.tf for p in self.get_postings(term)
        )

    def terms(self) -> Iterator[str]:
        """Iterate over all terms in the index."""
        return iter(self._index)

    def document_ids(self) -> list[int]:
        return sorted(self._doc_terms)

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, term: str) -> bool:
        return term in self._index

    def to_dict(self) -> dict:
        """Serialize to a JSON-serializable dict: term -> [[doc_id, positions], ...]."""
        return {
            term: [[doc_id, list(postings[doc_id])] for doc_id in sorted(postings)]
            for term, postings in sorted(self._index.items())
        }
