"""
Corpus loading and the term statistics TF-IDF ranking is built on.

The term-frequency table maps each document id to a Counter of its terms. A term
that does not occur in a document has no key in that Counter; callers read it
with ``.get(term, 0)``.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Iterator, Mapping, Sequence
from functools import cached_property
from pathlib import Path
import logging
import re

import numpy as np

from tfidf_ranking.errors import EmptyCorpusError

logger = logging.getLogger(__name__)

_SPLIT_PATTERN = re.compile(r"[\s,]+")


def tokenize(text: str) -> list[str]:
    """Lowercase and split on runs of whitespace and/or commas."""
    return [term for term in _SPLIT_PATTERN.split(text.lower()) if term]


def parse_query(query: str) -> list[str]:
    """Tokenize a raw query string. Repeated terms are kept."""
    return tokenize(query)


def load_directory(path: str | Path, pattern: str = "*.txt", encoding: str = "utf-8") -> dict[str, list[str]]:
    """
    Read and tokenize every file in ``path`` matching ``pattern``.

    Args:
        path: Directory holding the documents.
        pattern: Glob pattern selecting document files.
        encoding: Text encoding of the files.

    Returns:
        Mapping of path relative to ``path`` (posix separators) -> terms, in
        sorted order. For files directly in ``path`` this is the file name.
    """
    directory = Path(path)
    if not directory.is_dir():
        raise FileNotFoundError(f"Dataset directory not found: {directory}")

    documents: dict[str, list[str]] = {}
    paths = {p.relative_to(directory).as_posix(): p for p in directory.glob(pattern) if p.is_file()}
    for doc_id in sorted(paths):
        terms = tokenize(paths[doc_id].read_text(encoding=encoding))
        documents[doc_id] = terms
        logger.debug("Loaded %s (%d terms)", doc_id, len(terms))

    logger.info("Loaded %d documents from %s", len(documents), directory)
    return documents


def term_frequency(terms: Iterable[str]) -> Counter[str]:
    """Number of occurrences of each distinct term."""
    return Counter(terms)


def build_tf_table(documents: Mapping[str, Sequence[str]]) -> dict[str, Counter[str]]:
    """Term frequency for each document, keyed by document id."""
    return {doc_id: term_frequency(terms) for doc_id, terms in documents.items()}


def document_frequency(tf_table: Mapping[str, Mapping[str, int]]) -> Counter[str]:
    """Number of documents each term occurs in at least once."""
    return Counter(
        term
        for frequencies in tf_table.values()
        for term, count in frequencies.items()
        if count > 0
    )


def build_idf_table(
    documents: Mapping[str, Sequence[str]],
    tf_table: Mapping[str, Mapping[str, int]],
) -> dict[str, float]:
    """
    Inverse document frequency of every term in the corpus:
        idf(t) = ln(N / df(t))

    df(t) counts documents, not occurrences, so idf(t) >= 0 and equals 0 for a
    term present in every document.

    Raises:
        EmptyCorpusError: if the corpus has no documents.
        ValueError: if ``tf_table`` was not built from ``documents``.
    """
    n = len(documents)
    if n == 0:
        raise EmptyCorpusError()
    if tf_table.keys() != documents.keys():
        raise ValueError("Term frequency table does not match the corpus documents.")

    df = document_frequency(tf_table)
    terms = list(df.keys())
    df_values = np.array([df[term] for term in terms], dtype=float)
    idf = np.log(n / df_values)
    return {term: float(idf_value) for term, idf_value in zip(terms, idf)}


class Corpus:
    """
    A fixed collection of tokenized documents and its TF/DF/IDF tables.

    Args:
        documents: Mapping of document id -> lower-cased terms.

    Attributes:
        documents (dict[str, tuple[str, ...]]): The tokenized documents.
        ids (list[str]): Document ids in insertion order.
        document_count (int): Total number of documents in the corpus.

    Raises:
        EmptyCorpusError: if ``documents`` is empty.
    """

    def __init__(self, documents: Mapping[str, Sequence[str]]):
        if not documents:
            raise EmptyCorpusError()
        self.documents = {doc_id: tuple(terms) for doc_id, terms in documents.items()}
        self.ids = list(self.documents)
        self.document_count = len(self.documents)

    def __len__(self) -> int:
        return self.document_count

    def __getitem__(self, doc_id: str) -> tuple[str, ...]:
        return self.documents[doc_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self.ids)

    def __contains__(self, doc_id: object) -> bool:
        return doc_id in self.documents

    @classmethod
    def from_texts(cls, texts: Mapping[str, str]) -> "Corpus":
        return cls({doc_id: tokenize(text) for doc_id, text in texts.items()})

    @classmethod
    def from_directory(cls, path: str | Path, pattern: str = "*.txt", encoding: str = "utf-8") -> "Corpus":
        return cls(load_directory(path, pattern=pattern, encoding=encoding))

    @cached_property
    def term_frequency(self) -> dict[str, Counter[str]]:
        """Term frequency for each document."""
        return build_tf_table(self.documents)

    @cached_property
    def document_frequency(self) -> Counter[str]:
        """Document frequency of each term (i.e. in how many documents each term appears)."""
        return document_frequency(self.term_frequency)

    @cached_property
    def inverse_document_frequency(self) -> dict[str, float]:
        idf = build_idf_table(self.documents, self.term_frequency)
        logger.info("Computed idf for %d terms over %d documents", len(idf), self.document_count)
        return idf
