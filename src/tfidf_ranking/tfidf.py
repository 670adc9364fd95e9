"""
TF-IDF ranking over a preprocessed Corpus.

    score(d) = sum(tf(d, q) * idf(q) for q in query) / len(query)

Every occurrence of a repeated query term is summed on its own, and query terms
unknown to the corpus add 0 to the sum while still counting in len(query).
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from typing import TYPE_CHECKING
import logging

import numpy as np

from tfidf_ranking.corpus import Corpus
from tfidf_ranking.errors import EmptyQueryError

if TYPE_CHECKING:
    from numpy.typing import NDArray

logger = logging.getLogger(__name__)


def _validate_query(query: Sequence[str]) -> list[str]:
    if isinstance(query, str):
        raise TypeError("Query must be a sequence of terms; use parse_query() on raw strings.")
    terms = list(query)
    if not terms:
        raise EmptyQueryError()
    return terms


class Ranking(Mapping[str, float]):
    """
    Read-only mapping of document id -> score, iterated in ranking order.

    Ranking order is descending score; equal scores are ordered by ascending
    document id.
    """

    def __init__(self, ids: Sequence[str], scores: NDArray[np.float64]):
        self.ids = tuple(ids)
        self.scores = np.asarray(scores, dtype=float)
        self._by_id = {doc_id: float(score) for doc_id, score in zip(self.ids, self.scores)}

    def __getitem__(self, doc_id: str) -> float:
        return self._by_id[doc_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self.ids)

    def __len__(self) -> int:
        return len(self.ids)

    def __repr__(self) -> str:
        entries = ", ".join(f"{doc_id!r}: {score!r}" for doc_id, score in self.items())
        return f"Ranking({{{entries}}})"

    def top(self, k: int) -> "Ranking":
        if k < 1:
            raise ValueError(f"k must be a positive integer, got {k}.")
        return Ranking(self.ids[:k], self.scores[:k])


class TFIDF:
    """
    TF-IDF ranking class using a preprocessed Corpus.

    Args:
        corpus (Corpus): A corpus object containing document statistics.
    """

    def __init__(self, corpus: Corpus):
        self.corpus = corpus
        self._idf = corpus.inverse_document_frequency
        self._ranking_ids = sorted(corpus.ids)

    @staticmethod
    def score_kernel(query: list[str], frequencies: Mapping[str, int], idf: Mapping[str, float]) -> float:
        """TF-IDF score averaged over the query terms for a single document."""
        if not query:
            raise EmptyQueryError()
        tf = np.array([frequencies.get(term, 0) for term in query], dtype=float)
        idf_values = np.array([idf.get(term, 0.0) for term in query], dtype=float)
        return float(np.sum(tf * idf_values) / len(query))

    def _score_documents(self, query: list[str], ids: Sequence[str]) -> NDArray[np.float64]:
        tf_table = self.corpus.term_frequency
        return np.array([self.score_kernel(query, tf_table[doc_id], self._idf) for doc_id in ids], dtype=float)

    def score(self, query: Sequence[str], doc_id: str) -> float:
        query = _validate_query(query)
        return self.score_kernel(query, self.corpus.term_frequency[doc_id], self._idf)

    def scores(self, query: Sequence[str]) -> NDArray[np.float64]:
        """Scores for every document, aligned with ``corpus.ids``."""
        return self._score_documents(_validate_query(query), self.corpus.ids)

    def rank(self, query: Sequence[str], top_k: int | None = None) -> Ranking:
        """
        Rank every document in the corpus against ``query``.

        Documents without any query term keep a score of 0.0 and are ranked
        after the matching ones.

        Args:
            query: Lower-cased query terms, repeats allowed.
            top_k: Keep only the first ``top_k`` documents of the ranking.

        Raises:
            EmptyQueryError: if ``query`` has no terms.
        """
        query = _validate_query(query)
        if top_k is not None and top_k < 1:
            raise ValueError(f"top_k must be a positive integer, got {top_k}.")

        logger.debug("Ranking %d documents for query %s", len(self.corpus), query)
        scores = self._score_documents(query, self._ranking_ids)
        # Stable sort over the id-sorted documents breaks score ties by id.
        order = np.argsort(-scores, kind="stable")
        if top_k is not None:
            order = order[:top_k]
        return Ranking([self._ranking_ids[i] for i in order], scores[order])

    def explain(self, query: Sequence[str], doc_id: str) -> list[dict[str, float | int | str]]:
        """
        Per-term breakdown of ``score(query, doc_id)``, one entry per query term
        occurrence. The contributions sum to the document score.
        """
        query = _validate_query(query)
        frequencies = self.corpus.term_frequency[doc_id]
        profile = []
        for term in query:
            tf = frequencies.get(term, 0)
            idf = self._idf.get(term, 0.0)
            profile.append({"term": term, "tf": tf, "idf": idf, "contribution": tf * idf / len(query)})
        return profile
