"""Exceptions raised by the TF-IDF ranking core."""


class RankingError(ValueError):
    """Base class for inputs the ranking core cannot work with."""


class EmptyCorpusError(RankingError):
    """The corpus has no documents, so idf(t) = ln(N / df(t)) is undefined."""

    def __init__(self, message: str = "Corpus contains no documents."):
        super().__init__(message)


class EmptyQueryError(RankingError):
    """The query has no terms, so the per-term average is undefined."""

    def __init__(self, message: str = "Query contains no terms."):
        super().__init__(message)
