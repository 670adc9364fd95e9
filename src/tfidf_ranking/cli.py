"""
Rank the documents of a directory against a query.

Usage (example):
    tfidf-rank 'plays childhood market' --dataset ./dataset

Prints one ``<document>\t<score>`` line per document, most relevant first.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from tfidf_ranking.config import (
    DEFAULT_DATASET_DIR,
    DEFAULT_ENCODING,
    DEFAULT_PATTERN,
    OUTPUT_FORMATS,
    SearchConfig,
)
from tfidf_ranking.corpus import Corpus, parse_query
from tfidf_ranking.tfidf import TFIDF, Ranking

NO_QUERY_MESSAGE = "No term to search"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="TF-IDF ranking of a directory of text documents.")
    parser.add_argument("query", nargs="?", help="Search terms, separated by whitespace or commas.")
    parser.add_argument(
        "--dataset", default=str(DEFAULT_DATASET_DIR), help=f"Directory holding the documents (default: {DEFAULT_DATASET_DIR})."
    )
    parser.add_argument("--pattern", default=DEFAULT_PATTERN, help=f"Glob selecting document files (default: {DEFAULT_PATTERN}).")
    parser.add_argument("--encoding", default=DEFAULT_ENCODING, help=f"Document encoding (default: {DEFAULT_ENCODING}).")
    parser.add_argument("--top-k", type=int, help="Only print the first N documents.")
    parser.add_argument("--format", choices=OUTPUT_FORMATS, default="text", help="Output format (default: text).")
    parser.add_argument("--explain", action="store_true", help="Show the per-term score breakdown.")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Log progress (-vv for debug).")
    return parser


def configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, stream=sys.stderr, format="%(levelname)s %(name)s: %(message)s")


def format_text(ranking: Ranking, explanations: dict[str, list[dict]] | None = None) -> str:
    lines = []
    for doc_id, score in ranking.items():
        lines.append(f"{doc_id}\t{score}")
        for entry in (explanations or {}).get(doc_id, []):
            lines.append(
                f"    {entry['term']}\ttf={entry['tf']}\tidf={entry['idf']:.6f}\tcontribution={entry['contribution']:.6f}"
            )
    return "\n".join(lines)


def format_json(ranking: Ranking, explanations: dict[str, list[dict]] | None = None) -> str:
    results = []
    for doc_id, score in ranking.items():
        entry = {"document": doc_id, "score": score}
        if explanations is not None:
            entry["terms"] = explanations[doc_id]
        results.append(entry)
    return json.dumps(results, indent=2)


def run(query: str, config: SearchConfig) -> str:
    """Load the corpus, rank it against ``query`` and return the formatted output."""
    terms = parse_query(query)
    corpus = Corpus.from_directory(config.dataset_dir, pattern=config.pattern, encoding=config.encoding)
    tfidf = TFIDF(corpus)
    ranking = tfidf.rank(terms, top_k=config.top_k)

    explanations = None
    if config.explain:
        explanations = {doc_id: tfidf.explain(terms, doc_id) for doc_id in ranking}

    if config.output_format == "json":
        return format_json(ranking, explanations)
    return format_text(ranking, explanations)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if args.query is None:
        print(NO_QUERY_MESSAGE)
        return 0

    try:
        config = SearchConfig.from_args(args)
        output = run(args.query, config)
    except (ValueError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
