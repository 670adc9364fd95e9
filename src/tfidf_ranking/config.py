"""Run configuration for the command-line search."""

from __future__ import annotations

from argparse import Namespace
from dataclasses import dataclass
from pathlib import Path

DEFAULT_DATASET_DIR = Path("./dataset")
DEFAULT_PATTERN = "*.txt"
DEFAULT_ENCODING = "utf-8"
OUTPUT_FORMATS = ("text", "json")


@dataclass(frozen=True)
class SearchConfig:
    """Where to read the corpus from and how to report the ranking."""

    dataset_dir: Path = DEFAULT_DATASET_DIR
    pattern: str = DEFAULT_PATTERN
    encoding: str = DEFAULT_ENCODING
    top_k: int | None = None
    output_format: str = "text"
    explain: bool = False

    def __post_init__(self) -> None:
        if self.top_k is not None and self.top_k < 1:
            raise ValueError(f"top_k must be a positive integer, got {self.top_k}.")
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(f"Unknown output format {self.output_format!r}; expected one of {OUTPUT_FORMATS}.")

    @classmethod
    def from_args(cls, args: Namespace) -> "SearchConfig":
        return cls(
            dataset_dir=Path(args.dataset),
            pattern=args.pattern,
            encoding=args.encoding,
            top_k=args.top_k,
            output_format=args.format,
            explain=args.explain,
        )
