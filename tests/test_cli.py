import json
import math

import pytest

from tfidf_ranking.cli import NO_QUERY_MESSAGE, build_parser, main
from tfidf_ranking.config import SearchConfig


@pytest.fixture
def dataset(tmp_path):
    (tmp_path / "A.txt").write_text("cat dog cat", encoding="utf-8")
    (tmp_path / "B.txt").write_text("dog dog fish", encoding="utf-8")
    return tmp_path


def parse_lines(output):
    return [(doc_id, float(score)) for doc_id, score in (line.split("\t") for line in output.strip().splitlines())]


def test_missing_query(capsys):
    assert main([]) == 0
    assert capsys.readouterr().out.strip() == NO_QUERY_MESSAGE


def test_text_output(dataset, capsys):
    assert main(["cat", "--dataset", str(dataset)]) == 0

    results = parse_lines(capsys.readouterr().out)
    assert [doc_id for doc_id, _ in results] == ["A.txt", "B.txt"]
    assert results[0][1] == pytest.approx(2 * math.log(2))
    assert results[1][1] == 0.0


def test_json_output_with_explain(dataset, capsys):
    assert main(["cat zzz", "--dataset", str(dataset), "--format", "json", "--explain"]) == 0

    results = json.loads(capsys.readouterr().out)
    assert [entry["document"] for entry in results] == ["A.txt", "B.txt"]
    assert results[0]["score"] == pytest.approx(math.log(2))
    assert [term["term"] for term in results[0]["terms"]] == ["cat", "zzz"]


def test_text_explain(dataset, capsys):
    assert main(["cat", "--dataset", str(dataset), "--explain"]) == 0

    out = capsys.readouterr().out
    assert "    cat\ttf=2\tidf=0.693147\tcontribution=1.386294" in out


def test_top_k(dataset, capsys):
    assert main(["cat", "--dataset", str(dataset), "--top-k", "1"]) == 0
    assert [doc_id for doc_id, _ in parse_lines(capsys.readouterr().out)] == ["A.txt"]


@pytest.mark.parametrize(
    "argv",
    [
        [",, ,"],
        ["cat", "--top-k", "0"],
    ],
)
def test_invalid_input(dataset, capsys, argv):
    assert main(argv + ["--dataset", str(dataset)]) == 2

    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("Error:")


def test_empty_dataset(tmp_path, capsys):
    assert main(["cat", "--dataset", str(tmp_path)]) == 2
    assert "no documents" in capsys.readouterr().err


def test_missing_dataset(tmp_path, capsys):
    assert main(["cat", "--dataset", str(tmp_path / "missing")]) == 2
    assert "not found" in capsys.readouterr().err


def test_config_from_args():
    args = build_parser().parse_args(["cat", "--dataset", "docs", "--top-k", "3", "--format", "json"])
    config = SearchConfig.from_args(args)

    assert str(config.dataset_dir) == "docs"
    assert config.pattern == "*.txt"
    assert config.top_k == 3
    assert config.output_format == "json"
    assert config.explain is False


def test_config_validation():
    with pytest.raises(ValueError):
        SearchConfig(output_format="xml")
    with pytest.raises(ValueError):
        SearchConfig(top_k=0)


def test_unreadable_document(dataset, capsys, monkeypatch):
    def deny(self, *args, **kwargs):
        raise PermissionError(f"Permission denied: {self.name}")

    monkeypatch.setattr("pathlib.Path.read_text", deny)
    assert main(["cat", "--dataset", str(dataset)]) == 2

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Permission denied" in captured.err
