"""Tests for the search, index and drop CLI commands."""

import json
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from ai_store.cli import load_corpus, main


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def corpus_file(tmp_path):
    """Write a small JSON corpus and return its path."""
    path = tmp_path / "corpus.json"
    path.write_text(
        json.dumps(
            [
                {"id": "A", "vector": [1.0, 0.0, 0.0], "text": "vectors and embeddings"},
                {"id": "B", "vector": [0.0, 1.0, 0.0], "text": "machine learning"},
                {"id": "C", "vector": [0.0, 0.0, 1.0], "text": "artificial intelligence"},
                {"id": "D", "text": "hello world", "metadata": {"lang": "en"}},
            ]
        )
    )
    return path


class TestLoadCorpus:
    """Tests for corpus loading."""

    def test_load(self, corpus_file):
        docs = load_corpus(corpus_file)

        assert [doc.id for doc in docs] == ["A", "B", "C", "D"]
        assert docs[3].text == "hello world"
        assert docs[3].metadata["lang"] == "en"

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")

        with pytest.raises(Exception, match="not valid JSON"):
            load_corpus(path)

    def test_not_a_list(self, tmp_path):
        path = tmp_path / "obj.json"
        path.write_text('{"id": "A"}')

        with pytest.raises(Exception, match="JSON array"):
            load_corpus(path)

    def test_missing_id(self, tmp_path):
        path = tmp_path / "noid.json"
        path.write_text('[{"text": "x"}]')

        with pytest.raises(Exception, match="invalid document"):
            load_corpus(path)


class TestSearchCommand:
    """Tests for `ai-store search` against an in-memory corpus."""

    def test_text_search(self, runner, corpus_file):
        result = runner.invoke(main, ["search", "hello", "--corpus", str(corpus_file)])

        assert result.exit_code == 0, result.output
        assert "Text query results" in result.output
        assert "1. D  score=-" in result.output
        assert "hello world" in result.output

    def test_vector_search(self, runner, corpus_file):
        result = runner.invoke(
            main,
            ["search", "--vector", "0,0,1", "--max-items", "1", "--corpus", str(corpus_file)],
        )

        assert result.exit_code == 0, result.output
        assert "Vector query results" in result.output
        assert "1. C  score=1.0000" in result.output
        assert "2." not in result.output

    def test_hybrid_search(self, runner, corpus_file):
        result = runner.invoke(
            main,
            ["search", "hello", "--vector", "0,0,1", "--semantic-ratio", "0.5", "--corpus", str(corpus_file)],
        )

        assert result.exit_code == 0, result.output
        assert "Hybrid query results" in result.output
        assert "1. C  score=0.5000" in result.output
        assert "4. D  score=-" in result.output

    def test_euclidean_strategy(self, runner, corpus_file):
        result = runner.invoke(
            main,
            ["search", "--vector", "0,0,1", "--strategy", "euclidean", "--corpus", str(corpus_file)],
        )

        assert result.exit_code == 0, result.output
        assert "1. C  score=1.0000" in result.output

    def test_no_results_exits_nonzero(self, runner, corpus_file):
        result = runner.invoke(main, ["search", "quantum", "--corpus", str(corpus_file)])

        assert result.exit_code == 1
        assert "No documents found" in result.output

    def test_requires_query_or_vector(self, runner, corpus_file):
        result = runner.invoke(main, ["search", "--corpus", str(corpus_file)])

        assert result.exit_code == 2
        assert "Provide a QUERY text" in result.output

    def test_invalid_vector(self, runner, corpus_file):
        result = runner.invoke(main, ["search", "--vector", "a,b", "--corpus", str(corpus_file)])

        assert result.exit_code == 2
        assert "invalid vector" in result.output

    def test_non_finite_vector_rejected(self, runner, corpus_file):
        result = runner.invoke(main, ["search", "--vector", "nan,0,1", "--corpus", str(corpus_file)])

        assert result.exit_code == 2
        assert "must be finite" in result.output

    def test_debug_flag_lowers_log_level(self, runner, corpus_file):
        with patch("ai_store.cli.setup_logging") as setup:
            result = runner.invoke(main, ["--debug", "search", "hello", "--corpus", str(corpus_file)])

        assert result.exit_code == 0, result.output
        setup.assert_called_once_with("DEBUG")

    def test_semantic_ratio_out_of_range(self, runner, corpus_file):
        result = runner.invoke(
            main,
            ["search", "x", "--vector", "1,0,0", "--semantic-ratio", "1.5", "--corpus", str(corpus_file)],
        )

        assert result.exit_code == 2

    def test_search_uses_cache_store_without_corpus(self, runner):
        store = MagicMock()
        store.query.return_value = iter([])

        with patch("ai_store.cli._cache_store", return_value=store):
            result = runner.invoke(main, ["search", "hello"])

        assert result.exit_code == 1
        store.query.assert_called_once()


class TestIndexAndDropCommands:
    """Tests for commands operating on the Redis cache store."""

    def test_index(self, runner, corpus_file):
        store = MagicMock(cache_key="_vectors")

        with patch("ai_store.cli._cache_store", return_value=store):
            result = runner.invoke(main, ["index", str(corpus_file)])

        assert result.exit_code == 0, result.output
        assert "Indexed 4 documents into _vectors" in result.output
        store.setup.assert_called_once()
        assert [doc.id for doc in store.add.call_args.args[0]] == ["A", "B", "C", "D"]

    def test_drop(self, runner):
        store = MagicMock(cache_key="_vectors")

        with patch("ai_store.cli._cache_store", return_value=store):
            result = runner.invoke(main, ["drop"])

        assert result.exit_code == 0
        store.drop.assert_called_once()
