"""Tests for the text-svm command-line interface."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from text_svm.cli import BUNDLE_ENVVAR, main


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestVectorize:

    def test_json_output(self, runner: CliRunner, make_bundle):
        bundle = make_bundle()
        result = runner.invoke(
            main, ["vectorize", "--bundle", str(bundle), "-o", "json", "buy buy now"]
        )
        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {"1": 1.0}

    def test_text_from_file(self, runner: CliRunner, make_bundle, tmp_path: Path):
        text_file = tmp_path / "doc.txt"
        text_file.write_text("buy buy now", encoding="utf-8")
        result = runner.invoke(
            main,
            ["vectorize", "--bundle", str(make_bundle()), "--file", str(text_file), "-o", "json"],
        )
        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {"1": 1.0}

    def test_rich_output(self, runner: CliRunner, make_bundle):
        result = runner.invoke(main, ["vectorize", "--bundle", str(make_bundle()), "buy now"])
        assert result.exit_code == 0, result.output
        assert "buy" in result.output

    def test_no_matches(self, runner: CliRunner, make_bundle):
        result = runner.invoke(main, ["vectorize", "--bundle", str(make_bundle()), "hello"])
        assert result.exit_code == 0
        assert "No vocabulary terms" in result.output

    def test_bundle_from_environment(self, runner: CliRunner, make_bundle):
        result = runner.invoke(
            main, ["vectorize", "-o", "json", "buy"], env={BUNDLE_ENVVAR: str(make_bundle())}
        )
        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {"1": 1.0}

    def test_missing_text(self, runner: CliRunner, make_bundle):
        result = runner.invoke(main, ["vectorize", "--bundle", str(make_bundle())])
        assert result.exit_code != 0

    def test_broken_bundle(self, runner: CliRunner, make_bundle):
        bundle = make_bundle(features=None)
        result = runner.invoke(main, ["vectorize", "--bundle", str(bundle), "buy"])
        assert result.exit_code == 1
        assert "feature_mmt.txt" in result.output


class TestInfo:

    def test_json_summary(self, runner: CliRunner, make_bundle):
        result = runner.invoke(main, ["info", "--bundle", str(make_bundle()), "-o", "json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["classes"] == ["spam", "ham"]
        assert data["num_features"] == 2
        assert data["num_documents"] == 2
        assert data["idf_min"] == 0.0

    def test_rich_summary(self, runner: CliRunner, make_bundle):
        result = runner.invoke(main, ["info", "--bundle", str(make_bundle())])
        assert result.exit_code == 0, result.output
        assert "spam" in result.output
        assert "ham" in result.output


class TestClassify:

    def test_missing_model(self, runner: CliRunner, make_bundle):
        result = runner.invoke(main, ["classify", "--bundle", str(make_bundle()), "buy"])
        assert result.exit_code == 1
        assert "train.date.model" in result.output

    def test_classify_json(self, runner: CliRunner, make_bundle, tmp_path: Path, records):
        svmutil = pytest.importorskip("libsvm.svmutil")
        model = svmutil.svm_train(
            [r.label for r in records], [dict(r.features) for r in records], "-q -t 0 -c 100"
        )
        model_path = tmp_path / "model"
        svmutil.svm_save_model(str(model_path), model)
        bundle = make_bundle(model=model_path.read_bytes())

        result = runner.invoke(
            main, ["classify", "--bundle", str(bundle), "-o", "json", "buy buy now"]
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["label"] == "spam"
        assert data["label_index"] == 1
