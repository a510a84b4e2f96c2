"""Shared test fixtures for text-svm tests."""

from __future__ import annotations

import zipfile
from pathlib import Path

import pytest

from text_svm.corpus import Corpus
from text_svm.models import TrainingRecord

CLASS_MAP = "# class map\nspam:1\nham:2\n"
FEATURE_LIST = "buy\nnow\n"
TRAINING_DATA = "1 1:0.5 2:0.5\n2 2:1.0\n"


@pytest.fixture
def records() -> list[TrainingRecord]:
    """Two training records: label 1 with features 1 and 2, label 2 with feature 2."""
    return [
        TrainingRecord(label=1, features={1: 0.5, 2: 0.5}),
        TrainingRecord(label=2, features={2: 1.0}),
    ]


@pytest.fixture
def corpus(records: list[TrainingRecord]) -> Corpus:
    """The spam/ham corpus over the vocabulary ``buy``, ``now``."""
    return Corpus(["spam", "ham"], ["buy", "now"], records)


@pytest.fixture
def corpus_files(tmp_path: Path) -> dict[str, Path]:
    """Class map, feature list, and training file on disk."""
    files = {
        "labels": tmp_path / "name.map",
        "features": tmp_path / "feature_mmt.txt",
        "train": tmp_path / "train.date",
    }
    files["labels"].write_text(CLASS_MAP, encoding="utf-8")
    files["features"].write_text(FEATURE_LIST, encoding="utf-8")
    files["train"].write_text(TRAINING_DATA, encoding="utf-8")
    return files


@pytest.fixture
def make_bundle(tmp_path: Path):
    """Factory writing a zip bundle; pass ``None`` to omit a member."""

    def _make(
        name: str = "bundle.zip",
        class_map: str | None = CLASS_MAP,
        features: str | None = FEATURE_LIST,
        training: str | None = TRAINING_DATA,
        model: bytes | None = None,
    ) -> Path:
        path = tmp_path / name
        with zipfile.ZipFile(path, "w") as zf:
            if class_map is not None:
                zf.writestr("name.map", class_map)
            if features is not None:
                zf.writestr("feature_mmt.txt", features)
            if training is not None:
                zf.writestr("train.date", training)
            if model is not None:
                zf.writestr("train.date.model", model)
        return path

    return _make
