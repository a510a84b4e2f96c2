"""Text classification on top of a frozen Corpus.

Joins the corpus vectorizer with an SVM decision function. The corpus only
depends on the ``Predictor`` protocol; ``LibsvmPredictor`` adapts a LIBSVM
model file to it.

Example::

    classify = libsvm_from_archive("news.zip")
    classify("央行 宣布 降息")   # "finance"
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import Iterable, Protocol

from .archive import MODEL_DATA, MemoryArchive
from .corpus import Corpus
from .models import ClassificationResult, SparseVector

logger = logging.getLogger(__name__)


class Predictor(Protocol):
    """Anything that maps a sparse feature vector to a class score."""

    def predict(self, vector: SparseVector) -> float:
        ...


def _svmutil():
    try:
        from libsvm import svmutil
    except ImportError as exc:
        raise ImportError(
            "libsvm is required for SVM prediction. Install it with: pip install libsvm-official"
        ) from exc
    return svmutil


class LibsvmPredictor:
    """Predictor backed by a trained LIBSVM model.

    Args:
        model: A loaded ``libsvm.svm.svm_model``.
    """

    def __init__(self, model) -> None:
        self._model = model

    @classmethod
    def from_file(cls, path: str | Path) -> "LibsvmPredictor":
        """Load a model saved with ``svm_save_model``.

        Raises:
            FileNotFoundError: If the model file does not exist.
            ValueError: If LIBSVM cannot parse the file.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Model file not found: {path}")

        model = _svmutil().svm_load_model(str(path))
        if model is None:
            raise ValueError(f"Cannot load LIBSVM model from {path}")
        return cls(model)

    @classmethod
    def from_bytes(cls, data: bytes) -> "LibsvmPredictor":
        """Load a model from its serialized bytes.

        LIBSVM only reads models from disk, so the bytes go through a
        temporary file.
        """
        with tempfile.TemporaryDirectory(prefix="text-svm-") as tmp_dir:
            path = Path(tmp_dir) / "model"
            path.write_bytes(data)
            return cls.from_file(path)

    @property
    def num_classes(self) -> int:
        return self._model.get_nr_class()

    def predict(self, vector: SparseVector) -> float:
        labels, _, _ = _svmutil().svm_predict([0], [vector], self._model, "-q")
        return labels[0]


class TextClassifier:
    """Callable mapping text to a class name.

    The predictor's score is truncated to an integer class index and
    resolved through the corpus. An index with no class name gives an
    empty string, which callers should treat as unclassified.

    Args:
        corpus: Frozen corpus used for vectorization and label lookup.
        predictor: Decision function over sparse vectors.
    """

    def __init__(self, corpus: Corpus, predictor: Predictor) -> None:
        self._corpus = corpus
        self._predictor = predictor

    @property
    def corpus(self) -> Corpus:
        return self._corpus

    def __call__(self, text: str | bytes) -> str:
        return self.classify(text)

    def classify(self, text: str | bytes) -> str:
        """Return the class name for ``text`` (empty if unclassified)."""
        return self.explain(text).label

    def classify_batch(self, texts: Iterable[str | bytes]) -> list[str]:
        return [self.classify(text) for text in texts]

    def explain(self, text: str | bytes) -> ClassificationResult:
        """Classify ``text`` and keep the intermediate vector and score."""
        vector = self._corpus.vector(text)
        score = self._predictor.predict(vector)
        index = int(score)
        label = self._corpus.label(index)
        if not label:
            logger.debug("predicted index %d has no class name", index)
        return ClassificationResult(label=label, label_index=index, score=score, vector=vector)


def libsvm_classifier(
    label_file: str | Path,
    feature_file: str | Path,
    train_file: str | Path,
    model_file: str | Path,
    encoding: str | None = None,
) -> TextClassifier:
    """Build a classifier from loose files on disk.

    Raises:
        FileNotFoundError: If any input file is missing.
    """
    corpus = Corpus.from_files(label_file, feature_file, train_file, encoding=encoding)
    return TextClassifier(corpus, LibsvmPredictor.from_file(model_file))


def libsvm_from_archive(path: str | Path) -> TextClassifier:
    """Build a classifier from a zip bundle.

    Raises:
        FileNotFoundError: If the archive does not exist.
        ResourceNotFoundError: If a required member is missing.
    """
    archive = MemoryArchive.open(path)
    model_data = archive.read(MODEL_DATA)
    corpus = Corpus.from_archive(archive)
    return TextClassifier(corpus, LibsvmPredictor.from_bytes(model_data))
