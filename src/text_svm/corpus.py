"""Corpus model and TF-IDF vectorization.

A ``Corpus`` binds class names and feature names to 1-based indices, holds
the smoothed IDF of every feature computed from the training records, and
owns a tokenizer that only recognizes the feature vocabulary. It is built
once and never mutated afterward, so a single instance can be shared
across threads.

Example::

    corpus = Corpus(["spam", "ham"], ["buy", "now"], records)
    corpus.vector("buy buy now")   # {1: 1.0}
    corpus.label(1)                # "spam"
"""

from __future__ import annotations

import logging
import math
import tempfile
from collections import Counter
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping, Sequence

import jieba

from .archive import CLASS_MAP, FEATURE_LIST, TRAINING_DATA, MemoryArchive
from .lines import read_class_names, read_feature_names
from .models import SparseVector, TrainingRecord
from .training import compute_idf, load_training

logger = logging.getLogger(__name__)

jieba.setLogLevel(logging.WARNING)


# ---------------------------------------------------------------------------
# Closed-vocabulary tokenizer
# ---------------------------------------------------------------------------

class VocabularyTokenizer:
    """Dictionary matcher restricted to a fixed term list.

    Builds a ``jieba.Tokenizer`` whose dictionary contains only the given
    terms, all at the same frequency, and runs its max-probability route
    over the whole text, so matching prefers the fewest and longest
    dictionary words. Any character may appear in a term.

    A run of alphabetic-script letters and digits (code points below
    U+0800, as in Latin, Greek or Cyrillic words) is atomic: a term only
    matches a whole run, so ``buy`` is not found in ``buyer``. Ideographs,
    kana and Hangul match character by character. Text that is not part of
    a vocabulary term never produces a token.

    Args:
        terms: The vocabulary. Blank terms and terms containing whitespace
            are left out of the dictionary (its file format is
            space-separated).
    """

    # Uniform frequency written for every dictionary term
    _TERM_FREQ = 100

    def __init__(self, terms: Iterable[str]) -> None:
        vocabulary: dict[str, None] = {}
        for term in terms:
            if not term or any(ch.isspace() for ch in term):
                logger.debug("term %r left out of the tokenizer dictionary", term)
                continue
            vocabulary.setdefault(term, None)

        self._vocabulary = frozenset(vocabulary)
        self._segmenter = self._build_segmenter(list(vocabulary)) if vocabulary else None

    @classmethod
    def _build_segmenter(cls, terms: list[str]) -> jieba.Tokenizer:
        with tempfile.TemporaryDirectory(prefix="text-svm-") as tmp_dir:
            dict_path = Path(tmp_dir) / "vocabulary.txt"
            dict_path.write_text(
                "".join(f"{term} {cls._TERM_FREQ}\n" for term in terms),
                encoding="utf-8",
            )
            segmenter = jieba.Tokenizer(dictionary=str(dict_path))
            segmenter.tmp_dir = tmp_dir
            # Load eagerly while the dictionary file still exists
            segmenter.initialize()
        return segmenter

    @property
    def vocabulary(self) -> frozenset[str]:
        return self._vocabulary

    def __contains__(self, term: str) -> bool:
        return term in self._vocabulary

    def tokenize(self, text: str) -> list[str]:
        """Return the vocabulary terms found in ``text``, in order."""
        if self._segmenter is None or not text:
            return []

        boundary = _word_boundaries(text)
        dag: dict[int, list[int]] = {}
        for start, ends in self._segmenter.get_DAG(text).items():
            # A term may not cut through a word; a lone character is always a route step
            kept = [end for end in ends if boundary[start] and boundary[end + 1]]
            if start not in kept:
                kept.append(start)
            dag[start] = kept

        route: dict[int, tuple[float, int]] = {}
        self._segmenter.calc(text, dag, route)

        tokens = []
        x = 0
        while x < len(text):
            y = route[x][1] + 1
            piece = text[x:y]
            if piece in self._vocabulary and boundary[x] and boundary[y]:
                tokens.append(piece)
            x = y
        return tokens


# Letters and digits below this code point group into atomic words
_WORD_CHAR_LIMIT = 0x800


def _is_word_char(ch: str) -> bool:
    return ch.isalnum() and ord(ch) < _WORD_CHAR_LIMIT


def _word_boundaries(text: str) -> list[bool]:
    """``result[i]`` is True when a match may start or end at offset ``i``."""
    boundary = [True] * (len(text) + 1)
    for i in range(1, len(text)):
        if _is_word_char(text[i - 1]) and _is_word_char(text[i]):
            boundary[i] = False
    return boundary


# ---------------------------------------------------------------------------
# Corpus
# ---------------------------------------------------------------------------

def _index_names(names: Sequence[str]) -> dict[str, int]:
    """Map each name to ``position + 1``; the first occurrence of a name wins."""
    index: dict[str, int] = {}
    for position, name in enumerate(names):
        index.setdefault(name, position + 1)
    return index


class Corpus:
    """Frozen class/feature indices, IDF weights, and vocabulary tokenizer.

    Args:
        classes: Ordered class names; ``classes[i]`` gets index ``i + 1``.
        features: Ordered feature names; ``features[i]`` gets index ``i + 1``.
        records: Parsed training records used to compute IDF.
    """

    __slots__ = (
        "_classes",
        "_features",
        "_class_index",
        "_feature_index",
        "_idf",
        "_num_documents",
        "_tokenizer",
    )

    def __init__(
        self,
        classes: Sequence[str],
        features: Sequence[str],
        records: Sequence[TrainingRecord],
    ) -> None:
        set_ = super().__setattr__
        set_("_classes", tuple(classes))
        set_("_features", tuple(features))
        set_("_class_index", MappingProxyType(_index_names(self._classes)))
        set_("_feature_index", MappingProxyType(_index_names(self._features)))
        set_("_idf", MappingProxyType(compute_idf(len(self._features), records)))
        set_("_num_documents", len(records))
        set_("_tokenizer", VocabularyTokenizer(self._features))

        logger.debug(
            "built corpus: %d classes, %d features, %d training records",
            len(self._classes),
            len(self._features),
            self._num_documents,
        )

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __repr__(self) -> str:
        return (
            f"Corpus(classes={len(self._classes)}, features={len(self._features)}, "
            f"documents={self._num_documents})"
        )

    # ------------------------------------------------------------------
    # Loaders
    # ------------------------------------------------------------------

    @classmethod
    def from_files(
        cls,
        label_file: str | Path,
        feature_file: str | Path,
        train_file: str | Path,
        encoding: str | None = None,
    ) -> "Corpus":
        """Build a corpus from a class map, a feature list, and a training file.

        Args:
            label_file: ``name:rest`` class map.
            feature_file: One feature name per line.
            train_file: Training records.
            encoding: Source encoding of all three files (UTF-8 if None).

        Raises:
            FileNotFoundError: If any of the files does not exist.
        """
        encoding = encoding or "utf-8"
        with open(train_file, "r", encoding=encoding) as f:
            records = load_training(f)
        classes = read_class_names(label_file, encoding)
        features = read_feature_names(feature_file, encoding)
        return cls(classes, features, records)

    @classmethod
    def from_archive(cls, archive: MemoryArchive) -> "Corpus":
        """Build a corpus from the members of a bundle archive.

        Raises:
            ResourceNotFoundError: If the class map, feature list, or
                training data is missing from the archive.
        """
        class_stream = archive.get(CLASS_MAP)
        feature_stream = archive.get(FEATURE_LIST)
        train_stream = archive.get(TRAINING_DATA)

        classes = read_class_names(class_stream)
        features = read_feature_names(feature_stream, skip_comments=True)
        return cls(classes, features, load_training(train_stream))

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def classes(self) -> tuple[str, ...]:
        return self._classes

    @property
    def features(self) -> tuple[str, ...]:
        return self._features

    @property
    def idf(self) -> Mapping[int, float]:
        """Smoothed IDF keyed by feature index."""
        return self._idf

    @property
    def num_classes(self) -> int:
        return len(self._classes)

    @property
    def num_features(self) -> int:
        return len(self._features)

    @property
    def num_documents(self) -> int:
        """Number of training records the IDF was computed from."""
        return self._num_documents

    @property
    def tokenizer(self) -> VocabularyTokenizer:
        return self._tokenizer

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def class_index(self, name: str) -> int:
        """Index of a class name, or 0 if unknown."""
        return self._class_index.get(name, 0)

    def feature_index(self, name: str) -> int:
        """Index of a feature name, or 0 if unknown."""
        return self._feature_index.get(name, 0)

    def label(self, index: int) -> str:
        """Class name for ``index``, or an empty string if none is assigned."""
        return self._classes[index - 1] if 1 <= index <= len(self._classes) else ""

    def feature(self, index: int) -> str:
        """Feature name for ``index``, or an empty string if none is assigned."""
        return self._features[index - 1] if 1 <= index <= len(self._features) else ""

    # ------------------------------------------------------------------
    # Vectorization
    # ------------------------------------------------------------------

    def tokenize(self, text: str | bytes) -> list[str]:
        """Vocabulary terms occurring in ``text``, in order."""
        return self._tokenizer.tokenize(_as_text(text))

    def term_counts(self, text: str | bytes) -> Counter[int]:
        """Occurrence count of each feature index in ``text``."""
        return Counter(self._feature_index[token] for token in self.tokenize(text))

    def vector(self, text: str | bytes) -> SparseVector:
        """Compute the L2-normalized TF-IDF vector of ``text``.

        Term frequency is relative to the number of vocabulary matches,
        not to the length of the text. Features whose weight is zero are
        omitted.

        Returns:
            Sparse vector keyed by feature index. Empty when no vocabulary
            term occurs in the text or every matched term has zero IDF.

        Raises:
            TypeError: If ``text`` is neither str nor bytes.
        """
        count = self.term_counts(text)
        total = sum(count.values())
        if total == 0:
            return {}

        tfidf: dict[int, float] = {}
        for index, n in count.items():
            weight = n / total * self._idf[index]
            if weight != 0.0:
                tfidf[index] = weight

        scalar = math.sqrt(sum(w * w for w in tfidf.values()))
        if scalar == 0.0 or not math.isfinite(scalar):
            return {}
        return {index: w / scalar for index, w in tfidf.items()}


def _as_text(text: str | bytes) -> str:
    if isinstance(text, bytes):
        return text.decode("utf-8", errors="replace")
    if isinstance(text, str):
        return text
    raise TypeError(f"expected str or bytes, got {type(text).__name__}")
