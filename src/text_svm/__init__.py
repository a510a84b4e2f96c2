"""text-svm -- TF-IDF vectorization and SVM text classification over a fixed corpus."""

__version__ = "0.1.0"

from .archive import MemoryArchive, ResourceNotFoundError
from .classifier import (
    LibsvmPredictor,
    Predictor,
    TextClassifier,
    libsvm_classifier,
    libsvm_from_archive,
)
from .corpus import Corpus, VocabularyTokenizer
from .lines import read_class_names, read_feature_names, travel_lines
from .models import ClassificationResult, SparseVector, TrainingRecord
from .training import compute_idf, idf, load_training, parse_record

__all__ = [
    # Core
    "Corpus",
    "VocabularyTokenizer",
    "TrainingRecord",
    "SparseVector",
    # Training data
    "parse_record",
    "load_training",
    "idf",
    "compute_idf",
    # Files and bundles
    "MemoryArchive",
    "ResourceNotFoundError",
    "read_class_names",
    "read_feature_names",
    "travel_lines",
    # Classification
    "Predictor",
    "LibsvmPredictor",
    "TextClassifier",
    "ClassificationResult",
    "libsvm_classifier",
    "libsvm_from_archive",
]
