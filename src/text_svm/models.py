"""Data models shared by the parser, corpus, and classifier."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

SparseVector = dict[int, float]


@dataclass(frozen=True)
class TrainingRecord:
    """A single labeled line of training data.

    ``features`` maps a feature index to the weight stored in the training
    file. It is wrapped in a read-only mapping on creation.
    """

    label: int
    features: Mapping[int, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "features", MappingProxyType(dict(self.features)))

    def __contains__(self, index: int) -> bool:
        return index in self.features

    def __len__(self) -> int:
        return len(self.features)


@dataclass
class ClassificationResult:
    """Result of classifying a single text."""

    label: str
    label_index: int
    score: float
    vector: SparseVector = field(default_factory=dict)

    @property
    def is_classified(self) -> bool:
        return self.label != ""

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "label_index": self.label_index,
            "score": self.score,
            "vector": {str(k): round(v, 6) for k, v in sorted(self.vector.items())},
        }
