"""Training data parsing and inverse document frequency.

Training files hold one labeled document per line in the sparse LIBSVM
layout::

    <label> <index>:<weight> <index>:<weight> ...

Parsing is lenient: a malformed line or pair is logged and skipped so that a
single bad record never aborts loading a whole corpus. Read errors from the
underlying stream are not caught.
"""

from __future__ import annotations

import logging
import math
import re
from collections import Counter
from typing import IO, Iterable, Sequence, Union

from .models import TrainingRecord

logger = logging.getLogger(__name__)

# Smoothing term added to both sides of the IDF ratio
IDF_SMOOTHING = 0.01

_INT_RE = re.compile(r"[+-]?[0-9]+\Z")

LineSource = Union[IO[str], IO[bytes], Iterable[Union[str, bytes]]]


def _parse_int(value: str) -> int:
    if not _INT_RE.match(value):
        raise ValueError(f"invalid literal for int(): {value!r}")
    return int(value)


def iter_lines(source: LineSource, encoding: str = "utf-8") -> Iterable[str]:
    """Yield lines from a text stream, binary stream, or iterable of lines.

    Line terminators are removed. Bytes are decoded with ``encoding``;
    decoding and I/O errors propagate to the caller.
    """
    for raw in source:
        line = raw.decode(encoding) if isinstance(raw, bytes) else raw
        yield line.rstrip("\r\n")


def parse_record(line: str) -> TrainingRecord | None:
    """Parse one training line.

    Args:
        line: A line without its terminator.

    Returns:
        The parsed TrainingRecord, or None if the line has fewer than two
        fields or an invalid label. Invalid ``index:weight`` pairs are
        dropped from the record individually.
    """
    items = line.split(" ")
    if len(items) < 2:
        logger.warning("invalid line data: %r", line)
        return None

    try:
        label = _parse_int(items[0])
    except ValueError as e:
        logger.warning("invalid class label %r: %s", items[0], e)
        return None

    features: dict[int, float] = {}
    for item in items[1:]:
        item = item.strip()
        if not item:
            continue
        pair = item.split(":")
        if len(pair) != 2:
            logger.warning("invalid feature weight pair: %r", item)
            continue
        try:
            index = _parse_int(pair[0])
        except ValueError as e:
            logger.warning("invalid feature index %r: %s", pair[0], e)
            continue
        try:
            weight = float(pair[1])
        except ValueError as e:
            logger.warning("invalid feature weight %r: %s", pair[1], e)
            continue
        features[index] = weight

    return TrainingRecord(label=label, features=features)


def load_training(source: LineSource, encoding: str = "utf-8") -> list[TrainingRecord]:
    """Parse every line of a training stream into TrainingRecords.

    Args:
        source: Text or binary stream, or any iterable of lines.
        encoding: Encoding used for byte lines.

    Returns:
        Records in stream order. Malformed lines are skipped and logged.

    Raises:
        OSError: If reading the stream fails.
        UnicodeDecodeError: If a byte line cannot be decoded.
    """
    records: list[TrainingRecord] = []
    skipped = 0
    for line in iter_lines(source, encoding):
        record = parse_record(line)
        if record is None:
            skipped += 1
            continue
        records.append(record)

    if skipped:
        logger.info("loaded %d training records, skipped %d lines", len(records), skipped)
    return records


# ---------------------------------------------------------------------------
# Inverse document frequency
# ---------------------------------------------------------------------------

def _smoothed_idf(num_docs: int, doc_freq: int) -> float:
    return math.log((num_docs + IDF_SMOOTHING) / (doc_freq + IDF_SMOOTHING))


def idf(feature: int, records: Sequence[TrainingRecord]) -> float:
    """Smoothed IDF of one feature index.

    ``ln((N + 0.01) / (df + 0.01))`` where ``df`` counts records containing
    the index, regardless of its weight. Always finite, zero when the
    feature occurs in every record.
    """
    doc_freq = sum(1 for record in records if feature in record.features)
    return _smoothed_idf(len(records), doc_freq)


def compute_idf(feature_count: int, records: Sequence[TrainingRecord]) -> dict[int, float]:
    """Compute IDF for feature indices ``1..feature_count`` in one pass.

    Indices present in the records but outside the range are ignored.
    """
    doc_freq: Counter[int] = Counter()
    for record in records:
        doc_freq.update(record.features.keys())

    num_docs = len(records)
    return {
        index: _smoothed_idf(num_docs, doc_freq.get(index, 0))
        for index in range(1, feature_count + 1)
    }
