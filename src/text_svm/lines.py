"""Readers for the line-oriented class map and feature list files."""

from __future__ import annotations

from pathlib import Path
from typing import IO, Iterator, Union

from .training import LineSource, iter_lines

PathOrStream = Union[str, Path, IO[str], IO[bytes]]

COMMENT_PREFIX = "#"


def _open_lines(source: PathOrStream, encoding: str) -> Iterator[str]:
    if isinstance(source, (str, Path)):
        with open(source, "r", encoding=encoding) as f:
            yield from iter_lines(f)
    else:
        yield from iter_lines(source, encoding)


def travel_lines(
    source: LineSource,
    sep: str,
    encoding: str = "utf-8",
    skip_comments: bool = True,
) -> Iterator[tuple[str, list[str]]]:
    """Yield ``(line, fields)`` for each line, splitting the stripped line on ``sep``.

    Lines starting with ``#`` are skipped unless ``skip_comments`` is False.
    """
    for line in iter_lines(source, encoding):
        if skip_comments and line.startswith(COMMENT_PREFIX):
            continue
        yield line, line.strip().split(sep)


def read_class_names(source: PathOrStream, encoding: str = "utf-8") -> list[str]:
    """Read class names from a ``name:rest`` map.

    Only lines with exactly one colon contribute; the name is the stripped
    first field. Comment lines are skipped.

    Raises:
        FileNotFoundError: If ``source`` is a path that does not exist.
    """
    classes = []
    for _, fields in travel_lines(_open_lines(source, encoding), ":"):
        if len(fields) == 2:
            classes.append(fields[0].strip())
    return classes


def read_feature_names(
    source: PathOrStream,
    encoding: str = "utf-8",
    skip_comments: bool = False,
) -> list[str]:
    """Read one feature name per non-blank line, in file order.

    Bundled feature lists may carry ``#`` header lines; pass
    ``skip_comments=True`` to drop them before indices are assigned.
    """
    features = []
    for line in _open_lines(source, encoding):
        if skip_comments and line.startswith(COMMENT_PREFIX):
            continue
        feature = line.strip()
        if feature:
            features.append(feature)
    return features
