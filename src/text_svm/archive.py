"""In-memory zip bundles.

A corpus bundle is a zip archive holding the class map, the feature list,
the training records and the serialized SVM model. ``MemoryArchive`` reads
every member once on open; the resulting mapping is read-only.
"""

from __future__ import annotations

import io
import logging
import zipfile
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

logger = logging.getLogger(__name__)

CLASS_MAP = "name.map"
FEATURE_LIST = "feature_mmt.txt"
TRAINING_DATA = "train.date"
MODEL_DATA = "train.date.model"


class ResourceNotFoundError(FileNotFoundError):
    """A required member is missing from an archive."""

    def __init__(self, archive: str, member: str) -> None:
        super().__init__(f"{archive} not found file {member}")
        self.archive = archive
        self.member = member


class MemoryArchive:
    """Immutable map of archive member names to their bytes.

    Example::

        archive = MemoryArchive.open("corpus.zip")
        model_bytes = archive.read("train.date.model")
    """

    __slots__ = ("_path", "_files")

    def __init__(self, path: str, files: Mapping[str, bytes]) -> None:
        self._path = path
        self._files = MappingProxyType(dict(files))

    @classmethod
    def open(cls, path: str | Path) -> "MemoryArchive":
        """Load every file member of a zip archive into memory.

        Raises:
            FileNotFoundError: If the archive does not exist.
            zipfile.BadZipFile: If the file is not a zip archive.
        """
        files: dict[str, bytes] = {}
        with zipfile.ZipFile(Path(path).resolve()) as zf:
            for info in zf.infolist():
                if info.is_dir():
                    continue
                files[info.filename] = zf.read(info)

        logger.debug("loaded %d members from %s", len(files), path)
        return cls(str(path), files)

    @property
    def path(self) -> str:
        return self._path

    @property
    def names(self) -> list[str]:
        return sorted(self._files)

    def __contains__(self, member: str) -> bool:
        return member in self._files

    def read(self, member: str) -> bytes:
        """Return the raw bytes of ``member``.

        Raises:
            ResourceNotFoundError: If the member is not in the archive.
        """
        try:
            return self._files[member]
        except KeyError:
            raise ResourceNotFoundError(self._path, member) from None

    def get(self, member: str) -> io.BytesIO:
        """Return a fresh binary stream over ``member``."""
        return io.BytesIO(self.read(member))
