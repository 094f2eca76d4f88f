"""Access to datasets stored as a directory of part files.

The pipeline only needs two operations from a file system: list the parts
of a dataset with their sizes, and open one part for reading. Anything that
provides them (a local directory, a mounted distributed file system, a
test double) can be handed to :func:`flight_delay.ingest.read_table`.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, List

from flight_delay.exceptions import IngestionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PartInfo:
    path: str
    size: int


class FileSystem(ABC):
    @abstractmethod
    def list_parts(self, path: str) -> List[PartInfo]:
        raise NotImplementedError

    @abstractmethod
    def open(self, path: str) -> BinaryIO:
        raise NotImplementedError


class LocalFileSystem(FileSystem):
    """Datasets on the local disk. Parts are listed in name order."""

    def list_parts(self, path):
        root = Path(path)
        if root.is_file():
            return [PartInfo(str(root), root.stat().st_size)]
        if not root.is_dir():
            raise IngestionError(path, "no such file or directory")
        parts = [PartInfo(str(p), p.stat().st_size) for p in sorted(root.iterdir()) if p.is_file()]
        logger.debug("Listed %d parts under %s", len(parts), path)
        return parts

    def open(self, path):
        return open(path, "rb")
