"""
Archive Sources

An archive yields the raw (id, bytes) records of one config category. The
binary cache container is handled elsewhere; anything that can enumerate
records in id order satisfies ArchiveSource.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Protocol

logger = logging.getLogger(__name__)


# Location of item records below a cache read path
ITEM_ARCHIVE_PATH = Path("configs") / "item"
RECORD_SUFFIX = ".dat"


@dataclass(frozen=True)
class ArchiveRecord:
    """One raw record from an archive."""
    file_id: int
    contents: bytes

    def __repr__(self):
        return f"ArchiveRecord({self.file_id}, {len(self.contents)} bytes)"


class ArchiveSource(Protocol):
    """Enumerates raw records, ordered by file id."""

    def records(self) -> Iterator[ArchiveRecord]:
        ...


class StaticArchive:
    """Archive backed by records already held in memory."""

    def __init__(self, records: Iterable[ArchiveRecord]):
        self._records: List[ArchiveRecord] = sorted(records, key=lambda r: r.file_id)
        negative = [r.file_id for r in self._records if r.file_id < 0]
        if negative:
            raise ValueError(f"Record ids must be non-negative, got {negative}")

    @classmethod
    def from_mapping(cls, data: dict) -> "StaticArchive":
        """Build from a {file_id: bytes} mapping."""
        return cls(ArchiveRecord(file_id, contents) for file_id, contents in data.items())

    def records(self) -> Iterator[ArchiveRecord]:
        return iter(self._records)

    def __len__(self):
        return len(self._records)


class DirectoryArchive:
    """
    Archive stored as one file per record.

    Records live in ``<cache>/configs/item/<id>.dat``. Files whose stem is not
    a non-negative integer are ignored.
    """

    def __init__(self, cache_path: Path, archive_path: Path = ITEM_ARCHIVE_PATH):
        self.cache_path = Path(cache_path)
        self.root = self.cache_path / archive_path

    def _record_files(self) -> List[tuple]:
        if not self.root.is_dir():
            raise FileNotFoundError(f"Item archive not found: {self.root}")

        found = []
        for path in self.root.iterdir():
            if not path.is_file() or path.suffix != RECORD_SUFFIX:
                continue
            if not (path.stem.isascii() and path.stem.isdecimal()):
                logger.debug(f"Skipping non-record file {path.name}")
                continue
            found.append((int(path.stem), path))
        found.sort(key=lambda x: x[0])
        return found

    def records(self) -> Iterator[ArchiveRecord]:
        for file_id, path in self._record_files():
            yield ArchiveRecord(file_id, path.read_bytes())

    def __repr__(self):
        return f"DirectoryArchive({self.root})"
