import os
from dataclasses import dataclass, field
from pathlib import Path, PurePath
from typing import List, Optional, Sequence, Tuple, Union

from .exceptions import NotAFileOrDirectoryError


@dataclass(frozen=True)
class FileMeta:
    """
    Filesystem metadata for one file. Timestamps are epoch seconds.
    """
    size_bytes: int
    created_at: Optional[float] = None
    modified_at: Optional[float] = None
    accessed_at: Optional[float] = None


def parent_and_grandparent(parts: Sequence[str]) -> Tuple[Optional[str], Optional[str]]:
    """
    Names of the directory holding the last segment and the one above it.

    `parts` is an ordered list of path segments, e.g. Path.parts of a
    canonical path ('/', 'home', 'me', 'a.txt' -> ('me', 'home')).
    """
    n = len(parts)
    parent = parts[n - 2] if n >= 2 else None
    grandparent = parts[n - 3] if n >= 3 else None
    return parent, grandparent


@dataclass(frozen=True)
class FileRecord:
    """
    A regular file found during a scan: where it was listed, its metadata
    and its content hash. Holds no open handle, so nothing goes stale.
    """
    entry_path: Path
    meta: FileMeta
    content_hash: str

    @classmethod
    def from_entry(cls, entry: os.DirEntry, hasher, extractor) -> "FileRecord":
        """
        Costly constructor: reads the metadata and hashes the whole file.

        Symlinks are never followed. Raises IsADirectoryError for directories,
        NotAFileOrDirectoryError for anything else that is not a regular file,
        and lets the OSError of a failed stat/read propagate.
        """
        if entry.is_file(follow_symlinks=False):
            meta = extractor.extract(entry)
            content_hash = hasher.compute_hash(entry.path)
            return cls(entry_path=Path(entry.path), meta=meta, content_hash=content_hash)
        if entry.is_dir(follow_symlinks=False):
            raise IsADirectoryError(f"Is a directory: {entry.path}")
        raise NotAFileOrDirectoryError(f"Not a file or directory: {entry.path}")

    @property
    def file_name(self) -> str:
        return self.entry_path.name

    @property
    def size_bytes(self) -> int:
        return self.meta.size_bytes

    @property
    def created_at(self) -> Optional[float]:
        return self.meta.created_at

    @property
    def modified_at(self) -> Optional[float]:
        return self.meta.modified_at

    @property
    def accessed_at(self) -> Optional[float]:
        return self.meta.accessed_at

    def canonical_path(self) -> Path:
        """Absolute, symlink-free path. Raises OSError if it cannot be resolved."""
        return self.entry_path.resolve(strict=True)

    def parent_names(self) -> Tuple[Optional[str], Optional[str]]:
        """(parent, grandparent) directory names, both None if resolution fails."""
        try:
            canonical = self.canonical_path()
        except OSError:
            return None, None
        return parent_and_grandparent(canonical.parts)

    def relative_path(self, root: Optional[Union[str, PurePath]] = None) -> Path:
        """
        entry_path with `root` stripped from the front, compared component-wise.
        Falls back to entry_path when there is no root or it is not a prefix.
        """
        if root is None:
            return self.entry_path
        try:
            return self.entry_path.relative_to(root)
        except ValueError:
            return self.entry_path


@dataclass
class ScanOutcome:
    """
    Result of a walk. Partial success is normal: rows that could be built
    were written, everything else is listed in `failures`.
    """
    rows_written: int = 0
    directories: int = 0
    failures: List[Tuple[Path, Exception]] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)  # symlinks, devices, ...

    @property
    def ok(self) -> bool:
        return not self.failures

    def summary(self) -> str:
        return (f"{self.rows_written} files written, {len(self.failures)} failures, "
                f"{len(self.skipped)} skipped in {self.directories} directories")
