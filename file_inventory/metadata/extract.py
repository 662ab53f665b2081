import os
from typing import Optional

from ..models import FileMeta


class MetadataExtractor:
    """
    Reads size and timestamps for directory entries.

    Every timestamp is optional on its own: a platform that does not report
    creation time still yields size, mtime and atime. Only a failing stat
    call is an error.
    """

    def extract(self, entry: os.DirEntry) -> FileMeta:
        # DirEntry.stat caches the result (free on Windows, one syscall elsewhere)
        return self.from_stat(entry.stat(follow_symlinks=False))

    def from_stat(self, st: os.stat_result) -> FileMeta:
        return FileMeta(
            size_bytes=st.st_size,
            created_at=self._created(st),
            modified_at=getattr(st, "st_mtime", None),
            accessed_at=getattr(st, "st_atime", None),
        )

    def _created(self, st: os.stat_result) -> Optional[float]:
        birth = getattr(st, "st_birthtime", None)
        if birth is not None:
            return birth
        # Before 3.12 Windows reports creation time in st_ctime
        if os.name == "nt":
            return getattr(st, "st_ctime", None)
        return None
