import math
import os
from datetime import datetime
from pathlib import PurePath
from typing import List, Optional, Union

from .models import FileRecord, parent_and_grandparent
from . import config

# NOTE: fields are wrapped in double quotes but never escaped. A file name
# containing '"' or the separator produces a malformed row; header and rows
# follow the same rule.


def _text(value) -> str:
    """str() that survives undecodable file names (lossy, U+FFFD)."""
    s = str(value)
    try:
        s.encode("utf-8")
    except UnicodeEncodeError:
        s = os.fsencode(s).decode("utf-8", errors="replace")
    return s


def _epoch(ts: Optional[float]) -> str:
    return "" if ts is None else str(math.floor(ts))


def _local(ts: Optional[float]) -> str:
    if ts is None:
        return ""
    return datetime.fromtimestamp(ts).strftime(config.LOCAL_TIME_FORMAT)


def _join(values: List[str], separator: str) -> str:
    return separator.join(f'"{v}"' for v in values)


def header_line(separator: str = config.DEFAULT_SEPARATOR, extended: bool = False) -> str:
    """Quoted column names, in the same order record_line emits values."""
    fields = list(config.CSV_FIELDS)
    if extended:
        fields += config.EXTENDED_CSV_FIELDS
    return _join(fields, separator)


def record_line(record: FileRecord,
                root: Optional[Union[str, PurePath]] = None,
                separator: str = config.DEFAULT_SEPARATOR,
                extended: bool = False) -> str:
    """
    Renders one record as a CSV line (without the trailing newline).

    `root` is stripped from the front of the entry path for the rel_path
    column; without it rel_path is the entry path as listed.
    """
    # Resolve once so full_path and the parent columns describe the same path
    try:
        canonical = record.canonical_path()
    except OSError as e:
        full_path = _text(e)
        parent_dir, parent_parent = None, None
    else:
        full_path = _text(canonical)
        parent_dir, parent_parent = parent_and_grandparent(canonical.parts)

    values = [
        _text(record.relative_path(root)),
        _text(record.file_name),
        str(record.size_bytes),
        _epoch(record.created_at),
        _epoch(record.modified_at),
        _epoch(record.accessed_at),
        record.content_hash,
        _text(parent_dir or ""),
        _text(parent_parent or ""),
        full_path,
    ]
    if extended:
        values += [
            _text(root) if root is not None else "",
            _local(record.created_at),
            _local(record.modified_at),
            _local(record.accessed_at),
        ]
    return _join(values, separator)
