"""
Configuration constants for the file inventory scanner.
"""

# --- Hashing & Performance ---
HASH_CHUNK_SIZE = 64 * 1024  # 64 KB chunks for reading

# Parallel file processing within one directory. 1 means sequential.
DEFAULT_MAX_WORKERS = 3
MAX_WORKERS_LIMIT = 8

# --- CSV Output ---
DEFAULT_SEPARATOR = ","

# Fixed column order; header and rows must agree.
CSV_FIELDS = [
    "rel_path",
    "file_name",
    "size",
    "created",
    "modified",
    "accessed",
    "sha256",
    "parent_dir",
    "parent_parent",
    "full_path",
]

# Appended after CSV_FIELDS when --extended is given
EXTENDED_CSV_FIELDS = [
    "seen_from",
    "created_local",
    "modified_local",
    "accessed_local",
]

LOCAL_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"

OUTPUT_ENCODING = "utf-8"
BOM_ENCODING = "utf-8-sig"  # codec writes the 3-byte BOM before the first write
