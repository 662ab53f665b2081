import hashlib
from pathlib import Path
from typing import BinaryIO, Union

from .. import config


class FileHasher:
    def __init__(self, chunk_size: int = config.HASH_CHUNK_SIZE):
        self.chunk_size = chunk_size

    def compute_hash(self, path: Union[str, Path]) -> str:
        """
        SHA-256 of the full file content as lowercase hex.

        Reads in fixed-size chunks so memory stays bounded whatever the file
        size. Open/read errors propagate as OSError; a failed read never
        yields a digest.
        """
        with open(path, 'rb') as f:
            return self.hash_stream(f)

    def hash_stream(self, fileobj: BinaryIO) -> str:
        """Hashes whatever is left in an already-open binary handle."""
        h = hashlib.sha256()
        while chunk := fileobj.read(self.chunk_size):
            h.update(chunk)
        return h.hexdigest()
