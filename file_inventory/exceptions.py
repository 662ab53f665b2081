"""
Custom exception hierarchy for the file inventory scanner.

Per-file failures are plain OSError subclasses so the walker can collect
them alongside the I/O errors raised while hashing or reading metadata.
"""


class FileInventoryError(Exception):
    """Base exception for all file inventory errors."""
    pass


class NotAFileOrDirectoryError(FileInventoryError, OSError):
    """Raised when an entry is neither a regular file nor a directory (symlink, device, FIFO...)."""
    pass


class ScanSetupError(FileInventoryError):
    """Raised when the scan root cannot be listed at all."""
    pass


class OutputExistsError(FileInventoryError):
    """Raised when the destination CSV already exists."""
    pass
