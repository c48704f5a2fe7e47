"""
Size limit checks for uploads.

Pure reads of filesystem metadata; nothing here touches the network.
"""
import os
from pathlib import Path
from typing import Union

from ..config import PinmeConfig
from ..exceptions import PinmeIOError
from .models import SizeCheckResult


def format_size(size: int) -> str:
    """Format a byte count as 'N bytes', 'x.xx KB', 'x.xx MB' or 'x.xx GB'."""
    if size < 1024:
        return f"{size} bytes"
    if size < 1024 * 1024:
        return f"{size / 1024:.2f} KB"
    if size < 1024 * 1024 * 1024:
        return f"{size / (1024 * 1024):.2f} MB"
    return f"{size / (1024 * 1024 * 1024):.2f} GB"


def calculate_directory_size(directory: Union[str, Path]) -> int:
    """
    Recursively sum the sizes of all regular files under directory.

    Raises:
        OSError: If an entry cannot be listed or stat'ed
    """
    total = 0
    for child in Path(directory).iterdir():
        if child.is_file():
            total += child.stat().st_size
        elif child.is_dir():
            total += calculate_directory_size(child)
    return total


class SizeLimiter:
    """
    Compares file and directory sizes against configured limits.

    Example:
        >>> limiter = SizeLimiter(file_limit=100 * 1024 * 1024, directory_limit=500 * 1024 * 1024)
        >>> limiter.check_file("photo.jpg").exceeds
        False
    """

    def __init__(self, file_limit: int, directory_limit: int):
        """
        Initialize limiter.

        Args:
            file_limit: Per-file limit in bytes
            directory_limit: Directory tree limit in bytes
        """
        self.file_limit = file_limit
        self.directory_limit = directory_limit

    @classmethod
    def from_config(cls, config: PinmeConfig) -> 'SizeLimiter':
        return cls(config.file_size_limit, config.directory_size_limit)

    def check_file(self, path: Union[str, Path]) -> SizeCheckResult:
        """
        Check a single file against the per-file limit.

        Raises:
            PinmeIOError: If the file cannot be stat'ed
        """
        try:
            size = os.stat(path).st_size
        except OSError as e:
            raise PinmeIOError(f"Cannot read {path}: {e}")

        return SizeCheckResult(
            observed_bytes=size,
            limit_bytes=self.file_limit,
            exceeds=size > self.file_limit
        )

    def check_directory(self, path: Union[str, Path]) -> SizeCheckResult:
        """
        Check a directory tree against the directory limit.

        Raises:
            PinmeIOError: If any part of the tree cannot be read
        """
        try:
            total = calculate_directory_size(path)
        except OSError as e:
            raise PinmeIOError(f"Cannot read directory {path}: {e}")

        return SizeCheckResult(
            observed_bytes=total,
            limit_bytes=self.directory_limit,
            exceeds=total > self.directory_limit
        )
