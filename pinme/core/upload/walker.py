"""
Directory walker.

Flattens a directory tree into FileEntry objects whose transport names keep
the hierarchy as a single string ('site%2Fcss%2Fmain.css').
"""
import os
from pathlib import Path
from typing import List, Union

from ..exceptions import PinmeIOError, SizeLimitExceeded
from ..logging import get_logger
from .limits import SizeLimiter, format_size
from .models import FileEntry

ESCAPED_SEPARATOR = '%2F'


def escape_transport_name(relative_name: str) -> str:
    """Replace every path separator with '%2F'."""
    return relative_name.replace(os.sep, ESCAPED_SEPARATOR)


def unescape_transport_name(transport_name: str) -> str:
    """Inverse of escape_transport_name."""
    return transport_name.replace(ESCAPED_SEPARATOR, os.sep)


class DirectoryWalker:
    """
    Enumerates the leaf files of a directory tree.

    Every file is checked against the per-file limit while walking, so an
    oversized file aborts the walk before anything is sent.
    """

    def __init__(self, limiter: SizeLimiter):
        self._limiter = limiter
        self._logger = get_logger('pinme.upload.walker')

    def enumerate(self, root: Union[str, Path]) -> List[FileEntry]:
        """
        Walk root recursively.

        Args:
            root: Directory to walk

        Returns:
            FileEntry list in filesystem order (not sorted)

        Raises:
            PinmeIOError: If root is not a directory or cannot be read
            SizeLimitExceeded: If a single file exceeds the per-file limit
        """
        root = Path(os.path.abspath(root))
        if not root.is_dir():
            raise PinmeIOError(f"Path must be a directory: {root}")

        try:
            entries = self._walk(root, root.parent)
        except OSError as e:
            raise PinmeIOError(f"Cannot read directory {root}: {e}")

        self._logger.debug(f"Enumerated {len(entries)} files under {root}")
        return entries

    def _walk(self, directory: Path, base: Path) -> List[FileEntry]:
        entries: List[FileEntry] = []
        for child in directory.iterdir():
            if child.is_file():
                check = self._limiter.check_file(child)
                if check.exceeds:
                    raise SizeLimitExceeded(
                        f"File {child.name} exceeds size limit of "
                        f"{format_size(check.limit_bytes)} "
                        f"(size: {format_size(check.observed_bytes)})",
                        size=check.observed_bytes,
                        limit=check.limit_bytes,
                        path=child
                    )
                relative = os.path.relpath(child, base)
                entries.append(FileEntry(
                    transport_name=escape_transport_name(relative),
                    absolute_path=child.absolute()
                ))
            elif child.is_dir():
                entries.extend(self._walk(child, base))
        return entries
