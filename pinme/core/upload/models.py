"""
Data models for the upload module.

Uses dataclasses for immutable, type-safe data structures. The add
endpoint's JSON is validated here so the client never works with
half-formed dictionaries.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, TYPE_CHECKING

from ..exceptions import InvalidResponse
from ..types import UploadKind

if TYPE_CHECKING:
    from ..history.models import UploadRecord


@dataclass(frozen=True)
class SizeCheckResult:
    """
    Outcome of a size check.

    Attributes:
        observed_bytes: Size found on disk
        limit_bytes: Configured limit
        exceeds: True if observed_bytes > limit_bytes
    """
    observed_bytes: int
    limit_bytes: int
    exceeds: bool


@dataclass(frozen=True)
class FileEntry:
    """
    A file to send in a directory upload.

    Attributes:
        transport_name: Path relative to the root's parent, separators as '%2F'
        absolute_path: Location on disk
    """
    transport_name: str
    absolute_path: Path


@dataclass(frozen=True)
class AddResponseEntry:
    """One element of the add endpoint's 'data' list."""
    name: str
    hash: str
    size: str = ''
    short_url: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> 'AddResponseEntry':
        """
        Create from a response element.

        Raises:
            InvalidResponse: If Name or Hash is missing or not a string
        """
        if not isinstance(data, dict):
            raise InvalidResponse("Invalid response format from IPFS: entry is not an object")

        name = data.get('Name')
        content_hash = data.get('Hash')
        if not isinstance(name, str) or not isinstance(content_hash, str):
            raise InvalidResponse("Invalid response format from IPFS: entry lacks Name or Hash")

        short_url = data.get('ShortUrl') or None
        return cls(
            name=name,
            hash=content_hash,
            size=str(data.get('Size', '')),
            short_url=str(short_url) if short_url is not None else None,
        )


@dataclass(frozen=True)
class AddResponse:
    """
    Parsed body of a successful add request.

    Example:
        >>> resp = AddResponse.from_payload({'data': [{'Name': 'a.txt', 'Hash': 'bafk...'}]})
        >>> resp.find('a.txt').hash
        'bafk...'
    """
    entries: List[AddResponseEntry] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Any) -> 'AddResponse':
        """
        Validate and parse the JSON payload.

        Raises:
            InvalidResponse: If 'data' is missing, not a list, or empty
        """
        if not isinstance(payload, dict):
            raise InvalidResponse("Invalid response format from IPFS")

        data = payload.get('data')
        if not isinstance(data, list) or not data:
            raise InvalidResponse("Invalid response format from IPFS")

        return cls(entries=[AddResponseEntry.from_dict(item) for item in data])

    def find(self, name: str) -> Optional[AddResponseEntry]:
        """Return the first entry whose Name equals name."""
        for entry in self.entries:
            if entry.name == name:
                return entry
        return None


@dataclass(frozen=True)
class UploadOutcome:
    """
    Result of a successful upload.

    Attributes:
        content_hash: Content identifier returned by the service
        short_alias: Short alias (subname), if the service assigned one
        record: History record, or None if saving history failed
    """
    content_hash: str
    short_alias: Optional[str] = None
    record: Optional['UploadRecord'] = None
