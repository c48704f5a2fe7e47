"""
History data models.

Records are serialized with the same keys the JavaScript pinme CLI writes,
so both tools can share ~/.pinme/upload-history.json.
"""
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..types import UploadKind

DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


@dataclass(frozen=True)
class UploadRecord:
    """
    One successful upload.

    Attributes:
        timestamp: Milliseconds since the epoch
        human_date: Local time as 'YYYY-MM-DD HH:MM:SS'
        source_path: Uploaded path
        display_name: Base name shown in listings
        content_hash: Content identifier
        size_bytes: Size from the pre-upload check
        file_count: Number of files sent
        kind: File or directory
        preview_hash: Always None for now
        short_alias: Short alias assigned by the service
    """
    timestamp: int
    human_date: str
    source_path: str
    display_name: str
    content_hash: str
    size_bytes: int
    file_count: int
    kind: UploadKind
    preview_hash: Optional[str] = None
    short_alias: Optional[str] = None

    @classmethod
    def create(
        cls,
        source_path: str,
        display_name: str,
        content_hash: str,
        size_bytes: int,
        file_count: int,
        kind: UploadKind,
        short_alias: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> 'UploadRecord':
        """Create a record stamped with the current time."""
        now = now or datetime.now()
        return cls(
            timestamp=int(now.timestamp() * 1000),
            human_date=now.strftime(DATE_FORMAT),
            source_path=source_path,
            display_name=display_name,
            content_hash=content_hash,
            size_bytes=size_bytes,
            file_count=max(file_count, 1),
            kind=kind,
            short_alias=short_alias or None,
        )

    @property
    def is_directory(self) -> bool:
        return self.kind is UploadKind.DIRECTORY

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the on-disk format."""
        return {
            'timestamp': self.timestamp,
            'date': self.human_date,
            'path': self.source_path,
            'filename': self.display_name,
            'contentHash': self.content_hash,
            'previewHash': self.preview_hash,
            'size': self.size_bytes,
            'fileCount': self.file_count,
            'type': self.kind.value,
            'shortUrl': self.short_alias,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'UploadRecord':
        """Create from the on-disk format."""
        timestamp = int(data.get('timestamp') or int(time.time() * 1000))
        return cls(
            timestamp=timestamp,
            human_date=data.get('date') or datetime.fromtimestamp(timestamp / 1000).strftime(DATE_FORMAT),
            source_path=data.get('path', ''),
            display_name=data.get('filename', ''),
            content_hash=data['contentHash'],
            size_bytes=int(data.get('size', 0)),
            file_count=int(data.get('fileCount', 1)),
            kind=UploadKind(data.get('type', UploadKind.FILE.value)),
            preview_hash=data.get('previewHash'),
            short_alias=data.get('shortUrl') or None,
        )


@dataclass
class UploadHistory:
    """Ordered upload records, newest first."""
    records: List[UploadRecord] = field(default_factory=list)

    def prepend(self, record: UploadRecord) -> None:
        self.records.insert(0, record)

    def to_dict(self) -> Dict[str, Any]:
        return {'uploads': [record.to_dict() for record in self.records]}

    @classmethod
    def from_dict(cls, data: Any) -> 'UploadHistory':
        """
        Create from the on-disk document.

        Raises:
            ValueError: If the document has no 'uploads' list of objects
        """
        if not isinstance(data, dict) or not isinstance(data.get('uploads'), list):
            raise ValueError("history document must contain an 'uploads' list")
        if not all(isinstance(item, dict) for item in data['uploads']):
            raise ValueError("history entries must be objects")
        return cls(records=[UploadRecord.from_dict(item) for item in data['uploads']])


@dataclass(frozen=True)
class HistoryStats:
    """Totals shown under the history listing."""
    total_uploads: int
    total_files: int
    total_size: int

    @classmethod
    def from_records(cls, records: List[UploadRecord]) -> 'HistoryStats':
        return cls(
            total_uploads=len(records),
            total_files=sum(record.file_count for record in records),
            total_size=sum(record.size_bytes for record in records),
        )
