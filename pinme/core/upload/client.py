"""
Upload client.

Sends a file or a whole directory tree to the storage service's add
endpoint as one multipart request and records the result in the history.
"""
import asyncio
import json
import os
import time
from contextlib import ExitStack
from pathlib import Path
from typing import Any, List, Optional, Tuple, Union
from urllib.parse import quote

import aiohttp

from ..device import PinmeContext
from ..exceptions import (
    PinmeIOError,
    SizeLimitExceeded,
    HashNotFound,
    RemoteError,
    NetworkError,
)
from ..history import HistoryStore, UploadRecord
from ..logging import get_logger
from ..types import UploadKind
from .limits import SizeLimiter, format_size
from .models import AddResponse, SizeCheckResult, UploadOutcome
from .walker import DirectoryWalker

FORM_FIELD = 'file'

# Application codes carried in error bodies of the add endpoint
ERROR_FILE_TOO_LARGE = 30001
ERROR_STORAGE_QUOTA = 30002

# Characters encodeURIComponent leaves alone
_URI_COMPONENT_SAFE = "-_.!~*'()"


def encode_file_name(name: str) -> str:
    """Percent-encode a file name the way encodeURIComponent does."""
    return quote(name, safe=_URI_COMPONENT_SAFE)


class UploadClient:
    """
    Uploads files and directories to the add endpoint.

    The aiohttp session is shared with the caller; this class never closes a
    session it was given.
    """

    def __init__(
        self,
        context: PinmeContext,
        session: aiohttp.ClientSession,
        history: Optional[HistoryStore] = None,
        limiter: Optional[SizeLimiter] = None
    ):
        """
        Initialize upload client.

        Args:
            context: Configuration and device identifier
            session: HTTP session used for the request
            history: History store (built from config if not provided)
            limiter: Size limiter (built from config if not provided)
        """
        self._context = context
        self._session = session
        self._history = history or HistoryStore.from_config(context.config)
        self._limiter = limiter or SizeLimiter.from_config(context.config)
        self._walker = DirectoryWalker(self._limiter)
        self._logger = get_logger('pinme.upload')

    @property
    def history(self) -> HistoryStore:
        return self._history

    async def upload(self, path: Union[str, Path]) -> UploadOutcome:
        """
        Upload a file or directory.

        Raises:
            PinmeIOError: If the path does not exist
            SizeLimitExceeded: If a size limit is exceeded (nothing is sent)
            InvalidResponse: If the response payload is malformed
            HashNotFound: If the response lacks the uploaded item
            RemoteError: If the service rejects the upload
            NetworkError: If the service cannot be reached
        """
        if not os.path.exists(path):
            raise PinmeIOError(f"Path {path} does not exist")

        if os.path.isdir(path):
            return await self.upload_directory(path)
        return await self.upload_file(path)

    async def upload_file(self, path: Union[str, Path]) -> UploadOutcome:
        """Upload a single file."""
        path = Path(path)
        if not path.is_file():
            raise PinmeIOError(f"Path is not a file: {path}")

        check = self._limiter.check_file(path)
        self._raise_if_exceeds(check, 'File', path)

        file_name = path.name
        parts = [(encode_file_name(file_name), path)]
        response = await self._post_files(parts, str(path))

        entry = response.find(file_name)
        if entry is None:
            raise HashNotFound("File hash not found in response", expected_name=file_name)

        self._logger.info(f"Uploaded {path} -> {entry.hash}")
        record = UploadRecord.create(
            source_path=str(path),
            display_name=file_name,
            content_hash=entry.hash,
            size_bytes=check.observed_bytes,
            file_count=1,
            kind=UploadKind.FILE,
            short_alias=entry.short_url,
        )
        return self._finish(record)

    async def upload_directory(self, path: Union[str, Path]) -> UploadOutcome:
        """Upload a directory tree in one request."""
        root = self._normalize_root(path)
        if not root.is_dir():
            raise PinmeIOError(f"Path must be a directory: {root}")

        check = self._limiter.check_directory(root)
        self._raise_if_exceeds(check, 'Directory', root)

        dist = root.name
        entries = self._walker.enumerate(root)
        response = await self._post_files(
            [(entry.transport_name, entry.absolute_path) for entry in entries],
            str(root)
        )

        entry = response.find(dist)
        if entry is None:
            raise HashNotFound("Directory hash not found in response", expected_name=dist)

        self._logger.info(f"Uploaded {root} ({len(entries)} files) -> {entry.hash}")
        record = UploadRecord.create(
            source_path=str(root),
            display_name=dist,
            content_hash=entry.hash,
            size_bytes=check.observed_bytes,
            file_count=len(entries),
            kind=UploadKind.DIRECTORY,
            short_alias=entry.short_url,
        )
        return self._finish(record)

    @staticmethod
    def _normalize_root(path: Union[str, Path]) -> Path:
        # abspath drops a trailing separator and gives '.' a real base name
        return Path(os.path.abspath(path))

    @staticmethod
    def _raise_if_exceeds(check: SizeCheckResult, label: str, path: Path) -> None:
        if check.exceeds:
            raise SizeLimitExceeded(
                f"{label} {path} exceeds size limit of "
                f"{format_size(check.limit_bytes)} "
                f"(size: {format_size(check.observed_bytes)})",
                size=check.observed_bytes,
                limit=check.limit_bytes,
                path=path
            )

    def _finish(self, record: UploadRecord) -> UploadOutcome:
        saved = self._history.save(record)
        if not saved:
            self._logger.warning(f"Upload of {record.source_path} succeeded but history was not saved")
        return UploadOutcome(
            content_hash=record.content_hash,
            short_alias=record.short_alias,
            record=record if saved else None
        )

    async def _post_files(self, parts: List[Tuple[str, Path]], label: str) -> AddResponse:
        """
        Send all parts in one multipart POST and parse the response.

        Args:
            parts: (filename, path) pairs
            label: What is being uploaded, for log messages
        """
        config = self._context.config
        params = {'uid': self._context.device_id, 'cidV': '1'}
        request_kwargs = {}
        timeout = config.timeout.upload_timeout()
        if timeout is not None:
            request_kwargs['timeout'] = timeout

        upload_start = time.time()
        self._logger.debug(f"Uploading {label} as {len(parts)} part(s) to {config.add_url}")

        with ExitStack() as stack:
            # Transport names are already escaped; aiohttp must not quote them again.
            form = aiohttp.FormData(quote_fields=False)
            try:
                for file_name, file_path in parts:
                    handle = stack.enter_context(open(file_path, 'rb'))
                    form.add_field(
                        FORM_FIELD,
                        handle,
                        filename=file_name,
                        content_type='application/octet-stream'
                    )
            except OSError as e:
                raise PinmeIOError(f"Cannot open file for upload: {e}")

            try:
                async with self._session.post(
                    config.add_url,
                    params=params,
                    data=form,
                    **request_kwargs
                ) as response:
                    status = response.status
                    payload = self._decode(await response.text())
            except asyncio.TimeoutError:
                self._logger.error(f"Upload of {label} timed out")
                raise NetworkError(
                    "Upload timed out",
                    hint="Please check your internet connection and try again"
                )
            except aiohttp.ClientError as e:
                self._logger.error(f"Network error uploading {label}: {e}")
                raise NetworkError(
                    f"Network error: {e}",
                    hint="Please check your internet connection and try again"
                )

        self._logger.debug(f"Add request finished with HTTP {status} in {time.time() - upload_start:.2f}s")

        if status >= 400:
            raise self._translate_error(status, payload)

        return AddResponse.from_payload(payload)

    @staticmethod
    def _decode(text: str) -> Any:
        try:
            return json.loads(text) if text else None
        except ValueError:
            return None

    def _translate_error(self, status: int, payload: Any) -> RemoteError:
        """Map an HTTP error body to a RemoteError with a readable message."""
        config = self._context.config
        code = None
        message = None
        if isinstance(payload, dict):
            try:
                code = int(payload.get('code'))
            except (TypeError, ValueError):
                code = None
            message = payload.get('msg') or payload.get('message')

        if code == ERROR_FILE_TOO_LARGE:
            text = (
                f"File too large, single file max size: {config.file_size_limit_mb}MB, "
                f"single folder max size: {config.directory_size_limit_mb}MB"
            )
        elif code == ERROR_STORAGE_QUOTA:
            if config.storage_size_limit_mb is not None:
                text = f"Max storage quorum {config.storage_size_limit_mb / 1000:g} GB reached"
            else:
                text = "Max storage quorum reached"
        else:
            text = message or f"Request failed with status code {status}"
            self._logger.error(f"Upload rejected with HTTP {status}: {text}")
            return RemoteError(text, error_code=code, status=status)

        self._logger.error(f"Upload rejected: {text} (Code: {code})")
        return RemoteError(f"{text} (Code: {code})", error_code=code, status=status)
