"""
PinmeClient - High-level async client for the pinme storage service.

Example:
    >>> async with PinmeClient() as pinme:
    ...     outcome = await pinme.upload("./dist")
    ...     print(pinme.preview_url(outcome.content_hash))
"""
from pathlib import Path
from typing import Optional, List, Union

import aiohttp

from .core.config import PinmeConfig
from .core.device import PinmeContext
from .core.exceptions import InvalidInput, PinmeException
from .core.history import HistoryStore, HistoryStats, UploadRecord
from .core.history.store import DEFAULT_LIST_LIMIT
from .core.logging import get_logger
from .core.remove import RemovalClient, RemovalTarget, parse_removal_input
from .core.upload import UploadClient, UploadOutcome
from .core.crypto import build_preview_url, alias_url


class PinmeClient:
    """
    High-level async client.

    Owns one aiohttp session for the lifetime of the ``async with`` block
    (unless a session is injected) and builds the context (configuration
    plus device id) exactly once.

    With custom configuration:
        >>> config = PinmeConfig(api_url="http://localhost:5001/api/v2")
        >>> async with PinmeClient(config) as pinme:
        ...     await pinme.remove("3abt6ztu")
    """

    def __init__(
        self,
        config: Optional[PinmeConfig] = None,
        *,
        session: Optional[aiohttp.ClientSession] = None,
        context: Optional[PinmeContext] = None
    ):
        """
        Initialize client.

        Args:
            config: Configuration (read from the environment if not provided)
            session: Optional shared HTTP session (not closed by this client)
            context: Optional prebuilt context; its config wins over config
        """
        self._config = context.config if context else (config or PinmeConfig.from_env())
        self._context = context
        self._session = session
        self._owns_session = False
        self._history = HistoryStore.from_config(self._config)
        self._logger = get_logger('pinme.client')

    # =========================================================================
    # Context manager
    # =========================================================================

    async def __aenter__(self) -> 'PinmeClient':
        """Enter async context - loads the device id and opens the session."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Exit async context - cleanup."""
        await self.close()

    async def start(self) -> None:
        if self._context is None:
            self._context = PinmeContext.create(self._config)
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True

    async def close(self) -> None:
        """Close the session if this client opened it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
        if self._owns_session:
            self._session = None
            self._owns_session = False

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def config(self) -> PinmeConfig:
        return self._config

    @property
    def context(self) -> PinmeContext:
        if self._context is None:
            raise PinmeException("Client is not started; use 'async with PinmeClient()'")
        return self._context

    @property
    def history_store(self) -> HistoryStore:
        return self._history

    def _require_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            raise PinmeException("Client is not started; use 'async with PinmeClient()'")
        return self._session

    # =========================================================================
    # Operations
    # =========================================================================

    async def upload(self, path: Union[str, Path]) -> UploadOutcome:
        """Upload a file or directory and record it in the history."""
        uploader = UploadClient(self.context, self._require_session(), history=self._history)
        return await uploader.upload(path)

    def parse_target(self, raw: str) -> RemovalTarget:
        """
        Parse a removal target.

        Raises:
            InvalidInput: If raw is not a hash, alias or one of their URLs
        """
        target = parse_removal_input(raw)
        if target is None:
            raise InvalidInput(f"Invalid input format: {raw}")
        return target

    async def remove(self, raw: str) -> RemovalTarget:
        """
        Remove content identified by a hash, alias or URL.

        Returns:
            The parsed target that was removed

        Raises:
            InvalidInput: If raw matches no known format (nothing is sent)
            RemoteError: If the service refuses
            NetworkError: If the service cannot be reached
        """
        target = self.parse_target(raw)
        remover = RemovalClient(self.context, self._require_session())
        await remover.remove_or_raise(target.value, target.kind)
        return target

    def history(self, limit: int = DEFAULT_LIST_LIMIT) -> List[UploadRecord]:
        return self._history.list(limit)

    def history_stats(self, records: List[UploadRecord]) -> HistoryStats:
        return HistoryStats.from_records(records)

    def clear_history(self) -> bool:
        return self._history.clear()

    def preview_url(self, content_hash: str) -> str:
        return build_preview_url(content_hash, self._config)

    @staticmethod
    def alias_url(short_alias: str) -> str:
        return alias_url(short_alias)
