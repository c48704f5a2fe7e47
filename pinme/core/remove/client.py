"""
Removal client.

Asks the storage service to unpin content by hash or short alias.
Local history is left untouched.
"""
import asyncio
import json
from typing import Any, Optional, Union

import aiohttp

from ..device import PinmeContext
from ..exceptions import RemoteError, NetworkError
from ..logging import get_logger
from .parser import RemovalKind

SUCCESS_CODE = 200

STATUS_HINTS = {
    404: 'Content not found on the network or already removed',
    403: 'Permission denied - you may not have access to remove this content',
    500: 'Server internal error - please try again later',
}

NETWORK_HINT = 'Please check your internet connection and try again'


class RemovalClient:
    """Calls the block/rm endpoint."""

    def __init__(self, context: PinmeContext, session: aiohttp.ClientSession):
        """
        Initialize removal client.

        Args:
            context: Configuration and device identifier
            session: HTTP session used for the request
        """
        self._context = context
        self._session = session
        self._logger = get_logger('pinme.remove')

    def _params(self, value: str, kind: RemovalKind) -> dict:
        params = {'uid': self._context.device_id}
        if kind is RemovalKind.SUBNAME:
            params['subname'] = value
        else:
            params['arg'] = value
        return params

    async def remove_or_raise(
        self,
        value: str,
        kind: Union[RemovalKind, str] = RemovalKind.HASH
    ) -> None:
        """
        Remove content, raising on any failure.

        Args:
            value: Content hash or short alias
            kind: What value is

        Raises:
            RemoteError: Non-200 application code or HTTP error status
            NetworkError: No response received
        """
        kind = RemovalKind(kind)
        config = self._context.config
        self._logger.info(f"Removing content from IPFS: {value}")

        try:
            async with self._session.post(
                config.remove_url,
                params=self._params(value, kind),
                timeout=config.timeout.remove_timeout()
            ) as response:
                status = response.status
                payload = self._decode(await response.text())
        except asyncio.TimeoutError:
            self._logger.error(f"Removal of {value} timed out")
            raise NetworkError("Network error: request timed out", hint=NETWORK_HINT)
        except aiohttp.ClientError as e:
            self._logger.error(f"Network error removing {value}: {e}")
            raise NetworkError("Network error: Unable to connect to IPFS service", hint=NETWORK_HINT)

        msg = payload.get('msg') if isinstance(payload, dict) else None

        if status >= 400:
            raise RemoteError(
                f"HTTP Error {status}: {msg or 'Server error'}",
                status=status,
                hint=STATUS_HINTS.get(status)
            )

        code = payload.get('code') if isinstance(payload, dict) else None
        if code != SUCCESS_CODE:
            raise RemoteError(
                msg or 'Unknown error occurred',
                error_code=code if isinstance(code, int) else None,
                status=status
            )

        self._logger.info(f"Content {kind.value}: {value} has been removed from IPFS network")

    async def remove(
        self,
        value: str,
        kind: Union[RemovalKind, str] = RemovalKind.HASH
    ) -> bool:
        """
        Remove content.

        Returns:
            True on success, False on any failure (details are logged)
        """
        try:
            await self.remove_or_raise(value, kind)
            return True
        except (RemoteError, NetworkError) as e:
            self._logger.error(f"Removal failed: {e}")
            if e.hint:
                self._logger.warning(e.hint)
            return False

    @staticmethod
    def _decode(text: str) -> Optional[Any]:
        try:
            return json.loads(text) if text else None
        except ValueError:
            return None
