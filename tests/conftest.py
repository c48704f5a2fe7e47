"""Pytest fixtures for pinme tests."""
import json

import pytest
from unittest.mock import AsyncMock, MagicMock

from pinme.core.config import PinmeConfig
from pinme.core.device import PinmeContext
from pinme.core.history import HistoryStore

DEVICE_ID = 'test-device-0001'


@pytest.fixture
def config(tmp_path):
    """Configuration rooted in a temporary home directory."""
    return PinmeConfig(
        api_url='https://ipfs.example.test/api/v2',
        preview_url='https://preview.example.test/#/preview/',
        secret_key='unit-test-secret',
        home_dir=tmp_path / 'home'
    )


@pytest.fixture
def context(config):
    """Context with a fixed device id."""
    return PinmeContext(config=config, device_id=DEVICE_ID)


@pytest.fixture
def history(config):
    """History store backed by the temporary home."""
    return HistoryStore.from_config(config)


def make_response(status=200, payload=None, text=None):
    """Build a mock aiohttp response."""
    response = MagicMock()
    response.status = status
    if text is None:
        text = json.dumps(payload) if payload is not None else ''
    response.text = AsyncMock(return_value=text)
    return response


def make_session(response=None, error=None):
    """
    Build a mock aiohttp session whose post() is an async context manager.

    Args:
        response: Response returned from ``async with session.post(...)``
        error: Exception raised by post() instead
    """
    session = MagicMock()
    session.closed = False
    if error is not None:
        session.post = MagicMock(side_effect=error)
        return session

    request_cm = MagicMock()
    request_cm.__aenter__ = AsyncMock(return_value=response)
    request_cm.__aexit__ = AsyncMock(return_value=False)
    session.post = MagicMock(return_value=request_cm)
    return session


@pytest.fixture
def response_factory():
    """Factory for mock aiohttp responses."""
    return make_response


@pytest.fixture
def session_factory():
    """Factory for mock aiohttp sessions."""
    return make_session
