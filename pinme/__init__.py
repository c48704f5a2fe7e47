"""
pinme - Upload files and directories to IPFS from the command line.

Usage:
    >>> from pinme import PinmeClient
    >>>
    >>> async with PinmeClient() as pinme:
    ...     outcome = await pinme.upload("./dist")
    ...     print(outcome.content_hash)
"""
import logging
from .client import PinmeClient

# Configuration
from .core.config import PinmeConfig, TimeoutConfig
from .core.device import PinmeContext

# Errors
from .core.exceptions import (
    PinmeException,
    ConfigError,
    PinmeIOError,
    SizeLimitExceeded,
    InvalidResponse,
    HashNotFound,
    RemoteError,
    NetworkError,
    InvalidInput,
)

# Upload, history and removal
from .core.upload import UploadClient, UploadOutcome, UploadKind, SizeLimiter, DirectoryWalker
from .core.history import HistoryStore, UploadRecord
from .core.remove import RemovalClient, RemovalKind, RemovalTarget, parse_removal_input

__version__ = '1.0.0'


def setup_logging(level=logging.INFO):
    """
    Configure logging for pinme modules.

    Args:
        level: Logging level (default: logging.INFO)
    """
    loggers = [
        'pinme',
        'pinme.client',
        'pinme.device',
        'pinme.upload',
        'pinme.upload.walker',
        'pinme.history',
        'pinme.remove',
        'pinme.crypto.preview',
    ]

    for logger_name in loggers:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        logger.propagate = True


__all__ = [
    'PinmeClient',
    'PinmeConfig',
    'TimeoutConfig',
    'PinmeContext',
    'PinmeException',
    'ConfigError',
    'PinmeIOError',
    'SizeLimitExceeded',
    'InvalidResponse',
    'HashNotFound',
    'RemoteError',
    'NetworkError',
    'InvalidInput',
    'UploadClient',
    'UploadOutcome',
    'UploadKind',
    'SizeLimiter',
    'DirectoryWalker',
    'HistoryStore',
    'UploadRecord',
    'RemovalClient',
    'RemovalKind',
    'RemovalTarget',
    'parse_removal_input',
    'setup_logging',
]
