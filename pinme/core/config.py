"""
Configuration module.

Provides the configuration for the pinme clients. Values come from the
environment once per process and are then passed around explicitly.
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Mapping, Dict, Any

from .exceptions import ConfigError

MEGABYTE = 1024 * 1024

DEFAULT_API_URL = 'https://ipfs.glitterprotocol.dev/api/v2'
DEFAULT_FILE_SIZE_LIMIT_MB = 100
DEFAULT_DIRECTORY_SIZE_LIMIT_MB = 500

CONFIG_DIR_NAME = '.pinme'
HISTORY_FILE_NAME = 'upload-history.json'
DEVICE_ID_FILE_NAME = 'device-id'


@dataclass
class TimeoutConfig:
    """
    Timeout configuration.

    None means "use the transport default".
    """
    upload_total: Optional[float] = None
    remove_total: float = 30.0

    def upload_timeout(self):
        """Convert to aiohttp ClientTimeout for upload requests."""
        import aiohttp
        if self.upload_total is None:
            return None
        return aiohttp.ClientTimeout(total=self.upload_total)

    def remove_timeout(self):
        """Convert to aiohttp ClientTimeout for removal requests."""
        import aiohttp
        return aiohttp.ClientTimeout(total=self.remove_total)


def _parse_int(environ: Mapping[str, str], key: str, default: Optional[int]) -> Optional[int]:
    raw = environ.get(key)
    if raw is None or raw.strip() == '':
        return default
    try:
        return int(raw.strip())
    except ValueError:
        raise ConfigError(f"{key} must be an integer number of megabytes, got {raw!r}")


@dataclass
class PinmeConfig:
    """
    Complete client configuration.

    Attributes:
        api_url: Base URL of the storage API (no trailing slash)
        file_size_limit_mb: Per-file limit in megabytes
        directory_size_limit_mb: Directory tree limit in megabytes
        storage_size_limit_mb: Account storage quota in megabytes, if known
        preview_url: Prefix for preview URLs
        secret_key: Key used to obfuscate hashes in preview URLs
        home_dir: Directory holding the '.pinme' folder
        timeout: Request timeouts
    """
    api_url: str = DEFAULT_API_URL
    file_size_limit_mb: int = DEFAULT_FILE_SIZE_LIMIT_MB
    directory_size_limit_mb: int = DEFAULT_DIRECTORY_SIZE_LIMIT_MB
    storage_size_limit_mb: Optional[int] = None
    preview_url: str = ''
    secret_key: Optional[str] = None
    home_dir: Path = field(default_factory=Path.home)
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)

    def __post_init__(self):
        self.api_url = self.api_url.rstrip('/')
        if isinstance(self.home_dir, str):
            self.home_dir = Path(self.home_dir)

    @classmethod
    def default(cls) -> 'PinmeConfig':
        """Create default configuration."""
        return cls()

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'PinmeConfig':
        """
        Build configuration from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            PinmeConfig instance

        Raises:
            ConfigError: If a numeric variable is not an integer
        """
        if environ is None:
            environ = os.environ

        kwargs: Dict[str, Any] = {
            'api_url': environ.get('IPFS_API_URL') or DEFAULT_API_URL,
            'file_size_limit_mb': _parse_int(
                environ, 'FILE_SIZE_LIMIT', DEFAULT_FILE_SIZE_LIMIT_MB
            ),
            'directory_size_limit_mb': _parse_int(
                environ, 'DIRECTORY_SIZE_LIMIT', DEFAULT_DIRECTORY_SIZE_LIMIT_MB
            ),
            'storage_size_limit_mb': _parse_int(environ, 'STORAGE_SIZE_LIMIT', None),
            'preview_url': environ.get('IPFS_PREVIEW_URL', ''),
            'secret_key': environ.get('SECRET_KEY') or None,
        }
        if environ.get('PINME_HOME'):
            kwargs['home_dir'] = Path(environ['PINME_HOME'])

        return cls(**kwargs)

    @property
    def file_size_limit(self) -> int:
        """Per-file limit in bytes."""
        return self.file_size_limit_mb * MEGABYTE

    @property
    def directory_size_limit(self) -> int:
        """Directory limit in bytes."""
        return self.directory_size_limit_mb * MEGABYTE

    @property
    def config_dir(self) -> Path:
        return self.home_dir / CONFIG_DIR_NAME

    @property
    def history_file(self) -> Path:
        return self.config_dir / HISTORY_FILE_NAME

    @property
    def device_id_file(self) -> Path:
        return self.config_dir / DEVICE_ID_FILE_NAME

    @property
    def add_url(self) -> str:
        return f"{self.api_url}/add"

    @property
    def remove_url(self) -> str:
        return f"{self.api_url}/block/rm"
