"""
Device identity and client context.

The device identifier is a random uuid4 stored in ~/.pinme/device-id. It is
read once per process and carried in a PinmeContext.
"""
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .config import PinmeConfig
from .exceptions import PinmeIOError
from .logging import get_logger

logger = get_logger('pinme.device')


def load_device_id(device_id_file: Path) -> str:
    """
    Read the device identifier, creating it on first use.

    Args:
        device_id_file: Path of the identity file

    Returns:
        Device identifier string

    Raises:
        PinmeIOError: If the file cannot be read or created
    """
    try:
        device_id_file.parent.mkdir(parents=True, exist_ok=True)
        if device_id_file.exists():
            device_id = device_id_file.read_text(encoding='utf-8').strip()
            if device_id:
                return device_id

        device_id = str(uuid.uuid4())
        device_id_file.write_text(device_id, encoding='utf-8')
        logger.debug(f"Created device id at {device_id_file}")
        return device_id
    except OSError as e:
        raise PinmeIOError(f"Cannot access device id file {device_id_file}: {e}")


@dataclass(frozen=True)
class PinmeContext:
    """
    Per-process context shared by the upload and removal clients.

    Attributes:
        config: Client configuration
        device_id: Device identifier sent as 'uid'
    """
    config: PinmeConfig
    device_id: str

    @classmethod
    def create(cls, config: Optional[PinmeConfig] = None) -> 'PinmeContext':
        """Build the context, loading (or creating) the device identifier."""
        config = config or PinmeConfig.from_env()
        return cls(config=config, device_id=load_device_id(config.device_id_file))
