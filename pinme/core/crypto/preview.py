"""
Preview URL obfuscation.

Hashes in preview URLs are RC4-encrypted with a passphrase using the same
envelope as CryptoJS (OpenSSL 'Salted__' header, MD5 EVP_BytesToKey), so
the preview service can decrypt them with its existing code.
"""
import base64
from typing import Optional

from Crypto.Cipher import ARC4
from Crypto.Hash import MD5
from Crypto.Random import get_random_bytes

from ..config import PinmeConfig
from ..logging import get_logger

logger = get_logger('pinme.crypto.preview')

SALT_HEADER = b'Salted__'
SALT_SIZE = 8
KEY_SIZE = 32

ALIAS_URL_TEMPLATE = 'https://{alias}.pinit.eth.limo'


def derive_key(passphrase: bytes, salt: bytes, key_size: int = KEY_SIZE) -> bytes:
    """OpenSSL EVP_BytesToKey with MD5 and one iteration (no IV for RC4)."""
    derived = b''
    block = b''
    while len(derived) < key_size:
        block = MD5.new(block + passphrase + salt).digest()
        derived += block
    return derived[:key_size]


def _to_urlsafe(data: bytes) -> str:
    encoded = base64.b64encode(data).decode('ascii')
    return encoded.replace('+', '-').replace('/', '_').rstrip('=')


def _from_urlsafe(token: str) -> bytes:
    text = token.replace('-', '+').replace('_', '/')
    text += '=' * (-len(text) % 4)
    return base64.b64decode(text)


def encrypt_hash(content_hash: str, secret_key: Optional[str], salt: Optional[bytes] = None) -> str:
    """
    Encrypt a content hash for use in a preview URL.

    Args:
        content_hash: Hash to hide
        secret_key: Passphrase; when missing the hash is returned unchanged
        salt: 8-byte salt (random if not provided)

    Returns:
        URL-safe token without padding
    """
    if not secret_key:
        logger.error("Encryption error: Secret key not found")
        return content_hash

    salt = salt or get_random_bytes(SALT_SIZE)
    key = derive_key(secret_key.encode('utf-8'), salt)
    ciphertext = ARC4.new(key).encrypt(content_hash.encode('utf-8'))
    return _to_urlsafe(SALT_HEADER + salt + ciphertext)


def decrypt_hash(token: Optional[str], secret_key: str) -> Optional[str]:
    """
    Reverse encrypt_hash.

    Returns None for an empty token and the token itself if it cannot be
    decrypted.
    """
    if not token:
        return None

    try:
        raw = _from_urlsafe(token)
        if not raw.startswith(SALT_HEADER) or len(raw) < len(SALT_HEADER) + SALT_SIZE:
            raise ValueError("missing salt header")
        salt = raw[len(SALT_HEADER):len(SALT_HEADER) + SALT_SIZE]
        ciphertext = raw[len(SALT_HEADER) + SALT_SIZE:]
        key = derive_key(secret_key.encode('utf-8'), salt)
        return ARC4.new(key).decrypt(ciphertext).decode('utf-8')
    except (ValueError, UnicodeDecodeError) as e:
        logger.error(f"Decryption error: {e}")
        return token


def build_preview_url(content_hash: str, config: PinmeConfig) -> str:
    """Preview URL printed after a successful upload."""
    return f"{config.preview_url}{encrypt_hash(content_hash, config.secret_key)}"


def alias_url(short_alias: str) -> str:
    """URL of a short alias on the ENS gateway."""
    return ALIAS_URL_TEMPLATE.format(alias=short_alias)
