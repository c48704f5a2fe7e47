"""Crypto helpers for preview URLs."""
from .preview import (
    encrypt_hash,
    decrypt_hash,
    derive_key,
    build_preview_url,
    alias_url,
)

__all__ = [
    'encrypt_hash',
    'decrypt_hash',
    'derive_key',
    'build_preview_url',
    'alias_url',
]
