"""Tests for preview URL obfuscation."""
import base64
import pytest

from pinme.core.crypto import (
    alias_url,
    build_preview_url,
    decrypt_hash,
    derive_key,
    encrypt_hash,
)
from pinme.core.crypto.preview import SALT_HEADER

CID = 'bafybeigthbkdv2ufll47r7e7f5z4c3vubyggxwotl52parmy3d3abt6ztu'
SALT = b'\x01\x02\x03\x04\x05\x06\x07\x08'


class TestDeriveKey:
    """Test suite for derive_key."""

    def test_length(self):
        assert len(derive_key(b'secret', SALT)) == 32
        assert len(derive_key(b'secret', SALT, key_size=16)) == 16

    def test_depends_on_salt(self):
        assert derive_key(b'secret', SALT) != derive_key(b'secret', b'\x00' * 8)


class TestEncryptHash:
    """Test suite for encrypt_hash and decrypt_hash."""

    def test_roundtrip(self):
        token = encrypt_hash(CID, 'secret', salt=SALT)

        assert decrypt_hash(token, 'secret') == CID

    def test_fixed_salt_is_deterministic(self):
        assert encrypt_hash(CID, 'secret', salt=SALT) == encrypt_hash(CID, 'secret', salt=SALT)

    def test_random_salt(self):
        assert encrypt_hash(CID, 'secret') != encrypt_hash(CID, 'secret')

    def test_envelope(self):
        """Test the token carries the OpenSSL salt header."""
        token = encrypt_hash(CID, 'secret', salt=SALT)
        padded = token.replace('-', '+').replace('_', '/') + '=' * (-len(token) % 4)
        raw = base64.b64decode(padded)

        assert raw[:8] == SALT_HEADER
        assert raw[8:16] == SALT
        assert len(raw) == 16 + len(CID)

    def test_url_safe(self):
        for i in range(20):
            token = encrypt_hash(CID, f'secret-{i}')
            assert '+' not in token
            assert '/' not in token
            assert '=' not in token

    def test_no_key_returns_hash(self):
        assert encrypt_hash(CID, None) == CID
        assert encrypt_hash(CID, '') == CID

    def test_wrong_key_does_not_reveal_hash(self):
        token = encrypt_hash(CID, 'secret', salt=SALT)

        assert decrypt_hash(token, 'other') != CID

    @pytest.mark.parametrize("token", ['abc', 'bm90IHNhbHRlZA'])
    def test_garbage_token_returned(self, token):
        assert decrypt_hash(token, 'secret') == token

    def test_empty_token(self):
        assert decrypt_hash('', 'secret') is None
        assert decrypt_hash(None, 'secret') is None


class TestUrls:
    """Test suite for URL builders."""

    def test_build_preview_url(self, config):
        url = build_preview_url(CID, config)

        assert url.startswith(config.preview_url)
        assert decrypt_hash(url[len(config.preview_url):], config.secret_key) == CID

    def test_alias_url(self):
        assert alias_url('3abt6ztu') == 'https://3abt6ztu.pinit.eth.limo'
