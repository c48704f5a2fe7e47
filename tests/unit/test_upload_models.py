"""Tests for upload models."""
import pytest

from pinme.core.exceptions import InvalidResponse
from pinme.core.upload.models import AddResponse, AddResponseEntry, UploadOutcome


class TestAddResponseEntry:
    """Test suite for AddResponseEntry."""

    def test_from_dict(self):
        """Test parsing a full entry."""
        entry = AddResponseEntry.from_dict({
            'Name': 'site',
            'Hash': 'bafyabc',
            'Size': 1024,
            'ShortUrl': '3abt6ztu'
        })

        assert entry.name == 'site'
        assert entry.hash == 'bafyabc'
        assert entry.size == '1024'
        assert entry.short_url == '3abt6ztu'

    def test_optional_fields(self):
        entry = AddResponseEntry.from_dict({'Name': 'a.txt', 'Hash': 'bafkabc'})

        assert entry.size == ''
        assert entry.short_url is None

    def test_empty_short_url_is_none(self):
        entry = AddResponseEntry.from_dict({'Name': 'a.txt', 'Hash': 'bafkabc', 'ShortUrl': ''})

        assert entry.short_url is None

    @pytest.mark.parametrize("data", [
        {'Name': 'a.txt'},
        {'Hash': 'bafkabc'},
        {'Name': 1, 'Hash': 'bafkabc'},
        'a.txt',
    ])
    def test_missing_fields(self, data):
        with pytest.raises(InvalidResponse):
            AddResponseEntry.from_dict(data)


class TestAddResponse:
    """Test suite for AddResponse."""

    def test_find_returns_first_match(self):
        response = AddResponse.from_payload({'data': [
            {'Name': 'site/index.html', 'Hash': 'bafkfile'},
            {'Name': 'site', 'Hash': 'bafydir'},
            {'Name': 'site', 'Hash': 'bafyother'},
        ]})

        assert len(response.entries) == 3
        assert response.find('site').hash == 'bafydir'

    def test_find_missing(self):
        response = AddResponse.from_payload({'data': [{'Name': 'a', 'Hash': 'b'}]})

        assert response.find('c') is None

    @pytest.mark.parametrize("payload", [
        None,
        [],
        {},
        {'data': None},
        {'data': {}},
        {'data': []},
    ])
    def test_invalid_payloads(self, payload):
        with pytest.raises(InvalidResponse):
            AddResponse.from_payload(payload)


class TestUploadOutcome:
    """Test suite for UploadOutcome."""

    def test_defaults(self):
        outcome = UploadOutcome(content_hash='bafyabc')

        assert outcome.short_alias is None
        assert outcome.record is None
