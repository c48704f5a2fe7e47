"""Tests for the upload client."""
import pytest
from pathlib import Path
from dataclasses import replace

import aiohttp

from pinme.core.config import MEGABYTE
from pinme.core.exceptions import (
    PinmeIOError,
    SizeLimitExceeded,
    InvalidResponse,
    HashNotFound,
    RemoteError,
    NetworkError,
)
from pinme.core.history import HistoryStore
from pinme.core.upload import UploadClient, UploadKind, encode_file_name

DIR_HASH = 'bafybeigthbkdv2ufll47r7e7f5z4c3vubyggxwotl52parmy3d3abt6ztu'
FILE_HASH = 'bafkreihdwdcefgh4dqkjv67uzcmw7ojee6xedzdetojuzjevtenxquvyku'


def write_file(path: Path, size: int) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"x" * size)
    return path


def sparse_file(path: Path, size: int) -> Path:
    """Create a file of the given size without writing its blocks."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'wb') as f:
        f.truncate(size)
    return path


class TestEncodeFileName:
    """Test suite for encode_file_name."""

    def test_plain_name_unchanged(self):
        assert encode_file_name("report.pdf") == "report.pdf"

    def test_space_and_unicode(self):
        assert encode_file_name("my report ñ.pdf") == "my%20report%20%C3%B1.pdf"

    def test_uri_component_safe_characters(self):
        assert encode_file_name("a-b_c.d!~*'()") == "a-b_c.d!~*'()"


class TestUploadFile:
    """Test suite for single-file uploads."""

    @pytest.mark.asyncio
    async def test_upload_file_success(self, context, history, tmp_path, session_factory, response_factory):
        """Test a successful upload returns the hash and saves history."""
        path = write_file(tmp_path / "report.pdf", 12)
        response = response_factory(200, {'data': [
            {'Name': 'report.pdf', 'Hash': FILE_HASH, 'Size': '12', 'ShortUrl': 'abc12345'}
        ]})
        session = session_factory(response)
        client = UploadClient(context, session, history=history)

        outcome = await client.upload(path)

        assert outcome.content_hash == FILE_HASH
        assert outcome.short_alias == 'abc12345'
        records = history.list()
        assert len(records) == 1
        assert records[0].kind is UploadKind.FILE
        assert records[0].file_count == 1
        assert records[0].size_bytes == 12
        assert records[0].display_name == 'report.pdf'
        assert outcome.record == records[0]

    @pytest.mark.asyncio
    async def test_upload_posts_to_add_endpoint(self, context, history, tmp_path, session_factory, response_factory):
        """Test URL and query parameters of the add request."""
        path = write_file(tmp_path / "report.pdf", 12)
        session = session_factory(response_factory(200, {'data': [
            {'Name': 'report.pdf', 'Hash': FILE_HASH, 'Size': '12'}
        ]}))
        client = UploadClient(context, session, history=history)

        await client.upload(path)

        session.post.assert_called_once()
        args, kwargs = session.post.call_args
        assert args[0] == 'https://ipfs.example.test/api/v2/add'
        assert kwargs['params'] == {'uid': context.device_id, 'cidV': '1'}
        assert isinstance(kwargs['data'], aiohttp.FormData)
        assert 'timeout' not in kwargs

    @pytest.mark.asyncio
    async def test_upload_50mb_file_within_limit(self, context, history, tmp_path, session_factory, response_factory):
        """Test a 50MB file under the default 100MB limit succeeds."""
        path = sparse_file(tmp_path / "video.mp4", 50 * MEGABYTE)
        session = session_factory(response_factory(200, {'data': [
            {'Name': 'video.mp4', 'Hash': FILE_HASH, 'Size': str(50 * MEGABYTE)}
        ]}))
        client = UploadClient(context, session, history=history)

        await client.upload(path)

        records = history.list()
        assert len(records) == 1
        assert records[0].file_count == 1
        assert records[0].kind is UploadKind.FILE
        assert records[0].size_bytes == 50 * MEGABYTE

    @pytest.mark.asyncio
    async def test_upload_file_over_limit_sends_nothing(self, context, history, tmp_path, session_factory):
        path = sparse_file(tmp_path / "big.iso", 101 * MEGABYTE)
        session = session_factory()
        client = UploadClient(context, session, history=history)

        with pytest.raises(SizeLimitExceeded) as exc_info:
            await client.upload(path)

        assert exc_info.value.size == 101 * MEGABYTE
        assert exc_info.value.limit == 100 * MEGABYTE
        session.post.assert_not_called()
        assert history.list() == []

    @pytest.mark.asyncio
    async def test_unicode_name_matches_raw_response_name(self, context, history, tmp_path, session_factory, response_factory):
        """Test the response is matched on the unencoded file name."""
        path = write_file(tmp_path / "my notes.txt", 3)
        session = session_factory(response_factory(200, {'data': [
            {'Name': 'my notes.txt', 'Hash': FILE_HASH, 'Size': '3'}
        ]}))
        client = UploadClient(context, session, history=history)

        outcome = await client.upload(path)

        assert outcome.content_hash == FILE_HASH

    @pytest.mark.asyncio
    async def test_missing_path(self, context, history, tmp_path, session_factory):
        session = session_factory()
        client = UploadClient(context, session, history=history)

        with pytest.raises(PinmeIOError):
            await client.upload(tmp_path / "missing.txt")
        session.post.assert_not_called()


class TestUploadDirectory:
    """Test suite for directory uploads."""

    @pytest.fixture
    def site(self, tmp_path):
        root = tmp_path / "site"
        write_file(root / "index.html", 10)
        write_file(root / "css" / "main.css", 20)
        return root

    @pytest.fixture
    def site_response(self, response_factory):
        return response_factory(200, {'data': [
            {'Name': 'site/index.html', 'Hash': FILE_HASH, 'Size': '10'},
            {'Name': 'site/css/main.css', 'Hash': FILE_HASH, 'Size': '20'},
            {'Name': 'site/css', 'Hash': FILE_HASH, 'Size': '20'},
            {'Name': 'site', 'Hash': DIR_HASH, 'Size': '30', 'ShortUrl': '3abt6ztu'},
        ]})

    @pytest.mark.asyncio
    async def test_upload_directory_success(self, context, history, site, session_factory, site_response):
        """Test the directory hash is taken from the root entry."""
        session = session_factory(site_response)
        client = UploadClient(context, session, history=history)

        outcome = await client.upload(site)

        assert outcome.content_hash == DIR_HASH
        assert outcome.short_alias == '3abt6ztu'
        record = history.list(1)[0]
        assert record.kind is UploadKind.DIRECTORY
        assert record.file_count == 2
        assert record.size_bytes == 30
        assert record.display_name == 'site'

    @pytest.mark.asyncio
    async def test_trailing_separator_is_stripped(self, context, history, site, session_factory, site_response):
        session = session_factory(site_response)
        client = UploadClient(context, session, history=history)

        outcome = await client.upload_directory(str(site) + '/')

        assert outcome.content_hash == DIR_HASH
        assert history.list(1)[0].source_path == str(site)

    @pytest.mark.asyncio
    async def test_upload_current_directory(self, context, history, site, session_factory, site_response, monkeypatch):
        """Test '.' is uploaded under the directory's own name."""
        monkeypatch.chdir(site)
        session = session_factory(site_response)
        client = UploadClient(context, session, history=history)

        outcome = await client.upload(".")

        assert outcome.content_hash == DIR_HASH
        record = history.list(1)[0]
        assert record.display_name == 'site'
        assert Path(record.source_path).resolve() == site.resolve()

    @pytest.mark.asyncio
    async def test_directory_over_limit_sends_nothing(self, context, history, tmp_path, session_factory):
        """Test a 600MB tree fails before any request with a 500MB limit."""
        root = tmp_path / "media"
        sparse_file(root / "movie.mkv", 600 * MEGABYTE)
        session = session_factory()
        client = UploadClient(context, session, history=history)

        with pytest.raises(SizeLimitExceeded) as exc_info:
            await client.upload(root)

        assert exc_info.value.limit == 500 * MEGABYTE
        session.post.assert_not_called()
        assert history.list() == []

    @pytest.mark.asyncio
    async def test_single_file_over_file_limit(self, context, history, tmp_path, session_factory):
        """Test the per-file limit applies inside a directory."""
        root = tmp_path / "media"
        sparse_file(root / "clip.mov", 150 * MEGABYTE)
        session = session_factory()
        client = UploadClient(context, session, history=history)

        with pytest.raises(SizeLimitExceeded) as exc_info:
            await client.upload(root)

        assert "clip.mov" in str(exc_info.value)
        session.post.assert_not_called()

    @pytest.mark.asyncio
    async def test_directory_hash_not_found(self, context, history, site, session_factory, response_factory):
        session = session_factory(response_factory(200, {'data': [
            {'Name': 'site/index.html', 'Hash': FILE_HASH, 'Size': '10'},
        ]}))
        client = UploadClient(context, session, history=history)

        with pytest.raises(HashNotFound) as exc_info:
            await client.upload(site)

        assert exc_info.value.expected_name == 'site'
        assert history.list() == []


class TestUploadResponses:
    """Test suite for response validation and error translation."""

    @pytest.fixture
    def upload_path(self, tmp_path):
        return write_file(tmp_path / "report.pdf", 12)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [
        {'data': []},
        {'data': 'nope'},
        {'message': 'ok'},
        {'data': [{'Name': 'report.pdf'}]},
        ['report.pdf'],
    ])
    async def test_invalid_payloads(self, context, history, upload_path, session_factory, response_factory, payload):
        session = session_factory(response_factory(200, payload))
        client = UploadClient(context, session, history=history)

        with pytest.raises(InvalidResponse):
            await client.upload(upload_path)
        assert history.list() == []

    @pytest.mark.asyncio
    async def test_non_json_body(self, context, history, upload_path, session_factory, response_factory):
        session = session_factory(response_factory(200, text='<html>bad gateway</html>'))
        client = UploadClient(context, session, history=history)

        with pytest.raises(InvalidResponse):
            await client.upload(upload_path)

    @pytest.mark.asyncio
    async def test_file_hash_not_found(self, context, history, upload_path, session_factory, response_factory):
        session = session_factory(response_factory(200, {'data': [
            {'Name': 'other.pdf', 'Hash': FILE_HASH, 'Size': '1'}
        ]}))
        client = UploadClient(context, session, history=history)

        with pytest.raises(HashNotFound):
            await client.upload(upload_path)

    @pytest.mark.asyncio
    async def test_size_limit_code_translated(self, context, history, upload_path, session_factory, response_factory):
        session = session_factory(response_factory(400, {'code': 30001, 'msg': 'too large'}))
        client = UploadClient(context, session, history=history)

        with pytest.raises(RemoteError) as exc_info:
            await client.upload(upload_path)

        assert exc_info.value.error_code == 30001
        assert exc_info.value.status == 400
        assert "single file max size: 100MB" in str(exc_info.value)
        assert "single folder max size: 500MB" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_storage_quota_code_translated(self, context, history, upload_path, session_factory, response_factory):
        config = replace(context.config, storage_size_limit_mb=5000)
        ctx = replace(context, config=config)
        session = session_factory(response_factory(403, {'code': '30002'}))
        client = UploadClient(ctx, session, history=history)

        with pytest.raises(RemoteError) as exc_info:
            await client.upload(upload_path)

        assert exc_info.value.error_code == 30002
        assert "Max storage quorum 5 GB reached" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_unknown_error_surfaces_server_message(self, context, history, upload_path, session_factory, response_factory):
        session = session_factory(response_factory(500, {'code': 1, 'msg': 'disk on fire'}))
        client = UploadClient(context, session, history=history)

        with pytest.raises(RemoteError, match="disk on fire"):
            await client.upload(upload_path)

    @pytest.mark.asyncio
    async def test_error_without_body(self, context, history, upload_path, session_factory, response_factory):
        session = session_factory(response_factory(502, text=''))
        client = UploadClient(context, session, history=history)

        with pytest.raises(RemoteError, match="Request failed with status code 502"):
            await client.upload(upload_path)

    @pytest.mark.asyncio
    async def test_network_error(self, context, history, upload_path, session_factory):
        session = session_factory(error=aiohttp.ClientConnectionError("connection refused"))
        client = UploadClient(context, session, history=history)

        with pytest.raises(NetworkError) as exc_info:
            await client.upload(upload_path)

        assert exc_info.value.hint
        assert history.list() == []

    @pytest.mark.asyncio
    async def test_history_failure_does_not_fail_upload(self, context, tmp_path, upload_path, session_factory, response_factory):
        """Test a broken history file only drops the record."""
        broken = tmp_path / "history-is-a-directory"
        broken.mkdir()
        session = session_factory(response_factory(200, {'data': [
            {'Name': 'report.pdf', 'Hash': FILE_HASH, 'Size': '12'}
        ]}))
        client = UploadClient(context, session, history=HistoryStore(broken))

        outcome = await client.upload(upload_path)

        assert outcome.content_hash == FILE_HASH
        assert outcome.record is None

    @pytest.mark.asyncio
    async def test_malformed_history_entry_does_not_fail_upload(self, context, history, upload_path, session_factory, response_factory):
        """Test a history entry that is not an object only drops the record."""
        history.path.parent.mkdir(parents=True, exist_ok=True)
        history.path.write_text('{"uploads": ["oops"]}')
        session = session_factory(response_factory(200, {'data': [
            {'Name': 'report.pdf', 'Hash': FILE_HASH, 'Size': '12'}
        ]}))
        client = UploadClient(context, session, history=history)

        outcome = await client.upload(upload_path)

        assert outcome.content_hash == FILE_HASH
        assert outcome.record is None
        assert history.list() == []
