"""Tests for SnapshotDownloader."""

import asyncio
import os

import aiohttp
import pytest

from wayback_mirror.mirror.downloader import SnapshotDownloader
from wayback_mirror.mirror.errors import SnapshotFetchError
from wayback_mirror.mirror.index import SnapshotEntry

from tests.conftest import FakeResponse, FakeSession, archive_url


TS = "20200101000000"


def read_bytes(path):
    with open(path, 'rb') as f:
        return f.read()


@pytest.fixture
def downloader():
    # Small chunks so multi-chunk streaming is exercised
    return SnapshotDownloader(chunk_size=4)


def test_streams_capture_to_derived_path(downloader, output_dir):
    url = "http://example.com/css/site.css"
    body = b"body { color: red; }"
    session = FakeSession({archive_url(TS, url): FakeResponse(body=body)})

    path = asyncio.run(downloader.fetch_and_store(session, SnapshotEntry(TS, url), output_dir))

    assert path == os.path.join(output_dir, "example.com", "css", "site.css")
    assert read_bytes(path) == body
    assert session.urls() == [archive_url(TS, url)]
    assert not os.path.exists(path + ".part")


def test_directory_like_url_becomes_index(downloader, output_dir):
    url = "http://example.com/about"
    session = FakeSession({archive_url(TS, url): FakeResponse(body="<html></html>")})

    path = asyncio.run(downloader.fetch_and_store(session, SnapshotEntry(TS, url), output_dir))

    assert path == os.path.join(output_dir, "example.com", "about", "index.html")
    assert read_bytes(path) == b"<html></html>"


def test_later_capture_overwrites(downloader, output_dir):
    url = "http://example.com/a.txt"
    session = FakeSession({
        archive_url("1", url): FakeResponse(body=b"old"),
        archive_url("2", url): FakeResponse(body=b"new"),
    })

    first = asyncio.run(downloader.fetch_and_store(session, SnapshotEntry("1", url), output_dir))
    second = asyncio.run(downloader.fetch_and_store(session, SnapshotEntry("2", url), output_dir))

    assert first == second
    assert read_bytes(second) == b"new"


def test_http_error(downloader, output_dir):
    url = "http://example.com/missing.png"
    session = FakeSession()

    with pytest.raises(SnapshotFetchError) as excinfo:
        asyncio.run(downloader.fetch_and_store(session, SnapshotEntry(TS, url), output_dir))

    assert excinfo.value.status == 404
    assert excinfo.value.url == url
    assert excinfo.value.archive_url == archive_url(TS, url)
    assert not os.path.exists(os.path.join(output_dir, "example.com", "missing.png"))


def test_network_error(downloader, output_dir):
    url = "http://example.com/x.js"
    error = aiohttp.ClientConnectionError("reset by peer")
    session = FakeSession({archive_url(TS, url): FakeResponse(error=error)})

    with pytest.raises(SnapshotFetchError) as excinfo:
        asyncio.run(downloader.fetch_and_store(session, SnapshotEntry(TS, url), output_dir))

    assert excinfo.value.status is None
    assert excinfo.value.__cause__ is error


def test_stream_error_keeps_previous_copy(downloader, output_dir):
    url = "http://example.com/big.bin"
    session = FakeSession({archive_url("1", url): FakeResponse(body=b"complete")})
    path = asyncio.run(downloader.fetch_and_store(session, SnapshotEntry("1", url), output_dir))

    session.routes[archive_url("2", url)] = FakeResponse(
        body=b"partial data",
        stream_error=aiohttp.ClientPayloadError("truncated")
    )
    with pytest.raises(SnapshotFetchError):
        asyncio.run(downloader.fetch_and_store(session, SnapshotEntry("2", url), output_dir))

    assert read_bytes(path) == b"complete"
    assert not os.path.exists(path + ".part")


def test_file_where_directory_is_needed(downloader, output_dir):
    session = FakeSession({
        archive_url(TS, "http://example.com/v1.2"): FakeResponse(body=b"file"),
        archive_url(TS, "http://example.com/v1.2/app.js"): FakeResponse(body=b"js"),
    })
    asyncio.run(downloader.fetch_and_store(
        session, SnapshotEntry(TS, "http://example.com/v1.2"), output_dir))

    with pytest.raises(SnapshotFetchError):
        asyncio.run(downloader.fetch_and_store(
            session, SnapshotEntry(TS, "http://example.com/v1.2/app.js"), output_dir))


def test_concurrent_writes_to_same_path_do_not_interleave(downloader, output_dir):
    url = "http://example.com/shared.css"
    session = FakeSession({
        archive_url("1", url): FakeResponse(body=b"a" * 64),
        archive_url("2", url): FakeResponse(body=b"b" * 64),
    })

    async def both():
        return await asyncio.gather(
            downloader.fetch_and_store(session, SnapshotEntry("1", url), output_dir),
            downloader.fetch_and_store(session, SnapshotEntry("2", url), output_dir),
        )

    first, second = asyncio.run(both())

    assert first == second
    assert read_bytes(first) in (b"a" * 64, b"b" * 64)
