"""Shared fixtures: an in-memory stand-in for the aiohttp session surface."""

import json
import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from wayback_mirror.utils.constants import CDX_ENDPOINT


class FakeContent:
    def __init__(self, body: bytes, error: Exception = None):
        self.body = body
        self.error = error

    async def iter_chunked(self, n):
        for i in range(0, len(self.body), n):
            yield self.body[i:i + n]
        if self.error is not None:
            raise self.error


class FakeResponse:
    """Async context manager mimicking aiohttp.ClientResponse."""

    def __init__(self, status=200, body=b'', error=None, stream_error=None):
        if isinstance(body, str):
            body = body.encode('utf-8')
        self.status = status
        self.body = body
        self.error = error
        self.content = FakeContent(body, stream_error)

    async def text(self):
        return self.body.decode('utf-8')

    async def __aenter__(self):
        if self.error is not None:
            raise self.error
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    """Routes GET requests by URL; unknown URLs answer 404."""

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.requests = []
        self.closed = False

    def get(self, url, params=None, **kwargs):
        self.requests.append((url, params))
        return self.routes.get(url) or FakeResponse(status=404)

    def urls(self):
        return [url for url, _ in self.requests]

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.closed = True
        return False


def cdx_response(*rows):
    """Build a JSON CDX response with the header row."""
    return FakeResponse(body=json.dumps([["timestamp", "original"]] + [list(r) for r in rows]))


def archive_url(timestamp, url):
    return f"https://web.archive.org/web/{timestamp}id_/{url}"


@pytest.fixture
def output_dir(tmp_path):
    return str(tmp_path / "backups")


@pytest.fixture
def make_mirror(monkeypatch):
    """Build a WaybackMirror whose HTTP session is a FakeSession."""
    from wayback_mirror.mirror import WaybackMirror

    def factory(routes, index=None, **options):
        routes = dict(routes)
        if index is not None:
            routes[CDX_ENDPOINT] = index
        session = FakeSession(routes)
        mirror = WaybackMirror(**options)
        monkeypatch.setattr(mirror, 'create_session', lambda: session)
        return mirror, session

    return factory
