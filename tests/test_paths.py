"""Tests for wayback_mirror.utils.paths."""

import os

import pytest

from wayback_mirror.utils.constants import RESERVED_CHARS
from wayback_mirror.utils.paths import (
    derive_path,
    get_backup_root,
    get_local_path,
    get_origin,
    is_directory_like,
    is_index_file,
    sanitize_filename,
)


# ---------------------------------------------------------------------------
# sanitize_filename
# ---------------------------------------------------------------------------
class TestSanitizeFilename:
    def test_replaces_every_reserved_char(self):
        assert sanitize_filename(RESERVED_CHARS) == '_' * len(RESERVED_CHARS)

    def test_leaves_safe_chars(self):
        assert sanitize_filename("style-v2.min.css") == "style-v2.min.css"

    def test_query_string(self):
        assert sanitize_filename("page?id=1&x=2") == "page_id_1_x_2"


# ---------------------------------------------------------------------------
# is_directory_like
# ---------------------------------------------------------------------------
class TestIsDirectoryLike:
    @pytest.mark.parametrize("url", [
        "http://example.com",
        "http://example.com/",
        "http://example.com/blog/",
        "http://example.com/about",
        "http://example.com/docs/page.html/",
    ])
    def test_directory_like(self, url):
        assert is_directory_like(url) is True

    @pytest.mark.parametrize("url", [
        "http://example.com/s.css",
        "http://example.com/img/logo.png",
        "http://example.com/index.php?id=3",
        "http://example.com/releases/v1.2",
    ])
    def test_file_like(self, url):
        assert is_directory_like(url) is False

    def test_dot_in_parent_segment_only(self):
        assert is_directory_like("http://example.com/v1.2/docs") is True


# ---------------------------------------------------------------------------
# derive_path
# ---------------------------------------------------------------------------
class TestDerivePath:
    def test_root(self):
        assert derive_path("http://example.com/") == "example.com/index.html"

    def test_root_without_slash(self):
        assert derive_path("http://example.com") == "example.com/index.html"

    def test_file(self):
        assert derive_path("http://example.com/s.css") == "example.com/s.css"

    def test_nested_directory(self):
        assert derive_path("https://example.com/blog/post") == "example.com/blog/post/index.html"

    def test_colon_replaced_without_index(self):
        assert derive_path("http://example.com/a:b.png") == "example.com/a_b.png"

    def test_query_is_part_of_name(self):
        assert derive_path("http://example.com/page.php?id=1") == "example.com/page.php_id_1"

    def test_version_segment_counts_as_file(self):
        assert derive_path("http://example.com/releases/v1.2") == "example.com/releases/v1.2"

    def test_port_not_in_path(self):
        assert derive_path("http://example.com:8080/a.js") == "example.com/a.js"

    def test_parent_segments_dropped(self):
        assert derive_path("http://example.com/a/../../etc/x.txt") == "example.com/a/etc/x.txt"

    def test_timestamp_independent_and_deterministic(self):
        url = "http://example.com/a*b/c?d=e"
        assert derive_path(url) == derive_path(url)

    @pytest.mark.parametrize("url", [
        "http://example.com/a:b|c<d>e.png",
        "http://example.com/q?x=1&y=2",
        "http://example.com/back\\slash/",
    ])
    def test_no_reserved_chars(self, url):
        assert not any(ch in derive_path(url) for ch in RESERVED_CHARS)


def test_get_local_path(tmp_path):
    path = get_local_path("http://example.com/css/s.css", str(tmp_path))
    assert path == os.path.join(str(tmp_path), "example.com", "css", "s.css")


def test_get_backup_root(tmp_path):
    assert get_backup_root("https://Example.com:8080/x", str(tmp_path)) == \
        os.path.join(str(tmp_path), "example.com")


def test_get_origin():
    assert get_origin("https://example.com/a/b?c=d") == "https://example.com"


def test_is_index_file():
    assert is_index_file(os.path.join("x", "example.com", "index.html"))
    assert not is_index_file(os.path.join("x", "example.com", "s.css"))
