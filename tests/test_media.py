import os

import pytest
import requests

from recipegram.utils.media import MediaStore


class FakeResponse:
    def __init__(self, content=b"", status_code=200, fail_after=None):
        self.content = content
        self.status_code = status_code
        self.fail_after = fail_after
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def close(self):
        self.closed = True

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def iter_content(self, chunk_size=8192):
        for start in range(0, len(self.content), chunk_size):
            if self.fail_after is not None and start >= self.fail_after:
                raise requests.exceptions.ChunkedEncodingError("connection broken")
            yield self.content[start:start + chunk_size]


@pytest.fixture
def store(media_dir):
    return MediaStore(str(media_dir))


def test_copies_local_file(store, picture, media_dir):
    saved = store.persist(str(picture))

    assert saved == str(media_dir / "soup.jpg")
    assert open(saved, "rb").read() == picture.read_bytes()
    # Source stays where it was
    assert picture.exists()


def test_copies_file_uri(store, picture, media_dir):
    saved = store.persist(picture.as_uri())
    assert saved == str(media_dir / "soup.jpg")


@pytest.mark.parametrize("source", [None, ""])
def test_nothing_to_copy(store, source, media_dir):
    assert store.persist(source) is None
    assert not media_dir.exists()


def test_missing_source_returns_none(store, tmp_path):
    assert store.persist(str(tmp_path / "nope.jpg")) is None


def test_same_name_does_not_overwrite(store, picture, media_dir):
    first = store.persist(str(picture))
    picture.write_bytes(b"second version")
    second = store.persist(str(picture))

    assert first == str(media_dir / "soup.jpg")
    assert second == str(media_dir / "soup_1.jpg")
    assert open(first, "rb").read() != open(second, "rb").read()


def test_downloads_remote_image(store, media_dir, monkeypatch):
    calls = []

    def fake_get(url, stream=False, timeout=None):
        calls.append((url, stream, timeout))
        return FakeResponse(b"remote image bytes")

    monkeypatch.setattr(requests, "get", fake_get)
    saved = store.persist("https://example.com/photos/cake.png?size=large")

    assert saved == str(media_dir / "cake.png")
    assert open(saved, "rb").read() == b"remote image bytes"
    assert calls == [("https://example.com/photos/cake.png?size=large", True, store.download_timeout)]


def test_remote_without_file_name_uses_default(store, media_dir, monkeypatch):
    monkeypatch.setattr(requests, "get", lambda url, **kwargs: FakeResponse(b"x"))
    assert store.persist("https://example.com/") == str(media_dir / "img.jpg")


def test_remote_http_error_returns_none(store, media_dir, monkeypatch):
    monkeypatch.setattr(requests, "get", lambda url, **kwargs: FakeResponse(status_code=404))

    assert store.persist("https://example.com/missing.jpg") is None
    assert not os.path.exists(media_dir / "missing.jpg")


def test_remote_connection_error_returns_none(store, monkeypatch):
    def fail(url, **kwargs):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(requests, "get", fail)
    assert store.persist("http://example.com/a.jpg") is None


def test_broken_download_leaves_no_partial_file(store, media_dir, monkeypatch):
    response = FakeResponse(b"a" * 20000, fail_after=8192)
    monkeypatch.setattr(requests, "get", lambda url, **kwargs: response)

    assert store.persist("https://example.com/photos/cake.png") is None
    assert not os.path.exists(media_dir / "cake.png")
    assert response.closed


def test_download_closes_response(store, monkeypatch):
    response = FakeResponse(b"remote image bytes")
    monkeypatch.setattr(requests, "get", lambda url, **kwargs: response)

    assert store.persist("https://example.com/cake.png") is not None
    assert response.closed
