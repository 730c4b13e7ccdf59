"""Unit tests for ContentStorage."""

from pathlib import Path

import pytest

from qdavault.exceptions import NotFoundError, StorageError
from qdavault.storage.content_storage import ContentStorage


def test_put_read_exists(storage: ContentStorage) -> None:
    stored = storage.put("projects/1/sources/2/converted.html", b"<p>x</p>")

    assert stored.is_absolute()
    assert stored == storage.path("projects/1/sources/2/converted.html")
    assert storage.exists("projects/1/sources/2/converted.html")
    assert storage.read("projects/1/sources/2/converted.html") == b"<p>x</p>"


def test_put_from_path_copies_file(storage: ContentStorage, tmp_path: Path) -> None:
    source = tmp_path / "in.html"
    source.write_bytes(b"<h1>hello</h1>")

    stored = storage.put_from_path("sources/9/converted.html", source)

    assert stored.read_bytes() == b"<h1>hello</h1>"
    assert not stored.with_suffix(".html.uploading").exists()


def test_put_from_missing_path(storage: ContentStorage, tmp_path: Path) -> None:
    with pytest.raises(StorageError):
        storage.put_from_path("sources/9/converted.html", tmp_path / "missing.html")
    assert not storage.exists("sources/9/converted.html")


def test_read_missing(storage: ContentStorage) -> None:
    with pytest.raises(NotFoundError):
        storage.read("nothing/here.html")


@pytest.mark.parametrize("key", ["", "/etc/passwd", "../outside.html", "a/../../b"])
def test_invalid_keys(storage: ContentStorage, key: str) -> None:
    with pytest.raises(StorageError, match="Invalid storage key"):
        storage.path(key)
