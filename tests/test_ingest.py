from __future__ import annotations

import base64

import pytest

from angle_views.ingest import load_source_image, sniff_mime_type
from angle_views.types import SourceImage


def test_load_png_file(tmp_path, png_bytes) -> None:
    path = tmp_path / "photo.png"
    path.write_bytes(png_bytes)

    image = load_source_image(path)

    assert image.mime_type == "image/png"
    assert image.raw_bytes() == png_bytes


def test_media_type_comes_from_content_not_extension(tmp_path, jpeg_bytes) -> None:
    path = tmp_path / "photo.png"
    path.write_bytes(jpeg_bytes)

    assert load_source_image(str(path)).mime_type == "image/jpeg"


def test_missing_file(tmp_path) -> None:
    with pytest.raises(RuntimeError, match="not found"):
        load_source_image(tmp_path / "nope.png")


def test_empty_file(tmp_path) -> None:
    path = tmp_path / "empty.png"
    path.write_bytes(b"")

    with pytest.raises(RuntimeError, match="empty"):
        load_source_image(path)


def test_not_an_image(tmp_path) -> None:
    path = tmp_path / "notes.png"
    path.write_bytes(b"just some text")

    with pytest.raises(RuntimeError, match="Unreadable"):
        load_source_image(path)


def test_data_uri(png_bytes) -> None:
    payload = base64.b64encode(png_bytes).decode("ascii")

    image = load_source_image(f"data:image/png;base64,{payload}")

    assert image == SourceImage(data=payload, mime_type="image/png")


def test_data_uri_without_media_type_defaults_to_jpeg(jpeg_bytes) -> None:
    payload = base64.b64encode(jpeg_bytes).decode("ascii")

    assert SourceImage.from_data_uri(f"data:;base64,{payload}").mime_type == "image/jpeg"


@pytest.mark.parametrize("uri", ["data:image/png,abc", "data:image/png;base64,", "image/png;base64,abc"])
def test_malformed_data_uri(uri: str) -> None:
    with pytest.raises(RuntimeError):
        SourceImage.from_data_uri(uri)


def test_sniff_mime_type(png_bytes, jpeg_bytes) -> None:
    assert sniff_mime_type(png_bytes) == "image/png"
    assert sniff_mime_type(jpeg_bytes) == "image/jpeg"
