from __future__ import annotations

import io
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from .types import SourceImage

_FORMAT_MIME_TYPES = {
    "PNG": "image/png",
    "JPEG": "image/jpeg",
    "MPO": "image/jpeg",
    "WEBP": "image/webp",
    "GIF": "image/gif",
    "BMP": "image/bmp",
    "TIFF": "image/tiff",
    "HEIF": "image/heif",
}


def sniff_mime_type(raw: bytes) -> str:
    """Identify the image format with Pillow and map it to a media type."""
    try:
        with Image.open(io.BytesIO(raw)) as image:
            image.verify()
            image_format = image.format
    except (UnidentifiedImageError, OSError, SyntaxError) as exc:
        raise RuntimeError(f"Unreadable image data: {exc}") from exc

    mime_type = _FORMAT_MIME_TYPES.get(image_format or "") or Image.MIME.get(image_format or "")
    if not mime_type:
        raise RuntimeError(f"Unsupported image format: {image_format}")
    return mime_type


def load_source_image(source: str | Path) -> SourceImage:
    """
    Build a SourceImage from a file path or a ``data:`` URI.

    Raises
    ------
    RuntimeError
        If the file is missing, empty, or not a decodable image.
    """
    if isinstance(source, str) and source.startswith("data:"):
        image = SourceImage.from_data_uri(source)
        sniff_mime_type(image.raw_bytes())
        return image

    path = Path(source).expanduser()
    if not path.is_file():
        raise RuntimeError(f"Source image not found: {path}")
    raw = path.read_bytes()
    if not raw:
        raise RuntimeError(f"Source image is empty: {path}")
    return SourceImage.from_bytes(raw, sniff_mime_type(raw))
