from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from .tasks.angle_catalog import ViewSpec

_DATA_URI_HEADER = re.compile(r"^data:(?P<mime>[^;,]*)(?P<params>(;[^,]*)?),", re.IGNORECASE)
DEFAULT_SOURCE_MIME_TYPE = "image/jpeg"


def _decode(data: str) -> bytes:
    try:
        return base64.b64decode(data, validate=True)
    except (ValueError, binascii.Error) as exc:
        raise RuntimeError(f"Invalid base64 image data: {exc}") from exc


@dataclass(frozen=True, slots=True)
class SourceImage:
    """User supplied photograph, base64-encoded, shared read-only by every request."""

    data: str
    mime_type: str

    @classmethod
    def from_bytes(cls, raw: bytes, mime_type: str) -> "SourceImage":
        return cls(data=base64.b64encode(raw).decode("ascii"), mime_type=mime_type)

    @classmethod
    def from_data_uri(cls, uri: str) -> "SourceImage":
        """
        Split a ``data:<mime>;base64,<payload>`` URI.

        A header without a media type falls back to ``image/jpeg``.
        """
        match = _DATA_URI_HEADER.match(uri)
        if match is None or ";base64" not in match.group("params").lower():
            raise RuntimeError("Expected a base64 data URI (data:<mime>;base64,<payload>)")
        payload = uri[match.end():]
        if not payload:
            raise RuntimeError("Data URI carries no image payload")
        mime_type = match.group("mime") or DEFAULT_SOURCE_MIME_TYPE
        return cls(data=payload, mime_type=mime_type)

    def raw_bytes(self) -> bytes:
        return _decode(self.data)


@dataclass(frozen=True, slots=True)
class EncodedImage:
    """Inline image returned by the generation service."""

    mime_type: str
    data: str

    def data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"

    def raw_bytes(self) -> bytes:
        return _decode(self.data)


@dataclass(frozen=True, slots=True)
class GenerationSuccess:
    spec: "ViewSpec"
    image: EncodedImage

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class GenerationFailure:
    spec: "ViewSpec"
    reason: str

    @property
    def ok(self) -> bool:
        return False


GenerationOutcome = Union[GenerationSuccess, GenerationFailure]
