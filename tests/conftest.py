from __future__ import annotations

import asyncio
import io
from dataclasses import dataclass, field

import pytest
from PIL import Image

from angle_views.errors import ImageGenerationError
from angle_views.tasks.angle_catalog import AngleCatalog, ViewSpec
from angle_views.types import EncodedImage, SourceImage


@dataclass
class Scripted:
    """How the fake client answers one directive."""

    image: EncodedImage | None = None
    error: Exception | None = None
    delay: float = 0.0


@dataclass
class FakeImageClient:
    """Stands in for the Gemini client, keyed by directive."""

    script: dict[str, Scripted]
    calls: list[str] = field(default_factory=list)
    completed: list[str] = field(default_factory=list)
    in_flight: int = 0
    peak_in_flight: int = 0

    async def generate(self, source: SourceImage, directive: str) -> EncodedImage:
        self.calls.append(directive)
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            entry = self.script[directive]
            await asyncio.sleep(entry.delay)
            if entry.error is not None:
                raise entry.error
            if entry.image is None:
                raise ImageGenerationError(f'Image generation failed for prompt: "{directive}"')
            return entry.image
        finally:
            self.in_flight -= 1
            self.completed.append(directive)


def make_image(tag: str) -> EncodedImage:
    return EncodedImage(mime_type="image/png", data=tag)


@pytest.fixture()
def source_image() -> SourceImage:
    return SourceImage(data="c291cmNl", mime_type="image/png")


@pytest.fixture()
def four_angles() -> AngleCatalog:
    return AngleCatalog.from_specs(
        [
            ViewSpec(label="from the right", directive="right"),
            ViewSpec(label="from the left", directive="left"),
            ViewSpec(label="from behind", directive="behind"),
            ViewSpec(label="from above", directive="above"),
        ]
    )


@pytest.fixture()
def png_bytes() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (4, 4), (200, 40, 40)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture()
def jpeg_bytes() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (4, 4), (40, 40, 200)).save(buffer, format="JPEG")
    return buffer.getvalue()
