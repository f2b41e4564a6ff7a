from __future__ import annotations

import asyncio
import logging
from contextlib import nullcontext
from typing import AsyncContextManager, Iterable, Protocol, Sequence

from ..errors import BatchGenerationError
from ..types import (
    EncodedImage,
    GenerationFailure,
    GenerationOutcome,
    GenerationSuccess,
    SourceImage,
)
from .angle_catalog import DEFAULT_CATALOG, ViewSpec

logger = logging.getLogger(__name__)

ALL_FAILED_MESSAGE = "All image generation requests failed."


def _check_concurrency(max_concurrency: int | None) -> None:
    if max_concurrency is not None and max_concurrency < 1:
        raise ValueError(f"max_concurrency must be at least 1, got {max_concurrency}")


class ImageGenerator(Protocol):
    """Anything that can re-render a source image for one directive."""

    async def generate(self, source: SourceImage, directive: str) -> EncodedImage:
        ...


async def _settle(
    client: ImageGenerator,
    source: SourceImage,
    spec: ViewSpec,
    limiter: AsyncContextManager[object],
) -> GenerationOutcome:
    """Run one request and turn whatever happens into an outcome."""
    async with limiter:
        try:
            image = await client.generate(source, spec.directive)
        except Exception as exc:
            logger.debug("View %r failed: %s", spec.label, exc)
            return GenerationFailure(spec=spec, reason=str(exc))
    return GenerationSuccess(spec=spec, image=image)


async def collect_outcomes(
    source: SourceImage,
    catalog: Iterable[ViewSpec],
    client: ImageGenerator,
    *,
    max_concurrency: int | None = None,
) -> list[GenerationOutcome]:
    """
    Issue one request per view and wait for every one of them to settle.

    Outcomes are returned in catalog order, whatever order the requests finish in.
    ``max_concurrency`` optionally bounds how many requests are in flight at once.
    """
    _check_concurrency(max_concurrency)
    specs = list(catalog)
    limiter: AsyncContextManager[object]
    if max_concurrency is not None:
        limiter = asyncio.Semaphore(max_concurrency)
    else:
        limiter = nullcontext()

    logger.info("Requesting %d view(s)", len(specs))
    outcomes = await asyncio.gather(
        *(_settle(client, source, spec, limiter) for spec in specs)
    )
    return list(outcomes)


def reduce_outcomes(outcomes: Sequence[GenerationOutcome]) -> list[EncodedImage]:
    """
    Keep successful images in catalog order.

    Failures are dropped without a trace as long as one image came back. When none
    did, the first failure's reason becomes the batch error.
    """
    images = [outcome.image for outcome in outcomes if isinstance(outcome, GenerationSuccess)]
    if images:
        logger.info("Generated %d view(s)", len(images))
        return images

    first_failure = next(
        (outcome for outcome in outcomes if isinstance(outcome, GenerationFailure)), None
    )
    message = (first_failure.reason if first_failure else "") or ALL_FAILED_MESSAGE
    raise BatchGenerationError(message, outcomes)


async def generate_views(
    source: SourceImage,
    catalog: Iterable[ViewSpec],
    client: ImageGenerator,
    *,
    max_concurrency: int | None = None,
) -> list[EncodedImage]:
    """Generate every view in ``catalog`` and return the images that succeeded."""
    outcomes = await collect_outcomes(source, catalog, client, max_concurrency=max_concurrency)
    return reduce_outcomes(outcomes)


class BatchGenerator:
    """Bind a client and catalog so callers only supply the source image."""

    def __init__(
        self,
        client: ImageGenerator,
        catalog: Iterable[ViewSpec] = DEFAULT_CATALOG,
        *,
        max_concurrency: int | None = None,
    ) -> None:
        _check_concurrency(max_concurrency)
        self._client = client
        self._catalog = tuple(catalog)
        self._max_concurrency = max_concurrency

    @property
    def catalog(self) -> tuple[ViewSpec, ...]:
        return self._catalog

    async def run_outcomes(self, source: SourceImage) -> list[GenerationOutcome]:
        return await collect_outcomes(
            source, self._catalog, self._client, max_concurrency=self._max_concurrency
        )

    async def run(self, source: SourceImage) -> list[EncodedImage]:
        return reduce_outcomes(await self.run_outcomes(source))

    def run_sync(self, source: SourceImage) -> list[EncodedImage]:
        """Blocking wrapper around :meth:`run` for callers without an event loop."""
        return asyncio.run(self.run(source))
