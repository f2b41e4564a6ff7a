from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from .types import GenerationOutcome


class AngleViewsError(RuntimeError):
    """Base class for errors raised by the angle generation toolkit."""


class ImageGenerationError(AngleViewsError):
    """A single generation request failed or returned no inline image."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class BatchGenerationError(AngleViewsError):
    """Every request in a batch failed; carries the per-angle outcomes."""

    def __init__(self, message: str, outcomes: Sequence["GenerationOutcome"] = ()) -> None:
        super().__init__(message)
        self.outcomes = tuple(outcomes)
