"""
Re-render one photograph from new camera angles with Gemini image generation.
"""
from .config import load_config
from .errors import BatchGenerationError, ImageGenerationError
from .tasks.angle_catalog import DEFAULT_CATALOG, AngleCatalog, ViewSpec
from .tasks.batch_generator import BatchGenerator, generate_views
from .types import EncodedImage, SourceImage

__all__ = [
    "load_config",
    "AngleCatalog",
    "BatchGenerationError",
    "BatchGenerator",
    "DEFAULT_CATALOG",
    "EncodedImage",
    "ImageGenerationError",
    "SourceImage",
    "ViewSpec",
    "generate_views",
]
