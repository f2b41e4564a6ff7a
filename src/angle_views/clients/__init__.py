"""
Client adapters for the Gemini image generation endpoint.
"""
from .gemini_image import GeminiImageClient

__all__ = ["GeminiImageClient"]
