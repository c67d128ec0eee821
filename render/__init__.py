"""Cover image generation."""

from .adapters import AliWanxPosterGenerator, BaseImageGenerator
from .manager import ImageGeneratorFactory

__all__ = [
    "AliWanxPosterGenerator",
    "BaseImageGenerator",
    "ImageGeneratorFactory",
]
