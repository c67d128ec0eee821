"""Image generator adapters package."""

from .aliwanx import AliWanxPosterGenerator
from .base import BaseImageGenerator

__all__ = [
    "AliWanxPosterGenerator",
    "BaseImageGenerator",
]
