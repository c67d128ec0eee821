"""Cover image generator abstractions."""

from __future__ import annotations

from abc import ABC, abstractmethod

from core import ImageRequest


class BaseImageGenerator(ABC):
    """Base generator that can be replaced by a provider adapter or a mock."""

    provider = "base"

    @abstractmethod
    async def generate(self, request: ImageRequest) -> str:
        """Generate images and return the URL of the first one."""
        raise NotImplementedError

    async def close(self) -> None:
        return None
