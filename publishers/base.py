"""Publishing target interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from core import PublishResult


class BasePublisher(ABC):
    """Uploads cover images and submits rendered articles."""

    @abstractmethod
    async def upload_image(self, image_url: str) -> str:
        """Upload an image by URL and return the platform media handle."""

    @abstractmethod
    async def publish(self, article: str, title: str, digest: str, thumb_media_id: str) -> PublishResult:
        """Submit a rendered article."""

    async def close(self) -> None:
        return None
