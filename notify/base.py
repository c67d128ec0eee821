"""Operator notification hooks."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum


class NotifyLevel(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    SUCCESS = "success"


class BaseNotifier(ABC):
    """Fire-and-forget notifications. Implementations must not raise on delivery failure."""

    @abstractmethod
    async def send(self, level: NotifyLevel, title: str, body: str) -> bool:
        """Deliver one notification; returns False when delivery failed."""

    async def info(self, title: str, body: str) -> bool:
        return await self.send(NotifyLevel.INFO, title, body)

    async def warning(self, title: str, body: str) -> bool:
        return await self.send(NotifyLevel.WARNING, title, body)

    async def error(self, title: str, body: str) -> bool:
        return await self.send(NotifyLevel.ERROR, title, body)

    async def success(self, title: str, body: str) -> bool:
        return await self.send(NotifyLevel.SUCCESS, title, body)

    async def close(self) -> None:
        return None
