"""
Bark Notifier
iOS Bark 推送 (https://github.com/Finb/Bark)
"""
from __future__ import annotations

import logging
from typing import Optional

import httpx

from config.settings import BarkSettings

from .base import BaseNotifier, NotifyLevel


logger = logging.getLogger(__name__)

# Bark 中断级别: 错误需要突破专注模式
_BARK_LEVELS = {
    NotifyLevel.INFO: "passive",
    NotifyLevel.WARNING: "active",
    NotifyLevel.ERROR: "timeSensitive",
    NotifyLevel.SUCCESS: "active",
}

_TITLE_PREFIX = {
    NotifyLevel.INFO: "ℹ️",
    NotifyLevel.WARNING: "⚠️",
    NotifyLevel.ERROR: "❌",
    NotifyLevel.SUCCESS: "✅",
}


class BarkNotifier(BaseNotifier):
    """Bark 推送, 未配置 key 时只写日志"""

    def __init__(
        self,
        *,
        key: Optional[str] = None,
        base_url: Optional[str] = None,
        group: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        settings: Optional[BarkSettings] = None,
    ) -> None:
        if settings is None:
            from config import get_settings

            settings = get_settings().bark
        self.key = str(key or settings.key or "").strip()
        self.base_url = str(base_url or settings.base_url).rstrip("/")
        self.group = group or settings.group
        self._client = client

    @property
    def enabled(self) -> bool:
        return bool(self.key)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=10)
        return self._client

    async def send(self, level: NotifyLevel, title: str, body: str) -> bool:
        log_fn = logger.error if level is NotifyLevel.ERROR else logger.info
        log_fn(f"[Notify:{level.value}] {title} | {body}")
        if not self.enabled:
            return False

        payload = {
            "device_key": self.key,
            "title": f"{_TITLE_PREFIX[level]} {title}",
            "body": body,
            "group": self.group,
            "level": _BARK_LEVELS[level],
        }
        try:
            response = await self._get_client().post(f"{self.base_url}/push", json=payload)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning(f"Bark push failed: {exc}")
            return False
        return True

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
