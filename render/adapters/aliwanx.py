"""Tongyi Wanxiang poster generation adapter (DashScope async task API)."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Dict, Optional

import httpx

from config.settings import DashScopeSettings
from core import ImageRequest
from utils.exceptions import ConfigurationError, ImageGenerationError

from .base import BaseImageGenerator


logger = logging.getLogger(__name__)

_SYNTHESIS_PATH = "/services/aigc/text2image/image-synthesis"
_TERMINAL_FAILURES = {"FAILED", "CANCELED", "UNKNOWN"}


class AliWanxPosterGenerator(BaseImageGenerator):
    """Submit a wanx poster task, poll it, return the first rendered image URL."""

    provider = "aliwanx_poster"
    model = "wanx-poster-generation-v1"

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        poll_interval: Optional[float] = None,
        max_wait: Optional[float] = None,
        wh_ratios: str = "横版",
        client: Optional[httpx.AsyncClient] = None,
        settings: Optional[DashScopeSettings] = None,
    ) -> None:
        if settings is None:
            from config import get_settings

            settings = get_settings().dashscope
        self.api_key = str(api_key or settings.api_key or "").strip()
        self.base_url = str(base_url or settings.base_url).strip().rstrip("/")
        self.poll_interval = float(settings.poll_interval if poll_interval is None else poll_interval)
        self.max_wait = float(settings.max_wait if max_wait is None else max_wait)
        self.wh_ratios = wh_ratios
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=30)
        return self._client

    @property
    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"}

    async def generate(self, request: ImageRequest) -> str:
        if not self.api_key:
            raise ConfigurationError("DASHSCOPE_API_KEY is not set")

        task_id = await self._submit(request)
        logger.info(f"[AliWanx] poster task submitted: {task_id}")
        output = await self._wait_for_task(task_id)

        urls = output.get("render_urls") or [
            r.get("url") for r in (output.get("results") or []) if isinstance(r, dict)
        ]
        urls = [u for u in urls if u]
        if not urls:
            raise ImageGenerationError("poster task returned no image", provider=self.provider, task_id=task_id)
        return str(urls[0])

    async def _submit(self, request: ImageRequest) -> str:
        body = {
            "model": self.model,
            "input": {
                "title": request.title,
                "sub_title": request.sub_title,
                "body_text": "",
                "prompt_text_zh": request.prompt_text_zh,
                "wh_ratios": self.wh_ratios,
                "lora_name": "",
                "lora_weight": 0.8,
                "ctrl_ratio": 0.7,
                "ctrl_step": 0.7,
                "generate_mode": request.generate_mode,
                "generate_num": int(request.generate_num),
            },
            "parameters": {},
        }
        payload = await self._request(
            "POST",
            _SYNTHESIS_PATH,
            json=body,
            headers={**self._headers, "X-DashScope-Async": "enable"},
        )
        task_id = str((payload.get("output") or {}).get("task_id") or "").strip()
        if not task_id:
            raise ImageGenerationError("poster task id missing", provider=self.provider)
        return task_id

    async def _wait_for_task(self, task_id: str) -> Dict[str, Any]:
        deadline = time.monotonic() + self.max_wait
        while True:
            payload = await self._request("GET", f"/tasks/{task_id}", headers=self._headers)
            output = dict(payload.get("output") or {})
            status = str(output.get("task_status") or "").upper()
            if status == "SUCCEEDED":
                return output
            if status in _TERMINAL_FAILURES:
                raise ImageGenerationError(
                    f"poster task {status.lower()}: {output.get('message') or ''}".strip(),
                    provider=self.provider,
                    task_id=task_id,
                )
            if time.monotonic() >= deadline:
                raise ImageGenerationError("poster task timed out", provider=self.provider, task_id=task_id)
            await asyncio.sleep(self.poll_interval)

    async def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        try:
            response = await self._get_client().request(method, f"{self.base_url}{path}", **kwargs)
        except httpx.TimeoutException as exc:
            raise ImageGenerationError("dashscope timeout", provider=self.provider) from exc
        except httpx.RequestError as exc:
            raise ImageGenerationError(f"dashscope request failed: {exc}", provider=self.provider) from exc

        if response.status_code in {401, 403}:
            raise ImageGenerationError("dashscope auth failed", provider=self.provider)
        if response.status_code == 429:
            raise ImageGenerationError("dashscope quota exceeded", provider=self.provider)
        if response.status_code >= 400:
            raise ImageGenerationError(
                f"dashscope http {response.status_code}: {response.text[:200]}",
                provider=self.provider,
            )
        return dict(response.json() or {})

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
