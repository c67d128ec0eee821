"""
Weixin Publisher
微信公众号: 上传封面素材 -> 新建草稿 -> 发布
API 文档: https://developers.weixin.qq.com/doc/offiaccount/
"""
from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict, Optional
from urllib.parse import urlparse

import httpx

from config.settings import WeixinSettings
from core import PublishResult
from utils.exceptions import ConfigurationError, PublishError

from .base import BasePublisher


logger = logging.getLogger(__name__)

# 公众号接口限制
MAX_TITLE_LEN = 64
MAX_DIGEST_LEN = 120
_TOKEN_REFRESH_MARGIN = 300


class WeixinPublisher(BasePublisher):
    """微信公众号发布器"""

    def __init__(
        self,
        *,
        app_id: Optional[str] = None,
        app_secret: Optional[str] = None,
        base_url: Optional[str] = None,
        author: Optional[str] = None,
        auto_publish: Optional[bool] = None,
        client: Optional[httpx.AsyncClient] = None,
        settings: Optional[WeixinSettings] = None,
    ) -> None:
        if settings is None:
            from config import get_settings

            settings = get_settings().weixin
        self.app_id = str(app_id or settings.app_id or "").strip()
        self.app_secret = str(app_secret or settings.app_secret or "").strip()
        self.base_url = str(base_url or settings.base_url).rstrip("/")
        self.author = settings.author if author is None else author
        self.auto_publish = settings.auto_publish if auto_publish is None else bool(auto_publish)
        self._client = client
        self._access_token: Optional[str] = None
        self._token_expires_at = 0.0

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=60)
        return self._client

    async def _get_access_token(self) -> str:
        """获取 access_token (过期前 5 分钟刷新)"""
        if self._access_token and time.monotonic() < self._token_expires_at:
            return self._access_token
        if not self.app_id or not self.app_secret:
            raise ConfigurationError("WEIXIN_APP_ID / WEIXIN_APP_SECRET is not set")

        payload = await self._call(
            "GET",
            "/token",
            params={"grant_type": "client_credential", "appid": self.app_id, "secret": self.app_secret},
            with_token=False,
        )
        token = str(payload.get("access_token") or "").strip()
        if not token:
            raise PublishError("access_token missing in response")
        expires_in = int(payload.get("expires_in") or 7200)
        self._access_token = token
        self._token_expires_at = time.monotonic() + max(0, expires_in - _TOKEN_REFRESH_MARGIN)
        return token

    async def _call(
        self,
        method: str,
        path: str,
        *,
        with_token: bool = True,
        params: Optional[Dict[str, Any]] = None,
        json_body: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        query = dict(params or {})
        if with_token:
            query["access_token"] = await self._get_access_token()

        content = None
        headers = None
        if json_body is not None:
            # 接口要求 UTF-8 原文, 转义后的中文会原样显示
            content = json.dumps(json_body, ensure_ascii=False).encode("utf-8")
            headers = {"Content-Type": "application/json; charset=utf-8"}

        try:
            response = await self._get_client().request(
                method,
                f"{self.base_url}{path}",
                params=query,
                content=content,
                headers=headers,
                files=files,
            )
        except httpx.RequestError as exc:
            raise PublishError(f"weixin request failed: {exc}") from exc

        if response.status_code >= 400:
            raise PublishError(f"weixin http {response.status_code}: {response.text[:200]}")
        payload = dict(response.json() or {})
        errcode = int(payload.get("errcode") or 0)
        if errcode != 0:
            raise PublishError(f"weixin {path} failed: {payload.get('errmsg')}", errcode=errcode)
        return payload

    async def upload_image(self, image_url: str) -> str:
        """下载图片并上传为永久素材, 返回 media_id"""
        try:
            response = await self._get_client().get(image_url, follow_redirects=True)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise PublishError(f"cover download failed: {exc}") from exc

        content_type = response.headers.get("content-type", "image/png").split(";")[0].strip()
        filename = urlparse(image_url).path.rsplit("/", 1)[-1] or "cover.png"
        if "." not in filename:
            filename = f"{filename}.{content_type.rsplit('/', 1)[-1] or 'png'}"

        payload = await self._call(
            "POST",
            "/material/add_material",
            params={"type": "image"},
            files={"media": (filename, response.content, content_type)},
        )
        media_id = str(payload.get("media_id") or "").strip()
        if not media_id:
            raise PublishError("media_id missing in upload response")
        logger.info(f"[Weixin] cover uploaded: {media_id}")
        return media_id

    async def publish(self, article: str, title: str, digest: str, thumb_media_id: str) -> PublishResult:
        draft = await self._call(
            "POST",
            "/draft/add",
            json_body={
                "articles": [
                    {
                        "title": title[:MAX_TITLE_LEN],
                        "author": self.author,
                        "digest": digest[:MAX_DIGEST_LEN],
                        "content": article,
                        "thumb_media_id": thumb_media_id,
                        "need_open_comment": 1,
                        "only_fans_can_comment": 0,
                    }
                ]
            },
        )
        draft_id = str(draft.get("media_id") or "").strip()
        if not draft_id:
            raise PublishError("draft media_id missing")
        logger.info(f"[Weixin] draft created: {draft_id}")

        if not self.auto_publish:
            return PublishResult(status="draft", media_id=draft_id)

        submitted = await self._call("POST", "/freepublish/submit", json_body={"media_id": draft_id})
        return PublishResult(
            status="submitted",
            media_id=draft_id,
            publish_id=str(submitted.get("publish_id") or "") or None,
        )

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
