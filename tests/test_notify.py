from __future__ import annotations

import json

import httpx
import pytest

from notify import BarkNotifier, NotifyLevel


@pytest.mark.asyncio
async def test_bark_posts_push_payload() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"code": 200, "message": "success"})

    notifier = BarkNotifier(
        key="device-1",
        base_url="https://bark.example.com/",
        group="digest",
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )

    assert await notifier.error("工作流失败", "boom") is True
    await notifier.close()

    assert seen["url"] == "https://bark.example.com/push"
    assert seen["body"]["device_key"] == "device-1"
    assert seen["body"]["title"].endswith("工作流失败")
    assert seen["body"]["body"] == "boom"
    assert seen["body"]["group"] == "digest"
    assert seen["body"]["level"] == "timeSensitive"


@pytest.mark.asyncio
async def test_bark_delivery_failure_returns_false() -> None:
    notifier = BarkNotifier(
        key="device-1",
        base_url="https://bark.example.com",
        client=httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(500))),
    )

    assert await notifier.send(NotifyLevel.WARNING, "title", "body") is False


@pytest.mark.asyncio
async def test_bark_without_key_only_logs() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    notifier = BarkNotifier(key="", client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))
    notifier.key = ""

    assert notifier.enabled is False
    assert await notifier.info("工作流开始", "开始执行内容抓取和处理") is False
