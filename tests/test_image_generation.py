from __future__ import annotations

import json
from typing import List

import httpx
import pytest

from core import ImageRequest
from render import AliWanxPosterGenerator, BaseImageGenerator, ImageGeneratorFactory
from utils.exceptions import ConfigurationError, ImageGenerationError


BASE = "https://dashscope.example.com/api/v1"


def _generator(statuses: List[dict], seen: List[httpx.Request], **kwargs) -> AliWanxPosterGenerator:
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.method == "POST":
            return httpx.Response(200, json={"output": {"task_id": "task-1", "task_status": "PENDING"}})
        return httpx.Response(200, json={"output": statuses.pop(0)})

    return AliWanxPosterGenerator(
        api_key="ds-test",
        base_url=BASE,
        poll_interval=0,
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        **kwargs,
    )


def _request() -> ImageRequest:
    return ImageRequest(title="今日要闻", sub_title="2026/10/19 AI速递", prompt_text_zh="科技 - 今日要闻")


@pytest.mark.asyncio
async def test_poster_polls_until_succeeded() -> None:
    seen: List[httpx.Request] = []
    generator = _generator(
        [
            {"task_status": "RUNNING"},
            {"task_status": "SUCCEEDED", "render_urls": ["https://oss.example.com/poster.png"]},
        ],
        seen,
    )

    url = await generator.generate(_request())
    await generator.close()

    assert url == "https://oss.example.com/poster.png"
    submit = seen[0]
    assert str(submit.url) == f"{BASE}/services/aigc/text2image/image-synthesis"
    assert submit.headers["X-DashScope-Async"] == "enable"
    body = json.loads(submit.content)
    assert body["model"] == "wanx-poster-generation-v1"
    assert body["input"]["title"] == "今日要闻"
    assert body["input"]["generate_num"] == 1
    assert [str(r.url) for r in seen[1:]] == [f"{BASE}/tasks/task-1"] * 2


@pytest.mark.asyncio
async def test_poster_failure_raises() -> None:
    generator = _generator([{"task_status": "FAILED", "message": "content moderation"}], [])

    with pytest.raises(ImageGenerationError, match="content moderation"):
        await generator.generate(_request())


@pytest.mark.asyncio
async def test_poster_timeout_raises() -> None:
    generator = _generator([{"task_status": "RUNNING"}] * 3, [], max_wait=0)

    with pytest.raises(ImageGenerationError, match="timed out"):
        await generator.generate(_request())


@pytest.mark.asyncio
async def test_poster_without_key_is_configuration_error() -> None:
    generator = AliWanxPosterGenerator(base_url=BASE)
    generator.api_key = ""

    with pytest.raises(ConfigurationError):
        await generator.generate(_request())


class _StubGenerator(BaseImageGenerator):
    provider = "stub"

    async def generate(self, request: ImageRequest) -> str:
        return "https://stub/img.png"


def test_factory_caches_and_rejects_unknown() -> None:
    built = []

    def build():
        built.append(1)
        return _StubGenerator()

    factory = ImageGeneratorFactory({"STUB": build})

    assert factory.get_generator("STUB") is factory.get_generator("STUB")
    assert len(built) == 1
    with pytest.raises(ConfigurationError):
        factory.get_generator("MISSING")
