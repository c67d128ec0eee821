from __future__ import annotations

from datetime import datetime

import pytest

from core import ContentMetadata, MediaItem, PublishRecord
from outputs import WeixinArticleRenderer


def _record(**overrides) -> PublishRecord:
    data = dict(
        id="r1",
        title="模型发布",
        content="第一段\n\n第二段",
        url="https://example.com/post/1",
        publish_date=datetime(2026, 10, 19, 8, 30),
        metadata=ContentMetadata(source="firecrawl"),
        keywords=["AI", "模型"],
        media=[
            MediaItem(url="https://img.example.com/1.png"),
            MediaItem(url="https://img.example.com/2.png"),
        ],
    )
    data.update(overrides)
    return PublishRecord(**data)


@pytest.mark.asyncio
async def test_render_includes_numbered_articles_and_metadata() -> None:
    renderer = WeixinArticleRenderer(intro="今日精选")

    html = await renderer.render([_record(), _record(id="r2", title="第二条")])

    assert "今日精选" in html
    assert "1. 模型发布" in html
    assert "2. 第二条" in html
    assert html.count("<p style=\"margin:0 0 12px;text-align:justify;\">") == 4
    assert "#AI" in html and "#模型" in html
    assert "2026-10-19 08:30" in html
    assert "https://example.com/post/1" in html


def test_render_limits_images_per_article() -> None:
    html = WeixinArticleRenderer(max_images_per_article=1).render_sync([_record()])

    assert "https://img.example.com/1.png" in html
    assert "https://img.example.com/2.png" not in html


def test_render_escapes_html_in_content() -> None:
    html = WeixinArticleRenderer().render_sync([_record(title="<script>x</script>", keywords=[], media=[])])

    assert "<script>" not in html
    assert "&lt;script&gt;" in html


def test_render_empty_list_produces_wrapper_only() -> None:
    html = WeixinArticleRenderer().render_sync([])

    assert html.startswith("<section")
    assert "<h2" not in html
