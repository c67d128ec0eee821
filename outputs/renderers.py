"""
Output Renderers
将发布记录渲染为微信公众号文章 HTML (内联样式)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
import re
from typing import List, Optional, Sequence

from jinja2 import BaseLoader, Environment

from core import PublishRecord


ARTICLE_TEMPLATE = """\
<section style="font-size:15px;color:#333;line-height:1.75;letter-spacing:0.5px;">
{%- if intro %}
  <p style="margin:0 0 20px;color:#888;font-size:13px;">{{ intro }}</p>
{%- endif %}
{%- for article in articles %}
  <section style="margin:0 0 32px;">
    <h2 style="font-size:18px;font-weight:bold;color:#1a1a1a;border-left:4px solid #3370ff;padding-left:10px;margin:0 0 12px;">
      {{ loop.index }}. {{ article.title }}
    </h2>
    {%- for paragraph in article.content | paragraphs %}
    <p style="margin:0 0 12px;text-align:justify;">{{ paragraph }}</p>
    {%- endfor %}
    {%- for media in article.media if media.type == "image" %}
    {%- if loop.index <= max_images %}
    <p style="margin:0 0 12px;text-align:center;"><img src="{{ media.url }}" style="max-width:100%;border-radius:6px;" /></p>
    {%- endif %}
    {%- endfor %}
    {%- if article.keywords %}
    <p style="margin:0 0 8px;">
      {%- for keyword in article.keywords %}
      <span style="display:inline-block;margin:0 6px 6px 0;padding:2px 8px;font-size:12px;color:#3370ff;background:#eef3ff;border-radius:10px;">#{{ keyword }}</span>
      {%- endfor %}
    </p>
    {%- endif %}
    <p style="margin:0;font-size:12px;color:#999;">
      {%- if article.publish_date %}{{ article.publish_date | date }} · {% endif -%}
      原文: {{ article.url | truncate_url }}
    </p>
  </section>
{%- endfor %}
</section>
"""


def _truncate_text(value: str, max_len: int = 80) -> str:
    text = re.sub(r"\s+", " ", str(value or "")).strip()
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def _paragraphs(value: str) -> List[str]:
    return [line.strip() for line in str(value or "").splitlines() if line.strip()]


def _format_date(value: Optional[datetime]) -> str:
    if value is None:
        return ""
    return value.strftime("%Y-%m-%d %H:%M")


class BaseArticleRenderer(ABC):
    """渲染接口"""

    @abstractmethod
    async def render(self, records: Sequence[PublishRecord]) -> str:
        pass


class WeixinArticleRenderer(BaseArticleRenderer):
    """
    微信公众号文章渲染器
    
    公众号编辑器会剥离 <style>, 所以全部使用内联样式
    """

    def __init__(self, *, intro: str = "", max_images_per_article: int = 1):
        self.intro = intro
        self.max_images_per_article = max(0, int(max_images_per_article))
        env = Environment(loader=BaseLoader(), autoescape=True, trim_blocks=True, lstrip_blocks=True)
        env.filters["paragraphs"] = _paragraphs
        env.filters["date"] = _format_date
        env.filters["truncate_url"] = lambda url: _truncate_text(url, max_len=60)
        self._template = env.from_string(ARTICLE_TEMPLATE)

    async def render(self, records: Sequence[PublishRecord]) -> str:
        return self.render_sync(records)

    def render_sync(self, records: Sequence[PublishRecord]) -> str:
        return self._template.render(
            articles=list(records),
            intro=self.intro,
            max_images=self.max_images_per_article,
        )
