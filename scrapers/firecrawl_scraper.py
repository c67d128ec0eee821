"""
FireCrawl Scraper
通过 FireCrawl 抓取网页并抽取结构化新闻条目
API 文档: https://docs.firecrawl.dev/api-reference/endpoint/scrape
"""
from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

import httpx

from .base import RateLimitedScraper
from config import Settings
from core import ContentMetadata, MediaItem, ScrapedContent, SourceType
from utils.exceptions import ConfigurationError, ScraperError


logger = logging.getLogger(__name__)


EXTRACT_PROMPT = (
    "提取页面中最近发布的 AI 相关新闻/文章条目。"
    "每条包含标题、正文摘要、原文链接、发布时间(ISO8601)和配图链接。"
)

EXTRACT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "stories": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "title": {"type": "string"},
                    "content": {"type": "string"},
                    "url": {"type": "string"},
                    "publish_date": {"type": "string"},
                    "images": {"type": "array", "items": {"type": "string"}},
                },
                "required": ["title", "url"],
            },
        }
    },
    "required": ["stories"],
}


class FireCrawlScraper(RateLimitedScraper):
    """
    FireCrawl 抓取器
    
    每个数据源是一个网页 URL, 使用 FireCrawl 的 JSON 抽取模式
    把列表页拆成多条内容
    """
    
    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        *,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        settings: Optional[Settings] = None,
    ):
        super().__init__(requests_per_second=1.0, settings=settings)
        firecrawl = self.settings.firecrawl
        self.api_key = str(api_key or firecrawl.api_key or "").strip()
        self.base_url = str(base_url or firecrawl.base_url).rstrip("/")
        self._session = client
    
    @property
    def source_type(self) -> SourceType:
        return SourceType.FIRECRAWL
    
    @property
    def name(self) -> str:
        return "FireCrawl"
    
    def is_configured(self) -> bool:
        return bool(self.api_key)
    
    def _get_session(self) -> httpx.AsyncClient:
        if self._session is None:
            self._session = httpx.AsyncClient(timeout=self.settings.general.request_timeout * 2)
        return self._session
    
    async def _post_scrape(self, url: str) -> Dict[str, Any]:
        await self._wait_for_rate_limit()
        async for attempt in self._retrying(httpx.TransportError):
            with attempt:
                response = await self._get_session().post(
                    f"{self.base_url}/v1/scrape",
                    headers={"Authorization": f"Bearer {self.api_key}"},
                    json={
                        "url": url,
                        "formats": ["json"],
                        "onlyMainContent": True,
                        "jsonOptions": {"prompt": EXTRACT_PROMPT, "schema": EXTRACT_SCHEMA},
                    },
                )
        if response.status_code >= 400:
            raise ScraperError(
                f"FireCrawl http {response.status_code}: {response.text[:200]}",
                source=url,
            )
        return dict(response.json() or {})
    
    async def scrape(self, identifier: str) -> List[ScrapedContent]:
        """
        抓取单个网页
        
        Args:
            identifier: 网页 URL
            
        Returns:
            页面中抽取出的内容列表
        """
        if not self.is_configured():
            raise ConfigurationError("FIRECRAWL_API_KEY is not set")
        
        logger.info(f"[FireCrawl] Scraping: {identifier}")
        payload = await self._post_scrape(identifier)
        if not payload.get("success", False):
            raise ScraperError(str(payload.get("error") or "FireCrawl scrape failed"), source=identifier)
        
        data = payload.get("data") or {}
        stories = (data.get("json") or {}).get("stories") or []
        items = [
            item
            for item in (self._convert_story(identifier, story) for story in stories)
            if item is not None
        ]
        self._log_scrape(identifier, len(items))
        return items
    
    def _convert_story(self, source_url: str, story: Dict[str, Any]) -> Optional[ScrapedContent]:
        title = str(story.get("title") or "").strip()
        url = str(story.get("url") or "").strip()
        if not title or not url:
            return None
        
        media = [
            MediaItem(url=str(image).strip(), type="image")
            for image in (story.get("images") or [])
            if str(image or "").strip()
        ]
        return ScrapedContent(
            id=self._make_id(self.source_type.value, url),
            title=title,
            content=str(story.get("content") or "").strip(),
            url=url,
            publish_date=_parse_date(story.get("publish_date")),
            metadata=ContentMetadata(source=source_url),
            media=media,
        )


def _parse_date(value: Any) -> Optional[datetime]:
    text = str(value or "").strip()
    if not text:
        return None
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
