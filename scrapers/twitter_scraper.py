"""
Twitter/X Scraper
抓取指定账号的最新推文
"""
from typing import Any, Dict, List, Optional
import logging
import re

import tweepy

from .base import RateLimitedScraper
from config import Settings
from core import ContentMetadata, MediaItem, ScrapedContent, SourceType
from utils.exceptions import ConfigurationError, ScraperError


logger = logging.getLogger(__name__)

_HANDLE_RE = re.compile(r"(?:https?://)?(?:www\.)?(?:twitter|x)\.com/@?([A-Za-z0-9_]{1,15})")

# 限流与服务端 5xx 可重试, 其余 API 错误直接失败
_TRANSIENT_ERRORS = (tweepy.TooManyRequests, tweepy.TwitterServerError)


def parse_handle(identifier: str) -> str:
    """从 URL 或 @handle 中解析用户名"""
    text = str(identifier or "").strip()
    match = _HANDLE_RE.match(text)
    if match:
        return match.group(1)
    return text.lstrip("@").strip("/")


class TwitterScraper(RateLimitedScraper):
    """
    Twitter/X 抓取器
    使用 Twitter API v2 (需要 Bearer Token), 每个数据源是一个账号
    """
    
    def __init__(self, client: Optional[tweepy.Client] = None, *, settings: Optional[Settings] = None):
        super().__init__(requests_per_second=0.5, settings=settings)  # Twitter API 有严格限制
        self._twitter_settings = self.settings.twitter
        self._client = client
    
    @property
    def source_type(self) -> SourceType:
        return SourceType.TWITTER
    
    @property
    def name(self) -> str:
        return "Twitter/X"
    
    def is_configured(self) -> bool:
        return self._client is not None or bool(self._twitter_settings.bearer_token)
    
    def _get_client(self) -> tweepy.Client:
        if self._client is None:
            self._client = tweepy.Client(
                bearer_token=self._twitter_settings.bearer_token,
                wait_on_rate_limit=False,
            )
        return self._client
    
    async def scrape(self, identifier: str) -> List[ScrapedContent]:
        """
        抓取账号最新推文
        
        Args:
            identifier: 账号主页 URL 或 @handle
        """
        if not self.is_configured():
            raise ConfigurationError("TWITTER_BEARER_TOKEN is not set")
        
        handle = parse_handle(identifier)
        if not handle:
            raise ScraperError("empty twitter handle", source=identifier)
        
        logger.info(f"[Twitter] Fetching timeline: @{handle}")
        await self._wait_for_rate_limit()
        
        max_results = min(max(self._twitter_settings.max_results, 5), 100)
        try:
            async for attempt in self._retrying(*_TRANSIENT_ERRORS):
                with attempt:
                    tweets, media_map = await self._run_blocking(self._sync_user_tweets, handle, max_results)
        except tweepy.TweepyException as e:
            raise ScraperError(f"Twitter API error: {e}", source=identifier) from e
        
        items = [self._convert_to_content(handle, tweet, media_map) for tweet in tweets]
        self._log_scrape(identifier, len(items))
        return items
    
    def _sync_user_tweets(self, handle: str, max_results: int):
        """同步获取账号推文 (线程池中执行)"""
        client = self._get_client()
        
        user = client.get_user(username=handle)
        if not user.data:
            raise ScraperError(f"twitter user not found: {handle}", source=handle)
        
        response = client.get_users_tweets(
            user.data.id,
            max_results=max_results,
            exclude=["retweets", "replies"],
            tweet_fields=["created_at", "public_metrics", "attachments"],
            expansions=["attachments.media_keys"],
            media_fields=["url", "preview_image_url", "type", "width", "height"],
        )
        
        media_map: Dict[str, Any] = {}
        if response.includes and "media" in response.includes:
            for media in response.includes["media"]:
                media_map[media.media_key] = media
        
        return list(response.data or []), media_map
    
    def _convert_to_content(self, handle: str, tweet, media_map: Dict[str, Any]) -> ScrapedContent:
        """将 Tweet 转换为 ScrapedContent"""
        metrics = tweet.public_metrics or {}
        media_keys = (tweet.attachments or {}).get("media_keys", [])
        
        media: List[MediaItem] = []
        for key in media_keys:
            entry = media_map.get(key)
            if entry is None:
                continue
            url = getattr(entry, "url", None) or getattr(entry, "preview_image_url", None)
            if not url:
                continue
            width = getattr(entry, "width", None)
            height = getattr(entry, "height", None)
            media.append(
                MediaItem(
                    url=url,
                    type="image" if entry.type == "photo" else str(entry.type),
                    size={"width": width, "height": height} if width and height else None,
                )
            )
        
        text = str(tweet.text or "").strip()
        return ScrapedContent(
            id=self._make_id(self.source_type.value, str(tweet.id)),
            title=text.split("\n", 1)[0][:80],
            content=text,
            url=f"https://x.com/{handle}/status/{tweet.id}",
            publish_date=tweet.created_at,
            metadata=ContentMetadata(
                source=f"@{handle}",
                likes=metrics.get("like_count", 0),
                reposts=metrics.get("retweet_count", 0),
            ),
            media=media,
        )
