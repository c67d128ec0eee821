from __future__ import annotations

from datetime import datetime, timezone
import json
from types import SimpleNamespace

import httpx
import pytest
import tweepy

from tenacity import wait_none

from config import Settings
from config.settings import GeneralSettings
from core import SourceType
from scrapers import FireCrawlScraper, ScraperRegistry, TwitterScraper
from scrapers.twitter_scraper import parse_handle
from utils.exceptions import ConfigurationError, ScraperError


def _firecrawl(handler) -> FireCrawlScraper:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return FireCrawlScraper(client, api_key="fc-test", base_url="https://fc.example.com")


@pytest.mark.asyncio
async def test_firecrawl_converts_extracted_stories() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={
                "success": True,
                "data": {
                    "json": {
                        "stories": [
                            {
                                "title": "Gemini 更新",
                                "content": "细节",
                                "url": "https://blog.example.com/gemini",
                                "publish_date": "2026-10-18T09:00:00Z",
                                "images": ["https://img.example.com/g.png", ""],
                            },
                            {"title": "", "url": "https://blog.example.com/untitled"},
                        ]
                    }
                },
            },
        )

    scraper = _firecrawl(handler)
    items = await scraper.scrape("https://blog.example.com")
    await scraper.close()

    assert seen["url"] == "https://fc.example.com/v1/scrape"
    assert seen["auth"] == "Bearer fc-test"
    assert seen["body"]["url"] == "https://blog.example.com"
    assert seen["body"]["formats"] == ["json"]

    assert len(items) == 1
    item = items[0]
    assert item.title == "Gemini 更新"
    assert item.url == "https://blog.example.com/gemini"
    assert item.publish_date == datetime(2026, 10, 18, 9, 0, tzinfo=timezone.utc)
    assert [m.url for m in item.media] == ["https://img.example.com/g.png"]
    assert item.metadata.source == "https://blog.example.com"
    assert len(item.id) == 16


@pytest.mark.asyncio
async def test_firecrawl_ids_are_stable_across_calls() -> None:
    body = {"success": True, "data": {"json": {"stories": [{"title": "t", "url": "https://a.example.com/1"}]}}}
    scraper = _firecrawl(lambda request: httpx.Response(200, json=body))

    first = await scraper.scrape("https://a.example.com")
    scraper._last_request_time = 0.0
    second = await scraper.scrape("https://a.example.com")

    assert first[0].id == second[0].id


@pytest.mark.asyncio
async def test_firecrawl_unsuccessful_payload_raises() -> None:
    scraper = _firecrawl(lambda request: httpx.Response(200, json={"success": False, "error": "blocked"}))

    with pytest.raises(ScraperError, match="blocked"):
        await scraper.scrape("https://blocked.example.com")


@pytest.mark.asyncio
async def test_firecrawl_http_error_raises() -> None:
    scraper = _firecrawl(lambda request: httpx.Response(402, text="payment required"))

    with pytest.raises(ScraperError) as exc_info:
        await scraper.scrape("https://a.example.com")

    assert exc_info.value.source == "https://a.example.com"


@pytest.mark.asyncio
async def test_firecrawl_without_key_is_configuration_error() -> None:
    scraper = FireCrawlScraper(api_key="")
    scraper.api_key = ""

    with pytest.raises(ConfigurationError):
        await scraper.scrape("https://a.example.com")


@pytest.mark.parametrize(
    "identifier,expected",
    [
        ("https://x.com/OpenAI", "OpenAI"),
        ("https://twitter.com/AnthropicAI/", "AnthropicAI"),
        ("x.com/@GoogleDeepMind", "GoogleDeepMind"),
        ("@karpathy", "karpathy"),
        ("sama", "sama"),
    ],
)
def test_parse_handle(identifier: str, expected: str) -> None:
    assert parse_handle(identifier) == expected


class _FakeTweepyClient:
    def __init__(self, *, error: Exception = None, errors=()):
        self.error = error
        self.errors = list(errors)
        self.calls = []

    def get_user(self, username):
        self.calls.append(("get_user", username))
        if self.errors:
            raise self.errors.pop(0)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(data=SimpleNamespace(id=99))

    def get_users_tweets(self, user_id, **kwargs):
        self.calls.append(("get_users_tweets", user_id, kwargs["max_results"]))
        tweet = SimpleNamespace(
            id=1234,
            text="发布新模型\n更多细节见博客",
            public_metrics={"like_count": 10, "retweet_count": 2},
            attachments={"media_keys": ["m1"]},
            created_at=datetime(2026, 10, 18, tzinfo=timezone.utc),
        )
        media = SimpleNamespace(media_key="m1", url="https://pbs.example.com/a.jpg", type="photo", width=1200, height=675)
        return SimpleNamespace(data=[tweet], includes={"media": [media]})


@pytest.mark.asyncio
async def test_twitter_scrape_converts_tweets() -> None:
    client = _FakeTweepyClient()
    scraper = TwitterScraper(client=client)

    items = await scraper.scrape("https://x.com/OpenAI")

    assert client.calls[0] == ("get_user", "OpenAI")
    assert client.calls[1][1] == 99
    assert len(items) == 1
    item = items[0]
    assert item.title == "发布新模型"
    assert item.content.endswith("更多细节见博客")
    assert item.url == "https://x.com/OpenAI/status/1234"
    assert item.metadata.source == "@OpenAI"
    assert item.media[0].type == "image"
    assert item.media[0].size == {"width": 1200, "height": 675}


@pytest.mark.asyncio
async def test_twitter_api_error_becomes_scraper_error() -> None:
    scraper = TwitterScraper(client=_FakeTweepyClient(error=tweepy.TweepyException("429 Too Many Requests")))

    with pytest.raises(ScraperError):
        await scraper.scrape("https://x.com/OpenAI")


def test_registry_rejects_unknown_type() -> None:
    registry = ScraperRegistry({SourceType.TWITTER: TwitterScraper(client=_FakeTweepyClient())})

    assert SourceType.TWITTER in registry
    assert SourceType.FIRECRAWL not in registry
    with pytest.raises(ConfigurationError):
        registry.resolve([SourceType.FIRECRAWL, SourceType.TWITTER])


def _retry_settings(max_retries: int) -> Settings:
    return Settings(general=GeneralSettings(max_retries=max_retries))


@pytest.mark.asyncio
async def test_firecrawl_retries_transport_errors_up_to_max_retries() -> None:
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        if len(attempts) == 1:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, json={"success": True, "data": {"json": {"stories": []}}})

    scraper = FireCrawlScraper(
        httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        api_key="fc-test",
        base_url="https://fc.example.com",
        settings=_retry_settings(3),
    )
    scraper.retry_wait = wait_none()

    assert await scraper.scrape("https://a.example.com") == []
    assert len(attempts) == 2


@pytest.mark.asyncio
async def test_firecrawl_gives_up_after_max_retries() -> None:
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        raise httpx.ConnectError("connection refused", request=request)

    scraper = FireCrawlScraper(
        httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        api_key="fc-test",
        base_url="https://fc.example.com",
        settings=_retry_settings(2),
    )
    scraper.retry_wait = wait_none()

    with pytest.raises(httpx.ConnectError):
        await scraper.scrape("https://a.example.com")
    assert len(attempts) == 2


def _twitter_http_error(cls, status_code: int, reason: str):
    response = SimpleNamespace(status_code=status_code, reason=reason, json=lambda: {})
    return cls(response)


@pytest.mark.asyncio
async def test_twitter_retries_server_errors() -> None:
    client = _FakeTweepyClient(errors=[_twitter_http_error(tweepy.TwitterServerError, 503, "Service Unavailable")])
    scraper = TwitterScraper(client=client, settings=_retry_settings(3))
    scraper.retry_wait = wait_none()

    items = await scraper.scrape("https://x.com/OpenAI")

    assert len(items) == 1
    assert [call[0] for call in client.calls].count("get_user") == 2


@pytest.mark.asyncio
async def test_twitter_rate_limit_exhausts_retries_then_fails() -> None:
    errors = [_twitter_http_error(tweepy.TooManyRequests, 429, "Too Many Requests") for _ in range(2)]
    client = _FakeTweepyClient(errors=errors)
    scraper = TwitterScraper(client=client, settings=_retry_settings(2))
    scraper.retry_wait = wait_none()

    with pytest.raises(ScraperError):
        await scraper.scrape("https://x.com/OpenAI")
    assert client.calls == [("get_user", "OpenAI"), ("get_user", "OpenAI")]
