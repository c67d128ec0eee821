"""
Scrapers Module
"""
from .base import BaseScraper, RateLimitedScraper
from .firecrawl_scraper import FireCrawlScraper
from .twitter_scraper import TwitterScraper
from .registry import ScraperRegistry, build_default_registry

__all__ = [
    "BaseScraper",
    "RateLimitedScraper",
    "FireCrawlScraper",
    "TwitterScraper",
    "ScraperRegistry",
    "build_default_registry",
]
