"""Tagged dispatch from source type to scraper."""

from __future__ import annotations

from typing import Dict, Iterable, Mapping, Optional

from config import Settings
from core import SourceType
from utils.exceptions import ConfigurationError

from .base import BaseScraper


class ScraperRegistry:
    """Static SourceType -> BaseScraper binding, built once at startup."""

    def __init__(self, scrapers: Optional[Mapping[SourceType, BaseScraper]] = None) -> None:
        self._scrapers: Dict[SourceType, BaseScraper] = {}
        for source_type, scraper in dict(scrapers or {}).items():
            self.register(source_type, scraper)

    def register(self, source_type: SourceType, scraper: BaseScraper) -> None:
        self._scrapers[SourceType(source_type)] = scraper

    def get(self, source_type: SourceType) -> BaseScraper:
        try:
            return self._scrapers[SourceType(source_type)]
        except KeyError:
            raise ConfigurationError(
                f"no scraper registered for source type '{SourceType(source_type).value}'"
            ) from None

    def resolve(self, source_types: Iterable[SourceType]) -> Dict[SourceType, BaseScraper]:
        """Bind every requested type or fail before any work starts."""
        return {SourceType(t): self.get(t) for t in source_types}

    def __contains__(self, source_type: object) -> bool:
        return source_type in self._scrapers

    async def close(self) -> None:
        for scraper in self._scrapers.values():
            await scraper.close()


def build_default_registry(settings: Optional[Settings] = None) -> ScraperRegistry:
    from .firecrawl_scraper import FireCrawlScraper
    from .twitter_scraper import TwitterScraper

    return ScraperRegistry(
        {
            SourceType.FIRECRAWL: FireCrawlScraper(settings=settings),
            SourceType.TWITTER: TwitterScraper(settings=settings),
        }
    )
