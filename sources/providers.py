"""Source-list providers: where the per-run list of source identifiers comes from."""

from __future__ import annotations

from abc import ABC, abstractmethod
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from core import SourceConfig, SourceLists
from utils.exceptions import ConfigurationError


logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent


class SourceProvider(ABC):
    @abstractmethod
    async def get_sources(self) -> SourceLists:
        raise NotImplementedError


class StaticSourceProvider(SourceProvider):
    def __init__(self, sources: SourceLists) -> None:
        self._sources = sources

    async def get_sources(self) -> SourceLists:
        return self._sources


def _coerce_entries(raw: Any) -> List[SourceConfig]:
    entries: List[SourceConfig] = []
    for entry in list(raw or []):
        if isinstance(entry, str):
            identifier = entry.strip()
        elif isinstance(entry, dict):
            identifier = str(entry.get("identifier") or "").strip()
        else:
            identifier = ""
        if identifier:
            entries.append(SourceConfig(identifier=identifier))
    return entries


def parse_source_lists(payload: Dict[str, Any], category: str) -> SourceLists:
    """Pick one category (e.g. ``AI``) out of a ``{category: {type: [...]}}`` mapping."""
    section = payload.get(category)
    if not isinstance(section, dict):
        raise ConfigurationError(f"source category '{category}' not found")
    return SourceLists(
        firecrawl=_coerce_entries(section.get("firecrawl")),
        twitter=_coerce_entries(section.get("twitter")),
    )


class FileSourceProvider(SourceProvider):
    """Reads categorized source lists from a JSON file."""

    def __init__(self, path: Optional[str | Path] = None, category: Optional[str] = None) -> None:
        if path is None or category is None:
            from config import get_article_settings

            settings = get_article_settings()
            path = path or settings.sources_file
            category = category or settings.sources_category
        target = Path(path)
        self.path = target if target.is_absolute() else PROJECT_ROOT / target
        self.category = category

    async def get_sources(self) -> SourceLists:
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise ConfigurationError(f"sources file not found: {self.path}") from exc
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"invalid sources file {self.path}: {exc}") from exc

        sources = parse_source_lists(payload, self.category)
        logger.debug(f"loaded {sources.total} sources from {self.path}")
        return sources
