"""Key-based configuration lookup used by the workflow."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional

from utils.exceptions import ConfigurationError

from .settings import Settings, get_settings


class ConfigProvider(ABC):
    """Resolve flat configuration keys such as ``ARTICLE_NUM``."""

    @abstractmethod
    def get(self, key: str) -> Any:
        raise NotImplementedError


class SettingsConfigProvider(ConfigProvider):
    """ConfigProvider backed by the pydantic settings tree."""

    _KEYS: Dict[str, Callable[[Settings], Any]] = {
        "ARTICLE_NUM": lambda s: s.article.num,
        "CAMPAIGN_LABEL": lambda s: s.article.campaign_label,
        "SOURCES_FILE": lambda s: s.article.sources_file,
        "SOURCES_CATEGORY": lambda s: s.article.sources_category,
        "LLM_MIN_BALANCE_CNY": lambda s: s.llm.min_balance_cny,
    }

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()

    def get(self, key: str) -> Any:
        resolver = self._KEYS.get(str(key or "").strip().upper())
        if resolver is None:
            raise ConfigurationError(f"unknown config key: {key}")
        return resolver(self._settings)


class StaticConfigProvider(ConfigProvider):
    """Dictionary-backed provider, handy for scripted runs and tests."""

    def __init__(self, values: Dict[str, Any]) -> None:
        self._values = {str(k).upper(): v for k, v in dict(values or {}).items()}

    def get(self, key: str) -> Any:
        try:
            return self._values[str(key).upper()]
        except KeyError as exc:
            raise ConfigurationError(f"unknown config key: {key}") from exc
