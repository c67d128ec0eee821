"""
Configuration Management Module
统一配置管理，实现API配置解耦
"""
from .settings import (
    Settings,
    get_settings,
    get_article_settings,
    get_llm_settings,
)
from .provider import ConfigProvider, SettingsConfigProvider, StaticConfigProvider

__all__ = [
    "Settings",
    "get_settings",
    "get_article_settings",
    "get_llm_settings",
    "ConfigProvider",
    "SettingsConfigProvider",
    "StaticConfigProvider",
]
