from __future__ import annotations

import json

import pytest

from config import Settings, SettingsConfigProvider, StaticConfigProvider
from config.settings import ArticleSettings
from sources import FileSourceProvider, parse_source_lists
from utils.exceptions import ConfigurationError


def test_parse_source_lists_accepts_strings_and_dicts() -> None:
    payload = {
        "AI": {
            "firecrawl": [{"identifier": "https://a.example.com"}, "https://b.example.com", {"identifier": " "}],
            "twitter": ["https://x.com/OpenAI"],
        }
    }

    sources = parse_source_lists(payload, "AI")

    assert [s.identifier for s in sources.firecrawl] == ["https://a.example.com", "https://b.example.com"]
    assert [s.identifier for s in sources.twitter] == ["https://x.com/OpenAI"]
    assert sources.total == 3


def test_parse_source_lists_missing_category() -> None:
    with pytest.raises(ConfigurationError):
        parse_source_lists({"AI": {}}, "Robotics")


@pytest.mark.asyncio
async def test_file_provider_reads_json(tmp_path) -> None:
    path = tmp_path / "sources.json"
    path.write_text(json.dumps({"AI": {"firecrawl": ["https://a.example.com"], "twitter": []}}), encoding="utf-8")

    sources = await FileSourceProvider(path, category="AI").get_sources()

    assert sources.total == 1


@pytest.mark.asyncio
async def test_file_provider_errors_are_configuration_errors(tmp_path) -> None:
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        await FileSourceProvider(broken, category="AI").get_sources()
    with pytest.raises(ConfigurationError):
        await FileSourceProvider(tmp_path / "missing.json", category="AI").get_sources()


@pytest.mark.asyncio
async def test_bundled_sources_file_is_valid() -> None:
    sources = await FileSourceProvider("config/sources.json", category="AI").get_sources()

    assert sources.firecrawl and sources.twitter


def test_article_num_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("ARTICLE_NUM", "7")

    settings = Settings(article=ArticleSettings())

    assert SettingsConfigProvider(settings).get("ARTICLE_NUM") == 7
    assert SettingsConfigProvider(settings).get("campaign_label") == "AI速递"


def test_config_providers_reject_unknown_keys() -> None:
    with pytest.raises(ConfigurationError):
        SettingsConfigProvider(Settings()).get("NOPE")
    with pytest.raises(ConfigurationError):
        StaticConfigProvider({"article_num": 3}).get("MISSING")
    assert StaticConfigProvider({"article_num": 3}).get("ARTICLE_NUM") == 3
