"""build_workflow wires every collaborator from the settings it is given."""

from __future__ import annotations

import pytest

from config import Settings
from config.settings import (
    ArticleSettings,
    BarkSettings,
    DashScopeSettings,
    FireCrawlSettings,
    GeneralSettings,
    LLMSettings,
    WeixinSettings,
)
from core import SourceType
from intelligence.llm import DeepSeekLLM
from orchestrator.factory import build_workflow


def _custom_settings() -> Settings:
    return Settings(
        article=ArticleSettings(num=3, sources_category="Robotics"),
        firecrawl=FireCrawlSettings(api_key="fc-custom"),
        llm=LLMSettings(provider="deepseek", deepseek_api_key="sk-custom", min_balance_cny=2.5),
        dashscope=DashScopeSettings(api_key="ds-custom"),
        weixin=WeixinSettings(app_id="wx-custom", app_secret="secret-custom"),
        bark=BarkSettings(key="bark-custom"),
        general=GeneralSettings(max_retries=5),
    )


@pytest.mark.asyncio
async def test_build_workflow_uses_explicit_settings() -> None:
    async with build_workflow(_custom_settings(), show_progress=False) as workflow:
        assert workflow.config.get("ARTICLE_NUM") == 3
        assert workflow.sources.category == "Robotics"

        assert isinstance(workflow.ranker.llm, DeepSeekLLM)
        assert workflow.ranker.llm.api_key == "sk-custom"
        assert workflow.summarizer.llm is workflow.ranker.llm
        assert workflow.balance_checker is workflow.ranker.llm
        assert workflow.min_balance == 2.5

        firecrawl = workflow._scrapers[SourceType.FIRECRAWL]
        assert firecrawl.api_key == "fc-custom"
        assert firecrawl.max_retries == 5
        assert workflow._scrapers[SourceType.TWITTER].max_retries == 5

        assert workflow.image_generators.get_generator("ALIWANX_POSTER").api_key == "ds-custom"
        assert workflow.publisher.app_id == "wx-custom"
        assert workflow.notifier.key == "bark-custom"
