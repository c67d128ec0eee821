"""Wires the production collaborators into an ArticleWorkflow."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from config import Settings, SettingsConfigProvider, get_settings
from intelligence import AIContentRanker, AISummarizer
from intelligence.llm import DeepSeekLLM, get_llm
from notify import BarkNotifier
from outputs import WeixinArticleRenderer
from publishers import WeixinPublisher
from render import AliWanxPosterGenerator, ImageGeneratorFactory
from scrapers import build_default_registry
from sources import FileSourceProvider

from .stages import COVER_GENERATOR
from .workflow import ArticleWorkflow


@asynccontextmanager
async def build_workflow(
    settings: Optional[Settings] = None,
    *,
    sources_file: Optional[str] = None,
    show_progress: bool = True,
) -> AsyncIterator[ArticleWorkflow]:
    """Create a workflow from one settings tree and close every client on exit."""
    settings = settings or get_settings()
    llm = get_llm(settings=settings.llm)
    registry = build_default_registry(settings)
    image_generators = ImageGeneratorFactory(
        {COVER_GENERATOR: lambda: AliWanxPosterGenerator(settings=settings.dashscope)}
    )
    publisher = WeixinPublisher(settings=settings.weixin)
    notifier = BarkNotifier(settings=settings.bark)

    workflow = ArticleWorkflow(
        registry=registry,
        ranker=AIContentRanker(llm),
        summarizer=AISummarizer(llm),
        image_generators=image_generators,
        renderer=WeixinArticleRenderer(),
        publisher=publisher,
        notifier=notifier,
        config=SettingsConfigProvider(settings),
        sources=FileSourceProvider(
            sources_file or settings.article.sources_file,
            category=settings.article.sources_category,
        ),
        balance_checker=llm if isinstance(llm, DeepSeekLLM) else None,
        min_balance=settings.llm.min_balance_cny,
        campaign_label=settings.article.campaign_label,
        show_progress=show_progress,
    )
    try:
        yield workflow
    finally:
        await registry.close()
        await image_generators.close()
        await publisher.close()
        await notifier.close()
        await llm.aclose()
