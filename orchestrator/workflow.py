"""
Article Workflow
单次运行的内容流水线: 抓取 -> 评分 -> 过滤排序 -> 改写 -> 标题 -> 封面 -> 发布 -> 报告
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Protocol, Sequence, Set, Tuple

from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn

from config import ConfigProvider
from core import (
    PublishRecord,
    PublishResult,
    RankResult,
    RunStats,
    ScrapedContent,
    SourceLists,
    SourceType,
    StageOutcome,
    StageResult,
)
from intelligence import BaseRanker, BaseSummarizer
from notify import BaseNotifier, NotifyLevel
from outputs import BaseArticleRenderer
from publishers import BasePublisher
from render import ImageGeneratorFactory
from scrapers import BaseScraper, ScraperRegistry
from sources import SourceProvider
from utils.logger import console

from . import stages


logger = logging.getLogger(__name__)

SOURCE_ORDER: Tuple[SourceType, ...] = (SourceType.FIRECRAWL, SourceType.TWITTER)


class BalanceChecker(Protocol):
    async def aget_balance(self, currency: str = "CNY") -> float: ...


class PipelineState(str, Enum):
    PREFLIGHT = "preflight"
    SCRAPE = "scrape"
    RANK = "rank"
    FILTER = "filter"
    ENRICH = "enrich"
    HEADLINE = "headline"
    COVER = "cover"
    PUBLISH = "publish"
    REPORT = "report"
    DONE = "done"


@dataclass
class ScrapeOutput:
    items: List[ScrapedContent]
    stats: RunStats


@dataclass
class RunReport:
    """Everything one run produced; ``halted`` is set when scraping found nothing."""

    run_date: date
    sources: SourceLists = field(default_factory=SourceLists)
    stats: RunStats = field(default_factory=RunStats)
    items: List[ScrapedContent] = field(default_factory=list)
    rank_results: List[RankResult] = field(default_factory=list)
    filtered: List[ScrapedContent] = field(default_factory=list)
    top: List[ScrapedContent] = field(default_factory=list)
    headline: str = ""
    image_url: str = ""
    publish_result: Optional[PublishResult] = None
    summary: str = ""
    halted: bool = False
    outcomes: Dict[PipelineState, StageOutcome] = field(default_factory=dict)


class ArticleWorkflow:
    """
    内容流水线编排器

    所有外部能力通过构造参数注入; 构造时即解析每个数据源类型对应的抓取器,
    缺失任何一个都会抛出 ConfigurationError.
    """

    def __init__(
        self,
        *,
        registry: ScraperRegistry,
        ranker: BaseRanker,
        summarizer: BaseSummarizer,
        image_generators: ImageGeneratorFactory,
        renderer: BaseArticleRenderer,
        publisher: BasePublisher,
        notifier: BaseNotifier,
        config: ConfigProvider,
        sources: SourceProvider,
        balance_checker: Optional[BalanceChecker] = None,
        min_balance: float = 1.0,
        campaign_label: str = "AI速递",
        enrich_concurrency: int = stages.ENRICH_BATCH_SIZE,
        today: Callable[[], date] = date.today,
        show_progress: bool = True,
    ) -> None:
        self._scrapers: Dict[SourceType, BaseScraper] = registry.resolve(SOURCE_ORDER)
        self.ranker = ranker
        self.summarizer = summarizer
        self.image_generators = image_generators
        self.renderer = renderer
        self.publisher = publisher
        self.notifier = notifier
        self.config = config
        self.sources = sources
        self.balance_checker = balance_checker
        self.min_balance = min_balance
        self.campaign_label = campaign_label
        self.enrich_concurrency = max(1, int(enrich_concurrency))
        self._today = today
        self.show_progress = show_progress

        self._handlers: Dict[PipelineState, Callable[[RunReport], Awaitable[PipelineState]]] = {
            PipelineState.PREFLIGHT: self._on_preflight,
            PipelineState.SCRAPE: self._on_scrape,
            PipelineState.RANK: self._on_rank,
            PipelineState.FILTER: self._on_filter,
            PipelineState.ENRICH: self._on_enrich,
            PipelineState.HEADLINE: self._on_headline,
            PipelineState.COVER: self._on_cover,
            PipelineState.PUBLISH: self._on_publish,
            PipelineState.REPORT: self._on_report,
        }

    # ------------------------------------------------------------------ driver

    async def process(self) -> RunReport:
        """Run one full pass. Unisolated failures are notified and re-raised."""
        report = RunReport(run_date=self._today())
        try:
            logger.info("=== 开始执行微信工作流 ===")
            await self._notify(NotifyLevel.INFO, "工作流开始", "开始执行内容抓取和处理")

            state = PipelineState.PREFLIGHT
            while state is not PipelineState.DONE:
                state = await self._handlers[state](report)
            return report
        except Exception as error:
            logger.exception(f"[工作流] 执行失败: {error}")
            await self._notify(NotifyLevel.ERROR, "工作流失败", str(error))
            raise

    def _record(self, report: RunReport, state: PipelineState, result: StageResult[Any]) -> Any:
        report.outcomes[state] = result.outcome
        if result.is_fatal:
            raise result.error if result.error is not None else RuntimeError(f"{state.value} stage failed")
        return result.value

    async def _on_preflight(self, report: RunReport) -> PipelineState:
        await self.check_balance()
        report.sources = await self.sources.get_sources()
        return PipelineState.SCRAPE

    async def _on_scrape(self, report: RunReport) -> PipelineState:
        result = await self.scrape_stage(report.sources)
        output: ScrapeOutput = self._record(report, PipelineState.SCRAPE, result)
        report.items, report.stats = output.items, output.stats
        if result.is_halted:
            report.halted = True
            return PipelineState.DONE
        return PipelineState.RANK

    async def _on_rank(self, report: RunReport) -> PipelineState:
        report.rank_results = self._record(report, PipelineState.RANK, await self.rank_stage(report.items))
        return PipelineState.FILTER

    async def _on_filter(self, report: RunReport) -> PipelineState:
        result = self.filter_stage(report.items, report.rank_results)
        report.filtered = self._record(report, PipelineState.FILTER, result)
        report.top = stages.select_top(report.filtered, stages.resolve_top_n(self.config.get("ARTICLE_NUM")))
        return PipelineState.ENRICH

    async def _on_enrich(self, report: RunReport) -> PipelineState:
        self._record(report, PipelineState.ENRICH, await self.enrich_stage(report.top))
        return PipelineState.HEADLINE

    async def _on_headline(self, report: RunReport) -> PipelineState:
        result = await self.headline_stage(report.filtered, report.run_date)
        report.headline = self._record(report, PipelineState.HEADLINE, result)
        return PipelineState.COVER

    async def _on_cover(self, report: RunReport) -> PipelineState:
        result = await self.cover_image_stage(report.headline, report.run_date)
        report.image_url = self._record(report, PipelineState.COVER, result)
        return PipelineState.PUBLISH

    async def _on_publish(self, report: RunReport) -> PipelineState:
        result = await self.publish_stage(report.top, report.headline, report.image_url)
        report.publish_result = self._record(report, PipelineState.PUBLISH, result)
        return PipelineState.REPORT

    async def _on_report(self, report: RunReport) -> PipelineState:
        status = report.publish_result.status if report.publish_result else None
        report.summary = await self.report_stage(report.sources.total, report.stats, status)
        report.outcomes[PipelineState.REPORT] = StageOutcome.SUCCESS
        return PipelineState.DONE

    # ------------------------------------------------------------------ stages

    async def check_balance(self) -> Optional[float]:
        """LLM account balance pre-flight; a failing check never stops the run."""
        if self.balance_checker is None:
            return None
        try:
            balance = await self.balance_checker.aget_balance("CNY")
        except Exception as e:
            logger.warning(f"[余额检查] 查询失败: {e}")
            return None
        logger.info(f"DeepSeek余额: {balance}")
        if balance < self.min_balance:
            await self._notify(NotifyLevel.WARNING, "DeepSeek", "余额小于一元")
        return balance

    async def scrape_stage(self, sources: SourceLists) -> StageResult[ScrapeOutput]:
        """Scrape every source one at a time, isolating per-source failures."""
        stats = RunStats()
        items: List[ScrapedContent] = []
        seen_ids: Set[str] = set()
        by_type = sources.by_type()
        logger.info(f"[数据源] 发现 {sources.total} 个数据源")

        with self._progress() as progress:
            task = progress.add_task("抓取数据源", total=sources.total)
            for source_type in SOURCE_ORDER:
                scraper = self._scrapers[source_type]
                for source in by_type.get(source_type, []):
                    contents = await self._scrape_source(source_type, source.identifier, scraper, stats)
                    for item in contents:
                        if item.id in seen_ids:
                            logger.info(f"[{source_type.label}] 跳过重复内容: {item.id} ({item.url})")
                            continue
                        seen_ids.add(item.id)
                        items.append(item)
                    progress.advance(task)

        stats.contents = len(items)
        output = ScrapeOutput(items=items, stats=stats)
        logger.info(f"[抓取完成] 成功 {stats.success} 个, 失败 {stats.failed} 个, 共 {stats.contents} 条内容")
        if not items:
            logger.error("[抓取完成] 没有抓取到任何内容, 结束本次运行")
            await self._notify(NotifyLevel.ERROR, "工作流终止", "没有抓取到任何内容")
            return StageResult.halted(output)
        return StageResult.ok(output)

    async def _scrape_source(
        self,
        source_type: SourceType,
        identifier: str,
        scraper: BaseScraper,
        stats: RunStats,
    ) -> List[ScrapedContent]:
        label = source_type.label
        try:
            logger.info(f"[{label}] 抓取: {identifier}")
            contents = await scraper.scrape(identifier)
        except Exception as error:
            stats.failed += 1
            logger.error(f"[{label}] {identifier} 抓取失败: {error}")
            await self._notify(NotifyLevel.WARNING, f"{label}抓取失败", f"源: {identifier}\n错误: {error}")
            return []
        stats.success += 1
        return list(contents or [])

    async def rank_stage(self, items: Sequence[ScrapedContent]) -> StageResult[List[RankResult]]:
        try:
            results = await self.ranker.rank(list(items))
        except Exception as error:
            logger.error(f"[内容排序] 评分失败: {error}")
            await self._notify(NotifyLevel.ERROR, "内容排序失败", str(error))
            return StageResult.degraded([], error)
        logger.info(f"[内容排序] 获得 {len(results)} 条评分")
        return StageResult.ok(list(results))

    def filter_stage(
        self,
        items: Sequence[ScrapedContent],
        results: Sequence[RankResult],
    ) -> StageResult[List[ScrapedContent]]:
        ranked = stages.sort_by_score(stages.merge_rank_results(items, results))
        if not results:
            return StageResult.degraded(ranked)
        return StageResult.ok(ranked)

    async def enrich_stage(self, items: Sequence[ScrapedContent]) -> StageResult[List[ScrapedContent]]:
        """Rewrite each item with the summarizer, at most ``enrich_concurrency`` calls in flight."""
        logger.info(f"[内容处理] 处理排序后的前 {len(items)} 条内容")
        semaphore = asyncio.Semaphore(self.enrich_concurrency)

        with self._progress() as progress:
            task = progress.add_task("内容处理", total=len(items))

            async def _worker(item: ScrapedContent) -> bool:
                async with semaphore:
                    ok = await self._enrich_one(item)
                progress.advance(task)
                return ok

            outcomes = await asyncio.gather(*(_worker(item) for item in items))

        if all(outcomes):
            return StageResult.ok(list(items))
        return StageResult.degraded(list(items))

    async def _enrich_one(self, item: ScrapedContent) -> bool:
        try:
            summary = await self.summarizer.summarize(item.model_dump_json())
        except Exception as error:
            logger.error(f"[内容处理] {item.id} 处理失败: {error}")
            await self._notify(NotifyLevel.WARNING, "内容处理失败", f"ID: {item.id}\n保留原始内容")
            stages.apply_enrichment_fallback(item)
            return False
        stages.apply_summary(item, summary)
        return True

    async def headline_stage(self, items: Sequence[ScrapedContent], run_date: date) -> StageResult[str]:
        try:
            generated = await self.summarizer.generate_title(stages.join_titles(items))
        except Exception as error:
            return StageResult.fatal("", error)
        headline = stages.build_headline(generated, run_date, self.campaign_label)
        logger.info(f"[标题生成] 生成标题: {headline}")
        return StageResult.ok(headline)

    async def cover_image_stage(self, headline: str, run_date: date) -> StageResult[str]:
        try:
            generator = self.image_generators.get_generator(stages.COVER_GENERATOR)
            request = stages.build_cover_request(headline, run_date, self.campaign_label)
            image_url = await generator.generate(request)
        except Exception as error:
            return StageResult.fatal("", error)
        logger.info(f"[封面生成] {image_url}")
        return StageResult.ok(image_url)

    async def publish_stage(
        self,
        items: Sequence[ScrapedContent],
        headline: str,
        image_url: str,
    ) -> StageResult[Optional[PublishResult]]:
        try:
            media_id = await self.publisher.upload_image(image_url)
            records = [PublishRecord.from_content(item) for item in items]
            logger.debug(f"templateData: {[r.model_dump(mode='json') for r in records]}")
            rendered = await self.renderer.render(records)
            logger.info("[发布] 发布到微信公众号")
            result = await self.publisher.publish(rendered, headline, headline, media_id)
        except Exception as error:
            return StageResult.fatal(None, error)
        return StageResult.ok(result)

    async def report_stage(self, total_sources: int, stats: RunStats, publish_status: Optional[str]) -> str:
        summary = stages.build_summary_message(total_sources, stats, publish_status)
        logger.info(f"=== {summary} ===")
        if stats.failed > 0:
            await self._notify(NotifyLevel.WARNING, "工作流完成(部分失败)", summary)
        else:
            await self._notify(NotifyLevel.SUCCESS, "工作流完成", summary)
        return summary

    # ------------------------------------------------------------------ helpers

    async def _notify(self, level: NotifyLevel, title: str, body: str) -> None:
        try:
            await self.notifier.send(level, title, body)
        except Exception as e:
            logger.warning(f"notification '{title}' not delivered: {e}")

    def _progress(self) -> Progress:
        return Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            console=console,
            disable=not self.show_progress,
            transient=True,
        )
