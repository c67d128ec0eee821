"""Pure helpers for the article workflow: score merge, selection, titles, report text."""

from __future__ import annotations

from datetime import date
import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from core import ImageRequest, RankResult, RunStats, ScrapedContent, Summary
from utils.exceptions import ConfigurationError


logger = logging.getLogger(__name__)

TITLE_SEPARATOR = " | "
MAX_HEADLINE_LEN = 64
MAX_SHORT_TITLE_LEN = 30
ENRICH_BATCH_SIZE = 10

UNTITLED_PLACEHOLDER = "无标题"
FAILED_CONTENT_PLACEHOLDER = "内容处理失败"

COVER_GENERATOR = "ALIWANX_POSTER"
COVER_PROMPT_KEYWORDS = "科技前沿资讯 | 人工智能新闻 | 每日AI快报"


def merge_rank_results(
    items: Sequence[ScrapedContent],
    results: Sequence[RankResult],
) -> List[ScrapedContent]:
    """
    Inner-join items with their scores on ``id``.

    With no results every item is kept as-is (scores stay at their default).
    """
    if not results:
        logger.warning("[过滤结果] 没有任何内容被评分, 保留全部内容")
        return list(items)

    scores: Dict[str, float] = {r.id: r.score for r in results}
    kept: List[ScrapedContent] = []
    for item in items:
        score = scores.get(item.id)
        if score is None:
            continue
        item.score = score
        kept.append(item)
    logger.info(f"[过滤结果] 剩余 {len(kept)} 条有分数的内容")
    return kept


def sort_by_score(items: Iterable[ScrapedContent]) -> List[ScrapedContent]:
    return sorted(items, key=lambda item: item.score, reverse=True)


def resolve_top_n(value: Any) -> int:
    try:
        top_n = int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"ARTICLE_NUM must be an integer, got {value!r}") from None
    if top_n < 1:
        raise ConfigurationError(f"ARTICLE_NUM must be positive, got {top_n}")
    return top_n


def select_top(items: Sequence[ScrapedContent], top_n: int) -> List[ScrapedContent]:
    return list(items[:top_n])


def apply_summary(item: ScrapedContent, summary: Summary) -> None:
    item.title = summary.title
    item.content = summary.content
    item.metadata.keywords = list(summary.keywords)


def apply_enrichment_fallback(item: ScrapedContent) -> None:
    item.title = item.title or UNTITLED_PLACEHOLDER
    item.content = item.content or FAILED_CONTENT_PLACEHOLDER
    item.metadata.keywords = item.metadata.keywords or []


def format_run_date(day: date) -> str:
    return f"{day.year}/{day.month}/{day.day}"


def join_titles(items: Iterable[ScrapedContent]) -> str:
    return TITLE_SEPARATOR.join(item.title for item in items)


def build_headline(generated: str, day: date, label: str) -> str:
    """Date and campaign prefix, then a hard cut at 64 code points (may split a word)."""
    headline = f"{format_run_date(day)} {label}{TITLE_SEPARATOR}{generated}"
    return headline[:MAX_HEADLINE_LEN]


def extract_short_title(headline: str) -> str:
    """Second separator-delimited segment; the whole headline when that segment is missing."""
    parts = headline.split(TITLE_SEPARATOR)
    segment = parts[1].strip() if len(parts) > 1 else ""
    if not segment:
        segment = headline.strip()
    return segment[:MAX_SHORT_TITLE_LEN]


def build_cover_request(headline: str, day: date, label: str) -> ImageRequest:
    short_title = extract_short_title(headline)
    return ImageRequest(
        title=short_title,
        sub_title=f"{format_run_date(day)} {label}",
        prompt_text_zh=f"{COVER_PROMPT_KEYWORDS} - {short_title}",
        generate_mode="generate",
        generate_num=1,
    )


def build_summary_message(total_sources: int, stats: RunStats, publish_status: Optional[str]) -> str:
    return "\n".join(
        [
            "工作流执行完成",
            f"- 数据源: {total_sources} 个",
            f"- 成功: {stats.success} 个",
            f"- 失败: {stats.failed} 个",
            f"- 内容: {stats.contents} 条",
            f"- 发布: {publish_status or 'unknown'}",
        ]
    )
