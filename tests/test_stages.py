from __future__ import annotations

from datetime import date

import pytest

from core import RankResult, RunStats, ScrapedContent, Summary
from orchestrator import stages
from utils.exceptions import ConfigurationError


def _items(*ids: str):
    return [ScrapedContent(id=i, title=f"t-{i}") for i in ids]


def test_merge_drops_unscored_items() -> None:
    merged = stages.merge_rank_results(
        _items("A", "B", "C"),
        [RankResult(id="A", score=0.9), RankResult(id="B", score=0.4), RankResult(id="Z", score=1.0)],
    )

    assert [(i.id, i.score) for i in merged] == [("A", 0.9), ("B", 0.4)]


def test_merge_without_results_keeps_everything() -> None:
    items = _items("A", "B")

    merged = stages.merge_rank_results(items, [])

    assert [i.id for i in merged] == ["A", "B"]
    assert all(i.score == 0.0 for i in merged)


def test_sort_is_descending_and_stable() -> None:
    items = _items("A", "B", "C", "D")
    for item, score in zip(items, [1.0, 5.0, 1.0, 5.0]):
        item.score = score

    assert [i.id for i in stages.sort_by_score(items)] == ["B", "D", "A", "C"]


@pytest.mark.parametrize("value", [0, -3, "ten", None])
def test_resolve_top_n_rejects_invalid(value) -> None:
    with pytest.raises(ConfigurationError):
        stages.resolve_top_n(value)


def test_resolve_top_n_accepts_numeric_strings() -> None:
    assert stages.resolve_top_n("7") == 7


def test_apply_summary_and_fallback() -> None:
    done, failed = ScrapedContent(id="a", title="old"), ScrapedContent(id="b")

    stages.apply_summary(done, Summary(title="新", content="正文", keywords=["AI"]))
    stages.apply_enrichment_fallback(failed)

    assert (done.title, done.content, done.metadata.keywords) == ("新", "正文", ["AI"])
    assert (failed.title, failed.content, failed.metadata.keywords) == ("无标题", "内容处理失败", [])


def test_run_date_has_no_zero_padding() -> None:
    assert stages.format_run_date(date(2026, 3, 7)) == "2026/3/7"


def test_headline_cut_at_64_code_points() -> None:
    headline = stages.build_headline("字" * 100, date(2026, 1, 2), "AI速递")

    assert len(headline) == 64
    assert headline.startswith("2026/1/2 AI速递 | 字")


@pytest.mark.parametrize(
    "headline,expected",
    [
        ("2026/10/19 AI速递 | OpenAI 发布新模型", "OpenAI 发布新模型"),
        ("2026/10/19 AI速递 | 甲 | 乙", "甲"),
        ("2026/10/19 AI速递 | " + "长" * 40, "长" * 30),
        ("2026/10/19 AI速递 |  ", "2026/10/19 AI速递 |"),
        ("没有分隔符的标题", "没有分隔符的标题"),
    ],
)
def test_extract_short_title(headline: str, expected: str) -> None:
    assert stages.extract_short_title(headline) == expected


def test_cover_request_fields() -> None:
    request = stages.build_cover_request("2026/10/19 AI速递 | 今日要闻", date(2026, 10, 19), "AI速递")

    assert request.title == "今日要闻"
    assert request.sub_title == "2026/10/19 AI速递"
    assert request.prompt_text_zh == "科技前沿资讯 | 人工智能新闻 | 每日AI快报 - 今日要闻"
    assert (request.generate_mode, request.generate_num) == ("generate", 1)


def test_summary_message_lines() -> None:
    text = stages.build_summary_message(9, RunStats(success=8, failed=1, contents=40), "submitted")

    assert text.splitlines() == [
        "工作流执行完成",
        "- 数据源: 9 个",
        "- 成功: 8 个",
        "- 失败: 1 个",
        "- 内容: 40 条",
        "- 发布: submitted",
    ]
