"""
Content Ranker
使用 LLM 为抓取内容打分 (0-100)
"""
from abc import ABC, abstractmethod
from typing import Any, List, Optional
import json
import logging

from core import RankResult, ScrapedContent
from intelligence.json_utils import extract_json
from intelligence.llm import BaseLLM, Message, get_llm
from utils.exceptions import RankingError


logger = logging.getLogger(__name__)


RANK_SYSTEM_PROMPT = """你是一名资深 AI 科技媒体主编，负责为每日 AI 速递挑选内容。
请根据以下维度为每条内容打分 (0-100):
1. 时效性与新闻价值
2. 与人工智能领域的相关度
3. 信息密度与可读性
4. 对中文技术读者的吸引力

只输出 JSON：{"rankings": [{"id": "内容ID", "score": 85}]}
必须为输入中的每一条内容给出分数，id 原样返回。"""


class BaseRanker(ABC):
    """内容评分接口"""

    @abstractmethod
    async def rank(self, contents: List[ScrapedContent]) -> List[RankResult]:
        pass


class AIContentRanker(BaseRanker):
    """
    基于 LLM 的内容评分器
    
    单次请求提交全部内容 (正文截断), 返回 id -> score
    """

    def __init__(self, llm: Optional[BaseLLM] = None, max_chars_per_item: int = 500):
        self.llm = llm or get_llm()
        self.max_chars_per_item = max_chars_per_item

    async def rank(self, contents: List[ScrapedContent]) -> List[RankResult]:
        if not contents:
            return []

        payload = [
            {
                "id": item.id,
                "title": item.title,
                "content": item.content[: self.max_chars_per_item],
                "source": item.metadata.source,
            }
            for item in contents
        ]
        response = await self.llm.acomplete(
            [
                Message.system(RANK_SYSTEM_PROMPT),
                Message.user(json.dumps(payload, ensure_ascii=False)),
            ],
            temperature=0.2,
            json_mode=True,
        )
        results = self._parse(response.content)
        logger.info(f"[Ranker] scored {len(results)}/{len(contents)} items")
        return results

    @staticmethod
    def _parse(content: str) -> List[RankResult]:
        data: Any = extract_json(content)
        if isinstance(data, dict):
            data = data.get("rankings")
        if not isinstance(data, list):
            raise RankingError("ranker returned no rankings", {"raw": str(content)[:200]})

        results: List[RankResult] = []
        for entry in data:
            if not isinstance(entry, dict) or not str(entry.get("id") or "").strip():
                continue
            try:
                score = float(entry.get("score"))
            except (TypeError, ValueError):
                continue
            results.append(RankResult(id=str(entry["id"]).strip(), score=score))
        return results
