"""
AI Summarizer
内容改写 (标题/正文/关键词) 与整期标题生成
"""
from abc import ABC, abstractmethod
from typing import Optional
import logging

from core import Summary
from intelligence.json_utils import extract_json
from intelligence.llm import BaseLLM, Message, get_llm
from utils.exceptions import SummarizationError


logger = logging.getLogger(__name__)


SUMMARIZE_PROMPT = """你是一名微信公众号科技编辑。下面是一条抓取到的内容 (JSON)。
请用简体中文改写：
1. title: 不超过 30 字、准确有吸引力的标题
2. content: 300 字以内的正文摘要，保留关键数据与结论，不要编造
3. keywords: 3-5 个关键词

只输出 JSON：{"title": "...", "content": "...", "keywords": ["..."]}

内容：
{content}"""


TITLE_PROMPT = """以下是今天 AI 速递收录的全部内容标题，用 " | " 分隔：
{titles}

请写一个能概括今日最重要内容、适合微信公众号的标题。
要求：不超过 30 字，不加引号、书名号或日期，直接输出标题本身。"""


class BaseSummarizer(ABC):
    """摘要接口"""

    @abstractmethod
    async def summarize(self, content: str) -> Summary:
        """改写一条序列化后的内容"""

    @abstractmethod
    async def generate_title(self, titles: str) -> str:
        """根据全部标题生成整期标题"""


class AISummarizer(BaseSummarizer):
    """基于 LLM 的摘要器"""

    def __init__(self, llm: Optional[BaseLLM] = None):
        self.llm = llm or get_llm()

    async def summarize(self, content: str) -> Summary:
        response = await self.llm.acomplete(
            [Message.user(SUMMARIZE_PROMPT.replace("{content}", content))],
            temperature=0.3,
            json_mode=True,
        )
        data = extract_json(response.content)
        if not isinstance(data, dict):
            raise SummarizationError("summary is not a JSON object", {"raw": response.content[:200]})

        summary = Summary(
            title=str(data.get("title") or "").strip(),
            content=str(data.get("content") or "").strip(),
            keywords=[str(k).strip() for k in (data.get("keywords") or []) if str(k).strip()],
        )
        if not summary.title or not summary.content:
            raise SummarizationError("summary is missing title or content")
        return summary

    async def generate_title(self, titles: str) -> str:
        response = await self.llm.acomplete(
            [Message.user(TITLE_PROMPT.replace("{titles}", titles))],
            temperature=0.7,
            max_tokens=100,
        )
        title = response.content.strip().strip("\"'“”《》").strip()
        if not title:
            raise SummarizationError("empty title from LLM")
        logger.info(f"[Summarizer] generated title: {title}")
        return title
