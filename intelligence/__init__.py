"""
Intelligence Module
LLM 驱动的评分、摘要与标题生成
"""
from .ranker import AIContentRanker, BaseRanker
from .summarizer import AISummarizer, BaseSummarizer

__all__ = [
    "AIContentRanker",
    "BaseRanker",
    "AISummarizer",
    "BaseSummarizer",
]
