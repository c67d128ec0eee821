"""
Utils Module
通用工具函数
"""
from .logger import console, setup_logger
from .exceptions import (
    DigestPublisherError,
    ConfigurationError,
    ScraperError,
    RankingError,
    SummarizationError,
    ImageGenerationError,
    PublishError,
    LLMError,
)

__all__ = [
    "console",
    "setup_logger",
    "DigestPublisherError",
    "ConfigurationError",
    "ScraperError",
    "RankingError",
    "SummarizationError",
    "ImageGenerationError",
    "PublishError",
    "LLMError",
]
