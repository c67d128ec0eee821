"""
Base Scraper
所有抓取器的抽象基类
"""
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Type, TypeVar
import asyncio
import hashlib
import logging
import time

from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from config import Settings, get_settings
from core import ScrapedContent, SourceType


logger = logging.getLogger(__name__)

R = TypeVar("R")


class BaseScraper(ABC):
    """
    抓取器抽象基类
    每个数据源类型对应一个具体抓取器, 只需实现 scrape()
    """
    
    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.max_retries = max(1, int(self.settings.general.max_retries))
        self.retry_wait = wait_exponential(multiplier=1, min=2, max=30)
        self._session = None
    
    @property
    @abstractmethod
    def source_type(self) -> SourceType:
        """返回数据源类型"""
        pass
    
    @property
    @abstractmethod
    def name(self) -> str:
        """返回抓取器名称"""
        pass
    
    @abstractmethod
    async def scrape(self, identifier: str) -> List[ScrapedContent]:
        """
        抓取单个数据源
        
        Args:
            identifier: 数据源标识 (URL / 账号)
            
        Returns:
            抓取到的内容列表
            
        Raises:
            ScraperError: 抓取失败 (由调用方隔离处理)
        """
        pass
    
    def is_configured(self) -> bool:
        """
        检查是否已正确配置
        子类可以覆盖此方法来检查必要的API密钥等
        """
        return True
    
    async def __aenter__(self):
        return self
    
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
    
    async def close(self):
        """清理资源"""
        if self._session is not None:
            await self._session.aclose()
            self._session = None

    async def _run_blocking(self, func: Callable[..., R], *args, **kwargs) -> R:
        """在线程池中执行阻塞函数"""
        return await asyncio.to_thread(func, *args, **kwargs)

    def _retrying(self, *errors: Type[BaseException]) -> AsyncRetrying:
        """瞬时错误重试 (次数取 GENERAL_MAX_RETRIES)"""
        return AsyncRetrying(
            retry=retry_if_exception_type(errors),
            stop=stop_after_attempt(self.max_retries),
            wait=self.retry_wait,
            reraise=True,
        )
    
    @staticmethod
    def _make_id(*parts: Optional[str]) -> str:
        """由来源字段生成稳定 ID"""
        raw = "|".join(str(p or "") for p in parts)
        return hashlib.md5(raw.encode("utf-8")).hexdigest()[:16]
    
    def _log_scrape(self, identifier: str, count: int):
        logger.info(f"[{self.name}] {identifier} returned {count} items")


class RateLimitedScraper(BaseScraper):
    """
    带速率限制的抓取器基类
    """
    
    def __init__(self, requests_per_second: float = 1.0, settings: Optional[Settings] = None):
        super().__init__(settings)
        self._rate_limit = requests_per_second
        self._last_request_time = 0.0
        self._lock = asyncio.Lock()
    
    async def _wait_for_rate_limit(self):
        """等待满足速率限制"""
        async with self._lock:
            current_time = time.monotonic()
            time_since_last = current_time - self._last_request_time
            min_interval = 1.0 / self._rate_limit
            
            if time_since_last < min_interval:
                await asyncio.sleep(min_interval - time_since_last)
            
            self._last_request_time = time.monotonic()
