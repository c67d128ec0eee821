"""
DeepSeek LLM
支持 DeepSeek-V3 (deepseek-chat), 额外提供账户余额查询
"""
from typing import Optional
import logging

import httpx

from .openai_llm import OpenAILLM
from utils.exceptions import LLMError


logger = logging.getLogger(__name__)


class DeepSeekLLM(OpenAILLM):
    """
    DeepSeek LLM 实现
    
    使用 OpenAI 兼容接口
    """
    
    DEFAULT_BASE_URL = "https://api.deepseek.com"
    
    def __init__(
        self,
        model: str = "deepseek-chat",
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 4096,
        timeout: float = 120.0,  # DeepSeek 可能需要更长时间
        **kwargs,
    ):
        super().__init__(
            model=model,
            api_key=api_key,
            base_url=base_url or self.DEFAULT_BASE_URL,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
            **kwargs,
        )
    
    @property
    def provider(self) -> str:
        return "deepseek"
    
    async def aget_balance(
        self,
        currency: str = "CNY",
        *,
        client: Optional[httpx.AsyncClient] = None,
    ) -> float:
        """
        查询账户余额
        
        Args:
            currency: 币种 (CNY / USD)
            client: 可选的 httpx 客户端 (测试注入)
            
        Returns:
            该币种的总余额, 账户没有该币种时返回 0
        """
        owns_client = client is None
        http = client or httpx.AsyncClient(timeout=30)
        try:
            response = await http.get(
                f"{self.base_url.rstrip('/')}/user/balance",
                headers={"Authorization": f"Bearer {self.api_key}", "Accept": "application/json"},
            )
            if response.status_code >= 400:
                raise LLMError(
                    f"deepseek balance http {response.status_code}: {response.text[:200]}",
                    provider=self.provider,
                )
            payload = response.json() or {}
        finally:
            if owns_client:
                await http.aclose()
        
        for info in payload.get("balance_infos") or []:
            if str(info.get("currency") or "").upper() == currency.upper():
                return float(info.get("total_balance") or 0.0)
        return 0.0
