"""
LLM Factory
工厂函数 - 根据配置自动创建 LLM 实例
"""
from typing import Optional
import logging

from config.settings import LLMSettings

from .base import BaseLLM
from .openai_llm import OpenAILLM
from .deepseek_llm import DeepSeekLLM


logger = logging.getLogger(__name__)


DEFAULT_MODELS = {
    "openai": "gpt-4o-mini",
    "deepseek": "deepseek-chat",
}


def get_llm(
    provider: Optional[str] = None,
    model: Optional[str] = None,
    *,
    settings: Optional[LLMSettings] = None,
    **kwargs,
) -> BaseLLM:
    """
    获取 LLM 实例
    
    自动从 .env 读取配置，也可手动指定
    
    Example:
        llm = get_llm()
        llm = get_llm(provider="openai", model="gpt-4o")
    """
    if settings is None:
        from config import get_llm_settings
        settings = get_llm_settings()
    
    provider = provider or settings.provider
    model = model or settings.model_name or DEFAULT_MODELS.get(provider)
    
    api_keys = {
        "openai": settings.openai_api_key,
        "deepseek": settings.deepseek_api_key,
    }
    api_key = kwargs.pop("api_key", None) or api_keys.get(provider)
    
    kwargs.setdefault("temperature", settings.temperature)
    kwargs.setdefault("max_tokens", settings.max_tokens)
    
    if provider == "openai":
        return OpenAILLM(model=model, api_key=api_key, base_url=kwargs.pop("base_url", None), **kwargs)
    if provider == "deepseek":
        return DeepSeekLLM(model=model, api_key=api_key, base_url=kwargs.pop("base_url", None), **kwargs)
    raise ValueError(f"Unsupported LLM provider: {provider}")
