"""
Custom Exceptions
自定义异常类
"""


class DigestPublisherError(Exception):
    """内容发布流水线基础异常类"""
    
    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)
    
    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(DigestPublisherError):
    """配置错误 (缺少抓取器、密钥等)"""
    pass


class ScraperError(DigestPublisherError):
    """抓取器错误"""
    
    def __init__(self, message: str, source: str = None, **kwargs):
        super().__init__(message, kwargs)
        self.source = source


class RankingError(DigestPublisherError):
    """内容评分错误"""
    pass


class SummarizationError(DigestPublisherError):
    """内容摘要/标题生成错误"""
    pass


class ImageGenerationError(DigestPublisherError):
    """封面图生成错误"""
    
    def __init__(self, message: str, provider: str = None, **kwargs):
        super().__init__(message, kwargs)
        self.provider = provider


class PublishError(DigestPublisherError):
    """发布平台调用错误"""
    
    def __init__(self, message: str, errcode: int = None, **kwargs):
        super().__init__(message, kwargs)
        self.errcode = errcode


class LLMError(DigestPublisherError):
    """LLM 调用错误"""
    
    def __init__(self, message: str, provider: str = None, **kwargs):
        super().__init__(message, kwargs)
        self.provider = provider
