"""
Outputs Module
输出层 - 文章渲染
"""

from .renderers import BaseArticleRenderer, WeixinArticleRenderer

__all__ = [
    "BaseArticleRenderer",
    "WeixinArticleRenderer",
]
