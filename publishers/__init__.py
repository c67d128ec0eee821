"""Publishing targets."""

from .base import BasePublisher
from .weixin_publisher import WeixinPublisher

__all__ = ["BasePublisher", "WeixinPublisher"]
