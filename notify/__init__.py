"""Operator notifications."""

from .bark import BarkNotifier
from .base import BaseNotifier, NotifyLevel

__all__ = ["BarkNotifier", "BaseNotifier", "NotifyLevel"]
