"""Core database models"""
from .videos import Video
from .support_event import SupportEvent

__all__ = ["Video", "SupportEvent"]
