"""Configuration module."""

from .database import get_redis, get_session_factory
from .settings import settings

__all__ = ["settings", "get_session_factory", "get_redis"]
