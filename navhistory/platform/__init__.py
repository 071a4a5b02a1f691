# navhistory/platform/__init__.py
from .base import Platform, PlatformURL, resolve_url
from .memory import MemoryPlatform

__all__ = [
    "Platform",
    "PlatformURL",
    "resolve_url",
    "MemoryPlatform",
]
