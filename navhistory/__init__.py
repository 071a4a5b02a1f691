from .errors import HistoryError, InvalidArgument, ConfigError
from .config import HistoryOptions
from .core import (
    History,
    Location,
    NavigationAction,
    create_history,
    create_href,
    create_path,
    parse_path,
)
from .platform import MemoryPlatform, Platform, PlatformURL

__all__ = [
    "HistoryError",
    "InvalidArgument",
    "ConfigError",
    "HistoryOptions",
    "History",
    "Location",
    "NavigationAction",
    "create_history",
    "create_href",
    "create_path",
    "parse_path",
    "MemoryPlatform",
    "Platform",
    "PlatformURL",
]
