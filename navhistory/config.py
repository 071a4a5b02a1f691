import os
from dataclasses import dataclass, field, replace
from typing import Awaitable, Callable, Optional, Union

import dotenv

from navhistory.errors import ConfigError

ENV_PREFIX = "NAVHISTORY_"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigError(f"{name} must be a boolean, got {raw!r}")


def _parse_key_length(name: str, raw) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None
    if value < 1:
        raise ConfigError(f"{name} must be at least 1, got {value}")
    return value


@dataclass
class HistoryOptions:
    basename: str = ""
    force_refresh: bool = False
    key_length: int = 6
    # None → the platform's own confirmation dialog
    get_user_confirmation: Optional[
        Callable[[str], Union[bool, Awaitable[bool]]]
    ] = field(default=None, compare=False)

    def __post_init__(self):
        self.key_length = _parse_key_length("key_length", self.key_length)
        if self.get_user_confirmation is not None and not callable(
            self.get_user_confirmation
        ):
            raise ConfigError("get_user_confirmation must be callable")

    def merged(self, **overrides) -> "HistoryOptions":
        unknown = set(overrides) - {
            "basename",
            "force_refresh",
            "key_length",
            "get_user_confirmation",
        }
        if unknown:
            raise ConfigError(f"unknown history option(s): {', '.join(sorted(unknown))}")
        return replace(self, **overrides)

    @classmethod
    def from_env(
        cls, *, prefix: str = ENV_PREFIX, load_dotenv: bool = True
    ) -> "HistoryOptions":
        """Read options from the environment (and a ``.env`` file if present).

        - ``NAVHISTORY_BASENAME``: path prefix stripped from every location
        - ``NAVHISTORY_FORCE_REFRESH``: reload after each push/replace
        - ``NAVHISTORY_KEY_LENGTH``: length of minted entry keys
        """
        if load_dotenv:
            dotenv.load_dotenv(dotenv.find_dotenv(usecwd=True))
        opts = cls()
        basename = os.getenv(f"{prefix}BASENAME")
        if basename is not None:
            opts.basename = basename
        force_refresh = os.getenv(f"{prefix}FORCE_REFRESH")
        if force_refresh is not None:
            opts.force_refresh = _parse_bool(f"{prefix}FORCE_REFRESH", force_refresh)
        key_length = os.getenv(f"{prefix}KEY_LENGTH")
        if key_length is not None:
            opts.key_length = _parse_key_length(f"{prefix}KEY_LENGTH", key_length)
        return opts
