# location.py ----------------------------------------------------
from __future__ import annotations

import secrets
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Optional, Tuple, Union

from navhistory.errors import InvalidArgument

_KEY_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"


class NavigationAction(StrEnum):
    PUSH = "PUSH"
    REPLACE = "REPLACE"
    POP = "POP"


@dataclass(frozen=True)
class Location:
    pathname: str = "/"
    search: Optional[str] = None
    hash: Optional[str] = None
    state: Any = None
    key: Optional[str] = None

    def __getitem__(self, key):
        return getattr(self, key)

    def get(self, key, default=None):
        return getattr(self, key, default)

    @property
    def path(self) -> str:
        """Path portion of the URL (pathname + search + hash, no basename)"""
        return create_path(self.pathname, self.search, self.hash)


# ---------------------------------------------------------------------------
# Entry envelope (decode / encode of the platform's per-entry state slot)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Owned:
    """Entry written by this module: ``{"key": ..., "state": ...}``."""

    key: str
    state: Any = None


@dataclass(frozen=True)
class Foreign:
    """Anything else found in the slot, surfaced verbatim as state."""

    value: Any = None

    @property
    def key(self) -> None:
        return None

    @property
    def state(self) -> Any:
        return self.value


def encode_state(key: str, state: Any) -> dict:
    return {"key": key, "state": state}


def decode_state(raw: Any) -> Union[Owned, Foreign]:
    """Decode the platform's opaque history state.

    The presence of a ``key`` attribute is the only thing that marks an entry
    as ours; everything else (absent, primitives, objects written by other
    libraries) is kept untouched as foreign state.
    """
    if isinstance(raw, Mapping) and "key" in raw:
        return Owned(key=raw["key"], state=raw.get("state"))
    return Foreign(raw)


def create_key(length: int = 6) -> str:
    return "".join(secrets.choice(_KEY_ALPHABET) for _ in range(max(1, length)))


# ---------------------------------------------------------------------------
# Basename handling
# ---------------------------------------------------------------------------


def normalize_basename(basename: Optional[str]) -> str:
    if not basename:
        return ""
    basename = basename.rstrip("/")
    if not basename:
        return ""
    return basename if basename.startswith("/") else "/" + basename


def has_basename(path: str, basename: str) -> bool:
    if not basename:
        return False
    if not path.lower().startswith(basename.lower()):
        return False
    rest = path[len(basename) :]
    return rest == "" or rest[0] in "/?#"


def strip_basename(path: str, basename: str) -> str:
    if has_basename(path, basename):
        path = path[len(basename) :]
    return path or "/"


# ---------------------------------------------------------------------------
# Path split / join
# ---------------------------------------------------------------------------


def parse_path(
    path: str, basename: str = ""
) -> Tuple[str, Optional[str], Optional[str]]:
    """Split ``path`` into ``(pathname, search, hash)``.

    Cases (first ``?`` and first ``#``):
    - neither → whole string is the pathname
    - only ``?`` → ``search`` starts there
    - only ``#`` → ``hash`` starts there
    - both, ``?`` first → pathname / search / hash
    - both, ``#`` first → the ``?`` is part of the hash, no search
    """
    q = path.find("?")
    h = path.find("#")
    pathname = path
    search: Optional[str] = None
    hash_: Optional[str] = None

    if q != -1 and (h == -1 or q < h):
        pathname = path[:q]
        if h == -1:
            search = path[q:]
        else:
            search = path[q:h]
            hash_ = path[h:]
    elif h != -1:
        pathname = path[:h]
        hash_ = path[h:]

    return strip_basename(pathname, basename), search, hash_


def _with_prefix(part: Optional[str], prefix: str) -> str:
    if not part:
        return ""
    return part if part.startswith(prefix) else prefix + part


def create_path(
    pathname: Optional[str],
    search: Optional[str] = None,
    hash: Optional[str] = None,
    basename: str = "",
) -> str:
    return (
        (basename or "")
        + (pathname or "")
        + _with_prefix(search, "?")
        + _with_prefix(hash, "#")
    )


def create_href(location: Union[Location, Mapping], basename: str = "") -> str:
    """Build the URL an anchor should point to, without navigating."""
    if not isinstance(location, (Location, Mapping)):
        raise InvalidArgument(
            f"create_href expects a Location or mapping, got {type(location).__name__}"
        )
    return create_path(
        location.get("pathname"),
        location.get("search"),
        location.get("hash"),
        basename,
    )


def encode_target(
    target, state: Any = None, basename: str = "", current_pathname: str = "/"
) -> Tuple[str, Any]:
    """Turn a navigation target into ``(href, state)`` for the platform.

    Strings are used verbatim. Mappings / :class:`Location` objects are
    joined as ``basename + pathname + search + hash``; their own ``state``
    wins over the ``state`` argument when present. A mapping without a
    ``pathname`` stays on ``current_pathname`` (basename already stripped).
    """
    if isinstance(target, str):
        return target, state
    if isinstance(target, Location):
        return create_href(target, basename), (
            target.state if target.state is not None else state
        )
    if isinstance(target, Mapping):
        if not target.get("pathname"):
            target = {**target, "pathname": current_pathname}
        href = create_href(target, basename)
        return href, target.get("state", state)
    raise InvalidArgument(
        f"navigation target must be a path string or a location mapping, got {type(target).__name__}"
    )


def create_location(
    path: str, state: Any = None, key: Optional[str] = None, basename: str = ""
) -> Location:
    pathname, search, hash_ = parse_path(path, basename)
    return Location(pathname=pathname, search=search, hash=hash_, state=state, key=key)


def location_from_platform(url, raw_state: Any, basename: str = "") -> Location:
    """Recompute the canonical location from the platform's current URL and state."""
    path = create_path(
        getattr(url, "pathname", "") or "/",
        getattr(url, "search", None),
        getattr(url, "hash", None),
    )
    entry = decode_state(raw_state)
    return create_location(path, entry.state, entry.key, basename)


def locations_are_equal(a: Location, b: Location) -> bool:
    return (
        a.pathname == b.pathname
        and (a.search or "") == (b.search or "")
        and (a.hash or "") == (b.hash or "")
        and a.key == b.key
        and a.state == b.state
    )
