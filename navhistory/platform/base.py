from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Protocol, Union, runtime_checkable
from urllib.parse import urlsplit


@dataclass(frozen=True)
class PlatformURL:
    """The platform's current URL, as exposed by ``window.location``."""

    pathname: str = "/"
    search: str = ""
    hash: str = ""

    @classmethod
    def parse(cls, url: str) -> "PlatformURL":
        parts = urlsplit(url)
        return cls(
            pathname=parts.path or "/",
            search=f"?{parts.query}" if parts.query else "",
            hash=f"#{parts.fragment}" if parts.fragment else "",
        )

    @property
    def href(self) -> str:
        return self.pathname + self.search + self.hash


PopListener = Callable[[], None]


@runtime_checkable
class Platform(Protocol):
    """Session-history primitives the controller is built on.

    ``state`` is the opaque per-entry value of the current entry; other code
    sharing the platform may write anything into it. Pop listeners receive no
    payload: the current URL and state must be read back from the platform.

    A platform whose whole stack can be replaced at once may also offer
    ``add_reset_listener(fn) -> remove``; the controller re-reads its location
    when it fires.
    """

    @property
    def location(self) -> PlatformURL: ...

    @property
    def state(self) -> Any: ...

    @property
    def length(self) -> int: ...

    def push_state(self, state: Any, url: str) -> None: ...

    def replace_state(self, state: Any, url: str) -> None: ...

    def go(self, n: int) -> None: ...

    def reload(self) -> None: ...

    def confirm(self, message: str) -> Union[bool, Awaitable[bool]]: ...

    def add_pop_listener(self, fn: PopListener) -> Callable[[], None]: ...


def resolve_url(current: PlatformURL, url: str) -> PlatformURL:
    """Resolve ``url`` against the current one the way ``pushState`` does.

    Only same-document URLs are handled: a bare query or fragment keeps the
    current pathname, a relative segment replaces the last path segment.
    """
    if not url:
        return current
    if url.startswith("#"):
        return PlatformURL(current.pathname, current.search, url if url != "#" else "")
    if url.startswith("?"):
        return PlatformURL.parse(current.pathname + url)
    if not url.startswith("/"):
        base = current.pathname.rsplit("/", 1)[0]
        url = f"{base}/{url}"
    return PlatformURL.parse(url)
