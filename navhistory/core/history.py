import asyncio
import logging
from typing import Any, Callable, Optional, Union

from navhistory.config import HistoryOptions
from navhistory.platform.base import Platform
from .debug import record_transition
from .gate import Blocker, NavigationGate
from .listeners import Listener, ListenerRegistry
from .location import (
    Location,
    NavigationAction,
    create_href,
    create_key,
    create_location,
    encode_state,
    encode_target,
    location_from_platform,
    normalize_basename,
)

logger = logging.getLogger(__name__)


class History:
    """Navigation history on top of a session-history platform.

    Usage:
        history = History(MemoryPlatform("/"))
        unlisten = history.listen(lambda location, action: ...)
        history.push("/users/42", {"from": "list"})
        history.go_back()

    ``push``/``replace`` return ``None`` when the navigation settled
    immediately, or an ``asyncio.Task[bool]`` when a block is waiting on an
    asynchronous confirmation. Listeners always run before ``action`` and
    ``location`` are committed.
    """

    def __init__(
        self,
        platform: Platform,
        *,
        basename: str = "",
        force_refresh: bool = False,
        key_length: int = 6,
        get_user_confirmation: Optional[Callable] = None,
    ):
        self._platform = platform
        self.basename: str = normalize_basename(basename)
        self.force_refresh: bool = force_refresh
        self.key_length: int = key_length

        self._listeners = ListenerRegistry()
        self._gate = NavigationGate(get_user_confirmation or platform.confirm)

        self.action: NavigationAction = NavigationAction.POP
        self.location: Location = self._read_location()

        self._remove_pop_listener: Optional[Callable[[], None]] = (
            platform.add_pop_listener(self._handle_pop)
        )
        # only platforms that can be swapped out from under us (a reconnecting
        # page) offer a reset hook
        add_reset_listener = getattr(platform, "add_reset_listener", None)
        self._remove_reset_listener: Optional[Callable[[], None]] = (
            add_reset_listener(self.resync) if add_reset_listener else None
        )

    def __getitem__(self, key):
        return getattr(self, key)

    def get(self, key, default=None):
        return getattr(self, key, default)

    def __repr__(self):
        return f"<History action={self.action} path={self.location.path!r} length={self.length}>"

    @property
    def length(self) -> int:
        return self._platform.length

    @property
    def platform(self) -> Platform:
        return self._platform

    @property
    def blocked(self) -> bool:
        return self._gate.blocked

    # -------------------------------
    # Navigation
    # -------------------------------
    def push(self, path: Union[str, dict, Location], state: Any = None):
        return self._transition(NavigationAction.PUSH, path, state)

    def replace(self, path: Union[str, dict, Location], state: Any = None):
        return self._transition(NavigationAction.REPLACE, path, state)

    def go(self, n: int) -> None:
        self._platform.go(n)

    def go_back(self) -> None:
        self.go(-1)

    def go_forward(self) -> None:
        self.go(1)

    # -------------------------------
    # Subscriptions
    # -------------------------------
    def listen(self, listener: Listener):
        return self._listeners.subscribe(listener)

    def block(self, prompt: Blocker):
        return self._gate.set_block(prompt)

    def create_href(self, location: Union[Location, dict]) -> str:
        return create_href(location, self.basename)

    def resync(self) -> None:
        """Re-read the location after the platform was replaced wholesale.

        Not a navigation: listeners are not called and no block is consulted.
        """
        self.action = NavigationAction.POP
        self.location = self._read_location()
        logger.debug("resynced to %s", self.location.path)

    def close(self) -> None:
        """Stop following the platform's back/forward notifications."""
        if self._remove_pop_listener is not None:
            self._remove_pop_listener()
            self._remove_pop_listener = None
        if self._remove_reset_listener is not None:
            self._remove_reset_listener()
            self._remove_reset_listener = None

    # -------------------------------
    # Internal
    # -------------------------------
    def _read_location(self) -> Location:
        return location_from_platform(
            self._platform.location, self._platform.state, self.basename
        )

    def _transition(
        self, action: NavigationAction, path, state: Any
    ) -> Optional["asyncio.Task[bool]"]:
        href, state = encode_target(
            path, state, self.basename, current_pathname=self.location.pathname
        )
        key = create_key(self.key_length)
        prospective = create_location(href, state, key, self.basename)

        def proceed():
            envelope = encode_state(key, state)
            if action is NavigationAction.PUSH:
                self._platform.push_state(envelope, href)
            else:
                self._platform.replace_state(envelope, href)
            self._notify(self._read_location(), action)
            if self.force_refresh:
                self._platform.reload()

        return self._gate.guard(prospective, action, proceed)

    def _handle_pop(self) -> None:
        location = self._read_location()

        def proceed():
            self._notify(location, NavigationAction.POP)

        # the platform has already moved; a denial only keeps it from the app
        self._gate.guard(location, NavigationAction.POP, proceed)

    def _notify(self, location: Location, action: NavigationAction) -> None:
        self._listeners.broadcast(location, action)
        self.action = action
        self.location = location
        logger.debug("%s %s (key=%s)", action, location.path, location.key)
        record_transition(action, location)


def create_history(
    platform: Platform, options: Optional[HistoryOptions] = None, **overrides
) -> History:
    opts = options or HistoryOptions()
    if overrides:
        opts = opts.merged(**overrides)
    return History(
        platform,
        basename=opts.basename,
        force_refresh=opts.force_refresh,
        key_length=opts.key_length,
        get_user_confirmation=opts.get_user_confirmation,
    )
