import copy
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Optional, Union

from .base import PlatformURL, PopListener, resolve_url

logger = logging.getLogger(__name__)


@dataclass
class _Entry:
    url: PlatformURL
    state: Any = None


class MemoryPlatform:
    """In-process session history that behaves like a browser tab.

    Usage:
        platform = MemoryPlatform("/start")
        platform.push_state({"foo": "bar"}, "/next")
        platform.go(-1)   # fires pop listeners, like ``popstate``

    - ``push_state`` drops every entry after the current one.
    - ``go(n)`` outside the stack is a no-op; ``go(0)`` reloads.
    - states are deep-copied on write, as structured clone does.
    """

    def __init__(
        self,
        initial_url: str = "/",
        initial_state: Any = None,
        *,
        confirm: Optional[Callable[[str], Union[bool, Awaitable[bool]]]] = None,
        confirm_answer: bool = True,
    ):
        self._entries: List[_Entry] = [
            _Entry(PlatformURL.parse(initial_url), copy.deepcopy(initial_state))
        ]
        self._index: int = 0
        self._pop_listeners: List[PopListener] = []
        self._confirm = confirm
        self.confirm_answer = confirm_answer
        self.prompts: List[str] = []
        self.reloads: int = 0

    # ---------------- current entry ----------------
    @property
    def location(self) -> PlatformURL:
        return self._entries[self._index].url

    @property
    def state(self) -> Any:
        return self._entries[self._index].state

    @property
    def length(self) -> int:
        return len(self._entries)

    @property
    def index(self) -> int:
        return self._index

    def entries(self) -> List[str]:
        return [e.url.href for e in self._entries]

    # ---------------- mutation ----------------
    def push_state(self, state: Any, url: str) -> None:
        target = resolve_url(self.location, url)
        del self._entries[self._index + 1 :]
        self._entries.append(_Entry(target, copy.deepcopy(state)))
        self._index += 1

    def replace_state(self, state: Any, url: str) -> None:
        target = resolve_url(self.location, url)
        self._entries[self._index] = _Entry(target, copy.deepcopy(state))

    def go(self, n: int) -> None:
        if n == 0:
            self.reload()
            return
        nxt = self._index + n
        if nxt < 0 or nxt >= len(self._entries):
            logger.debug("go(%d) ignored: outside of %d entries", n, len(self._entries))
            return
        self._index = nxt
        self._fire_pop()

    def reload(self) -> None:
        self.reloads += 1

    def confirm(self, message: str) -> Union[bool, Awaitable[bool]]:
        self.prompts.append(message)
        if self._confirm is not None:
            return self._confirm(message)
        return self.confirm_answer

    # ---------------- notification ----------------
    def add_pop_listener(self, fn: PopListener):
        self._pop_listeners.append(fn)

        def remove():
            try:
                self._pop_listeners.remove(fn)
            except ValueError:
                pass

        return remove

    def _fire_pop(self) -> None:
        for fn in list(self._pop_listeners):
            fn()
