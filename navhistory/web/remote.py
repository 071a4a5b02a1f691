from __future__ import annotations

import asyncio
import itertools
import json
import logging
from typing import Any, Callable, Dict, List

from navhistory.errors import InvalidArgument
from navhistory.platform.base import PlatformURL, PopListener, resolve_url
from .broadcast import InMemoryBroadcast
from .ws_endpoint import ChannelName

logger = logging.getLogger(__name__)


class RemotePlatform:
    """Server-side mirror of a browser tab's session history.

    The browser stays the source of truth. Reads are answered from the mirror,
    writes update the mirror and are forwarded to the page as commands on the
    ``nav`` channel; the page reports back on the ``input`` channel:

    - ``hello``: a page (re)connected with its ``pathname``/``search``/
      ``hash``/``state``/``length``; the mirror is replaced, then reset
      listeners fire
    - ``pop``: a ``popstate`` happened; the mirror is updated, then pop
      listeners fire
    - ``sync``: the stack ``length`` after a push/replace
    - ``confirm_result``: ``{"id": ..., "ok": bool}`` answer to a ``confirm``

    Confirmations must be awaited on the event loop the server runs on.
    """

    def __init__(self, broadcast: InMemoryBroadcast, *, initial_url: str = "/"):
        self._broadcast = broadcast
        self._url = PlatformURL.parse(initial_url)
        self._state: Any = None
        self._length: int = 1
        self._pop_listeners: List[PopListener] = []
        self._reset_listeners: List[Callable[[], None]] = []
        self._confirmations: Dict[int, asyncio.Future] = {}
        self._ids = itertools.count(1)
        self.connected: bool = False

    # ---------------- mirror ----------------
    @property
    def location(self) -> PlatformURL:
        return self._url

    @property
    def state(self) -> Any:
        return self._state

    @property
    def length(self) -> int:
        return self._length

    def push_state(self, state: Any, url: str) -> None:
        cloned = _clone(state)
        target = resolve_url(self._url, url)
        self._url, self._state = target, cloned
        # forward entries are unknown here; the page corrects it with ``sync``
        self._length += 1
        self._send({"type": "push", "url": target.href, "state": cloned})

    def replace_state(self, state: Any, url: str) -> None:
        cloned = _clone(state)
        target = resolve_url(self._url, url)
        self._url, self._state = target, cloned
        self._send({"type": "replace", "url": target.href, "state": cloned})

    def go(self, n: int) -> None:
        self._send({"type": "go", "n": int(n)})

    def reload(self) -> None:
        self._send({"type": "reload"})

    def confirm(self, message: str):
        return self._ask(message)

    def add_pop_listener(self, fn: PopListener):
        return _register(self._pop_listeners, fn)

    def add_reset_listener(self, fn: Callable[[], None]):
        """Call ``fn`` after a (re)connecting page replaced the mirror."""
        return _register(self._reset_listeners, fn)

    # ---------------- inbound ----------------
    async def handle_message(self, msg: dict) -> None:
        t = msg.get("t")

        if t == "hello":
            self.connected = True
            self._apply(msg)
            # a fresh page cannot answer prompts issued to the previous one
            self._cancel_confirmations()
            for fn in list(self._reset_listeners):
                fn()
            return

        if t == "pop":
            self._apply(msg)
            for fn in list(self._pop_listeners):
                fn()
            return

        if t == "sync":
            self._length = int(msg.get("length", self._length))
            return

        if t == "confirm_result":
            fut = self._confirmations.get(msg.get("id"))
            if fut is not None and not fut.done():
                fut.set_result(msg.get("ok") is True)
            return

        logger.warning("unknown history bridge message %r", t)

    # ---------------- internal ----------------
    def _apply(self, msg: dict) -> None:
        url = PlatformURL(
            pathname=msg.get("pathname") or "/",
            search=msg.get("search") or "",
            hash=msg.get("hash") or "",
        )
        length = int(msg.get("length", self._length))
        self._url, self._state, self._length = url, msg.get("state"), length

    async def _ask(self, message: str) -> bool:
        if self._broadcast.subscribers(ChannelName.NAV) == 0:
            logger.warning("no page connected to confirm %r; denying", message)
            return False
        request_id = next(self._ids)
        fut = asyncio.get_running_loop().create_future()
        self._confirmations[request_id] = fut
        try:
            self._send({"type": "confirm", "id": request_id, "message": message})
            return await fut
        finally:
            self._confirmations.pop(request_id, None)

    def _cancel_confirmations(self) -> None:
        for fut in self._confirmations.values():
            if not fut.done():
                fut.set_result(False)

    def _send(self, command: dict) -> None:
        if self._broadcast.publish_nowait(ChannelName.NAV, command) == 0:
            logger.debug("no page connected; %s not delivered", command["type"])


def _register(listeners: list, fn) -> Callable[[], None]:
    listeners.append(fn)

    def remove():
        try:
            listeners.remove(fn)
        except ValueError:
            pass

    return remove


def _clone(state: Any) -> Any:
    # what the page will hold after structured clone over JSON
    try:
        return json.loads(json.dumps(state))
    except (TypeError, ValueError) as exc:
        raise InvalidArgument(f"history state must be JSON-serializable: {exc}") from None
