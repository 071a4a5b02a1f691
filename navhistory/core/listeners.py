from typing import Callable, List

from navhistory.errors import InvalidArgument
from .location import Location, NavigationAction

Listener = Callable[[Location, NavigationAction], None]


class _Registration:
    __slots__ = ("fn", "active")

    def __init__(self, fn: Listener):
        self.fn = fn
        self.active = True


class ListenerRegistry:
    """Ordered subscribers to navigation events.

    Unlike an input bus, a failing listener is not isolated: the exception
    propagates to whoever triggered the navigation and the remaining
    listeners are skipped for that broadcast.
    """

    def __init__(self):
        self._subs: List[_Registration] = []

    def __len__(self) -> int:
        return len(self._subs)

    def subscribe(self, fn: Listener):
        if not callable(fn):
            raise InvalidArgument(
                f"listener must be callable, got {type(fn).__name__}"
            )
        reg = _Registration(fn)
        self._subs.append(reg)

        def unsubscribe():
            reg.active = False
            try:
                self._subs.remove(reg)
            except ValueError:
                pass

        return unsubscribe

    def broadcast(self, location: Location, action: NavigationAction) -> None:
        if not self._subs:
            return
        # snapshot; registrations disposed mid-broadcast are skipped
        for reg in list(self._subs):
            if reg.active:
                reg.fn(location, action)

    def clear(self) -> None:
        for reg in self._subs:
            reg.active = False
        self._subs.clear()
