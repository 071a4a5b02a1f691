import asyncio
import inspect
import logging
import warnings
from typing import Any, Awaitable, Callable, Optional, Set, Union

from navhistory.errors import HistoryError, InvalidArgument
from .debug import record_transition
from .location import Location, NavigationAction

logger = logging.getLogger(__name__)

Blocker = Union[str, Callable[[Location, NavigationAction], Any]]
Confirm = Callable[[str], Union[bool, Awaitable[bool]]]


class NavigationGate:
    """Single-slot block plus the confirmation round-trip.

    ``confirm(message)`` may answer synchronously (a ``bool``) or
    asynchronously (an awaitable of ``bool``). Only a strict ``True`` lets
    the navigation through; anything else abandons it without side effects.
    """

    def __init__(self, confirm: Confirm):
        self._confirm = confirm
        self._block: Optional[Blocker] = None
        self._pending: Set[asyncio.Task] = set()

    @property
    def blocked(self) -> bool:
        return self._block is not None

    @property
    def pending(self) -> int:
        """Number of confirmations still waiting for an answer"""
        return len(self._pending)

    def set_block(self, blocker: Blocker):
        if not (isinstance(blocker, str) or callable(blocker)):
            raise InvalidArgument(
                f"block expects a message string or a callable, got {type(blocker).__name__}"
            )
        if self._block is not None:
            warnings.warn(
                "A history supports only one block at a time; the previous one was replaced",
                stacklevel=3,
            )
        self._block = blocker

        def clear_block():
            self._block = None

        return clear_block

    def guard(
        self,
        location: Location,
        action: NavigationAction,
        proceed: Callable[[], None],
    ) -> Optional["asyncio.Task[bool]"]:
        """Run ``proceed`` if the navigation is allowed.

        Returns ``None`` when the outcome was settled inline, or the task that
        settles it when the confirmation answers asynchronously. The task
        resolves to ``True`` when ``proceed`` ran.
        """
        blocker = self._block
        if blocker is None:
            proceed()
            return None

        if isinstance(blocker, str):
            message = blocker
        else:
            message = blocker(location, action)
            if not isinstance(message, str):
                if message is False:
                    logger.debug("%s %s blocked by predicate", action, location.path)
                    record_transition(action, location, "denied", "predicate")
                else:
                    proceed()
                return None

        try:
            answer = self._confirm(message)
        except Exception:
            logger.exception("confirmation for %s %s failed", action, location.path)
            record_transition(action, location, "denied", "confirmation error")
            return None

        if inspect.isawaitable(answer):
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                if inspect.iscoroutine(answer):
                    answer.close()
                raise HistoryError(
                    "an asynchronous confirmation needs a running event loop"
                ) from None
            task = loop.create_task(self._settle(answer, location, action, proceed))
            self._pending.add(task)
            task.add_done_callback(self._finished)
            return task

        self._resolve(answer, location, action, proceed)
        return None

    async def _settle(
        self,
        answer: Awaitable[bool],
        location: Location,
        action: NavigationAction,
        proceed: Callable[[], None],
    ) -> bool:
        try:
            result = await answer
        except Exception:
            logger.warning(
                "confirmation for %s %s raised; abandoning",
                action,
                location.path,
                exc_info=True,
            )
            record_transition(action, location, "denied", "confirmation error")
            return False
        return self._resolve(result, location, action, proceed)

    def _finished(self, task: "asyncio.Task[bool]") -> None:
        self._pending.discard(task)
        # nobody awaits the task of a back/forward navigation
        if not task.cancelled() and task.exception() is not None:
            logger.error(
                "navigation failed after confirmation", exc_info=task.exception()
            )

    def _resolve(self, result, location, action, proceed) -> bool:
        if result is not True:
            logger.debug("%s %s denied (%r)", action, location.path, result)
            record_transition(action, location, "denied", repr(result))
            return False
        proceed()
        return True
