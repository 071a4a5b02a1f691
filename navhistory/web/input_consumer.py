from __future__ import annotations

import json
import logging
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


class InputConsumer:
    """Forward decoded client frames from the input channel to a handler.

    A malformed frame or a failing handler is logged and skipped; the
    consumer keeps running for the lifetime of the server.
    """

    def __init__(
        self,
        *,
        broadcast,
        input_channel: str,
        handle_message: Callable[[dict], Awaitable[None]],
    ) -> None:
        self._broadcast = broadcast
        self._input_channel = input_channel
        self._handle_message = handle_message

    async def run(self) -> None:
        async with self._broadcast.subscribe(self._input_channel) as subscriber:
            async for event in subscriber:
                try:
                    msg = json.loads(event.message)
                except ValueError:
                    logger.warning("dropping malformed client frame: %.80r", event.message)
                    continue
                if not isinstance(msg, dict):
                    logger.warning("dropping non-object client frame: %.80r", event.message)
                    continue
                try:
                    await self._handle_message(msg)
                except Exception:
                    logger.exception("history bridge failed to handle %r", msg.get("t"))
