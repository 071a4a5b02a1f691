from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import asdict
from typing import Optional

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.responses import HTMLResponse, JSONResponse

from navhistory.config import HistoryOptions
from navhistory.core import debug
from navhistory.core.history import create_history
from navhistory.errors import InvalidArgument
from .input_consumer import InputConsumer
from .remote import RemotePlatform
from .state import ServerState
from .templates import render_page
from .ws_endpoint import ChannelName, register_ws_routes

logger = logging.getLogger(__name__)

API_PREFIX = "/__history__"
WS_PATH = "/ws"


def snapshot(state: ServerState) -> dict:
    history = state.history
    return {
        "action": str(history.action),
        "location": asdict(history.location),
        "length": history.length,
        "href": history.create_href(history.location),
        "blocked": history.blocked,
        "connected": state.platform.connected,
    }


def create_fastapi_app(options: Optional[HistoryOptions] = None) -> FastAPI:
    """Create the FastAPI app serving one remotely-driven history.

    The page served for every other path runs a small client that mirrors
    ``window.history`` over ``/ws``. ``app.state.server_state.history`` is
    the :class:`~navhistory.core.history.History` bound to it.
    """
    options = options or HistoryOptions()
    app = FastAPI()
    state = ServerState()
    state.platform = RemotePlatform(state.broadcast)
    state.history = create_history(state.platform, options)
    app.state.server_state = state

    # ---------- lifespan (startup/shutdown) ----------
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        def _log_navigation(location, action):
            logger.info("%s %s", action, location.path)

        unlisten = state.history.listen(_log_navigation)

        input_consumer = InputConsumer(
            broadcast=state.broadcast,
            input_channel=ChannelName.INPUT,
            handle_message=state.platform.handle_message,
        )
        input_task = asyncio.create_task(input_consumer.run())

        try:
            yield
        finally:
            unlisten()
            input_task.cancel()

    app.router.lifespan_context = lifespan

    register_ws_routes(
        app,
        broadcast=state.broadcast,
        channels_to_forward=[ChannelName.NAV],
        input_channel=ChannelName.INPUT,
        path=WS_PATH,
    )
    page = render_page(ws_path=WS_PATH, title=f"navhistory {options.basename or '/'}")

    @app.get("/favicon.ico")
    async def favicon():
        return Response(status_code=204, media_type="image/x-icon")

    @app.get(API_PREFIX)
    async def current(request: Request):
        return JSONResponse(snapshot(request.app.state.server_state))

    @app.get(f"{API_PREFIX}/trace")
    async def trace():
        return JSONResponse(
            {
                "enabled": debug.is_tracing_enabled(),
                "transitions": debug.get_transitions(),
            }
        )

    @app.post(f"{API_PREFIX}/{{action}}")
    async def navigate(action: str, request: Request):
        state: ServerState = request.app.state.server_state
        try:
            payload = await request.json()
        except ValueError:
            payload = None
        if not isinstance(payload, dict):
            raise HTTPException(status_code=422, detail="expected a JSON object")

        if action in ("push", "replace"):
            method = getattr(state.history, action)
            try:
                pending = method(payload.get("path"), payload.get("state"))
            except InvalidArgument as exc:
                raise HTTPException(status_code=422, detail=str(exc))
            if pending is not None:
                return JSONResponse({"pending": True, **snapshot(state)}, status_code=202)
            return JSONResponse({"pending": False, **snapshot(state)})

        if action == "go":
            try:
                n = int(payload.get("n", 0))
            except (TypeError, ValueError):
                raise HTTPException(status_code=422, detail="n must be an integer")
            state.history.go(n)
            return JSONResponse({"pending": True, **snapshot(state)}, status_code=202)

        raise HTTPException(status_code=404, detail=f"unknown action {action!r}")

    @app.get("/{full_path:path}")
    async def index(_request: Request):
        return HTMLResponse(page)

    return app
