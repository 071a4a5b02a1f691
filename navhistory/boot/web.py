import logging

from navhistory.config import HistoryOptions


def run_web(
    *,
    host="127.0.0.1",
    port=8000,
    options: HistoryOptions = None,
    reload=False,
    log_level="info",
    **uvicorn_kwargs,
):
    """Serve a browser-driven history with uvicorn.

    Options default to ``HistoryOptions.from_env()`` (``NAVHISTORY_*``
    variables and a local ``.env`` file).
    """
    import uvicorn
    from navhistory.web.server import create_fastapi_app

    logging.basicConfig(
        level=log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    app = create_fastapi_app(options or HistoryOptions.from_env())
    uvicorn.run(app, host=host, port=port, reload=reload, log_level=log_level, **uvicorn_kwargs)
