# navhistory/web/__init__.py
from .broadcast import InMemoryBroadcast
from .remote import RemotePlatform
from .server import create_fastapi_app
from .ws_endpoint import ChannelName, register_ws_routes

__all__ = [
    "InMemoryBroadcast",
    "RemotePlatform",
    "create_fastapi_app",
    "ChannelName",
    "register_ws_routes",
]
