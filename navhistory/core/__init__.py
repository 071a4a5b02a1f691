# navhistory/core/__init__.py
from .location import (
    Location,
    NavigationAction,
    Owned,
    Foreign,
    decode_state,
    encode_state,
    encode_target,
    parse_path,
    create_path,
    create_href,
    create_key,
    create_location,
    locations_are_equal,
)
from .listeners import ListenerRegistry
from .gate import NavigationGate
from .history import History, create_history

__all__ = [
    "Location",
    "NavigationAction",
    "Owned",
    "Foreign",
    "decode_state",
    "encode_state",
    "encode_target",
    "parse_path",
    "create_path",
    "create_href",
    "create_key",
    "create_location",
    "locations_are_equal",
    "ListenerRegistry",
    "NavigationGate",
    "History",
    "create_history",
]
