from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from navhistory.core.history import History
from .broadcast import InMemoryBroadcast
from .remote import RemotePlatform


@dataclass
class ServerState:
    broadcast: InMemoryBroadcast = field(default_factory=InMemoryBroadcast)
    platform: Optional[RemotePlatform] = None
    history: Optional[History] = None
