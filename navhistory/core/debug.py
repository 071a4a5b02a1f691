"""Debug helpers for inspecting navigation transitions.

The controller records every settled transition here when tracing is
enabled. Records are plain dicts so they can be dumped as JSON by the web
bridge or printed to the terminal with :func:`print_last_transitions`.
"""

import time
from typing import Any, Dict, List, Optional

# ANSI constants (single source for this module)
RESET = "\x1b[0m"
BOLD = "\x1b[1m"
DIM = "\x1b[2m"
FG_GRAY = "\x1b[90m"
FG_YELLOW = "\x1b[33m"
FG_MAGENTA = "\x1b[35m"
FG_CYAN = "\x1b[36m"
FG_GREEN = "\x1b[32m"
FG_RED = "\x1b[31m"

_ACTION_COLORS = {"PUSH": FG_GREEN, "REPLACE": FG_YELLOW, "POP": FG_MAGENTA}

_TRACE_ENABLED: bool = False

# Keep a log of recent transitions
_TRACE_LOG: List[Dict[str, Any]] = []
_TRACE_LOG_LIMIT = 50


def record_transition(
    action: str, location: Any, outcome: str = "commit", reason: Optional[str] = None
) -> None:
    if not _TRACE_ENABLED:
        return
    entry = {
        "id": f"nav-{int(time.time() * 1000)}-{len(_TRACE_LOG)}",
        "ts": time.time(),
        "action": str(action),
        "path": getattr(location, "path", None),
        "key": getattr(location, "key", None),
        "outcome": outcome,
        "reason": reason,
    }
    _TRACE_LOG.append(entry)
    if len(_TRACE_LOG) > _TRACE_LOG_LIMIT:
        del _TRACE_LOG[:-_TRACE_LOG_LIMIT]


def get_transitions() -> List[Dict[str, Any]]:
    return list(_TRACE_LOG)


def format_transition(entry: Dict[str, Any]) -> str:
    action = entry.get("action", "?")
    color = _ACTION_COLORS.get(action, FG_CYAN)
    outcome = entry.get("outcome", "?")
    outcome_col = FG_GRAY if outcome == "commit" else FG_RED
    key = entry.get("key")
    key_part = f" {FG_GRAY}key={RESET}{FG_YELLOW}{key!r}{RESET}" if key else ""
    reason = entry.get("reason")
    reason_part = f" {DIM}({reason}){RESET}" if reason else ""
    return (
        f"{FG_GRAY}-{RESET} {color}{action:<7}{RESET} {entry.get('path')}"
        f"{key_part} {outcome_col}{outcome}{RESET}{reason_part}"
    )


def print_last_transitions(limit: int = 10) -> None:
    if not _TRACE_LOG:
        print(f"{FG_GRAY}[debug]{RESET} no navigation trace available yet.")
        return
    print(f"\n{BOLD}{FG_CYAN}=== Navigation Trace ==={RESET}")
    for entry in _TRACE_LOG[-limit:]:
        print(format_transition(entry))
    print(f"{BOLD}{FG_CYAN}========================{RESET}\n")


def enable_tracing() -> None:
    global _TRACE_ENABLED
    _TRACE_ENABLED = True


def disable_tracing() -> None:
    global _TRACE_ENABLED
    _TRACE_ENABLED = False


def is_tracing_enabled() -> bool:
    return _TRACE_ENABLED


def clear_traces() -> None:
    del _TRACE_LOG[:]
