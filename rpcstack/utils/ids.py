"""Process-wide unique JSON-RPC request ids."""

from __future__ import annotations

import secrets
import threading

MAX_ID = 4294967295

_lock = threading.Lock()
_counter = secrets.randbelow(MAX_ID)


def get_unique_id() -> int:
    """Return the next id from a counter that starts at a random offset."""
    global _counter
    with _lock:
        _counter = (_counter + 1) % MAX_ID
        return _counter
