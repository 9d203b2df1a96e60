"""Join several middleware into one."""

from __future__ import annotations

from typing import Iterable

from rpcstack.engine.engine import JsonRpcEngine
from rpcstack.engine.types import Middleware


def merge_middleware(middleware: Iterable[Middleware]) -> Middleware:
    """Run ``middleware`` as one step, keeping their ordering and return handlers."""
    engine = JsonRpcEngine(list(middleware))
    return engine.as_middleware()
