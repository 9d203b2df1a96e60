"""Middleware that gives each request a process-unique id while it is in flight."""

from __future__ import annotations

from rpcstack.engine.types import (
    EndCallback,
    JsonRpcRequest,
    Middleware,
    NextCallback,
    PendingJsonRpcResponse,
)
from rpcstack.utils.ids import get_unique_id

_ABSENT = object()


def create_id_remap_middleware() -> Middleware:
    """Swap in a unique id on the way down and restore the caller's id on the way up."""

    def id_remap_middleware(
        request: JsonRpcRequest,
        response: PendingJsonRpcResponse,
        next_: NextCallback,
        _end: EndCallback,
    ) -> None:
        original_id = request.get("id", _ABSENT)
        new_id = get_unique_id()
        request["id"] = new_id
        response["id"] = new_id

        def restore_id() -> None:
            if original_id is _ABSENT:
                request.pop("id", None)
                response["id"] = None
                return
            request["id"] = original_id
            response["id"] = original_id

        next_(restore_id)

    return id_remap_middleware
