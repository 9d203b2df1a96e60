"""Method dispatch table middleware."""

from __future__ import annotations

from typing import Any, Mapping

from rpcstack.engine.types import (
    EndCallback,
    JsonRpcRequest,
    Middleware,
    NextCallback,
    PendingJsonRpcResponse,
)


def create_scaffold_middleware(handlers: Mapping[str, Middleware | Any]) -> Middleware:
    """
    Build a middleware that serves methods from a table keyed by method name.

    A callable entry is delegated to as a middleware; any other entry is set as
    the result. Methods missing from the table are passed on with ``next``.
    """
    table = dict(handlers)

    def scaffold_middleware(
        request: JsonRpcRequest,
        response: PendingJsonRpcResponse,
        next_: NextCallback,
        end: EndCallback,
    ) -> Any:
        if request["method"] not in table:
            return next_()

        handler = table[request["method"]]
        if callable(handler):
            return handler(request, response, next_, end)

        response["result"] = handler
        return end()

    return scaffold_middleware
